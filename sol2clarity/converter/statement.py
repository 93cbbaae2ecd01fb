"""
Statement lowering for Solidity to Clarity conversion.

This module handles the conversion of function bodies. Each statement is
lowered to one Clarity expression, then a separate result pass rewraps the
final expression so the body evaluates to a response.
"""

from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ConversionContext

from .base import BaseConverter
from .clarity_ast import (
    Atom,
    Begin,
    ClarityExpression,
    MapSet,
    Ok,
    Print,
    TRUE,
    TupleLiteral,
    VarSet,
)
from .expression import ExpressionConverter
from ..parser.ast_nodes import (
    Assignment,
    EmitStatement,
    ExpressionStatement,
    IndexAccess,
    ReturnStatement,
    Statement,
)


class StatementConverter(BaseConverter):
    """
    Lowers Solidity statements to Clarity expressions.

    Handles:
    - Assignments (data variables and mapping entries)
    - Return statements
    - Emit statements (as print of a tuple)
    - Expression statements
    """

    def __init__(self, ctx: 'ConversionContext', expr_converter: ExpressionConverter):
        super().__init__(ctx)
        self._expr = expr_converter

    # =========================================================================
    # BODIES
    # =========================================================================

    def convert_body(self, statements: Tuple[Statement, ...]) -> ClarityExpression:
        """Lower a function body to one expression that yields a response.

        Args:
            statements: The body statements in source order

        Returns:
            A single expression; a begin block when there are several
        """
        for stmt in statements[:-1]:
            if isinstance(stmt, ReturnStatement):
                raise self.unsupported('early return', 'return must be the last statement', stmt.line)

        lowered = [self.convert_statement(stmt) for stmt in statements]
        body = self._wrap_result(lowered, statements[-1] if statements else None)
        if len(body) == 1:
            return body[0]
        return Begin(tuple(body))

    def convert_for_effect(self, statements: Tuple[Statement, ...]) -> Tuple[ClarityExpression, ...]:
        """Lower statements evaluated only for their effects, such as a deploy block."""
        lowered = []
        for stmt in statements:
            if isinstance(stmt, ReturnStatement):
                raise self.unsupported('return', 'constructors cannot return', stmt.line)
            lowered.append(self.convert_statement(stmt))
        return tuple(lowered)

    def _wrap_result(self, lowered: List[ClarityExpression], last: Optional[Statement]) -> List[ClarityExpression]:
        if self._ctx.current_return_type is not None and not isinstance(last, ReturnStatement):
            # The declared return type fixes the response type
            raise self.unsupported(
                'missing return',
                f'a function returning {self._ctx.current_return_type} must end with a return',
                getattr(last, 'line', None),
            )
        if last is None:
            return [Ok(TRUE)]
        if isinstance(last, ReturnStatement):
            # Already a response
            return lowered
        if isinstance(last, EmitStatement):
            return lowered + [Ok(TRUE)]
        return lowered[:-1] + [Ok(lowered[-1])]

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def convert_statement(self, stmt: Statement) -> ClarityExpression:
        if isinstance(stmt, Assignment):
            return self.convert_assignment(stmt)
        elif isinstance(stmt, ReturnStatement):
            return self.convert_return(stmt)
        elif isinstance(stmt, EmitStatement):
            return self.convert_emit(stmt)
        elif isinstance(stmt, ExpressionStatement):
            return self._expr.convert(stmt.expression)

        raise self.unsupported('statement', type(stmt).__name__, getattr(stmt, 'line', None))

    def convert_assignment(self, stmt: Assignment) -> ClarityExpression:
        target = stmt.target

        if isinstance(target, IndexAccess):
            map_name = self._get_mapping_name(target)
            if map_name is None:
                raise self.unsupported('assignment', f'"{target.base.name}" is not a mapping', stmt.line)
            value_type = self._expr.mapping_value_type(map_name)
            return MapSet(
                self.clarity_name(map_name),
                self._expr.convert_key(map_name, target.indices),
                self._expr.convert(stmt.value, value_type),
            )

        if not target.is_identifier:
            raise self.unsupported('assignment', f'cannot assign to "{target.name}"', stmt.line)

        name = target.path[0]
        registry = self._ctx.registry
        if self._ctx.is_parameter(name):
            raise self.unsupported('assignment', f'parameter "{name}" is immutable', stmt.line)
        if registry.is_data_var(name):
            value_type = self._expr.infer_type(target)
            return VarSet(self.clarity_name(name), self._expr.convert(stmt.value, value_type))
        if registry.is_constant(name):
            raise self.unsupported('assignment', f'constant "{name}" cannot be assigned', stmt.line)
        if registry.is_mapping(name):
            raise self.unsupported('assignment', f'mapping "{name}" must be indexed', stmt.line)
        raise self.unsupported('assignment', f'undeclared variable "{name}"', stmt.line)

    def convert_return(self, stmt: ReturnStatement) -> ClarityExpression:
        if stmt.expression is None:
            if self._ctx.current_return_type is not None:
                raise self.unsupported(
                    'missing return',
                    f'a function returning {self._ctx.current_return_type} must return a value',
                    stmt.line,
                )
            return Ok(TRUE)
        return Ok(self._expr.convert(stmt.expression, self._ctx.current_return_type))

    def convert_emit(self, stmt: EmitStatement) -> ClarityExpression:
        """Lower an emit to (print {event: "Name", field: value, ...})."""
        event = self._ctx.registry.get_event(stmt.event_name)
        if event is None:
            raise self.unsupported('emit', f'undeclared event "{stmt.event_name}"', stmt.line)
        if len(event.parameters) != len(stmt.arguments):
            raise self.unsupported(
                'emit',
                f'event "{event.name}" takes {len(event.parameters)} argument(s), '
                f'got {len(stmt.arguments)}',
                stmt.line,
            )

        fields = [('event', Atom(f'"{event.name}"'))]
        for param, arg in zip(event.parameters, stmt.arguments):
            field_name = self.clarity_name(param.name)
            if field_name == 'event':
                raise self.unsupported('emit', f'event parameter "{param.name}" clashes with the event tag', stmt.line)
            field_type = self._expr.safe_clarity_type(param.type_name)
            fields.append((field_name, self._expr.convert(arg, field_type)))
        return Print(TupleLiteral(tuple(fields)))
