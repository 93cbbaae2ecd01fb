"""
Expression lowering for Solidity to Clarity conversion.

This module handles the conversion of Solidity expression AST nodes into
Clarity expression nodes: literals, identifiers, caller-context members,
mapping reads and binary operations in prefix form.
"""

from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ConversionContext

from .base import BaseConverter
from .clarity_ast import (
    Apply,
    Atom,
    ClarityExpression,
    DefaultTo,
    MapGet,
    TupleLiteral,
    UnwrapPanic,
    VarGet,
)
from .type_converter import TypeConverter
from ..errors import UnsupportedConstructError
from ..parser.ast_nodes import (
    BinaryOperation,
    ElementaryTypeName,
    Expression,
    IndexAccess,
    Literal,
    MemberAccess,
    TypeName,
)
from ..type_system.mappings import (
    MEMBER_ACCESS_MAP,
    NEGATED_OPERATORS,
    OPERATOR_MAP,
    STRING_MAX_LENGTH,
    has_zero_literal,
)

COMPARISON_OPERATORS = frozenset({'==', '!=', '<', '>', '<=', '>='})
LOGICAL_OPERATORS = frozenset({'&&', '||'})

# Clarity types of the caller-context members
MEMBER_ACCESS_TYPES = {
    ('msg', 'sender'): 'principal',
    ('tx', 'origin'): 'principal',
    ('block', 'number'): 'uint',
}


class ExpressionConverter(BaseConverter):
    """
    Lowers Solidity expression AST nodes to Clarity expressions.

    This class handles all expression types including:
    - Literals (spelled for the type they are used as)
    - Identifiers (parameters, data variables, constants)
    - Member access (caller context, dotted names)
    - Index access (mapping reads with a flattened key)
    - Binary operations (left to right, prefix form)
    """

    def __init__(self, ctx: 'ConversionContext', type_converter: TypeConverter):
        """
        Initialize the expression converter.

        Args:
            ctx: The conversion context
            type_converter: The type converter for literals and defaults
        """
        super().__init__(ctx)
        self._type_converter = type_converter

    # =========================================================================
    # MAIN DISPATCH
    # =========================================================================

    def convert(self, expr: Expression, hint: Optional[str] = None) -> ClarityExpression:
        """Lower an expression.

        Args:
            expr: The expression AST node
            hint: The Clarity type the value is used as, if known

        Returns:
            The Clarity expression node
        """
        if isinstance(expr, Literal):
            return self._type_converter.convert_literal(expr, hint)
        elif isinstance(expr, MemberAccess):
            return self.convert_member_access(expr)
        elif isinstance(expr, IndexAccess):
            return self.convert_index_access(expr)
        elif isinstance(expr, BinaryOperation):
            return self.convert_binary_operation(expr, hint)

        raise self.unsupported('expression', type(expr).__name__)

    # =========================================================================
    # IDENTIFIERS AND MEMBERS
    # =========================================================================

    def convert_member_access(self, access: MemberAccess) -> ClarityExpression:
        if not access.is_identifier:
            keyword = MEMBER_ACCESS_MAP.get(access.path)
            if keyword is not None:
                return Atom(keyword)
            return Atom('-'.join(self.clarity_name(part) for part in access.path))

        name = access.path[0]
        if self._ctx.is_parameter(name):
            return Atom(self._ctx.parameter_name(name))

        registry = self._ctx.registry
        if registry.is_data_var(name):
            return VarGet(self.clarity_name(name))
        if registry.is_constant(name):
            return Atom(self.clarity_name(name))
        if registry.is_mapping(name):
            raise self.unsupported('mapping read', f'"{name}" must be indexed')

        # Names outside the contract's declarations pass through cased
        return Atom(self.clarity_name(name))

    # =========================================================================
    # MAPPING ACCESS
    # =========================================================================

    def convert_index_access(self, access: IndexAccess) -> ClarityExpression:
        """Lower a mapping read; missing entries read as the value type's zero."""
        map_name = self._get_mapping_name(access)
        if map_name is None:
            raise self.unsupported('index access', f'"{access.base.name}" is not a mapping')

        value_type = self.mapping_value_type(map_name)
        lookup = MapGet(self.clarity_name(map_name), self.convert_key(map_name, access.indices))
        if has_zero_literal(value_type):
            return DefaultTo(self._type_converter.default_value(value_type), lookup)
        return UnwrapPanic(lookup)

    def convert_key(self, map_name: str, indices: Tuple[Expression, ...]) -> ClarityExpression:
        """Build a map key from index expressions, outermost first."""
        fields = self._ctx.key_fields[map_name]
        if len(indices) != len(fields):
            raise self.unsupported(
                'partial mapping access',
                f'"{map_name}" has {len(fields)} key(s), got {len(indices)} index(es)',
            )

        values = [self.convert(index, field.clarity_type) for index, field in zip(indices, fields)]
        if len(fields) == 1:
            return values[0]
        return TupleLiteral(tuple((field.name, value) for field, value in zip(fields, values)))

    def mapping_value_type(self, map_name: str) -> str:
        mapping = self._ctx.registry.get_mapping(map_name)
        return self._type_converter.to_clarity(mapping.terminal_value_type)

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def convert_binary_operation(self, op: BinaryOperation, hint: Optional[str] = None) -> ClarityExpression:
        if op.operator not in OPERATOR_MAP and op.operator not in NEGATED_OPERATORS:
            raise self.unsupported('operator', f'"{op.operator}"')

        if op.operator in LOGICAL_OPERATORS:
            operand_hint = 'bool'
        elif op.operator in COMPARISON_OPERATORS:
            operand_hint = self.infer_type(op.left) or self.infer_type(op.right)
        else:
            operand_hint = hint or self.infer_type(op.left) or self.infer_type(op.right)

        left = self.convert(op.left, operand_hint)
        right = self.convert(op.right, operand_hint)

        if op.operator in NEGATED_OPERATORS:
            function = OPERATOR_MAP[NEGATED_OPERATORS[op.operator]]
            return Apply('not', (Apply(function, (left, right)),))

        return Apply(OPERATOR_MAP[op.operator], (left, right))

    # =========================================================================
    # TYPE INFERENCE
    # =========================================================================

    def infer_type(self, expr: Expression) -> Optional[str]:
        """Infer the Clarity type of an expression, or None if unknown."""
        if isinstance(expr, Literal):
            if expr.kind == 'bool':
                return 'bool'
            if expr.kind == 'string':
                return f'(string-ascii {STRING_MAX_LENGTH})'
            return None

        if isinstance(expr, MemberAccess):
            if not expr.is_identifier:
                return MEMBER_ACCESS_TYPES.get(expr.path)
            name = expr.path[0]
            type_name = self._ctx.current_parameters.get(name)
            if type_name is None:
                type_name = self._ctx.registry.get_state_type(name)
            if isinstance(type_name, ElementaryTypeName):
                return self.safe_clarity_type(type_name)
            return None

        if isinstance(expr, IndexAccess):
            map_name = self._get_mapping_name(expr)
            if map_name is None:
                return None
            return self.safe_clarity_type(self._ctx.registry.get_mapping(map_name).terminal_value_type)

        if isinstance(expr, BinaryOperation):
            if expr.operator in COMPARISON_OPERATORS or expr.operator in LOGICAL_OPERATORS:
                return 'bool'
            return self.infer_type(expr.left) or self.infer_type(expr.right)

        return None

    def safe_clarity_type(self, type_name: TypeName) -> Optional[str]:
        # Unknown types are reported where they are declared
        try:
            return self._type_converter.to_clarity(type_name)
        except UnsupportedConstructError:
            return None
