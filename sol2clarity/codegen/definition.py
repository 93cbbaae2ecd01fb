"""
Definition rendering for Clarity code generation.

This module renders the storage-level definitions of a contract: data
variables, constants, maps, synthesized getters and event documentation.
"""

from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import GenerationContext
    from .expression import ExpressionGenerator

from .base import BaseGenerator
from ..converter.clarity_ast import (
    Atom,
    Constant,
    DataVar,
    EventDoc,
    Getter,
    GetterKind,
    Map,
    MapGet,
    Ok,
    VarGet,
)


class DefinitionGenerator(BaseGenerator):
    """
    Renders storage definitions and their documentation.

    This class handles:
    - Data variables (define-data-var)
    - Constants (define-constant)
    - Maps (define-map), with tuple keys for flattened mappings
    - Read-only getters for public state variables
    - Event documentation comments
    """

    def __init__(self, ctx: 'GenerationContext', expr_generator: 'ExpressionGenerator'):
        """
        Initialize the definition generator.

        Args:
            ctx: The code generation context
            expr_generator: The expression generator for values
        """
        super().__init__(ctx)
        self._expr = expr_generator

    # =========================================================================
    # STORAGE
    # =========================================================================

    def generate_data_var(self, var: DataVar) -> str:
        lines = [self.doc('desc', f'Stores the {var.source_name} value')]
        if var.is_public:
            lines.append(self.doc('access', 'public'))
        value = self._expr.generate(var.initial_value)
        lines.append(f'{self.indent()}(define-data-var {var.name} {var.clarity_type} {value})')
        return '\n'.join(lines)

    def generate_constant(self, const: Constant) -> str:
        lines = [self.doc('desc', f'Constant value for {const.source_name}')]
        if const.is_public:
            lines.append(self.doc('access', 'public'))
        lines.append(f'{self.indent()}(define-constant {const.name} {self._expr.generate(const.value)})')
        return '\n'.join(lines)

    def generate_map(self, map_def: Map) -> str:
        """Generate a map definition.

        A flattened mapping gets one tuple key whose fields follow the
        nesting order of the source mapping.
        """
        lines = [self.doc('desc', f'Map storing {map_def.source_name} values')]
        if map_def.is_tuple_key:
            fields = ', '.join(f.name for f in map_def.key_fields)
            lines.append(self.doc('key', f'{{{fields}}}'))
        key_type = self.key_type(map_def.key_fields)
        lines.append(f'{self.indent()}(define-map {map_def.name} {key_type} {map_def.value_type})')
        return '\n'.join(lines)

    # =========================================================================
    # GETTERS
    # =========================================================================

    def generate_getter(self, getter: Getter) -> str:
        lines: List[str] = []
        if getter.kind is GetterKind.MAP:
            key_type = self.key_type(getter.key_fields)
            lines.append(self.doc('desc', f'Getter for map {getter.source_name}'))
            lines.append(self.doc('param', f'{getter.key_param}: {key_type}'))
            lines.append(self.doc('returns', f'(response (optional {getter.value_type}) uint)'))
            signature = f'({getter.name} ({getter.key_param} {key_type}))'
            body = Ok(MapGet(getter.target, Atom(getter.key_param)))
        else:
            lines.append(self.doc('desc', f'Getter for public variable {getter.source_name}'))
            lines.append(self.doc('returns', f'(response {getter.value_type} uint)'))
            signature = f'({getter.name})'
            if getter.kind is GetterKind.DATA_VAR:
                body = Ok(VarGet(getter.target))
            else:
                body = Ok(Atom(getter.target))

        lines.append(f'{self.indent()}(define-read-only {signature}')
        self.indent_level += 1
        lines.append(f'{self.indent()}{self._expr.generate(body)})')
        self.indent_level -= 1
        return '\n'.join(lines)

    # =========================================================================
    # EVENTS
    # =========================================================================

    def generate_event(self, event: EventDoc) -> str:
        """Generate documentation for an event; Clarity events are print payloads."""
        fields = []
        for f in event.fields:
            prefix = '(indexed) ' if f.is_indexed else ''
            fields.append(f'{prefix}{f.name}: {f.clarity_type}')
        lines = [
            self.doc('desc', f'Event: {event.name}'),
            self.doc('fields', ', '.join(fields) if fields else 'none'),
        ]
        return '\n'.join(lines)
