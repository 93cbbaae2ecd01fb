"""
Type conversion utilities for the converter.

This module provides the TypeConverter class that handles Solidity to Clarity
type conversions during lowering, including default values and literals
whose spelling depends on the expected type.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ConversionContext

from .base import BaseConverter
from .clarity_ast import Atom
from ..errors import UnsupportedConstructError
from ..parser.ast_nodes import Literal, Mapping, TypeName
from ..type_system.mappings import (
    STRING_MAX_LENGTH,
    get_default_value,
    is_signed,
    solidity_type_to_clarity,
)

# Clarity integers are 128 bits wide
UINT_MAX = 2 ** 128 - 1
INT_MAX = 2 ** 127 - 1

CLARITY_ESCAPES = {'"': '\\"', '\\': '\\\\', '\n': '\\n', '\t': '\\t', '\r': '\\r'}


class TypeConverter(BaseConverter):
    """
    Handles Solidity to Clarity type conversions.

    This class provides context-aware type conversion that:
    - Converts elementary Solidity types to Clarity scalar types
    - Rejects mapping types where only scalars are allowed
    - Provides zero values for data variables
    - Spells literals for the type they are used as
    """

    def __init__(self, ctx: 'ConversionContext'):
        super().__init__(ctx)

    # =========================================================================
    # MAIN TYPE CONVERSION
    # =========================================================================

    def to_clarity(self, type_name: TypeName, usage: str = 'value', line: Optional[int] = None) -> str:
        """Convert a scalar Solidity type to a Clarity type.

        Args:
            type_name: The TypeName AST node to convert
            usage: What the type is used for, for error messages
            line: Source line, for error messages

        Returns:
            The Clarity type string
        """
        if isinstance(type_name, Mapping):
            raise self.unsupported(f'mapping {usage}', 'mappings can only be state variables', line)
        try:
            return solidity_type_to_clarity(type_name.name)
        except UnsupportedConstructError as exc:
            raise self.unsupported(exc.construct, exc.detail, line) from None

    def default_value(self, clarity_type: str) -> Atom:
        """Get the zero value of a Clarity type as an Atom."""
        return Atom(get_default_value(clarity_type))

    # =========================================================================
    # LITERALS
    # =========================================================================

    def convert_literal(self, literal: Literal, hint: Optional[str] = None) -> Atom:
        """Convert a literal, using the expected Clarity type to pick its spelling.

        Number literals are unsigned (u1) unless the expected type is int.
        """
        if literal.kind == 'bool':
            return Atom(literal.value)

        if literal.kind == 'number':
            value = int(literal.value)
            if is_signed(hint):
                if value > INT_MAX:
                    raise self.unsupported('integer literal', f'{value} exceeds int range')
                return Atom(str(value))
            if value > UINT_MAX:
                raise self.unsupported('integer literal', f'{value} exceeds uint range')
            return Atom(f'u{value}')

        if literal.kind == 'string':
            if not literal.value.isascii():
                raise self.unsupported('string literal', 'only ASCII strings are supported')
            if len(literal.value) > STRING_MAX_LENGTH:
                self._ctx.diagnostics.warn_string_too_long(
                    len(literal.value), STRING_MAX_LENGTH, self._ctx.contract_name
                )
            return Atom(self._quote_string(literal.value))

        raise self.unsupported('literal', f'unknown literal kind "{literal.kind}"')

    def _quote_string(self, value: str) -> str:
        """Spell a decoded string with the escapes Clarity accepts."""
        chars = []
        for char in value:
            if char in CLARITY_ESCAPES:
                chars.append(CLARITY_ESCAPES[char])
            elif char.isprintable():
                chars.append(char)
            else:
                raise self.unsupported('string literal', f'character {char!r} has no Clarity escape')
        return '"' + ''.join(chars) + '"'
