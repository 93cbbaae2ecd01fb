"""
Type mappings and substitution tables for Solidity to Clarity.

This module contains the process-wide, read-only lookup tables used by the
converter: elementary type names, default values, caller-context member
accesses and binary operators, together with the single casing transform
applied to every identifier that reaches generated Clarity code.
"""

import re
from types import MappingProxyType
from typing import Mapping, Optional

from ..errors import UnsupportedConstructError


# =============================================================================
# TYPE MAPPING CONSTANTS
# =============================================================================

# Maximum length of string-ascii values produced from Solidity `string`
STRING_MAX_LENGTH = 256

_INTEGER_WIDTHS = tuple(range(8, 257, 8))


def _build_type_map() -> Mapping[str, str]:
    type_map = {
        # Address -> principal
        'address': 'principal',
        # Boolean
        'bool': 'bool',
        # String
        'string': f'(string-ascii {STRING_MAX_LENGTH})',
        # Unsized integers
        'uint': 'uint',
        'int': 'int',
    }
    # Sized integers collapse to Clarity's 128-bit uint/int
    for width in _INTEGER_WIDTHS:
        type_map[f'uint{width}'] = 'uint'
        type_map[f'int{width}'] = 'int'
    # Fixed-size byte arrays -> buffers
    for size in range(1, 33):
        type_map[f'bytes{size}'] = f'(buff {size})'
    return MappingProxyType(type_map)


# Base Solidity to Clarity type mapping
SOLIDITY_TO_CLARITY_MAP = _build_type_map()

# Default values for Clarity scalar types
DEFAULT_VALUES = MappingProxyType({
    'uint': 'u0',
    'int': '0',
    'bool': 'false',
    f'(string-ascii {STRING_MAX_LENGTH})': '""',
    # Clarity has no zero principal; the deployer is the closest stand-in
    'principal': 'tx-sender',
})

# Caller-context member accesses with a direct Clarity keyword
MEMBER_ACCESS_MAP = MappingProxyType({
    ('msg', 'sender'): 'tx-sender',
    ('tx', 'origin'): 'tx-sender',
    ('block', 'number'): 'block-height',
})

# Infix Solidity operators -> prefix Clarity functions
OPERATOR_MAP = MappingProxyType({
    '+': '+',
    '-': '-',
    '*': '*',
    '/': '/',
    '%': 'mod',
    '==': 'is-eq',
    '<': '<',
    '>': '>',
    '<=': '<=',
    '>=': '>=',
    '&&': 'and',
    '||': 'or',
})

# Operators lowered as a negated OPERATOR_MAP entry
NEGATED_OPERATORS = MappingProxyType({
    '!=': '==',
})


# =============================================================================
# TYPE CONVERSION FUNCTIONS
# =============================================================================

def solidity_type_to_clarity(type_name: str) -> str:
    """
    Convert a Solidity elementary type name to its Clarity equivalent.

    Args:
        type_name: The Solidity type name (e.g. 'uint256', 'address')

    Returns:
        The Clarity type string

    Raises:
        UnsupportedConstructError: if the type has no Clarity counterpart
    """
    clarity_type = SOLIDITY_TO_CLARITY_MAP.get(type_name)
    if clarity_type is None:
        raise UnsupportedConstructError('type', f'no Clarity type for "{type_name}"')
    return clarity_type


def get_default_value(clarity_type: str) -> str:
    """
    Get the zero value for a Clarity scalar type.

    Args:
        clarity_type: The Clarity type string

    Returns:
        A Clarity literal holding the type's zero value
    """
    if clarity_type in DEFAULT_VALUES:
        return DEFAULT_VALUES[clarity_type]

    # (buff N) -> N zero bytes
    match = re.fullmatch(r'\(buff (\d+)\)', clarity_type)
    if match:
        return '0x' + '00' * int(match.group(1))

    raise UnsupportedConstructError('type', f'no default value for "{clarity_type}"')


def has_zero_literal(clarity_type: str) -> bool:
    """Check whether a type has a zero value that reads like Solidity's default."""
    return clarity_type != 'principal'


def is_signed(clarity_type: Optional[str]) -> bool:
    """Check whether number literals of this type are written without the u prefix."""
    return clarity_type == 'int'


# =============================================================================
# IDENTIFIER CASING
# =============================================================================

_ACRONYM_BOUNDARY = re.compile(r'([A-Z]+)([A-Z][a-z])')
_CAMEL_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')


def to_clarity_name(identifier: str) -> str:
    """
    Convert a Solidity identifier to Clarity's kebab-case naming.

    Handles:
    - camelCase: totalSupply -> total-supply
    - PascalCase: TokenA -> token-a
    - acronyms: ERC20Token -> erc20-token
    - snake_case: max_supply -> max-supply
    - SCREAMING_CASE: MAX_SUPPLY -> max-supply
    """
    stripped = identifier.strip('_') or identifier
    name = _ACRONYM_BOUNDARY.sub(r'\1-\2', stripped)
    name = _CAMEL_BOUNDARY.sub(r'\1-\2', name)
    name = re.sub(r'[_-]+', '-', name)
    return name.lower()
