"""
Types module for the Solidity to Clarity transpiler.

This module provides the per-contract type registry and the read-only
substitution tables used during conversion.
"""

from .registry import TypeRegistry
from .mappings import (
    solidity_type_to_clarity,
    get_default_value,
    has_zero_literal,
    is_signed,
    to_clarity_name,
    SOLIDITY_TO_CLARITY_MAP,
    DEFAULT_VALUES,
    MEMBER_ACCESS_MAP,
    OPERATOR_MAP,
    NEGATED_OPERATORS,
    STRING_MAX_LENGTH,
)

__all__ = [
    'TypeRegistry',
    'solidity_type_to_clarity',
    'get_default_value',
    'has_zero_literal',
    'is_signed',
    'to_clarity_name',
    'SOLIDITY_TO_CLARITY_MAP',
    'DEFAULT_VALUES',
    'MEMBER_ACCESS_MAP',
    'OPERATOR_MAP',
    'NEGATED_OPERATORS',
    'STRING_MAX_LENGTH',
]
