"""
Base generator class with shared utilities.

This module provides the BaseGenerator class that contains common utilities
used across all specialized generator classes in the code generation pipeline.
"""

from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import GenerationContext

from ..converter.clarity_ast import KeyField
from ..type_system.mappings import to_clarity_name

COMMENT_PREFIX = ';;'


class BaseGenerator:
    """
    Base class for all code generators.

    Provides shared utilities for:
    - Indentation management
    - Documentation comments
    - Key type formatting
    """

    def __init__(self, ctx: 'GenerationContext'):
        """
        Initialize the base generator.

        Args:
            ctx: The code generation context containing all state
        """
        self._ctx = ctx

    # =========================================================================
    # INDENTATION
    # =========================================================================

    def indent(self) -> str:
        """Return the current indentation string."""
        return self._ctx.indent()

    @property
    def indent_level(self) -> int:
        """Get the current indentation level."""
        return self._ctx.indent_level

    @indent_level.setter
    def indent_level(self, value: int):
        """Set the current indentation level."""
        self._ctx.indent_level = value

    # =========================================================================
    # COMMENTS
    # =========================================================================

    def comment(self, text: str) -> str:
        return f'{self.indent()}{COMMENT_PREFIX} {text}'

    def doc(self, tag: str, text: str) -> str:
        """Format a documentation tag line, e.g. ;; @desc Transfer."""
        return self.comment(f'@{tag} {text}')

    def humanize(self, identifier: str) -> str:
        """Turn an identifier into a sentence-case description (balanceOf -> Balance of)."""
        words = to_clarity_name(identifier).split('-')
        text = ' '.join(w for w in words if w)
        return text[:1].upper() + text[1:]

    # =========================================================================
    # TYPES
    # =========================================================================

    def key_type(self, key_fields: Sequence[KeyField]) -> str:
        """Format a map key type: the scalar type, or a tuple type for several fields."""
        if len(key_fields) == 1:
            return key_fields[0].clarity_type
        fields = ', '.join(f'{f.name}: {f.clarity_type}' for f in key_fields)
        return f'{{{fields}}}'
