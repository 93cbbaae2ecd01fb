"""
Base converter class with shared utilities.

This module provides the BaseConverter class that contains common utilities
used across all specialized converter classes in the lowering pipeline.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ConversionContext

from ..errors import UnsupportedConstructError
from ..parser.ast_nodes import Expression, IndexAccess, MemberAccess
from ..type_system.mappings import to_clarity_name


class BaseConverter:
    """
    Base class for all converters.

    Provides shared utilities for:
    - Identifier casing
    - Unsupported-construct reporting
    - Expression shape analysis
    """

    def __init__(self, ctx: 'ConversionContext'):
        """
        Initialize the base converter.

        Args:
            ctx: The conversion context containing all state
        """
        self._ctx = ctx

    # =========================================================================
    # NAMES
    # =========================================================================

    def clarity_name(self, identifier: str) -> str:
        """Apply the canonical casing transform to an identifier."""
        return to_clarity_name(identifier)

    # =========================================================================
    # ERRORS
    # =========================================================================

    def unsupported(
        self,
        construct: str,
        detail: str = '',
        line: Optional[int] = None,
    ) -> UnsupportedConstructError:
        """Build an UnsupportedConstructError attributed to the current contract."""
        if self._ctx.current_function and not detail:
            detail = f'in function {self._ctx.current_function}'
        elif self._ctx.current_function:
            detail = f'{detail}, in function {self._ctx.current_function}'
        return UnsupportedConstructError(construct, detail, self._ctx.contract_name, line)

    # =========================================================================
    # EXPRESSION ANALYSIS
    # =========================================================================

    def _get_identifier(self, expr: Expression) -> Optional[str]:
        """Return the name of a plain identifier expression, or None."""
        if isinstance(expr, MemberAccess) and expr.is_identifier:
            return expr.path[0]
        return None

    def _get_mapping_name(self, access: IndexAccess) -> Optional[str]:
        """Return the mapping name an index access reads from, if it names one."""
        name = self._get_identifier(access.base)
        if name is not None and self._ctx.registry.is_mapping(name) and not self._ctx.is_parameter(name):
            return name
        return None
