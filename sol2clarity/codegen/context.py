"""
Code generation context for the Clarity code generator.

This module provides a context class that holds the state needed while one
contract is rendered, separating state management from the rendering logic.
"""

from dataclasses import dataclass


@dataclass
class GenerationContext:
    """
    Holds all state needed during Clarity code generation.
    """

    # Indentation state
    indent_level: int = 0
    indent_str: str = '  '

    def indent(self) -> str:
        """Return the indentation string for the current level."""
        return self.indent_str * self.indent_level
