"""
Expression rendering for Clarity code generation.

This module renders Clarity expression nodes as single-line s-expressions.
Multi-line layout of function bodies is handled by the function generator.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import GenerationContext

from .base import BaseGenerator
from ..converter.clarity_ast import (
    Apply,
    Atom,
    Begin,
    ClarityExpression,
    DefaultTo,
    MapGet,
    MapSet,
    Ok,
    Print,
    TupleLiteral,
    UnwrapPanic,
    VarGet,
    VarSet,
)


class ExpressionGenerator(BaseGenerator):
    """
    Renders Clarity expression nodes.

    This class handles all expression types including:
    - Atoms (literals, names, keywords)
    - Data variable and map access
    - Tuple literals
    - Built-in applications and sequencing
    - Print and ok wrappers
    """

    def __init__(self, ctx: 'GenerationContext'):
        super().__init__(ctx)

    # =========================================================================
    # MAIN DISPATCH
    # =========================================================================

    def generate(self, expr: ClarityExpression) -> str:
        """Render an expression.

        Args:
            expr: The Clarity expression node

        Returns:
            The Clarity source text
        """
        if isinstance(expr, Atom):
            return expr.text
        elif isinstance(expr, VarGet):
            return f'(var-get {expr.name})'
        elif isinstance(expr, VarSet):
            return f'(var-set {expr.name} {self.generate(expr.value)})'
        elif isinstance(expr, MapGet):
            return f'(map-get? {expr.map_name} {self.generate(expr.key)})'
        elif isinstance(expr, MapSet):
            return f'(map-set {expr.map_name} {self.generate(expr.key)} {self.generate(expr.value)})'
        elif isinstance(expr, DefaultTo):
            return f'(default-to {self.generate(expr.default)} {self.generate(expr.value)})'
        elif isinstance(expr, UnwrapPanic):
            return f'(unwrap-panic {self.generate(expr.value)})'
        elif isinstance(expr, TupleLiteral):
            return self.generate_tuple(expr)
        elif isinstance(expr, Apply):
            return self.generate_apply(expr.function, expr.arguments)
        elif isinstance(expr, Begin):
            return self.generate_apply('begin', expr.body)
        elif isinstance(expr, Print):
            return f'(print {self.generate(expr.payload)})'
        elif isinstance(expr, Ok):
            return f'(ok {self.generate(expr.value)})'

        raise TypeError(f'Cannot render {type(expr).__name__}')

    def generate_tuple(self, expr: TupleLiteral) -> str:
        fields = ', '.join(f'{name}: {self.generate(value)}' for name, value in expr.fields)
        return f'{{{fields}}}'

    def generate_apply(self, function: str, arguments) -> str:
        parts = [function] + [self.generate(arg) for arg in arguments]
        return f'({" ".join(parts)})'
