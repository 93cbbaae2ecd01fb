"""
Function rendering for Clarity code generation.

This module renders public, private and read-only functions and the
deploy-time block produced from a parameterless constructor.
"""

from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import GenerationContext
    from .expression import ExpressionGenerator

from .base import BaseGenerator
from ..converter.clarity_ast import Begin, ClarityExpression, DeployBlock, FunctionDef


class FunctionGenerator(BaseGenerator):
    """
    Renders Clarity function definitions.

    This class handles:
    - define-public, define-private and define-read-only functions
    - Documentation comments for parameters and responses
    - Multi-line layout of begin blocks
    - Deploy-time begin blocks
    """

    def __init__(self, ctx: 'GenerationContext', expr_generator: 'ExpressionGenerator'):
        """
        Initialize the function generator.

        Args:
            ctx: The code generation context
            expr_generator: The expression generator
        """
        super().__init__(ctx)
        self._expr = expr_generator

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def generate_function(self, func: FunctionDef) -> str:
        """Generate a function definition with its documentation.

        Args:
            func: The Clarity function definition

        Returns:
            Clarity source for the function
        """
        lines = [self.doc('desc', self.humanize(func.source_name))]
        for param in func.parameters:
            lines.append(self.doc('param', f'{param.name}: {param.clarity_type}'))
        lines.append(self.doc('returns', func.response_type))

        signature = ' '.join(
            [func.name] + [f'({p.name} {p.clarity_type})' for p in func.parameters]
        )
        lines.append(f'{self.indent()}({func.kind.value} ({signature})')

        self.indent_level += 1
        body = self.generate_body(func.body)
        self.indent_level -= 1
        body[-1] += ')'
        lines.extend(body)
        return '\n'.join(lines)

    def generate_body(self, expr: ClarityExpression) -> List[str]:
        """Lay out a body expression, one begin element per line."""
        if not isinstance(expr, Begin):
            return [f'{self.indent()}{self._expr.generate(expr)}']

        lines = [f'{self.indent()}(begin']
        self.indent_level += 1
        for item in expr.body:
            lines.extend(self.generate_body(item))
        self.indent_level -= 1
        lines[-1] += ')'
        return lines

    # =========================================================================
    # DEPLOY BLOCK
    # =========================================================================

    def generate_deploy_block(self, block: DeployBlock) -> str:
        """Generate the top-level expressions run once at deployment."""
        lines = [self.doc('desc', 'Deployment-time initialisation from the constructor')]
        if not block.body:
            lines.append(self.comment('(constructor has no statements)'))
            return '\n'.join(lines)
        lines.extend(self.generate_body(Begin(block.body)))
        return '\n'.join(lines)
