"""
Code generation module for the Solidity to Clarity transpiler.

This module renders lowered Clarity contracts as Clarity source text.
"""

from .context import GenerationContext
from .base import BaseGenerator
from .expression import ExpressionGenerator
from .definition import DefinitionGenerator
from .function import FunctionGenerator
from .generator import ClarityCodeGenerator

__all__ = [
    'GenerationContext',
    'BaseGenerator',
    'ExpressionGenerator',
    'DefinitionGenerator',
    'FunctionGenerator',
    'ClarityCodeGenerator',
]
