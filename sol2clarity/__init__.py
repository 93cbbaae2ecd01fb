"""
Solidity to Clarity Transpiler

This package provides a transpiler that converts Solidity smart contracts
to Clarity contracts for the Stacks blockchain.

Module Structure:
- parser/: Grammar, parser, AST builder and AST nodes
- type_system/: Type registry and mappings (TypeRegistry, substitution tables)
- converter/: Lowering to the Clarity AST (convert_contract)
- codegen/: Clarity source rendering (ClarityCodeGenerator)
- sol2clar.py: Main transpiler and command line interface

Usage:
    from sol2clarity import SolidityToClarityTranspiler

    outputs = SolidityToClarityTranspiler().transpile_source(source)
    # {'token.clar': ';; Contract: Token\n...'}
"""

__version__ = '0.1.0'

# Re-export main classes for convenience
from .errors import (
    OutputError,
    SoliditySyntaxError,
    StructuralError,
    TranspilerError,
    UnsupportedConstructError,
)
from .parser import Parser, SourceUnit, parse
from .type_system import TypeRegistry
from .converter import ClarityContract, convert_contract
from .codegen import ClarityCodeGenerator
from .diagnostics import TranspilerDiagnostics
from .sol2clar import SolidityToClarityTranspiler, main

__all__ = [
    '__version__',
    'ClarityCodeGenerator',
    'ClarityContract',
    'OutputError',
    'Parser',
    'SolidityToClarityTranspiler',
    'SoliditySyntaxError',
    'SourceUnit',
    'StructuralError',
    'TranspilerDiagnostics',
    'TranspilerError',
    'TypeRegistry',
    'UnsupportedConstructError',
    'convert_contract',
    'main',
    'parse',
]
