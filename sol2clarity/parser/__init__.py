"""
Parser module for the Solidity to Clarity transpiler.

This module provides the grammar-driven parser, the AST builder and the
AST node definitions.
"""

from .ast_nodes import (
    # Base
    ASTNode,
    # Top-level
    SourceUnit,
    ContractDefinition,
    # Declarations
    StateVariableDeclaration,
    FunctionDefinition,
    EventDefinition,
    Parameter,
    EventParameter,
    # Types
    TypeName,
    ElementaryTypeName,
    Mapping,
    # Expressions
    Expression,
    Literal,
    MemberAccess,
    IndexAccess,
    BinaryOperation,
    # Statements
    Statement,
    Assignment,
    ReturnStatement,
    EmitStatement,
    ExpressionStatement,
)
from .builder import ASTBuilder, build_source_unit
from .parser import Parser, parse

__all__ = [
    # Base
    'ASTNode',
    # Top-level
    'SourceUnit',
    'ContractDefinition',
    # Declarations
    'StateVariableDeclaration',
    'FunctionDefinition',
    'EventDefinition',
    'Parameter',
    'EventParameter',
    # Types
    'TypeName',
    'ElementaryTypeName',
    'Mapping',
    # Expressions
    'Expression',
    'Literal',
    'MemberAccess',
    'IndexAccess',
    'BinaryOperation',
    # Statements
    'Statement',
    'Assignment',
    'ReturnStatement',
    'EmitStatement',
    'ExpressionStatement',
    # Parser
    'ASTBuilder',
    'build_source_unit',
    'Parser',
    'parse',
]
