"""
Converter package: lowers the Solidity AST to the Clarity AST.

Structure:
- clarity_ast.py: Clarity definition and expression nodes
- context.py: Per-contract conversion state
- type_converter.py: Types, default values and literals
- key_fields.py: Key-field naming for flattened mappings
- expression.py / statement.py / function.py: Body lowering
- contract.py: Contract lowering and getter synthesis
"""

from .clarity_ast import (
    Apply,
    Atom,
    Begin,
    ClarityContract,
    ClarityExpression,
    Constant,
    DataVar,
    DefaultTo,
    Definition,
    DeployBlock,
    EventDoc,
    EventField,
    FunctionDef,
    FunctionKind,
    FunctionParameter,
    Getter,
    GetterKind,
    KeyField,
    Map,
    MapGet,
    MapSet,
    Ok,
    Print,
    TupleLiteral,
    UnwrapPanic,
    VarGet,
    VarSet,
)
from .context import ConversionContext
from .contract import ContractConverter, convert_contract
from .key_fields import KeyFieldNamer

__all__ = [
    'Apply',
    'Atom',
    'Begin',
    'ClarityContract',
    'ClarityExpression',
    'Constant',
    'ContractConverter',
    'ConversionContext',
    'DataVar',
    'DefaultTo',
    'Definition',
    'DeployBlock',
    'EventDoc',
    'EventField',
    'FunctionDef',
    'FunctionKind',
    'FunctionParameter',
    'Getter',
    'GetterKind',
    'KeyField',
    'KeyFieldNamer',
    'Map',
    'MapGet',
    'MapSet',
    'Ok',
    'Print',
    'TupleLiteral',
    'UnwrapPanic',
    'VarGet',
    'VarSet',
    'convert_contract',
]
