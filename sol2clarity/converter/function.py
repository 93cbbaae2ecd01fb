"""
Function lowering for Solidity to Clarity conversion.

This module handles the conversion of function and constructor definitions,
choosing the Clarity definition form from the Solidity visibility and
mutability.
"""

from typing import Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ConversionContext

from .base import BaseConverter
from .clarity_ast import DeployBlock, FunctionDef, FunctionKind, FunctionParameter
from .statement import StatementConverter
from .type_converter import TypeConverter
from ..parser.ast_nodes import FunctionDefinition

# Name of the public function a constructor with parameters becomes
INIT_FUNCTION_NAME = 'init'


class FunctionConverter(BaseConverter):
    """
    Lowers function and constructor definitions.

    Visibility mapping:
    - public/external/unspecified -> define-public (define-read-only if view/pure)
    - private/internal -> define-private
    """

    def __init__(
        self,
        ctx: 'ConversionContext',
        type_converter: TypeConverter,
        stmt_converter: StatementConverter,
    ):
        super().__init__(ctx)
        self._type_converter = type_converter
        self._stmt = stmt_converter

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def convert_function(self, func: FunctionDefinition) -> FunctionDef:
        """Lower a function definition.

        Args:
            func: The function AST node

        Returns:
            The Clarity function definition
        """
        self._ctx.reset_for_function(func)
        try:
            kind = self.function_kind(func)
            if func.mutability == 'payable':
                self._ctx.diagnostics.warn_payable_ignored(func.name, self._ctx.contract_name, func.line)

            parameters = self.convert_parameters(func)
            return_type = None
            if func.return_type is not None:
                return_type = self._type_converter.to_clarity(func.return_type, 'return type', func.line)
            self._ctx.current_return_type = return_type

            return FunctionDef(
                name=self.clarity_name(func.name),
                kind=kind,
                parameters=parameters,
                body=self._stmt.convert_body(func.body),
                return_type=return_type,
                source_name=func.name,
            )
        finally:
            self._ctx.reset_for_function()

    def function_kind(self, func: FunctionDefinition) -> FunctionKind:
        if func.visibility in ('private', 'internal'):
            return FunctionKind.PRIVATE
        if func.mutability in ('view', 'pure'):
            return FunctionKind.READ_ONLY
        return FunctionKind.PUBLIC

    def convert_parameters(self, func: FunctionDefinition) -> Tuple[FunctionParameter, ...]:
        """Lower the parameter list and bind each parameter's Clarity name.

        A parameter whose cased name is taken by a top-level definition
        (commonly `_owner` next to `owner`) is renamed with the binding
        suffix, and every use in the body follows the rename.
        """
        params = []
        cased = set()
        bound = set()
        for param in func.parameters:
            name = self.clarity_name(param.name)
            if name in cased:
                raise self.unsupported('parameter', f'duplicate parameter name "{name}"', func.line)
            cased.add(name)

            binding = self._ctx.free_binding(name, bound)
            if binding is None:
                raise self.unsupported(
                    'parameter',
                    f'"{param.name}" clashes with a definition named "{name}" and its renamed form',
                    func.line,
                )
            bound.add(binding)
            self._ctx.parameter_names[param.name] = binding
            params.append(FunctionParameter(binding, self._type_converter.to_clarity(param.type_name, 'parameter', func.line)))
        return tuple(params)

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    def convert_constructor(self, func: FunctionDefinition) -> Union[DeployBlock, FunctionDef]:
        """Lower a constructor.

        A constructor without parameters runs once at deploy time as top-level
        expressions. One with parameters cannot, and becomes a public init
        function instead.
        """
        if func.parameters:
            self._ctx.diagnostics.warn_constructor_parameters(self._ctx.contract_name, func.line)
            return self.convert_function(FunctionDefinition(
                name=INIT_FUNCTION_NAME,
                parameters=func.parameters,
                visibility='public',
                body=func.body,
                line=func.line,
            ))

        self._ctx.reset_for_function(func)
        self._ctx.current_function = 'constructor'
        try:
            return DeployBlock(self._stmt.convert_for_effect(func.body))
        finally:
            self._ctx.reset_for_function()
