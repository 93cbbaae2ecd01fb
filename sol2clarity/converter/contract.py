"""
Contract lowering for Solidity to Clarity conversion.

This module handles the conversion of one Solidity contract definition into
one Clarity contract: state variables become data variables, constants or
maps, public state variables get read-only getters, and functions, the
constructor and events are lowered in declaration order.
"""

import logging
from typing import Dict, List, Optional, Set

from .base import BaseConverter
from .clarity_ast import (
    ClarityContract,
    Constant,
    DataVar,
    Definition,
    EventDoc,
    EventField,
    Getter,
    GetterKind,
    Map,
)
from .context import ConversionContext
from .expression import ExpressionConverter
from .function import INIT_FUNCTION_NAME, FunctionConverter
from .key_fields import KeyFieldNamer
from .statement import StatementConverter
from .type_converter import TypeConverter
from ..diagnostics import TranspilerDiagnostics
from ..errors import UnsupportedConstructError
from ..parser.ast_nodes import (
    ContractDefinition,
    EventDefinition,
    FunctionDefinition,
    Mapping,
    StateVariableDeclaration,
)
from ..type_system import TypeRegistry

logger = logging.getLogger(__name__)

GETTER_PREFIX = 'get-'
# Preferred name of the argument of a map getter
GETTER_KEY_PARAM = 'key'


class ContractConverter(BaseConverter):
    """
    Lowers a Solidity contract definition to a ClarityContract.

    This class handles:
    - Registry and key-field discovery for the contract
    - State variable lowering (data variables, constants, maps)
    - Getter synthesis for public state variables
    - Function, constructor and event lowering
    - Duplicate-name detection after identifier casing
    """

    def __init__(self, diagnostics: Optional[TranspilerDiagnostics] = None):
        super().__init__(ConversionContext(_diagnostics=diagnostics))
        self._type_converter = TypeConverter(self._ctx)
        self._expr = ExpressionConverter(self._ctx, self._type_converter)
        self._stmt = StatementConverter(self._ctx, self._expr)
        self._func = FunctionConverter(self._ctx, self._type_converter, self._stmt)
        # Clarity name -> source description, for duplicate detection
        self._defined: Dict[str, str] = {}

    # =========================================================================
    # MAIN ENTRY POINT
    # =========================================================================

    def convert(self, contract: ContractDefinition) -> ClarityContract:
        """Lower a contract definition.

        Args:
            contract: The contract definition AST node

        Returns:
            The Clarity contract, definitions in source order

        Raises:
            UnsupportedConstructError: attributed to the contract
        """
        try:
            return self._convert(contract)
        except UnsupportedConstructError as exc:
            if exc.contract:
                raise
            raise exc.with_contract(contract.name) from exc

    def _convert(self, contract: ContractDefinition) -> ClarityContract:
        self._setup_contract_context(contract)

        definitions: List[Definition] = []
        has_constructor = False
        for decl in contract.declarations:
            if isinstance(decl, StateVariableDeclaration):
                definitions.extend(self.convert_state_variable(decl))
            elif isinstance(decl, EventDefinition):
                definitions.append(self.convert_event(decl))
            elif isinstance(decl, FunctionDefinition) and decl.is_constructor:
                if has_constructor:
                    raise self.unsupported('constructor', 'more than one constructor', decl.line)
                has_constructor = True
                lowered = self._func.convert_constructor(decl)
                if decl.parameters:
                    self._define(lowered.name, 'constructor', decl.line)
                definitions.append(lowered)
            elif isinstance(decl, FunctionDefinition):
                lowered = self._func.convert_function(decl)
                self._define(lowered.name, f'function "{decl.name}"', decl.line)
                definitions.append(lowered)

        logger.debug('Converted contract %s: %d definition(s)', contract.name, len(definitions))
        return ClarityContract(
            name=contract.name,
            unit_name=self.clarity_name(contract.name),
            definitions=tuple(definitions),
        )

    def _setup_contract_context(self, contract: ContractDefinition) -> None:
        """Discover declarations and key-field names before lowering any body."""
        self._ctx.registry = TypeRegistry.from_contract(contract)
        self._ctx.reset_for_function()
        self._defined = {}
        self._ctx.reserved_names = self._reserved_names(self._ctx.registry)

        namer = KeyFieldNamer(self._ctx.registry.mappings)
        namer.scan_contract(contract)
        self._ctx.key_fields = {}
        for name, mapping in self._ctx.registry.mappings.items():
            try:
                fields = namer.key_fields(name)
            except UnsupportedConstructError as exc:
                raise self.unsupported('mapping key', f'{exc.detail} in "{name}"') from None
            self._ctx.key_fields[name] = fields
            if mapping.depth > 1 and name in namer.positional:
                self._ctx.diagnostics.info_positional_key_fields(
                    name, [f.name for f in fields], contract.name
                )

    def _reserved_names(self, registry: TypeRegistry) -> Set[str]:
        """Collect the Clarity name of every top-level definition the contract will have."""
        names = set()
        state_vars = list(registry.data_vars) + list(registry.mappings) + list(registry.constants)
        for var_name in state_vars:
            names.add(self.clarity_name(var_name))
            if var_name in registry.public_state_vars:
                names.add(GETTER_PREFIX + self.clarity_name(var_name))
        names.update(self.clarity_name(func_name) for func_name in registry.functions)
        if registry.has_constructor_parameters:
            names.add(INIT_FUNCTION_NAME)
        return names

    def _define(self, clarity_name: str, description: str, line: Optional[int] = None) -> None:
        previous = self._defined.get(clarity_name)
        if previous is not None:
            raise self.unsupported(
                'duplicate definition',
                f'{description} and {previous} both become "{clarity_name}"',
                line,
            )
        self._defined[clarity_name] = description

    # =========================================================================
    # STATE VARIABLES
    # =========================================================================

    def convert_state_variable(self, var: StateVariableDeclaration) -> List[Definition]:
        """Lower a state variable, followed by its getter when it is public."""
        name = self.clarity_name(var.name)
        self._define(name, f'state variable "{var.name}"', var.line)

        if isinstance(var.type_name, Mapping):
            definition = self._convert_mapping(var, name)
            key_param = self._ctx.free_binding(GETTER_KEY_PARAM)
            if key_param is None:
                raise self.unsupported(
                    'getter', f'no free argument name for the getter of "{var.name}"', var.line
                )
            getter = Getter(
                name=GETTER_PREFIX + name,
                target=name,
                kind=GetterKind.MAP,
                value_type=definition.value_type,
                source_name=var.name,
                key_fields=definition.key_fields,
                key_param=key_param,
            )
        else:
            clarity_type = self._type_converter.to_clarity(var.type_name, 'state variable', var.line)
            if var.is_constant:
                definition = self._convert_constant(var, name, clarity_type)
                kind = GetterKind.CONSTANT
            else:
                definition = self._convert_data_var(var, name, clarity_type)
                kind = GetterKind.DATA_VAR
            getter = Getter(
                name=GETTER_PREFIX + name,
                target=name,
                kind=kind,
                value_type=clarity_type,
                source_name=var.name,
            )

        if not var.is_public:
            return [definition]
        self._define(getter.name, f'getter for "{var.name}"', var.line)
        return [definition, getter]

    def _convert_mapping(self, var: StateVariableDeclaration, name: str) -> Map:
        if var.initial_value is not None:
            raise self.unsupported('mapping initializer', f'"{var.name}"', var.line)
        return Map(
            name=name,
            key_fields=self._ctx.key_fields[var.name],
            value_type=self._type_converter.to_clarity(var.type_name.terminal_value_type, 'mapping value', var.line),
            source_name=var.name,
            is_public=var.is_public,
        )

    def _convert_constant(self, var: StateVariableDeclaration, name: str, clarity_type: str) -> Constant:
        if var.initial_value is None:
            raise self.unsupported('constant', f'"{var.name}" has no value', var.line)
        return Constant(
            name=name,
            clarity_type=clarity_type,
            value=self._expr.convert(var.initial_value, clarity_type),
            source_name=var.name,
            is_public=var.is_public,
        )

    def _convert_data_var(self, var: StateVariableDeclaration, name: str, clarity_type: str) -> DataVar:
        if var.initial_value is not None:
            initial_value = self._expr.convert(var.initial_value, clarity_type)
        else:
            initial_value = self._type_converter.default_value(clarity_type)
        return DataVar(
            name=name,
            clarity_type=clarity_type,
            initial_value=initial_value,
            source_name=var.name,
            is_public=var.is_public,
        )

    # =========================================================================
    # EVENTS
    # =========================================================================

    def convert_event(self, event: EventDefinition) -> EventDoc:
        fields = tuple(
            EventField(
                name=self.clarity_name(param.name),
                clarity_type=self._type_converter.to_clarity(param.type_name, 'event parameter', event.line),
                is_indexed=param.is_indexed,
            )
            for param in event.parameters
        )
        return EventDoc(name=event.name, fields=fields)


def convert_contract(
    contract: ContractDefinition,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> ClarityContract:
    """Lower one contract definition with a fresh converter."""
    return ContractConverter(diagnostics).convert(contract)
