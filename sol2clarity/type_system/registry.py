"""
Type registry for the declarations of a single contract.

The TypeRegistry performs a first pass over a contract definition to discover
its state variables, mappings, constants, events and functions before the
converter lowers any function body. One registry is built per contract, so
nothing declared in one contract is visible while converting another.
"""

from typing import Dict, Optional, Set

from ..parser.ast_nodes import (
    ContractDefinition,
    ElementaryTypeName,
    EventDefinition,
    Mapping,
    StateVariableDeclaration,
)


class TypeRegistry:
    """
    Registry of the names declared by one contract.

    Tracks:
    - Data variables (with their Solidity type name)
    - Mappings (with their full nested type)
    - Constants
    - Events (with their parameter lists)
    - Functions, and whether the constructor takes parameters
    - Public state variables (which need getters)
    """

    def __init__(self):
        self.contract_name: str = ''
        self.data_vars: Dict[str, ElementaryTypeName] = {}
        self.mappings: Dict[str, Mapping] = {}
        self.constants: Dict[str, ElementaryTypeName] = {}
        self.events: Dict[str, EventDefinition] = {}
        self.functions: Set[str] = set()
        self.public_state_vars: Set[str] = set()
        self.has_constructor_parameters = False

    @classmethod
    def from_contract(cls, contract: ContractDefinition) -> 'TypeRegistry':
        """Create a registry populated from a contract definition."""
        registry = cls()
        registry.discover_from_contract(contract)
        return registry

    def discover_from_contract(self, contract: ContractDefinition) -> None:
        """Extract declaration information from a contract AST."""
        self.contract_name = contract.name

        for var in contract.state_variables:
            self._register_state_variable(var)

        for event in contract.events:
            self.events[event.name] = event

        for func in contract.functions:
            if func.name:
                self.functions.add(func.name)

        constructor = contract.constructor
        self.has_constructor_parameters = bool(constructor and constructor.parameters)

    def _register_state_variable(self, var: StateVariableDeclaration) -> None:
        if isinstance(var.type_name, Mapping):
            self.mappings[var.name] = var.type_name
        elif var.is_constant:
            self.constants[var.name] = var.type_name
        else:
            self.data_vars[var.name] = var.type_name

        if var.is_public:
            self.public_state_vars.add(var.name)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def is_data_var(self, name: str) -> bool:
        return name in self.data_vars

    def is_mapping(self, name: str) -> bool:
        return name in self.mappings

    def is_constant(self, name: str) -> bool:
        return name in self.constants

    def get_mapping(self, name: str) -> Optional[Mapping]:
        return self.mappings.get(name)

    def get_event(self, name: str) -> Optional[EventDefinition]:
        return self.events.get(name)

    def get_state_type(self, name: str) -> Optional[ElementaryTypeName]:
        """Get the Solidity type of a scalar state variable or constant."""
        return self.data_vars.get(name) or self.constants.get(name)
