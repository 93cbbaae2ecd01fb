"""
Conversion context for the Solidity to Clarity converter.

This module provides a context class that holds all state needed while one
contract is lowered, separating state management from the lowering logic.
A context never outlives the conversion of its contract.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

from ..diagnostics import TranspilerDiagnostics
from ..parser.ast_nodes import FunctionDefinition, TypeName
from ..type_system import TypeRegistry
from ..type_system.mappings import to_clarity_name
from .clarity_ast import KeyField

# Appended to a local binding whose name is taken by a top-level definition
BINDING_SUFFIX = '-arg'


@dataclass
class ConversionContext:
    """
    Holds all state needed during conversion of a single contract.
    """

    # Declarations of the contract being converted
    registry: TypeRegistry = field(default_factory=TypeRegistry)

    # Flattened key fields per mapping (by source name)
    key_fields: Dict[str, Tuple[KeyField, ...]] = field(default_factory=dict)

    # Clarity names of every top-level definition, getters included
    reserved_names: Set[str] = field(default_factory=set)

    # Function context
    current_function: Optional[str] = None
    current_parameters: Dict[str, TypeName] = field(default_factory=dict)
    current_return_type: Optional[str] = None
    # Source parameter name -> Clarity argument name
    parameter_names: Dict[str, str] = field(default_factory=dict)

    # Diagnostics collector
    _diagnostics: Optional[TranspilerDiagnostics] = None

    @property
    def contract_name(self) -> str:
        return self.registry.contract_name

    @property
    def diagnostics(self) -> TranspilerDiagnostics:
        """Get the diagnostics collector, creating one if needed."""
        if self._diagnostics is None:
            self._diagnostics = TranspilerDiagnostics()
        return self._diagnostics

    def reset_for_function(
        self,
        func: Optional[FunctionDefinition] = None,
        return_type: Optional[str] = None,
    ) -> None:
        """Reset state for a new function (or for top-level expressions)."""
        self.current_function = func.name if func else None
        self.current_parameters = {p.name: p.type_name for p in func.parameters} if func else {}
        self.current_return_type = return_type
        self.parameter_names = {}

    def is_parameter(self, name: str) -> bool:
        return name in self.current_parameters

    def parameter_name(self, name: str) -> str:
        """Get the Clarity argument name bound to a source parameter."""
        return self.parameter_names.get(name) or to_clarity_name(name)

    def free_binding(self, name: str, taken: Set[str] = frozenset()) -> Optional[str]:
        """
        Pick a local binding name that shadows no top-level definition.

        Clarity rejects a binding that reuses the name of a data variable,
        constant, map or function, so a clashing name gets BINDING_SUFFIX.

        Args:
            name: The preferred Clarity name
            taken: Names already bound in the same scope

        Returns:
            The name to bind, or None if the suffixed name clashes as well
        """
        for candidate in (name, name + BINDING_SUFFIX):
            if candidate not in self.reserved_names and candidate not in taken:
                return candidate
        return None
