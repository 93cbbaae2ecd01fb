"""
Infers key-field names for flattened mappings.

A nested mapping becomes one Clarity map keyed by a tuple, and the tuple's
fields need names. Names are inferred from the identifiers used to index the
mapping anywhere in the contract:

- balances[owner]                    -> owner
- allowances[owner][spender]         -> {owner, spender}
- approvals[msg.sender][tokenId]     -> {key-1, token-id}

A position indexed by exactly one distinct identifier takes that identifier's
name; any other position falls back to a positional `key-<n>` name.
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..parser.ast_nodes import (
    Assignment,
    BinaryOperation,
    ContractDefinition,
    EmitStatement,
    Expression,
    ExpressionStatement,
    FunctionDefinition,
    IndexAccess,
    Mapping,
    MemberAccess,
    ReturnStatement,
    Statement,
)
from ..type_system.mappings import solidity_type_to_clarity, to_clarity_name
from .clarity_ast import KeyField


class KeyFieldNamer:
    """Names the key fields of every mapping declared by one contract."""

    def __init__(self, mappings: Dict[str, Mapping]):
        """
        Initialize the namer.

        Args:
            mappings: Mapping declarations of the contract, by source name
        """
        self.mappings = mappings
        # mapping name -> per position, identifiers seen in first-seen order
        self._usages: Dict[str, List[Dict[str, None]]] = {
            name: [{} for _ in range(mapping.depth)]
            for name, mapping in mappings.items()
        }
        self.positional: Set[str] = set()

    def scan_contract(self, contract: ContractDefinition) -> None:
        """Record the index expressions used against each mapping."""
        for var in contract.state_variables:
            if var.initial_value is not None:
                self._scan_expression(var.initial_value, set())

        for decl in contract.declarations:
            if isinstance(decl, FunctionDefinition):
                self._scan_function(decl)

    def _scan_function(self, func: FunctionDefinition) -> None:
        shadowed = {p.name for p in func.parameters}
        for stmt in func.body:
            for expr in self._statement_expressions(stmt):
                self._scan_expression(expr, shadowed)

    def _statement_expressions(self, stmt: Statement) -> Iterator[Expression]:
        if isinstance(stmt, Assignment):
            yield stmt.target
            yield stmt.value
        elif isinstance(stmt, ReturnStatement):
            if stmt.expression is not None:
                yield stmt.expression
        elif isinstance(stmt, EmitStatement):
            yield from stmt.arguments
        elif isinstance(stmt, ExpressionStatement):
            yield stmt.expression

    def _scan_expression(self, root: Expression, shadowed: Set[str]) -> None:
        # Explicit stack; operator chains can be long
        stack = [root]
        while stack:
            expr = stack.pop()
            if isinstance(expr, BinaryOperation):
                stack.append(expr.right)
                stack.append(expr.left)
            elif isinstance(expr, IndexAccess):
                self._record(expr, shadowed)
                stack.extend(reversed(expr.indices))

    def _record(self, access: IndexAccess, shadowed: Set[str]) -> None:
        base = access.base
        if not base.is_identifier or base.path[0] in shadowed:
            return
        positions = self._usages.get(base.path[0])
        if positions is None:
            return
        for position, index in zip(positions, access.indices):
            if isinstance(index, MemberAccess) and index.is_identifier:
                position.setdefault(index.path[0], None)

    # =========================================================================
    # NAMING
    # =========================================================================

    def key_fields(self, mapping_name: str) -> Tuple[KeyField, ...]:
        """Get the flattened key fields of a mapping, outermost key first."""
        mapping = self.mappings[mapping_name]
        names = [
            self._field_name(identifiers, position)
            for position, identifiers in enumerate(self._usages[mapping_name], start=1)
        ]
        if len(set(names)) != len(names):
            names = [f'key-{position}' for position in range(1, len(names) + 1)]

        if any(name.startswith('key-') for name in names):
            self.positional.add(mapping_name)

        return tuple(
            KeyField(name, solidity_type_to_clarity(key_type.name))
            for name, key_type in zip(names, mapping.key_types)
        )

    def _field_name(self, identifiers: Dict[str, None], position: int) -> str:
        name = self._single(identifiers)
        if name is None:
            return f'key-{position}'
        return to_clarity_name(name)

    @staticmethod
    def _single(identifiers: Dict[str, None]) -> Optional[str]:
        if len(identifiers) == 1:
            return next(iter(identifiers))
        return None
