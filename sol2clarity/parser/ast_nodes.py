"""
AST node definitions for Solidity parsing.

This module contains the dataclasses representing nodes in the Abstract
Syntax Tree (AST) produced by the AST builder. Nodes are immutable and
sequences are stored as tuples, so a tree can be shared freely between
pipeline stages once it has been built.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


# =============================================================================
# BASE NODE
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    pass


# =============================================================================
# TYPE NODES
# =============================================================================

@dataclass(frozen=True)
class TypeName(ASTNode):
    """Base class for type names."""

    @property
    def is_mapping(self) -> bool:
        return False


@dataclass(frozen=True)
class ElementaryTypeName(TypeName):
    """Represents an elementary type name (e.g., uint256, address, bool)."""
    name: str


@dataclass(frozen=True)
class Mapping(TypeName):
    """Represents a mapping type; value_type may itself be a Mapping."""
    key_type: ElementaryTypeName
    value_type: TypeName

    @property
    def is_mapping(self) -> bool:
        return True

    @property
    def key_types(self) -> Tuple[ElementaryTypeName, ...]:
        """Key types along the nesting chain, outermost first."""
        keys = []
        current: TypeName = self
        while isinstance(current, Mapping):
            keys.append(current.key_type)
            current = current.value_type
        return tuple(keys)

    @property
    def terminal_value_type(self) -> ElementaryTypeName:
        """The innermost non-mapping value type."""
        current: TypeName = self
        while isinstance(current, Mapping):
            current = current.value_type
        return current

    @property
    def depth(self) -> int:
        return len(self.key_types)


# =============================================================================
# EXPRESSION NODES
# =============================================================================

@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Literal(Expression):
    """Represents a literal value (number, string, bool)."""
    value: str
    kind: str  # 'number', 'string', 'bool'


@dataclass(frozen=True)
class MemberAccess(Expression):
    """Represents an identifier or a dotted chain of identifiers (e.g., msg.sender)."""
    path: Tuple[str, ...]

    @property
    def is_identifier(self) -> bool:
        return len(self.path) == 1

    @property
    def name(self) -> str:
        return '.'.join(self.path)


@dataclass(frozen=True)
class IndexAccess(Expression):
    """Represents index access with one index per mapping dimension (e.g., m[a][b])."""
    base: MemberAccess
    indices: Tuple[Expression, ...]


@dataclass(frozen=True)
class BinaryOperation(Expression):
    """Represents a binary operation (e.g., a + b)."""
    left: Expression
    operator: str
    right: Expression


# =============================================================================
# STATEMENT NODES
# =============================================================================

@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


@dataclass(frozen=True)
class Assignment(Statement):
    """Represents an assignment to a state variable or a mapping entry."""
    target: Union[MemberAccess, IndexAccess]
    value: Expression
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """Represents a return statement."""
    expression: Optional[Expression] = None
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class EmitStatement(Statement):
    """Represents an emit statement for events."""
    event_name: str
    arguments: Tuple[Expression, ...] = ()
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """Represents an expression used as a statement."""
    expression: Expression
    line: Optional[int] = field(default=None, compare=False)


# =============================================================================
# DECLARATION NODES
# =============================================================================

@dataclass(frozen=True)
class Parameter(ASTNode):
    """Represents a function parameter."""
    type_name: TypeName
    name: str


@dataclass(frozen=True)
class EventParameter(ASTNode):
    """Represents an event parameter."""
    type_name: TypeName
    name: str
    is_indexed: bool = False


@dataclass(frozen=True)
class StateVariableDeclaration(ASTNode):
    """Represents a state variable declaration in a contract."""
    name: str
    type_name: TypeName
    visibility: str = 'internal'
    is_constant: bool = False
    initial_value: Optional[Expression] = None
    line: Optional[int] = field(default=None, compare=False)

    @property
    def is_public(self) -> bool:
        return self.visibility == 'public'


@dataclass(frozen=True)
class FunctionDefinition(ASTNode):
    """Represents a function or constructor definition."""
    name: Optional[str]
    parameters: Tuple[Parameter, ...] = ()
    visibility: Optional[str] = None
    mutability: Optional[str] = None  # 'pure', 'view', 'payable'
    return_type: Optional[TypeName] = None
    body: Tuple[Statement, ...] = ()
    is_constructor: bool = False
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class EventDefinition(ASTNode):
    """Represents an event definition."""
    name: str
    parameters: Tuple[EventParameter, ...] = ()
    line: Optional[int] = field(default=None, compare=False)


Declaration = Union[StateVariableDeclaration, FunctionDefinition, EventDefinition]


# =============================================================================
# TOP-LEVEL NODES
# =============================================================================

@dataclass(frozen=True)
class ContractDefinition(ASTNode):
    """Represents a contract; declarations keep their source order."""
    name: str
    declarations: Tuple[Declaration, ...] = ()
    line: Optional[int] = field(default=None, compare=False)

    @property
    def state_variables(self) -> Tuple[StateVariableDeclaration, ...]:
        return tuple(d for d in self.declarations if isinstance(d, StateVariableDeclaration))

    @property
    def functions(self) -> Tuple[FunctionDefinition, ...]:
        return tuple(
            d for d in self.declarations
            if isinstance(d, FunctionDefinition) and not d.is_constructor
        )

    @property
    def events(self) -> Tuple[EventDefinition, ...]:
        return tuple(d for d in self.declarations if isinstance(d, EventDefinition))

    @property
    def constructor(self) -> Optional[FunctionDefinition]:
        for decl in self.declarations:
            if isinstance(decl, FunctionDefinition) and decl.is_constructor:
                return decl
        return None


@dataclass(frozen=True)
class SourceUnit(ASTNode):
    """Root node representing an entire Solidity source file."""
    contracts: Tuple[ContractDefinition, ...] = ()
