"""
Clarity AST node definitions.

This module contains the dataclasses produced by the converter and consumed
by the code generator. They mirror the source AST but hold the lowered
constructs: data variables and maps instead of state variables, synthesized
getters, and prefix-form expressions whose final value is the function's
result.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


# =============================================================================
# EXPRESSIONS
# =============================================================================

@dataclass(frozen=True)
class ClarityExpression:
    """Base class for all Clarity expression nodes."""
    pass


@dataclass(frozen=True)
class Atom(ClarityExpression):
    """A literal, a name or a keyword such as tx-sender."""
    text: str


@dataclass(frozen=True)
class VarGet(ClarityExpression):
    name: str


@dataclass(frozen=True)
class VarSet(ClarityExpression):
    name: str
    value: ClarityExpression


@dataclass(frozen=True)
class MapGet(ClarityExpression):
    """(map-get? name key), an optional value."""
    map_name: str
    key: ClarityExpression


@dataclass(frozen=True)
class MapSet(ClarityExpression):
    map_name: str
    key: ClarityExpression
    value: ClarityExpression


@dataclass(frozen=True)
class DefaultTo(ClarityExpression):
    """Unwraps an optional, falling back to a default value."""
    default: ClarityExpression
    value: ClarityExpression


@dataclass(frozen=True)
class UnwrapPanic(ClarityExpression):
    value: ClarityExpression


@dataclass(frozen=True)
class TupleLiteral(ClarityExpression):
    """A tuple literal; fields keep their declaration order."""
    fields: Tuple[Tuple[str, ClarityExpression], ...]


@dataclass(frozen=True)
class Apply(ClarityExpression):
    """Prefix application of a built-in function, e.g. (+ a b)."""
    function: str
    arguments: Tuple[ClarityExpression, ...]


@dataclass(frozen=True)
class Begin(ClarityExpression):
    """Sequencing; evaluates to the value of the last expression."""
    body: Tuple[ClarityExpression, ...]


@dataclass(frozen=True)
class Print(ClarityExpression):
    payload: ClarityExpression


@dataclass(frozen=True)
class Ok(ClarityExpression):
    value: ClarityExpression


TRUE = Atom('true')


# =============================================================================
# DEFINITIONS
# =============================================================================

@dataclass(frozen=True)
class DataVar:
    """(define-data-var name type initial-value)"""
    name: str
    clarity_type: str
    initial_value: ClarityExpression
    source_name: str
    is_public: bool = False


@dataclass(frozen=True)
class Constant:
    """(define-constant name value)"""
    name: str
    clarity_type: str
    value: ClarityExpression
    source_name: str
    is_public: bool = False


@dataclass(frozen=True)
class KeyField:
    name: str
    clarity_type: str


@dataclass(frozen=True)
class Map:
    """(define-map name key-type value-type); nested mappings share one tuple key."""
    name: str
    key_fields: Tuple[KeyField, ...]
    value_type: str
    source_name: str
    is_public: bool = False

    @property
    def is_tuple_key(self) -> bool:
        return len(self.key_fields) > 1


class GetterKind(Enum):
    DATA_VAR = 'data-var'
    CONSTANT = 'constant'
    MAP = 'map'


@dataclass(frozen=True)
class Getter:
    """Read-only accessor synthesized for a public state variable."""
    name: str
    target: str
    kind: GetterKind
    value_type: str
    source_name: str
    key_fields: Tuple[KeyField, ...] = ()
    # Argument name of a map getter
    key_param: str = ''

    @property
    def arity(self) -> int:
        return 1 if self.kind is GetterKind.MAP else 0


class FunctionKind(Enum):
    PUBLIC = 'define-public'
    PRIVATE = 'define-private'
    READ_ONLY = 'define-read-only'


@dataclass(frozen=True)
class FunctionParameter:
    name: str
    clarity_type: str


@dataclass(frozen=True)
class FunctionDef:
    """A public, private or read-only function whose body yields a response."""
    name: str
    kind: FunctionKind
    parameters: Tuple[FunctionParameter, ...]
    body: ClarityExpression
    return_type: Optional[str]
    source_name: str

    @property
    def response_type(self) -> str:
        return f'(response {self.return_type or "bool"} uint)'


@dataclass(frozen=True)
class DeployBlock:
    """Top-level expressions evaluated once when the contract is deployed."""
    body: Tuple[ClarityExpression, ...]


@dataclass(frozen=True)
class EventField:
    name: str
    clarity_type: str
    is_indexed: bool = False


@dataclass(frozen=True)
class EventDoc:
    """Documentation for an event; Clarity has no event declarations."""
    name: str
    fields: Tuple[EventField, ...]


Definition = Union[DataVar, Constant, Map, Getter, FunctionDef, DeployBlock, EventDoc]


@dataclass(frozen=True)
class ClarityContract:
    """One output unit; definitions keep the source declaration order."""
    name: str
    unit_name: str
    definitions: Tuple[Definition, ...]

    @property
    def file_name(self) -> str:
        return f'{self.unit_name}.clar'

    @property
    def getters(self) -> Tuple[Getter, ...]:
        return tuple(d for d in self.definitions if isinstance(d, Getter))
