"""
Error types raised by the sol2clarity pipeline.

Each pipeline stage raises its own error kind so that callers can tell a
malformed input apart from an input that is valid Solidity but has no
Clarity lowering:

- SoliditySyntaxError: the parser rejected the source text
- StructuralError: the AST builder found a parse tree of unexpected shape
- UnsupportedConstructError: the converter has no lowering for a construct
- OutputError: a generated file could not be written
"""

from typing import Optional, Sequence, Tuple


class TranspilerError(Exception):
    """Base class for all sol2clarity errors."""


class SoliditySyntaxError(TranspilerError):
    """The source text does not match the grammar."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        expected: Sequence[str] = (),
        context: str = '',
    ):
        self.line = line
        self.column = column
        self.expected: Tuple[str, ...] = tuple(sorted(expected))
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is not None and self.line > 0:
            message = f'line {self.line}, column {self.column}: {message}'
        if self.context:
            message = f'{message}\n{self.context.rstrip()}'
        return message


class StructuralError(TranspilerError):
    """The parse tree has a shape the AST builder cannot reconcile."""

    def __init__(self, message: str, rule: str = '', line: Optional[int] = None):
        self.rule = rule
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.rule:
            message = f'{message} (in {self.rule})'
        if self.line:
            message = f'line {self.line}: {message}'
        return message


class UnsupportedConstructError(TranspilerError):
    """A syntactically valid construct has no Clarity lowering."""

    def __init__(
        self,
        construct: str,
        detail: str = '',
        contract: str = '',
        line: Optional[int] = None,
    ):
        self.construct = construct
        self.detail = detail
        self.contract = contract
        self.line = line
        message = f'Unsupported construct: {construct}'
        if detail:
            message = f'{message} ({detail})'
        super().__init__(message)

    def with_contract(self, contract: str) -> 'UnsupportedConstructError':
        """Return a copy of this error attributed to a contract."""
        return UnsupportedConstructError(self.construct, self.detail, contract, self.line)

    def __str__(self) -> str:
        message = super().__str__()
        location = self.contract
        if self.line:
            location = f'{location}:{self.line}' if location else f'line {self.line}'
        if location:
            return f'{location}: {message}'
        return message


class OutputError(TranspilerError):
    """A generated file could not be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f'Failed to write {path}: {reason}')
