"""
Grammar-driven Solidity parser.

The Parser turns Solidity source text into a generic lark parse tree using
the grammar in grammar.lark, then hands the tree to the ASTBuilder to obtain
the typed AST. Syntax errors are reported with the source position and the
tokens that would have been accepted there; there is no error recovery.
"""

import logging
from pathlib import Path
from typing import Iterable, List

from lark import Lark, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from ..errors import SoliditySyntaxError
from .ast_nodes import SourceUnit
from .builder import ASTBuilder


logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name('grammar.lark')
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text(encoding='utf-8')

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser='lalr',
    start='file',
    propagate_positions=True,
    maybe_placeholders=False,
)


def describe_terminal(name: str) -> str:
    """Return a readable form of a grammar terminal name (e.g. SEMICOLON -> ';')."""
    try:
        terminal = _PARSER.get_terminal(name)
    except KeyError:
        return name
    if terminal.pattern.type == 'str':
        return f"'{terminal.pattern.value}'"
    return name


def _expected_terminals(exc: UnexpectedInput) -> List[str]:
    if isinstance(exc, UnexpectedCharacters):
        expected: Iterable[str] = exc.allowed or ()
    else:
        expected = getattr(exc, 'expected', None) or ()
    return sorted(set(expected))


class Parser:
    """
    Parser for Solidity source code.

    Usage:
        tree = Parser(source).parse_tree()   # generic parse tree
        unit = Parser(source).parse()        # typed AST
    """

    def __init__(self, source: str):
        self.source = source

    def parse_tree(self) -> Tree:
        """Parse the source into a lark Tree rooted at 'file'."""
        try:
            return _PARSER.parse(self.source)
        except UnexpectedInput as exc:
            raise self._syntax_error(exc) from None

    def parse(self) -> SourceUnit:
        """Parse the source into a SourceUnit AST."""
        tree = self.parse_tree()
        unit = ASTBuilder().build(tree)
        logger.debug('Parsed %d contract(s): %s', len(unit.contracts),
                     ', '.join(c.name for c in unit.contracts))
        return unit

    def _syntax_error(self, exc: UnexpectedInput) -> SoliditySyntaxError:
        expected = _expected_terminals(exc)
        readable = ', '.join(describe_terminal(name) for name in expected)

        if isinstance(exc, UnexpectedEOF):
            message = 'Unexpected end of input'
            line = column = None
            context = ''
        else:
            if isinstance(exc, UnexpectedToken) and exc.token.type == '$END':
                message = 'Unexpected end of input'
            elif isinstance(exc, UnexpectedToken):
                message = f"Unexpected token '{exc.token}'"
            elif isinstance(exc, UnexpectedCharacters):
                message = f"Unexpected character '{self.source[exc.pos_in_stream]}'"
            else:
                message = 'Invalid syntax'
            line, column = exc.line, exc.column
            context = exc.get_context(self.source)

        if readable:
            message = f'{message}; expected one of: {readable}'
        return SoliditySyntaxError(message, line=line, column=column, expected=expected, context=context)


def parse(source: str) -> SourceUnit:
    """Parse Solidity source text into a SourceUnit AST."""
    return Parser(source).parse()
