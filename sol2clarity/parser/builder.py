"""
AST builder for Solidity parse trees.

The ASTBuilder walks the lark parse tree produced by the Parser once and
produces the immutable AST defined in ast_nodes. The grammar already rejects
most malformed input; the builder double-checks the shapes it relies on and
raises StructuralError when a node cannot be reconciled with the grammar.
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from lark import Token, Tree

from ..errors import SoliditySyntaxError, StructuralError
from ..type_system.mappings import SOLIDITY_TO_CLARITY_MAP
from .ast_nodes import (
    # Top-level
    SourceUnit,
    ContractDefinition,
    Declaration,
    # Declarations
    StateVariableDeclaration,
    FunctionDefinition,
    EventDefinition,
    Parameter,
    EventParameter,
    # Types
    TypeName,
    ElementaryTypeName,
    Mapping,
    # Expressions
    Expression,
    Literal,
    MemberAccess,
    IndexAccess,
    BinaryOperation,
    # Statements
    Statement,
    Assignment,
    ReturnStatement,
    EmitStatement,
    ExpressionStatement,
)


logger = logging.getLogger(__name__)

Node = Union[Tree, Token]


def _line(node: Node) -> Optional[int]:
    if isinstance(node, Token):
        return node.line
    if not node.meta.empty:
        return node.meta.line
    return None


def _is_rule(node: Node, name: str) -> bool:
    return isinstance(node, Tree) and node.data == name


class ASTBuilder:
    """
    Builds a SourceUnit from a lark parse tree rooted at 'file'.

    Each _build_* method handles one grammar rule and checks the arity of the
    node it receives before restructuring it.
    """

    # =========================================================================
    # SHAPE CHECKS
    # =========================================================================

    def _expect_rule(self, node: Node, name: str) -> Tree:
        if not _is_rule(node, name):
            found = node.data if isinstance(node, Tree) else f'token {node.type}'
            raise StructuralError(f'Expected {name} but found {found}', rule=name, line=_line(node))
        return node

    def _expect_token(self, node: Node, token_type: str, rule: str) -> Token:
        if not isinstance(node, Token) or node.type != token_type:
            raise StructuralError(f'Expected {token_type} token', rule=rule, line=_line(node))
        return node

    def _expect_arity(self, tree: Tree, minimum: int, maximum: Optional[int] = None) -> List[Node]:
        children = list(tree.children)
        maximum = minimum if maximum is None else maximum
        if not minimum <= len(children) <= maximum:
            raise StructuralError(
                f'Expected {minimum}..{maximum} children, found {len(children)}',
                rule=str(tree.data),
                line=_line(tree),
            )
        return children

    # =========================================================================
    # TOP-LEVEL
    # =========================================================================

    def build(self, tree: Tree) -> SourceUnit:
        """Build the SourceUnit for a whole file."""
        self._expect_rule(tree, 'file')
        contracts = []
        for child in tree.children:
            if _is_rule(child, 'pragma_directive') or _is_rule(child, 'import_directive'):
                logger.debug('Ignoring %s at line %s', child.data, _line(child))
                continue
            contracts.append(self._build_contract(self._expect_rule(child, 'contract')))
        if not contracts:
            raise StructuralError('Source file declares no contract', rule='file')
        return SourceUnit(contracts=tuple(contracts))

    def _build_contract(self, tree: Tree) -> ContractDefinition:
        if not tree.children:
            raise StructuralError('Contract without a name', rule='contract', line=_line(tree))
        name = self._expect_token(tree.children[0], 'NAME', 'contract')

        declarations: List[Declaration] = []
        for member in tree.children[1:]:
            if _is_rule(member, 'state_variable'):
                declarations.append(self._build_state_variable(member))
            elif _is_rule(member, 'function_definition'):
                declarations.append(self._build_function(member))
            elif _is_rule(member, 'constructor_definition'):
                declarations.append(self._build_constructor(member))
            elif _is_rule(member, 'event_definition'):
                declarations.append(self._build_event(member))
            else:
                raise StructuralError('Unexpected contract member', rule='contract', line=_line(member))

        logger.debug('Built contract %s with %d declaration(s)', name, len(declarations))
        return ContractDefinition(name=str(name), declarations=tuple(declarations), line=_line(tree))

    # =========================================================================
    # STATE VARIABLES AND TYPES
    # =========================================================================

    def _build_state_variable(self, tree: Tree) -> StateVariableDeclaration:
        (decl,) = self._expect_arity(tree, 1)
        if _is_rule(decl, 'mapping_declaration'):
            return self._build_mapping_declaration(decl)
        return self._build_basic_declaration(self._expect_rule(decl, 'basic_declaration'))

    def _build_mapping_declaration(self, tree: Tree) -> StateVariableDeclaration:
        children = self._expect_arity(tree, 2, 3)
        type_name = self._build_mapping_type(self._expect_rule(children[0], 'mapping_type'))
        visibility = 'internal'
        if len(children) == 3:
            visibility = self._build_keyword(self._expect_rule(children[1], 'visibility'))
        name = self._expect_token(children[-1], 'NAME', 'mapping_declaration')
        return StateVariableDeclaration(
            name=str(name),
            type_name=type_name,
            visibility=visibility,
            line=_line(tree),
        )

    def _build_basic_declaration(self, tree: Tree) -> StateVariableDeclaration:
        children = list(tree.children)
        if len(children) < 2:
            raise StructuralError('Incomplete state variable', rule='basic_declaration', line=_line(tree))
        type_name = self._build_elementary_type(self._expect_rule(children[0], 'elementary_type'))

        visibility: Optional[str] = None
        is_constant = False
        position = 1
        while position < len(children) and isinstance(children[position], Tree):
            modifier = children[position]
            if _is_rule(modifier, 'visibility'):
                if visibility is not None:
                    raise StructuralError('Duplicate visibility', rule='basic_declaration', line=_line(modifier))
                visibility = self._build_keyword(modifier)
            elif _is_rule(modifier, 'constant_modifier'):
                is_constant = True
            else:
                break
            position += 1

        if position >= len(children):
            raise StructuralError('State variable without a name', rule='basic_declaration', line=_line(tree))
        name = self._expect_token(children[position], 'NAME', 'basic_declaration')
        rest = children[position + 1:]
        if len(rest) > 1:
            raise StructuralError('Unexpected trailing nodes', rule='basic_declaration', line=_line(tree))
        initial_value = self._build_expression(self._expect_rule(rest[0], 'expression')) if rest else None

        return StateVariableDeclaration(
            name=str(name),
            type_name=type_name,
            visibility=visibility or 'internal',
            is_constant=is_constant,
            initial_value=initial_value,
            line=_line(tree),
        )

    def _build_type_name(self, tree: Tree) -> TypeName:
        (inner,) = self._expect_arity(self._expect_rule(tree, 'type_name'), 1)
        if _is_rule(inner, 'mapping_type'):
            return self._build_mapping_type(inner)
        return self._build_elementary_type(self._expect_rule(inner, 'elementary_type'))

    def _build_elementary_type(self, tree: Tree) -> ElementaryTypeName:
        (token,) = self._expect_arity(tree, 1)
        token = self._expect_token(token, 'ELEMENTARY_TYPE', 'elementary_type')
        if str(token) not in SOLIDITY_TO_CLARITY_MAP:
            raise StructuralError(f'Unrecognized elementary type "{token}"', rule='elementary_type',
                                  line=_line(token))
        return ElementaryTypeName(str(token))

    def _build_mapping_type(self, tree: Tree) -> Mapping:
        """Resolve a nested mapping chain into a Mapping, outermost key first."""
        keys: List[ElementaryTypeName] = []
        current: Tree = tree
        while True:
            key_node, value_node = self._expect_arity(self._expect_rule(current, 'mapping_type'), 2)
            keys.append(self._build_elementary_type(self._expect_rule(key_node, 'elementary_type')))
            (inner,) = self._expect_arity(self._expect_rule(value_node, 'type_name'), 1)
            if not _is_rule(inner, 'mapping_type'):
                break
            current = inner

        value: TypeName = self._build_elementary_type(self._expect_rule(inner, 'elementary_type'))
        for key in reversed(keys):
            value = Mapping(key_type=key, value_type=value)
        return value

    def _build_keyword(self, tree: Tree) -> str:
        (token,) = self._expect_arity(tree, 1)
        if not isinstance(token, Token):
            raise StructuralError('Expected keyword token', rule=str(tree.data), line=_line(tree))
        return str(token)

    # =========================================================================
    # FUNCTIONS AND EVENTS
    # =========================================================================

    def _build_function(self, tree: Tree) -> FunctionDefinition:
        children = list(tree.children)
        if not children:
            raise StructuralError('Function without a name', rule='function_definition', line=_line(tree))
        name = self._expect_token(children[0], 'NAME', 'function_definition')
        parameters, visibility, mutability, return_type, body = self._build_signature_and_body(
            children[1:], 'function_definition'
        )
        return FunctionDefinition(
            name=str(name),
            parameters=parameters,
            visibility=visibility,
            mutability=mutability,
            return_type=return_type,
            body=body,
            line=_line(tree),
        )

    def _build_constructor(self, tree: Tree) -> FunctionDefinition:
        parameters, visibility, mutability, return_type, body = self._build_signature_and_body(
            list(tree.children), 'constructor_definition'
        )
        if return_type is not None:
            raise StructuralError('Constructor with a return type', rule='constructor_definition',
                                  line=_line(tree))
        return FunctionDefinition(
            name=None,
            parameters=parameters,
            visibility=visibility,
            mutability=mutability,
            body=body,
            is_constructor=True,
            line=_line(tree),
        )

    def _build_signature_and_body(self, children: List[Node], rule: str):
        parameters: Tuple[Parameter, ...] = ()
        visibility: Optional[str] = None
        mutability: Optional[str] = None
        return_type: Optional[TypeName] = None
        body: Optional[Tuple[Statement, ...]] = None

        for child in children:
            if _is_rule(child, 'parameter_list'):
                parameters = self._build_parameters(child)
            elif _is_rule(child, 'visibility'):
                if visibility is not None:
                    raise StructuralError('Duplicate visibility', rule=rule, line=_line(child))
                visibility = self._build_keyword(child)
            elif _is_rule(child, 'mutability'):
                if mutability is not None:
                    raise StructuralError('Duplicate state mutability', rule=rule, line=_line(child))
                mutability = self._build_keyword(child)
            elif _is_rule(child, 'returns_clause'):
                return_type = self._build_type_name(self._expect_arity(child, 1, 2)[0])
            elif _is_rule(child, 'function_body'):
                body = tuple(self._build_statement(stmt) for stmt in child.children)
            else:
                raise StructuralError('Unexpected node in function signature', rule=rule, line=_line(child))

        if body is None:
            raise StructuralError('Function without a body', rule=rule)
        return parameters, visibility, mutability, return_type, body

    def _build_parameters(self, tree: Tree) -> Tuple[Parameter, ...]:
        parameters = []
        for child in tree.children:
            type_node, name = self._expect_arity(self._expect_rule(child, 'parameter'), 2)
            parameters.append(Parameter(
                type_name=self._build_type_name(type_node),
                name=str(self._expect_token(name, 'NAME', 'parameter')),
            ))
        return tuple(parameters)

    def _build_event(self, tree: Tree) -> EventDefinition:
        children = self._expect_arity(tree, 1, 2)
        name = self._expect_token(children[0], 'NAME', 'event_definition')
        parameters = []
        if len(children) == 2:
            for param in self._expect_rule(children[1], 'event_parameter_list').children:
                parts = self._expect_arity(self._expect_rule(param, 'event_parameter'), 2, 3)
                if len(parts) == 3:
                    self._expect_rule(parts[1], 'indexed')
                parameters.append(EventParameter(
                    type_name=self._build_type_name(parts[0]),
                    name=str(self._expect_token(parts[-1], 'NAME', 'event_parameter')),
                    is_indexed=len(parts) == 3,
                ))
        return EventDefinition(name=str(name), parameters=tuple(parameters), line=_line(tree))

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def _build_statement(self, tree: Node) -> Statement:
        if _is_rule(tree, 'assignment_statement'):
            target_node, value_node = self._expect_arity(tree, 2)
            return Assignment(
                target=self._build_access(self._expect_rule(target_node, 'access')),
                value=self._build_expression(value_node),
                line=_line(tree),
            )
        if _is_rule(tree, 'return_statement'):
            children = self._expect_arity(tree, 0, 1)
            expression = self._build_expression(children[0]) if children else None
            return ReturnStatement(expression=expression, line=_line(tree))
        if _is_rule(tree, 'emit_statement'):
            children = self._expect_arity(tree, 1, 2)
            name = self._expect_token(children[0], 'NAME', 'emit_statement')
            arguments: Tuple[Expression, ...] = ()
            if len(children) == 2:
                args = self._expect_rule(children[1], 'argument_list')
                arguments = tuple(self._build_expression(arg) for arg in args.children)
            return EmitStatement(event_name=str(name), arguments=arguments, line=_line(tree))
        if _is_rule(tree, 'expression_statement'):
            (expression,) = self._expect_arity(tree, 1)
            return ExpressionStatement(expression=self._build_expression(expression), line=_line(tree))
        raise StructuralError('Unknown statement', rule='function_body', line=_line(tree))

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def _build_expression(self, tree: Node) -> Expression:
        """Fold `term (OPERATOR term)*` strictly left to right."""
        children = list(self._expect_rule(tree, 'expression').children)
        if not children or len(children) % 2 == 0:
            raise StructuralError('Operator without operand', rule='expression', line=_line(tree))

        result = self._build_term(children[0])
        for position in range(1, len(children), 2):
            operator = self._expect_token(children[position], 'OPERATOR', 'expression')
            result = BinaryOperation(
                left=result,
                operator=str(operator),
                right=self._build_term(children[position + 1]),
            )
        return result

    def _build_term(self, node: Node) -> Expression:
        if _is_rule(node, 'access'):
            return self._build_access(node)
        if _is_rule(node, 'literal'):
            return self._build_literal(node)
        if _is_rule(node, 'expression'):
            return self._build_expression(node)
        raise StructuralError('Unexpected term', rule='expression', line=_line(node))

    def _build_access(self, tree: Tree) -> Union[MemberAccess, IndexAccess]:
        children = list(tree.children)
        if not children:
            raise StructuralError('Empty access', rule='access', line=_line(tree))
        base = self._build_member_access(self._expect_rule(children[0], 'member_access'))
        if len(children) == 1:
            return base

        indices = []
        for index in children[1:]:
            (expression,) = self._expect_arity(self._expect_rule(index, 'index'), 1)
            indices.append(self._build_expression(expression))
        return self._build_index_access(base, indices, tree)

    def _build_index_access(self, base: MemberAccess, indices: List[Expression], tree: Tree) -> IndexAccess:
        if not indices:
            raise StructuralError('Index access without an index', rule='access', line=_line(tree))
        return IndexAccess(base=base, indices=tuple(indices))

    def _build_member_access(self, tree: Tree) -> MemberAccess:
        if not tree.children:
            raise StructuralError('Empty member access', rule='member_access', line=_line(tree))
        path = tuple(str(self._expect_token(t, 'NAME', 'member_access')) for t in tree.children)
        return MemberAccess(path=path)

    def _build_literal(self, tree: Tree) -> Literal:
        (value,) = self._expect_arity(tree, 1)
        if _is_rule(value, 'bool_literal'):
            return Literal(value=self._build_keyword(value), kind='bool')
        if isinstance(value, Token) and value.type == 'NUMBER':
            return Literal(value=str(value), kind='number')
        if isinstance(value, Token) and value.type == 'STRING':
            return Literal(value=_unquote(value), kind='string')
        raise StructuralError('Unknown literal', rule='literal', line=_line(tree))


def _unquote(token: Token) -> str:
    """Strip the quotes of a string literal and decode its escape sequences."""

    def decode(match):
        sequence = match.group(1)
        if len(sequence) > 1:
            return chr(int(sequence[1:], 16))
        if sequence in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[sequence]
        raise SoliditySyntaxError(
            f'Invalid escape sequence \\{sequence}', line=token.line, column=token.column
        )

    return _ESCAPE_PATTERN.sub(decode, str(token)[1:-1])


_SIMPLE_ESCAPES = {
    '\\': '\\', "'": "'", '"': '"',
    'n': '\n', 'r': '\r', 't': '\t', 'b': '\b', 'f': '\f', 'v': '\v',
}
_ESCAPE_PATTERN = re.compile(r'\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|.)')


def build_source_unit(tree: Tree) -> SourceUnit:
    """Build a SourceUnit AST from a lark parse tree."""
    return ASTBuilder().build(tree)
