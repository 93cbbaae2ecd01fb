#!/usr/bin/env python3
"""
Unit tests for the sol2clarity transpiler.

Run with: python3 -m pytest sol2clarity/test_transpiler.py
"""

import unittest

from lark import Token, Tree

from sol2clarity import SolidityToClarityTranspiler
from sol2clarity.codegen import ClarityCodeGenerator
from sol2clarity.converter import (
    Apply,
    Atom,
    ContractConverter,
    DataVar,
    DeployBlock,
    FunctionDef,
    FunctionKind,
    GetterKind,
    Map,
    convert_contract,
)
from sol2clarity.diagnostics import TranspilerDiagnostics
from sol2clarity.errors import SoliditySyntaxError, StructuralError, UnsupportedConstructError
from sol2clarity.parser import (
    ASTBuilder,
    BinaryOperation,
    IndexAccess,
    Mapping,
    MemberAccess,
    Parser,
    build_source_unit,
    parse,
)
from sol2clarity.type_system import TypeRegistry, get_default_value, to_clarity_name


def transpile(source, **kwargs):
    return SolidityToClarityTranspiler(**kwargs).transpile_source(source)


def convert(source, diagnostics=None):
    return convert_contract(parse(source).contracts[0], diagnostics)


class TestParser(unittest.TestCase):
    """Test parsing into the Solidity AST."""

    def test_parse_tree_root(self):
        tree = Parser('contract A {}').parse_tree()
        self.assertEqual(tree.data, 'file')

    def test_declarations_keep_source_order(self):
        source = '''
        contract Ordered {
            uint256 b;
            event Ping();
            function f() public {}
            uint256 a;
        }
        '''
        contract = parse(source).contracts[0]
        kinds = [type(d).__name__ for d in contract.declarations]
        self.assertEqual(kinds, ['StateVariableDeclaration', 'EventDefinition',
                                 'FunctionDefinition', 'StateVariableDeclaration'])
        self.assertEqual([v.name for v in contract.state_variables], ['b', 'a'])

    def test_nested_mapping_chain(self):
        source = 'contract M { mapping(address => mapping(uint256 => mapping(address => bool))) m; }'
        var = parse(source).contracts[0].state_variables[0]
        self.assertIsInstance(var.type_name, Mapping)
        self.assertEqual(var.type_name.depth, 3)
        self.assertEqual([k.name for k in var.type_name.key_types], ['address', 'uint256', 'address'])
        self.assertEqual(var.type_name.terminal_value_type.name, 'bool')

    def test_flat_expression_folds_left(self):
        source = 'contract E { function f(uint256 a, uint256 b, uint256 c) public { a + b * c; } }'
        stmt = parse(source).contracts[0].functions[0].body[0]
        expr = stmt.expression
        self.assertIsInstance(expr, BinaryOperation)
        self.assertEqual(expr.operator, '*')
        self.assertEqual(expr.left.operator, '+')
        self.assertEqual(expr.right, MemberAccess(('c',)))

    def test_index_access_collects_indices(self):
        source = 'contract E { mapping(address => mapping(address => uint256)) m; function f(address a) public { m[a][msg.sender] = 1; } }'
        target = parse(source).contracts[0].functions[0].body[0].target
        self.assertIsInstance(target, IndexAccess)
        self.assertEqual(target.base, MemberAccess(('m',)))
        self.assertEqual(target.indices, (MemberAccess(('a',)), MemberAccess(('msg', 'sender'))))

    def test_pragma_and_comments_ignored(self):
        source = '''
        // SPDX-License-Identifier: MIT
        pragma solidity ^0.8.0;
        /* block comment */
        contract A { uint256 x; // trailing
        }
        '''
        unit = parse(source)
        self.assertEqual([c.name for c in unit.contracts], ['A'])

    def test_state_variable_modifiers(self):
        source = "contract A { uint256 public constant LIMIT = 10; string name = 'hi'; }"
        limit, name = parse(source).contracts[0].state_variables
        self.assertTrue(limit.is_public)
        self.assertTrue(limit.is_constant)
        self.assertEqual(limit.initial_value.value, '10')
        self.assertEqual(name.visibility, 'internal')
        self.assertEqual(name.initial_value.value, 'hi')

    def test_constructor_and_event(self):
        source = '''
        contract A {
            event Transfer(address indexed from, address to, uint256 value);
            constructor(uint256 supply) {}
        }
        '''
        contract = parse(source).contracts[0]
        event = contract.events[0]
        self.assertEqual([p.is_indexed for p in event.parameters], [True, False, False])
        self.assertTrue(contract.constructor.is_constructor)
        self.assertIsNone(contract.constructor.name)
        self.assertEqual(contract.functions, ())


class TestSyntaxErrors(unittest.TestCase):
    """Test syntax error reporting."""

    def test_missing_contract_name(self):
        with self.assertRaises(SoliditySyntaxError) as cm:
            parse('contract { invalid syntax }')
        err = cm.exception
        self.assertEqual(err.line, 1)
        self.assertEqual(err.column, 10)
        self.assertIn('NAME', err.expected)
        self.assertIn('line 1, column 10', str(err))

    def test_unexpected_end_of_input(self):
        with self.assertRaises(SoliditySyntaxError) as cm:
            parse('contract A {')
        self.assertIn('end of input', str(cm.exception))

    def test_unexpected_character(self):
        with self.assertRaises(SoliditySyntaxError) as cm:
            parse('contract A {\n  uint256 x # 1;\n}')
        err = cm.exception
        self.assertEqual(err.line, 2)
        self.assertIn("'#'", str(err))

    def test_unknown_type_is_syntax_error(self):
        with self.assertRaises(SoliditySyntaxError):
            parse('contract A { uint7 x; }')

    def test_invalid_escape_sequence(self):
        with self.assertRaises(SoliditySyntaxError) as cm:
            parse('contract A {\n  string s = "bad \\q";\n}')
        self.assertEqual(cm.exception.line, 2)
        self.assertIn('Invalid escape sequence \\q', str(cm.exception))

    def test_empty_source(self):
        with self.assertRaises(SoliditySyntaxError):
            parse('')


class TestStructuralErrors(unittest.TestCase):
    """Test the AST builder's shape checks on hand-built trees."""

    def test_file_without_contract(self):
        with self.assertRaises(StructuralError):
            build_source_unit(Tree('file', []))

    def test_wrong_root(self):
        with self.assertRaises(StructuralError) as cm:
            build_source_unit(Tree('contract', [Token('NAME', 'A')]))
        self.assertEqual(cm.exception.rule, 'file')

    def test_empty_state_variable(self):
        tree = Tree('file', [Tree('contract', [Token('NAME', 'A'), Tree('state_variable', [])])])
        with self.assertRaises(StructuralError):
            build_source_unit(tree)

    def test_operator_without_operand(self):
        literal = Tree('literal', [Token('NUMBER', '1')])
        with self.assertRaises(StructuralError):
            ASTBuilder()._build_expression(Tree('expression', [literal, Token('OPERATOR', '+')]))

    def test_function_without_body(self):
        func = Tree('function_definition', [Token('NAME', 'f')])
        tree = Tree('file', [Tree('contract', [Token('NAME', 'A'), func])])
        with self.assertRaises(StructuralError):
            build_source_unit(tree)


class TestScenarios(unittest.TestCase):
    """End-to-end conversions of the reference scenarios."""

    def test_counter_increment(self):
        source = '''
        contract Counter {
            uint256 count;
            function increment() { count = count + 1; }
        }
        '''
        expected = (
            ';; Contract: Counter\n'
            ';; Generated by sol2clarity from Solidity source; do not edit by hand.\n'
            '\n'
            ';; @desc Stores the count value\n'
            '(define-data-var count uint u0)\n'
            '\n'
            ';; @desc Increment\n'
            ';; @returns (response bool uint)\n'
            '(define-public (increment)\n'
            '  (ok (var-set count (+ (var-get count) u1))))\n'
        )
        self.assertEqual(transpile(source), {'counter.clar': expected})

    def test_public_mapping_getter(self):
        output = transpile('contract Bank { mapping(address => uint256) public balances; }')['bank.clar']
        self.assertIn('(define-map balances principal uint)', output)
        self.assertIn(
            ';; @returns (response (optional uint) uint)\n'
            '(define-read-only (get-balances (key principal))\n'
            '  (ok (map-get? balances key)))\n',
            output,
        )

    def test_map_getter_argument_avoids_map_name(self):
        contract = convert('contract K { mapping(address => uint256) public key; }')
        self.assertEqual(contract.getters[0].key_param, 'key-arg')
        self.assertIn(
            ';; @param key-arg: principal\n'
            ';; @returns (response (optional uint) uint)\n'
            '(define-read-only (get-key (key-arg principal))\n'
            '  (ok (map-get? key key-arg)))\n',
            ClarityCodeGenerator().generate(contract),
        )

    def test_nested_mapping_tuple_key(self):
        contract = convert('contract Nft { mapping(address => mapping(uint256 => bool)) public approvals; }')
        map_def, getter = contract.definitions
        self.assertIsInstance(map_def, Map)
        self.assertTrue(map_def.is_tuple_key)
        self.assertEqual([f.clarity_type for f in map_def.key_fields], ['principal', 'uint'])
        self.assertEqual(map_def.value_type, 'bool')
        self.assertEqual(getter.arity, 1)
        self.assertEqual(getter.key_fields, map_def.key_fields)

        output = ClarityCodeGenerator().generate(contract)
        self.assertIn('(define-map approvals {key-1: principal, key-2: uint} bool)', output)
        self.assertIn('(define-read-only (get-approvals (key {key-1: principal, key-2: uint}))', output)

    def test_transfer_sequences_map_sets(self):
        source = '''
        contract Token {
            mapping(address => uint256) public balances;
            function transfer(address to, uint256 amount) public {
                balances[msg.sender] = balances[msg.sender] - amount;
                balances[to] = balances[to] + amount;
            }
        }
        '''
        output = transpile(source)['token.clar']
        self.assertIn(
            ';; @desc Transfer\n'
            ';; @param to: principal\n'
            ';; @param amount: uint\n'
            ';; @returns (response bool uint)\n'
            '(define-public (transfer (to principal) (amount uint))\n'
            '  (begin\n'
            '    (map-set balances tx-sender (- (default-to u0 (map-get? balances tx-sender)) amount))\n'
            '    (ok (map-set balances to (+ (default-to u0 (map-get? balances to)) amount)))))\n',
            output,
        )
        # Only the final store is the result
        self.assertEqual(output.count('(ok (map-set'), 1)

    def test_two_contracts_two_units(self):
        source = '''
        contract TokenA { uint256 supplyA; }
        contract TokenB { uint256 supplyB; }
        '''
        results = transpile(source)
        self.assertEqual(list(results), ['token-a.clar', 'token-b.clar'])
        self.assertIn('supply-a', results['token-a.clar'])
        self.assertNotIn('supply-b', results['token-a.clar'])
        self.assertIn('supply-b', results['token-b.clar'])
        self.assertNotIn('supply-a', results['token-b.clar'])


class TestProperties(unittest.TestCase):
    """Test the invariants every conversion upholds."""

    SOURCE = '''
    contract Vault {
        address public owner;
        uint256 total;
        mapping(address => uint256) public deposits;
        mapping(address => mapping(address => bool)) operators;
        event Deposit(address indexed who, uint256 amount);
        function deposit(uint256 amount) public {
            deposits[msg.sender] = deposits[msg.sender] + amount;
            total = total + amount;
            emit Deposit(msg.sender, amount);
        }
        function balanceOf(address who) public view returns (uint256) {
            return deposits[who];
        }
    }
    '''

    def test_deterministic_output(self):
        self.assertEqual(transpile(self.SOURCE), transpile(self.SOURCE))

    def test_parallel_matches_sequential(self):
        source = self.SOURCE + self.SOURCE.replace('Vault', 'Safe') + self.SOURCE.replace('Vault', 'Bank')
        self.assertEqual(transpile(source, jobs=4), transpile(source, jobs=1))

    def test_definition_order(self):
        contract = convert(self.SOURCE)
        names = [type(d).__name__ + ':' + getattr(d, 'name', '') for d in contract.definitions]
        self.assertEqual(names, [
            'DataVar:owner',
            'Getter:get-owner',
            'DataVar:total',
            'Map:deposits',
            'Getter:get-deposits',
            'Map:operators',
            'EventDoc:Deposit',
            'FunctionDef:deposit',
            'FunctionDef:balance-of',
        ])

    def test_one_getter_per_public_variable(self):
        contract = convert(self.SOURCE)
        self.assertEqual([g.target for g in contract.getters], ['owner', 'deposits'])
        self.assertEqual(contract.getters[0].kind, GetterKind.DATA_VAR)
        self.assertEqual(contract.getters[1].kind, GetterKind.MAP)

    def test_mappings_never_data_vars(self):
        contract = convert(self.SOURCE)
        data_vars = [d.name for d in contract.definitions if isinstance(d, DataVar)]
        maps = {d.name: d for d in contract.definitions if isinstance(d, Map)}
        self.assertEqual(data_vars, ['owner', 'total'])
        self.assertEqual(len(maps['deposits'].key_fields), 1)
        self.assertEqual(len(maps['operators'].key_fields), 2)

    def test_emit_and_read_only(self):
        output = transpile(self.SOURCE)['vault.clar']
        self.assertIn(';; @desc Event: Deposit\n;; @fields (indexed) who: principal, amount: uint', output)
        self.assertIn('    (print {event: "Deposit", who: tx-sender, amount: amount})\n    (ok true)))', output)
        self.assertIn('(define-read-only (balance-of (who principal))\n'
                      '  (ok (default-to u0 (map-get? deposits who))))', output)
        self.assertIn(';; @returns (response uint uint)', output)


class TestExpressions(unittest.TestCase):
    """Test expression lowering."""

    def body(self, source):
        contract = convert(source)
        func = [d for d in contract.definitions if isinstance(d, FunctionDef)][0]
        return func

    def render(self, source):
        return ClarityCodeGenerator().generate(convert(source))

    def test_flat_precedence_left_to_right(self):
        source = 'contract P { function f(uint256 a, uint256 b, uint256 c) public pure returns (uint256) { return a + b * c; } }'
        func = self.body(source)
        self.assertEqual(func.kind, FunctionKind.READ_ONLY)
        self.assertEqual(func.body.value, Apply('*', (Apply('+', (Atom('a'), Atom('b'))), Atom('c'))))
        self.assertIn('(ok (* (+ a b) c))', self.render(source))

    def test_parentheses_group(self):
        source = 'contract P { function f(uint256 a, uint256 b, uint256 c) public pure returns (uint256) { return a + (b * c); } }'
        self.assertIn('(ok (+ a (* b c)))', self.render(source))

    def test_operator_table(self):
        source = '''
        contract Ops {
            function f(uint256 a, uint256 b, bool flag) public pure returns (bool) {
                return ((a % b) == 0 && flag) || (a != b);
            }
        }
        '''
        self.assertIn('(ok (or (and (is-eq (mod a b) u0) flag) (not (is-eq a b))))', self.render(source))

    def test_signed_literals(self):
        source = 'contract S { int256 delta = 5; function f(int256 x) public pure returns (int256) { return x - 1; } }'
        output = self.render(source)
        self.assertIn('(define-data-var delta int 5)', output)
        self.assertIn('(ok (- x 1))', output)

    def test_member_access_rewrites(self):
        source = '''
        contract Ctx {
            address last;
            uint256 height;
            function touch() public {
                last = tx.origin;
                height = block.number;
            }
        }
        '''
        output = self.render(source)
        self.assertIn('(var-set last tx-sender)', output)
        self.assertIn('(ok (var-set height block-height))', output)

    def test_parameter_renamed_away_from_state(self):
        source = 'contract Owned { address owner; function setOwner(address _owner) public { owner = _owner; } }'
        self.assertIn(
            ';; @param owner-arg: principal\n'
            ';; @returns (response bool uint)\n'
            '(define-public (set-owner (owner-arg principal))\n'
            '  (ok (var-set owner owner-arg)))\n',
            self.render(source),
        )

    def test_parameter_shadowing_state_is_renamed(self):
        source = 'contract Sh { uint256 value; function f(uint256 value) public view returns (uint256) { return value; } }'
        self.assertIn('(define-read-only (f (value-arg uint))\n  (ok value-arg))', self.render(source))

    def test_parameter_renamed_away_from_function_and_getter(self):
        source = '''
        contract G {
            uint256 public supply;
            function total() public view returns (uint256) { return supply; }
            function f(uint256 total, uint256 getSupply) public view returns (uint256) { return total + getSupply; }
        }
        '''
        self.assertIn(
            '(define-read-only (f (total-arg uint) (get-supply-arg uint))\n'
            '  (ok (+ total-arg get-supply-arg)))',
            self.render(source),
        )

    def test_init_parameter_renamed(self):
        source = 'contract I { uint256 n; constructor(uint256 init) { n = init; } }'
        self.assertIn('(define-public (init (init-arg uint))\n  (ok (var-set n init-arg)))', self.render(source))

    def test_principal_map_read_unwraps(self):
        source = 'contract O { mapping(uint256 => address) owners; function ownerOf(uint256 id) public view returns (address) { return owners[id]; } }'
        self.assertIn('(ok (unwrap-panic (map-get? owners id)))', self.render(source))

    def test_bool_map_read_defaults_false(self):
        source = 'contract O { mapping(address => bool) seen; function f(address who) public view returns (bool) { return seen[who]; } }'
        self.assertIn('(ok (default-to false (map-get? seen who)))', self.render(source))


class TestStatements(unittest.TestCase):
    """Test statement lowering and the function result."""

    def render(self, source):
        return ClarityCodeGenerator().generate(convert(source))

    def test_empty_body_returns_ok_true(self):
        self.assertIn('(define-public (noop)\n  (ok true))', self.render('contract E { function noop() public {} }'))

    def test_bare_return(self):
        self.assertIn('(define-public (stop)\n  (ok true))', self.render('contract E { function stop() public { return; } }'))

    def test_private_function(self):
        output = self.render('contract E { uint256 x; function bump() internal { x = 1; } }')
        self.assertIn('(define-private (bump)\n  (ok (var-set x u1)))', output)

    def test_payable_warns(self):
        diagnostics = TranspilerDiagnostics()
        convert('contract E { function pay() public payable {} }', diagnostics)
        self.assertEqual([d.code for d in diagnostics.warnings], ['W002'])

    def test_constructor_without_parameters(self):
        source = 'contract Owned { address owner; constructor() { owner = msg.sender; } }'
        contract = convert(source)
        self.assertIsInstance(contract.definitions[-1], DeployBlock)
        self.assertIn(
            ';; @desc Deployment-time initialisation from the constructor\n'
            '(begin\n'
            '  (var-set owner tx-sender))\n',
            ClarityCodeGenerator().generate(contract),
        )

    def test_empty_constructor(self):
        output = self.render('contract E { constructor() {} }')
        self.assertTrue(output.endswith(';; (constructor has no statements)\n'))

    def test_constructor_with_parameters(self):
        diagnostics = TranspilerDiagnostics()
        source = 'contract Token { uint256 supply; constructor(uint256 initialSupply) { supply = initialSupply; } }'
        contract = convert(source, diagnostics)
        init = contract.definitions[-1]
        self.assertEqual(init.name, 'init')
        self.assertEqual(init.kind, FunctionKind.PUBLIC)
        self.assertEqual([d.code for d in diagnostics.warnings], ['W001'])
        self.assertIn('(define-public (init (initial-supply uint))\n  (ok (var-set supply initial-supply)))',
                      ClarityCodeGenerator().generate(contract))

    def test_constants(self):
        output = self.render('contract C { uint256 public constant MAX_SUPPLY = 1000; }')
        self.assertIn('(define-constant max-supply u1000)', output)
        self.assertIn('(define-read-only (get-max-supply)\n  (ok max-supply))', output)

    def test_default_values(self):
        contract = convert('''
        contract D {
            bool flag;
            string label;
            address admin;
            bytes4 tag;
            string title = "Vault";
        }
        ''')
        values = [d.initial_value.text for d in contract.definitions]
        self.assertEqual(values, ['false', '""', 'tx-sender', '0x00000000', '"Vault"'])

    def test_string_escapes_decoded(self):
        contract = convert(r'''contract S { string a = "it\'s \x41\u0042"; string b = 'say "hi"\n'; }''')
        values = [d.initial_value.text for d in contract.definitions]
        self.assertEqual(values, ['"it\'s AB"', r'"say \"hi\"\n"'])

    def test_string_length_counts_decoded_characters(self):
        diagnostics = TranspilerDiagnostics()
        convert('contract S { string a = "' + '\\x41' * 256 + '"; }', diagnostics)
        self.assertEqual(diagnostics.count, 0)
        convert('contract S { string a = "' + '\\x41' * 257 + '"; }', diagnostics)
        self.assertEqual([d.code for d in diagnostics.warnings], ['W003'])


class TestUnsupportedConstructs(unittest.TestCase):
    """Test conversion failures for valid syntax without a lowering."""

    def assertUnsupported(self, source, construct):
        with self.assertRaises(UnsupportedConstructError) as cm:
            convert(source)
        self.assertEqual(cm.exception.construct, construct)
        return cm.exception

    def test_unknown_operator(self):
        err = self.assertUnsupported(
            'contract U { function f(uint256 a) public pure returns (uint256) { return a ** 2; } }',
            'operator',
        )
        self.assertEqual(err.contract, 'U')
        self.assertIn('in function f', str(err))

    def test_early_return(self):
        self.assertUnsupported(
            'contract U { uint256 x; function f() public { return; x = 1; } }', 'early return'
        )

    def test_undeclared_event(self):
        self.assertUnsupported('contract U { function f() public { emit Missing(); } }', 'emit')

    def test_event_arity_mismatch(self):
        self.assertUnsupported(
            'contract U { event Ping(uint256 n); function f() public { emit Ping(); } }', 'emit'
        )

    def test_assign_to_constant(self):
        self.assertUnsupported(
            'contract U { uint256 constant LIMIT = 10; function f() public { LIMIT = 5; } }', 'assignment'
        )

    def test_assign_to_undeclared(self):
        self.assertUnsupported('contract U { function f() public { ghost = 5; } }', 'assignment')

    def test_partial_mapping_access(self):
        self.assertUnsupported(
            'contract U { mapping(address => mapping(address => uint256)) m; function f(address a) public { m[a] = 1; } }',
            'partial mapping access',
        )

    def test_unindexed_mapping_read(self):
        self.assertUnsupported(
            'contract U { mapping(address => uint256) m; function f() public { return m; } }', 'mapping read'
        )

    def test_mapping_parameter(self):
        self.assertUnsupported(
            'contract U { function f(mapping(address => uint256) m) public {} }', 'mapping parameter'
        )

    def test_getter_name_collision(self):
        self.assertUnsupported(
            'contract U { uint256 public balance; function getBalance() public {} }', 'duplicate definition'
        )

    def test_constant_without_value(self):
        self.assertUnsupported('contract U { uint256 constant LIMIT; }', 'constant')

    def test_declared_return_without_return(self):
        err = self.assertUnsupported(
            'contract R { uint256 c; function f() public returns (uint256) { c = 1; } }', 'missing return'
        )
        self.assertIn('must end with a return', str(err))

    def test_declared_return_ending_in_emit(self):
        self.assertUnsupported(
            'contract R { event Ping(); function f() public returns (bool) { emit Ping(); } }', 'missing return'
        )

    def test_declared_return_with_empty_body(self):
        self.assertUnsupported('contract R { function f() public returns (uint256) {} }', 'missing return')

    def test_bare_return_with_declared_type(self):
        self.assertUnsupported('contract R { function f() public returns (uint256) { return; } }', 'missing return')

    def test_parameter_and_renamed_form_both_taken(self):
        self.assertUnsupported(
            'contract U { uint256 owner; uint256 ownerArg; function f(uint256 _owner) public {} }', 'parameter'
        )

    def test_duplicate_parameter_after_casing(self):
        self.assertUnsupported('contract U { function f(uint256 a, uint256 _a) public {} }', 'parameter')

    def test_non_ascii_escape(self):
        self.assertUnsupported('contract U { string s = "caf\\u00e9"; }', 'string literal')

    def test_control_character_escape(self):
        self.assertUnsupported('contract U { string s = "a\\bc"; }', 'string literal')

    def test_keep_going_skips_failed_contract(self):
        source = '''
        contract Good { uint256 x; }
        contract Bad { function f() public { emit Missing(); } }
        '''
        transpiler = SolidityToClarityTranspiler(keep_going=True)
        results = transpiler.transpile_source(source)
        self.assertEqual(list(results), ['good.clar'])
        self.assertEqual([f.contract for f in transpiler.failures], ['Bad'])
        self.assertEqual([d.code for d in transpiler.diagnostics.warnings], ['W099'])

    def test_keep_going_skips_duplicate_unit(self):
        transpiler = SolidityToClarityTranspiler(keep_going=True)
        results = transpiler.transpile_source('contract Token { uint256 a; } contract TOKEN { uint256 b; }')
        self.assertEqual(list(results), ['token.clar'])
        self.assertIn('(define-data-var a uint u0)', results['token.clar'])
        self.assertEqual([(f.construct, f.contract) for f in transpiler.failures], [('duplicate contract', 'TOKEN')])
        self.assertEqual([d.code for d in transpiler.diagnostics.warnings], ['W099'])

    def test_failure_stops_without_keep_going(self):
        source = 'contract Good { uint256 x; } contract Bad { function f() public { emit Missing(); } }'
        with self.assertRaises(UnsupportedConstructError) as cm:
            transpile(source)
        self.assertEqual(cm.exception.contract, 'Bad')


class TestKeyFieldNaming(unittest.TestCase):
    """Test naming of flattened mapping key fields."""

    def test_names_from_index_identifiers(self):
        source = '''
        contract Allow {
            mapping(address => mapping(address => uint256)) public allowance;
            function approve(address spender, uint256 amount) public {
                allowance[msg.sender][spender] = amount;
            }
            function setFor(address owner, address spender, uint256 amount) public {
                allowance[owner][spender] = amount;
            }
        }
        '''
        diagnostics = TranspilerDiagnostics()
        contract = convert(source, diagnostics)
        map_def = contract.definitions[0]
        self.assertEqual([f.name for f in map_def.key_fields], ['owner', 'spender'])
        self.assertEqual(diagnostics.count, 0)

        output = ClarityCodeGenerator().generate(contract)
        self.assertIn('(define-map allowance {owner: principal, spender: principal} uint)', output)
        self.assertIn('(ok (map-set allowance {owner: tx-sender, spender: spender} amount))', output)

    def test_conflicting_names_fall_back(self):
        source = '''
        contract Grid {
            mapping(uint256 => mapping(uint256 => bool)) cells;
            function a(uint256 row, uint256 col) public { cells[row][col] = true; }
            function b(uint256 x, uint256 col) public { cells[x][col] = false; }
        }
        '''
        diagnostics = TranspilerDiagnostics()
        map_def = convert(source, diagnostics).definitions[0]
        self.assertEqual([f.name for f in map_def.key_fields], ['key-1', 'col'])
        self.assertEqual([d.code for d in diagnostics.diagnostics], ['I001'])

    def test_colliding_names_all_positional(self):
        source = '''
        contract Pair {
            mapping(address => mapping(address => bool)) linked;
            function f(address who) public { linked[who][who] = true; }
        }
        '''
        map_def = convert(source).definitions[0]
        self.assertEqual([f.name for f in map_def.key_fields], ['key-1', 'key-2'])


class TestTypeRegistry(unittest.TestCase):
    """Test the declaration pass over one contract."""

    def test_registry_contents(self):
        registry = TypeRegistry.from_contract(parse('''
        contract R {
            uint256 public total;
            uint256 constant LIMIT = 5;
            mapping(address => bool) public seen;
            constructor(uint256 start) { total = start; }
            function bump() public {}
        }
        ''').contracts[0])
        self.assertEqual(set(registry.data_vars), {'total'})
        self.assertEqual(set(registry.constants), {'LIMIT'})
        self.assertEqual(set(registry.mappings), {'seen'})
        self.assertEqual(registry.functions, {'bump'})
        self.assertEqual(registry.public_state_vars, {'total', 'seen'})
        self.assertTrue(registry.has_constructor_parameters)

    def test_reserved_names_include_getters(self):
        converter = ContractConverter()
        converter.convert(parse('contract R { uint256 public total; function bump() public {} }').contracts[0])
        self.assertEqual(converter._ctx.reserved_names, {'total', 'get-total', 'bump'})


class TestNaming(unittest.TestCase):
    """Test the identifier casing transform and default values."""

    def test_to_clarity_name(self):
        cases = {
            'totalSupply': 'total-supply',
            'TokenA': 'token-a',
            'ERC20Token': 'erc20-token',
            'MAX_SUPPLY': 'max-supply',
            'max_supply': 'max-supply',
            '_owner': 'owner',
            'LIMIT': 'limit',
            'balanceOf': 'balance-of',
        }
        for identifier, expected in cases.items():
            self.assertEqual(to_clarity_name(identifier), expected, identifier)

    def test_get_default_value(self):
        self.assertEqual(get_default_value('uint'), 'u0')
        self.assertEqual(get_default_value('int'), '0')
        self.assertEqual(get_default_value('(buff 2)'), '0x0000')
        with self.assertRaises(UnsupportedConstructError):
            get_default_value('(list 10 uint)')

    def test_output_file_name(self):
        contract = convert('contract MyERC20Token {}')
        self.assertEqual(contract.file_name, 'my-erc20-token.clar')

    def test_output_ends_with_single_newline(self):
        output = transpile('contract A { uint256 x; }')['a.clar']
        self.assertTrue(output.endswith(')\n'))
        self.assertFalse(output.endswith('\n\n'))


if __name__ == '__main__':
    # Run tests with verbosity
    unittest.main(verbosity=2)
