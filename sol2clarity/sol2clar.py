#!/usr/bin/env python3
"""
Solidity to Clarity Transpiler

This transpiler converts Solidity contracts to Clarity contracts for the
Stacks blockchain. Each contract in the input file becomes one .clar file.

Pipeline:
- parser: grammar-driven parsing (grammar.lark, parser.py) and the AST builder
- type_system: substitution tables and the per-contract registry
- converter: lowering from the Solidity AST to the Clarity AST
- codegen: rendering of Clarity source text

Usage:
    sol2clarity contracts/Token.sol -o clarity/
    python -m sol2clarity contracts/Token.sol --stdout
"""

import argparse
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .codegen import ClarityCodeGenerator
from .converter import convert_contract
from .diagnostics import TranspilerDiagnostics
from .errors import OutputError, TranspilerError, UnsupportedConstructError
from .parser import ContractDefinition, parse

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = 'SOL2CLARITY_LOG_LEVEL'
DEFAULT_LOG_LEVEL = 'WARNING'


class SolidityToClarityTranspiler:
    """Main transpiler class that orchestrates the conversion process."""

    def __init__(
        self,
        output_dir: str = '.',
        jobs: int = 1,
        keep_going: bool = False,
        diagnostics: Optional[TranspilerDiagnostics] = None,
    ):
        self.output_dir = Path(output_dir)
        self.jobs = max(1, jobs)
        self.keep_going = keep_going
        self.diagnostics = diagnostics or TranspilerDiagnostics()
        # Contracts skipped with keep_going, with the error that stopped them
        self.failures: List[UnsupportedConstructError] = []

    def transpile_file(self, filepath: str) -> Dict[str, str]:
        """Transpile a Solidity file; returns file name -> Clarity source."""
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()
        logger.info('Transpiling %s', filepath)
        return self.transpile_source(source)

    def transpile_source(self, source: str) -> Dict[str, str]:
        """Transpile Solidity source text.

        Args:
            source: The Solidity source, possibly declaring several contracts

        Returns:
            Output file name -> Clarity source, in contract declaration order

        Raises:
            SoliditySyntaxError: the source does not parse
            StructuralError: the parse tree has an unexpected shape
            UnsupportedConstructError: a contract has no lowering (unless keep_going)
        """
        ast = parse(source)
        self.failures = []

        if self.jobs > 1 and len(ast.contracts) > 1:
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                outcomes = list(executor.map(self._transpile_contract, ast.contracts))
        else:
            outcomes = [self._transpile_contract(contract) for contract in ast.contracts]

        results: Dict[str, str] = {}
        for contract, outcome in zip(ast.contracts, outcomes):
            if not isinstance(outcome, UnsupportedConstructError):
                file_name, code = outcome
                if file_name not in results:
                    results[file_name] = code
                    continue
                outcome = UnsupportedConstructError(
                    'duplicate contract', f'another contract also becomes {file_name}', contract.name, contract.line
                )

            if not self.keep_going:
                raise outcome
            self._skip(contract, outcome)
        return results

    def _skip(self, contract: ContractDefinition, error: UnsupportedConstructError) -> None:
        logger.warning('Skipping contract %s: %s', contract.name, error)
        self.failures.append(error)
        self.diagnostics.warn_unsupported_construct(error.construct, error.detail, contract.name, error.line)

    def _transpile_contract(self, contract: ContractDefinition):
        """Return (file name, code), or the UnsupportedConstructError that stopped the contract."""
        try:
            clarity = convert_contract(contract, self.diagnostics)
        except UnsupportedConstructError as exc:
            return exc
        code = ClarityCodeGenerator().generate(clarity)
        logger.debug('Generated %s from contract %s', clarity.file_name, contract.name)
        return clarity.file_name, code

    def write_output(self, results: Dict[str, str]) -> List[Path]:
        """Write transpiled Clarity files to the output directory."""
        written = []
        for file_name, content in results.items():
            path = self.output_dir / file_name
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, 'w', encoding='utf-8') as f:
                    f.write(content)
            except OSError as exc:
                raise OutputError(str(path), exc.strerror or str(exc)) from exc
            logger.info('Written: %s', path)
            written.append(path)
        return written


# =============================================================================
# CLI INTERFACE
# =============================================================================

def configure_logging(verbose: bool = False) -> None:
    """Configure the sol2clarity logger from the environment or -v."""
    level_name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = logging.DEBUG if verbose else getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(format='%(levelname)s %(name)s: %(message)s')
    logging.getLogger('sol2clarity').setLevel(level)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sol2clarity',
        description='Solidity to Clarity Transpiler',
    )
    parser.add_argument('input', help='Input Solidity file')
    parser.add_argument('-o', '--output', default='.', help='Output directory')
    parser.add_argument('--stdout', action='store_true', help='Print to stdout instead of writing files')
    parser.add_argument('-j', '--jobs', type=int, default=1, metavar='N',
                        help='Convert contracts with N worker threads')
    parser.add_argument('--keep-going', action='store_true',
                        help='Skip contracts that cannot be converted instead of stopping')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose logging and diagnostics')
    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.verbose)

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f'Error: {args.input} is not a valid file', file=sys.stderr)
        return 1

    diagnostics = TranspilerDiagnostics(verbose=args.verbose)
    transpiler = SolidityToClarityTranspiler(
        output_dir=args.output,
        jobs=args.jobs,
        keep_going=args.keep_going,
        diagnostics=diagnostics,
    )

    try:
        results = transpiler.transpile_file(str(input_path))
        if args.stdout:
            print(_join_for_stdout(results), end='')
        else:
            for path in transpiler.write_output(results):
                print(f'Written: {path}')
    except (TranspilerError, OSError, UnicodeDecodeError) as exc:
        print(f'Error: {exc}', file=sys.stderr)
        return 1
    finally:
        diagnostics.print_summary()

    for failure in transpiler.failures:
        print(f'Skipped: {failure}', file=sys.stderr)
    return 1 if transpiler.failures else 0


def _join_for_stdout(results: Dict[str, str]) -> str:
    if len(results) == 1:
        return next(iter(results.values()))
    return '\n'.join(f';; ---- {name} ----\n{code}' for name, code in results.items())


if __name__ == '__main__':
    sys.exit(main())
