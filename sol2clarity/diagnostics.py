"""
Diagnostic/warning system for the transpiler.

Collects and reports warnings about Solidity constructs that were converted
with degraded fidelity, and about contracts skipped after an error. Helps
contract authors review the parts of a migration that need a human look.
"""

import sys
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for transpiler diagnostics."""
    WARNING = 'warning'
    INFO = 'info'


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic message."""
    severity: DiagnosticSeverity
    code: str
    message: str
    contract: str = ''
    line: Optional[int] = None
    construct: str = ''  # e.g., 'constructor', 'payable', 'mapping key'

    def __str__(self) -> str:
        location = self.contract
        if self.line:
            location = f'{location}:{self.line}'
        if location:
            return f'[{self.severity.value}] {location}: {self.message} ({self.code})'
        return f'[{self.severity.value}] {self.message} ({self.code})'


class TranspilerDiagnostics:
    """
    Collects transpiler warnings/diagnostics during conversion.

    Usage:
        diag = TranspilerDiagnostics()
        diag.warn_constructor_parameters("Token", line=12)
        # ... after transpilation ...
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose
        # Contracts may be converted from worker threads
        self._lock = threading.Lock()

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        with self._lock:
            return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get only warning-level diagnostics."""
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def count(self) -> int:
        """Get total diagnostic count."""
        with self._lock:
            return len(self._diagnostics)

    def _add(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._diagnostics.append(diagnostic)

    # =========================================================================
    # SPECIFIC WARNING METHODS
    # =========================================================================

    def warn_constructor_parameters(
        self,
        contract: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a constructor with parameters became a public init function."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message='Constructor with parameters was converted to a public "init" function. '
                    'It can be called again after deployment; add an access guard.',
            contract=contract,
            line=line,
            construct='constructor',
        ))

    def warn_payable_ignored(
        self,
        function_name: str,
        contract: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a payable modifier has no effect on the generated function."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W002',
            message=f'Function "{function_name}" is payable; value transfers are not converted.',
            contract=contract,
            line=line,
            construct='payable',
        ))

    def warn_string_too_long(
        self,
        length: int,
        limit: int,
        contract: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a string literal exceeds the string-ascii length of state strings."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W003',
            message=f'String literal of length {length} exceeds string-ascii {limit}.',
            contract=contract,
            line=line,
            construct='string',
        ))

    def warn_unsupported_construct(
        self,
        construct: str,
        detail: str = '',
        contract: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Generic warning for unsupported constructs in a skipped contract."""
        msg = f'Unsupported construct: {construct}'
        if detail:
            msg += f' ({detail})'
        self._add(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W099',
            message=msg,
            contract=contract,
            line=line,
            construct=construct,
        ))

    def info_positional_key_fields(
        self,
        map_name: str,
        field_names: List[str],
        contract: str = '',
    ) -> None:
        """Info that a flattened map uses generated key-field names."""
        self._add(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I001',
            message=f'Map "{map_name}" uses generated key fields: {", ".join(field_names)}',
            contract=contract,
            construct='mapping key',
        ))

    # =========================================================================
    # REPORTING
    # =========================================================================

    def print_summary(self, file=None) -> None:
        """Print a summary of all diagnostics to stderr (or specified file)."""
        if file is None:
            file = sys.stderr

        diagnostics = self.diagnostics
        if not diagnostics:
            return

        warnings = [d for d in diagnostics if d.severity == DiagnosticSeverity.WARNING]
        infos = [d for d in diagnostics if d.severity == DiagnosticSeverity.INFO]

        if warnings:
            print(f'\nTranspiler warnings ({len(warnings)}):', file=file)
            # Group by construct type
            by_construct: dict = {}
            for w in warnings:
                by_construct.setdefault(w.construct or 'other', []).append(w)

            for construct, diags in sorted(by_construct.items()):
                print(f'  {construct}: {len(diags)} occurrence(s)', file=file)
                if self._verbose:
                    for d in diags:
                        print(f'    {d}', file=file)

        if infos and self._verbose:
            print(f'\nTranspiler info ({len(infos)}):', file=file)
            for d in infos:
                print(f'  {d}', file=file)
