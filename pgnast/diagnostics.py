"""
Diagnostics collected while lexing and parsing a game record.

Lexical and structural problems never abort a parse on their own. They are
reported to a Diagnostics collector that belongs to a single parse call and
is handed back to the caller alongside the tree.

Codes:
- PGN01xx: lexical errors (raised by the lexer)
- PGN02xx: structural errors (raised by the parser)
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional


UNKNOWN_CHARACTER = "PGN0101"
UNTERMINATED_STRING = "PGN0102"
MALFORMED_CASTLE = "PGN0103"
UNTERMINATED_COMMENT = "PGN0104"

HEADER_TOKEN = "PGN0201"
MISSING_FILE = "PGN0202"
MISSING_RANK = "PGN0203"
MISSING_PROMOTION = "PGN0204"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found in the source, with its location."""
    code: str
    message: str
    line: int
    column: int = 0
    filename: str = "<input>"

    @property
    def lexical(self) -> bool:
        return self.code.startswith("PGN01")

    def __str__(self):
        return f"{self.filename}:{self.line}:{self.column}: {self.code}: {self.message}"


class PGNSyntaxError(SyntaxError):
    """Raised in strict mode for the first diagnostic reported."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic
        self.filename = diagnostic.filename
        self.lineno = diagnostic.line


class Diagnostics:
    """Collects diagnostics for one parse call."""

    def __init__(self, filename: str = "<input>", strict: bool = False, listener=None):
        self.filename = filename
        self.strict = strict
        self.listener = listener  # Called with each Diagnostic as it is reported
        self.items: List[Diagnostic] = []

    def report(self, code: str, message: str, line: int, column: int = 0) -> Diagnostic:
        """Record a diagnostic, or raise it when strict mode is enabled."""
        diagnostic = Diagnostic(code, message, line, column, self.filename)
        self.items.append(diagnostic)
        if self.listener is not None:
            self.listener(diagnostic)
        if self.strict:
            raise PGNSyntaxError(diagnostic)
        return diagnostic

    @property
    def has_errors(self) -> bool:
        return bool(self.items)

    def codes(self) -> List[str]:
        return [d.code for d in self.items]

    def first(self, code: str) -> Optional[Diagnostic]:
        for diagnostic in self.items:
            if diagnostic.code == code:
                return diagnostic
        return None

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __repr__(self):
        return f"Diagnostics({len(self.items)} reported)"
