"""
PGN Lexer - Tokenizes chess game records into tokens.

Handles:
- Header brackets [] and quoted strings
- Move numbers, dots and ellipses
- Piece letters, files and ranks (a square is two tokens: file, rank)
- Capture, promotion, check and checkmate markers
- Castling (O-O, O-O-O)
- Result markers (1-0, 0-1, 1/2-1/2, *)
- Comments ({...} and ; to end of line)
"""

from enum import Enum, auto
from dataclasses import dataclass
import string
from typing import Any, List, Optional

from ..diagnostics import (
    Diagnostics, UNKNOWN_CHARACTER, UNTERMINATED_STRING, MALFORMED_CASTLE,
    UNTERMINATED_COMMENT,
)


class TokenKind(Enum):
    """PGN token kinds."""
    EOF = auto()

    # Literals
    IDENT = auto()       # Event, N, e
    STRING = auto()      # "text"
    NUMBER = auto()      # 12

    # Move number separators
    DOT = auto()         # .
    ELLIPSIS = auto()    # ...

    # Header delimiters
    L_BRACKET = auto()   # [
    R_BRACKET = auto()   # ]

    # Move suffixes and markers
    PLUS = auto()        # + (check)
    HASH = auto()        # # (checkmate)
    PROMOTION = auto()   # =
    CAPTURE = auto()     # x

    # Castling
    S_CASTLE = auto()    # O-O
    L_CASTLE = auto()    # O-O-O

    RESULT = auto()      # 1-0, 0-1, 1/2-1/2, *


@dataclass(frozen=True)
class Token:
    """Represents a single token."""
    kind: TokenKind
    lexeme: str
    literal: Any
    line: int
    column: int = 0

    def __repr__(self):
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"


DIGITS = '0123456789'
LETTERS = string.ascii_letters
FILES = 'abcdefgh'

# Longest first; each starts with a single digit
RESULT_PATTERNS = ('1/2-1/2', '1-0', '0-1')
RESULT_WINDOW = max(len(p) for p in RESULT_PATTERNS)


class Lexer:
    """Tokenizes PGN source text."""

    def __init__(self, source: str, filename: str = "<input>",
                 diagnostics: Optional[Diagnostics] = None,
                 hash_emits_result: bool = False):
        self.source = source
        self.filename = filename
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(filename)
        # Emit RESULT '#' after every HASH, like the older tokenizer did
        self.hash_emits_result = hash_emits_result
        self.pos = 0
        self.start = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def error(self, code: str, message: str, line: Optional[int] = None,
              column: Optional[int] = None):
        """Report a lexical error and keep scanning."""
        self.diagnostics.report(
            code, message,
            self.line if line is None else line,
            self.column if column is None else column,
        )

    def peek(self, offset: int = 0) -> Optional[str]:
        """Peek at character at current position + offset."""
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return None

    def advance(self) -> Optional[str]:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return None

        ch = self.source[self.pos]
        self.pos += 1

        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return ch

    def add_token(self, kind: TokenKind, line: int, column: int, literal: Any = None):
        """Append a token whose lexeme runs from self.start to the cursor."""
        lexeme = self.source[self.start:self.pos]
        self.tokens.append(Token(kind, lexeme, literal, line, column))

    def skip_whitespace(self):
        """Skip whitespace characters."""
        while self.peek() and self.peek() in ' \t\n\r\f':
            self.advance()

    def skip_comment(self):
        """Skip a brace comment {...} or a ; comment running to end of line."""
        if self.peek() == ';':
            while self.peek() and self.peek() != '\n':
                self.advance()
            return

        start_line = self.line
        start_col = self.column
        self.advance()  # {
        while self.peek() and self.peek() != '}':
            self.advance()

        if self.peek() != '}':
            self.error(UNTERMINATED_COMMENT,
                       f"Unterminated comment starting at {start_line}:{start_col}",
                       start_line, start_col)
            return
        self.advance()  # }

    def read_string(self) -> Optional[str]:
        """Read a string literal, or None if it runs off the end of input."""
        start_line = self.line
        start_col = self.column

        self.advance()  # opening "
        chars = []

        while self.peek() and self.peek() != '"':
            chars.append(self.advance())

        if self.peek() != '"':
            self.error(UNTERMINATED_STRING,
                       f"Unterminated string starting at {start_line}:{start_col}",
                       start_line, start_col)
            return None

        self.advance()  # closing "
        return ''.join(chars)

    def read_number(self) -> Optional[int]:
        """Read a digit run; None means a result marker was consumed instead.

        Move numbers and results share their first character, so the
        decision is made on a fixed window starting at the digit run.
        """
        while self.peek() and self.peek() in DIGITS:
            self.advance()

        window = self.source[self.start:self.start + RESULT_WINDOW]
        for pattern in RESULT_PATTERNS:
            if window.startswith(pattern):
                while self.pos < self.start + len(pattern):
                    self.advance()
                return None

        return int(self.source[self.start:self.pos])

    def read_identifier(self) -> str:
        """Read an identifier.

        Digits never continue an identifier, so e4 is IDENT e + NUMBER 4.
        An identifier also stops before an 'x' (always a capture) and before
        a file letter followed by a digit, so Nf3 is N + f + 3.
        """
        chars = [self.advance()]
        while self.peek() and self.is_ident_char(self.peek()):
            if self.at_square():
                break
            chars.append(self.advance())
        return ''.join(chars)

    def is_ident_char(self, ch: str) -> bool:
        """Check if character can continue an identifier."""
        return (ch in LETTERS or ch in '_-') and ch != 'x'

    def at_square(self) -> bool:
        """Check if the cursor sits on a file letter followed by a rank digit."""
        next_ch = self.peek(1)
        return self.peek() in FILES and next_ch is not None and next_ch in DIGITS

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source text."""
        while self.pos < len(self.source):
            self.skip_whitespace()

            if self.pos >= len(self.source):
                break

            ch = self.peek()
            line = self.line
            col = self.column
            self.start = self.pos

            # Comments produce no tokens
            if ch in '{;':
                self.skip_comment()
                continue

            # Header delimiters
            if ch == '[':
                self.advance()
                self.add_token(TokenKind.L_BRACKET, line, col)
            elif ch == ']':
                self.advance()
                self.add_token(TokenKind.R_BRACKET, line, col)

            # Dot or ellipsis (up to three dots)
            elif ch == '.':
                dots = 0
                while dots < 3 and self.peek() == '.':
                    self.advance()
                    dots += 1
                kind = TokenKind.ELLIPSIS if dots == 3 else TokenKind.DOT
                self.add_token(kind, line, col)

            # Capture marker, wherever it appears
            elif ch == 'x':
                self.advance()
                self.add_token(TokenKind.CAPTURE, line, col)

            elif ch == '+':
                self.advance()
                self.add_token(TokenKind.PLUS, line, col)
            elif ch == '#':
                self.advance()
                self.add_token(TokenKind.HASH, line, col)
                if self.hash_emits_result:
                    self.add_token(TokenKind.RESULT, line, col)
            elif ch == '*':
                self.advance()
                self.add_token(TokenKind.RESULT, line, col)
            elif ch == '=':
                self.advance()
                self.add_token(TokenKind.PROMOTION, line, col)

            # String
            elif ch == '"':
                value = self.read_string()
                if value is not None:
                    self.add_token(TokenKind.STRING, line, col, value)

            # Castling: O-O-O before O-O; a bare O starts an identifier
            elif ch == 'O' and self.peek(1) == '-':
                if self.source.startswith('O-O-O', self.pos):
                    for _ in range(5):
                        self.advance()
                    self.add_token(TokenKind.L_CASTLE, line, col)
                elif self.source.startswith('O-O', self.pos):
                    for _ in range(3):
                        self.advance()
                    self.add_token(TokenKind.S_CASTLE, line, col)
                else:
                    self.advance()  # O
                    self.advance()  # -
                    self.error(MALFORMED_CASTLE, "Expected 'O-O' or 'O-O-O'", line, col)

            # Number or result marker
            elif ch in DIGITS:
                value = self.read_number()
                if value is None:
                    self.add_token(TokenKind.RESULT, line, col)
                else:
                    self.add_token(TokenKind.NUMBER, line, col, value)

            # Identifier
            elif ch in LETTERS or ch in '_-':
                self.read_identifier()
                self.add_token(TokenKind.IDENT, line, col)

            else:
                self.advance()
                self.error(UNKNOWN_CHARACTER, f"Unexpected character: {ch!r}", line, col)

        # Add EOF token
        self.tokens.append(Token(TokenKind.EOF, '', None, self.line, self.column))
        return self.tokens


def tokenize(source: str, filename: str = "<input>",
             diagnostics: Optional[Diagnostics] = None,
             hash_emits_result: bool = False) -> List[Token]:
    """Convenience function to tokenize PGN source text."""
    lexer = Lexer(source, filename, diagnostics, hash_emits_result)
    return lexer.tokenize()
