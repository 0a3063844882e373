"""
PGN Parser - Builds Abstract Syntax Tree from tokens.

Recursive descent with a single forward cursor and one token of lookahead.
Malformed input never stops the parse: each mismatch is reported to the
diagnostics collector and the parser moves on with whatever it has.
"""

from typing import List, Optional

from ..diagnostics import (
    Diagnostics, HEADER_TOKEN, MISSING_FILE, MISSING_RANK, MISSING_PROMOTION,
)
from ..lexer import Token, TokenKind
from ..lexer.lexer import FILES
from .ast_nodes import *


class Parser:
    """Parses PGN tokens into an Abstract Syntax Tree."""

    def __init__(self, tokens: List[Token], filename: str = "<input>",
                 diagnostics: Optional[Diagnostics] = None):
        tokens = list(tokens)
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            line = tokens[-1].line if tokens else 1
            tokens.append(Token(TokenKind.EOF, '', None, line))
        self.tokens = tokens
        self.filename = filename
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(filename)
        self.pos = 0
        self.current_token = self.tokens[0]

    def error(self, code: str, message: str, token: Optional[Token] = None):
        """Report a structural error at a token (the current one by default)."""
        token = token or self.current_token
        self.diagnostics.report(code, message, token.line, token.column)

    def peek(self, offset: int = 0) -> Optional[Token]:
        """Peek at token at current position + offset."""
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    def advance(self) -> Token:
        """Consume and return current token. The cursor never moves past EOF."""
        token = self.current_token
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
            self.current_token = self.tokens[self.pos]
        return token

    def check(self, kind: TokenKind) -> bool:
        return self.current_token.kind == kind

    def expect(self, kind: TokenKind, what: str, code: str = HEADER_TOKEN) -> Token:
        """Consume the current token, reporting if it is not of the expected kind.

        The token is taken either way so that the parse keeps moving.
        """
        token = self.advance()
        if token.kind != kind:
            self.error(code, f"Expected {kind.name} ({what}), got {token.kind.name} "
                             f"({token.lexeme!r}) on line {token.line}", token)
        return token

    def parse(self) -> Program:
        """Parse every game in the token stream."""
        games = []
        while not self.check(TokenKind.EOF):
            games.append(self.parse_game())
        return Program(tuple(games))

    def parse_game(self) -> Game:
        """Parse headers, then moves up to a result or EOF, then the result."""
        line = self.current_token.line

        headers = []
        while self.check(TokenKind.L_BRACKET):
            headers.append(self.parse_header())

        moves = []
        while not self.check(TokenKind.RESULT) and not self.check(TokenKind.EOF):
            moves.append(self.parse_move())

        result = self.parse_result()
        return Game(tuple(headers), tuple(moves), result, line)

    def parse_header(self) -> Header:
        """Parse [Key "Value"]: always exactly four tokens."""
        start = self.expect(TokenKind.L_BRACKET, "'[' at header start")
        key = self.expect(TokenKind.IDENT, "header key")
        value = self.expect(TokenKind.STRING, "header value")
        self.expect(TokenKind.R_BRACKET, "']' at header end")

        text = value.literal if value.kind == TokenKind.STRING else value.lexeme
        return Header(key.lexeme, text, start.line)

    def parse_move(self):
        """Parse one half-move.

        Grammar:
            [Number] ["." | "..."] [Piece] ["x"] File Rank ["=" Piece] ["+" | "#"]
            [Number] ["." | "..."] ("O-O" | "O-O-O") ["+" | "#"]
        """
        line = self.current_token.line

        number = None
        if self.check(TokenKind.NUMBER):
            number = self.advance().literal

        if self.check(TokenKind.DOT) or self.check(TokenKind.ELLIPSIS):
            self.advance()

        if self.check(TokenKind.S_CASTLE) or self.check(TokenKind.L_CASTLE):
            return self.parse_castle(number, line)

        piece = None
        from_file = None
        from_rank = None
        if self.check(TokenKind.IDENT) and self.current_token.lexeme[0] in PIECES:
            text = self.advance().lexeme
            piece = text[0]
            # Nbd7: the lexer keeps the origin file with the piece letter
            if len(text) == 2 and text[1] in FILES:
                from_file = text[1]
            # R1e2: a rank before the destination file
            if self.check(TokenKind.NUMBER):
                from_rank = self.advance().literal

        capture = False
        if self.check(TokenKind.CAPTURE):
            capture = True
            self.advance()

        file = self.parse_file()

        # exd5: the file already read was the origin
        if not capture and file and self.check(TokenKind.CAPTURE):
            if from_file is None:
                from_file = file
            capture = True
            self.advance()
            file = self.parse_file()

        rank_token = self.current_token
        rank = self.parse_rank()

        # Qh4e1, Qh4xe1: the square already read was the origin
        if piece and rank and self.written_together(rank_token) and (
                self.check(TokenKind.CAPTURE) or self.at_file()):
            from_file, from_rank = file, rank
            if self.check(TokenKind.CAPTURE):
                capture = True
                self.advance()
            file = self.parse_file()
            rank = self.parse_rank()

        promotion = None
        if self.check(TokenKind.PROMOTION):
            self.advance()
            if self.check(TokenKind.IDENT):
                promotion = self.advance().lexeme
            else:
                self.error(MISSING_PROMOTION, "Expected promotion piece")
                self.skip_unexpected()

        check, checkmate = self.parse_check()

        return Move(
            to=Square(file, rank),
            number=number,
            piece=piece,
            from_file=from_file,
            from_rank=from_rank,
            capture=capture,
            promotion=promotion,
            check=check,
            checkmate=checkmate,
            line=line,
        )

    def parse_rank(self) -> int:
        """Destination rank; reported and left 0 when missing."""
        if self.check(TokenKind.NUMBER):
            return self.advance().literal
        self.error(MISSING_RANK, f"Expected destination rank, got "
                                 f"{self.current_token.kind.name} "
                                 f"({self.current_token.lexeme!r})")
        self.skip_unexpected()
        return 0

    def at_file(self) -> bool:
        """Check if the current token is a single file letter."""
        token = self.current_token
        return token.kind == TokenKind.IDENT and len(token.lexeme) == 1 and token.lexeme in FILES

    def written_together(self, token: Token) -> bool:
        """Check if the current token follows token with no space between."""
        current = self.current_token
        return (current.line == token.line
                and current.column == token.column + len(token.lexeme))

    def parse_file(self) -> str:
        """Destination file; reported and left empty when missing."""
        if self.check(TokenKind.IDENT):
            return self.advance().lexeme
        self.error(MISSING_FILE, f"Expected destination file, got "
                                 f"{self.current_token.kind.name} "
                                 f"({self.current_token.lexeme!r})")
        return ""

    def skip_unexpected(self):
        """Step over the offending token so the parse cannot stall.

        A result marker is left alone: it closes the current game.
        """
        if not self.check(TokenKind.RESULT):
            self.advance()

    def parse_check(self):
        """Trailing + or #; the first one found wins."""
        if self.check(TokenKind.PLUS):
            self.advance()
            return True, False
        if self.check(TokenKind.HASH):
            self.advance()
            return False, True
        return False, False

    def parse_castle(self, number: Optional[int], line: int) -> Castle:
        """Parse O-O / O-O-O with an optional check suffix."""
        token = self.advance()
        check, checkmate = self.parse_check()
        return Castle(
            long=token.kind == TokenKind.L_CASTLE,
            number=number,
            check=check,
            checkmate=checkmate,
            line=line,
        )

    def parse_result(self) -> Result:
        """Result marker, or an empty Result when the game has none."""
        if self.check(TokenKind.RESULT):
            token = self.advance()
            return Result(token.lexeme, token.line)
        return Result("", self.current_token.line)
