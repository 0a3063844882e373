"""
Test helpers for the PGN reader tests.

- lex(): tokenize a string and keep the diagnostics
- kinds(): token kinds of a string, without the trailing EOF
- parse_one(): parse a string that holds a single game
"""

import sys
from pathlib import Path
from typing import List, Tuple

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pgnast.diagnostics import Diagnostics
from pgnast.lexer import Lexer, Token, TokenKind
from pgnast.parser import Parser, Program, Game


def lex(source: str, **options) -> Tuple[List[Token], Diagnostics]:
    diagnostics = Diagnostics()
    tokens = Lexer(source, diagnostics=diagnostics, **options).tokenize()
    return tokens, diagnostics


def kinds(source: str, **options) -> List[TokenKind]:
    tokens, _ = lex(source, **options)
    assert tokens[-1].kind == TokenKind.EOF
    return [t.kind for t in tokens[:-1]]


def parse_program(source: str, **options) -> Tuple[Program, Diagnostics]:
    tokens, diagnostics = lex(source, **options)
    program = Parser(tokens, diagnostics=diagnostics).parse()
    return program, diagnostics


def parse_one(source: str, **options) -> Tuple[Game, Diagnostics]:
    program, diagnostics = parse_program(source, **options)
    assert len(program.games) == 1, program
    return program.games[0], diagnostics
