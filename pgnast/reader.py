"""
Main PGN reader.

Coordinates lexing and parsing for one call and hands back the tree together
with the diagnostics collected along the way.
"""

import sys
import json
import dataclasses
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .diagnostics import Diagnostic, Diagnostics, PGNSyntaxError
from .lexer import Lexer, Token
from .parser import Parser, Program, Castle


@dataclass(frozen=True)
class ParseResult:
    """Tree plus everything reported while building it."""
    program: Program
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def clean(self) -> bool:
        """True when nothing at all was reported."""
        return not self.diagnostics

    @property
    def games(self):
        return self.program.games


class PGNReader:
    """Main reader class."""

    def __init__(self, verbose: bool = False, strict: bool = False,
                 hash_emits_result: bool = False):
        self.verbose = verbose
        self.strict = strict  # Stop at the first diagnostic
        self.hash_emits_result = hash_emits_result  # '#' also yields RESULT '#'

    def log(self, message: str):
        """Print log message if verbose mode is enabled."""
        if self.verbose:
            print(f"[pgnast] {message}", file=sys.stderr)

    def warn(self, diagnostic: Diagnostic):
        """Echo a diagnostic as it is reported, in verbose mode."""
        if self.verbose:
            print(f"[pgnast] Warning: {diagnostic}", file=sys.stderr)

    def new_diagnostics(self, filename: str) -> Diagnostics:
        return Diagnostics(filename, strict=self.strict, listener=self.warn)

    def tokenize_string(self, source: str, filename: str = "<input>") -> Tuple[List[Token], Tuple[Diagnostic, ...]]:
        """Tokenize only; returns the tokens and the lexical diagnostics."""
        diagnostics = self.new_diagnostics(filename)
        lexer = Lexer(source, filename, diagnostics, self.hash_emits_result)
        tokens = lexer.tokenize()
        return tokens, tuple(diagnostics)

    def parse_string(self, source: str, filename: str = "<input>") -> ParseResult:
        """
        Parse PGN source text.

        Args:
            source: One or more concatenated game records
            filename: Name used in diagnostic locations

        Returns:
            ParseResult with the Program and all diagnostics

        Raises:
            PGNSyntaxError: in strict mode, for the first diagnostic
        """
        diagnostics = self.new_diagnostics(filename)

        self.log(f"Tokenizing {filename}...")
        lexer = Lexer(source, filename, diagnostics, self.hash_emits_result)
        tokens = lexer.tokenize()
        self.log(f"  {len(tokens)} tokens")

        self.log("Parsing...")
        parser = Parser(tokens, filename, diagnostics)
        program = parser.parse()
        self.log(f"  {len(program.games)} games, {len(diagnostics)} diagnostics")

        return ParseResult(program, tuple(diagnostics))


def parse(source: str, filename: str = "<input>", *, strict: bool = False,
          hash_emits_result: bool = False, verbose: bool = False) -> ParseResult:
    """Convenience function to parse PGN source text."""
    reader = PGNReader(verbose=verbose, strict=strict,
                       hash_emits_result=hash_emits_result)
    return reader.parse_string(source, filename)


def to_dict(program: Program) -> dict:
    """Plain-data view of a Program, with a 'type' tag on every move."""
    games = []
    for game in program.games:
        moves = []
        for move in game.moves:
            data = dataclasses.asdict(move)
            data['type'] = 'castle' if isinstance(move, Castle) else 'move'
            moves.append(data)
        games.append({
            'headers': [{'key': h.key, 'value': h.value} for h in game.headers],
            'moves': moves,
            'result': game.result.value,
        })
    return {'games': games}


def format_game(index: int, game) -> str:
    """One-line-per-game summary used by the command line."""
    event = game.header('Event', '?')
    white = game.header('White', '?')
    black = game.header('Black', '?')
    result = game.result.value or '(none)'
    return (f"Game {index}: {event}: {white} - {black}, "
            f"{len(game.moves)} half-moves, result {result}")


def main(argv: Optional[List[str]] = None):
    """Command-line interface for the reader."""
    import argparse

    parser = argparse.ArgumentParser(
        description='PGN reader - Parse chess game records into a syntax tree'
    )
    parser.add_argument('input', nargs='?', default='-',
                        help='Input .pgn file (default: standard input)')
    output = parser.add_mutually_exclusive_group()
    output.add_argument('--json', action='store_true',
                        help='Print the syntax tree as JSON')
    output.add_argument('--tokens', action='store_true',
                        help='Print the token stream instead of parsing')
    parser.add_argument('--strict', action='store_true',
                        help='Stop at the first diagnostic')
    parser.add_argument('--hash-result', action='store_true',
                        help="Emit a RESULT token after every '#' (older tokenizer behaviour)")
    parser.add_argument('--verbose', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)

    reader = PGNReader(verbose=args.verbose, strict=args.strict,
                       hash_emits_result=args.hash_result)

    try:
        if args.input == '-':
            filename = '<stdin>'
            source = sys.stdin.read()
        else:
            filename = args.input
            reader.log(f"Reading {filename}...")
            with open(filename, 'r', encoding='utf-8') as f:
                source = f.read()

        if args.tokens:
            tokens, diagnostics = reader.tokenize_string(source, filename)
            for token in tokens:
                print(repr(token))
        else:
            result = reader.parse_string(source, filename)
            diagnostics = result.diagnostics
            if args.json:
                print(json.dumps(to_dict(result.program), indent=2))
            else:
                for index, game in enumerate(result.games, 1):
                    print(format_game(index, game))
    except PGNSyntaxError as e:
        print(f"Error: {e.diagnostic}", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    if not args.verbose:
        for diagnostic in diagnostics:
            print(diagnostic, file=sys.stderr)

    sys.exit(0 if not diagnostics else 1)


if __name__ == '__main__':
    main()
