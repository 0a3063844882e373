"""
Tests for the reader: the parse() entry point, strict mode, verbose logging
and the command line.
"""

import io
import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from pgnast import parse, PGNReader, PGNSyntaxError
from pgnast.diagnostics import UNTERMINATED_STRING, MISSING_RANK
from pgnast.lexer import TokenKind
from pgnast.reader import main, to_dict


SAMPLE = '''[Event "Casual Game"]
[White "Anderssen"]
[Black "Kieseritzky"]
1. e4 e5 2. f4 exf4 3. Bc4 Qh4+ 4. Kf1 b5 1-0
'''


def run_cli(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    out, err = capsys.readouterr()
    return exc.value.code, out, err


class TestParse:
    """Tests for the parse() convenience function."""

    def test_clean_parse(self):
        result = parse(SAMPLE)

        assert result.clean
        assert result.diagnostics == ()
        assert len(result.games) == 1
        game = result.games[0]
        assert game.header("White") == "Anderssen"
        assert len(game.moves) == 8
        assert game.moves[3].from_file == "e"
        assert game.moves[5].check is True
        assert game.result.value == "1-0"

    def test_degraded_parse_still_returns_tree(self):
        result = parse('[Event "Unfinished')

        assert not result.clean
        assert result.diagnostics[0].code == UNTERMINATED_STRING
        assert len(result.program.games) == 1

    def test_diagnostic_location(self):
        result = parse("1. e4 e *", filename="game.pgn")
        diagnostic = result.diagnostics[0]

        assert diagnostic.code == MISSING_RANK
        assert str(diagnostic).startswith("game.pgn:1:9: PGN0203: ")
        assert not diagnostic.lexical

    def test_strict_mode_raises(self):
        with pytest.raises(PGNSyntaxError) as exc:
            parse('[Event "Unfinished', strict=True)

        assert exc.value.diagnostic.code == UNTERMINATED_STRING
        assert exc.value.lineno == 1
        assert isinstance(exc.value, SyntaxError)

    def test_strict_mode_clean_input(self):
        assert parse(SAMPLE, strict=True).clean

    def test_hash_compatibility_flag(self):
        result = parse("1. f3 e5 2. g4 Qh4#", hash_emits_result=True)
        assert result.games[0].result.value == "#"

    def test_verbose_logs_to_stderr(self, capsys):
        PGNReader(verbose=True).parse_string("e4 e5 !", "moves.pgn")
        err = capsys.readouterr().err

        assert "[pgnast] Tokenizing moves.pgn..." in err
        assert "[pgnast] Warning: moves.pgn:1:7: PGN0101" in err

    def test_quiet_by_default(self, capsys):
        parse("e4 !")
        assert capsys.readouterr().err == ""

    def test_tokenize_string(self):
        tokens, diagnostics = PGNReader().tokenize_string("1-0")
        assert [t.kind for t in tokens] == [TokenKind.RESULT, TokenKind.EOF]
        assert diagnostics == ()

    def test_independent_calls(self):
        """Parallel parses never see each other's tokens or diagnostics."""
        sources = [SAMPLE, "1. d4 d5 0-1", '[Event "x', "O-O O-O-O *"] * 25

        expected = [parse(s) for s in sources]
        with ThreadPoolExecutor(max_workers=8) as pool:
            actual = list(pool.map(parse, sources))

        assert actual == expected

    def test_to_dict(self):
        data = to_dict(parse("1. O-O exd5 *").program)

        moves = data["games"][0]["moves"]
        assert moves[0]["type"] == "castle"
        assert moves[1]["type"] == "move"
        assert moves[1]["to"] == {"file": "d", "rank": 5}
        assert data["games"][0]["result"] == "*"
        json.dumps(data)


class TestCommandLine:
    """Tests for the pgnast command."""

    def test_summary(self, tmp_path, capsys):
        path = tmp_path / "game.pgn"
        path.write_text(SAMPLE, encoding="utf-8")

        code, out, err = run_cli([str(path)], capsys)

        assert code == 0
        assert out.strip() == ("Game 1: Casual Game: Anderssen - Kieseritzky, "
                               "8 half-moves, result 1-0")
        assert err == ""

    def test_json(self, tmp_path, capsys):
        path = tmp_path / "game.pgn"
        path.write_text(SAMPLE, encoding="utf-8")

        code, out, _ = run_cli([str(path), "--json"], capsys)

        assert code == 0
        data = json.loads(out)
        assert data["games"][0]["headers"][0] == {"key": "Event", "value": "Casual Game"}

    def test_tokens_from_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("1. e4"))

        code, out, _ = run_cli(["--tokens"], capsys)

        assert code == 0
        assert out.splitlines()[0] == "Token(NUMBER, '1', 1:1)"
        assert out.splitlines()[-1].startswith("Token(EOF")

    def test_diagnostics_set_exit_status(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("1. e4 e *"))

        code, out, err = run_cli([], capsys)

        assert code == 1
        assert "result *" in out
        assert "<stdin>:1:9: PGN0203" in err

    def test_strict(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO('[Event "x'))

        code, out, err = run_cli(["--strict"], capsys)

        assert code == 1
        assert out == ""
        assert err.startswith("Error: <stdin>:1:8: PGN0102")

    def test_missing_file(self, tmp_path, capsys):
        code, _, err = run_cli([str(tmp_path / "nope.pgn")], capsys)

        assert code == 1
        assert err.startswith("Error: ")
