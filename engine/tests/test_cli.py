"""Tests for the move lister CLI."""

import io
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.moves import main, show_color_moves
from hive.core.board import Color
from hive.core.notation import dsl_to_board

QUEEN_TYPICAL = (
    " . . . . . . .\n"
    ". . a a . . .\n"
    " . a . a . . .\n"
    ". a . . Q . .\n"
    " . . . . . . .\n"
    ". . . . . . .\n"
    "\n"
    "start - [0 0]\n"
)

QUEEN_PINNED = (
    " . . . . . . .\n"
    ". . a . . . .\n"
    " . a . a . . .\n"
    ". a . . Q . .\n"
    " . a a a . . .\n"
    ". . . . . . .\n"
    "\n"
    "start - [0 0]\n"
)


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.txt"
    path.write_text(QUEEN_TYPICAL)
    return path


class TestPieceMoves:
    def test_lists_destinations(self, board_file, capsys):
        assert main([str(board_file), '--at', '2', '3']) == 0
        out = capsys.readouterr().out
        assert "Queen (white) at 2,3: 2 moves" in out
        assert out.count('*') == 2

    def test_show_boards(self, board_file, capsys):
        main([str(board_file), '--at', '2', '3', '--show-boards'])
        out = capsys.readouterr().out
        assert out.count("start - [") == 3

    def test_pinned_piece(self, tmp_path, capsys):
        path = tmp_path / "pinned.txt"
        path.write_text(QUEEN_PINNED)
        main([str(path), '--at', '2', '3'])
        out = capsys.readouterr().out
        assert "0 moves" in out
        assert "Pinned" in out

    def test_empty_cell_is_usage_error(self, board_file):
        with pytest.raises(SystemExit) as excinfo:
            main([str(board_file), '--at', '9', '9'])
        assert excinfo.value.code == 2

    def test_unsupported_kind_is_usage_error(self, tmp_path):
        path = tmp_path / "beetle.txt"
        path.write_text(". B Q\n\nstart - [0 0]\n")
        with pytest.raises(SystemExit):
            main([str(path), '--at', '1', '0'])

    def test_stacked_piece_is_usage_error(self, tmp_path, capsys):
        """A queen on top of a stack would need a climbing rule."""
        path = tmp_path / "stack.txt"
        path.write_text(
            " . . . .\n"
            ". 2 A .\n"
            " . . . .\n"
            "\n"
            "start - [ 0, -1 ]\n"
            "2 - [ a Q ]\n"
        )
        with pytest.raises(SystemExit) as excinfo:
            main([str(path), '--at', '0', '0'])
        assert excinfo.value.code == 2
        assert "part of a stack" in capsys.readouterr().err


class TestColorMoves:
    def test_both_colors(self, board_file, capsys):
        main([str(board_file)])
        out = capsys.readouterr().out
        assert "White: 2 moves" in out
        assert "Black:" in out

    def test_single_color(self, board_file, capsys):
        main([str(board_file), '--color', 'white'])
        out = capsys.readouterr().out
        assert "White: 2 moves" in out
        assert "Black:" not in out
        assert "  Q 2,3 -> " in out

    def test_show_color_moves_count(self, capsys):
        board = dsl_to_board(QUEEN_TYPICAL)
        assert show_color_moves(board, Color.WHITE) == 2


class TestInput:
    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'stdin', io.StringIO(QUEEN_TYPICAL))
        main(['-', '--color', 'white'])
        assert "White: 2 moves" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit):
            main([str(tmp_path / "nope.txt")])

    def test_bad_notation(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text(". X .\n\nstart - [0 0]\n")
        with pytest.raises(SystemExit):
            main([str(path)])
