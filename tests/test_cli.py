import random

import pytest

from neonsweeper import cli
from neonsweeper.engine import Board, GameState
from neonsweeper.session import GameSession


def feed(monkeypatch, lines):
    it = iter(lines)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


def test_play_cli_hint_and_auto_solve(monkeypatch, capsys):
    monkeypatch.setattr(cli.time, "sleep", lambda seconds: None)
    session = GameSession(rng=random.Random(0), notify=cli._print_event)
    session.load_board(Board.from_mines(3, [(0, 0), (2, 2)]))
    feed(monkeypatch, ["r 0 2", "r 1,0", "p", "h", "f 0 0", "a", "q"])

    cli.play_cli(session)

    out = capsys.readouterr().out
    assert "Mission started" in out
    assert "Cell (0,0) is 100% MINE" in out
    assert "Auto-solving 2 certain moves..." in out
    assert "MISSION ACCOMPLISHED" in out
    assert "Final score:" in out
    assert session.get_game_state() is GameState.VICTORY


def test_play_cli_rejects_bad_input(monkeypatch, capsys):
    session = GameSession(rng=random.Random(0))
    feed(monkeypatch, ["r 1", "r a b", "r 99 0", "p", "d", "zzz", "q"])

    cli.play_cli(session)

    out = capsys.readouterr().out
    assert "Example: r 3 5" in out
    assert "Coordinates must be integers" in out
    assert "outside the board" in out
    assert "AI Protocol requires active game state" in out
    assert "Deep analysis requires an active game state" in out
    assert "Commands" in out
    assert session.get_game_state() is GameState.STANDBY


def test_main_with_seed(monkeypatch, capsys):
    feed(monkeypatch, ["r 4 4", "n", "q"])
    cli.main(["--preset", "beginner", "--seed", "4"])
    out = capsys.readouterr().out
    assert "New mission initiated" in out


def test_main_rejects_bad_dimensions(monkeypatch):
    with pytest.raises(SystemExit):
        cli.main(["--size", "3", "--mines", "9"])
