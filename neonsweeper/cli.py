"""Terminal front end."""

import argparse
import logging
import random
import time
from typing import List, Optional

from .config import DIFFICULTY_PRESETS, GameConfig
from .engine import GameState
from .session import EventKind, GameEvent, GameSession
from .utils import format_elapsed

HELP_TEXT = """Commands (coordinates are 0-based row col):
  r ROW COL   reveal a cell
  f ROW COL   toggle a flag
  p           toggle the probability engine
  h           ask for a hint
  a           auto-solve every certain move
  d           deep analysis report
  n           new game
  q           quit"""


def _print_event(event: GameEvent) -> None:
    if event.kind is EventKind.STARTED:
        print("Mission started. Analyzing minefield patterns...")
    elif event.kind is EventKind.GAME_OVER:
        print("\nCRITICAL FAILURE: Mine detonated! Mission failed.")
    elif event.kind is EventKind.VICTORY:
        print("\nMISSION ACCOMPLISHED! All safe cells revealed.")


def _show(session: GameSession) -> None:
    board = session.board
    probabilities = session.probabilities if session.engine_active else None
    print(board.format_board(reveal_all=board.state.is_terminal, probabilities=probabilities))
    print(
        f"State: {board.state.value}  Mines left: {board.remaining_mine_estimate()}  "
        f"Time: {format_elapsed(session.elapsed())}  Accuracy: {board.accuracy()}%  "
        f"AI: {'ONLINE' if session.engine_active else 'OFFLINE'}"
    )


def _parse_cell(parts: List[str]) -> Optional[List[int]]:
    if len(parts) != 3:
        print("Invalid input. Example: r 3 5")
        return None
    try:
        return [int(parts[1]), int(parts[2])]
    except ValueError:
        print("Invalid input. Coordinates must be integers.")
        return None


def play_cli(session: GameSession) -> None:
    """
    Run a simple terminal UI for playing against a session.

    Args:
        session: The GameSession to play; its notify sink should be _print_event
            or similar for transition messages.
    """
    print("NeonSweeper CLI. Type 'help' for commands, 'q' to quit.\n")
    _show(session)

    while True:
        s = input("\n> ").strip()
        parts = s.replace(",", " ").split()
        if not parts:
            continue
        command = parts[0].lower()

        if command in {"q", "quit", "exit"}:
            print("Quit.")
            return

        if command == "help":
            print(HELP_TEXT)
            continue

        if command in {"r", "f"}:
            coords = _parse_cell(parts)
            if coords is None:
                continue
            row, col = coords
            if not (0 <= row < session.board.size and 0 <= col < session.board.size):
                print("Cell coordinates are outside the board.")
                continue
            if command == "r":
                result = session.reveal(row, col)
            else:
                result = session.toggle_flag(row, col)
            if not result.effective:
                print("Nothing to do on that cell.")
        elif command == "p":
            if not session.toggle_probability_engine():
                print("AI Protocol requires active game state.")
        elif command == "h":
            print(session.get_hint().message())
        elif command == "a":
            outcome = session.auto_solve()
            print(outcome.message())
            while session.step():
                time.sleep(session.config.auto_solve_step_delay)
        elif command == "d":
            report = session.deep_analysis()
            print(report.summary() if report else "Deep analysis requires an active game state.")
        elif command == "n":
            session.new_game()
            print("New mission initiated. Scanning for optimal entry points...")
        else:
            print(HELP_TEXT)
            continue

        session.run_pending()
        _show(session)

        if session.board.state is GameState.VICTORY:
            print(f"Final score: {session.score}")
        if session.board.state.is_terminal:
            stats = session.stats
            print(
                f"Games played: {stats.games_played}  Win rate: {stats.win_rate}%  "
                f"Best time: {format_elapsed(stats.best_time) if stats.best_time is not None else '--:--'}"
            )
            print("Type 'n' for a new game or 'q' to quit.")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play NeonSweeper in the terminal.")
    parser.add_argument("--preset", choices=sorted(DIFFICULTY_PRESETS), default="standard")
    parser.add_argument("--size", type=int, help="Board side length (overrides the preset).")
    parser.add_argument("--mines", type=int, help="Mine count (overrides the preset).")
    parser.add_argument("--seed", type=int, help="Seed for reproducible boards.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log assistant reasoning.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    size, mines = DIFFICULTY_PRESETS[args.preset]
    try:
        config = GameConfig(
            size=args.size if args.size is not None else size,
            mine_count=args.mines if args.mines is not None else mines,
        )
    except ValueError as exc:
        parser.error(str(exc))

    session = GameSession(config, rng=random.Random(args.seed), notify=_print_event)
    play_cli(session)


if __name__ == "__main__":
    main()
