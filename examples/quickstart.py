"""
Quickstart example for NeonSweeper.

This script demonstrates basic usage of the board, the probability engine
and the assistant.
"""

import random

from neonsweeper import (
    Board,
    GameSession,
    compute_probabilities,
    format_probability_map,
    run_assistant_many_tests,
)


def main():
    print("=" * 60)
    print("NeonSweeper - Quickstart Example")
    print("=" * 60)

    # Example 1: Open a board and read the probability map
    print("\n1. Opening a standard board (10x10, 15 mines) at (5, 5)...")
    print("-" * 60)

    board = Board(10, 15, random.Random(7))
    result = board.reveal(5, 5)
    print(f"Revealed {len(result.cells)} cells, state: {board.state.value}")
    print(format_probability_map(board, compute_probabilities(board)))

    # Example 2: Let a session's assistant play its certain moves
    print("\n2. Auto-solving certain moves through a session...")
    print("-" * 60)

    session = GameSession(rng=random.Random(7))
    session.reveal(5, 5)
    session.toggle_probability_engine()
    print(session.get_hint().message())
    outcome = session.auto_solve()
    print(outcome.message())
    session.run_pending()
    print(session.board.format_board(color=False))

    report = session.deep_analysis()
    if report is not None:
        print(report.summary())

    # Example 3: Run multiple games for statistics
    print("\n3. Running 50 assistant-driven games...")
    print("-" * 60)

    results = run_assistant_many_tests(10, 15, 50)
    print(f"Win rate: {results['win_rate']*100:.1f}%")
    print(f"Average certain moves per game: {results['avg_certain_moves_count']:.1f}")
    print(f"Average guesses per game: {results['avg_guesses_count']:.1f}")

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
