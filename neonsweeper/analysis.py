"""Analysis and benchmarking tools for the probability assistant."""

import random
from typing import Dict, List, Mapping, Optional

import matplotlib.pyplot as plt
import numpy as np

from .advisor import MoveAction, pick_guess, plan_certain_moves
from .config import DIFFICULTY_PRESETS
from .engine import Board, GameState, Position
from .probability import ai_confidence, compute_probabilities


def format_probability_map(
    board: Board, probabilities: Mapping[Position, int], *, show_coords: bool = True
) -> str:
    """
    Format a probability map over the board as a human-readable string.

    Args:
        board: Board the map was computed from.
        probabilities: Probability map (percentages).
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where revealed cells show their count, flagged cells 'F',
        mapped cells their percentage and anything else '.'.
    """
    n = board.size

    def cell_str(row: int, col: int) -> str:
        cell = board.grid[row][col]
        if cell.is_revealed:
            return "M" if cell.is_mine else str(cell.neighbor_mine_count)
        if cell.is_flagged:
            return "F"
        if (row, col) in probabilities:
            return str(probabilities[(row, col)])
        return "."

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{col:3d}" for col in range(n))
        lines.append("    " + header)
        lines.append("    " + "-" * (4 * n - 1))

    for row in range(n):
        cells = " ".join(f"{cell_str(row, col):>3}" for col in range(n))
        lines.append(f"{row:2d} |" + cells if show_coords else cells)

    return "\n".join(lines)


def run_assistant_single_test(
    size: int,
    mine_count: int,
    *,
    rng: Optional[random.Random] = None,
    show_boards: bool = False,
) -> Dict[str, int]:
    """
    Play one game driven only by the probability assistant.

    Opens the centre cell, then repeatedly applies every certain move from a
    fresh probability map, falling back to revealing the lowest-probability
    cell when nothing is certain.

    Args:
        size: Board side length.
        mine_count: Total number of mines.
        rng: Source of randomness for mine placement.
        show_boards: If True, print the final board and probability map.

    Returns:
        Payload with "status" (1 win, -1 loss) and move counters.
    """
    board = Board(size, mine_count, rng)
    reveal_moves = 0
    flag_moves = 0
    certain_moves = 0
    guesses = 0
    final_confidence = 0

    board.reveal(size // 2, size // 2)
    reveal_moves += 1

    while not board.state.is_terminal:
        probabilities = compute_probabilities(board)
        final_confidence = ai_confidence(probabilities)
        moves = plan_certain_moves(probabilities)

        if moves:
            for action, (row, col) in moves:
                if board.state.is_terminal:
                    break
                cell = board.grid[row][col]
                if cell.is_revealed or cell.is_flagged:
                    continue
                certain_moves += 1
                if action is MoveAction.REVEAL:
                    board.reveal(row, col)
                    reveal_moves += 1
                else:
                    board.toggle_flag(row, col)
                    flag_moves += 1
            continue

        guess = pick_guess(probabilities)
        if guess is None:
            raise RuntimeError("No unopened cell left on an unfinished board.")
        guesses += 1
        board.reveal(*guess)
        reveal_moves += 1

    if show_boards:
        print("Underlying board (mines visible):")
        print(board.format_board(reveal_all=True, color=False))
        print()
        print("Final probability map:")
        print(format_probability_map(board, compute_probabilities(board)))
        print()
        print(f"Finished in state {board.state.value}.")

    return {
        "status": 1 if board.state is GameState.VICTORY else -1,
        "reveal_moves_count": reveal_moves,
        "flag_moves_count": flag_moves,
        "certain_moves_count": certain_moves,
        "guesses_count": guesses,
        "revealed_cells_count": len(board.revealed_cells),
        "final_confidence": final_confidence,
    }


def run_assistant_many_tests(
    size: int,
    mine_count: int,
    runs: int,
    *,
    rng: Optional[random.Random] = None,
) -> Dict[str, float]:
    """
    Play many independent assistant-driven games and return averaged metrics.

    Returns:
        Averages of every numeric payload entry (prefixed with "avg_"), plus
        "win_rate" and "guess_failure_rate" (losses per guess).
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = rng if rng is not None else random.Random()
    payloads = [run_assistant_single_test(size, mine_count, rng=rng) for _ in range(runs)]

    keys = [k for k in payloads[0] if k != "status"]
    table = np.array([[p[k] for k in keys] for p in payloads], dtype=float)
    means = table.mean(axis=0)

    out: Dict[str, float] = {f"avg_{k}": float(v) for k, v in zip(keys, means)}
    statuses = np.array([p["status"] for p in payloads])
    out["win_rate"] = float(np.mean(statuses == 1))

    total_guesses = float(table[:, keys.index("guesses_count")].sum())
    losses = float(np.sum(statuses == -1))
    out["guess_failure_rate"] = losses / total_guesses if total_guesses > 0 else 0.0
    return out


def run_difficulty_analysis(
    runs: int, *, rng: Optional[random.Random] = None
) -> Dict[str, Dict[str, float]]:
    """
    Run assistant games on every difficulty preset and plot summaries.

    Returns:
        Mapping from preset name to the statistics of run_assistant_many_tests().
    """
    results: Dict[str, Dict[str, float]] = {}
    for level, (size, mines) in DIFFICULTY_PRESETS.items():
        results[level] = run_assistant_many_tests(size, mines, runs, rng=rng)

    level_names = list(results.keys())
    x = np.arange(len(level_names))

    # 1) Certain moves vs guesses
    certain = [results[n]["avg_certain_moves_count"] for n in level_names]
    guesses = [results[n]["avg_guesses_count"] for n in level_names]

    bar_w = 0.35
    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, certain, width=bar_w, label="certain moves")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, guesses, width=bar_w, label="guesses")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average count per game")  # type: ignore[misc]
    plt.title("Certain moves and guesses by difficulty")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Win rate by level
    win_rates = [results[n]["win_rate"] for n in level_names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, win_rates)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Win rate by difficulty level")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
