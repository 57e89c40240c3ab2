"""
Mine-probability inference over the revealed state of a board.

The engine is a pure function of the board: every call rebuilds the map from
scratch. It assigns the global base rate to every unopened cell, then scans
the numbered cells and applies, per constraint:

- certain-mine: the open neighbors must all be mines (100),
- certain-safe: the constraint is already satisfied by flags (0),
- local-bias: the local mine density disagrees with the base rate by more
  than LOCAL_BIAS_THRESHOLD points; the more extreme estimate wins.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from .engine import Board, Position
from .utils import round_percent

logger = logging.getLogger(__name__)

ProbabilityMap = Dict[Position, int]

CERTAIN_MINE = 100
CERTAIN_SAFE = 0
LOCAL_BIAS_THRESHOLD = 10


class RuleKind(Enum):
    """Deduction rule produced by one numbered cell."""

    CERTAIN_MINE = "certain_mine"
    CERTAIN_SAFE = "certain_safe"
    LOCAL_BIAS = "local_bias"


@dataclass(frozen=True)
class Constraint:
    """
    What one revealed numbered cell says about its open neighbors.

    Attributes:
        origin: Position of the numbered cell.
        kind: Rule that fired.
        value: Percentage the rule contributes to each open neighbor.
        open_cells: Unrevealed, unflagged neighbors the rule applies to.
    """

    origin: Position
    kind: RuleKind
    value: int
    open_cells: Tuple[Position, ...]

    @property
    def is_exact(self) -> bool:
        return self.kind is not RuleKind.LOCAL_BIAS


@dataclass(frozen=True)
class AnalysisReport:
    """Summary of a probability map."""

    safe_count: int
    danger_count: int
    uncertain_count: int
    confidence: int

    @property
    def recommendation(self) -> str:
        if self.safe_count > 0:
            return "Recommend clearing safe zones first."
        if self.danger_count > 0:
            return "Flag confirmed mines immediately."
        return "No certain moves available. Proceed with caution."

    def summary(self) -> str:
        return (
            f"Deep scan complete. Found {self.safe_count} safe zones, "
            f"{self.danger_count} confirmed mines, and {self.uncertain_count} "
            f"uncertain areas. {self.recommendation}"
        )


def base_probability(board: Board) -> int:
    """
    Prior mine likelihood of an unopened cell: remaining mines over remaining cells.

    Returns 0 when no unresolved cell is left. Over-flagging cannot push the
    value below 0.
    """
    flagged = len(board.flagged_cells)
    remaining_cells = board.total_cells - len(board.revealed_cells) - flagged
    if remaining_cells <= 0:
        return 0
    remaining_mines = board.mines_count - flagged
    return min(100, max(0, round_percent(remaining_mines, remaining_cells)))


def _open_cells(board: Board) -> List[Position]:
    return [
        (row, col)
        for row in range(board.size)
        for col in range(board.size)
        if not board.grid[row][col].is_revealed and not board.grid[row][col].is_flagged
    ]


def analyze_numbered_cell(board: Board, row: int, col: int, base: int) -> List[Constraint]:
    """
    Derive the constraint (if any) a revealed numbered cell puts on its neighbors.

    Returns:
        A list with zero or one Constraint.
    """
    cell = board.grid[row][col]
    open_neighbors: List[Position] = []
    flagged_neighbors = 0
    for nrow, ncol in board.neighbors(row, col):
        neighbor = board.grid[nrow][ncol]
        if neighbor.is_flagged:
            flagged_neighbors += 1
        elif not neighbor.is_revealed:
            open_neighbors.append((nrow, ncol))

    if not open_neighbors:
        return []

    need = cell.neighbor_mine_count - flagged_neighbors
    open_cells = tuple(open_neighbors)

    if need > 0 and need == len(open_cells):
        logger.debug(
            "Certainty rule: cell (%d, %d) - %d neighbors are 100%% mines",
            row, col, len(open_cells),
        )
        return [Constraint((row, col), RuleKind.CERTAIN_MINE, CERTAIN_MINE, open_cells)]

    if need == 0:
        logger.debug(
            "Safety rule: cell (%d, %d) - %d neighbors are 0%% mines",
            row, col, len(open_cells),
        )
        return [Constraint((row, col), RuleKind.CERTAIN_SAFE, CERTAIN_SAFE, open_cells)]

    if need > 0:
        local = min(CERTAIN_MINE, round_percent(need, len(open_cells)))
        if abs(local - base) > LOCAL_BIAS_THRESHOLD:
            return [Constraint((row, col), RuleKind.LOCAL_BIAS, local, open_cells)]

    return []


def scan_constraints(board: Board, base: int) -> List[Constraint]:
    """Collect the constraints of every revealed numbered cell, in row-major order."""
    constraints: List[Constraint] = []
    for row in range(board.size):
        for col in range(board.size):
            cell = board.grid[row][col]
            if cell.is_revealed and not cell.is_mine and cell.neighbor_mine_count > 0:
                constraints.extend(analyze_numbered_cell(board, row, col, base))
    return constraints


def more_extreme(current: int, candidate: int) -> int:
    """Keep whichever value is farther from 50; ties keep the current value."""
    if abs(candidate - 50) > abs(current - 50):
        return candidate
    return current


def resolve_cell(base: int, contributions: Iterable[Constraint]) -> int:
    """
    Fold the constraints touching one cell into its final percentage.

    Exact rules overwrite the running value; local-bias rules only replace it
    with a more extreme estimate. Contributions are folded in the given order.
    """
    value = base
    for constraint in contributions:
        if constraint.is_exact:
            value = constraint.value
        else:
            value = more_extreme(value, constraint.value)
    return value


def compute_probabilities(board: Board) -> ProbabilityMap:
    """
    Build the probability map of every unopened, unflagged cell.

    Args:
        board: Board to analyze. It is not modified.

    Returns:
        Mapping from position to an integer percentage in [0, 100].
    """
    base = base_probability(board)
    open_cells = _open_cells(board)

    contributions: Dict[Position, List[Constraint]] = {pos: [] for pos in open_cells}
    for constraint in scan_constraints(board, base):
        for pos in constraint.open_cells:
            contributions[pos].append(constraint)

    probabilities: ProbabilityMap = {
        pos: resolve_cell(base, contributions[pos]) for pos in open_cells
    }
    logger.debug("Probability analysis complete: %d cells analyzed", len(probabilities))
    return probabilities


def ai_confidence(probabilities: Mapping[Position, int]) -> int:
    """Percentage of mapped cells whose probability is exactly 0 or 100."""
    if not probabilities:
        return 0
    certain = sum(1 for p in probabilities.values() if p in (CERTAIN_SAFE, CERTAIN_MINE))
    return round_percent(certain, len(probabilities))


def analysis_report(probabilities: Mapping[Position, int]) -> AnalysisReport:
    """Count safe, danger and uncertain cells of a probability map."""
    values = list(probabilities.values())
    safe = values.count(CERTAIN_SAFE)
    danger = values.count(CERTAIN_MINE)
    return AnalysisReport(
        safe_count=safe,
        danger_count=danger,
        uncertain_count=len(values) - safe - danger,
        confidence=ai_confidence(probabilities),
    )
