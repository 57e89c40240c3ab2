"""Board state machine with deferred, first-click-safe mine placement."""

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from .config import DEFAULT_GRID_SIZE, DEFAULT_MINE_COUNT
from .utils import get_neighborhoods, round_percent

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class GameState(Enum):
    """Game-level state of a board."""

    STANDBY = "STANDBY"
    ACTIVE = "ACTIVE"
    GAME_OVER = "GAME_OVER"
    VICTORY = "VICTORY"

    @property
    def is_terminal(self) -> bool:
        return self in (GameState.GAME_OVER, GameState.VICTORY)


class MinePhase(Enum):
    """Mine layout phase: mines are placed exactly once, on the first reveal."""

    UNINITIALIZED = "uninitialized"
    PLACED = "placed"


@dataclass
class Cell:
    """One grid position."""

    is_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    neighbor_mine_count: int = 0


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a board mutation.

    Attributes:
        effective: False when the request was a no-op.
        state: Game state after the request.
        cells: Positions newly revealed (in reveal order) or the toggled flag.
        mines: All mine positions, set only when the move hit a mine.
    """

    effective: bool
    state: GameState
    cells: Tuple[Position, ...] = ()
    mines: FrozenSet[Position] = field(default_factory=frozenset)


class Board:
    """Square minefield with first-click safety, flood-fill reveal and flagging."""

    def __init__(
        self,
        size: int = DEFAULT_GRID_SIZE,
        mines_count: int = DEFAULT_MINE_COUNT,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize an empty board in STANDBY; mines are placed on the first reveal.

        Args:
            size: Number of rows and columns, must be > 0.
            mines_count: Total number of mines, 0 <= mines_count < size * size.
            rng: Source of randomness for mine placement.

        Raises:
            ValueError: If dimensions or the mine count are invalid.
        """
        if size <= 0:
            raise ValueError("size must be positive.")
        if mines_count < 0:
            raise ValueError("mines_count must be non-negative.")
        if mines_count >= size * size:
            raise ValueError("mines_count must be smaller than the number of cells.")

        self.size: int = size
        self.mines_count: int = mines_count
        self.rng: random.Random = rng if rng is not None else random.Random()

        self.grid: List[List[Cell]] = [[Cell() for _ in range(size)] for _ in range(size)]
        self.revealed_cells: Set[Position] = set()
        self.flagged_cells: Set[Position] = set()

        self.state: GameState = GameState.STANDBY
        self.phase: MinePhase = MinePhase.UNINITIALIZED
        # Bumped by every effective mutation; lets callers detect stale derived data.
        self.version: int = 0

        self._neighborhoods: Dict[Position, Tuple[Position, ...]] = get_neighborhoods(size)

    @classmethod
    def from_mines(cls, size: int, mines: Iterable[Position]) -> "Board":
        """
        Build a board with a preset mine layout.

        The board starts in STANDBY with its layout already PLACED, so the
        first reveal activates it without moving any mine.

        Raises:
            ValueError: If a position is off the board or the layout leaves no safe cell.
        """
        mine_set = set(mines)
        board = cls(size, len(mine_set))
        for row, col in mine_set:
            board._check_position(row, col)
            board.grid[row][col].is_mine = True
        board._compute_neighbor_counts()
        board.phase = MinePhase.PLACED
        return board

    @property
    def total_cells(self) -> int:
        return self.size * self.size

    @property
    def safe_cells_count(self) -> int:
        return self.total_cells - self.mines_count

    def reset(self) -> None:
        """
        Clear the board for another game of the same size and mine count.

        Reveals, flags and the mine layout are all cleared and the state returns
        to STANDBY; mines are placed again on the next first reveal, so that
        reveal is always safe.
        """
        for row in self.grid:
            for cell in row:
                cell.is_mine = False
                cell.is_revealed = False
                cell.is_flagged = False
                cell.neighbor_mine_count = 0
        self.revealed_cells.clear()
        self.flagged_cells.clear()
        self.state = GameState.STANDBY
        self.phase = MinePhase.UNINITIALIZED
        self.version += 1

    def _check_position(self, row: int, col: int) -> None:
        if row < 0 or row >= self.size or col < 0 or col >= self.size:
            raise ValueError("Cell coordinates are outside the board.")

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at (row, col)."""
        self._check_position(row, col)
        return self.grid[row][col]

    def neighbors(self, row: int, col: int) -> Tuple[Position, ...]:
        """Return precomputed 8-connected neighbor coordinates of a cell."""
        self._check_position(row, col)
        return self._neighborhoods[(row, col)]

    def place_mines(self, exclude_row: int, exclude_col: int) -> None:
        """
        Place mines (one-time), keeping the excluded cell mine-free.

        Shuffles every other position with an unbiased Fisher-Yates shuffle and
        takes the first mines_count of them.

        Args:
            exclude_row: Row of the first revealed cell.
            exclude_col: Column of the first revealed cell.

        Raises:
            ValueError: If the mines are already placed or the cell is off the board.
        """
        self._check_position(exclude_row, exclude_col)
        if self.phase is MinePhase.PLACED:
            raise ValueError("Mines are already placed on this board.")

        candidates: List[Position] = [
            (row, col)
            for row in range(self.size)
            for col in range(self.size)
            if (row, col) != (exclude_row, exclude_col)
        ]
        self.rng.shuffle(candidates)

        for row, col in candidates[: self.mines_count]:
            self.grid[row][col].is_mine = True

        self._compute_neighbor_counts()
        self.phase = MinePhase.PLACED
        logger.debug(
            "Placed %d mines on a %dx%d board, excluding (%d, %d)",
            self.mines_count, self.size, self.size, exclude_row, exclude_col,
        )

    def _compute_neighbor_counts(self) -> None:
        """Populate every non-mine cell with its adjacent mine count."""
        for row in range(self.size):
            for col in range(self.size):
                cell = self.grid[row][col]
                if cell.is_mine:
                    continue
                cell.neighbor_mine_count = sum(
                    1 for nrow, ncol in self.neighbors(row, col) if self.grid[nrow][ncol].is_mine
                )

    def mine_positions(self) -> FrozenSet[Position]:
        """Return all mine positions (empty before placement)."""
        return frozenset(
            (row, col)
            for row in range(self.size)
            for col in range(self.size)
            if self.grid[row][col].is_mine
        )

    def _mark_revealed(self, row: int, col: int) -> None:
        self.grid[row][col].is_revealed = True
        self.revealed_cells.add((row, col))

    def flood_fill(self, row: int, col: int) -> List[Position]:
        """
        Reveal the connected zero-count region around an already revealed zero cell.

        Numbered cells bordering the region are revealed but not expanded.
        Flagged cells and mines are never revealed.

        Returns:
            Newly revealed positions, in visitation order.
        """
        frontier: Deque[Position] = deque([(row, col)])
        visited: Set[Position] = {(row, col)}
        revealed: List[Position] = []

        while frontier:
            crow, ccol = frontier.popleft()
            for nrow, ncol in self.neighbors(crow, ccol):
                if (nrow, ncol) in visited:
                    continue
                visited.add((nrow, ncol))

                neighbor = self.grid[nrow][ncol]
                if neighbor.is_revealed or neighbor.is_flagged or neighbor.is_mine:
                    continue

                self._mark_revealed(nrow, ncol)
                revealed.append((nrow, ncol))
                if neighbor.neighbor_mine_count == 0:
                    frontier.append((nrow, ncol))

        return revealed

    def reveal(self, row: int, col: int) -> MoveResult:
        """
        Reveal a cell, placing mines first if this is the opening move.

        Args:
            row: Row of the cell to reveal.
            col: Column of the cell to reveal.

        Returns:
            MoveResult whose cells are the newly revealed positions. A move that
            hits a mine carries every mine position in `mines`.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        self._check_position(row, col)

        cell = self.grid[row][col]
        if self.state.is_terminal or cell.is_revealed or cell.is_flagged:
            return MoveResult(False, self.state)

        if self.state is GameState.STANDBY:
            if self.phase is MinePhase.UNINITIALIZED:
                self.place_mines(row, col)
            self.state = GameState.ACTIVE

        self._mark_revealed(row, col)
        self.version += 1

        if cell.is_mine:
            self.state = GameState.GAME_OVER
            logger.info("Mine hit at (%d, %d); game over", row, col)
            return MoveResult(True, self.state, ((row, col),), self.mine_positions())

        revealed = [(row, col)]
        if cell.neighbor_mine_count == 0:
            revealed.extend(self.flood_fill(row, col))

        if len(self.revealed_cells) == self.safe_cells_count:
            self.state = GameState.VICTORY
            logger.info("All %d safe cells revealed; victory", self.safe_cells_count)

        return MoveResult(True, self.state, tuple(revealed))

    def toggle_flag(self, row: int, col: int) -> MoveResult:
        """
        Flip the flag on an unrevealed cell.

        Flags are not validated against the real mine layout.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        self._check_position(row, col)

        cell = self.grid[row][col]
        if self.state.is_terminal or cell.is_revealed:
            return MoveResult(False, self.state)

        cell.is_flagged = not cell.is_flagged
        if cell.is_flagged:
            self.flagged_cells.add((row, col))
        else:
            self.flagged_cells.discard((row, col))
        self.version += 1

        return MoveResult(True, self.state, ((row, col),))

    def remaining_mine_estimate(self) -> int:
        """Mines minus flags, floored at 0 for display."""
        return max(0, self.mines_count - len(self.flagged_cells))

    def accuracy(self) -> int:
        """Share of reveals among all reveal and flag actions, as a percentage."""
        total = len(self.revealed_cells) + len(self.flagged_cells)
        if total == 0:
            return 100
        return round_percent(len(self.revealed_cells), total)

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def format_board(
        self,
        reveal_all: bool = False,
        probabilities: Optional[Mapping[Position, int]] = None,
        color: bool = True,
    ) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and all underlying counts.
            probabilities: Optional probability map; unopened cells found in it
                are shown as their percentage instead of '.'.
            color: If False, emit plain text without ANSI escapes.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        c = self._c if color else str
        m = self._m if color else str
        width = 4 if probabilities is not None else 3

        def cell_str(row: int, col: int) -> str:
            cell = self.grid[row][col]
            if reveal_all or cell.is_revealed:
                if cell.is_mine:
                    return m("M".rjust(width - 1))
                return str(cell.neighbor_mine_count).rjust(width - 1)
            if cell.is_flagged:
                return "F".rjust(width - 1)
            if probabilities is not None and (row, col) in probabilities:
                return str(probabilities[(row, col)]).rjust(width - 1)
            return ".".rjust(width - 1)

        header_cells = " ".join(f"{col:{width - 1}d}" for col in range(self.size))
        out = [c("    ") + c(header_cells)]
        out.append(c("    " + "-" * (width * self.size - 1)))

        for row in range(self.size):
            row_cells = " ".join(cell_str(row, col) for col in range(self.size))
            out.append(c(f"{row:2d} ") + c("|") + row_cells)

        return "\n".join(out)
