"""
Game session: one board plus the assistant state attached to it.

The session is single-threaded and cooperative. Follow-up work (throttled
probability recomputes, auto-solve moves) goes into a FIFO of deferred tasks
that the front end drains with step() or run_pending(), for instance one task
per animation frame. Every task is tagged with the board generation, so
starting a new game drops whatever was still queued for the old one.
"""

import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Tuple

from .advisor import AdviceStatus, Hint, Move, MoveAction, find_hint, plan_certain_moves
from .config import SCORE_CONFIDENCE_WEIGHT, SCORE_TIME_BUDGET, GameConfig
from .engine import Board, GameState, MoveResult, Position
from .probability import (
    AnalysisReport,
    ProbabilityMap,
    ai_confidence,
    analysis_report,
    compute_probabilities,
)
from .utils import round_percent

logger = logging.getLogger(__name__)


class EventKind(Enum):
    NEW_GAME = "new_game"
    STARTED = "started"
    REVEALED = "revealed"
    FLAGGED = "flagged"
    GAME_OVER = "game_over"
    VICTORY = "victory"


@dataclass(frozen=True)
class GameEvent:
    """Notification sent to the session's sink."""

    kind: EventKind
    state: GameState
    cells: Tuple[Position, ...] = ()


@dataclass(frozen=True)
class AutoSolveResult:
    """Outcome of an auto-solve request; moves are queued, not yet applied."""

    status: AdviceStatus
    moves: Tuple[Move, ...] = ()

    @property
    def moves_count(self) -> int:
        return len(self.moves)

    def message(self) -> str:
        if self.status is AdviceStatus.NOT_APPLICABLE:
            return "Activate AI Analysis first to enable auto-solve."
        if self.status is AdviceStatus.NOTHING_CERTAIN:
            return "No certain moves available for auto-solve."
        return f"Auto-solving {self.moves_count} certain moves..."


@dataclass
class SessionStats:
    """Statistics accumulated over the games of one session (kept in memory)."""

    games_played: int = 0
    wins: int = 0
    best_time: Optional[int] = None

    @property
    def win_rate(self) -> int:
        if self.games_played == 0:
            return 0
        return round_percent(self.wins, self.games_played)

    def record(self, won: bool, elapsed: float) -> None:
        self.games_played += 1
        if won:
            self.wins += 1
            seconds = int(elapsed)
            if self.best_time is None or seconds < self.best_time:
                self.best_time = seconds


def compute_score(elapsed: float, confidence: int) -> int:
    """Victory score: time bonus plus weighted assistant confidence, rounded half-up."""
    time_bonus = max(0.0, SCORE_TIME_BUDGET - elapsed)
    return int(time_bonus + confidence * SCORE_CONFIDENCE_WEIGHT + 0.5)


_Task = Tuple[int, str, Callable[[], None]]


class GameSession:
    """Board, probability engine and advisory layer for one player."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        notify: Optional[Callable[[GameEvent], None]] = None,
    ) -> None:
        """
        Create a session and its first board.

        Args:
            config: Board and timing settings; defaults to GameConfig().
            rng: Source of randomness handed to every new board.
            clock: Monotonic clock in seconds, used for throttling and timing.
            notify: Sink receiving one GameEvent per state change.
        """
        self.config: GameConfig = config if config is not None else GameConfig()
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.clock: Callable[[], float] = clock
        self.notify: Callable[[GameEvent], None] = notify if notify is not None else (lambda event: None)

        self.stats: SessionStats = SessionStats()
        self.score: int = 0

        self.board: Board = Board(self.config.size, self.config.mine_count, self.rng)
        self.generation: int = 0
        self.engine_active: bool = False

        self._probabilities: ProbabilityMap = {}
        self._computed_version: Optional[int] = None
        self._last_calculation: Optional[float] = None
        self._recompute_pending: bool = False
        self._tasks: Deque[_Task] = deque()

        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None

    # -------------------------------------------------------------------------
    # Board lifecycle
    # -------------------------------------------------------------------------

    def new_game(self, size: Optional[int] = None, mine_count: Optional[int] = None) -> Board:
        """
        Replace the board with a fresh one in STANDBY.

        Queued auto-solve moves and pending recomputes of the previous board
        are discarded.

        Raises:
            ValueError: If the new dimensions are invalid.
        """
        if size is not None or mine_count is not None:
            self.config = GameConfig(
                size=size if size is not None else self.config.size,
                mine_count=mine_count if mine_count is not None else self.config.mine_count,
                recompute_interval=self.config.recompute_interval,
                auto_solve_step_delay=self.config.auto_solve_step_delay,
            )
        return self._install_board(Board(self.config.size, self.config.mine_count, self.rng))

    def load_board(self, board: Board) -> Board:
        """Start a new game on a prepared board, e.g. Board.from_mines() or a reset board."""
        if board.state is not GameState.STANDBY:
            raise ValueError("Only a board in STANDBY can be loaded.")
        return self._install_board(board)

    def _install_board(self, board: Board) -> Board:
        if self._tasks:
            logger.debug("Dropping %d queued tasks of generation %d", len(self._tasks), self.generation)
        self._tasks.clear()
        self.generation += 1

        self.board = board
        self.engine_active = False
        self._probabilities = {}
        self._computed_version = None
        self._last_calculation = None
        self._recompute_pending = False
        self._start_time = None
        self._end_time = None
        self.score = 0

        logger.debug(
            "New game %d: %dx%d board with %d mines",
            self.generation, board.size, board.size, board.mines_count,
        )
        self._emit(EventKind.NEW_GAME)
        return board

    def get_game_state(self) -> GameState:
        return self.board.state

    def elapsed(self) -> float:
        """Seconds since the first reveal, frozen once the game has ended."""
        if self._start_time is None:
            return 0.0
        end = self._end_time if self._end_time is not None else self.clock()
        return end - self._start_time

    def _emit(self, kind: EventKind, cells: Tuple[Position, ...] = ()) -> None:
        self.notify(GameEvent(kind, self.board.state, cells))

    # -------------------------------------------------------------------------
    # Player moves
    # -------------------------------------------------------------------------

    def reveal(self, row: int, col: int) -> MoveResult:
        """
        Reveal a cell and report the resulting transitions.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        before = self.board.state
        result = self.board.reveal(row, col)
        if not result.effective:
            return result

        if before is GameState.STANDBY:
            self._start_time = self.clock()
            self._emit(EventKind.STARTED)

        self._emit(EventKind.REVEALED, result.cells)

        if result.state is GameState.GAME_OVER:
            self._end_time = self.clock()
            self.stats.record(False, self.elapsed())
            self._emit(EventKind.GAME_OVER, tuple(sorted(result.mines)))
        elif result.state is GameState.VICTORY:
            self._end_time = self.clock()
            self.score = compute_score(self.elapsed(), ai_confidence(self._probabilities))
            self.stats.record(True, self.elapsed())
            self._emit(EventKind.VICTORY)
        elif self.engine_active:
            self.request_recompute()

        return result

    def toggle_flag(self, row: int, col: int) -> MoveResult:
        """
        Flip a flag on an unrevealed cell.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        result = self.board.toggle_flag(row, col)
        if not result.effective:
            return result

        self._emit(EventKind.FLAGGED, result.cells)
        if self.engine_active:
            self.request_recompute()
        return result

    # -------------------------------------------------------------------------
    # Probability engine
    # -------------------------------------------------------------------------

    @property
    def probabilities(self) -> ProbabilityMap:
        """Snapshot of the last computed probability map."""
        return dict(self._probabilities)

    def toggle_probability_engine(self) -> bool:
        """
        Switch the assistant on or off; only possible while the game is ACTIVE.

        Returns:
            True if the engine state changed.
        """
        if self.board.state is not GameState.ACTIVE:
            logger.debug("Probability engine requires an active game")
            return False

        self.engine_active = not self.engine_active
        if self.engine_active:
            self.recompute_probabilities()
        else:
            self._probabilities = {}
            self._computed_version = None
        logger.debug("Probability engine %s", "activated" if self.engine_active else "deactivated")
        return True

    def recompute_probabilities(self) -> ProbabilityMap:
        """Rebuild the probability map now, bypassing the throttle."""
        self._probabilities = compute_probabilities(self.board)
        self._computed_version = self.board.version
        self._last_calculation = self.clock()
        return self.probabilities

    def request_recompute(self) -> bool:
        """
        Queue a recompute unless one ran less than recompute_interval ago or is already queued.

        Returns:
            True if a recompute was queued.
        """
        now = self.clock()
        if self._recompute_pending or (
            self._last_calculation is not None
            and now - self._last_calculation < self.config.recompute_interval
        ):
            logger.debug("Recompute throttled")
            return False

        self._last_calculation = now
        self._recompute_pending = True
        self._enqueue("recompute", self._run_recompute)
        return True

    def _run_recompute(self) -> None:
        self._recompute_pending = False
        self._probabilities = compute_probabilities(self.board)
        self._computed_version = self.board.version

    def _fresh_probabilities(self) -> ProbabilityMap:
        if self._computed_version != self.board.version:
            self.recompute_probabilities()
        return self._probabilities

    def deep_analysis(self) -> Optional[AnalysisReport]:
        """Recompute and summarize the map; None unless the game is ACTIVE."""
        if self.board.state is not GameState.ACTIVE:
            return None
        return analysis_report(self.recompute_probabilities())

    # -------------------------------------------------------------------------
    # Advisory layer
    # -------------------------------------------------------------------------

    def _advice_available(self) -> bool:
        if not self.engine_active or self.board.state is not GameState.ACTIVE:
            return False
        return bool(self._fresh_probabilities())

    def get_hint(self) -> Hint:
        """Suggest the first certain cell of the current map; never mutates the board."""
        if not self._advice_available():
            return Hint(AdviceStatus.NOT_APPLICABLE)
        return find_hint(self._probabilities)

    def auto_solve(self) -> AutoSolveResult:
        """
        Queue every certain move: safe reveals first, then mine flags.

        The moves are applied in order as the task queue is drained.
        """
        if not self._advice_available():
            return AutoSolveResult(AdviceStatus.NOT_APPLICABLE)

        moves = plan_certain_moves(self._probabilities)
        if not moves:
            return AutoSolveResult(AdviceStatus.NOTHING_CERTAIN)

        for action, (row, col) in moves:
            self._enqueue(f"{action.value} ({row}, {col})", self._make_move_task(action, row, col))
        return AutoSolveResult(AdviceStatus.OK, tuple(moves))

    def _make_move_task(self, action: MoveAction, row: int, col: int) -> Callable[[], None]:
        def run() -> None:
            cell = self.board.grid[row][col]
            if cell.is_revealed or cell.is_flagged:
                return
            if action is MoveAction.REVEAL:
                self.reveal(row, col)
            else:
                self.toggle_flag(row, col)

        return run

    # -------------------------------------------------------------------------
    # Deferred task queue
    # -------------------------------------------------------------------------

    def _enqueue(self, name: str, func: Callable[[], None]) -> None:
        self._tasks.append((self.generation, name, func))

    @property
    def pending_tasks(self) -> List[str]:
        return [name for _, name, _ in self._tasks]

    def step(self) -> bool:
        """
        Run the oldest queued task.

        Returns:
            False if the queue was empty.
        """
        while self._tasks:
            generation, name, func = self._tasks.popleft()
            if generation != self.generation:
                logger.debug("Skipping stale task %s from generation %d", name, generation)
                continue
            func()
            return True
        return False

    def run_pending(self) -> int:
        """Drain the task queue, including tasks queued while draining; return how many ran."""
        count = 0
        while self.step():
            count += 1
        return count
