"""
NeonSweeper

A square-grid mine-clearing game with a heuristic probability assistant:
- Board: deferred first-click-safe mine placement, flood-fill reveal, flags
- Probability engine: base rate, certain-mine and certain-safe rules, local-bias heuristic
- Advisor: hints and auto-solve batches of certain moves
- Session: throttled recomputes, deferred task queue, events, scoring
"""

from .engine import Board, Cell, GameState, MinePhase, MoveResult
from .probability import (
    AnalysisReport,
    ai_confidence,
    analysis_report,
    base_probability,
    compute_probabilities,
)
from .advisor import AdviceStatus, Hint, MoveAction, find_hint, plan_certain_moves
from .config import GameConfig
from .session import AutoSolveResult, EventKind, GameEvent, GameSession, SessionStats
from .cli import play_cli
from .analysis import (
    format_probability_map,
    run_assistant_single_test,
    run_assistant_many_tests,
    run_difficulty_analysis,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Board",
    "Cell",
    "GameState",
    "MinePhase",
    "MoveResult",
    "GameConfig",
    "GameSession",
    "GameEvent",
    "EventKind",
    "SessionStats",
    # Probability engine
    "AnalysisReport",
    "ai_confidence",
    "analysis_report",
    "base_probability",
    "compute_probabilities",
    # Advisor
    "AdviceStatus",
    "AutoSolveResult",
    "Hint",
    "MoveAction",
    "find_hint",
    "plan_certain_moves",
    # CLI
    "play_cli",
    # Analysis functions
    "format_probability_map",
    "run_assistant_single_test",
    "run_assistant_many_tests",
    "run_difficulty_analysis",
]
