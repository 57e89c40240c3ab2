"""
Central configuration for NeonSweeper.

Holds the default board dimensions, the assistant timing parameters and the
difficulty presets used by the front ends and the analysis tools.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

# Board defaults
DEFAULT_GRID_SIZE = 10   # Cells per side
DEFAULT_MINE_COUNT = 15  # Mines per board

# Assistant timing (seconds)
RECOMPUTE_INTERVAL = 0.1     # Minimum gap between two throttled probability recomputes
AUTO_SOLVE_STEP_DELAY = 0.2  # Gap between two auto-solve moves in animated front ends

# Scoring
SCORE_TIME_BUDGET = 1000     # Time bonus is SCORE_TIME_BUDGET - elapsed seconds
SCORE_CONFIDENCE_WEIGHT = 10  # Points per percent of assistant confidence

# Difficulty presets: name -> (size, mine_count)
DIFFICULTY_PRESETS: Dict[str, Tuple[int, int]] = {
    "beginner": (9, 10),
    "standard": (DEFAULT_GRID_SIZE, DEFAULT_MINE_COUNT),
    "intermediate": (16, 40),
}


@dataclass(frozen=True)
class GameConfig:
    """Settings for one game session."""

    size: int = DEFAULT_GRID_SIZE
    mine_count: int = DEFAULT_MINE_COUNT
    recompute_interval: float = RECOMPUTE_INTERVAL
    auto_solve_step_delay: float = AUTO_SOLVE_STEP_DELAY

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError("size must be positive.")
        if self.mine_count < 0:
            raise ValueError("mine_count must be non-negative.")
        if self.mine_count >= self.size * self.size:
            raise ValueError("mine_count must be smaller than the number of cells.")
        if self.recompute_interval < 0 or self.auto_solve_step_delay < 0:
            raise ValueError("Timing parameters must be non-negative.")

    @classmethod
    def from_preset(cls, name: str) -> "GameConfig":
        """Build a config from one of DIFFICULTY_PRESETS."""
        if name not in DIFFICULTY_PRESETS:
            raise ValueError(
                f"Unknown preset {name!r}; expected one of {sorted(DIFFICULTY_PRESETS)}."
            )
        size, mine_count = DIFFICULTY_PRESETS[name]
        return cls(size=size, mine_count=mine_count)
