"""Hint and auto-solve advice derived from a probability map."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional, Tuple

from .engine import Position
from .probability import CERTAIN_MINE, CERTAIN_SAFE


class AdviceStatus(Enum):
    OK = "ok"
    NOTHING_CERTAIN = "nothing_certain"
    NOT_APPLICABLE = "not_applicable"


class MoveAction(Enum):
    REVEAL = "reveal"
    FLAG = "flag"


@dataclass(frozen=True)
class Hint:
    """
    A suggested move.

    Attributes:
        status: OK when a certain cell was found.
        position: The suggested cell, None unless status is OK.
        label: "safe" or "mine", None unless status is OK.
    """

    status: AdviceStatus
    position: Optional[Position] = None
    label: Optional[str] = None

    def message(self) -> str:
        if self.status is AdviceStatus.NOT_APPLICABLE:
            return "AI HINT: Activate the Probability Engine first!"
        if self.status is AdviceStatus.NOTHING_CERTAIN or self.position is None:
            return "AI HINT: No certain moves available. Use probability analysis."
        row, col = self.position
        if self.label == "safe":
            return f"AI HINT: Cell ({row},{col}) is 100% SAFE - Click it!"
        return f"AI HINT: Cell ({row},{col}) is 100% MINE - Flag it!"


Move = Tuple[MoveAction, Position]


def find_hint(probabilities: Mapping[Position, int]) -> Hint:
    """
    Return the first certainly-safe cell in row-major order, else the first certain mine.
    """
    ordered = sorted(probabilities)
    for pos in ordered:
        if probabilities[pos] == CERTAIN_SAFE:
            return Hint(AdviceStatus.OK, pos, "safe")
    for pos in ordered:
        if probabilities[pos] == CERTAIN_MINE:
            return Hint(AdviceStatus.OK, pos, "mine")
    return Hint(AdviceStatus.NOTHING_CERTAIN)


def plan_certain_moves(probabilities: Mapping[Position, int]) -> List[Move]:
    """
    List every certain move: all safe reveals first, then all mine flags.

    Each group keeps row-major order.
    """
    ordered = sorted(probabilities)
    reveals: List[Move] = [
        (MoveAction.REVEAL, pos) for pos in ordered if probabilities[pos] == CERTAIN_SAFE
    ]
    flags: List[Move] = [
        (MoveAction.FLAG, pos) for pos in ordered if probabilities[pos] == CERTAIN_MINE
    ]
    return reveals + flags


def pick_guess(probabilities: Mapping[Position, int]) -> Optional[Position]:
    """Lowest-probability cell, row-major first on ties; None for an empty map."""
    if not probabilities:
        return None
    return min(sorted(probabilities), key=lambda pos: probabilities[pos])
