"""
Gait oscillator for a trot.

A trot moves the legs in diagonal pairs: front-left with back-right, and
front-right with back-left. The oscillator keeps one cycle position
``c`` in [0, 2). The first half (0 <= c < 1) swings pair A, the second
half swings pair B, so the two pairs are exactly half a period apart.

Each half is shaped with ``ease(p) = sin(p * pi)``, which rises from 0 to
1 and back to 0. Swing velocity is therefore zero at both ends of a
stroke, with no jumps between strokes.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .joint_registry import Leg, detect_leg

# Seconds per half-cycle (one diagonal pair's swing)
CYCLE_DURATION = 0.4
CYCLE_RANGE = 2.0
GAIT_PERIOD = CYCLE_DURATION * CYCLE_RANGE


class Phase(Enum):
    """Diagonal leg pair."""
    A = "a"  # front left + back right
    B = "b"  # front right + back left


LEG_PHASES = {
    Leg.FRONT_LEFT: Phase.A,
    Leg.BACK_RIGHT: Phase.A,
    Leg.FRONT_RIGHT: Phase.B,
    Leg.BACK_LEFT: Phase.B,
}


def phase_for(name: Optional[str]) -> Optional[Phase]:
    """Diagonal pair of a link or joint identifier, None if no side is named."""
    return LEG_PHASES.get(detect_leg(name))


def ease(progress: float) -> float:
    """Half-sine easing; exactly 0.0 at and beyond both ends of the stroke."""
    if progress <= 0.0 or progress >= 1.0:
        return 0.0
    return math.sin(progress * math.pi)


@dataclass(frozen=True)
class GaitSample:
    """Oscillator output for one frame."""
    cycle_position: float
    ease_a: float
    ease_b: float

    def ease_for(self, phase: Optional[Phase]) -> Optional[float]:
        if phase is Phase.A:
            return self.ease_a
        if phase is Phase.B:
            return self.ease_b
        return None


class GaitOscillator:
    """Advances the trot cycle position with elapsed time."""

    def __init__(self, cycle_position: float = 0.0):
        if not 0.0 <= cycle_position < CYCLE_RANGE:
            raise ValueError(f"cycle_position must be in [0, {CYCLE_RANGE}), got {cycle_position}")
        self._cycle_position = float(cycle_position)

    @property
    def cycle_position(self) -> float:
        return self._cycle_position

    def advance(self, elapsed: float) -> Tuple[float, float]:
        """
        Advance by ``elapsed`` seconds.

        Returns:
            (ease_a, ease_b) for the new cycle position

        Raises:
            ValueError: if elapsed is negative
        """
        if elapsed < 0:
            raise ValueError(f"Elapsed time must be non-negative, got {elapsed}")

        if elapsed > 0:
            self._cycle_position = (self._cycle_position + elapsed / CYCLE_DURATION) % CYCLE_RANGE

        return self.phases()

    def phases(self) -> Tuple[float, float]:
        """(ease_a, ease_b) at the current cycle position, without advancing."""
        progress_a = min(self._cycle_position, 1.0)
        progress_b = max(self._cycle_position - 1.0, 0.0)
        return ease(progress_a), ease(progress_b)

    def sample(self) -> GaitSample:
        ease_a, ease_b = self.phases()
        return GaitSample(self._cycle_position, ease_a, ease_b)

    def reset(self) -> None:
        self._cycle_position = 0.0

    def __repr__(self) -> str:
        return f"GaitOscillator(cycle_position={self._cycle_position:.4f})"
