"""Animation Driver - per-frame trot animation of the tracked links"""

import math
from typing import Any, Dict, Optional
import numpy as np

from trotgait.core import get_logger
from .gait_oscillator import GaitOscillator, GaitSample, Phase, phase_for
from .link_registry import LinkRegistry, commit, set_axis_rotation

MIN_CALF_SWING = 2 * (math.pi / 6)   # 60 deg
MAX_CALF_SWING = 2 * (math.pi / 4)   # 90 deg
HIP_SWING_AMPLITUDE = 0.6            # rad


def calf_angle(ease_value: float) -> float:
    """Calf flexion for an easing value in [0, 1]."""
    return MIN_CALF_SWING + (MAX_CALF_SWING - MIN_CALF_SWING) * ease_value


def hip_swing(ease_value: float) -> float:
    """Hip swing for an easing value in [0, 1]."""
    return ease_value * HIP_SWING_AMPLITUDE


class AnimationDriver:
    """
    Applies the trot to the tracked links once per frame.

    Only link rotations about the animation axis and the root position are
    written; joint values stay as the standing pose left them. Every
    rotation is computed from the link's baseline and the oscillator state,
    never from the link's previous rotation, so a zero-length tick
    reproduces the previous frame exactly.
    """

    def __init__(
        self,
        links: LinkRegistry,
        root: Optional[Any] = None,
        spawn_position: Optional[np.ndarray] = None,
        oscillator: Optional[GaitOscillator] = None,
    ):
        self.logger = get_logger("motion.driver")
        self.links = links
        self.root = root
        self.oscillator = oscillator or GaitOscillator()

        if spawn_position is None and root is not None:
            spawn_position = root.position
        self.spawn_position = None if spawn_position is None else np.array(spawn_position, dtype=np.float64)

        self._phases: Dict[int, Optional[Phase]] = {}
        self._frame_count = 0
        self._last_sample = self.oscillator.sample()

        self.logger.info(
            "Initialized animation driver ("
            + ", ".join(f"{name}={count}" for name, count in links.counts().items())
            + ")"
        )

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def last_sample(self) -> GaitSample:
        return self._last_sample

    def tick(self, elapsed: float) -> GaitSample:
        """
        Advance one frame.

        Args:
            elapsed: Seconds since the previous frame, non-negative

        Returns:
            The oscillator sample the links were posed with
        """
        self.oscillator.advance(elapsed)
        sample = self.oscillator.sample()

        self._animate_calves(sample)
        self._animate_hips(sample)
        self._animate_shoulders(sample)
        self._hold_root()

        self._last_sample = sample
        self._frame_count += 1
        return sample

    def _phase(self, link: Any) -> Optional[Phase]:
        key = id(link)
        if key not in self._phases:
            self._phases[key] = phase_for(getattr(link, "name", None))
        return self._phases[key]

    def _animate_calves(self, sample: GaitSample) -> None:
        for link in self.links.calf_links:
            ease_value = sample.ease_for(self._phase(link))
            angle = MIN_CALF_SWING if ease_value is None else calf_angle(ease_value)
            set_axis_rotation(link, self.links.baseline(link) - angle)
            commit(link)

    def _animate_hips(self, sample: GaitSample) -> None:
        for link in self.links.hip_links:
            swing = self._swing(link, sample)
            set_axis_rotation(link, self.links.baseline(link) + swing)
            commit(link)

    def _animate_shoulders(self, sample: GaitSample) -> None:
        # Counter-swing to the co-located hip
        for link in self.links.shoulder_links:
            swing = self._swing(link, sample)
            set_axis_rotation(link, self.links.baseline(link) - swing)
            commit(link)

    def _swing(self, link: Any, sample: GaitSample) -> float:
        ease_value = sample.ease_for(self._phase(link))
        return 0.0 if ease_value is None else hip_swing(ease_value)

    def _hold_root(self) -> None:
        if self.root is None or self.spawn_position is None:
            return
        self.root.position = self.spawn_position.copy()
        commit(self.root)
