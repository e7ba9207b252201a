"""Frame timing for the gait loop

Both clocks hand out ``FrameData`` carrying the time since the previous
frame, which is what the animation driver consumes. ``FrameClock`` follows
the wall clock for interactive runs; ``FixedStepClock`` steps a constant
``1 / fps`` so headless runs are reproducible.
"""

import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional


@dataclass(frozen=True)
class FrameData:
    """Timing of one animation frame."""
    frame_number: int
    timestamp: float  # Animation time in seconds, pauses excluded
    delta: float  # Seconds since the previous frame


class FrameTimer:
    """Rolling statistics of how long each tick took to compute."""

    def __init__(self, window_size: int = 60):
        self._samples: Deque[float] = deque(maxlen=window_size)
        self._started_at: Optional[float] = None

    def start(self) -> None:
        self._started_at = time.perf_counter()

    def stop(self) -> float:
        """Close the current measurement; 0.0 if ``start`` was not called."""
        if self._started_at is None:
            return 0.0

        duration = time.perf_counter() - self._started_at
        self._started_at = None
        self._samples.append(duration)
        return duration

    @property
    def last_frame_time(self) -> float:
        return self._samples[-1] if self._samples else 0.0

    @property
    def average_frame_time(self) -> float:
        return sum(self._samples) / len(self._samples) if self._samples else 0.0

    @property
    def max_frame_time(self) -> float:
        return max(self._samples, default=0.0)

    def reset(self) -> None:
        self._samples.clear()
        self._started_at = None


class FixedStepClock:
    """Deterministic clock advancing exactly ``1 / fps`` per frame."""

    def __init__(self, fps: float = 60.0):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = float(fps)
        self.step = 1.0 / self.fps
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def tick(self) -> FrameData:
        frame = self._frame_count
        self._frame_count += 1
        return FrameData(frame_number=frame, timestamp=self._frame_count * self.step, delta=self.step)


class FrameClock:
    """
    Wall-clock frame source paced to ``target_fps``.

    Time spent paused is left out of both the timestamp and the next delta,
    so resuming continues the gait where it stopped instead of jumping.
    """

    def __init__(self, target_fps: float = 60.0):
        self.target_fps = float(target_fps)
        self._frame_count = 0
        # Both reference points are shifted forward by every pause
        self._origin = 0.0
        self._previous = 0.0
        self._paused_at: Optional[float] = None

    def start(self) -> None:
        now = time.perf_counter()
        self._origin = now
        self._previous = now
        self._frame_count = 0
        self._paused_at = None

    def tick(self) -> FrameData:
        """
        Issue the next frame.

        Raises:
            RuntimeError: if the clock is paused
        """
        if self._paused_at is not None:
            raise RuntimeError("Cannot tick while paused")

        now = time.perf_counter()
        data = FrameData(
            frame_number=self._frame_count,
            timestamp=now - self._origin,
            delta=max(0.0, now - self._previous),
        )
        self._previous = now
        self._frame_count += 1
        return data

    def pause(self) -> None:
        if self._paused_at is None:
            self._paused_at = time.perf_counter()

    def resume(self) -> None:
        if self._paused_at is None:
            return
        paused_for = time.perf_counter() - self._paused_at
        self._origin += paused_for
        self._previous += paused_for
        self._paused_at = None

    @property
    def is_paused(self) -> bool:
        return self._paused_at is not None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def target_frame_duration(self) -> float:
        return 1.0 / self.target_fps

    def wait_for_next_frame(self) -> float:
        """Sleep out the rest of the current frame; returns the time slept."""
        if self.is_paused:
            return 0.0

        remaining = self.target_frame_duration - (time.perf_counter() - self._previous)
        if remaining <= 0:
            return 0.0
        time.sleep(remaining)
        return remaining
