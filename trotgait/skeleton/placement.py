"""Spawn placement - orient, centre and scale a freshly loaded robot"""

from dataclasses import dataclass
from typing import Optional, Tuple
import math
import numpy as np

from trotgait.core import get_logger, Config
from .graph import Robot

# Description files are z-up, the animation frame is y-up
Z_UP_TO_Y_UP = np.array([-math.pi / 2, 0.0, 0.0])

DEFAULT_MAX_DIMENSION = 3.0
DEFAULT_POSITION = (0.0, 0.5, 0.0)


@dataclass
class Placement:
    """Where the robot was spawned and how it was fitted."""
    position: np.ndarray  # Spawn position held by the animation driver
    scale: float
    bounds_min: np.ndarray
    bounds_max: np.ndarray
    degenerate: bool

    @property
    def size(self) -> np.ndarray:
        return self.bounds_max - self.bounds_min


def compute_bounds(robot: Robot) -> Tuple[np.ndarray, np.ndarray]:
    """Axis-aligned bounds of all link origins in world space.

    A robot without links yields a zero-extent box at the origin.
    """
    robot.update_matrix_world()
    positions = robot.link_positions()
    if len(positions) == 0:
        return np.zeros(3), np.zeros(3)
    return positions.min(axis=0), positions.max(axis=0)


class RobotPlacer:
    """
    Puts a loaded robot at its spawn transform.

    The root is rotated from z-up to y-up, recentred on its bounding box and
    scaled down uniformly so its largest dimension fits ``max_dimension``. A
    zero-extent box means the load failed or was partial; the robot is then
    placed at the fixed default position instead.
    """

    def __init__(self, config: Optional[Config] = None):
        self.logger = get_logger("skeleton.placement")
        self.config = config or Config()

        self._max_dimension = float(
            self.config.get("placement.max_dimension", DEFAULT_MAX_DIMENSION)
        )
        self._default_position = self.config.get_vector(
            "placement.default_position", DEFAULT_POSITION
        )

    def place(self, robot: Robot) -> Placement:
        robot.rotation = Z_UP_TO_Y_UP.copy()
        robot.position = np.zeros(3)
        robot.scale = np.ones(3)

        bounds_min, bounds_max = compute_bounds(robot)
        size = bounds_max - bounds_min

        if not np.any(size > 0.0):
            robot.position = self._default_position.copy()
            robot.update_matrix_world()
            self.logger.warning(
                f"Skeleton '{robot.name}' has zero-extent bounds, "
                f"using default position {robot.position.tolist()}"
            )
            return Placement(
                position=robot.position.copy(),
                scale=1.0,
                bounds_min=bounds_min,
                bounds_max=bounds_max,
                degenerate=True,
            )

        max_dim = float(size.max())
        scale = 1.0
        if max_dim > self._max_dimension:
            scale = self._max_dimension / max_dim
            robot.scale = np.full(3, scale)

        center = (bounds_min + bounds_max) / 2
        robot.position = -center * scale
        robot.update_matrix_world()

        self.logger.info(
            f"Placed '{robot.name}' at {np.round(robot.position, 4).tolist()} "
            f"(size={np.round(size, 4).tolist()}, scale={scale:.3f})"
        )
        return Placement(
            position=robot.position.copy(),
            scale=scale,
            bounds_min=bounds_min,
            bounds_max=bounds_max,
            degenerate=False,
        )
