"""Gait Session - two-phase startup and frame loop entry point"""

from typing import Optional

from trotgait.core import get_logger, Config
from trotgait.skeleton import Robot, RobotPlacer, Placement
from .animation_driver import AnimationDriver
from .gait_oscillator import GaitSample
from .joint_registry import JointRegistry
from .link_registry import LinkRegistry
from .pose_initializer import PoseInitializer


class GaitSession:
    """
    Owns the animation state of one loaded robot.

    Startup is two explicit phases, independent of how the loader signals
    completion:

    1. ``on_skeleton_ready(robot)`` classifies the joints and places the
       robot at its spawn transform.
    2. ``initialize_pose()`` applies the standing pose exactly once; later
       calls are refused.

    ``tick`` does nothing until both phases have run.
    """

    def __init__(self, config: Optional[Config] = None):
        self.logger = get_logger("motion.session")
        self.config = config or Config()

        self.placer = RobotPlacer(self.config)
        self.pose = PoseInitializer()
        self.links = LinkRegistry()

        self.robot: Optional[Robot] = None
        self.registry: Optional[JointRegistry] = None
        self.placement: Optional[Placement] = None
        self.driver: Optional[AnimationDriver] = None

        self._pose_initialized = False

    @property
    def is_ready(self) -> bool:
        """True once the skeleton has been classified."""
        return self.registry is not None

    @property
    def pose_initialized(self) -> bool:
        return self._pose_initialized

    def on_skeleton_ready(self, robot: Robot) -> JointRegistry:
        """
        Phase one: classify the skeleton and place it.

        Raises:
            RuntimeError: if the standing pose was already applied
        """
        if self._pose_initialized:
            raise RuntimeError("Skeleton is already posed; start a new session to reload")

        self.robot = robot
        self.registry = JointRegistry.classify(robot)
        self.placement = self.placer.place(robot)

        self.logger.info(f"Skeleton '{robot.name}' ready: {self.registry.group_names()}")
        return self.registry

    def initialize_pose(self) -> bool:
        """
        Phase two: apply the standing pose and create the driver.

        Returns:
            True if the pose was applied, False if it had been already

        Raises:
            RuntimeError: if called before ``on_skeleton_ready``
        """
        if not self.is_ready:
            raise RuntimeError("initialize_pose() called before on_skeleton_ready()")

        if self._pose_initialized:
            self.logger.warning("Standing pose already applied, ignoring repeated call")
            return False

        self._pose_initialized = True
        self.pose.apply_standing_pose(self.registry, self.links, root=self.robot)
        self.driver = AnimationDriver(
            self.links,
            root=self.robot,
            spawn_position=self.placement.position if self.placement else None,
        )
        return True

    def tick(self, elapsed: float) -> Optional[GaitSample]:
        """Advance the animation one frame; None while startup is incomplete."""
        if self.driver is None:
            return None
        return self.driver.tick(elapsed)
