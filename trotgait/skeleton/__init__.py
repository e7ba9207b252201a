"""Skeleton graph, description builder and spawn placement"""

from .graph import Node, Link, Joint, Robot, JointActuator
from .builder import SkeletonBuilder, quadruped_description, build_quadruped
from .placement import RobotPlacer, Placement, compute_bounds

__all__ = [
    "Node", "Link", "Joint", "Robot", "JointActuator",
    "SkeletonBuilder", "quadruped_description", "build_quadruped",
    "RobotPlacer", "Placement", "compute_bounds",
]
