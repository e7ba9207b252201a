"""Pose Initializer - one-time standing pose for a classified skeleton"""

import math
from typing import Any, Dict, List, Optional

from trotgait.core import get_logger
from .joint_registry import ClassifiedJoint, JointRegistry, Role
from .link_registry import (
    LinkGroup, LinkRegistry, axis_rotation, commit, rotate_about_axis
)

STANDING_HIP = 0.0
STANDING_THIGH = 0.0
STANDING_CALF = -math.pi / 2
STANDING_DEFAULT = 0.0

ANGLE_30_DEG = math.pi / 6
THIGH_LINK_OFFSET = ANGLE_30_DEG
CALF_LINK_OFFSET = -2 * ANGLE_30_DEG

STANDING_VALUES = {
    Role.HIP: STANDING_HIP,
    Role.THIGH: STANDING_THIGH,
    Role.CALF: STANDING_CALF,
}


def drive_joint(joint: Any, value: float) -> None:
    """
    Set a joint value through the joint capability interface.

    Joints exposing ``set_value`` are driven through it; anything else gets
    the value assigned directly. An ``update()`` hook, if present, runs
    afterwards. The driven link and the joint's parent then get their world
    transforms recomputed so later baseline captures see the new pose.
    """
    set_value = getattr(joint, "set_value", None)
    if callable(set_value):
        set_value(value)
    else:
        joint.value = value

    update = getattr(joint, "update", None)
    if callable(update):
        update()

    link = getattr(joint, "link", None)
    if link is not None:
        commit(link)

    parent = getattr(joint, "parent", None)
    if parent is not None:
        commit(parent)


def _node_name(node: Any) -> str:
    return (getattr(node, "name", None) or "").lower()


class PoseInitializer:
    """
    Applies the standing configuration and registers the animated links.

    Not idempotent: the thigh and calf offsets are additive, so running it
    twice on the same skeleton doubles them. Callers gate it to a single
    invocation (see ``GaitSession.initialize_pose``).
    """

    def __init__(self):
        self.logger = get_logger("motion.pose")
        # Calf link rotations seen in the per-joint pass, before any offset
        self.pre_offset_captures: Dict[int, float] = {}

    def apply_standing_pose(
        self,
        registry: JointRegistry,
        links: LinkRegistry,
        root: Optional[Any] = None,
    ) -> None:
        """
        Put the skeleton into its standing pose.

        Args:
            registry: Classified joints
            links: Registry receiving the hip, calf and shoulder links
            root: Skeleton root; enables the name-based discovery of links
                no classified joint reaches
        """
        thigh_links = self._apply_joint_targets(registry, links)

        for link in thigh_links:
            rotate_about_axis(link, THIGH_LINK_OFFSET)
            commit(link)
            self.logger.debug(f"Thigh link {getattr(link, 'name', None)} rotated by +30.0 deg")

        for link in links.calf_links:
            self._offset_calf(link, links)

        if root is not None:
            self._discover_leg_links(root, links, thigh_links)
            self._discover_hip_shoulder_links(root, links)
            commit(root)

        self.logger.info(
            f"Standing pose applied: {len(thigh_links)} thigh links offset, tracking "
            + ", ".join(f"{name}={count}" for name, count in links.counts().items())
        )

    def _apply_joint_targets(self, registry: JointRegistry, links: LinkRegistry) -> List[Any]:
        """Set every animated joint to its standing value; returns the thigh links."""
        thigh_links: List[Any] = []

        for record in registry.leg_joints():
            value = STANDING_VALUES.get(record.role, STANDING_DEFAULT)
            self._set_standing(record, value)

            link = record.link
            if link is None:
                continue

            if record.role is Role.HIP:
                links.track(LinkGroup.HIP, link)
            elif record.role is Role.THIGH:
                if not any(tracked is link for tracked in thigh_links):
                    thigh_links.append(link)
            elif record.role is Role.CALF:
                if links.track(LinkGroup.CALF, link, capture=False):
                    self.pre_offset_captures[id(link)] = axis_rotation(link)
                    self.logger.debug(f"Found calf link: {getattr(link, 'name', None) or 'unnamed'}")

        return thigh_links

    def _set_standing(self, record: ClassifiedJoint, value: float) -> None:
        drive_joint(record.joint, value)
        record.value = value
        record.initial_value = value

        if record.role is Role.CALF:
            self.logger.debug(
                f"Calf joint {record.name}: set to {value:.3f} ({math.degrees(value):.1f} deg)"
            )

    def _offset_calf(self, link: Any, links: LinkRegistry) -> None:
        baseline = links.capture(link)
        rotate_about_axis(link, CALF_LINK_OFFSET)
        commit(link)
        self.logger.debug(
            f"Calf link {getattr(link, 'name', None)}: baseline "
            f"{math.degrees(baseline):.1f} deg, rotated by -60.0 deg"
        )

    def _discover_leg_links(self, root: Any, links: LinkRegistry, thigh_links: List[Any]) -> None:
        """Offset thigh/calf links that no classified joint reached."""
        found_thighs: List[Any] = []
        found_calves: List[Any] = []

        for node in root.traverse():
            name = _node_name(node)
            if "joint" in name or "rotor" in name:
                continue
            if "thigh" in name:
                found_thighs.append(node)
            if "calf" in name:
                found_calves.append(node)

        for link in found_thighs:
            if any(tracked is link for tracked in thigh_links):
                continue
            thigh_links.append(link)
            rotate_about_axis(link, THIGH_LINK_OFFSET)
            commit(link)
            self.logger.debug(f"Found thigh link by name: {link.name}, rotated by +30.0 deg")

        for link in found_calves:
            if links.track(LinkGroup.CALF, link, capture=False):
                self._offset_calf(link, links)
                self.logger.debug(f"Found calf link by name: {link.name}")

    def _discover_hip_shoulder_links(self, root: Any, links: LinkRegistry) -> None:
        """Track hip and shoulder links by name; baselines only, no offset."""
        for node in root.traverse():
            name = _node_name(node)
            if any(word in name for word in ("joint", "rotor", "thigh", "calf")):
                continue
            if "shoulder" in name:
                if links.track(LinkGroup.SHOULDER, node):
                    self.logger.debug(f"Found shoulder link by name: {node.name}")
            elif "hip" in name:
                if links.track(LinkGroup.HIP, node):
                    self.logger.debug(f"Found hip link by name: {node.name}")
