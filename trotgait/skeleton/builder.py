"""Build skeleton graphs from plain descriptions

A description is a dict (or a YAML file holding one)::

    name: quadruped
    root: base
    links:
      - name: base
      - name: FL_hip
    joints:
      - name: FL_hip_joint
        type: revolute
        parent: base
        child: FL_hip
        origin: {xyz: [0.3, 0.1, 0.0], rpy: [0, 0, 0]}
        axis: [1, 0, 0]

Links are attached under the joint that drives them, joints under their
parent link, and the root link under the ``Robot`` node.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union
import numpy as np
import yaml

from trotgait.core import get_logger
from .graph import Joint, Link, Robot

# Leg prefix -> (x sign, y sign) on a z-up body frame
QUADRUPED_LEGS = {
    "FL": (1.0, 1.0),
    "FR": (1.0, -1.0),
    "RL": (-1.0, 1.0),
    "RR": (-1.0, -1.0),
}


def _vector(value: Optional[Iterable[float]], default: Iterable[float]) -> np.ndarray:
    vector = np.asarray(value if value is not None else default, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"Expected 3 components, got {value!r}")
    return vector


class SkeletonBuilder:
    """Turns a skeleton description into a ``Robot`` graph."""

    def __init__(self):
        self.logger = get_logger("skeleton.builder")

    def build(self, description: Dict[str, Any]) -> Robot:
        """
        Build a robot from a description dict.

        Raises:
            ValueError: on duplicate names, unknown link references, a link
                driven by two joints, or a root that cannot be resolved
        """
        robot = Robot(description.get("name", "robot"))

        for entry in description.get("links", []):
            name = entry["name"]
            if name in robot.links:
                raise ValueError(f"Duplicate link '{name}'")
            link = Link(name)
            origin = entry.get("origin", {})
            link.position = _vector(origin.get("xyz"), (0.0, 0.0, 0.0))
            link.rotation = _vector(origin.get("rpy"), (0.0, 0.0, 0.0))
            robot.links[name] = link

        for entry in description.get("joints", []):
            joint = self._build_joint(entry, robot)
            robot.joints[joint.name] = joint

        if robot.links:
            robot.add(self._resolve_root(description.get("root"), robot))
        robot.update_matrix_world()

        self.logger.info(
            f"Built skeleton '{robot.name}' "
            f"({len(robot.links)} links, {len(robot.joints)} joints)"
        )
        return robot

    @staticmethod
    def _resolve_root(root_name: Optional[str], robot: Robot) -> Link:
        if root_name is None:
            orphans = [link for link in robot.links.values() if link.parent is None]
            if len(orphans) != 1:
                raise ValueError(
                    f"Cannot infer root link, {len(orphans)} links have no parent joint"
                )
            return orphans[0]

        if root_name not in robot.links:
            raise ValueError(f"Root link '{root_name}' is not defined")
        root_link = robot.links[root_name]
        if root_link.parent is not None:
            raise ValueError(f"Root link '{root_name}' is driven by a joint")
        return root_link

    def _build_joint(self, entry: Dict[str, Any], robot: Robot) -> Joint:
        name = entry["name"]
        if name in robot.joints:
            raise ValueError(f"Duplicate joint '{name}'")

        parent_name, child_name = entry["parent"], entry["child"]
        for ref in (parent_name, child_name):
            if ref not in robot.links:
                raise ValueError(f"Joint '{name}' references unknown link '{ref}'")

        child = robot.links[child_name]
        if child.joint is not None:
            raise ValueError(
                f"Link '{child_name}' is already driven by joint '{child.joint.name}'"
            )

        joint = Joint(
            name,
            joint_type=entry.get("type", "revolute"),
            axis=tuple(_vector(entry.get("axis"), (0.0, 0.0, 1.0))),
        )
        origin = entry.get("origin", {})
        joint.position = _vector(origin.get("xyz"), (0.0, 0.0, 0.0))
        joint.rotation = _vector(origin.get("rpy"), (0.0, 0.0, 0.0))
        joint.value = float(entry.get("value", 0.0))

        robot.links[parent_name].add(joint)
        joint.add(child)
        joint.link = child
        child.joint = joint

        self.logger.debug(f"Joint {name}: {parent_name} -> {child_name} ({joint.joint_type})")
        return joint

    def load(self, path: Union[str, Path]) -> Robot:
        """Build a robot from a YAML description file."""
        path = Path(path)
        with open(path, "r") as f:
            description = yaml.safe_load(f)
        if not isinstance(description, dict):
            raise ValueError(f"Skeleton description {path} is not a mapping")
        self.logger.info(f"Loading skeleton description from {path}")
        return self.build(description)


def quadruped_description(
    name: str = "quadruped",
    body_length: float = 0.8,
    body_width: float = 0.3,
    hip_length: float = 0.1,
    thigh_length: float = 0.35,
    calf_length: float = 0.35,
    rotors: bool = False,
) -> Dict[str, Any]:
    """
    Description of a 12-DoF quadruped with B2-style names.

    Each leg has ``<P>_hip_joint`` (abduction, X axis), ``<P>_thigh_joint``
    and ``<P>_calf_joint`` (pitch, Y axis) and a fixed ``<P>_foot_joint``,
    driving links ``<P>_hip``, ``<P>_thigh``, ``<P>_calf`` and ``<P>_foot``.
    With ``rotors`` each leg also gets fixed ``<P>_thigh_rotor`` and
    ``<P>_calf_rotor`` motor housings.
    """
    links = [{"name": "base"}]
    joints = []

    for prefix, (sx, sy) in QUADRUPED_LEGS.items():
        for segment in ("hip", "thigh", "calf", "foot"):
            links.append({"name": f"{prefix}_{segment}"})

        joints.extend([
            {
                "name": f"{prefix}_hip_joint",
                "type": "revolute",
                "parent": "base",
                "child": f"{prefix}_hip",
                "origin": {"xyz": [sx * body_length / 2, sy * body_width / 2, 0.0]},
                "axis": [1, 0, 0],
            },
            {
                "name": f"{prefix}_thigh_joint",
                "type": "revolute",
                "parent": f"{prefix}_hip",
                "child": f"{prefix}_thigh",
                "origin": {"xyz": [0.0, sy * hip_length, 0.0]},
                "axis": [0, 1, 0],
            },
            {
                "name": f"{prefix}_calf_joint",
                "type": "revolute",
                "parent": f"{prefix}_thigh",
                "child": f"{prefix}_calf",
                "origin": {"xyz": [0.0, 0.0, -thigh_length]},
                "axis": [0, 1, 0],
            },
            {
                "name": f"{prefix}_foot_joint",
                "type": "fixed",
                "parent": f"{prefix}_calf",
                "child": f"{prefix}_foot",
                "origin": {"xyz": [0.0, 0.0, -calf_length]},
            },
        ])

        if rotors:
            for segment, parent in (("thigh", f"{prefix}_hip"), ("calf", f"{prefix}_thigh")):
                rotor = f"{prefix}_{segment}_rotor"
                links.append({"name": rotor})
                joints.append({
                    "name": f"{rotor}_joint",
                    "type": "fixed",
                    "parent": parent,
                    "child": rotor,
                })

    return {"name": name, "root": "base", "links": links, "joints": joints}


def build_quadruped(**kwargs: Any) -> Robot:
    """Build the default quadruped; keyword arguments go to ``quadruped_description``."""
    return SkeletonBuilder().build(quadruped_description(**kwargs))
