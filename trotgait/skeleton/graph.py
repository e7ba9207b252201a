"""Skeleton scene graph - links, joints and the robot root

A minimal transform hierarchy in the style of a render-engine scene graph:
every node has a local position, Euler rotation (XYZ order, radians) and
scale, and a cached world matrix that is recomputed explicitly with
``update_matrix_world``. Joints are nodes whose local transform is further
rotated about their axis by their scalar value, with the driven link as
their child.
"""

from typing import Dict, Iterator, List, Optional, Protocol, Tuple, runtime_checkable
import numpy as np


def euler_to_matrix(rotation: np.ndarray) -> np.ndarray:
    """Rotation matrix for Euler angles applied in XYZ order."""
    rx, ry, rz = rotation
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)

    mx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    my = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    mz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return mx @ my @ mz


def axis_angle_matrix(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rodrigues rotation matrix about a (normalized) axis."""
    length = np.linalg.norm(axis)
    if length < 1e-12 or angle == 0.0:
        return np.eye(3)
    x, y, z = axis / length
    c, s = np.cos(angle), np.sin(angle)
    t = 1.0 - c
    return np.array([
        [t * x * x + c, t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, t * y * y + c, t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, t * z * z + c],
    ])


def compose(position: np.ndarray, rotation: np.ndarray, scale: np.ndarray) -> np.ndarray:
    """4x4 transform from translation, 3x3 rotation and per-axis scale."""
    matrix = np.eye(4)
    matrix[:3, :3] = rotation * scale  # scales columns
    matrix[:3, 3] = position
    return matrix


class Node:
    """A named node in the transform hierarchy."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.position = np.zeros(3)
        self.rotation = np.zeros(3)
        self.scale = np.ones(3)
        self.parent: Optional["Node"] = None
        self.children: List["Node"] = []
        self.matrix = np.eye(4)
        self.matrix_world = np.eye(4)

    def add(self, child: "Node") -> "Node":
        """Attach ``child`` under this node, detaching it from any old parent."""
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def local_rotation_matrix(self) -> np.ndarray:
        return euler_to_matrix(self.rotation)

    def update_matrix(self) -> None:
        self.matrix = compose(self.position, self.local_rotation_matrix(), self.scale)

    def update_matrix_world(self) -> None:
        """Recompute the local and world matrices of this node and its subtree."""
        stack: List[Tuple["Node", Optional[np.ndarray]]] = [
            (self, self.parent.matrix_world if self.parent is not None else None)
        ]
        while stack:
            node, parent_world = stack.pop()
            node.update_matrix()
            node.matrix_world = node.matrix if parent_world is None else parent_world @ node.matrix
            for child in node.children:
                stack.append((child, node.matrix_world))

    def traverse(self) -> Iterator["Node"]:
        """Depth-first, pre-order walk over this node and all descendants."""
        stack: List["Node"] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def world_position(self) -> np.ndarray:
        return self.matrix_world[:3, 3].copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Link(Node):
    """A rigid body part. ``joint`` is the joint driving it, if any."""

    def __init__(self, name: Optional[str] = None):
        super().__init__(name)
        self.joint: Optional["Joint"] = None


@runtime_checkable
class JointActuator(Protocol):
    """What the pose code needs from a joint: a value and a way to set it.

    ``update()`` is optional; joints that have it get it called after
    their value changes.
    """

    value: float

    def set_value(self, value: float) -> bool:
        ...


class Joint(Node):
    """A single degree of freedom between a parent link and its child link."""

    MOVABLE_TYPES = ("revolute", "continuous", "prismatic")

    def __init__(
        self,
        name: str,
        joint_type: str = "revolute",
        axis: Tuple[float, float, float] = (0.0, 0.0, 1.0),
    ):
        super().__init__(name)
        self.joint_type = joint_type
        self.axis = np.asarray(axis, dtype=np.float64)
        self.value = 0.0
        self.link: Optional[Link] = None

    @property
    def is_movable(self) -> bool:
        return self.joint_type in self.MOVABLE_TYPES

    def set_value(self, value: float) -> bool:
        """Set the joint value. Returns False for fixed joints, which ignore it."""
        if not self.is_movable:
            return False
        self.value = float(value)
        return True

    def update(self) -> None:
        """Recompute transforms below this joint after a value change."""
        self.update_matrix_world()

    def update_matrix(self) -> None:
        rotation = self.local_rotation_matrix()
        position = self.position
        if self.joint_type in ("revolute", "continuous"):
            rotation = rotation @ axis_angle_matrix(self.axis, self.value)
        elif self.joint_type == "prismatic":
            position = position + rotation @ (self.axis * self.value)
        self.matrix = compose(position, rotation, self.scale)


class Robot(Node):
    """Root of a loaded skeleton, with lookup tables for joints and links."""

    def __init__(self, name: Optional[str] = None):
        super().__init__(name)
        self.joints: Dict[str, Joint] = {}
        self.links: Dict[str, Link] = {}

    @property
    def movable_joints(self) -> Dict[str, Joint]:
        return {name: joint for name, joint in self.joints.items() if joint.is_movable}

    def link_positions(self) -> np.ndarray:
        """(N, 3) world positions of every link origin, N may be zero."""
        positions = [node.world_position for node in self.traverse() if isinstance(node, Link)]
        if not positions:
            return np.zeros((0, 3))
        return np.array(positions)
