"""Link Registry - tracked body links and their baseline rotations"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from trotgait.core import get_logger

# Euler component all pose offsets and gait swings act on (Y)
ROTATION_AXIS = 1


class LinkGroup(Enum):
    """Animated link sets."""
    HIP = "hip"
    CALF = "calf"
    SHOULDER = "shoulder"


def axis_rotation(link: Any) -> float:
    """The link's local rotation about the animation axis."""
    return float(link.rotation[ROTATION_AXIS])


def set_axis_rotation(link: Any, angle: float) -> None:
    link.rotation[ROTATION_AXIS] = angle


def rotate_about_axis(link: Any, delta: float) -> None:
    link.rotation[ROTATION_AXIS] += delta


def commit(node: Any) -> None:
    """Recompute a node's world transform, if it supports it."""
    update = getattr(node, "update_matrix_world", None)
    if callable(update):
        update()


class LinkRegistry:
    """
    The links animated per frame, grouped by body part.

    Each link carries a baseline rotation about ``ROTATION_AXIS``. All
    later rotations are computed relative to the baseline; a baseline is
    recorded once and never re-read from the (mutated) link. Membership is
    by identity, so the same link object is tracked at most once per group.
    """

    def __init__(self):
        self.logger = get_logger("motion.links")
        self._groups: Dict[LinkGroup, List[Any]] = {group: [] for group in LinkGroup}
        self._baselines: Dict[int, float] = {}

    def track(self, group: LinkGroup, link: Any, capture: bool = True) -> bool:
        """
        Add a link to a group.

        Args:
            group: Target group
            link: Link to track
            capture: Record the link's current rotation as its baseline now;
                pass False when the baseline is captured later

        Returns:
            False if the link was already in the group
        """
        if self.contains(group, link):
            return False

        self._groups[group].append(link)
        if capture:
            self.capture(link)
        return True

    def capture(self, link: Any) -> float:
        """Record the link's current axis rotation as its baseline."""
        baseline = axis_rotation(link)
        self._baselines[id(link)] = baseline
        self.logger.debug(f"Baseline for {getattr(link, 'name', None)}: {baseline:.4f} rad")
        return baseline

    def baseline(self, link: Any) -> float:
        """Baseline rotation of a tracked link, 0.0 if none was captured."""
        return self._baselines.get(id(link), 0.0)

    def has_baseline(self, link: Any) -> bool:
        return id(link) in self._baselines

    def contains(self, group: LinkGroup, link: Any) -> bool:
        return any(tracked is link for tracked in self._groups[group])

    def links(self, group: LinkGroup) -> List[Any]:
        return list(self._groups[group])

    @property
    def hip_links(self) -> List[Any]:
        return self.links(LinkGroup.HIP)

    @property
    def calf_links(self) -> List[Any]:
        return self.links(LinkGroup.CALF)

    @property
    def shoulder_links(self) -> List[Any]:
        return self.links(LinkGroup.SHOULDER)

    def items(self) -> Iterator[tuple]:
        """(group, link, baseline) for every tracked link."""
        for group, links in self._groups.items():
            for link in links:
                yield group, link, self.baseline(link)

    def counts(self) -> Dict[str, int]:
        return {group.value: len(links) for group, links in self._groups.items()}

    def __len__(self) -> int:
        return sum(len(links) for links in self._groups.values())

    def find(self, name: str) -> Optional[Any]:
        """First tracked link with the given name."""
        for _, link, _ in self.items():
            if getattr(link, "name", None) == name:
                return link
        return None
