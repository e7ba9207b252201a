"""Joint Registry - classify skeleton joints by leg and anatomical role"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from trotgait.core import get_logger


class Leg(Enum):
    """Limb slot a joint belongs to."""
    FRONT_LEFT = "front_left"
    FRONT_RIGHT = "front_right"
    BACK_LEFT = "back_left"
    BACK_RIGHT = "back_right"
    NONE = "none"


class Role(Enum):
    """Anatomical role of a joint within its leg."""
    HIP = "hip"
    THIGH = "thigh"
    CALF = "calf"
    FOOT = "foot"
    ROTOR = "rotor"
    UNCLASSIFIED = "unclassified"


LEG_SLOTS = (Leg.FRONT_LEFT, Leg.FRONT_RIGHT, Leg.BACK_LEFT, Leg.BACK_RIGHT)


@dataclass(frozen=True)
class LegRule:
    """Matches when every token occurs in the lowercased identifier."""
    leg: Leg
    tokens: Tuple[str, ...]

    def matches(self, name: str) -> bool:
        return all(token in name for token in self.tokens)


@dataclass(frozen=True)
class RoleRule:
    role: Role
    keyword: str

    def matches(self, name: str) -> bool:
        return self.keyword in name


# Evaluated top to bottom, first match wins
LEG_RULES: Tuple[LegRule, ...] = (
    LegRule(Leg.FRONT_LEFT, ("fl_",)),
    LegRule(Leg.FRONT_LEFT, ("front", "left")),
    LegRule(Leg.FRONT_RIGHT, ("fr_",)),
    LegRule(Leg.FRONT_RIGHT, ("front", "right")),
    LegRule(Leg.BACK_LEFT, ("hl_",)),
    LegRule(Leg.BACK_LEFT, ("rl_",)),
    LegRule(Leg.BACK_LEFT, ("hind_left",)),
    LegRule(Leg.BACK_LEFT, ("back", "left")),
    LegRule(Leg.BACK_LEFT, ("hind", "left")),
    LegRule(Leg.BACK_LEFT, ("rear", "left")),
    LegRule(Leg.BACK_RIGHT, ("hr_",)),
    LegRule(Leg.BACK_RIGHT, ("rr_",)),
    LegRule(Leg.BACK_RIGHT, ("hind_right",)),
    LegRule(Leg.BACK_RIGHT, ("back", "right")),
    LegRule(Leg.BACK_RIGHT, ("hind", "right")),
    LegRule(Leg.BACK_RIGHT, ("rear", "right")),
)

# Rotor first: a motor housing on the hip is still a rotor
ROLE_RULES: Tuple[RoleRule, ...] = (
    RoleRule(Role.ROTOR, "rotor"),
    RoleRule(Role.HIP, "hip"),
    RoleRule(Role.THIGH, "thigh"),
    RoleRule(Role.CALF, "calf"),
    RoleRule(Role.CALF, "shin"),
    RoleRule(Role.CALF, "knee"),
    RoleRule(Role.FOOT, "ankle"),
    RoleRule(Role.FOOT, "foot"),
)


def detect_leg(name: Optional[str]) -> Leg:
    """Leg slot named by an identifier, ``Leg.NONE`` if no rule matches."""
    lowered = (name or "").lower()
    for rule in LEG_RULES:
        if rule.matches(lowered):
            return rule.leg
    return Leg.NONE


def detect_role(name: Optional[str]) -> Role:
    """Role keyword in an identifier, ``Role.UNCLASSIFIED`` if none."""
    lowered = (name or "").lower()
    for rule in ROLE_RULES:
        if rule.matches(lowered):
            return rule.role
    return Role.UNCLASSIFIED


def classify_name(name: str) -> Tuple[Leg, Role]:
    """
    Classify one joint identifier.

    The role is only looked up once a leg matched, and a leg without a role
    keyword is dropped again, so the result is either a (leg, role) pair or
    (NONE, UNCLASSIFIED).
    """
    leg = detect_leg(name)
    if leg is Leg.NONE:
        return Leg.NONE, Role.UNCLASSIFIED

    role = detect_role(name)
    if role is Role.UNCLASSIFIED:
        return Leg.NONE, Role.UNCLASSIFIED
    return leg, role


@dataclass
class ClassifiedJoint:
    """A skeleton joint together with its classification."""
    name: str
    leg: Leg
    role: Role
    value: float
    initial_value: float
    joint: Any = field(repr=False)

    @property
    def link(self) -> Any:
        """The link driven by this joint, or None."""
        return getattr(self.joint, "link", None)

    @property
    def is_animated(self) -> bool:
        """True for leg-assigned joints that take part in pose and gait."""
        return self.leg is not Leg.NONE and self.role not in (Role.ROTOR, Role.UNCLASSIFIED)


@dataclass
class LegGroup:
    """Joint identifiers assigned to one leg slot, in classification order."""
    leg: Leg
    joint_names: List[str] = field(default_factory=list)

    def __contains__(self, name: str) -> bool:
        return name in self.joint_names

    def __len__(self) -> int:
        return len(self.joint_names)


class JointRegistry:
    """
    Every joint of a skeleton, classified by leg and role.

    Classification is a pure function of the identifiers: joints are visited
    in sorted order and each is classified on its own name only, so
    re-running it on the same skeleton gives the same groups regardless of
    the order the loader produced. Unrecognized joints stay registered as
    ``NONE``/``UNCLASSIFIED``.
    """

    def __init__(self):
        self.logger = get_logger("motion.registry")
        self.joints: Dict[str, ClassifiedJoint] = {}
        self.leg_groups: Dict[Leg, LegGroup] = {leg: LegGroup(leg) for leg in LEG_SLOTS}

    @classmethod
    def classify(cls, skeleton: Any) -> "JointRegistry":
        """
        Classify the joints of a skeleton.

        Args:
            skeleton: an object with a ``joints`` mapping, or the mapping
                itself (identifier -> joint)
        """
        registry = cls()
        joints: Mapping[str, Any] = getattr(skeleton, "joints", skeleton) or {}

        for name in sorted(joints):
            registry.register(name, joints[name])

        registry.logger.info(
            f"Classified {len(registry.joints)} joints: "
            + ", ".join(f"{leg.value}={len(group)}" for leg, group in registry.leg_groups.items())
        )
        return registry

    def register(self, name: str, joint: Any) -> ClassifiedJoint:
        leg, role = classify_name(name)
        value = getattr(joint, "value", None)
        initial_value = float(value) if value is not None else 0.0

        record = ClassifiedJoint(
            name=name,
            leg=leg,
            role=role,
            value=initial_value,
            initial_value=initial_value,
            joint=joint,
        )
        self.joints[name] = record

        if record.is_animated:
            self.leg_groups[leg].joint_names.append(name)
            self.logger.debug(f"{name}: {leg.value}/{role.value}")
        elif leg is not Leg.NONE:
            self.logger.debug(f"{name}: {leg.value}/{role.value} (not animated)")

        return record

    def get(self, name: str) -> Optional[ClassifiedJoint]:
        return self.joints.get(name)

    def leg_joints(self) -> Iterator[ClassifiedJoint]:
        """Animated joints, leg slot by leg slot."""
        for leg in LEG_SLOTS:
            for name in self.leg_groups[leg].joint_names:
                yield self.joints[name]

    def group_names(self) -> Dict[str, List[str]]:
        return {leg.value: list(group.joint_names) for leg, group in self.leg_groups.items()}

    def __len__(self) -> int:
        return len(self.joints)

    def __contains__(self, name: str) -> bool:
        return name in self.joints

    def __iter__(self) -> Iterator[ClassifiedJoint]:
        return iter(self.joints.values())


def classify(skeleton: Any) -> Tuple[JointRegistry, Tuple[LegGroup, ...]]:
    """Classify a skeleton, returning the registry and its four leg groups."""
    registry = JointRegistry.classify(skeleton)
    return registry, tuple(registry.leg_groups[leg] for leg in LEG_SLOTS)
