"""Motion processing - joint classification, standing pose and trot gait"""

from .joint_registry import (
    JointRegistry, ClassifiedJoint, LegGroup, Leg, Role,
    LEG_RULES, ROLE_RULES, classify, classify_name, detect_leg, detect_role,
)
from .link_registry import LinkRegistry, LinkGroup, ROTATION_AXIS
from .pose_initializer import PoseInitializer, drive_joint
from .gait_oscillator import GaitOscillator, GaitSample, Phase, ease, phase_for
from .animation_driver import AnimationDriver, calf_angle, hip_swing
from .session import GaitSession

__all__ = [
    "JointRegistry", "ClassifiedJoint", "LegGroup", "Leg", "Role",
    "LEG_RULES", "ROLE_RULES", "classify", "classify_name", "detect_leg", "detect_role",
    "LinkRegistry", "LinkGroup", "ROTATION_AXIS",
    "PoseInitializer", "drive_joint",
    "GaitOscillator", "GaitSample", "Phase", "ease", "phase_for",
    "AnimationDriver", "calf_angle", "hip_swing",
    "GaitSession",
]
