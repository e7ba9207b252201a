"""Animation export module"""

from .clip_recorder import ClipRecorder, AnimationClip, ClipFrame

__all__ = ["ClipRecorder", "AnimationClip", "ClipFrame"]
