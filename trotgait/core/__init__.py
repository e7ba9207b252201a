"""Core systems - config, logging, timing"""

from .config import Config
from .logging import setup_logging, get_logger
from .timing import FrameTimer, FrameClock, FixedStepClock, FrameData

__all__ = [
    "Config", "setup_logging", "get_logger",
    "FrameTimer", "FrameClock", "FixedStepClock", "FrameData",
]
