"""Standing pose and trot gait animation for quadruped skeletons"""

__version__ = "0.1.0"
