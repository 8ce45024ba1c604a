"""Trim: the angle of attack at which the pitching moment vanishes."""

from .config import TrimSettings
from .trim_orientation import TrimOrientationCalculator, find_root_illinois

__all__ = [
    "TrimSettings",
    "TrimOrientationCalculator",
    "find_root_illinois",
]
