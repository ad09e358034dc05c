"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points"""
    return math.hypot(x1 - x2, y1 - y2)


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length; near-zero vectors map to (0, 0)"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def box_contains(px: float, py: float, cx: float, cy: float,
                 half_width: float, half_height: float) -> bool:
    """Check if a point lies inside an axis-aligned box given by centre and half extents"""
    return abs(px - cx) <= half_width and abs(py - cy) <= half_height


def in_bounds(x: float, y: float, width: float, height: float) -> bool:
    """Check if a point lies inside [0, width] x [0, height]"""
    return 0 <= x <= width and 0 <= y <= height


def sanitize_point(x: float, y: float, width: float, height: float) -> Optional[Tuple[float, float]]:
    """Clamp an input point to the play area; NaN or infinite input gives None"""
    try:
        x = float(x)
        y = float(y)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return clamp(x, 0.0, width), clamp(y, 0.0, height)


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
