"""
Input boundary: turns raw pointer coordinates into engine launches
"""

import logging
from typing import Optional

from .engine import MissileCommandEngine
from .entities import PlayerMissile
from .utils import sanitize_point

logger = logging.getLogger(__name__)


def handle_click(engine: MissileCommandEngine, x: float, y: float) -> Optional[PlayerMissile]:
    """Launch from the nearest undestroyed base toward (x, y) in engine coordinates.

    Coordinates outside the play area are clamped to it. NaN or infinite
    coordinates are rejected here so the engine never sees them.
    """
    if engine.game_over:
        return None

    point = sanitize_point(x, y, engine.width, engine.height)
    if point is None:
        logger.debug("Ignoring click at invalid point (%r, %r)", x, y)
        return None

    tx, ty = point
    return engine.launch_interceptor(engine.find_nearest_base(tx, ty), tx, ty)


def screen_to_world(x: float, y: float, height: float):
    """Arcade uses a bottom-left origin; the engine uses top-left"""
    return x, height - y
