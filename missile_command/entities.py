"""
Game entity dataclasses
"""

from dataclasses import dataclass
from typing import Optional

CITY = "city"
BASE = "base"


@dataclass
class Base:
    """Player launch site at the bottom of the play area"""
    x: float
    y: float
    half_width: float = 15.0
    half_height: float = 12.5
    destroyed: bool = False


@dataclass
class City:
    """Passive ground target; never launches"""
    x: float
    y: float
    half_width: float = 10.0
    half_height: float = 12.5
    destroyed: bool = False


@dataclass
class EnemyMissile:
    """Hostile missile falling straight down toward a pre-selected target.

    The target is stored as ``(target_kind, target_index)`` into the engine's
    city or base list and is only used for lookup.
    """
    x: float
    y: float
    speed: float
    target_kind: str = CITY
    target_index: int = 0
    alive: bool = True


@dataclass
class PlayerMissile:
    """Interceptor flying with the velocity it was launched with"""
    x: float
    y: float
    dx: float
    dy: float
    alive: bool = True


@dataclass
class Explosion:
    """Growing kill radius with a tick countdown"""
    x: float
    y: float
    radius: float = 5.0
    life: int = 20
    max_radius: Optional[float] = None  # None -> linear growth
    large: bool = False

    @property
    def alive(self) -> bool:
        return self.life > 0
