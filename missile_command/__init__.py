"""Missile Command - frame-driven missile defense simulation"""

from .engine import MissileCommandEngine
from .env import MissileCommandEnv, run_random_episode
from .entities import Base, City, EnemyMissile, PlayerMissile, Explosion
from .state import GameState, GameSnapshot

__all__ = [
    'MissileCommandEngine',
    'MissileCommandEnv',
    'run_random_episode',
    'Base',
    'City',
    'EnemyMissile',
    'PlayerMissile',
    'Explosion',
    'GameState',
    'GameSnapshot',
]
