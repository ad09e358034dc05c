"""
Game state containers: the engine's owned mutable state and the read-only
snapshot handed to renderers.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Tuple

from .entities import Base, City, EnemyMissile, PlayerMissile, Explosion


@dataclass
class GameState:
    """Mutable state owned by a single engine"""
    score: int = 0
    level: int = 1
    game_over: bool = False
    frame: int = 0
    bases: List[Base] = field(default_factory=list)
    cities: List[City] = field(default_factory=list)
    enemy_missiles: List[EnemyMissile] = field(default_factory=list)
    player_missiles: List[PlayerMissile] = field(default_factory=list)
    explosions: List[Explosion] = field(default_factory=list)


@dataclass(frozen=True)
class GameSnapshot:
    """Copy of a GameState; changing it never touches the engine"""
    score: int
    level: int
    game_over: bool
    frame: int
    bases: Tuple[Base, ...]
    cities: Tuple[City, ...]
    enemy_missiles: Tuple[EnemyMissile, ...]
    player_missiles: Tuple[PlayerMissile, ...]
    explosions: Tuple[Explosion, ...]

    @classmethod
    def from_state(cls, state: GameState) -> "GameSnapshot":
        def copies(items):
            return tuple(copy.copy(item) for item in items)

        return cls(
            score=state.score,
            level=state.level,
            game_over=state.game_over,
            frame=state.frame,
            bases=copies(state.bases),
            cities=copies(state.cities),
            enemy_missiles=copies(state.enemy_missiles),
            player_missiles=copies(state.player_missiles),
            explosions=copies(state.explosions),
        )
