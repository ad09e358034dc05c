"""
MissileCommandEngine - frame-driven missile defense simulation
--------------------------------------------------------------
- Owns bases, cities, enemy missiles, player missiles and explosions
- One update() call advances exactly one frame:
    spawn -> enemy advance -> player advance -> explosion advance
    -> collisions (interceptions, explosion hits, ground impacts)
- Entities are flagged dead during a pass and filtered out afterwards,
  so no collection is mutated while it is being iterated
- Detonation sound is an injected callback; its failures are logged only

Coordinates use a top-left origin with y growing downward.
"""

from __future__ import annotations

import logging
import random
from itertools import chain
from typing import Callable, Dict, List, Optional, Sequence, Union

from .entities import Base, City, EnemyMissile, PlayerMissile, Explosion, CITY, BASE
from .state import GameState, GameSnapshot
from .utils import distance, normalize, box_contains, in_bounds, clamp

logger = logging.getLogger(__name__)

# Launch direction used when the target equals the base position
DEFAULT_LAUNCH_DIRECTION = (0.0, -1.0)

LAUNCH_FLASH_RADIUS = 5.0
LAUNCH_FLASH_LIFE = 20
DETONATION_START_RADIUS = 5.0
DETONATION_LIFE = 50
LINEAR_GROWTH = 0.5
DECAY_GROWTH = 0.1

EVENT_KEYS = ("spawned", "kills", "detonations", "cities_lost", "bases_lost", "missed", "level_ups")


def default_bases(width: float, height: float) -> List[Base]:
    """Three bases: left, center, right"""
    return [Base(x=x, y=height - 15) for x in (80, width / 2, width - 80)]


def default_cities(width: float, height: float) -> List[City]:
    """Six cities between the bases"""
    return [City(x=width * f, y=height - 20) for f in (0.2, 0.3, 0.4, 0.6, 0.7, 0.8)]


class MissileCommandEngine:
    """Simulation core; renderers read snapshot(), input layers call launch_interceptor()"""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        spawn_probability: float = 0.02,
        spawn_probability_per_level: float = 0.0,
        base_speed: float = 0.5,
        level_speed_factor: float = 0.125,
        launch_speed: float = 3.5,
        missile_length: float = 20.0,
        points_per_kill: int = 100,
        points_per_level: Optional[int] = None,
        end_on_total_loss: bool = True,
        bases: Optional[Sequence[Base]] = None,
        cities: Optional[Sequence[City]] = None,
        on_detonation: Optional[Callable[[], None]] = None,
        seed: Optional[int] = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Play area must be positive, got {width}x{height}")
        if not 0.0 <= spawn_probability <= 1.0:
            raise ValueError(f"spawn_probability must be in [0, 1], got {spawn_probability}")
        if launch_speed <= 0:
            raise ValueError(f"launch_speed must be positive, got {launch_speed}")
        if points_per_level is not None and points_per_level <= 0:
            raise ValueError(f"points_per_level must be positive, got {points_per_level}")

        # Arena
        self.width = width
        self.height = height

        # Gameplay config
        self.spawn_probability = spawn_probability
        self.spawn_probability_per_level = spawn_probability_per_level
        self.base_speed = base_speed
        self.level_speed_factor = level_speed_factor
        self.launch_speed = launch_speed
        self.missile_length = missile_length
        self.points_per_kill = points_per_kill
        self.points_per_level = points_per_level
        self.end_on_total_loss = end_on_total_loss

        # Layout templates; reset() hands out fresh copies
        self._base_layout = list(bases) if bases is not None else None
        self._city_layout = list(cities) if cities is not None else None

        self.on_detonation = on_detonation

        self._rng = random.Random(seed)
        self._events: Dict[str, int] = {}
        self.state = GameState()
        self.reset(seed)

    # ----------------------------
    # Derived constants
    # ----------------------------

    @property
    def proximity_threshold(self) -> float:
        return self.missile_length * 2

    @property
    def detonation_radius(self) -> float:
        return self.missile_length * 5

    def enemy_speed(self, level: Optional[int] = None) -> float:
        """Downward speed of a missile spawned at the given (or current) level"""
        if level is None:
            level = self.state.level
        return self.base_speed + level * self.level_speed_factor

    def current_spawn_probability(self) -> float:
        extra = (self.state.level - 1) * self.spawn_probability_per_level
        return clamp(self.spawn_probability + extra, 0.0, 1.0)

    # ----------------------------
    # Read access
    # ----------------------------

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def bases(self) -> List[Base]:
        return self.state.bases

    @property
    def cities(self) -> List[City]:
        return self.state.cities

    @property
    def enemy_missiles(self) -> List[EnemyMissile]:
        return self.state.enemy_missiles

    @property
    def player_missiles(self) -> List[PlayerMissile]:
        return self.state.player_missiles

    @property
    def explosions(self) -> List[Explosion]:
        return self.state.explosions

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot.from_state(self.state)

    def resolve_target(self, missile: EnemyMissile) -> Optional[Union[City, Base]]:
        """Look up the ground target an enemy missile was aimed at"""
        pool = self.state.cities if missile.target_kind == CITY else self.state.bases
        if 0 <= missile.target_index < len(pool):
            return pool[missile.target_index]
        return None

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def reset(self, seed: Optional[int] = None):
        if seed is not None:
            self._rng.seed(seed)

        if self._base_layout is not None:
            bases = [Base(b.x, b.y, b.half_width, b.half_height, b.destroyed) for b in self._base_layout]
        else:
            bases = default_bases(self.width, self.height)
        if self._city_layout is not None:
            cities = [City(c.x, c.y, c.half_width, c.half_height, c.destroyed) for c in self._city_layout]
        else:
            cities = default_cities(self.width, self.height)

        self.state = GameState(bases=bases, cities=cities)
        self._events = {key: 0 for key in EVENT_KEYS}
        logger.debug("Engine reset: %d bases, %d cities", len(bases), len(cities))

    def update(self) -> Dict[str, int]:
        """Advance one frame and return the events it produced"""
        self._events = {key: 0 for key in EVENT_KEYS}
        if self.state.game_over:
            return dict(self._events)

        # Spawn logic
        self._spawn_logic()

        # Update world
        self._update_enemy_missiles()
        self._update_player_missiles()
        self._update_explosions()

        # Handle collisions
        self._handle_collisions()

        self._update_level()
        self._check_game_over()
        self.state.frame += 1
        return dict(self._events)

    # ----------------------------
    # Input
    # ----------------------------

    def find_nearest_base(self, x: float, y: float) -> Optional[Base]:
        """Closest undestroyed base; the first one wins ties"""
        nearest = None
        min_distance = float("inf")
        for base in self.state.bases:
            if base.destroyed:
                continue
            d = distance(x, y, base.x, base.y)
            if d < min_distance:
                min_distance = d
                nearest = base
        return nearest

    def owned_base(self, base: Union[Base, int, None]) -> Optional[Base]:
        """Resolve a base index or Base object to the engine-owned instance"""
        if base is None or isinstance(base, bool):
            return None
        if isinstance(base, int):
            if 0 <= base < len(self.state.bases):
                return self.state.bases[base]
            return None
        for owned in self.state.bases:
            if owned is base:
                return owned
        return None

    def launch_interceptor(self, base: Union[Base, int, None], target_x: float, target_y: float) -> Optional[PlayerMissile]:
        """Fire from one of this engine's bases, given by index or as the owned object.

        Snapshot copies and bases built elsewhere are refused.
        """
        base = self.owned_base(base)
        if base is None or base.destroyed or self.state.game_over:
            return None

        dx, dy = normalize(target_x - base.x, target_y - base.y)
        if dx == 0.0 and dy == 0.0:
            dx, dy = DEFAULT_LAUNCH_DIRECTION

        missile = PlayerMissile(
            x=base.x,
            y=base.y,
            dx=dx * self.launch_speed,
            dy=dy * self.launch_speed,
        )
        self.state.player_missiles.append(missile)

        # Launch flash at the base
        self.state.explosions.append(
            Explosion(x=base.x, y=base.y, radius=LAUNCH_FLASH_RADIUS, life=LAUNCH_FLASH_LIFE)
        )
        return missile

    def launch_from_nearest(self, x: float, y: float) -> Optional[PlayerMissile]:
        """Launch from whichever undestroyed base is closest to the target point"""
        if self.state.game_over:
            return None
        return self.launch_interceptor(self.find_nearest_base(x, y), x, y)

    # ----------------------------
    # Spawn policy
    # ----------------------------

    def _spawn_logic(self):
        if self._rng.random() < self.current_spawn_probability():
            self.spawn_enemy()

    def spawn_enemy(self) -> Optional[EnemyMissile]:
        """Pick the city or base pool 50/50, then one member; skip if it is gone"""
        if self._rng.random() < 0.5:
            kind, pool = CITY, self.state.cities
        else:
            kind, pool = BASE, self.state.bases

        if not pool:
            return None
        index = self._rng.randrange(len(pool))
        if pool[index].destroyed:
            return None

        missile = EnemyMissile(
            x=self._rng.uniform(0, self.width),
            y=0.0,
            speed=self.enemy_speed(),
            target_kind=kind,
            target_index=index,
        )
        self.state.enemy_missiles.append(missile)
        self._events["spawned"] += 1
        return missile

    # ----------------------------
    # Motion
    # ----------------------------

    def _enemy_dead(self, m: EnemyMissile) -> bool:
        return not m.alive or m.y >= self.height

    def _player_dead(self, m: PlayerMissile) -> bool:
        return not m.alive or not in_bounds(m.x, m.y, self.width, self.height)

    def _update_enemy_missiles(self):
        for m in self.state.enemy_missiles:
            m.y += m.speed
            if m.y >= self.height:
                m.alive = False
                self._events["missed"] += 1

        self.state.enemy_missiles = [m for m in self.state.enemy_missiles if m.alive]

    def _update_player_missiles(self):
        for m in self.state.player_missiles:
            m.x += m.dx
            m.y += m.dy
            if not in_bounds(m.x, m.y, self.width, self.height):
                m.alive = False

        self.state.player_missiles = [m for m in self.state.player_missiles if m.alive]

    def _update_explosions(self):
        for e in self.state.explosions:
            if e.max_radius is not None:
                e.radius += (e.max_radius - e.radius) * DECAY_GROWTH
            else:
                e.radius += LINEAR_GROWTH
            e.life -= 1

        self.state.explosions = [e for e in self.state.explosions if e.alive]

    # ----------------------------
    # Collisions
    # ----------------------------

    def _handle_collisions(self):
        self._resolve_interceptions()
        self._resolve_explosion_hits()
        self._resolve_ground_impacts()

    def _resolve_interceptions(self):
        # Player missiles vs enemy missiles
        for pm in self.state.player_missiles:
            for em in self.state.enemy_missiles:
                if not em.alive:
                    continue
                if distance(pm.x, pm.y, em.x, em.y) < self.proximity_threshold:
                    self._detonate(pm)
                    break

        self.state.player_missiles = [m for m in self.state.player_missiles if m.alive]
        self.state.enemy_missiles = [m for m in self.state.enemy_missiles if m.alive]

    def _detonate(self, pm: PlayerMissile):
        pm.alive = False
        explosion = Explosion(
            x=pm.x,
            y=pm.y,
            radius=DETONATION_START_RADIUS,
            life=DETONATION_LIFE,
            max_radius=self.detonation_radius,
            large=True,
        )
        self.state.explosions.append(explosion)
        self._events["detonations"] += 1
        self._play_detonation_sound()

        # Chain kill: everything already inside the final radius goes now
        for em in self.state.enemy_missiles:
            if em.alive and distance(em.x, em.y, explosion.x, explosion.y) <= explosion.max_radius:
                em.alive = False
                self._award_kill()

    def _resolve_explosion_hits(self):
        for em in self.state.enemy_missiles:
            for e in self.state.explosions:
                if distance(em.x, em.y, e.x, e.y) < e.radius:
                    em.alive = False
                    self._award_kill()
                    break

        self.state.enemy_missiles = [m for m in self.state.enemy_missiles if m.alive]

    def _resolve_ground_impacts(self):
        for em in self.state.enemy_missiles:
            for target in chain(self.state.cities, self.state.bases):
                if target.destroyed:
                    continue
                if box_contains(em.x, em.y, target.x, target.y, target.half_width, target.half_height):
                    target.destroyed = True
                    em.alive = False
                    if isinstance(target, City):
                        self._events["cities_lost"] += 1
                    else:
                        self._events["bases_lost"] += 1
                    break

        self.state.enemy_missiles = [m for m in self.state.enemy_missiles if m.alive]

    def _award_kill(self):
        self.state.score += self.points_per_kill
        self._events["kills"] += 1

    # ----------------------------
    # Scoring / termination
    # ----------------------------

    def _update_level(self):
        if self.points_per_level is None:
            return
        reached = 1 + self.state.score // self.points_per_level
        while self.state.level < reached:
            self.state.level += 1
            self._events["level_ups"] += 1
            logger.info("Level up: %d (score %d)", self.state.level, self.state.score)

    def _check_game_over(self):
        if not self.end_on_total_loss:
            return
        targets = self.state.bases + self.state.cities
        if targets and all(t.destroyed for t in targets):
            self.state.game_over = True
            logger.info("Game over at frame %d, score %d", self.state.frame, self.state.score)

    def prune(self):
        """Drop every entity whose removal predicate holds; calling it twice changes nothing"""
        self.state.enemy_missiles = [m for m in self.state.enemy_missiles if not self._enemy_dead(m)]
        self.state.player_missiles = [m for m in self.state.player_missiles if not self._player_dead(m)]
        self.state.explosions = [e for e in self.state.explosions if e.alive]

    # ----------------------------
    # Audio port
    # ----------------------------

    def _play_detonation_sound(self):
        if self.on_detonation is None:
            return
        try:
            self.on_detonation()
        except Exception:
            logger.warning("Detonation sound failed", exc_info=True)
