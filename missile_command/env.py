"""
MissileCommandEnv - Gymnasium wrapper around MissileCommandEngine
-----------------------------------------------------------------
- Gymnasium API; one env step = one engine frame
- Action: MultiDiscrete [fire(2), aim column, aim row]; firing launches from
  the nearest undestroyed base toward the centre of the aim cell
- Vector observation: level + base/city alive flags + interceptor count +
  the K enemy missiles closest to the ground
- Reward from frame events: kills, lost cities/bases, shots, game over
- Arcade window for "human", numpy raster for "rgb_array"

Install:
    pip install gymnasium arcade numpy

Quick test:
    python -m missile_command.env
"""

from __future__ import annotations

import logging
from typing import Optional, Dict, Any

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import REWARD_CONFIG
from .engine import MissileCommandEngine
from .utils import clamp, seed_everything

logger = logging.getLogger(__name__)

MAX_LEVEL_OBS = 10
MAX_INTERCEPTORS_OBS = 10


class MissileCommandEnv(gym.Env):
    """Missile defense environment driven one frame per step"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        max_steps: int = 3600,
        k_missiles: int = 5,
        aim_cols: int = 16,
        aim_rows: int = 12,
        reward_config: Optional[Dict[str, float]] = None,
        **engine_kwargs,
    ):
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")
        if aim_cols <= 0 or aim_rows <= 0:
            raise ValueError("aim grid must have at least one cell")
        self.render_mode = render_mode

        self.engine = MissileCommandEngine(**engine_kwargs)
        self.max_steps = max_steps
        self.k_missiles = k_missiles
        self.aim_cols = aim_cols
        self.aim_rows = aim_rows
        self.reward_config = dict(REWARD_CONFIG)
        if reward_config:
            self.reward_config.update(reward_config)

        # Action space:
        # fire: 0/1
        # aim: column, row of the target grid
        self.action_space = spaces.MultiDiscrete([2, aim_cols, aim_rows])

        # Observation space (vector)
        # level(1), base flags, city flags, interceptors(1), each missile: pos(2) speed(1)
        n_bases = len(self.engine.bases)
        n_cities = len(self.engine.cities)
        obs_dim = 1 + n_bases + n_cities + 1 + (self.k_missiles * 3)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        # Arcade rendering state
        self._window = None

        self._step_count = 0
        self._events: Dict[str, int] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        self._step_count = 0
        self.engine.reset(seed)
        self._events = {}
        logger.debug("Environment reset (seed=%s)", seed)

        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action):
        fire, col, row = int(action[0]), int(action[1]), int(action[2])

        shots = 0
        if fire:
            tx, ty = self.aim_point(col, row)
            if self.engine.launch_from_nearest(tx, ty) is not None:
                shots = 1

        was_over = self.engine.game_over
        self._events = self.engine.update()
        self._events["shots"] = shots
        self._events["game_over"] = int(self.engine.game_over and not was_over)

        reward = self._compute_reward()

        terminated = self.engine.game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def aim_point(self, col: int, row: int):
        """Centre of an aim cell in engine coordinates"""
        col %= self.aim_cols
        row %= self.aim_rows
        cell_w = self.engine.width / self.aim_cols
        cell_h = self.engine.height / self.aim_rows
        return (col + 0.5) * cell_w, (row + 0.5) * cell_h

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        engine = self.engine
        w, h = engine.width, engine.height

        obs_parts = [clamp(engine.level / MAX_LEVEL_OBS, 0, 1) * 2 - 1]
        obs_parts += [-1.0 if b.destroyed else 1.0 for b in engine.bases]
        obs_parts += [-1.0 if c.destroyed else 1.0 for c in engine.cities]
        obs_parts.append(clamp(len(engine.player_missiles) / MAX_INTERCEPTORS_OBS, 0, 1) * 2 - 1)

        # Enemy missiles: top-K closest to the ground
        max_speed = max(1e-6, engine.enemy_speed(MAX_LEVEL_OBS))
        missiles_sorted = sorted(engine.enemy_missiles, key=lambda m: -m.y)
        for i in range(self.k_missiles):
            if i < len(missiles_sorted):
                m = missiles_sorted[i]
                obs_parts += [
                    clamp(m.x / w * 2 - 1, -1, 1),
                    clamp(m.y / h * 2 - 1, -1, 1),
                    clamp(m.speed / max_speed, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self) -> float:
        cfg = self.reward_config
        reward = 0.0

        reward += cfg["R_KILL"] * self._events.get("kills", 0)
        reward -= cfg["R_CITY"] * self._events.get("cities_lost", 0)
        reward -= cfg["R_BASE"] * self._events.get("bases_lost", 0)
        reward -= cfg["R_SHOT"] * self._events.get("shots", 0)

        # only on the frame the last target falls
        reward -= cfg["R_GAME_OVER"] * self._events.get("game_over", 0)

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        engine = self.engine
        return {
            "score": engine.score,
            "level": engine.level,
            "bases_left": sum(not b.destroyed for b in engine.bases),
            "cities_left": sum(not c.destroyed for c in engine.cities),
            "num_enemy_missiles": len(engine.enemy_missiles),
            "num_player_missiles": len(engine.player_missiles),
            "num_explosions": len(engine.explosions),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self.render_mode == "human":
            if self._window is None:
                from .window import MissileCommandWindow

                self._window = MissileCommandWindow(self.engine, drive=False)
            self._window.dispatch_events()
            self._window.on_draw()
            self._window.flip()
            return None
        return self._render_rgb_array()

    def _render_rgb_array(self) -> np.ndarray:
        """Rasterise the current state into an (H, W, 3) uint8 frame"""
        w, h = int(self.engine.width), int(self.engine.height)
        frame = np.zeros((h, w, 3), dtype=np.uint8)
        frame[:] = (18, 18, 22)
        ys, xs = np.ogrid[:h, :w]

        for e in self.engine.explosions:
            mask = (xs - e.x) ** 2 + (ys - e.y) ** 2 <= e.radius ** 2
            frame[mask] = (255, 255, 255) if e.large else (255, 255, 0)

        for b in self.engine.bases:
            if not b.destroyed:
                _fill_rect(frame, b.x - b.half_width, b.y - b.half_height,
                           b.x + b.half_width, b.y + b.half_height, (0, 102, 255))
        for c in self.engine.cities:
            if not c.destroyed:
                _fill_rect(frame, c.x - c.half_width, c.y - c.half_height,
                           c.x + c.half_width, c.y + c.half_height, (255, 255, 255))

        for m in self.engine.enemy_missiles:
            _fill_rect(frame, m.x - 1, m.y - 1, m.x + 1, m.y + 1, (255, 0, 0))
        for m in self.engine.player_missiles:
            _fill_rect(frame, m.x - 1, m.y - 1, m.x + 1, m.y + 1, (220, 220, 220))

        return frame

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


def _fill_rect(frame: np.ndarray, x0: float, y0: float, x1: float, y1: float, color):
    h, w = frame.shape[:2]
    c0, c1 = max(0, int(x0)), min(w, int(x1) + 1)
    r0, r1 = max(0, int(y0)), min(h, int(y1) + 1)
    if c0 < c1 and r0 < r1:
        frame[r0:r1, c0:c1] = color


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42, **env_kwargs):
    """Run a random episode for testing"""
    env = MissileCommandEnv(render_mode="human" if render else None, **env_kwargs)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... Close the window to exit early.")

    import time
    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(1 / env.metadata["render_fps"])

    print(f"Random episode return: {total:.2f}  score: {info['score']}  step: {info['step']}")

    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
