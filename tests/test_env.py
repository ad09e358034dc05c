import numpy as np
import pytest

from missile_command.config import REWARD_CONFIG
from missile_command.entities import EnemyMissile
from missile_command.env import MissileCommandEnv, run_random_episode

NO_FIRE = np.array([0, 0, 0])


@pytest.fixture
def env():
    env = MissileCommandEnv(spawn_probability=0.0, seed=0)
    yield env
    env.close()


def test_reset_returns_observation_inside_space(env):
    obs, info = env.reset(seed=1)
    assert obs.shape == env.observation_space.shape
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["score"] == 0
    assert info["cities_left"] == 6
    assert info["bases_left"] == 3


def test_observation_size_follows_layout_and_k():
    env = MissileCommandEnv(k_missiles=2)
    # level + 3 bases + 6 cities + interceptors + 2 * (x, y, speed)
    assert env.observation_space.shape == (1 + 3 + 6 + 1 + 6,)


def test_step_without_firing_gives_zero_reward(env):
    env.reset(seed=1)
    obs, reward, terminated, truncated, info = env.step(NO_FIRE)
    assert reward == 0.0
    assert not terminated
    assert not truncated
    assert info["step"] == 1


def test_fire_launches_from_nearest_base_and_costs_a_shot(env):
    env.reset(seed=1)
    obs, reward, terminated, truncated, info = env.step(np.array([1, 8, 0]))
    assert info["num_player_missiles"] == 1
    assert info["num_explosions"] == 1
    assert reward == pytest.approx(-REWARD_CONFIG["R_SHOT"])
    assert env.engine.player_missiles[0].dx > 0


def test_aim_point_is_cell_centre(env):
    assert env.aim_point(0, 0) == pytest.approx((25.0, 25.0))
    assert env.aim_point(15, 11) == pytest.approx((775.0, 575.0))
    assert env.aim_point(16, 12) == env.aim_point(0, 0)


def test_enemies_closest_to_ground_come_first(env):
    env.reset(seed=1)
    env.engine.enemy_missiles.append(EnemyMissile(x=200, y=100, speed=0.0))
    env.engine.enemy_missiles.append(EnemyMissile(x=600, y=400, speed=0.0))
    obs = env._get_obs()
    first = obs[11:14]
    assert first[0] == pytest.approx(600 / 800 * 2 - 1)
    assert first[1] == pytest.approx(400 / 600 * 2 - 1)
    assert obs[14 + 1] == pytest.approx(100 / 600 * 2 - 1)
    assert np.all(obs[17:] == 0.0)


def test_truncates_at_max_steps():
    env = MissileCommandEnv(max_steps=5, spawn_probability=0.0)
    env.reset(seed=0)
    for _ in range(4):
        *_, truncated, _ = env.step(NO_FIRE)
        assert not truncated
    *_, truncated, _ = env.step(NO_FIRE)
    assert truncated


def test_terminates_when_last_target_falls(env):
    env.reset(seed=1)
    for b in env.engine.bases:
        b.destroyed = True
    for c in env.engine.cities[:-1]:
        c.destroyed = True
    last = env.engine.cities[-1]
    env.engine.enemy_missiles.append(EnemyMissile(x=last.x, y=last.y, speed=0.0))

    _, reward, terminated, _, info = env.step(NO_FIRE)

    assert terminated
    assert info["cities_left"] == 0
    assert reward == pytest.approx(-REWARD_CONFIG["R_CITY"] - REWARD_CONFIG["R_GAME_OVER"])


def test_game_over_penalty_applies_only_on_the_terminal_step(env):
    env.reset(seed=1)
    for b in env.engine.bases:
        b.destroyed = True
    for c in env.engine.cities[:-1]:
        c.destroyed = True
    last = env.engine.cities[-1]
    env.engine.enemy_missiles.append(EnemyMissile(x=last.x, y=last.y, speed=0.0))

    _, first, terminated, _, _ = env.step(NO_FIRE)
    assert terminated
    assert first < 0

    _, after, terminated, _, _ = env.step(NO_FIRE)
    assert terminated
    assert after == 0.0


def test_reward_config_overrides_defaults():
    env = MissileCommandEnv(spawn_probability=0.0, reward_config={"R_SHOT": 1.0})
    env.reset(seed=0)
    _, reward, *_ = env.step(np.array([1, 3, 3]))
    assert reward == pytest.approx(-1.0)


def test_same_seed_same_trajectory():
    a = MissileCommandEnv(spawn_probability=0.1)
    b = MissileCommandEnv(spawn_probability=0.1)
    obs_a, _ = a.reset(seed=9)
    obs_b, _ = b.reset(seed=9)
    for i in range(100):
        action = np.array([i % 7 == 0, i % 16, i % 12])
        obs_a, *_ = a.step(action)
        obs_b, *_ = b.step(action)
    np.testing.assert_array_equal(obs_a, obs_b)


def test_rgb_array_render_draws_ground_targets():
    env = MissileCommandEnv(render_mode="rgb_array", spawn_probability=0.0)
    env.reset(seed=0)
    frame = env.render()
    assert frame.shape == (600, 800, 3)
    assert frame.dtype == np.uint8
    city = env.engine.cities[0]
    base = env.engine.bases[0]
    assert tuple(frame[int(city.y), int(city.x)]) == (255, 255, 255)
    assert tuple(frame[int(base.y), int(base.x)]) == (0, 102, 255)
    assert tuple(frame[10, 10]) == (18, 18, 22)


def test_render_without_mode_returns_none(env):
    env.reset(seed=0)
    assert env.render() is None


def test_unknown_render_mode_rejected():
    with pytest.raises(ValueError):
        MissileCommandEnv(render_mode="ascii")


def test_random_episode_runs_headless(capsys):
    total, info = run_random_episode(render=False, seed=4, max_steps=50)
    assert info["step"] == 50
    assert isinstance(total, float)
    assert "Random episode return" in capsys.readouterr().out
