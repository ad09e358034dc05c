import math

import pytest

from missile_command.controls import handle_click, screen_to_world
from missile_command.engine import MissileCommandEngine


@pytest.fixture
def engine():
    return MissileCommandEngine(spawn_probability=0.0, seed=0)


def test_click_launches_from_nearest_base(engine):
    missile = handle_click(engine, 700, 200)
    assert missile is not None
    assert missile.x == 720
    assert len(engine.player_missiles) == 1


@pytest.mark.parametrize("x, y", [(math.nan, 100), (100, math.inf), (None, 5), ("left", 5)])
def test_invalid_click_is_rejected(engine, x, y):
    assert handle_click(engine, x, y) is None
    assert engine.player_missiles == []
    assert engine.explosions == []


def test_out_of_range_click_is_clamped(engine):
    missile = handle_click(engine, -50, 1000)
    # clamped to (0, 600): left base at (80, 585) fires down-left
    assert missile.x == 80
    assert missile.dx < 0
    assert missile.dy > 0
    assert not math.isnan(missile.dx)


def test_click_ignored_after_game_over(engine):
    engine.state.game_over = True
    assert handle_click(engine, 400, 100) is None


def test_click_ignored_when_all_bases_destroyed(engine):
    for b in engine.bases:
        b.destroyed = True
    assert handle_click(engine, 400, 100) is None


def test_screen_to_world_flips_y():
    assert screen_to_world(10, 100, 600) == (10, 500)
