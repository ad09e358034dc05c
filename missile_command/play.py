"""
Command line entry point

    python -m missile_command.play                  # interactive window
    python -m missile_command.play --random-episode --no-render
    python -m missile_command.play --frames 600 --no-render --seed 7
"""

import argparse
import logging

from .config import ENGINE_CONFIG, ENV_CONFIG, WINDOW_CONFIG
from .engine import MissileCommandEngine
from .env import run_random_episode
from .sound import DetonationSound

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Missile Command simulation")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--random-episode", action="store_true",
                        help="Run the gym environment with random actions")
    parser.add_argument("--no-render", action="store_true", help="Run without a window")
    parser.add_argument("--frames", type=int, default=None,
                        help="Headless mode: number of frames to simulate")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def run_headless(frames: int, seed=None) -> MissileCommandEngine:
    """Tick the engine with no player input and report the outcome"""
    engine = MissileCommandEngine(seed=seed, **ENGINE_CONFIG)
    for _ in range(frames):
        if engine.game_over:
            break
        engine.update()

    cities_left = sum(not c.destroyed for c in engine.cities)
    bases_left = sum(not b.destroyed for b in engine.bases)
    print(f"Frames: {engine.state.frame}  Score: {engine.score}  "
          f"Cities: {cities_left}  Bases: {bases_left}  Game over: {engine.game_over}")
    return engine


def run_window(seed=None):
    import arcade
    from .window import MissileCommandWindow

    sound = DetonationSound(WINDOW_CONFIG["sound_path"], WINDOW_CONFIG["sound_volume"])
    engine = MissileCommandEngine(seed=seed, on_detonation=sound, **ENGINE_CONFIG)
    MissileCommandWindow(engine, title=WINDOW_CONFIG["title"],
                         update_rate=WINDOW_CONFIG["update_rate"])
    arcade.run()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.random_episode:
        run_random_episode(render=not args.no_render, seed=args.seed,
                           **ENGINE_CONFIG, **ENV_CONFIG)
    elif args.no_render or args.frames is not None:
        run_headless(args.frames if args.frames is not None else ENV_CONFIG["max_steps"], seed=args.seed)
    else:
        logger.info("Starting interactive window")
        run_window(seed=args.seed)


if __name__ == "__main__":
    main()
