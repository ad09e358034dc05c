from missile_command.play import main, parse_args, run_headless


def test_parse_args_defaults():
    args = parse_args([])
    assert args.seed is None
    assert not args.random_episode
    assert not args.no_render
    assert args.frames is None
    assert args.log_level == "INFO"


def test_run_headless_ticks_requested_frames(capsys):
    engine = run_headless(120, seed=2)
    assert engine.state.frame == 120
    assert "Frames: 120" in capsys.readouterr().out


def test_main_headless(capsys):
    main(["--frames", "10", "--seed", "1", "--log-level", "WARNING"])
    assert "Frames: 10" in capsys.readouterr().out
