"""
Configuration for the missile command engine, environment and window
"""

# Engine parameters (keyword arguments of MissileCommandEngine)
ENGINE_CONFIG = {
    "width": 800,
    "height": 600,
    "spawn_probability": 0.02,
    "spawn_probability_per_level": 0.0,
    "base_speed": 0.5,
    "level_speed_factor": 0.125,
    "launch_speed": 3.5,
    "missile_length": 20.0,  # proximity threshold = 2x, detonation radius = 5x
    "points_per_kill": 100,
    "points_per_level": None,  # None -> level never advances
    "end_on_total_loss": True,
}

# Environment parameters (extra keyword arguments of MissileCommandEnv)
ENV_CONFIG = {
    "max_steps": 3600,  # 60s at 60 FPS
    "k_missiles": 5,
    "aim_cols": 16,
    "aim_rows": 12,
}

# ==============================================================================
# REWARD SHAPING
# ==============================================================================

REWARD_CONFIG = {
    "R_KILL": 1.0,        # Reward per enemy missile destroyed
    "R_CITY": 2.0,        # Penalty per city lost
    "R_BASE": 3.0,        # Penalty per base lost
    "R_SHOT": 0.05,       # Penalty per interceptor launched
    "R_GAME_OVER": 10.0,  # Penalty when every target is gone
}

# ==============================================================================
# WINDOW / AUDIO
# ==============================================================================

WINDOW_CONFIG = {
    "title": "Missile Command - Arcade",
    "update_rate": 1 / 60,
    "sound_path": ":resources:sounds/explosion2.wav",
    "sound_volume": 0.3,
}
