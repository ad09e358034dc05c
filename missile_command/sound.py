"""
sound.py - detonation sound port backed by arcade
-------------------------------------------------
DetonationSound is a zero-argument callable suitable for
MissileCommandEngine(on_detonation=...). Loading happens on first use;
a file that cannot be loaded is logged once and the sound is then disabled;
playback errors are logged on every call. Nothing is raised into the simulation.
"""

import logging

logger = logging.getLogger(__name__)


class DetonationSound:
    """Fire-and-forget one-shot effect"""

    def __init__(self, path: str = ":resources:sounds/explosion2.wav", volume: float = 0.3):
        self.path = path
        self.volume = volume
        self._sound = None
        self._disabled = False

    def __call__(self):
        if self._disabled:
            return
        try:
            import arcade

            if self._sound is None:
                self._sound = arcade.load_sound(self.path)
        except Exception as e:
            self._disabled = True
            logger.warning("[Sound] Detonation sound disabled: %s", e)
            return
        try:
            arcade.play_sound(self._sound, volume=self.volume)
        except Exception as e:
            logger.warning("[Sound] Detonation sound error: %s", e)
