"""
Arcade window: render consumer, tick driver and mouse input producer
"""

import arcade

from .controls import handle_click, screen_to_world
from .engine import MissileCommandEngine

TRAIL_LENGTH = 160


class MissileCommandWindow(arcade.Window):
    """Draws an engine snapshot each frame; clicks launch interceptors.

    With ``drive=True`` the window also ticks the engine from on_update.
    The gym environment passes ``drive=False`` and steps the engine itself.
    """

    def __init__(self, engine: MissileCommandEngine, title: str = "Missile Command - Arcade",
                 drive: bool = True, update_rate: float = 1 / 60):
        super().__init__(int(engine.width), int(engine.height), title, update_rate=update_rate)
        self.engine = engine
        self.drive = drive

        # Colors
        self.BG = (0, 0, 0)
        self.GROUND_C = (0, 102, 255)
        self.BASE_C = (0, 102, 255)
        self.CITY_C = (255, 255, 255)
        self.ENEMY_C = (255, 0, 0)
        self.PLAYER_C = (255, 255, 255)
        self.HUD_C = (255, 255, 255)

    def _sy(self, y: float) -> float:
        # engine y grows downward
        return self.height - y

    def on_update(self, delta_time: float):
        if self.drive and not self.engine.game_over:
            self.engine.update()

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int):
        wx, wy = screen_to_world(x, y, self.height)
        handle_click(self.engine, wx, wy)

    def on_draw(self):
        """Draw the current game state"""
        self.clear()
        arcade.set_background_color(self.BG)
        snap = self.engine.snapshot()

        # Ground line
        arcade.draw_line(0, self._sy(self.height - 10), self.width, self._sy(self.height - 10),
                         self.GROUND_C, 2)

        # Bases (triangles)
        for b in snap.bases:
            if b.destroyed:
                continue
            base_y = self._sy(b.y)
            arcade.draw_triangle_filled(
                b.x, base_y + 2 * b.half_height,
                b.x - b.half_width, base_y,
                b.x + b.half_width, base_y,
                self.BASE_C,
            )

        # Cities (three blocks each)
        for c in snap.cities:
            if c.destroyed:
                continue
            ground = self._sy(c.y)
            arcade.draw_lrbt_rectangle_filled(c.x - 4, c.x + 4, ground, ground + 35, self.CITY_C)
            arcade.draw_lrbt_rectangle_filled(c.x - 2 * c.half_width, c.x - 2 * c.half_width + 10,
                                              ground, ground + 15, self.CITY_C)
            arcade.draw_lrbt_rectangle_filled(c.x + 2 * c.half_width - 10, c.x + 2 * c.half_width,
                                              ground, ground + 20, self.CITY_C)

        # Enemy missiles with trails
        for m in snap.enemy_missiles:
            y = self._sy(m.y)
            arcade.draw_line(m.x, y + TRAIL_LENGTH, m.x, y, (255, 0, 0, 120), 3)
            arcade.draw_triangle_filled(m.x, y - 8, m.x - 3, y, m.x + 3, y, self.PLAYER_C)

        # Player missiles with trails
        for m in snap.player_missiles:
            y = self._sy(m.y)
            speed = max(1e-6, (m.dx ** 2 + m.dy ** 2) ** 0.5)
            tx = m.x - m.dx / speed * TRAIL_LENGTH
            ty = y + m.dy / speed * TRAIL_LENGTH
            arcade.draw_line(tx, ty, m.x, y, (255, 255, 255, 120), 3)
            arcade.draw_circle_filled(m.x, y, 3, self.PLAYER_C)

        # Explosions
        for e in snap.explosions:
            if e.large:
                alpha = int(255 * 0.8 * min(1.0, e.life / 50))
                color = (255, 255, 255, alpha)
            else:
                alpha = int(255 * max(0.0, 1 - e.life / 100))
                color = (255, 255, 0, alpha)
            arcade.draw_circle_filled(e.x, self._sy(e.y), e.radius, color)

        # Text HUD
        arcade.draw_text(f"Score: {snap.score}", 10, self.height - 30, self.HUD_C, 16)
        arcade.draw_text(f"Level: {snap.level}", 10, self.height - 60, self.HUD_C, 16)
        if snap.game_over:
            arcade.draw_text("GAME OVER", self.width / 2 - 90, self.height / 2, self.ENEMY_C, 32)
