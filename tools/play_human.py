"""
Human Play Mode
================

Play the flappy game interactively in a resizable pygame window.

Controls:
    - Click/Space: Flap (or restart after game over)
    - ESC: Quit

Usage:
    python tools/play_human.py [--seed SEED] [--width WIDTH] [--height HEIGHT]
    python -m tools.play_human [--seed SEED]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add project root to path for direct script execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from flappy_arcade.flappy_core.config_loader import load_config, GameConfig
from flappy_arcade.flappy_core.game import CoreGame


class FlappyRenderer:
    """Draws the sky, pipes, bird and HUD from CoreGame render data."""

    def __init__(self):
        self._sky = (125, 192, 255)
        self._horizon = (163, 215, 255)
        self._pipe = (60, 170, 73)
        self._pipe_shadow = (43, 120, 57)
        self._pipe_highlight = (166, 239, 172)
        self._bird_body = (255, 219, 94)
        self._bird_shade = (245, 176, 48)
        self._bird_eye = (255, 255, 255)
        self._bird_pupil = (0, 0, 0)
        self._bird_beak = (255, 137, 20)
        self._text = (255, 255, 255)

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 56)
        self._font_medium = pygame.font.Font(None, 36)

    def render(self, screen: pygame.Surface, render_data: dict) -> None:
        """Render the complete game scene."""
        width = int(render_data["viewport_width"])
        height = int(render_data["viewport_height"])

        screen.fill(self._sky)
        horizon_y = int(height * 0.65)
        pygame.draw.rect(screen, self._horizon, pygame.Rect(0, horizon_y, width, height - horizon_y))

        for pipe in render_data["pipes"]:
            self._draw_pipe_segment(screen, pipe["top_rect"])
            self._draw_pipe_segment(screen, pipe["bottom_rect"])

        self._draw_bird(screen, render_data)
        self._draw_hud(screen, render_data, width, height)

    def _draw_pipe_segment(self, screen: pygame.Surface, rect) -> None:
        left, top, right, bottom = rect
        if right - left <= 0 or bottom - top <= 0:
            return

        body = pygame.Rect(int(left), int(top), int(right - left), int(bottom - top))
        pygame.draw.rect(screen, self._pipe, body)

        accent = max(1, int(body.width * 0.12))
        highlight = pygame.Rect(body.left + accent, body.top, max(1, int(body.width * 0.18)), body.height)
        shadow_width = max(1, int(body.width * 0.2))
        shadow = pygame.Rect(body.right - accent - shadow_width, body.top, shadow_width, body.height)
        pygame.draw.rect(screen, self._pipe_highlight, highlight)
        pygame.draw.rect(screen, self._pipe_shadow, shadow)

    def _draw_bird(self, screen: pygame.Surface, render_data: dict) -> None:
        cx = int(render_data["bird_x"])
        cy = int(render_data["bird_y"])
        r = max(2, int(render_data["bird_radius"]))

        pygame.draw.circle(screen, self._bird_shade, (cx, cy + 1), r)
        pygame.draw.circle(screen, self._bird_body, (cx, cy), r - 1)
        pygame.draw.circle(screen, self._bird_eye, (cx + r // 3, cy - r // 3), max(1, r // 3))
        pygame.draw.circle(screen, self._bird_pupil, (cx + r // 3 + 1, cy - r // 3), max(1, r // 6))
        beak = [(cx + r - 1, cy - r // 4), (cx + r + r // 2, cy), (cx + r - 1, cy + r // 4)]
        pygame.draw.polygon(screen, self._bird_beak, beak)

    def _draw_hud(self, screen: pygame.Surface, render_data: dict, width: int, height: int) -> None:
        score_text = self._font_large.render(str(render_data["score"]), True, self._text)
        panel = pygame.Rect(0, 0, max(80, score_text.get_width() + 24), score_text.get_height() + 12)
        panel.midtop = (width // 2, int(height * 0.08))
        self._draw_panel(screen, panel)
        screen.blit(score_text, score_text.get_rect(center=panel.center))

        if render_data["is_over"]:
            message = self._font_large.render("Game Over", True, self._text)
            final = self._font_medium.render(f"Score: {render_data['score']}", True, self._text)
            panel_width = max(message.get_width(), final.get_width()) + 40
            panel_height = message.get_height() + final.get_height() + 40
            panel = pygame.Rect(0, 0, panel_width, panel_height)
            panel.center = (width // 2, height // 2)
            self._draw_panel(screen, panel)
            screen.blit(message, message.get_rect(midtop=(panel.centerx, panel.top + 12)))
            screen.blit(final, final.get_rect(midbottom=(panel.centerx, panel.bottom - 12)))

    def _draw_panel(self, screen: pygame.Surface, rect: pygame.Rect) -> None:
        overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        screen.blit(overlay, rect.topleft)


class HumanPlayer:
    """
    Human-playable host for CoreGame.

    Events and ticks share one thread, so input is serialized with advance().
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        window_width: int = 400,
        window_height: int = 800
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._game = CoreGame(config=config, seed=seed)

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height), pygame.RESIZABLE)
        pygame.display.set_caption("Flappy")
        self._clock = pygame.time.Clock()
        self._renderer = FlappyRenderer()

        self._running = True
        self._ticking = False
        self._on_resize(window_width, window_height)

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Flappy ===")
        print("Click or Space to flap (restarts after game over)")
        print("ESC to quit")
        print()

        while self._running:
            self._handle_events()

            if self._ticking:
                self._ticking = self._game.advance()
                if not self._ticking:
                    print(f"GAME OVER ({self._game.termination_reason}) - Score: {self._game.score}")

            self._renderer.render(self._screen, self._game.get_render_data())
            pygame.display.flip()
            self._clock.tick(self._config.physics.tick_rate)

        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self._screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self._on_resize(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    self._on_primary_input()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._on_primary_input()

    def _on_resize(self, width: int, height: int) -> None:
        self._game.on_viewport_resized(width, height)
        self._ticking = True

    def _on_primary_input(self) -> None:
        was_over = self._game.is_over
        self._game.on_primary_input()
        if was_over:
            self._ticking = True
            print("\n=== Game Restarted ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play flappy interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=400, help="Window width (default: 400)")
    parser.add_argument("--height", type=int, default=800, help="Window height (default: 800)")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            window_width=args.width,
            window_height=args.height
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
