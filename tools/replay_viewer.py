"""
Replay Viewer
=============

Play back a recorded replay tick by tick with a progress bar.

Usage:
    python -m tools.replay_viewer replay.json

Controls:
    SPACE       Play/Pause
    LEFT/RIGHT  Step backward/forward
    HOME/END    Jump to start/end
    Click       Seek on progress bar
    +/-         Speed up/slow down
    ESC         Quit
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path for direct script execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from flappy_arcade.flappy_core.config_loader import GameConfig, load_config
from flappy_arcade.flappy_core.game import CoreGame
from flappy_arcade.flappy_core.replay_recorder import compute_config_hash, load_replay


def rebuild_game_to_tick(
    config: GameConfig,
    seed: Optional[int],
    actions: List[int],
    target_tick: int
) -> CoreGame:
    """Fresh game with the first target_tick actions applied."""
    game = CoreGame(config=config, seed=seed)
    game.on_viewport_resized(config.viewport.width, config.viewport.height)

    for action in actions[:target_tick]:
        if game.is_over:
            break
        game.step(flap=int(action) == 1)

    return game


class ProgressBar:
    """Horizontal bar showing playback position; click to seek."""

    def __init__(self, x: int, y: int, width: int, height: int, total_ticks: int):
        self.rect = pygame.Rect(x, y, width, height)
        self.total_ticks = max(1, total_ticks)

    def index_at(self, pos) -> int:
        """Tick index under a screen point, or -1 outside the bar."""
        if not self.rect.collidepoint(pos):
            return -1
        rel = (pos[0] - self.rect.x) / self.rect.width
        return max(0, min(self.total_ticks, int(rel * self.total_ticks)))

    def render(self, screen: pygame.Surface, font: pygame.font.Font, current: int) -> None:
        pygame.draw.rect(screen, (30, 30, 35), self.rect)
        played = int(self.rect.width * current / self.total_ticks)
        pygame.draw.rect(screen, (100, 180, 100), pygame.Rect(self.rect.x, self.rect.y, played, self.rect.height))
        pygame.draw.rect(screen, (60, 60, 70), self.rect, 1)

        label = font.render(f"{current}/{self.total_ticks}", True, (200, 200, 200))
        screen.blit(label, label.get_rect(center=self.rect.center))


def view_replay(replay_path: str, speed: float = 1.0) -> None:
    """
    View a recorded replay.

    Args:
        replay_path: Path to replay JSON file.
        speed: Playback speed multiplier.
    """
    if not PYGAME_AVAILABLE:
        print("Error: pygame is required for replay viewer.")
        print("Install with: pip install pygame")
        return

    # Imported here so the module loads without pygame
    from tools.play_human import FlappyRenderer

    replay = load_replay(replay_path)
    seed = replay.get("seed")
    actions = replay.get("actions", [])
    termination_reason = replay.get("termination_reason", "")

    if not actions:
        print("Error: Replay contains no actions")
        return

    config = load_config()
    current_hash = compute_config_hash(config)
    replay_hash = replay.get("config_hash", "unknown")

    print(f"Replay: {replay_path}")
    print(f"Seed: {seed}")
    print(f"Agent: {replay.get('agent', 'unknown')}")
    print(f"Ticks: {len(actions)}")
    print(f"Final score: {replay.get('final_score', 0)}")
    print(f"Game ended: {termination_reason or 'unknown'}")
    if replay_hash not in ("unknown", current_hash):
        print()
        print("WARNING: Replay was recorded with different game config!")
        print(f"  Replay config hash: {replay_hash}")
        print(f"  Current config hash: {current_hash}")
    print()

    view_w, view_h = config.viewport.width, config.viewport.height
    bar_height = 40

    pygame.init()
    screen = pygame.display.set_mode((view_w, view_h + bar_height))
    pygame.display.set_caption(f"Replay: {Path(replay_path).name}")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 24)

    renderer = FlappyRenderer()
    game_surface = pygame.Surface((view_w, view_h))
    bar = ProgressBar(10, view_h + 8, view_w - 20, bar_height - 16, len(actions))

    game = rebuild_game_to_tick(config, seed, actions, 0)
    tick = 0
    paused = True
    playback_speed = speed
    accumulator = 0.0

    def seek(target: int) -> None:
        nonlocal game, tick
        tick = max(0, min(len(actions), target))
        game = rebuild_game_to_tick(config, seed, actions, tick)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                idx = bar.index_at(event.pos)
                if idx >= 0:
                    seek(idx)
                    paused = True

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key == pygame.K_RIGHT:
                    seek(tick + 1)
                    paused = True
                elif event.key == pygame.K_LEFT:
                    seek(tick - 1)
                    paused = True
                elif event.key == pygame.K_HOME:
                    seek(0)
                    paused = True
                elif event.key == pygame.K_END:
                    seek(len(actions))
                    paused = True
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    playback_speed = min(playback_speed * 1.5, 10.0)
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    playback_speed = max(playback_speed / 1.5, 0.1)

        if not paused:
            accumulator += playback_speed
            while accumulator >= 1.0 and tick < len(actions) and not game.is_over:
                game.step(flap=int(actions[tick]) == 1)
                tick += 1
                accumulator -= 1.0
            if tick >= len(actions) or game.is_over:
                paused = True
                accumulator = 0.0

        screen.fill((20, 20, 25))
        renderer.render(game_surface, game.get_render_data())
        screen.blit(game_surface, (0, 0))
        bar.render(screen, font, tick)

        pygame.display.flip()
        clock.tick(config.physics.tick_rate)

    pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="View a recorded flappy replay")
    parser.add_argument("replay", type=str, help="Path to replay JSON file")
    parser.add_argument("--speed", type=float, default=1.0, help="Initial playback speed")

    args = parser.parse_args()
    view_replay(replay_path=args.replay, speed=args.speed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
