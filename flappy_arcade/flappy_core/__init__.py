"""
Flappy Core - The simulation engine.

This module provides the per-tick game simulation, a Gymnasium environment
wrapper, and all supporting systems (bird, pipes, scoring, collisions, RNG).

Main exports:
- CoreGame: The game session state machine
- GamePhase: Session lifecycle states
- TickScheduler: Background fixed-interval host loop
- FlappyEnv: Gymnasium environment for agent training
- GameConfig: Configuration loaded from game_config.yaml
"""

from flappy_arcade.flappy_core.config_loader import GameConfig, load_config
from flappy_arcade.flappy_core.game import CoreGame, GamePhase, StepResult
from flappy_arcade.flappy_core.scheduler import TickScheduler
from flappy_arcade.flappy_core.env_gym import FlappyEnv
from flappy_arcade.flappy_core.replay_recorder import (
    ReplayRecorder,
    record_episode,
    replay_actions,
    generate_replay_filename,
)

__all__ = [
    "GameConfig",
    "load_config",
    "CoreGame",
    "GamePhase",
    "StepResult",
    "TickScheduler",
    "FlappyEnv",
    "ReplayRecorder",
    "record_episode",
    "replay_actions",
    "generate_replay_filename",
]
