"""
Replay Recorder
===============

A simple wrapper to record Gymnasium environment episodes for replay.

Usage:
    from flappy_arcade.flappy_core import FlappyEnv, ReplayRecorder

    env = FlappyEnv()
    recorder = ReplayRecorder(env)

    obs, info = recorder.reset(seed=42)

    done = False
    while not done:
        action = your_agent(obs)
        obs, reward, terminated, truncated, info = recorder.step(action)
        done = terminated or truncated

    recorder.save("my_replay.json")

Because the core is deterministic for a given seed, a replay is just the seed
and the action list. ``replay_actions`` re-runs one on a fresh game.
"""

from __future__ import annotations

import json
import hashlib
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import gymnasium as gym

from flappy_arcade.flappy_core.config_loader import GameConfig, load_config
from flappy_arcade.flappy_core.game import CoreGame


def generate_replay_filename(
    agent_name: str = "replay",
    seed: Optional[int] = None,
    directory: Optional[Union[str, Path]] = None
) -> Path:
    """
    Generate a timestamped replay filename.

    Format: {agent_name}_{YYYYMMDD_HHMMSS}_s{seed}.json
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    if seed is not None:
        filename = f"{agent_name}_{timestamp}_s{seed}.json"
    else:
        filename = f"{agent_name}_{timestamp}.json"

    if directory:
        return Path(directory) / filename
    return Path(filename)


def compute_config_hash(config: Optional[GameConfig] = None) -> str:
    """Compute a hash of the gameplay-affecting config for replay validation."""
    if config is None:
        config = load_config()
    hash_data = {
        "physics": {
            "gravity": config.physics.gravity,
            "flap_velocity": config.physics.flap_velocity,
        },
        "pipes": {
            "count": config.pipes.count,
            "width": config.pipes.width,
            "gap": config.pipes.gap,
            "speed": config.pipes.speed,
            "min_spacing_factor": config.pipes.min_spacing_factor,
        },
        "bird": {
            "x_fraction": config.bird.x_fraction,
            "y_fraction": config.bird.y_fraction,
            "radius_fraction": config.bird.radius_fraction,
        },
        "units": {
            "pixels_per_unit": config.units.pixels_per_unit,
        },
        "viewport": {
            "width": config.viewport.width,
            "height": config.viewport.height,
        },
    }
    return hashlib.md5(json.dumps(hash_data, sort_keys=True).encode()).hexdigest()[:8]


def replay_actions(
    seed: Optional[int],
    actions: Sequence[int],
    config: Optional[GameConfig] = None
) -> List[int]:
    """
    Re-run a recorded action sequence on a fresh game.

    Args:
        seed: Seed the episode was recorded with.
        actions: One action per tick (1 = flap).
        config: Game configuration. Loads default if None.

    Returns:
        Score after every tick, stopping at game over.
    """
    if config is None:
        config = load_config()

    game = CoreGame(config=config, seed=seed)
    game.on_viewport_resized(config.viewport.width, config.viewport.height)

    scores: List[int] = []
    for action in actions:
        result = game.step(flap=int(action) == 1)
        scores.append(game.score)
        if result.terminated:
            break
    return scores


class ReplayRecorder:
    """
    Wrapper that records environment interactions for replay.

    Attributes:
        env: The wrapped Gymnasium environment.
        recording: Whether currently recording.
    """

    def __init__(
        self,
        env: gym.Env,
        agent_name: str = "unknown",
        auto_save_path: Optional[str] = None
    ):
        """
        Initialize the replay recorder.

        Args:
            env: The Gymnasium environment to wrap.
            agent_name: Name of the agent (stored in replay metadata).
            auto_save_path: If provided, automatically save replay on episode end.
        """
        self.env = env
        self.agent_name = agent_name
        self.auto_save_path = auto_save_path

        # Recording state
        self._recording = False
        self._seed: Optional[int] = None
        self._actions: List[int] = []
        self._scores: List[int] = []
        self._termination_reason: str = ""
        self._config_hash = compute_config_hash(getattr(env, "config", None))

    @property
    def recording(self) -> bool:
        """Whether currently recording."""
        return self._recording

    @property
    def observation_space(self):
        """Forward observation space from wrapped env."""
        return self.env.observation_space

    @property
    def action_space(self):
        """Forward action space from wrapped env."""
        return self.env.action_space

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict] = None
    ) -> Tuple[Any, Dict]:
        """
        Reset the environment and start recording.

        Without a seed, one is drawn from the env's generator and passed on,
        so the saved replay can always be re-run.
        """
        if seed is None:
            seed = int(self.env.np_random.integers(0, 2**31 - 1))

        self._actions = []
        self._scores = []
        self._termination_reason = ""
        self._seed = seed
        self._recording = True

        return self.env.reset(seed=seed, options=options)

    def step(self, action: Union[int, np.ndarray]) -> Tuple[Any, float, bool, bool, Dict]:
        """Take a step and record it."""
        if isinstance(action, np.ndarray):
            action_val = int(action.item())
        else:
            action_val = int(action)

        obs, reward, terminated, truncated, info = self.env.step(action)

        if self._recording:
            self._actions.append(action_val)
            self._scores.append(int(info.get("score", 0)))

            if terminated or truncated:
                self._termination_reason = info.get("terminated_reason", "") or "truncated"

        if (terminated or truncated) and self.auto_save_path:
            self.save(self.auto_save_path)

        return obs, reward, terminated, truncated, info

    def get_replay_data(self) -> Dict[str, Any]:
        """Get the current replay data as a dictionary."""
        return {
            "seed": self._seed,
            "agent": self.agent_name,
            "config_hash": self._config_hash,
            "actions": self._actions.copy(),
            "scores": self._scores.copy(),
            "final_score": self._scores[-1] if self._scores else 0,
            "total_ticks": len(self._actions),
            "termination_reason": self._termination_reason,
        }

    def save(
        self,
        path: Optional[Union[str, Path]] = None,
        overwrite: bool = True,
        directory: Optional[Union[str, Path]] = None
    ) -> Path:
        """
        Save the replay to a JSON file.

        Args:
            path: Path to save the replay. If None, auto-generates a timestamped name.
            overwrite: If True, overwrite existing file.
            directory: Directory for auto-generated filename (only used if path is None).

        Returns:
            Path where the replay was saved.
        """
        if path is None:
            path = generate_replay_filename(
                agent_name=self.agent_name,
                seed=self._seed,
                directory=directory
            )
        else:
            path = Path(path)

        if path.exists() and not overwrite:
            raise FileExistsError(f"Replay file already exists: {path}")

        path.parent.mkdir(parents=True, exist_ok=True)

        replay_data = self.get_replay_data()

        with open(path, "w") as f:
            json.dump(replay_data, f, indent=2)

        print(f"Replay saved: {path}")
        print(f"  Seed: {self._seed}")
        print(f"  Ticks: {len(self._actions)}")
        print(f"  Final score: {replay_data['final_score']}")

        return path

    def close(self) -> None:
        """Close the wrapped environment."""
        self.env.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def load_replay(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a replay saved by ReplayRecorder.save()."""
    with open(path, "r") as f:
        return json.load(f)


def record_episode(
    env: gym.Env,
    agent_fn,
    seed: int,
    save_path: Optional[str] = None,
    agent_name: str = "unknown"
) -> Dict[str, Any]:
    """
    Convenience function to record a single episode.

    Args:
        env: The Gymnasium environment.
        agent_fn: Function that takes observation and returns action.
        seed: Random seed for the episode.
        save_path: If provided, save replay to this path.
        agent_name: Name of the agent.

    Returns:
        Replay data dictionary.
    """
    recorder = ReplayRecorder(env, agent_name=agent_name)

    obs, info = recorder.reset(seed=seed)

    done = False
    while not done:
        action = agent_fn(obs)
        obs, reward, terminated, truncated, info = recorder.step(action)
        done = terminated or truncated

    replay_data = recorder.get_replay_data()

    if save_path:
        recorder.save(save_path)

    return replay_data
