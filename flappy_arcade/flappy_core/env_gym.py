"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the flappy game.
One environment step is one game tick.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from flappy_arcade.flappy_core.config_loader import GameConfig, load_config
from flappy_arcade.flappy_core.game import CoreGame
from flappy_arcade.flappy_core.render_solid import SolidRenderer
from flappy_arcade.flappy_core.state_snapshot import GameSnapshot

ACTION_NOOP = 0
ACTION_FLAP = 1


class FlappyEnv(gym.Env):
    """
    Flappy game as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = do nothing, 1 = flap before this tick.

    Observation Space:
        Dict containing bird state, pipe arrays and derived features.

    Reward:
        Points scored during the step (0 or 1 in practice).

    Termination:
        ``terminated`` on collision, ``truncated`` at caps.max_ticks.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: Optional[bool] = None,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize flappy environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            image_obs: If True, include board_rgb in observations. Uses config if None.
            image_width: Override observation image width.
            image_height: Override observation image height.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        # Load config
        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = self._config.observation.image_enabled if image_obs is None else image_obs
        self._debug = debug

        # Image dimensions
        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        # Initialize game with the headless viewport
        self._game = CoreGame(config=self._config)
        viewport = self._config.viewport
        self._game.on_viewport_resized(viewport.width, viewport.height)

        # Initialize renderer (lazy)
        self._renderer: Optional[SolidRenderer] = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] FlappyEnv initialized")
            print(f"[DEBUG]   Viewport: {viewport.width}x{viewport.height}")
            print(f"[DEBUG]   Pipes: {self._config.num_pipes}, spacing {self._game.pipes.spacing:.1f}")
            print(f"[DEBUG]   Max ticks: {self._config.caps.max_ticks}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        n = self._config.num_pipes

        obs_dict = {
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "tick_count": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "bird_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "bird_velocity": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "next_pipe_dx": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "next_gate_offset": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "pipe_x": spaces.Box(low=-np.inf, high=np.inf, shape=(n,), dtype=np.float32),
            "pipe_gate_top": spaces.Box(low=-np.inf, high=np.inf, shape=(n,), dtype=np.float32),
            "pipe_scored": spaces.MultiBinary(n),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)

        obs = self._snapshot_to_obs(self._game.snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: 1 to flap before the tick, 0 otherwise.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())

        result = self._game.step(flap=int(action) == ACTION_FLAP)

        obs = self._snapshot_to_obs(self._game.snapshot())
        reward = float(result.delta_score)
        terminated = result.terminated
        truncated = (not terminated) and self._game.tick_count >= self._config.caps.max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["recycled"] = result.recycled

        if self._debug:
            print(f"[DEBUG] Step: action={int(action)}, y={self._game.bird.y:.2f}, "
                  f"v={self._game.bird.velocity:.2f}, score={self._game.score}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._renderer = SolidRenderer()

        return self._renderer.render(
            self._game.get_render_data(),
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
