"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for renderers and Gymnasium
observations. Includes derived features for agent decision-making.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from flappy_arcade.flappy_core.game import CoreGame


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.

    Pipe arrays are indexed by pool slot and always hold exactly N entries.
    """
    # Core state
    phase: str
    score: int
    is_over: bool
    tick_count: int

    # Viewport (for normalization)
    viewport_width: float
    viewport_height: float

    # Bird
    bird_x: float
    bird_y: float
    bird_velocity: float
    bird_radius: float

    # Derived features
    next_pipe_index: int              # Leftmost unscored pipe, -1 if none
    next_pipe_dx: float               # Pipe left edge minus bird x
    next_gate_offset: float           # Bird y minus gate center y

    # Pipe arrays (fixed size)
    pipe_x: np.ndarray                # (N,) float32
    pipe_gate_top: np.ndarray         # (N,) float32
    pipe_scored: np.ndarray           # (N,) bool
    pipe_top_rect: np.ndarray         # (N, 4) float32 left, top, right, bottom
    pipe_bottom_rect: np.ndarray      # (N, 4) float32

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "score": np.array(self.score, dtype=np.int64),
            "tick_count": np.array(self.tick_count, dtype=np.int64),
            "bird_y": np.array(self.bird_y, dtype=np.float32),
            "bird_velocity": np.array(self.bird_velocity, dtype=np.float32),
            "next_pipe_dx": np.array(self.next_pipe_dx, dtype=np.float32),
            "next_gate_offset": np.array(self.next_gate_offset, dtype=np.float32),
            "pipe_x": self.pipe_x,
            "pipe_gate_top": self.pipe_gate_top,
            "pipe_scored": self.pipe_scored.astype(np.int8),
        }


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, num_pipes: int):
        self._num_pipes = num_pipes

        # Pre-allocate arrays
        self._pipe_x = np.zeros(num_pipes, dtype=np.float32)
        self._pipe_gate_top = np.zeros(num_pipes, dtype=np.float32)
        self._pipe_scored = np.zeros(num_pipes, dtype=bool)
        self._pipe_top_rect = np.zeros((num_pipes, 4), dtype=np.float32)
        self._pipe_bottom_rect = np.zeros((num_pipes, 4), dtype=np.float32)

    @property
    def num_pipes(self) -> int:
        return self._num_pipes

    def build(self, game: "CoreGame") -> GameSnapshot:
        """Build a snapshot from current game state."""
        bird = game.bird
        pipes = game.pipes
        width, height = game.viewport if game.viewport is not None else (0.0, 0.0)

        next_index = -1
        next_x = 0.0
        for i, pipe in enumerate(pipes):
            top, bottom = pipes.rects_for(pipe)
            self._pipe_x[i] = pipe.x
            self._pipe_gate_top[i] = pipe.gate_top
            self._pipe_scored[i] = pipe.scored
            self._pipe_top_rect[i] = top
            self._pipe_bottom_rect[i] = bottom

            if not pipe.scored and (next_index < 0 or pipe.x < next_x):
                next_index = i
                next_x = pipe.x

        if next_index >= 0:
            pipe = pipes[next_index]
            next_pipe_dx = pipe.x - bird.x
            next_gate_offset = bird.y - (pipe.gate_top + pipes.gap / 2.0)
        else:
            next_pipe_dx = 0.0
            next_gate_offset = 0.0

        return GameSnapshot(
            phase=game.phase.value,
            score=game.score,
            is_over=game.is_over,
            tick_count=game.tick_count,
            viewport_width=width,
            viewport_height=height,
            bird_x=bird.x,
            bird_y=bird.y,
            bird_velocity=bird.velocity,
            bird_radius=bird.radius,
            next_pipe_index=next_index,
            next_pipe_dx=next_pipe_dx,
            next_gate_offset=next_gate_offset,
            pipe_x=self._pipe_x.copy(),
            pipe_gate_top=self._pipe_gate_top.copy(),
            pipe_scored=self._pipe_scored.copy(),
            pipe_top_rect=self._pipe_top_rect.copy(),
            pipe_bottom_rect=self._pipe_bottom_rect.copy()
        )
