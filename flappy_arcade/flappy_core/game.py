"""
Core Game
=========

Session state machine combining the bird, pipe pool, scoring and collisions.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from flappy_arcade.flappy_core.bird import Bird
from flappy_arcade.flappy_core.collision import CollisionDetector, Rect
from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.pipe_pool import PipePool
from flappy_arcade.flappy_core.rng import GateSampler
from flappy_arcade.flappy_core.scoring import ScoreEvent, ScoreTracker
from flappy_arcade.flappy_core.state_snapshot import GameSnapshot, SnapshotBuilder


class GamePhase(Enum):
    """Session lifecycle states."""
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass
class StepResult:
    """Result of a single tick."""
    continued: bool
    terminated: bool
    termination_reason: str
    delta_score: int
    tick: int
    recycled: int = 0
    score_events: List[ScoreEvent] = field(default_factory=list)


class CoreGame:
    """
    Main game session.

    Orchestrates, once per tick and in this order:
    - Bird integration
    - Pipe movement and recycling
    - Scoring
    - Collision detection

    All public mutators hold a re-entrant lock so a host may tick from a
    background thread while input arrives from another.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        pixels_per_unit: Optional[float] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for gate placement.
            pixels_per_unit: Logical-to-pixel scale. Uses config value if None.
        """
        if config is None:
            config = get_config()

        if pixels_per_unit is None:
            pixels_per_unit = config.units.pixels_per_unit
        if pixels_per_unit <= 0:
            raise ValueError(f"pixels_per_unit must be positive, got {pixels_per_unit}")

        self._config = config
        self._pixels_per_unit = pixels_per_unit
        self._lock = threading.RLock()

        # Tuned constants in viewport pixels
        self._gravity = config.physics.gravity * pixels_per_unit
        self._flap_velocity = config.physics.flap_velocity * pixels_per_unit
        self._pipe_speed = config.pipes.speed * pixels_per_unit
        self._pipe_width = config.pipes.width * pixels_per_unit
        self._pipe_gap = config.pipes.gap * pixels_per_unit

        # Subsystems
        self._sampler = GateSampler(seed)
        self._bird = Bird()
        self._pipes = PipePool(config.pipes.count, self._sampler)
        self._scorer = ScoreTracker()
        self._collisions = CollisionDetector()
        self._snapshot_builder = SnapshotBuilder(config.pipes.count)

        # Session state
        self._phase = GamePhase.UNINITIALIZED
        self._viewport: Optional[Tuple[float, float]] = None
        self._tick_count: int = 0
        self._termination_reason: str = ""

        self._input_transitions: Dict[GamePhase, Callable[[], None]] = {
            GamePhase.UNINITIALIZED: self._ignore_input,
            GamePhase.RUNNING: self.apply_impulse,
            GamePhase.GAME_OVER: self.reset,
        }

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def pixels_per_unit(self) -> float:
        return self._pixels_per_unit

    @property
    def phase(self) -> GamePhase:
        """Current lifecycle state."""
        return self._phase

    @property
    def bird(self) -> Bird:
        """The bird. Read only outside advance()/reset()."""
        return self._bird

    @property
    def pipes(self) -> PipePool:
        """The pipe pool. Read only outside advance()/reset()."""
        return self._pipes

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def is_over(self) -> bool:
        """True if the bird has collided."""
        return self._phase == GamePhase.GAME_OVER

    @property
    def is_running(self) -> bool:
        return self._phase == GamePhase.RUNNING

    @property
    def tick_count(self) -> int:
        """Ticks executed since the last reset."""
        return self._tick_count

    @property
    def termination_reason(self) -> str:
        """Reason for game over, or empty string."""
        return self._termination_reason

    @property
    def viewport(self) -> Optional[Tuple[float, float]]:
        """(width, height) of the viewport, or None before it is known."""
        return self._viewport

    @property
    def gravity(self) -> float:
        return self._gravity

    @property
    def flap_velocity(self) -> float:
        return self._flap_velocity

    @property
    def pipe_speed(self) -> float:
        return self._pipe_speed

    def on_viewport_resized(self, width: float, height: float) -> None:
        """
        Record the viewport size and start a fresh session.

        A non-positive size (e.g. a minimized window) is ignored and the
        current session carries on unchanged.

        Args:
            width: Viewport width in pixels.
            height: Viewport height in pixels.
        """
        if width <= 0 or height <= 0:
            return

        with self._lock:
            self._viewport = (float(width), float(height))
            self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the session to its starting state.

        No-op until the viewport size is known.

        Args:
            seed: New gate seed. Continues the current sequence if None.
        """
        with self._lock:
            if self._viewport is None:
                return

            width, height = self._viewport
            bird_cfg = self._config.bird
            pipe_cfg = self._config.pipes

            self._sampler.reset(seed)

            self._bird.place(
                x=width * bird_cfg.x_fraction,
                y=height * bird_cfg.y_fraction,
                radius=min(width, height) * bird_cfg.radius_fraction
            )

            self._pipes.configure(
                viewport_width=width,
                viewport_height=height,
                width=self._pipe_width,
                gap=self._pipe_gap,
                min_spacing_factor=pipe_cfg.min_spacing_factor
            )
            self._pipes.layout()

            self._collisions.viewport_height = height
            self._scorer.reset()

            self._tick_count = 0
            self._termination_reason = ""
            self._phase = GamePhase.RUNNING

    def apply_impulse(self) -> None:
        """Flap: set the bird's velocity to the flap velocity while running."""
        with self._lock:
            if self._phase != GamePhase.RUNNING:
                return
            self._bird.apply_impulse(self._flap_velocity)

    def on_primary_input(self) -> GamePhase:
        """
        Handle a tap/click.

        Running flaps, game over restarts, uninitialized ignores the input.

        Returns:
            The phase the input was handled in.
        """
        with self._lock:
            phase = self._phase
            self._input_transitions[phase]()
            return phase

    def _ignore_input(self) -> None:
        pass

    def advance(self) -> bool:
        """
        Run one simulation tick.

        Returns:
            True if the host should keep ticking, False on game over.
        """
        return self.step().continued

    def step(self, flap: bool = False) -> StepResult:
        """
        Run one tick, optionally flapping first.

        Args:
            flap: Apply an impulse before integrating.

        Returns:
            StepResult describing the tick.
        """
        with self._lock:
            if self._phase == GamePhase.UNINITIALIZED:
                return StepResult(
                    continued=True,
                    terminated=False,
                    termination_reason="",
                    delta_score=0,
                    tick=self._tick_count
                )

            if self._phase == GamePhase.GAME_OVER:
                # Game already ended, nothing moves
                return StepResult(
                    continued=False,
                    terminated=True,
                    termination_reason=self._termination_reason,
                    delta_score=0,
                    tick=self._tick_count
                )

            if flap:
                self._bird.apply_impulse(self._flap_velocity)

            self._bird.integrate(self._gravity)
            recycled = self._pipes.step(self._pipe_speed)
            score_events = self._scorer.update(self._bird, self._pipes)
            self._tick_count += 1

            collision = self._collisions.check(self._bird, self._pipes)
            if collision.collided:
                self._phase = GamePhase.GAME_OVER
                self._termination_reason = collision.reason

            return StepResult(
                continued=not collision.collided,
                terminated=collision.collided,
                termination_reason=self._termination_reason,
                delta_score=sum(e.points for e in score_events),
                tick=self._tick_count,
                recycled=recycled,
                score_events=score_events
            )

    def pipe_rects(self) -> List[Tuple[Rect, Rect]]:
        """(top, bottom) rectangles for every pipe, in slot order."""
        with self._lock:
            return [self._pipes.rects_for(pipe) for pipe in self._pipes]

    def snapshot(self) -> GameSnapshot:
        """Build a read-only snapshot of the current state."""
        with self._lock:
            return self._snapshot_builder.build(self)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        with self._lock:
            return {
                "score": self.score,
                "tick": self._tick_count,
                "phase": self._phase.value,
                "terminated_reason": self._termination_reason,
                "bird_y": self._bird.y,
                "bird_velocity": self._bird.velocity,
            }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with bird, pipe rectangles and HUD info.
        """
        with self._lock:
            width, height = self._viewport if self._viewport is not None else (0.0, 0.0)
            pipes_data = []
            for pipe in self._pipes:
                top, bottom = self._pipes.rects_for(pipe)
                pipes_data.append({
                    "x": pipe.x,
                    "gate_top": pipe.gate_top,
                    "scored": pipe.scored,
                    "top_rect": tuple(top),
                    "bottom_rect": tuple(bottom),
                })

            return {
                "viewport_width": width,
                "viewport_height": height,
                "bird_x": self._bird.x,
                "bird_y": self._bird.y,
                "bird_radius": self._bird.radius,
                "bird_velocity": self._bird.velocity,
                "pipes": pipes_data,
                "score": self._scorer.score,
                "is_over": self.is_over,
                "phase": self._phase.value,
            }
