"""
Tick Scheduler
==============

Host-side fixed-interval loop that drives CoreGame.advance().

The core only defines what a tick does. This module owns *when* ticks happen:
a background thread calls advance() every tick period and stops as soon as a
tick reports game over. Input and resize events are forwarded to the game and
restart the loop when a new session begins.

Usage:
    game = CoreGame(seed=42)
    loop = TickScheduler(game, on_tick=redraw)
    loop.on_viewport_resized(400, 800)   # resets and starts ticking
    ...
    loop.on_primary_input()              # flap, or restart after game over
    loop.stop()
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from flappy_arcade.flappy_core.game import CoreGame, GamePhase


class TickScheduler:
    """
    Background fixed-timestep driver for a CoreGame.

    Attributes:
        game: The driven session.
        tick_period: Seconds between ticks.
    """

    def __init__(
        self,
        game: CoreGame,
        tick_period: Optional[float] = None,
        on_tick: Optional[Callable[[CoreGame], None]] = None
    ):
        """
        Initialize scheduler.

        Args:
            game: Session to drive.
            tick_period: Seconds between ticks. Uses config tick rate if None.
            on_tick: Optional callback after every tick (e.g. request a redraw).
        """
        if tick_period is None:
            tick_period = game.config.physics.tick_period
        if tick_period < 0:
            raise ValueError(f"tick_period must be non-negative, got {tick_period}")

        self.game = game
        self.tick_period = tick_period
        self._on_tick = on_tick

        # Thread control. Each start() bumps the generation so a loop that is
        # winding down cannot clear the flag of its replacement.
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._active = False
        self._generation = 0
        self._ticks_run = 0

    @property
    def running(self) -> bool:
        """True while a background loop is ticking the game."""
        return self._active

    @property
    def ticks_run(self) -> int:
        """Ticks executed by this scheduler across all sessions."""
        return self._ticks_run

    def start(self) -> None:
        """Start ticking in a background thread (no-op if already running)."""
        with self._lock:
            if self._active:
                return

            self._active = True
            self._generation += 1
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run_loop, args=(self._generation,), daemon=True
            )
            self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the background loop and wait for it to exit."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        with self._lock:
            self._active = False
            self._thread = None

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the loop to end on its own (i.e. at game over)."""
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def tick_once(self) -> bool:
        """Run one tick synchronously and notify the callback."""
        keep_going = self.game.advance()
        self._ticks_run += 1
        if self._on_tick is not None:
            self._on_tick(self.game)
        return keep_going

    def _run_loop(self, generation: int) -> None:
        """Main loop (runs in background thread)."""
        while not self._stop_event.is_set():
            if not self.tick_once():
                with self._lock:
                    # A resize or tap during the game-over tick restarts the
                    # session; keep ticking it instead of exiting
                    if not self.game.is_running:
                        if generation == self._generation:
                            self._active = False
                        return
            # Sleeps for the period, wakes early on stop()
            self._stop_event.wait(self.tick_period)

        with self._lock:
            if generation == self._generation:
                self._active = False

    def on_viewport_resized(self, width: float, height: float) -> None:
        """Forward a resize to the game and (re)start ticking."""
        self.game.on_viewport_resized(width, height)
        self.start()

    def on_primary_input(self) -> None:
        """Forward a tap; restart ticking if it restarted the session."""
        handled_in = self.game.on_primary_input()
        if handled_in == GamePhase.GAME_OVER:
            self.start()
