"""
Scoring System
==============

Awards one point each time the bird passes the center of a pipe pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from flappy_arcade.flappy_core.bird import Bird
    from flappy_arcade.flappy_core.pipe_pool import PipePool


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    pipe_index: int

    def __repr__(self) -> str:
        return f"ScoreEvent(pipe_{self.pipe_index}={self.points})"


class ScoreTracker:
    """
    Tracks the session score.

    Each pipe carries a ``scored`` latch. Once set it stays set until the pool
    recycles that pipe, so a pipe contributes at most one point per pass.
    """

    POINTS_PER_PIPE = 1

    def __init__(self):
        self._score: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    def update(self, bird: "Bird", pipes: "PipePool") -> List[ScoreEvent]:
        """
        Latch every unscored pipe whose center the bird has passed.

        Args:
            bird: The bird (its x is fixed for the session).
            pipes: The pipe pool after this tick's movement.

        Returns:
            Events for the pipes scored this tick.
        """
        events: List[ScoreEvent] = []
        for index, pipe in enumerate(pipes):
            if not pipe.scored and bird.x > pipes.center_x(pipe):
                pipe.scored = True
                self._score += self.POINTS_PER_PIPE
                events.append(ScoreEvent(points=self.POINTS_PER_PIPE, pipe_index=index))
        return events

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
