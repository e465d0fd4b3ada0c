"""
Collision Detection
===================

Axis-aligned box tests between the bird, the viewport bounds and the pipes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, TYPE_CHECKING

if TYPE_CHECKING:
    from flappy_arcade.flappy_core.bird import Bird
    from flappy_arcade.flappy_core.pipe_pool import PipePool


class Rect(NamedTuple):
    """Axis-aligned rectangle in viewport pixels (y grows downward)."""
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def intersects(self, other: "Rect") -> bool:
        """
        Strict overlap test.

        Rectangles that only share an edge have zero overlap area and do not
        intersect.
        """
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )


@dataclass
class CollisionResult:
    """Result of a collision check."""
    collided: bool
    reason: str

    @staticmethod
    def none() -> "CollisionResult":
        return CollisionResult(False, "")

    @staticmethod
    def hit(reason: str) -> "CollisionResult":
        return CollisionResult(True, reason)


class CollisionDetector:
    """
    Detects game-ending contacts.

    - Bounds: bird box touches or crosses the top or bottom of the viewport
    - Pipes: bird box overlaps a top or bottom pipe segment
    """

    def __init__(self, viewport_height: float = 0.0):
        self._viewport_height = viewport_height

    @property
    def viewport_height(self) -> float:
        return self._viewport_height

    @viewport_height.setter
    def viewport_height(self, value: float) -> None:
        self._viewport_height = value

    def check_bounds(self, bird: "Bird") -> CollisionResult:
        """Check the bird against the top and bottom of the viewport."""
        box = bird.bounding_box
        if box.top <= 0:
            return CollisionResult.hit("ceiling")
        if box.bottom >= self._viewport_height:
            return CollisionResult.hit("floor")
        return CollisionResult.none()

    def check_pipes(self, bird: "Bird", pipes: "PipePool") -> CollisionResult:
        """Check the bird against every pipe segment, stopping at the first hit."""
        box = bird.bounding_box
        for pipe in pipes:
            top_rect, bottom_rect = pipes.rects_for(pipe)
            if box.intersects(top_rect) or box.intersects(bottom_rect):
                return CollisionResult.hit("pipe")
        return CollisionResult.none()

    def check(self, bird: "Bird", pipes: "PipePool") -> CollisionResult:
        """
        Run all collision checks.

        Args:
            bird: The bird after this tick's integration.
            pipes: The pipe pool after this tick's movement.

        Returns:
            CollisionResult for the first contact found.
        """
        result = self.check_bounds(bird)
        if result.collided:
            return result
        return self.check_pipes(bird, pipes)
