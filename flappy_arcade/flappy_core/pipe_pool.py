"""
Pipe Pool
=========

Fixed-size arena of pipe pairs that scroll left and are recycled in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from flappy_arcade.flappy_core.collision import Rect
from flappy_arcade.flappy_core.rng import GateSampler


@dataclass
class Pipe:
    """A pipe pair sharing one x position and one gate."""
    x: float = 0.0
    gate_top: float = 0.0
    scored: bool = False


class PipePool:
    """
    Pre-allocated pipe slots indexed 0..N-1.

    Slots are never inserted or removed. A pipe whose right edge leaves the
    screen is re-initialized ahead of the farthest pipe with a fresh gate.
    """

    def __init__(self, count: int, sampler: GateSampler):
        """
        Initialize pool.

        Args:
            count: Number of pipe slots.
            sampler: Gate position source shared with the session.
        """
        if count < 1:
            raise ValueError(f"Pipe pool needs at least one slot, got {count}")

        self._pipes: Tuple[Pipe, ...] = tuple(Pipe() for _ in range(count))
        self._sampler = sampler

        # Geometry, set by configure()
        self._viewport_width: float = 0.0
        self._viewport_height: float = 0.0
        self._width: float = 0.0
        self._gap: float = 0.0
        self._spacing: float = 0.0

    def __len__(self) -> int:
        return len(self._pipes)

    def __iter__(self) -> Iterator[Pipe]:
        return iter(self._pipes)

    def __getitem__(self, index: int) -> Pipe:
        return self._pipes[index]

    @property
    def width(self) -> float:
        return self._width

    @property
    def gap(self) -> float:
        return self._gap

    @property
    def spacing(self) -> float:
        """Horizontal distance between consecutive pipes."""
        return self._spacing

    def configure(
        self,
        viewport_width: float,
        viewport_height: float,
        width: float,
        gap: float,
        min_spacing_factor: float = 2.0
    ) -> None:
        """
        Set pool geometry for a viewport.

        Spacing is max(min_spacing_factor * width, viewport_width / N) so that
        N pipes tile the screen with a playable gap between pairs.
        """
        self._viewport_width = viewport_width
        self._viewport_height = viewport_height
        self._width = width
        self._gap = gap
        self._spacing = max(width * min_spacing_factor, viewport_width / len(self._pipes))

    def layout(self) -> None:
        """Tile all pipes outward from the right edge of the viewport."""
        for i, pipe in enumerate(self._pipes):
            pipe.x = self._viewport_width + i * self._spacing
            pipe.gate_top = self._sampler.sample(self._viewport_height, self._gap)
            pipe.scored = False

    def farthest_x(self) -> float:
        """Largest pipe x, never less than the viewport width."""
        farthest = self._viewport_width
        for pipe in self._pipes:
            if pipe.x > farthest:
                farthest = pipe.x
        return farthest

    def recycle(self, pipe: Pipe) -> None:
        """Move a pipe ahead of all others with a fresh gate."""
        pipe.x = self.farthest_x() + self._spacing
        pipe.gate_top = self._sampler.sample(self._viewport_height, self._gap)
        pipe.scored = False

    def step(self, speed: float) -> int:
        """
        Scroll every pipe left by ``speed``.

        Each pipe is moved and, if fully off-screen, recycled before the next
        pipe moves.

        Returns:
            Number of pipes recycled this tick.
        """
        recycled = 0
        for pipe in self._pipes:
            pipe.x -= speed
            if pipe.x + self._width < 0:
                self.recycle(pipe)
                recycled += 1
        return recycled

    def top_rect(self, pipe: Pipe) -> Rect:
        return Rect(pipe.x, 0.0, pipe.x + self._width, pipe.gate_top)

    def bottom_rect(self, pipe: Pipe) -> Rect:
        return Rect(
            pipe.x,
            pipe.gate_top + self._gap,
            pipe.x + self._width,
            self._viewport_height
        )

    def rects_for(self, pipe: Pipe) -> Tuple[Rect, Rect]:
        """(top, bottom) segments of a pipe pair."""
        return self.top_rect(pipe), self.bottom_rect(pipe)

    def center_x(self, pipe: Pipe) -> float:
        return pipe.x + self._width / 2.0
