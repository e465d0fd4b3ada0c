"""
RNG - Gate Sampler
==================

Provides deterministic gate placement for recycled pipes.
"""

from __future__ import annotations

import random
from typing import Optional, Tuple


class GateSampler:
    """
    Seeded source of pipe gate positions.

    The gate top is drawn uniformly from [gap / 2, height - gap - gap / 2].
    When the viewport is too short for that range the gate is centered instead.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize sampler.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        """Seed the sampler was last (re)initialized with."""
        return self._seed

    @staticmethod
    def gate_range(height: float, gap: float) -> Tuple[float, float]:
        """
        Valid (min, max) range for a gate top.

        The range is inverted or empty when the viewport cannot fit it.
        """
        min_top = gap * 0.5
        max_top = height - gap - min_top
        return (min_top, max_top)

    def sample(self, height: float, gap: float) -> float:
        """
        Draw a gate top for a viewport of the given height.

        Args:
            height: Viewport height in pixels.
            gap: Gate height in pixels.

        Returns:
            Y coordinate of the top of the gate.
        """
        min_top, max_top = self.gate_range(height, gap)
        if max_top <= min_top:
            return height / 2.0 - gap / 2.0
        return min_top + self._rng.random() * (max_top - min_top)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the sampler with optional new seed.

        Args:
            seed: New random seed. Keeps current sequence if None.
        """
        if seed is not None:
            self._seed = seed
            self._rng = random.Random(seed)
