"""
Bird
====

Vertical position/velocity integrator for the player avatar.
"""

from __future__ import annotations

from dataclasses import dataclass

from flappy_arcade.flappy_core.collision import Rect


@dataclass
class Bird:
    """
    The player avatar.

    Only ``y`` and ``velocity`` change during play; ``x`` and ``radius`` are
    set by ``place()`` when the session resets.
    """
    x: float = 0.0
    y: float = 0.0
    velocity: float = 0.0
    radius: float = 1.0

    def place(self, x: float, y: float, radius: float) -> None:
        """Put the bird at rest at the given position."""
        if radius <= 0:
            raise ValueError(f"Bird radius must be positive, got {radius}")
        self.x = x
        self.y = y
        self.radius = radius
        self.velocity = 0.0

    def integrate(self, gravity: float) -> None:
        """Advance one tick: accelerate, then move by the new velocity."""
        self.velocity += gravity
        self.y += self.velocity

    def apply_impulse(self, flap_velocity: float) -> None:
        """Set the velocity to the flap velocity. Repeated flaps do not stack."""
        self.velocity = flap_velocity

    @property
    def bounding_box(self) -> Rect:
        r = self.radius
        return Rect(self.x - r, self.y - r, self.x + r, self.y + r)
