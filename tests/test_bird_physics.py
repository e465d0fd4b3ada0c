"""
Tests for bird integration and impulses.
"""

import pytest

from flappy_arcade.flappy_core.bird import Bird


@pytest.fixture
def bird():
    b = Bird()
    b.place(x=140.0, y=400.0, radius=12.0)
    return b


class TestBirdIntegration:
    """Test the per-tick integrator."""

    def test_place_zeroes_velocity(self):
        """Placing the bird should leave it at rest."""
        b = Bird(velocity=5.0)
        b.place(10.0, 20.0, 3.0)

        assert b.x == 10.0
        assert b.y == 20.0
        assert b.radius == 3.0
        assert b.velocity == 0.0

    def test_place_rejects_non_positive_radius(self):
        """Radius must be positive."""
        with pytest.raises(ValueError):
            Bird().place(10.0, 20.0, 0.0)

    def test_gravity_then_move(self, bird):
        """Velocity is updated before position."""
        bird.integrate(0.45)

        assert bird.velocity == pytest.approx(0.45)
        assert bird.y == pytest.approx(400.45)

    def test_impulse_then_tick(self, bird):
        """Impulse then one tick: -9 + 0.45 = -8.55."""
        bird.apply_impulse(-9.0)
        bird.integrate(0.45)

        assert bird.velocity == pytest.approx(-8.55)
        assert bird.y == pytest.approx(391.45)

    def test_impulses_do_not_stack(self, bird):
        """Repeated impulses overwrite the velocity."""
        bird.apply_impulse(-9.0)
        bird.apply_impulse(-9.0)
        assert bird.velocity == -9.0

        bird.integrate(0.45)
        bird.apply_impulse(-9.0)
        assert bird.velocity == -9.0

    def test_x_never_changes(self, bird):
        """Integration is vertical only."""
        for _ in range(50):
            bird.integrate(0.45)
        assert bird.x == 140.0

    def test_bounding_box(self, bird):
        """Box spans radius on every side."""
        box = bird.bounding_box
        assert tuple(box) == (128.0, 388.0, 152.0, 412.0)
        assert box.width == 24.0
        assert box.height == 24.0
