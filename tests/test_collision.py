"""
Tests for collision detection.
"""

import pytest

from flappy_arcade.flappy_core.bird import Bird
from flappy_arcade.flappy_core.collision import CollisionDetector, Rect
from flappy_arcade.flappy_core.pipe_pool import PipePool
from flappy_arcade.flappy_core.rng import GateSampler


@pytest.fixture
def bird():
    b = Bird()
    b.place(x=140.0, y=390.0, radius=12.0)
    return b


@pytest.fixture
def pipes():
    pool = PipePool(3, GateSampler(seed=0))
    pool.configure(400.0, 800.0, 60.0, 180.0)
    pool.layout()
    # Park every pipe far away with a gate at 300..480
    for i, pipe in enumerate(pool):
        pipe.x = 1000.0 + i * 200.0
        pipe.gate_top = 300.0
    return pool


@pytest.fixture
def detector():
    return CollisionDetector(viewport_height=800.0)


class TestRectIntersection:
    """Test strict rectangle overlap."""

    def test_overlap(self):
        assert Rect(0, 0, 10, 10).intersects(Rect(5, 5, 15, 15))

    def test_shared_edge_is_not_overlap(self):
        """Touching edges have zero area."""
        assert not Rect(0, 0, 10, 10).intersects(Rect(10, 0, 20, 10))
        assert not Rect(0, 0, 10, 10).intersects(Rect(0, 10, 10, 20))

    def test_disjoint(self):
        assert not Rect(0, 0, 10, 10).intersects(Rect(20, 20, 30, 30))

    def test_containment_counts(self):
        assert Rect(0, 0, 100, 100).intersects(Rect(10, 10, 20, 20))

    def test_empty_rect_never_overlaps_from_outside(self):
        """A zero-height segment only overlaps a box that straddles it."""
        assert not Rect(0, 0, 10, 0).intersects(Rect(0, 1, 10, 5))


class TestBoundsCollision:
    """Test viewport top/bottom checks."""

    def test_inside_bounds(self, bird, detector):
        assert not detector.check_bounds(bird).collided

    def test_top_touching_zero_collides(self, bird, detector):
        """Box top at exactly 0 counts as a hit."""
        bird.y = 12.0
        result = detector.check_bounds(bird)
        assert result.collided
        assert result.reason == "ceiling"

    def test_top_just_inside(self, bird, detector):
        bird.y = 12.5
        assert not detector.check_bounds(bird).collided

    def test_bottom_touching_height_collides(self, bird, detector):
        """Box bottom at exactly the height counts as a hit."""
        bird.y = 788.0
        result = detector.check_bounds(bird)
        assert result.collided
        assert result.reason == "floor"


class TestPipeCollision:
    """Test bird against pipe segments."""

    def test_no_pipes_nearby(self, bird, pipes, detector):
        assert not detector.check(bird, pipes).collided

    def test_inside_gate(self, bird, pipes, detector):
        """Bird fully inside the gate while overlapping the pipe horizontally."""
        pipes[0].x = 120.0
        assert not detector.check_pipes(bird, pipes).collided

    def test_hits_top_segment(self, bird, pipes, detector):
        pipes[0].x = 120.0
        bird.y = 310.0
        result = detector.check(bird, pipes)
        assert result.collided
        assert result.reason == "pipe"

    def test_hits_bottom_segment(self, bird, pipes, detector):
        pipes[0].x = 120.0
        bird.y = 470.0
        assert detector.check_pipes(bird, pipes).collided

    def test_touching_gate_edge_is_safe(self, bird, pipes, detector):
        """Bird top exactly on the gate top has zero overlap."""
        pipes[0].x = 120.0
        bird.y = 312.0
        assert not detector.check_pipes(bird, pipes).collided

    def test_touching_pipe_side_is_safe(self, bird, pipes, detector):
        """Bird right edge exactly on the pipe's left edge."""
        pipes[0].x = 152.0
        bird.y = 100.0
        assert not detector.check_pipes(bird, pipes).collided

        pipes[0].x = 151.5
        assert detector.check_pipes(bird, pipes).collided

    def test_any_pipe_can_hit(self, bird, pipes, detector):
        """Order of pipes does not matter."""
        pipes[2].x = 130.0
        bird.y = 100.0
        assert detector.check_pipes(bird, pipes).collided

    def test_bounds_checked_first(self, bird, pipes, detector):
        """Bounds take precedence over pipes."""
        pipes[0].x = 120.0
        bird.y = 5.0
        assert detector.check(bird, pipes).reason == "ceiling"
