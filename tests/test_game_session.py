"""
Tests for the CoreGame session state machine.
"""

import threading

import pytest

from flappy_arcade.flappy_core.config_loader import load_config
from flappy_arcade.flappy_core.game import CoreGame, GamePhase


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    g = CoreGame(config=config, seed=42)
    g.on_viewport_resized(400, 800)
    return g


def park_pipes(game, start=10000.0):
    """Move every pipe far to the right so only bounds matter."""
    for i, pipe in enumerate(game.pipes):
        pipe.x = start + i * 500.0


class TestUninitialized:
    """Test behavior before the viewport size is known."""

    def test_starts_uninitialized(self, config):
        game = CoreGame(config=config, seed=1)
        assert game.phase == GamePhase.UNINITIALIZED
        assert game.viewport is None

    def test_reset_is_noop(self, config):
        game = CoreGame(config=config, seed=1)
        game.reset(seed=5)
        assert game.phase == GamePhase.UNINITIALIZED

    def test_step_does_nothing(self, config):
        """Ticks are no-ops but ask the host to keep going."""
        game = CoreGame(config=config, seed=1)
        result = game.step(flap=True)

        assert result.continued
        assert not result.terminated
        assert game.tick_count == 0
        assert game.advance() is True

    def test_input_ignored(self, config):
        game = CoreGame(config=config, seed=1)
        assert game.on_primary_input() == GamePhase.UNINITIALIZED
        assert game.phase == GamePhase.UNINITIALIZED

    def test_empty_viewport_ignored(self, config):
        """A zero or negative size leaves the session uninitialized."""
        game = CoreGame(config=config, seed=1)
        game.on_viewport_resized(0, 800)
        game.on_viewport_resized(400, -1)

        assert game.phase == GamePhase.UNINITIALIZED
        assert game.viewport is None
        assert game.advance() is True

    def test_rejects_bad_scale(self, config):
        with pytest.raises(ValueError):
            CoreGame(config=config, pixels_per_unit=0.0)


class TestReset:
    """Test session start values."""

    def test_bird_placement(self, game):
        """Bird at 35% width, 50% height, radius 3% of the short side."""
        assert game.phase == GamePhase.RUNNING
        assert game.bird.x == pytest.approx(140.0)
        assert game.bird.y == pytest.approx(400.0)
        assert game.bird.radius == pytest.approx(12.0)
        assert game.bird.velocity == 0.0

    def test_pipes_tile_from_right_edge(self, game):
        xs = [pipe.x for pipe in game.pipes]
        assert xs == pytest.approx([400.0, 400.0 + 400.0 / 3, 400.0 + 800.0 / 3])
        for pipe in game.pipes:
            assert 90.0 <= pipe.gate_top <= 530.0
            assert not pipe.scored

    def test_counters_cleared(self, game):
        """Reset clears score, ticks and reason."""
        for _ in range(10):
            game.advance()
        game.reset()

        assert game.score == 0
        assert game.tick_count == 0
        assert game.termination_reason == ""

    def test_resize_restarts_session(self, game):
        """A resize resets with the new geometry."""
        for _ in range(5):
            game.advance()
        game.on_viewport_resized(600, 1000)

        assert game.viewport == (600.0, 1000.0)
        assert game.tick_count == 0
        assert game.bird.x == pytest.approx(210.0)
        assert game.bird.y == pytest.approx(500.0)
        assert game.bird.radius == pytest.approx(18.0)
        assert game.pipes[0].x == pytest.approx(600.0)

    def test_minimized_viewport_keeps_session(self, game):
        """Collapsing to zero size does not reset or stop the running session."""
        for _ in range(5):
            game.advance()
        bird_y = game.bird.y

        game.on_viewport_resized(400, 0)
        game.on_viewport_resized(0, 0)

        assert game.viewport == (400.0, 800.0)
        assert game.phase == GamePhase.RUNNING
        assert game.tick_count == 5
        assert game.bird.y == bird_y
        assert game.advance() is True


class TestTicking:
    """Test per-tick ordering and results."""

    def test_first_tick_without_input(self, game):
        """Gravity then move, pipes scroll by speed."""
        assert game.advance() is True
        assert game.bird.velocity == pytest.approx(0.45)
        assert game.bird.y == pytest.approx(400.45)
        assert [pipe.x for pipe in game.pipes][0] == pytest.approx(394.0)
        assert game.tick_count == 1

    def test_flap_then_tick(self, game):
        """Input sets velocity; the next tick integrates it."""
        game.on_primary_input()
        assert game.bird.velocity == pytest.approx(-9.0)

        game.advance()
        assert game.bird.velocity == pytest.approx(-8.55)
        assert game.bird.y == pytest.approx(391.45)

    def test_step_with_flap(self, game):
        result = game.step(flap=True)
        assert result.continued
        assert game.bird.y == pytest.approx(391.45)

    def test_falls_to_floor(self, game):
        """Without input the bird hits the floor on tick 42."""
        ticks = 0
        while game.advance():
            ticks += 1
        ticks += 1

        assert ticks == 42
        assert game.tick_count == 42
        assert game.is_over
        assert game.termination_reason == "floor"

    def test_ceiling_stops_same_tick(self, game):
        """Top edge reaching 0 ends the session on that tick."""
        park_pipes(game)
        game.bird.y = 12.0
        game.bird.velocity = -0.45

        result = game.step()

        assert not result.continued
        assert result.terminated
        assert result.termination_reason == "ceiling"
        assert game.phase == GamePhase.GAME_OVER

    def test_pipe_collision(self, game):
        """Bird overlapping a pipe segment ends the session."""
        game.pipes[0].x = 150.0
        game.pipes[0].gate_top = 500.0

        result = game.step()
        assert result.terminated
        assert result.termination_reason == "pipe"

    def test_game_over_is_terminal(self, game):
        """Further ticks change nothing once the game is over."""
        while game.advance():
            pass
        bird_y = game.bird.y
        pipe_x = [pipe.x for pipe in game.pipes]
        tick = game.tick_count

        for _ in range(5):
            result = game.step(flap=True)
            assert not result.continued
            assert result.terminated

        assert game.bird.y == bird_y
        assert [pipe.x for pipe in game.pipes] == pipe_x
        assert game.tick_count == tick

    def test_input_after_game_over_restarts(self, game):
        """Input in game over starts a fresh session."""
        while game.advance():
            pass

        assert game.on_primary_input() == GamePhase.GAME_OVER
        assert game.phase == GamePhase.RUNNING
        assert game.tick_count == 0
        assert game.bird.y == pytest.approx(400.0)
        assert game.bird.velocity == 0.0

    def test_apply_impulse_ignored_when_over(self, game):
        while game.advance():
            pass
        velocity = game.bird.velocity
        game.apply_impulse()
        assert game.bird.velocity == velocity


class TestScoring:
    """Test scoring through the session."""

    def test_passing_pipe_scores_once(self, game):
        """A pipe passing the bird adds exactly one point."""
        game.pipes[0].x = 50.0

        result = game.step()
        assert result.continued
        assert result.delta_score == 1
        assert game.score == 1

        for _ in range(20):
            assert game.step().delta_score == 0
        assert game.score == 1

    def test_score_monotonic(self, game):
        """Score never decreases while flapping to survive."""
        last = 0
        for _ in range(500):
            flap = game.bird.y > 450.0 and game.bird.velocity > 0
            result = game.step(flap=flap)
            assert game.score >= last
            last = game.score
            if result.terminated:
                break


class TestDeterminism:
    """Test seed handling."""

    def test_same_seed_same_gates(self, config):
        """Same seed and inputs give identical sessions."""
        a = CoreGame(config=config, seed=7)
        b = CoreGame(config=config, seed=7)
        a.on_viewport_resized(400, 800)
        b.on_viewport_resized(400, 800)

        gates_a, gates_b = [], []
        for _ in range(300):
            a.step(flap=a.bird.y > 400.0)
            b.step(flap=b.bird.y > 400.0)
            gates_a.append([p.gate_top for p in a.pipes])
            gates_b.append([p.gate_top for p in b.pipes])

        assert gates_a == gates_b
        assert a.score == b.score

    def test_different_seeds_differ(self, config):
        a = CoreGame(config=config, seed=1)
        b = CoreGame(config=config, seed=2)
        a.on_viewport_resized(400, 800)
        b.on_viewport_resized(400, 800)

        assert [p.gate_top for p in a.pipes] != [p.gate_top for p in b.pipes]

    def test_reset_with_seed_repeats_layout(self, game):
        game.reset(seed=11)
        first = [p.gate_top for p in game.pipes]
        game.reset(seed=11)
        assert [p.gate_top for p in game.pipes] == first


class TestScaling:
    """Test pixels-per-unit scaling of tuned constants."""

    def test_constants_scale(self, config):
        """Tuned constants are multiplied by pixels_per_unit."""
        game = CoreGame(config=config, seed=0, pixels_per_unit=2.0)
        game.on_viewport_resized(400, 800)

        assert game.gravity == pytest.approx(0.9)
        assert game.flap_velocity == pytest.approx(-18.0)
        assert game.pipe_speed == pytest.approx(12.0)
        assert game.pipes.width == pytest.approx(120.0)
        assert game.pipes.gap == pytest.approx(360.0)
        assert game.pipes.spacing == pytest.approx(240.0)

    def test_scaled_gate_range(self, config):
        game = CoreGame(config=config, seed=0, pixels_per_unit=2.0)
        game.on_viewport_resized(400, 800)
        for pipe in game.pipes:
            assert 180.0 <= pipe.gate_top <= 260.0


class TestQueries:
    """Test read-only accessors."""

    def test_pipe_rects(self, game):
        """Rects bracket each gate and span the viewport height."""
        rects = game.pipe_rects()
        assert len(rects) == 3

        top, bottom = rects[0]
        pipe = game.pipes[0]
        assert top.top == 0.0
        assert top.bottom == pytest.approx(pipe.gate_top)
        assert bottom.top == pytest.approx(pipe.gate_top + 180.0)
        assert bottom.bottom == 800.0
        assert top.left == bottom.left == pipe.x

    def test_snapshot(self, game):
        """Snapshot arrays have one row per pipe slot."""
        snap = game.snapshot()

        assert snap.phase == "running"
        assert snap.pipe_x.shape == (3,)
        assert snap.pipe_top_rect.shape == (3, 4)
        assert snap.next_pipe_index == 0
        assert snap.next_pipe_dx == pytest.approx(260.0)
        assert snap.bird_radius == pytest.approx(12.0)

    def test_snapshot_skips_scored_pipe(self, game):
        """Next pipe is the leftmost unscored one."""
        game.pipes[0].x = 50.0
        game.step()

        snap = game.snapshot()
        assert snap.pipe_scored[0]
        assert snap.next_pipe_index == 1

    def test_snapshot_is_a_copy(self, game):
        snap = game.snapshot()
        game.advance()
        assert snap.pipe_x[0] == pytest.approx(400.0)

    def test_render_data(self, game):
        data = game.get_render_data()

        assert data["viewport_width"] == 400.0
        assert data["viewport_height"] == 800.0
        assert data["bird_x"] == pytest.approx(140.0)
        assert len(data["pipes"]) == 3
        assert data["is_over"] is False
        assert data["phase"] == "running"

    def test_info_waits_for_lock(self, game):
        """Info is read under the session lock."""
        done = threading.Event()
        with game._lock:
            worker = threading.Thread(target=lambda: (game.get_info(), done.set()))
            worker.start()
            assert not done.wait(0.1)
        worker.join(timeout=2.0)
        assert done.is_set()

    def test_info(self, game):
        info = game.get_info()
        assert info["score"] == 0
        assert info["tick"] == 0
        assert info["terminated_reason"] == ""
