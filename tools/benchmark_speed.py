"""
Performance Benchmark
=====================

Measures tick throughput of the bare core and of the Gymnasium wrapper.

Usage:
    python -m tools.benchmark_speed [--steps S] [--image-obs]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from flappy_arcade.flappy_core.config_loader import load_config
from flappy_arcade.flappy_core.game import CoreGame
from flappy_arcade.flappy_core.env_gym import FlappyEnv


def _timing(mode: str, num_steps: int, elapsed: float) -> dict:
    return {
        "mode": mode,
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_core(num_steps: int = 10000, seed: int = 42, flap_prob: float = 0.08) -> dict:
    """
    Benchmark CoreGame.step() with random flaps, restarting on game over.

    Args:
        num_steps: Number of ticks to run.
        seed: Random seed for gates and actions.
        flap_prob: Chance of flapping on each tick.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    game.on_viewport_resized(config.viewport.width, config.viewport.height)
    rng = np.random.default_rng(seed)
    flaps = rng.random(num_steps) < flap_prob

    start = time.perf_counter()
    for flap in flaps:
        if game.step(flap=bool(flap)).terminated:
            game.reset()
    elapsed = time.perf_counter() - start

    return _timing("core", num_steps, elapsed)


def benchmark_env(
    num_steps: int = 2000,
    seed: int = 42,
    image_obs: bool = False,
    flap_prob: float = 0.08
) -> dict:
    """
    Benchmark FlappyEnv.step() including observation building.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.
        image_obs: Include the rendered board in every observation.
        flap_prob: Chance of flapping on each step.

    Returns:
        Dict with timing results.
    """
    env = FlappyEnv(image_obs=image_obs)
    rng = np.random.default_rng(seed)

    # Warmup
    env.reset(seed=seed)
    for _ in range(10):
        _, _, terminated, truncated, _ = env.step(int(rng.random() < flap_prob))
        if terminated or truncated:
            env.reset()

    env.reset(seed=seed)
    start = time.perf_counter()
    for _ in range(num_steps):
        _, _, terminated, truncated, _ = env.step(int(rng.random() < flap_prob))
        if terminated or truncated:
            env.reset()
    elapsed = time.perf_counter() - start
    env.close()

    return _timing("env+image" if image_obs else "env", num_steps, elapsed)


def run_all_benchmarks(steps: int = 2000, image_obs: bool = False) -> list:
    """Run the benchmark suite and print a summary table."""
    print("=" * 50)
    print("FLAPPY ARCADE BENCHMARK")
    print("=" * 50)
    print()

    results = [
        benchmark_core(num_steps=steps * 5),
        benchmark_env(num_steps=steps),
    ]
    if image_obs:
        results.append(benchmark_env(num_steps=steps, image_obs=True))

    print(f"{'Mode':<12} {'Steps':>8} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 46)
    for r in results:
        print(f"{r['mode']:<12} {r['num_steps']:>8} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.4f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark flappy core and environment performance")
    parser.add_argument("--steps", type=int, default=2000, help="Env steps per benchmark")
    parser.add_argument("--image-obs", action="store_true", help="Also benchmark image observations")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 200 if args.quick else args.steps
    run_all_benchmarks(steps=steps, image_obs=args.image_obs)

    return 0


if __name__ == "__main__":
    sys.exit(main())
