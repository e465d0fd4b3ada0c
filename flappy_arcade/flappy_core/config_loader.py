"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass(frozen=True)
class PhysicsConfig:
    """Bird integration parameters (logical units per tick)."""
    gravity: float
    flap_velocity: float
    tick_rate: int

    @property
    def tick_period(self) -> float:
        """Seconds between host ticks."""
        return 1.0 / self.tick_rate


@dataclass(frozen=True)
class PipeConfig:
    """Obstacle pool parameters."""
    count: int
    width: float
    gap: float
    speed: float
    min_spacing_factor: float


@dataclass(frozen=True)
class BirdConfig:
    """Bird placement relative to the viewport."""
    x_fraction: float
    y_fraction: float
    radius_fraction: float


@dataclass(frozen=True)
class UnitsConfig:
    """Logical-to-pixel scaling."""
    pixels_per_unit: float


@dataclass(frozen=True)
class ViewportConfig:
    """Viewport used by hosts without a real window."""
    width: int
    height: int


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits."""
    max_ticks: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    image_enabled: bool
    image_width: int
    image_height: int
    render_style: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    physics: PhysicsConfig
    pipes: PipeConfig
    bird: BirdConfig
    units: UnitsConfig
    viewport: ViewportConfig
    caps: CapsConfig
    observation: ObservationConfig

    @property
    def num_pipes(self) -> int:
        """Size of the obstacle pool."""
        return self.pipes.count


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.pipes.count < 1:
        raise ValueError(f"pipes.count must be at least 1, got {config.pipes.count}")

    for name in ("width", "gap", "speed"):
        value = getattr(config.pipes, name)
        if value <= 0:
            raise ValueError(f"pipes.{name} must be positive, got {value}")

    if config.pipes.min_spacing_factor <= 1.0:
        raise ValueError(
            f"pipes.min_spacing_factor must exceed 1.0 so pipes never overlap, "
            f"got {config.pipes.min_spacing_factor}"
        )

    if config.physics.tick_rate <= 0:
        raise ValueError(f"physics.tick_rate must be positive, got {config.physics.tick_rate}")

    if config.units.pixels_per_unit <= 0:
        raise ValueError(
            f"units.pixels_per_unit must be positive, got {config.units.pixels_per_unit}"
        )

    if config.bird.radius_fraction <= 0:
        raise ValueError(
            f"bird.radius_fraction must be positive, got {config.bird.radius_fraction}"
        )

    for name in ("x_fraction", "y_fraction"):
        value = getattr(config.bird, name)
        if not 0.0 < value < 1.0:
            raise ValueError(f"bird.{name} must be in (0, 1), got {value}")

    if config.viewport.width <= 0 or config.viewport.height <= 0:
        raise ValueError(
            f"viewport must have positive size, got "
            f"{config.viewport.width}x{config.viewport.height}"
        )

    if config.caps.max_ticks <= 0:
        raise ValueError(f"caps.max_ticks must be positive, got {config.caps.max_ticks}")

    # Validate render style
    if config.observation.render_style != "solid":
        raise ValueError(f"render_style must be 'solid', got '{config.observation.render_style}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        flap_velocity=float(physics_data["flap_velocity"]),
        tick_rate=int(physics_data.get("tick_rate", 60))
    )

    pipes_data = raw["pipes"]
    pipes = PipeConfig(
        count=int(pipes_data.get("count", 3)),
        width=float(pipes_data["width"]),
        gap=float(pipes_data["gap"]),
        speed=float(pipes_data["speed"]),
        min_spacing_factor=float(pipes_data.get("min_spacing_factor", 2.0))
    )

    bird_data = raw.get("bird", {})
    bird = BirdConfig(
        x_fraction=float(bird_data.get("x_fraction", 0.35)),
        y_fraction=float(bird_data.get("y_fraction", 0.5)),
        radius_fraction=float(bird_data.get("radius_fraction", 0.03))
    )

    units_data = raw.get("units", {})
    units = UnitsConfig(
        pixels_per_unit=float(units_data.get("pixels_per_unit", 1.0))
    )

    viewport_data = raw.get("viewport", {})
    viewport = ViewportConfig(
        width=int(viewport_data.get("width", 400)),
        height=int(viewport_data.get("height", 800))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 10000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        image_enabled=bool(obs_data.get("image_enabled", False)),
        image_width=int(obs_data.get("image_width", 144)),
        image_height=int(obs_data.get("image_height", 256)),
        render_style=str(obs_data.get("render_style", "solid"))
    )

    config = GameConfig(
        physics=physics,
        pipes=pipes,
        bird=bird,
        units=units,
        viewport=viewport,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
