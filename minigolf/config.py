"""
Tunable constants for ball physics, prediction and shot input.

Defaults reproduce the game's 60 Hz tuning. `load_config` overrides them from
an INI file:

    [physics]
    spin_decay = 0.5
    time_normalized_friction = true

    [prediction]
    max_flight_steps = 300
"""

import configparser
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class PhysicsConfig:
    """Constants of the ball's physical law, shared by live play and prediction."""
    gravity: float = 400.0  # px/s^2
    min_bounce_vz: float = 15.0  # px/s; slower contacts land instead of bouncing
    bounce_horizontal_damping: float = 0.6
    spin_decay: float = 0.6  # share of residual spin angle kept per bounce
    stop_threshold: float = 3.0  # px/s
    # Friction is a per-frame multiplier tuned at this rate. With
    # time_normalized_friction the multiplier becomes friction ** (dt * rate)
    # so rolling distance no longer depends on the frame rate.
    reference_frame_rate: float = 60.0
    time_normalized_friction: bool = False
    slope_acceleration: float = 0.0  # px/s^2 per elevation unit, 0 disables
    max_bounces: Optional[int] = None

    def __post_init__(self):
        if self.gravity <= 0:
            raise ValueError("gravity must be positive")
        if not 0.0 <= self.bounce_horizontal_damping <= 1.0:
            raise ValueError("bounce_horizontal_damping must be in [0, 1]")
        if not 0.0 <= self.spin_decay <= 1.0:
            raise ValueError("spin_decay must be in [0, 1]")
        if self.stop_threshold <= 0 or self.min_bounce_vz < 0:
            raise ValueError("thresholds must be positive")
        if self.reference_frame_rate <= 0:
            raise ValueError("reference_frame_rate must be positive")
        if self.max_bounces is not None and self.max_bounces < 0:
            raise ValueError("max_bounces must be >= 0")


@dataclass(frozen=True)
class PredictionConfig:
    """Sampling and safety caps of the trajectory predictor."""
    dt: float = 1.0 / 60.0
    max_flight_steps: int = 240
    max_roll_steps: int = 200
    power_samples: int = 10  # intervals; the search evaluates power_samples + 1 powers

    def __post_init__(self):
        if self.dt <= 0:
            raise ValueError("dt must be positive")
        if self.max_flight_steps < 0 or self.max_roll_steps < 0:
            raise ValueError("step caps must be >= 0")
        if self.power_samples < 1:
            raise ValueError("power_samples must be >= 1")


@dataclass(frozen=True)
class ShotConfig:
    """Drag-to-shoot input mapping."""
    max_power: float = 500.0
    max_drag_distance: float = 150.0
    min_power_threshold: float = 20.0
    hole_sink_radius: float = 10.0
    min_aim_distance: float = 10.0  # px; nearer aim points give no shot

    def __post_init__(self):
        if self.max_power <= 0 or self.max_drag_distance <= 0:
            raise ValueError("max_power and max_drag_distance must be positive")
        if self.min_power_threshold < 0 or self.min_aim_distance < 0:
            raise ValueError("min_power_threshold and min_aim_distance must be >= 0")
        if self.hole_sink_radius <= 0:
            raise ValueError("hole_sink_radius must be positive")


GameConfig = Tuple[PhysicsConfig, PredictionConfig, ShotConfig]


def _coerce(section: configparser.SectionProxy, key: str, current):
    if isinstance(current, bool):
        return section.getboolean(key)
    if isinstance(current, int):
        return section.getint(key)
    if isinstance(current, float):
        return section.getfloat(key)
    # Optional[int] fields default to None
    raw = section.get(key).strip().lower()
    return None if raw in ("", "none") else int(raw)


def _apply_section(parser: configparser.ConfigParser, name: str, base):
    if not parser.has_section(name):
        return base
    known = {f.name for f in fields(base)}
    section = parser[name]
    overrides = {}
    for key in section:
        if key not in known:
            raise ValueError(f"unknown option {key!r} in [{name}]")
        overrides[key] = _coerce(section, key, getattr(base, key))
    return replace(base, **overrides)


def load_config(path: Union[str, Path, None] = None) -> GameConfig:
    """Read physics, prediction and shot settings; missing keys keep their defaults."""
    parser = configparser.ConfigParser()
    if path is not None:
        cfg_path = Path(path)
        if not cfg_path.is_file():
            raise FileNotFoundError(cfg_path)
        parser.read(cfg_path)
    return (
        _apply_section(parser, "physics", PhysicsConfig()),
        _apply_section(parser, "prediction", PredictionConfig()),
        _apply_section(parser, "shot", ShotConfig()),
    )
