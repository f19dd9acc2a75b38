#!/usr/bin/env python3
"""
Mini-Golf Ball Trajectory Simulator
===================================
The ball's physical law on an isometric course, and the tools built on it:

- Two-phase motion: gravity-driven flight with terrain bounces, then rolling
  under per-frame terrain friction
- Spin as a discrete rotation of the horizontal velocity at every bounce
- A side-effect free predictor for aim previews
- A sampled power search that lands the ball nearest a target

The live ball (`minigolf.ball.BallPhysics`) and the predictor both advance a
`BallState` through `PhysicsEngine`, so a preview follows exactly the rules the
real shot will.

Author: Mini-Golf Physics Tools
License: MIT
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Mapping, Optional, Tuple

import numpy as np

from .clubs import Club
from .config import PhysicsConfig, PredictionConfig
from .course_map import CourseMap
from .hazards import HazardDetector
from .terrain import (
    HAZARD_TERRAIN, TERRAIN_PROPERTIES, TerrainClass, TerrainProperties, properties_of
)

logger = logging.getLogger(__name__)


class BallPhase(Enum):
    RESTING = "resting"
    AIRBORNE = "airborne"
    ROLLING = "rolling"


class Contact(Enum):
    """Outcome of one flight step."""
    NONE = "none"
    BOUNCE = "bounce"
    LANDED = "landed"


class RollOutcome(Enum):
    """Outcome of one rolling step."""
    ROLLING = "rolling"
    STOPPED = "stopped"
    HAZARD = "hazard"


@dataclass
class LaunchParameters:
    """A struck shot: where it starts and how it leaves the club face."""
    position: Tuple[float, float]  # ground position (px)
    direction: float  # radians in the ground plane
    power: float  # launch speed (px/s)
    loft_degrees: float  # launch angle above horizontal
    spin_direction: int = 0  # -1 = left, 0 = none, +1 = right
    spin_angle: float = 0.0  # degrees of deflection at the first bounce

    def __post_init__(self):
        if self.spin_direction not in (-1, 0, 1):
            raise ValueError(f"spin_direction must be -1, 0 or 1, got {self.spin_direction}")
        if self.power < 0:
            raise ValueError(f"power must be >= 0, got {self.power}")
        if self.spin_angle < 0:
            raise ValueError(f"spin_angle must be >= 0, got {self.spin_angle}")

    @property
    def vertical_speed(self) -> float:
        return self.power * np.sin(np.radians(self.loft_degrees))

    @property
    def velocity_vector(self) -> Tuple[float, float, float]:
        """Initial (vx, vy, vz)."""
        loft_rad = np.radians(self.loft_degrees)
        horizontal = self.power * np.cos(loft_rad)
        return (
            np.cos(self.direction) * horizontal,
            np.sin(self.direction) * horizontal,
            self.power * np.sin(loft_rad)
        )


@dataclass
class BallState:
    """Kinematic state of the ball. z is the height above the ground plane."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0
    phase: BallPhase = BallPhase.RESTING
    spin_direction: int = 0
    spin_angle: float = 0.0
    bounces: int = 0
    strokes: int = 0
    safe_position: Tuple[float, float] = (0.0, 0.0)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def ground_speed(self) -> float:
        return np.sqrt(self.vx ** 2 + self.vy ** 2)

    def copy(self) -> 'BallState':
        return replace(self)


@dataclass(frozen=True)
class TrajectoryPoint:
    """A single predicted sample."""
    x: float
    y: float
    z: float

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class TrajectoryResult:
    """Complete result of a trajectory prediction."""
    points: List[TrajectoryPoint]
    launch_params: LaunchParameters
    bounces: int = 0
    flight_steps: int = 0
    roll_steps: int = 0
    hazard: bool = False
    truncated: bool = False
    final_phase: BallPhase = BallPhase.RESTING

    @property
    def landing_point(self) -> Optional[Tuple[float, float]]:
        """Where the ball ends up, or None when it never moved."""
        if not self.points:
            return None
        return self.points[-1].position

    @property
    def max_height(self) -> float:
        return max((p.z for p in self.points), default=0.0)

    @property
    def total_distance(self) -> float:
        if not self.points:
            return 0.0
        x0, y0 = self.launch_params.position
        end = self.points[-1]
        return np.sqrt((end.x - x0) ** 2 + (end.y - y0) ** 2)

    def distance_to(self, target: Tuple[float, float]) -> Optional[float]:
        landing = self.landing_point
        if landing is None:
            return None
        return np.sqrt((landing[0] - target[0]) ** 2 + (landing[1] - target[1]) ** 2)

    def get_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Get trajectory as numpy arrays (x, y, z)."""
        x = np.array([p.x for p in self.points])
        y = np.array([p.y for p in self.points])
        z = np.array([p.z for p in self.points])
        return x, y, z


def rotate_vector(vx: float, vy: float, degrees: float) -> Tuple[float, float]:
    """Rotate a ground-plane vector by `degrees` (positive turns +x toward +y)."""
    rad = np.radians(degrees)
    cos = np.cos(rad)
    sin = np.sin(rad)
    return vx * cos - vy * sin, vx * sin + vy * cos


class PhysicsEngine:
    """
    The ball's physical law on a course.

    Includes:
    - Gravity during flight
    - Bounce / landing resolution from the terrain under the ball
    - Spin curvature applied per bounce, decaying each time
    - Per-frame rolling friction, optionally biased by slope

    Rolling friction is a dimensionless multiplier per step tuned for 60 steps
    per second. Stepping at another rate changes rolling distance unless
    `PhysicsConfig.time_normalized_friction` is set.
    """

    def __init__(
            self,
            course_map: CourseMap,
            config: Optional[PhysicsConfig] = None,
            terrain_table: Mapping[TerrainClass, TerrainProperties] = TERRAIN_PROPERTIES
    ):
        self.course_map = course_map
        self.config = config or PhysicsConfig()
        self.terrain_table = terrain_table
        self.hazards = HazardDetector(course_map, terrain_table)

    def terrain_at(self, x: float, y: float) -> TerrainClass:
        """Terrain under a world position; off-map positions count as the hazard terrain."""
        tile_x, tile_y = self.course_map.world_to_tile(x, y)
        terrain = self.course_map.terrain_class_at(tile_x, tile_y)
        return HAZARD_TERRAIN if terrain is None else terrain

    def properties_at(self, x: float, y: float) -> TerrainProperties:
        return properties_of(self.terrain_at(x, y), self.terrain_table)

    def rolling_damping(self, friction: float, dt: float) -> float:
        """Velocity multiplier for one rolling step."""
        if self.config.time_normalized_friction:
            return friction ** (dt * self.config.reference_frame_rate)
        return friction

    def skips_flight(self, launch: LaunchParameters) -> bool:
        """Launches too flat for a flight arc go straight to rolling (putts)."""
        return launch.vertical_speed <= self.config.min_bounce_vz

    def launch(self, ball: BallState, launch: LaunchParameters):
        """Put the ball in motion from `launch.position`."""
        vx, vy, vz = launch.velocity_vector
        ball.x, ball.y = launch.position
        ball.z = 0.0
        ball.vx = vx
        ball.vy = vy
        ball.spin_direction = launch.spin_direction
        ball.spin_angle = launch.spin_angle
        ball.bounces = 0
        if self.skips_flight(launch):
            ball.vz = 0.0
            ball.phase = BallPhase.ROLLING
        else:
            ball.vz = vz
            ball.phase = BallPhase.AIRBORNE

    def _can_bounce(self, ball: BallState, props: TerrainProperties) -> bool:
        if abs(ball.vz) <= self.config.min_bounce_vz or props.absorbs_bounce:
            return False
        max_bounces = self.config.max_bounces
        return max_bounces is None or ball.bounces < max_bounces

    def advance_flight(self, ball: BallState, dt: float) -> Contact:
        """One flight step, resolving ground contact when the ball comes down."""
        cfg = self.config
        ball.x += ball.vx * dt
        ball.y += ball.vy * dt
        ball.vz -= cfg.gravity * dt
        ball.z += ball.vz * dt

        if ball.z > 0 or ball.vz >= 0:
            return Contact.NONE

        ball.z = 0.0
        props = self.properties_at(ball.x, ball.y)

        if self._can_bounce(ball, props):
            ball.vz = -ball.vz * props.bounce_factor
            ball.vx *= cfg.bounce_horizontal_damping
            ball.vy *= cfg.bounce_horizontal_damping
            ball.bounces += 1
            if ball.spin_direction != 0 and ball.spin_angle > 0:
                ball.vx, ball.vy = rotate_vector(ball.vx, ball.vy, ball.spin_angle * ball.spin_direction)
                ball.spin_angle *= cfg.spin_decay
            return Contact.BOUNCE

        ball.vz = 0.0
        ball.phase = BallPhase.ROLLING
        ball.vx *= props.landing_speed_factor
        ball.vy *= props.landing_speed_factor
        return Contact.LANDED

    def advance_roll(self, ball: BallState, dt: float) -> RollOutcome:
        """
        One rolling step.

        The hazard check runs before and after moving: a single step can carry
        the ball from legal ground into water.
        """
        if self.hazards.check_hazard(ball.x, ball.y):
            return RollOutcome.HAZARD

        if ball.ground_speed < self.config.stop_threshold:
            ball.vx = 0.0
            ball.vy = 0.0
            ball.phase = BallPhase.RESTING
            return RollOutcome.STOPPED

        props = self.properties_at(ball.x, ball.y)
        damping = self.rolling_damping(props.rolling_friction, dt)
        ball.vx *= damping
        ball.vy *= damping

        if self.config.slope_acceleration:
            slope_x, slope_y = self.course_map.slope_at(*self.course_map.world_to_tile(ball.x, ball.y))
            # downhill is against the gradient
            ball.vx -= slope_x * self.config.slope_acceleration * dt
            ball.vy -= slope_y * self.config.slope_acceleration * dt

        ball.x += ball.vx * dt
        ball.y += ball.vy * dt

        if self.hazards.check_hazard(ball.x, ball.y):
            return RollOutcome.HAZARD
        return RollOutcome.ROLLING


class TrajectorySimulator:
    """
    Side-effect free trajectory predictor.

    Each call works on a ball state of its own, so it can run any number of
    times per frame without touching the live ball.
    """

    def __init__(
            self,
            engine: PhysicsEngine,
            config: Optional[PredictionConfig] = None
    ):
        self.engine = engine
        self.config = config or PredictionConfig()

    @property
    def dt(self) -> float:
        return self.config.dt

    def simulate(self, launch: LaunchParameters) -> TrajectoryResult:
        """
        Predict the ball's path from launch to rest.

        Returns the (x, y, z) sample after every step in which the ball moved.
        Flight and rolling are each capped by the configured step counts; a
        capped run is returned as it stands with `truncated` set.
        """
        engine = self.engine
        dt = self.config.dt
        ball = BallState()
        engine.launch(ball, launch)

        points: List[TrajectoryPoint] = []
        hazard = False
        truncated = False
        flight_steps = 0
        roll_steps = 0

        if ball.phase is BallPhase.AIRBORNE:
            for _ in range(self.config.max_flight_steps):
                contact = engine.advance_flight(ball, dt)
                flight_steps += 1
                points.append(TrajectoryPoint(ball.x, ball.y, max(0.0, ball.z)))
                if contact is Contact.LANDED:
                    hazard = engine.hazards.check_hazard(ball.x, ball.y)
                    break
            else:
                truncated = ball.phase is BallPhase.AIRBORNE

        if ball.phase is BallPhase.ROLLING and not hazard:
            for _ in range(self.config.max_roll_steps):
                before = ball.position
                outcome = engine.advance_roll(ball, dt)
                if outcome is RollOutcome.STOPPED:
                    break
                roll_steps += 1
                if ball.position != before:
                    points.append(TrajectoryPoint(ball.x, ball.y, 0.0))
                if outcome is RollOutcome.HAZARD:
                    hazard = True
                    break
            else:
                truncated = True

        if truncated:
            logger.debug(
                "prediction truncated after %d flight / %d roll steps (power=%.1f)",
                flight_steps, roll_steps, launch.power
            )

        return TrajectoryResult(
            points=points,
            launch_params=launch,
            bounces=ball.bounces,
            flight_steps=flight_steps,
            roll_steps=roll_steps,
            hazard=hazard,
            truncated=truncated,
            final_phase=ball.phase
        )


class TrajectoryOptimizer:
    """
    Searches launch parameters against the predictor.

    Bounces make landing distance a discontinuous function of power, so the
    search samples the power range instead of following a gradient.
    """

    def __init__(self, simulator: TrajectorySimulator):
        self.simulator = simulator

    def power_candidates(self, club: Club, samples: Optional[int] = None) -> np.ndarray:
        """Evenly spaced powers over the club's range, both ends included."""
        steps = samples or self.simulator.config.power_samples
        return np.linspace(club.min_power, club.max_power, steps + 1)

    def find_optimal_power(
            self,
            start: Tuple[float, float],
            direction: float,
            target: Tuple[float, float],
            club: Club,
            spin_direction: int = 0,
            spin_angle: float = 0.0,
            samples: Optional[int] = None
    ) -> Optional[Tuple[float, TrajectoryResult]]:
        """
        Find the power whose predicted landing point is nearest to `target`.

        Args:
            start: Ball ground position
            direction: Fixed aim direction in radians
            target: Desired landing point
            club: Club providing the power range and loft
            spin_direction, spin_angle: Spin applied to every candidate
            samples: Number of intervals over the power range

        Returns:
            Tuple of (power, predicted result), or None if no candidate moves the ball
        """
        best_power = None
        best_result = None
        best_error = float('inf')

        for power in self.power_candidates(club, samples):
            launch = LaunchParameters(
                position=start,
                direction=direction,
                power=float(power),
                loft_degrees=club.loft_degrees,
                spin_direction=spin_direction,
                spin_angle=spin_angle
            )
            result = self.simulator.simulate(launch)
            error = result.distance_to(target)
            if error is not None and error < best_error:
                best_error = error
                best_power = float(power)
                best_result = result

        if best_power is None:
            return None
        return best_power, best_result

    def compute_error_envelope(
            self,
            launch: LaunchParameters,
            speed_delta_min: float,
            speed_delta_max: float,
            accuracy_degrees: float,
            n_samples: int = 3
    ) -> List[TrajectoryResult]:
        """
        Predict the spread of a shot across its variance bounds.

        Returns one result per (speed factor, direction error) combination.
        """
        results = []
        speed_factors = np.linspace(1 + speed_delta_min, 1 + speed_delta_max, n_samples)
        angle_errors = np.radians(np.linspace(-accuracy_degrees, accuracy_degrees, n_samples))

        for factor in speed_factors:
            for error in angle_errors:
                error_launch = replace(
                    launch,
                    power=max(0.0, float(launch.power * factor)),
                    direction=float(launch.direction + error)
                )
                results.append(self.simulator.simulate(error_launch))

        return results


# Utility functions

def launch_power_for_vertical_speed(vz: float, loft_degrees: float) -> float:
    """Launch speed that gives vertical speed `vz` at the given loft."""
    return vz / np.sin(np.radians(loft_degrees))


def aim_direction(start: Tuple[float, float], target: Tuple[float, float]) -> float:
    """Ground-plane direction from start to target, in radians."""
    return float(np.arctan2(target[1] - start[1], target[0] - start[0]))
