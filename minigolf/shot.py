"""Turning the player's aim into a struck launch."""

import logging
from dataclasses import replace
from typing import Optional, Tuple

import numpy as np

from .clubs import DEFAULT_HIT_PARAMS, Club, PlayerHitParams
from .config import ShotConfig
from .events import EventChannel, GameEvent
from .terrain import TerrainClass
from .trajectory_simulator import LaunchParameters, TrajectoryOptimizer

logger = logging.getLogger(__name__)

TEE_ONLY_REASON = "club can only be used from the tee"


class ShotResolver:
    """
    Resolves aim input into launch parameters.

    Power comes either from a drag distance or from a sampled search for the
    power that lands nearest the aimed-at point. Every struck shot then gets
    the player's mis-hit variance, widened by the terrain the ball lies on.
    """

    def __init__(
            self,
            optimizer: TrajectoryOptimizer,
            hit_params: PlayerHitParams = DEFAULT_HIT_PARAMS,
            shot_config: Optional[ShotConfig] = None,
            rng: Optional[np.random.Generator] = None,
            events: Optional[EventChannel] = None
    ):
        self.optimizer = optimizer
        self.hit_params = hit_params
        self.shot_config = shot_config or ShotConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.events = events

    @staticmethod
    def can_use_club(club: Club, terrain: Optional[TerrainClass]) -> bool:
        return not club.tee_only or terrain == TerrainClass.TEE

    def _check_club(self, club: Club, terrain: Optional[TerrainClass]) -> bool:
        if self.can_use_club(club, terrain):
            return True
        logger.info("%s rejected off the tee", club.name)
        if self.events is not None:
            self.events.emit(GameEvent.CLUB_RESTRICTED, TEE_ONLY_REASON)
        return False

    def variance_bounds(self, club: Club, terrain: Optional[TerrainClass]) -> Tuple[float, float, float]:
        """(speed_delta_min, speed_delta_max, accuracy_degrees) for a strike from `terrain`."""
        mod = club.modifier_for(terrain)
        return (
            self.hit_params.speed_delta_min + mod.speed_delta_min,
            self.hit_params.speed_delta_max + mod.speed_delta_max,
            self.hit_params.accuracy_degrees + mod.accuracy_penalty_degrees
        )

    def power_from_drag(self, drag_distance: float, club: Optional[Club] = None) -> Optional[float]:
        """
        Power for a drag gesture, proportional to the capped drag distance.

        Maps into the club's power range when a club is given, otherwise onto
        the global maximum. Returns None when the power is too weak to count
        as a shot.
        """
        cfg = self.shot_config
        ratio = min(max(drag_distance, 0.0), cfg.max_drag_distance) / cfg.max_drag_distance
        if club is None:
            power = ratio * cfg.max_power
        else:
            power = club.min_power + ratio * (club.max_power - club.min_power)
        if power < cfg.min_power_threshold:
            return None
        return power

    def find_power(
            self,
            ball_position: Tuple[float, float],
            aim_direction: float,
            target_position: Tuple[float, float],
            club: Club,
            terrain: Optional[TerrainClass],
            spin_direction: int = 0
    ) -> float:
        """Best sampled power toward the target, or the club's minimum if nothing moves."""
        found = self.optimizer.find_optimal_power(
            ball_position, aim_direction, target_position, club,
            spin_direction=spin_direction,
            spin_angle=club.effective_spin_angle(terrain)
        )
        if found is None:
            return float(club.min_power)
        return found[0]

    def aim(
            self,
            ball_position: Tuple[float, float],
            aim_direction: float,
            power: float,
            club: Club,
            terrain: Optional[TerrainClass],
            spin_direction: int = 0
    ) -> LaunchParameters:
        """The intended launch, before any mis-hit."""
        return LaunchParameters(
            position=ball_position,
            direction=aim_direction,
            power=power,
            loft_degrees=club.loft_degrees,
            spin_direction=spin_direction,
            spin_angle=club.effective_spin_angle(terrain)
        )

    def apply_variance(
            self,
            launch: LaunchParameters,
            club: Club,
            terrain: Optional[TerrainClass]
    ) -> LaunchParameters:
        """Sample a mis-hit: speed factor and direction error within the current bounds."""
        speed_min, speed_max, accuracy = self.variance_bounds(club, terrain)
        speed_factor = 1.0 + self.rng.uniform(speed_min, speed_max)
        deviation = np.radians(self.rng.uniform(-accuracy, accuracy))
        return replace(
            launch,
            power=max(0.0, float(launch.power * speed_factor)),
            direction=float(launch.direction + deviation)
        )

    def resolve(
            self,
            aim_direction: float,
            target_position: Tuple[float, float],
            club: Club,
            terrain_under_ball: Optional[TerrainClass],
            spin_direction: int,
            ball_position: Tuple[float, float]
    ) -> Optional[LaunchParameters]:
        """
        Struck launch for a target-aimed shot.

        Returns None, after a restriction notification, when a tee-only club
        is used off the tee.
        """
        if not self._check_club(club, terrain_under_ball):
            return None
        power = self.find_power(
            ball_position, aim_direction, target_position, club, terrain_under_ball, spin_direction
        )
        intended = self.aim(ball_position, aim_direction, power, club, terrain_under_ball, spin_direction)
        struck = self.apply_variance(intended, club, terrain_under_ball)
        logger.debug(
            "resolved %s: power %.1f -> %.1f, direction %.4f -> %.4f",
            club.id, intended.power, struck.power, intended.direction, struck.direction
        )
        return struck

    def resolve_drag(
            self,
            aim_direction: float,
            drag_distance: float,
            club: Club,
            terrain_under_ball: Optional[TerrainClass],
            spin_direction: int,
            ball_position: Tuple[float, float]
    ) -> Optional[LaunchParameters]:
        """Struck launch for a drag-powered shot, or None when restricted or too weak."""
        if not self._check_club(club, terrain_under_ball):
            return None
        power = self.power_from_drag(drag_distance, club)
        if power is None:
            return None
        intended = self.aim(ball_position, aim_direction, power, club, terrain_under_ball, spin_direction)
        return self.apply_variance(intended, club, terrain_under_ball)
