"""A round over a course: holes, clubs, strokes and the scorecard."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .ball import BallPhysics
from .clubs import CLUBS, DEFAULT_CLUB_INDEX, DEFAULT_HIT_PARAMS, Club, PlayerHitParams
from .config import PhysicsConfig, PredictionConfig, ShotConfig
from .course_map import CourseMap, TileCoord
from .events import EventChannel, GameEvent
from .shot import TEE_ONLY_REASON, ShotResolver
from .terrain import TerrainClass
from .trajectory_simulator import (
    LaunchParameters, PhysicsEngine, TrajectoryOptimizer, TrajectoryResult, TrajectorySimulator,
    aim_direction
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoleData:
    index: int
    par: int
    tee: TileCoord
    flag: TileCoord


@dataclass(frozen=True)
class ScorecardRow:
    hole_index: int
    par: int
    strokes: int

    @property
    def score(self) -> int:
        """Strokes relative to par."""
        return self.strokes - self.par

    @property
    def score_label(self) -> str:
        if self.score == 0:
            return "E"
        return f"+{self.score}" if self.score > 0 else str(self.score)


@dataclass(frozen=True)
class AimPreview:
    """What the aim assist shows for the current pointer position."""
    direction: float
    power: float
    power_fraction: float
    trajectory: TrajectoryResult


class GolfSession:
    """
    Plays a list of holes on one course map.

    The session owns the event channel: the ball reports strokes, hazards and
    stops through it, and the session adds hole and course completion.
    """

    def __init__(
            self,
            course_map: CourseMap,
            holes: Sequence[HoleData],
            physics_config: Optional[PhysicsConfig] = None,
            prediction_config: Optional[PredictionConfig] = None,
            shot_config: Optional[ShotConfig] = None,
            hit_params: PlayerHitParams = DEFAULT_HIT_PARAMS,
            rng: Optional[np.random.Generator] = None
    ):
        if not holes:
            raise ValueError("a session needs at least one hole")
        self.course_map = course_map
        self.holes = list(holes)
        self.shot_config = shot_config or ShotConfig()
        self.events = EventChannel()

        self.engine = PhysicsEngine(course_map, physics_config)
        self.simulator = TrajectorySimulator(self.engine, prediction_config)
        self.optimizer = TrajectoryOptimizer(self.simulator)
        self.ball = BallPhysics(self.engine, self.events)
        self.resolver = ShotResolver(
            self.optimizer, hit_params, self.shot_config, rng=rng, events=self.events
        )

        self.hole_strokes = [0] * len(self.holes)
        self.current_hole_index = 0
        self.club_index = DEFAULT_CLUB_INDEX
        self.spin_direction = 0
        self.finished = False

        self.events.subscribe(GameEvent.STROKE_TAKEN, self._record_strokes)
        self.events.subscribe(GameEvent.WATER_HAZARD, self._record_strokes)
        self.events.subscribe(GameEvent.BALL_STOPPED, self._check_hole_completion)

        self.start_hole(0)

    # === Queries ===

    @property
    def current_hole(self) -> HoleData:
        return self.holes[self.current_hole_index]

    @property
    def current_club(self) -> Club:
        return CLUBS[self.club_index]

    def flag_position(self, hole: Optional[HoleData] = None) -> Tuple[float, float]:
        hole = hole or self.current_hole
        return self.course_map.tile_center(hole.flag.tile_x, hole.flag.tile_y)

    def terrain_under_ball(self) -> Optional[TerrainClass]:
        tile_x, tile_y = self.course_map.world_to_tile(*self.ball.ground_position())
        return self.course_map.terrain_class_at(tile_x, tile_y)

    def is_on_tee(self) -> bool:
        return self.engine.hazards.is_on(*self.ball.ground_position(), TerrainClass.TEE)

    def can_shoot(self) -> bool:
        return not self.finished and self.ball.is_stopped()

    def _aim_is_valid(self, target: Tuple[float, float]) -> bool:
        x, y = self.ball.ground_position()
        return bool(np.hypot(target[0] - x, target[1] - y) >= self.shot_config.min_aim_distance)

    # === Holes ===

    def start_hole(self, index: int):
        hole = self.holes[index]
        self.current_hole_index = index
        self.ball.reset_stroke_count()
        self.ball.place_ball(*self.course_map.tile_center(hole.tee.tile_x, hole.tee.tile_y))
        logger.info("hole %d started (par %d)", index + 1, hole.par)

    def _record_strokes(self, count: int):
        self.hole_strokes[self.current_hole_index] = count

    def _check_hole_completion(self):
        if self.ball.state.strokes == 0:
            return
        sunk = self.engine.hazards.check_sink(
            self.ball.ground_position(), self.flag_position(), self.shot_config.hole_sink_radius
        )
        if sunk:
            self._complete_hole()

    def _complete_hole(self):
        hole = self.current_hole
        strokes = self.ball.stroke_count()
        self.hole_strokes[self.current_hole_index] = strokes
        logger.info("hole %d complete in %d strokes (par %d)", hole.index + 1, strokes, hole.par)
        self.events.emit(GameEvent.HOLE_COMPLETE, self.current_hole_index, strokes, hole.par)

        if self.current_hole_index < len(self.holes) - 1:
            self.start_hole(self.current_hole_index + 1)
        else:
            self.finished = True
            logger.info("course complete: %d strokes (par %d)", self.total_strokes(), self.total_par())
            self.events.emit(GameEvent.COURSE_COMPLETE, self.total_strokes(), self.total_par())

    # === Clubs and spin ===

    def select_club(self, index: int) -> bool:
        """Switch clubs; tee-only clubs are refused away from the tee."""
        if index < 0 or index >= len(CLUBS):
            return False
        club = CLUBS[index]
        if not self.resolver.can_use_club(club, self.terrain_under_ball()):
            self.events.emit(GameEvent.CLUB_RESTRICTED, TEE_ONLY_REASON)
            return False
        self.club_index = index
        return True

    def cycle_club(self, step: int) -> bool:
        return self.select_club((self.club_index + step) % len(CLUBS))

    def set_spin(self, direction: int):
        if direction not in (-1, 0, 1):
            raise ValueError(f"spin direction must be -1, 0 or 1, got {direction}")
        self.spin_direction = direction

    # === Shots ===

    def preview(self, target: Tuple[float, float]) -> Optional[AimPreview]:
        """
        Aim assist toward `target`: searched power and its predicted path.

        None while no shot can be taken: the ball is moving, the target is too
        close to the ball, or the selected club is not allowed from this lie.
        """
        if not self.can_shoot() or not self._aim_is_valid(target):
            return None
        club = self.current_club
        terrain = self.terrain_under_ball()
        if not self.resolver.can_use_club(club, terrain):
            return None
        start = self.ball.ground_position()
        direction = aim_direction(start, target)
        power = self.resolver.find_power(start, direction, target, club, terrain, self.spin_direction)
        launch = self.resolver.aim(start, direction, power, club, terrain, self.spin_direction)
        return AimPreview(
            direction=direction,
            power=power,
            power_fraction=club.power_fraction(power),
            trajectory=self.simulator.simulate(launch)
        )

    def take_shot(self, target: Tuple[float, float]) -> Optional[LaunchParameters]:
        """Strike toward `target` with the searched power. Returns the struck launch."""
        if not self.can_shoot() or not self._aim_is_valid(target):
            return None
        start = self.ball.ground_position()
        launch = self.resolver.resolve(
            aim_direction(start, target), target, self.current_club,
            self.terrain_under_ball(), self.spin_direction, start
        )
        if launch is None or not self.ball.shoot(launch):
            return None
        return launch

    def take_drag_shot(self, direction: float, drag_distance: float) -> Optional[LaunchParameters]:
        """Strike in `direction` with power from a drag gesture."""
        if not self.can_shoot():
            return None
        launch = self.resolver.resolve_drag(
            direction, drag_distance, self.current_club,
            self.terrain_under_ball(), self.spin_direction, self.ball.ground_position()
        )
        if launch is None or not self.ball.shoot(launch):
            return None
        return launch

    def update(self, dt: float):
        if not self.finished:
            self.ball.update(dt)

    # === Scorecard ===

    def scorecard(self) -> List[ScorecardRow]:
        return [
            ScorecardRow(hole.index, hole.par, strokes)
            for hole, strokes in zip(self.holes, self.hole_strokes)
        ]

    def total_strokes(self) -> int:
        return sum(self.hole_strokes)

    def total_par(self) -> int:
        return sum(hole.par for hole in self.holes)
