"""Ball flight and terrain-interaction physics for an isometric mini-golf game."""

from .ball import BallPhysics
from .clubs import CLUBS, Club, PlayerHitParams, TerrainModifier, club_by_id
from .config import PhysicsConfig, PredictionConfig, ShotConfig, load_config
from .course_map import CourseMap, TileCoord
from .events import EventChannel, GameEvent
from .hazards import HazardDetector
from .session import GolfSession, HoleData
from .shot import ShotResolver
from .terrain import TERRAIN_PROPERTIES, TerrainClass, TerrainProperties, properties_of
from .trajectory_simulator import (
    BallPhase, BallState, LaunchParameters, PhysicsEngine, TrajectoryOptimizer, TrajectoryResult,
    TrajectorySimulator
)
