import numpy as np
import pytest

from minigolf.ball import BallPhysics
from minigolf.course_map import CourseMap
from minigolf.events import EventChannel
from minigolf.terrain import TerrainClass
from minigolf.trajectory_simulator import PhysicsEngine, TrajectorySimulator

DT = 1.0 / 60.0
CENTER_TILE = (16, 16)


@pytest.fixture
def fairway_map():
    return CourseMap.filled(TerrainClass.FAIRWAY)


@pytest.fixture
def water_ahead_map():
    """Fairway with every tile from tile_x = 18 eastward flooded."""
    course_map = CourseMap.filled(TerrainClass.FAIRWAY)
    course_map.fill_rect(18, 0, 31, 31, TerrainClass.WATER)
    return course_map


@pytest.fixture
def center(fairway_map):
    return fairway_map.tile_center(*CENTER_TILE)


@pytest.fixture
def make_ball():
    """Build a live ball on a map, resting at the centre tile."""
    def _make(course_map, config=None, terrain_table=None):
        kwargs = {} if terrain_table is None else {"terrain_table": terrain_table}
        engine = PhysicsEngine(course_map, config, **kwargs)
        ball = BallPhysics(engine, EventChannel())
        ball.place_ball(*course_map.tile_center(*CENTER_TILE))
        return ball
    return _make


@pytest.fixture
def make_simulator():
    def _make(course_map, physics_config=None, prediction_config=None, terrain_table=None):
        kwargs = {} if terrain_table is None else {"terrain_table": terrain_table}
        return TrajectorySimulator(PhysicsEngine(course_map, physics_config, **kwargs), prediction_config)
    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def run_until_stopped(ball, dt=DT, max_frames=5000):
    """Step a live ball until it rests; returns the number of frames used."""
    for frame in range(max_frames):
        if ball.is_stopped():
            return frame
        ball.update(dt)
    raise AssertionError("ball did not come to rest")


@pytest.fixture
def run_ball():
    return run_until_stopped
