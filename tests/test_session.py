import numpy as np
import pytest

from minigolf.clubs import CLUBS, PlayerHitParams
from minigolf.course_map import CourseMap, TileCoord
from minigolf.events import GameEvent
from minigolf.session import GolfSession, HoleData, ScorecardRow
from minigolf.shot import TEE_ONLY_REASON
from minigolf.terrain import TerrainClass

from conftest import DT

DRIVER_INDEX = 0
PUTTER_INDEX = 4
EXACT_HIT = PlayerHitParams(0.0, 0.0, 0.0)


def hole(index, tee, flag, par=3):
    return HoleData(index, par, TileCoord(*tee), TileCoord(*flag))


def play_until_rest(session, max_frames=5000):
    for _ in range(max_frames):
        if session.ball.is_stopped() or session.finished:
            return
        session.update(DT)
    raise AssertionError("ball did not come to rest")


def tap_in(session):
    """Shortest putt the drag input allows, from a ball already resting on the flag."""
    assert session.select_club(PUTTER_INDEX)
    assert session.take_drag_shot(0.0, 10.0) is not None
    play_until_rest(session)


@pytest.fixture
def tee_map():
    course_map = CourseMap.filled(TerrainClass.FAIRWAY)
    course_map.set_terrain(16, 16, TerrainClass.TEE)
    return course_map


@pytest.fixture
def green_map():
    return CourseMap.filled(TerrainClass.GREEN)


class TestClubs:
    """Club selection and the tee-only rule"""

    def test_starts_with_iron_on_the_tee(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        assert session.current_club.id == "iron"
        assert session.is_on_tee()
        assert session.ball.ground_position() == tee_map.tile_center(16, 16)

    def test_driver_on_the_tee(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        assert session.select_club(DRIVER_INDEX)
        assert session.current_club.id == "driver"

    def test_driver_refused_on_the_fairway(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        reasons = []
        session.events.subscribe(GameEvent.CLUB_RESTRICTED, reasons.append)
        session.ball.place_ball(*tee_map.tile_center(10, 12))

        assert not session.select_club(DRIVER_INDEX)
        assert session.current_club.id == "iron"
        assert reasons == [TEE_ONLY_REASON]

    def test_driver_shot_refused_after_leaving_the_tee(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))], rng=np.random.default_rng(3))
        assert session.select_club(DRIVER_INDEX)
        session.ball.place_ball(*tee_map.tile_center(10, 12))

        assert session.take_shot(tee_map.tile_center(5, 5)) is None
        assert session.ball.stroke_count() == 0

    def test_cycle_wraps(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        assert session.select_club(PUTTER_INDEX)
        assert session.cycle_club(1)
        assert session.club_index == DRIVER_INDEX
        assert session.cycle_club(-1)
        assert session.club_index == len(CLUBS) - 1

    def test_unknown_club_index(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        assert not session.select_club(len(CLUBS))

    def test_spin(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        session.set_spin(-1)
        assert session.spin_direction == -1
        with pytest.raises(ValueError):
            session.set_spin(2)


class TestShots:
    """Aim preview and struck shots"""

    def test_preview_leaves_the_ball_alone(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        before = session.ball.state.copy()
        start = session.ball.ground_position()

        preview = session.preview((start[0] + 200.0, start[1]))

        assert session.ball.state == before
        assert preview.direction == 0.0
        assert 80.0 <= preview.power <= 400.0
        assert 0.0 <= preview.power_fraction <= 1.0
        assert preview.trajectory.points

    def test_no_preview_for_a_club_the_lie_forbids(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        assert session.select_club(DRIVER_INDEX)
        session.ball.place_ball(*tee_map.tile_center(10, 12))
        assert not session.is_on_tee()

        start = session.ball.ground_position()
        assert session.preview((start[0] + 200.0, start[1])) is None

    def test_aim_point_on_the_ball_is_ignored(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))], rng=np.random.default_rng(3))
        x, y = session.ball.ground_position()
        assert session.preview((x + 5.0, y)) is None
        assert session.take_shot((x, y)) is None
        assert session.ball.stroke_count() == 0
        assert session.preview((x + 10.0, y)) is not None

    def test_shot_counts_a_stroke(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))], rng=np.random.default_rng(3))
        start = session.ball.ground_position()
        launch = session.take_shot((start[0] + 200.0, start[1]))
        assert launch is not None
        assert session.ball.stroke_count() == 1
        assert session.scorecard()[0].strokes == 1
        assert not session.can_shoot()
        assert session.take_shot((start[0] + 200.0, start[1])) is None
        assert session.preview((start[0] + 200.0, start[1])) is None

    def test_water_costs_a_stroke(self, water_ahead_map):
        session = GolfSession(water_ahead_map, [hole(0, (16, 16), (5, 5))], rng=np.random.default_rng(3))
        tee = session.ball.ground_position()
        assert session.take_drag_shot(0.0, 150.0) is not None
        play_until_rest(session)
        assert session.ball.ground_position() == tee
        assert session.scorecard()[0].strokes == 2
        assert not session.finished

    def test_too_weak_drag(self, tee_map):
        session = GolfSession(tee_map, [hole(0, (16, 16), (5, 5))])
        assert session.select_club(PUTTER_INDEX)
        assert session.take_drag_shot(0.0, 1.0) is None
        assert session.ball.stroke_count() == 0


class TestScoring:
    """Hole and course completion"""

    def test_hole_completes_when_the_ball_stops_by_the_flag(self, green_map):
        session = GolfSession(
            green_map, [hole(0, (16, 16), (16, 16), par=2), hole(1, (8, 8), (20, 20))],
            hit_params=EXACT_HIT
        )
        completed = []
        session.events.subscribe(GameEvent.HOLE_COMPLETE, lambda *args: completed.append(args))

        tap_in(session)

        assert completed == [(0, 1, 2)]
        assert session.current_hole_index == 1
        assert session.ball.ground_position() == green_map.tile_center(8, 8)
        assert session.ball.stroke_count() == 0
        assert session.scorecard()[0] == ScorecardRow(0, 2, 1)
        assert session.scorecard()[0].score_label == "-1"

    def test_resting_on_the_flag_before_a_stroke_is_not_a_hole(self, green_map):
        session = GolfSession(green_map, [hole(0, (16, 16), (16, 16))])
        session.events.emit(GameEvent.BALL_STOPPED)
        assert session.current_hole_index == 0
        assert not session.finished

    def test_course_completes_after_the_last_hole(self, green_map):
        session = GolfSession(
            green_map, [hole(0, (10, 10), (10, 10), par=2), hole(1, (20, 20), (20, 20), par=2)],
            hit_params=EXACT_HIT
        )
        totals = []
        session.events.subscribe(GameEvent.COURSE_COMPLETE, lambda *args: totals.append(args))

        tap_in(session)
        tap_in(session)

        assert session.finished
        assert totals == [(2, 4)]
        assert [row.strokes for row in session.scorecard()] == [1, 1]
        assert session.total_strokes() == 2
        assert session.total_par() == 4
        assert not session.can_shoot()

    def test_score_labels(self):
        assert ScorecardRow(0, 3, 3).score_label == "E"
        assert ScorecardRow(0, 3, 5).score_label == "+2"
        assert ScorecardRow(0, 3, 2).score_label == "-1"

    def test_needs_holes(self, green_map):
        with pytest.raises(ValueError):
            GolfSession(green_map, [])
