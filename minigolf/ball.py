"""Live ball, advanced once per rendered frame."""

import logging
from typing import Optional, Tuple

from .events import EventChannel, GameEvent
from .trajectory_simulator import (
    BallPhase, BallState, Contact, LaunchParameters, PhysicsEngine, RollOutcome
)

logger = logging.getLogger(__name__)


class BallPhysics:
    """
    The ball in play.

    Motion follows `PhysicsEngine`, the same law the predictor uses. A shot is
    only accepted while the ball rests; water or leaving the map costs a
    stroke and puts the ball back where the last shot was played from.
    """

    def __init__(self, engine: PhysicsEngine, events: Optional[EventChannel] = None):
        self.engine = engine
        self.events = events or EventChannel()
        self.state = BallState()

    def place_ball(self, x: float, y: float):
        """Put the ball at rest on a position, clearing motion and spin."""
        state = self.state
        state.x, state.y = x, y
        state.z = 0.0
        state.vx = state.vy = state.vz = 0.0
        state.phase = BallPhase.RESTING
        state.spin_direction = 0
        state.spin_angle = 0.0
        state.bounces = 0
        state.safe_position = (x, y)

    def shoot(self, launch: LaunchParameters) -> bool:
        """
        Strike the ball from where it rests.

        `launch.position` is ignored in favour of the ball's own position.
        Returns False, changing nothing, while the ball is still moving.
        """
        state = self.state
        if state.phase is not BallPhase.RESTING:
            logger.debug("shot ignored: ball is %s", state.phase.value)
            return False

        state.safe_position = state.position
        self.engine.launch(state, LaunchParameters(
            position=state.position,
            direction=launch.direction,
            power=launch.power,
            loft_degrees=launch.loft_degrees,
            spin_direction=launch.spin_direction,
            spin_angle=launch.spin_angle
        ))

        state.strokes += 1
        logger.info(
            "stroke %d: power=%.1f loft=%.1f phase=%s",
            state.strokes, launch.power, launch.loft_degrees, state.phase.value
        )
        self.events.emit(GameEvent.STROKE_TAKEN, state.strokes)
        return True

    def update(self, dt: float):
        """Advance the ball by `dt` seconds."""
        state = self.state
        if state.phase is BallPhase.AIRBORNE:
            contact = self.engine.advance_flight(state, dt)
            if contact is Contact.LANDED and self.engine.hazards.check_hazard(state.x, state.y):
                self.handle_hazard()
        elif state.phase is BallPhase.ROLLING:
            outcome = self.engine.advance_roll(state, dt)
            if outcome is RollOutcome.HAZARD:
                self.handle_hazard()
            elif outcome is RollOutcome.STOPPED:
                logger.debug("ball stopped at (%.1f, %.1f)", state.x, state.y)
                self.events.emit(GameEvent.BALL_STOPPED)

    def handle_hazard(self):
        """Penalty stroke, then back to the position the last shot was played from."""
        state = self.state
        state.strokes += 1
        safe_x, safe_y = state.safe_position
        self.place_ball(safe_x, safe_y)
        logger.info("hazard: ball returned to (%.1f, %.1f), strokes=%d", safe_x, safe_y, state.strokes)
        self.events.emit(GameEvent.WATER_HAZARD, state.strokes)

    def is_stopped(self) -> bool:
        return self.state.phase is BallPhase.RESTING

    def is_in_flight(self) -> bool:
        return self.state.phase is BallPhase.AIRBORNE

    @property
    def phase(self) -> BallPhase:
        return self.state.phase

    def ground_position(self) -> Tuple[float, float]:
        return self.state.position

    def height(self) -> float:
        return self.state.z

    def stroke_count(self) -> int:
        return self.state.strokes

    def reset_stroke_count(self):
        self.state.strokes = 0
