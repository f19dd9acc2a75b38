"""Notifications the physics core and session send to the surrounding game."""

from collections import defaultdict
from enum import Enum
from typing import Callable, DefaultDict, List


class GameEvent(Enum):
    STROKE_TAKEN = "stroke-taken"  # (stroke_count)
    WATER_HAZARD = "water-hazard"  # (stroke_count)
    BALL_STOPPED = "ball-stopped"  # ()
    CLUB_RESTRICTED = "club-restricted"  # (reason)
    HOLE_COMPLETE = "hole-complete"  # (hole_index, strokes, par)
    COURSE_COMPLETE = "course-complete"  # (total_strokes, total_par)


Listener = Callable[..., None]


class EventChannel:
    """
    Listener registry owned by one session.

    Callbacks run synchronously in subscription order. An exception raised by a
    listener propagates to whoever emitted the event.
    """

    def __init__(self):
        self._listeners: DefaultDict[GameEvent, List[Listener]] = defaultdict(list)

    def subscribe(self, event: GameEvent, callback: Listener) -> Callable[[], None]:
        """Register `callback` and return a function that removes it again."""
        listeners = self._listeners[event]
        if callback not in listeners:
            listeners.append(callback)
        return lambda: self.unsubscribe(event, callback)

    def unsubscribe(self, event: GameEvent, callback: Listener):
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: GameEvent, *args):
        for callback in tuple(self._listeners.get(event, ())):
            callback(*args)
