import pytest

from minigolf.events import EventChannel, GameEvent


class TestEventChannel:
    """Listener registry"""

    def test_listeners_run_in_subscription_order(self):
        channel = EventChannel()
        calls = []
        channel.subscribe(GameEvent.HOLE_COMPLETE, lambda *args: calls.append(("a", args)))
        channel.subscribe(GameEvent.HOLE_COMPLETE, lambda *args: calls.append(("b", args)))
        channel.emit(GameEvent.HOLE_COMPLETE, 0, 3, 4)
        assert calls == [("a", (0, 3, 4)), ("b", (0, 3, 4))]

    def test_events_are_separate(self):
        channel = EventChannel()
        calls = []
        channel.subscribe(GameEvent.STROKE_TAKEN, calls.append)
        channel.emit(GameEvent.WATER_HAZARD, 2)
        assert calls == []

    def test_subscribe_twice_registers_once(self):
        channel = EventChannel()
        calls = []
        channel.subscribe(GameEvent.STROKE_TAKEN, calls.append)
        channel.subscribe(GameEvent.STROKE_TAKEN, calls.append)
        channel.emit(GameEvent.STROKE_TAKEN, 1)
        assert calls == [1]

    def test_unsubscribe_handle(self):
        channel = EventChannel()
        calls = []
        unsubscribe = channel.subscribe(GameEvent.BALL_STOPPED, lambda: calls.append("stopped"))
        unsubscribe()
        channel.emit(GameEvent.BALL_STOPPED)
        assert calls == []
        # a second call is harmless
        unsubscribe()

    def test_listener_may_unsubscribe_while_handling(self):
        channel = EventChannel()
        calls = []

        def once(count):
            calls.append(count)
            channel.unsubscribe(GameEvent.STROKE_TAKEN, once)

        channel.subscribe(GameEvent.STROKE_TAKEN, once)
        channel.subscribe(GameEvent.STROKE_TAKEN, calls.append)
        channel.emit(GameEvent.STROKE_TAKEN, 1)
        channel.emit(GameEvent.STROKE_TAKEN, 2)
        assert calls == [1, 1, 2]

    def test_listener_errors_reach_the_emitter(self):
        channel = EventChannel()

        def broken(*_):
            raise RuntimeError("listener failed")

        channel.subscribe(GameEvent.COURSE_COMPLETE, broken)
        with pytest.raises(RuntimeError):
            channel.emit(GameEvent.COURSE_COMPLETE, 10, 9)

