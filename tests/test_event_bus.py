"""EventBus 테스트"""

from terminus.core.event_bus import MAX_DEPTH, EventBus, GameEvent
from terminus.core.event_types import EventTypes


def _event(event_type: str = EventTypes.NODE_ENTERED, source: str = "narrative_engine", **data):
    return GameEvent(event_type=event_type, data=data, source=source)


class TestSubscribeEmit:
    def test_basic_emit(self, bus):
        received = []
        bus.subscribe(EventTypes.NODE_ENTERED, received.append)
        bus.emit(_event(node_id="maya_intro"))
        assert len(received) == 1
        assert received[0].data["node_id"] == "maya_intro"

    def test_handlers_called_in_order(self, bus):
        results = []
        bus.subscribe(EventTypes.GAME_SAVED, lambda e: results.append("qa"))
        bus.subscribe(EventTypes.GAME_SAVED, lambda e: results.append("ui"))
        bus.emit(_event(EventTypes.GAME_SAVED, source="persistence"))
        assert results == ["qa", "ui"]

    def test_other_event_types_ignored(self, bus):
        received = []
        bus.subscribe(EventTypes.CHOICE_MADE, received.append)
        bus.emit(_event(EventTypes.NODE_ENTERED))
        assert received == []

    def test_no_handlers(self, bus):
        """구독자 없는 이벤트는 조용히 무시"""
        bus.emit(_event(EventTypes.MERCY_UNLOCK, source="condition_evaluator"))

    def test_unsubscribe(self, bus):
        received = []
        bus.subscribe(EventTypes.NODE_ENTERED, received.append)
        bus.unsubscribe(EventTypes.NODE_ENTERED, received.append)
        bus.emit(_event())
        assert received == []

    def test_unsubscribe_unknown_handler(self, bus):
        bus.subscribe(EventTypes.NODE_ENTERED, lambda e: None)
        bus.unsubscribe(EventTypes.NODE_ENTERED, print)
        assert bus.handler_count == 1


class TestDepthLimit:
    def test_chain_stops_at_max_depth(self, bus):
        calls = []

        def relay(event: GameEvent):
            calls.append(event._depth)
            bus.emit(_event(source=f"relay_{len(calls)}"))

        bus.subscribe(EventTypes.NODE_ENTERED, relay)
        bus.emit(_event(source="origin"))
        assert calls == list(range(MAX_DEPTH))


class TestDuplicatePrevention:
    def test_same_source_blocked_within_chain(self, bus):
        count = 0

        def handler(event: GameEvent):
            nonlocal count
            count += 1
            bus.emit(_event())

        bus.subscribe(EventTypes.NODE_ENTERED, handler)
        bus.emit(_event())
        assert count == 1

    def test_new_top_level_emit_starts_new_chain(self, bus):
        received = []
        bus.subscribe(EventTypes.NODE_ENTERED, received.append)
        bus.emit(_event(node_id="maya_intro"))
        bus.emit(_event(node_id="maya_career"))
        assert [e.data["node_id"] for e in received] == ["maya_intro", "maya_career"]


class TestHandlerError:
    def test_exception_does_not_stop_others(self, bus, caplog):
        results = []

        def broken(event):
            raise ValueError("boom")

        bus.subscribe(EventTypes.SAVE_FAILED, broken)
        bus.subscribe(EventTypes.SAVE_FAILED, lambda e: results.append("ok"))
        bus.emit(_event(EventTypes.SAVE_FAILED, source="persistence"))
        assert results == ["ok"]
        assert "broken" in caplog.text


class TestClear:
    def test_clear_removes_all(self, bus):
        bus.subscribe(EventTypes.GAME_SAVED, lambda e: None)
        bus.subscribe(EventTypes.GAME_LOADED, lambda e: None)
        assert bus.handler_count == 2
        bus.clear()
        assert bus.handler_count == 0
