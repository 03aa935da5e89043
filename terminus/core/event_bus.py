"""EventBus - 서사 코어 ↔ 서비스 간 진단/알림 이벤트 통신

규칙:
- 코어 함수는 서비스를 직접 import하지 않는다. 알림은 이벤트로만 전달한다
- 이벤트 data에는 식별자(ID)와 스칼라 값만 담는다 (PlayerState 통째 금지)
- 전파 깊이 최대 MAX_DEPTH 단계
- 한 전파 체인 안에서 동일 source의 동일 이벤트 재발행 금지
- 최상위 emit은 새 체인을 시작한다
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Set

from terminus.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5  # 한 체인 내 이벤트 전파 최대 깊이


@dataclass
class GameEvent:
    """이벤트 데이터 컨테이너

    Args:
        event_type: 이벤트 유형 (예: "choices_fail_open", "game_saved")
        data: 이벤트 데이터 (ID 위주)
        source: 발행한 모듈/서비스 이름
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    # 내부 추적용 (외부에서 설정하지 않음)
    _depth: int = field(default=0, repr=False)


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """동기식 이벤트 버스

    사용 패턴:
        bus = EventBus()
        bus.subscribe("choices_fail_open", qa_log.record)
        bus.emit(GameEvent(event_type="choices_fail_open", data={"node_id": "maya_intro"}, source="evaluator"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._current_depth: int = 0
        self._emitted_in_chain: Set[str] = set()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 등록"""
        self._handlers[event_type].append(handler)
        logger.debug("subscribe %s -> %s", event_type, _handler_name(handler))

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 해제. 미등록 핸들러는 경고만 남긴다."""
        handlers = self._handlers.get(event_type)
        if handlers is None or handler not in handlers:
            logger.warning(
                "unsubscribe: %s is not registered for %s",
                _handler_name(handler),
                event_type,
            )
            return
        handlers.remove(handler)
        logger.debug("unsubscribe %s -> %s", event_type, _handler_name(handler))

    def emit(self, event: GameEvent) -> None:
        """이벤트 발행. 등록된 핸들러를 동기 호출.

        핸들러 예외는 로그만 남기고 전파하지 않는다.
        """
        if self._current_depth == 0:
            self._emitted_in_chain.clear()

        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                "Event chain deeper than %d, dropping %s:%s",
                MAX_DEPTH,
                event.source,
                event.event_type,
            )
            return

        chain_key = f"{event.source}:{event.event_type}"
        if chain_key in self._emitted_in_chain:
            logger.warning("Duplicate event in chain blocked: %s", chain_key)
            return
        self._emitted_in_chain.add(chain_key)
        event._depth = self._current_depth

        handlers = list(self._handlers.get(event.event_type, ()))
        if not handlers:
            return

        logger.debug(
            "emit %s (source=%s, depth=%d, handlers=%d)",
            event.event_type,
            event.source,
            self._current_depth,
            len(handlers),
        )

        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "Event handler %s failed on %s",
                        _handler_name(handler),
                        event.event_type,
                    )
        finally:
            self._current_depth -= 1

    def clear(self) -> None:
        """모든 구독 해제 (테스트용)"""
        self._handlers.clear()
        self._emitted_in_chain.clear()
        self._current_depth = 0

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))
