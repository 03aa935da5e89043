"""Terminus Narrative Core

순수 도메인 계층: 상태 모델, 조건 평가, 그래프 탐색, 선택지 정렬, 시뮬레이션 접근.
I/O 없음. 저장은 services 계층이 담당한다.
"""

from terminus.core.engine import ChoicePresentation, ChoiceResult, NarrativeEngine
from terminus.core.event_bus import EventBus, GameEvent
from terminus.core.event_types import EventTypes

__all__ = [
    "ChoicePresentation",
    "ChoiceResult",
    "NarrativeEngine",
    "EventBus",
    "GameEvent",
    "EventTypes",
]
