"""대화 그래프 탐색 및 콘텐츠 선택

현재 위치에서 도달 가능한 노드를 조건으로 걸러내고,
노드에 표시할 콘텐츠 변형을 고른다.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from terminus.config import settings
from terminus.core.conditions.evaluator import evaluate
from terminus.core.graph.models import DialogueContent, DialogueGraph, DialogueNode
from terminus.core.logging import get_logger
from terminus.core.state.models import PlayerState

logger = get_logger(__name__)

MISSING_CONTENT = DialogueContent(text="[Missing content]", variation_id="error")


def get_available_nodes(
    graph: DialogueGraph,
    state: PlayerState,
    from_node_id: Optional[str] = None,
) -> List[DialogueNode]:
    """현재 노드에서 이동 가능한 노드 목록.

    from_node_id가 없으면 시작 노드만 반환.
    존재하지 않는 목적지는 경고 후 건너뛴다. 결과는 priority 내림차순 (안정 정렬).
    """
    if not from_node_id:
        start = graph.get_node(graph.start_node_id)
        if start is None:
            logger.error("Start node %s not found in graph", graph.start_node_id)
            return []
        return [start]

    current = graph.get_node(from_node_id)
    if current is None:
        logger.error("Node %s not found in graph", from_node_id)
        return []

    available: List[DialogueNode] = []
    for choice in current.choices:
        destination = graph.get_node(choice.next_node_id)
        if destination is None:
            logger.warning(
                "Choice %s points to non-existent node: %s",
                choice.choice_id,
                choice.next_node_id,
            )
            continue

        character_id = graph.character_for(destination)
        if evaluate(destination.required_state, state, character_id):
            available.append(destination)

    available.sort(key=lambda n: n.priority, reverse=True)
    return available


def select_content(
    node: DialogueNode,
    previously_shown: Optional[Sequence[str]] = None,
    state: Optional[PlayerState] = None,
    character_id: Optional[str] = None,
) -> DialogueContent:
    """노드 콘텐츠 변형 선택.

    1. state가 주어지면 조건부 변형 중 작성 순서상 처음 충족되는 것
    2. 없으면 무조건 변형 풀로 제한
    3. 최근 노출되지 않은 것 중 무작위
    4. 전부 노출됐으면 풀 전체에서 무작위
    콘텐츠가 비어 있으면 플레이스홀더 반환 (예외 없음).
    """
    if not node.content:
        logger.error("Node %s has no content", node.node_id)
        return MISSING_CONTENT

    if state is not None:
        target = character_id or node.character_id
        for variant in node.content:
            if variant.condition is not None and evaluate(variant.condition, state, target):
                return variant

    pool = [v for v in node.content if v.condition is None]
    if not pool:
        logger.error("Node %s has no unconditioned content variant", node.node_id)
        return MISSING_CONTENT

    if previously_shown:
        unused = [v for v in pool if v.variation_id not in previously_shown]
        if unused:
            return random.choice(unused)

    return random.choice(pool)


@dataclass
class NarrativeSession:
    """세션 단위 콘텐츠 노출 이력

    세션마다 별도 인스턴스를 만든다 (모듈 전역 상태 없음).
    """

    history_limit: int = settings.CONTENT_HISTORY_LIMIT
    shown_variants: Dict[str, List[str]] = field(default_factory=dict)

    def recently_shown(self, node_id: str) -> List[str]:
        return list(self.shown_variants.get(node_id, []))

    def record_shown(self, node_id: str, variation_id: str) -> None:
        history = self.shown_variants.setdefault(node_id, [])
        history.append(variation_id)
        if len(history) > self.history_limit:
            del history[: len(history) - self.history_limit]


def select_content_for_session(
    node: DialogueNode,
    session: NarrativeSession,
    state: Optional[PlayerState] = None,
    character_id: Optional[str] = None,
) -> DialogueContent:
    """select_content + 세션 노출 이력 기록"""
    content = select_content(
        node, session.recently_shown(node.node_id), state, character_id
    )
    if content is not MISSING_CONTENT:
        session.record_shown(node.node_id, content.variation_id)
    return content
