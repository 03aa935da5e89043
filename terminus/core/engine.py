"""
Terminus Narrative Engine
=========================
대화 그래프 세션 진행 통합 모듈

조건 평가, 콘텐츠 선택, 선택지 정렬, 상태 전이를 묶어
UI 계층이 호출할 한 세션 단위의 진행 흐름을 제공한다.
엔진 자신은 PlayerState를 보관하지 않는다. 호출자가 스냅샷을 넘기고 새 스냅샷을 받는다.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from terminus.config import settings
from terminus.core.conditions.evaluator import (
    apply_orb_locks,
    evaluate_choices,
    is_orb_locked,
)
from terminus.core.conditions.models import EvaluatedChoice
from terminus.core.event_bus import EventBus, GameEvent
from terminus.core.event_types import EventTypes
from terminus.core.graph.models import (
    ConditionalChoice,
    DialogueContent,
    DialogueGraph,
    DialogueNode,
)
from terminus.core.graph.navigator import (
    NarrativeSession,
    select_content,
    select_content_for_session,
)
from terminus.core.graph.reachability import find_node
from terminus.core.graph.transitions import apply_choice_effects, enter_node
from terminus.core.logging import get_logger
from terminus.core.ordering.display_order import order_choices_for_display
from terminus.core.state.models import PlayerState

logger = get_logger(__name__)


@dataclass
class ChoicePresentation:
    """현재 노드 표시 데이터"""

    node: DialogueNode
    character_id: Optional[str]
    content: DialogueContent
    choices: List[EvaluatedChoice] = field(default_factory=list)


@dataclass
class ChoiceResult:
    """선택 결과. 실패해도 state는 항상 유효한 스냅샷."""

    success: bool
    message: str
    state: PlayerState
    choice: Optional[ConditionalChoice] = None
    node: Optional[DialogueNode] = None


class NarrativeEngine:
    """
    대화 그래프 진행 엔진

    graphs는 캐릭터 ID → DialogueGraph. 노드 ID는 전체 그래프에서 유일하다고 가정한다.
    """

    def __init__(
        self,
        graphs: Mapping[str, DialogueGraph],
        event_bus: Optional[EventBus] = None,
        clamp_trust_range: bool = settings.CLAMP_TRUST,
        order_variant: str = settings.DEFAULT_ORDER_VARIANT,
    ):
        self.graphs = dict(graphs)
        self.event_bus = event_bus
        self.clamp_trust_range = clamp_trust_range
        self.order_variant = order_variant
        logger.info("Narrative engine ready. %d graphs loaded.", len(self.graphs))

    # === 위치 ===

    def locate(self, node_id: Optional[str]) -> Optional[Tuple[DialogueNode, str]]:
        """노드 ID → (노드, 평가 대상 캐릭터)"""
        if not node_id:
            return None
        return find_node(self.graphs, node_id)

    def current_node(self, state: PlayerState) -> Optional[DialogueNode]:
        found = self.locate(state.current_node_id)
        return found[0] if found else None

    def start(self, state: PlayerState, character_id: str) -> PlayerState:
        """캐릭터 그래프의 시작 노드로 진입"""
        graph = self.graphs.get(character_id)
        if graph is None:
            logger.error("No dialogue graph for character '%s'", character_id)
            return state

        node = graph.get_node(graph.start_node_id)
        if node is None:
            logger.error(
                "Start node %s not found for character '%s'",
                graph.start_node_id,
                character_id,
            )
            self._emit_broken_reference(None, graph.start_node_id)
            return state

        return self._enter(state, node, graph.character_for(node) or character_id)

    # === 표시 ===

    def present_choices(
        self,
        state: PlayerState,
        session: Optional[NarrativeSession] = None,
        seed: Optional[str] = None,
    ) -> Optional[ChoicePresentation]:
        """현재 노드의 콘텐츠와 표시할 선택지 (평가 → 오브 잠금 → 정렬)

        seed 기본값은 "player_id:node_id" 이므로 같은 플레이어가 같은 노드를 다시 열면
        같은 순서가 나온다.
        """
        found = self.locate(state.current_node_id)
        if found is None:
            logger.error("Current node %s not found", state.current_node_id)
            return None
        node, character_id = found

        evaluated = evaluate_choices(node, state, character_id, self.event_bus)
        evaluated = apply_orb_locks(evaluated, state, self.event_bus, node.node_id)
        visible = [e for e in evaluated if e.visible]

        ordered = order_choices_for_display(
            visible,
            variant=self.order_variant,
            seed=seed if seed is not None else f"{state.player_id}:{node.node_id}",
            state=state,
            character_id=character_id,
        )

        if session is not None:
            content = select_content_for_session(node, session, state, character_id)
        else:
            content = select_content(node, state=state, character_id=character_id)

        return ChoicePresentation(
            node=node, character_id=character_id, content=content, choices=ordered
        )

    # === 선택 ===

    def choose(self, state: PlayerState, choice_id: str) -> ChoiceResult:
        """선택지 적용 후 목적지 노드로 이동.

        consequence는 이동 전에 적용된다. 선택 불가하거나 목적지가 없으면
        원래 state를 그대로 돌려준다.
        """
        found = self.locate(state.current_node_id)
        if found is None:
            return ChoiceResult(False, "Current node not found", state)
        node, character_id = found

        choice = next((c for c in node.choices if c.choice_id == choice_id), None)
        if choice is None:
            logger.warning("Choice %s not found on node %s", choice_id, node.node_id)
            return ChoiceResult(False, f"Unknown choice: {choice_id}", state, node=node)

        evaluated = evaluate_choices(node, state, character_id)
        target = next(e for e in evaluated if e.choice.choice_id == choice_id)
        if not (target.visible and target.enabled):
            return ChoiceResult(
                False, target.reason or "Choice unavailable", state, choice, node
            )
        if not self._passes_orb_lock(evaluated, state, choice_id):
            return ChoiceResult(False, "Choice is orb-locked", state, choice, node)

        destination = self.locate(choice.next_node_id)
        if destination is None:
            logger.warning(
                "Choice %s points to non-existent node: %s",
                choice_id,
                choice.next_node_id,
            )
            self._emit_broken_reference(choice_id, choice.next_node_id)
            return ChoiceResult(False, "Destination not found", state, choice, node)

        next_state = apply_choice_effects(state, node, choice, self.clamp_trust_range)

        if self.event_bus is not None:
            self.event_bus.emit(
                GameEvent(
                    event_type=EventTypes.CHOICE_MADE,
                    data={
                        "node_id": node.node_id,
                        "choice_id": choice_id,
                        "pattern": choice.pattern,
                        "character_id": character_id,
                    },
                    source="narrative_engine",
                )
            )

        dest_node, dest_character = destination
        next_state = self._enter(next_state, dest_node, dest_character)
        return ChoiceResult(True, "OK", next_state, choice, dest_node)

    # === 내부 ===

    def _passes_orb_lock(
        self, evaluated: List[EvaluatedChoice], state: PlayerState, choice_id: str
    ) -> bool:
        """잠기지 않았거나, 전부 잠긴 상태에서 임계값이 가장 낮은 선택지면 통과"""
        candidates = [e.choice for e in evaluated if e.visible and e.enabled]
        target = next(c for c in candidates if c.choice_id == choice_id)
        if not is_orb_locked(target, state):
            return True
        if any(not is_orb_locked(c, state) for c in candidates):
            return False
        easiest = min(c.required_orb_fill.threshold for c in candidates)
        return target.required_orb_fill.threshold == easiest

    def _enter(
        self, state: PlayerState, node: DialogueNode, character_id: Optional[str]
    ) -> PlayerState:
        next_state = enter_node(state, node, character_id, self.clamp_trust_range)
        if self.event_bus is not None:
            self.event_bus.emit(
                GameEvent(
                    event_type=EventTypes.NODE_ENTERED,
                    data={"node_id": node.node_id, "character_id": character_id},
                    source="narrative_engine",
                )
            )
        logger.debug("Entered node %s (%s)", node.node_id, character_id)
        return next_state

    def _emit_broken_reference(self, choice_id: Optional[str], node_id: str) -> None:
        if self.event_bus is None:
            return
        self.event_bus.emit(
            GameEvent(
                event_type=EventTypes.BROKEN_REFERENCE,
                data={"choice_id": choice_id, "node_id": node_id},
                source="narrative_engine",
            )
        )
