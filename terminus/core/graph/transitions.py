"""선택지 적용 및 노드 진입

엔진과 도달성 시뮬레이션이 같은 순서로 상태를 바꾸도록 공유하는 순수 함수.
순서: 현재 노드 on_exit → 선택지 consequence → 패턴 +1 → (이동) → 목적지 on_enter
"""

from typing import Optional

from terminus.core.graph.models import ConditionalChoice, DialogueNode
from terminus.core.state.changes import (
    StateChange,
    apply_state_change,
    apply_state_changes,
    record_conversation,
    set_current_position,
)
from terminus.core.state.models import PlayerState

PATTERN_INCREMENT = 1


def apply_choice_effects(
    state: PlayerState,
    node: DialogueNode,
    choice: ConditionalChoice,
    clamp_trust_range: bool = True,
) -> PlayerState:
    """선택지를 고른 결과 상태. 이동 전에 적용된다."""
    result = apply_state_changes(state, node.on_exit, clamp_trust_range)

    if choice.consequence is not None:
        result = apply_state_change(result, choice.consequence, clamp_trust_range)

    # 알 수 없는 패턴은 mutator가 경고 후 무시
    if choice.pattern:
        result = apply_state_change(
            result,
            StateChange(pattern_changes={choice.pattern: PATTERN_INCREMENT}),
            clamp_trust_range,
        )

    return result


def enter_node(
    state: PlayerState,
    node: DialogueNode,
    character_id: Optional[str],
    clamp_trust_range: bool = True,
    record_history: bool = True,
) -> PlayerState:
    """노드 진입: 위치 갱신, 대화 이력 기록, on_enter 적용"""
    result = set_current_position(state, node.node_id, character_id)
    if record_history:
        result = record_conversation(result, character_id, node.node_id)
    return apply_state_changes(result, node.on_enter, clamp_trust_range)
