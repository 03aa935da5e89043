"""상태 조건 평가기

모든 서사 분기가 이 평가기에 의존한다.

실패 정책:
- 개별 predicate: fail-closed. 캐릭터를 찾을 수 없으면 False + 경고 로그
- 선택지 집합: fail-open. 선택지가 있는데 보이는 것이 0개면 전부 노출
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Union

from terminus.core.conditions.models import EvaluatedChoice, StateCondition
from terminus.core.event_bus import EventBus, GameEvent
from terminus.core.event_types import EventTypes
from terminus.core.logging import get_logger
from terminus.core.state.models import CharacterState, PlayerState
from terminus.core.state.patterns import get_orb_fill, is_combo_unlocked, is_valid_pattern

if TYPE_CHECKING:
    from terminus.core.graph.models import ConditionalChoice, DialogueNode

logger = get_logger(__name__)

ConditionLike = Union[StateCondition, Mapping[str, Any], None]


def coerce_condition(condition: ConditionLike) -> Optional[StateCondition]:
    """dict 형태 조건을 StateCondition으로 변환. 형식 오류는 예외 그대로."""
    if condition is None or isinstance(condition, StateCondition):
        return condition
    return StateCondition.from_dict(condition)


def evaluate(
    condition: ConditionLike,
    state: PlayerState,
    character_id: Optional[str] = None,
) -> bool:
    """조건 충족 여부.

    조건 없음 → True. 캐릭터 대상 그룹이 있는데 캐릭터를 못 찾으면 False.
    조건 형식이 깨져 있으면 False (작성 오류, 에러 로그).
    """
    try:
        cond = coerce_condition(condition)
    except (TypeError, ValueError, AttributeError) as exc:
        logger.error("Malformed condition %r: %s", condition, exc)
        return False

    if cond is None:
        return True

    character = state.get_character(character_id)
    if cond.needs_character and character is None:
        logger.warning(
            "Condition requires character '%s' but it was not found", character_id
        )
        return False

    return _first_failure(cond, state, character) is None


def describe_first_failure(
    condition: ConditionLike,
    state: PlayerState,
    character_id: Optional[str] = None,
) -> str:
    """첫 번째로 실패한 predicate를 사람이 읽을 수 있는 문장으로."""
    try:
        cond = coerce_condition(condition)
    except (TypeError, ValueError, AttributeError):
        return "Invalid requirement"

    if cond is None:
        return "Unknown reason"

    character = state.get_character(character_id)
    if cond.needs_character and character is None:
        return "Character unavailable"

    return _first_failure(cond, state, character) or "Requirements not met"


def _first_failure(
    cond: StateCondition,
    state: PlayerState,
    character: Optional[CharacterState],
) -> Optional[str]:
    """그룹 순서대로 검사. 모두 통과하면 None, 아니면 실패 설명."""
    if character is not None:
        if cond.trust is not None and not cond.trust.contains(character.trust):
            if cond.trust.min is not None and character.trust < cond.trust.min:
                return f"Need {cond.trust.min:g} trust (have {character.trust:g})"
            return f"Trust must be at most {cond.trust.max:g} (have {character.trust:g})"

        if cond.relationship is not None:
            if character.relationship_status not in cond.relationship:
                wanted = " or ".join(r.value for r in cond.relationship)
                return f"Need {wanted or 'no'} relationship"

        for flag in cond.has_knowledge_flags or ():
            if flag not in character.knowledge_flags:
                return f"Requires knowing: {flag}"

        for flag in cond.lacks_knowledge_flags or ():
            if flag in character.knowledge_flags:
                return f"Must not know: {flag}"

    for flag in cond.has_global_flags or ():
        if flag not in state.global_flags:
            return f"Missing requirement: {flag}"

    for flag in cond.lacks_global_flags or ():
        if flag in state.global_flags:
            return f"Blocked by: {flag}"

    for pattern, pattern_range in (cond.patterns or {}).items():
        if not is_valid_pattern(pattern):
            logger.warning("Unknown pattern '%s' in condition", pattern)
            return f"Unknown pattern: {pattern}"
        value = state.get_pattern(pattern)
        if not pattern_range.contains(value):
            if pattern_range.min is not None and value < pattern_range.min:
                return f"Need {pattern} {pattern_range.min:g} (have {value:g})"
            return f"{pattern} must be at most {pattern_range.max:g} (have {value:g})"

    for mystery, expected in (cond.mysteries or {}).items():
        if state.mysteries.get(mystery) != expected:
            return f"Mystery {mystery} must be {expected}"

    for combo_id in cond.required_combos or ():
        if not is_combo_unlocked(combo_id, state.patterns):
            return f"Requires combo: {combo_id}"

    return None


# ── 선택지 평가 ──────────────────────────────────────────


def evaluate_choices(
    node: DialogueNode,
    state: PlayerState,
    character_id: Optional[str] = None,
    event_bus: Optional[EventBus] = None,
) -> List[EvaluatedChoice]:
    """노드의 모든 선택지 visible/enabled 판정.

    선택지가 1개 이상인데 보이는 것이 없으면 전부 visible+enabled로 반환한다
    (fail-open). 콘텐츠 QA용으로 ERROR 로그와 이벤트를 남긴다.
    """
    results: List[EvaluatedChoice] = []
    for choice in node.choices:
        visible = evaluate(choice.visible_condition, state, character_id)
        enabled = visible and evaluate(choice.enabled_condition, state, character_id)

        reason: Optional[str] = None
        if visible and not enabled:
            reason = describe_first_failure(
                choice.enabled_condition, state, character_id
            )

        results.append(
            EvaluatedChoice(choice=choice, visible=visible, enabled=enabled, reason=reason)
        )

    if results and not any(r.visible for r in results):
        logger.error(
            "Node %s: all %d choices hidden for character '%s', exposing all choices",
            node.node_id,
            len(results),
            character_id,
        )
        if event_bus is not None:
            event_bus.emit(
                GameEvent(
                    event_type=EventTypes.CHOICES_FAIL_OPEN,
                    data={
                        "node_id": node.node_id,
                        "character_id": character_id,
                        "choice_ids": [r.choice.choice_id for r in results],
                    },
                    source="condition_evaluator",
                )
            )
        return [EvaluatedChoice(choice=r.choice, visible=True, enabled=True) for r in results]

    return results


# ── 오브 채움 잠금 ───────────────────────────────────────


def is_orb_locked(choice: ConditionalChoice, state: PlayerState) -> bool:
    """선택지의 패턴 채움률이 임계값 미만이면 True."""
    requirement = choice.required_orb_fill
    if requirement is None:
        return False
    return get_orb_fill(state.get_pattern(requirement.pattern)) < requirement.threshold


def apply_orb_locks(
    evaluated: List[EvaluatedChoice],
    state: PlayerState,
    event_bus: Optional[EventBus] = None,
    node_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[EvaluatedChoice]:
    """visible+enabled 선택지에 오브 잠금 표시.

    전부 잠겼으면 임계값이 가장 낮은 것 하나를 풀어준다 (mercy unlock).
    동률이면 무작위로 고른다 (rng 미지정 시 시드 없는 전역 random).
    """
    results: List[EvaluatedChoice] = []
    for item in evaluated:
        if item.visible and item.enabled and is_orb_locked(item.choice, state):
            requirement = item.choice.required_orb_fill
            fill = get_orb_fill(state.get_pattern(requirement.pattern))
            item = replace(
                item,
                locked=True,
                lock_reason=(
                    f"Requires {requirement.pattern} orb at "
                    f"{requirement.threshold:g}% (have {fill}%)"
                ),
            )
        results.append(item)

    candidates = [r for r in results if r.visible and r.enabled]
    if not candidates or not all(r.locked for r in candidates):
        return results

    easiest = min(c.choice.required_orb_fill.threshold for c in candidates)
    tied = [c for c in candidates if c.choice.required_orb_fill.threshold == easiest]
    chosen = (rng or random).choice(tied)

    logger.info(
        "Mercy unlock on node %s: %s (threshold %g)",
        node_id,
        chosen.choice.choice_id,
        easiest,
    )
    if event_bus is not None:
        event_bus.emit(
            GameEvent(
                event_type=EventTypes.MERCY_UNLOCK,
                data={"node_id": node_id, "choice_id": chosen.choice.choice_id},
                source="condition_evaluator",
            )
        )

    return [
        replace(r, locked=False, lock_reason=None) if r is chosen else r
        for r in results
    ]
