"""상태 변경 적용 (State Mutator)

선택지/노드가 선언한 StateChange를 PlayerState에 적용해 새 스냅샷을 만든다.
전부 순수 함수. 입력 스냅샷은 절대 변경하지 않는다.
건드린 하위 컬렉션만 새로 만들고 나머지는 이전 스냅샷과 참조를 공유한다.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from terminus.core.keys import normalize_keys
from terminus.core.logging import get_logger
from terminus.core.state.models import (
    MAX_TRUST,
    MIN_TRUST,
    CharacterState,
    MysteryValue,
    NervousSystemState,
    PlayerState,
    RelationshipStatus,
)
from terminus.core.state.patterns import is_valid_pattern

logger = get_logger(__name__)


@dataclass(frozen=True)
class StateChange:
    """선언적 상태 변경. 모든 변경은 명시적으로 적어야 한다."""

    # 캐릭터 대상 (character_id 필요)
    character_id: Optional[str] = None
    trust_change: Optional[float] = None
    set_relationship_status: Optional[RelationshipStatus] = None
    add_knowledge_flags: Tuple[str, ...] = ()
    remove_knowledge_flags: Tuple[str, ...] = ()
    set_nervous_system_state: Optional[NervousSystemState] = None

    # 글로벌
    add_global_flags: Tuple[str, ...] = ()
    remove_global_flags: Tuple[str, ...] = ()
    pattern_changes: Mapping[str, float] = field(default_factory=dict, hash=False)
    set_mysteries: Mapping[str, MysteryValue] = field(default_factory=dict, hash=False)

    @property
    def touches_character(self) -> bool:
        return (
            self.trust_change is not None
            or self.set_relationship_status is not None
            or bool(self.add_knowledge_flags)
            or bool(self.remove_knowledge_flags)
            or self.set_nervous_system_state is not None
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StateChange":
        """작성 데이터(dict) → StateChange. camelCase/snake_case 모두 허용."""
        raw = normalize_keys(data)
        status = raw.get("set_relationship_status")
        nervous = raw.get("set_nervous_system_state")
        return cls(
            character_id=raw.get("character_id"),
            trust_change=raw.get("trust_change"),
            set_relationship_status=RelationshipStatus(status) if status else None,
            add_knowledge_flags=tuple(raw.get("add_knowledge_flags") or ()),
            remove_knowledge_flags=tuple(raw.get("remove_knowledge_flags") or ()),
            set_nervous_system_state=NervousSystemState(nervous) if nervous else None,
            add_global_flags=tuple(raw.get("add_global_flags") or ()),
            remove_global_flags=tuple(raw.get("remove_global_flags") or ()),
            pattern_changes=dict(raw.get("pattern_changes") or {}),
            set_mysteries=dict(raw.get("set_mysteries") or {}),
        )


def clamp_trust(value: float) -> float:
    """MIN_TRUST ~ MAX_TRUST 클램프."""
    return max(MIN_TRUST, min(MAX_TRUST, value))


def apply_state_change(
    state: PlayerState,
    change: StateChange,
    clamp_trust_range: bool = True,
) -> PlayerState:
    """변경 1건 적용 → 새 PlayerState.

    캐릭터를 찾지 못하면 캐릭터 부분만 건너뛰고 글로벌/패턴 변경은 적용한다.
    clamp_trust_range=True면 trust를 0 ~ 10으로 클램프한다.
    """
    updates: Dict[str, Any] = {}

    if change.add_global_flags or change.remove_global_flags:
        flags = set(state.global_flags)
        flags.update(change.add_global_flags)
        flags.difference_update(change.remove_global_flags)
        updates["global_flags"] = frozenset(flags)

    if change.pattern_changes:
        patterns = dict(state.patterns)
        for pattern, delta in change.pattern_changes.items():
            if not is_valid_pattern(pattern):
                logger.warning("Unknown pattern '%s' in state change, ignored", pattern)
                continue
            if delta is None:
                continue
            patterns[pattern] = patterns.get(pattern, 0) + delta
        updates["patterns"] = patterns

    if change.set_mysteries:
        mysteries = dict(state.mysteries)
        mysteries.update(change.set_mysteries)
        updates["mysteries"] = mysteries

    if change.touches_character:
        character = state.get_character(change.character_id)
        if character is None:
            logger.error(
                "Character '%s' not found in state, character changes skipped",
                change.character_id,
            )
        else:
            characters = dict(state.characters)
            characters[character.character_id] = _apply_character_change(
                character, change, clamp_trust_range
            )
            updates["characters"] = characters

    return replace(state, **updates)


def _apply_character_change(
    character: CharacterState,
    change: StateChange,
    clamp_trust_range: bool,
) -> CharacterState:
    updates: Dict[str, Any] = {}

    if change.trust_change is not None:
        trust = character.trust + change.trust_change
        updates["trust"] = clamp_trust(trust) if clamp_trust_range else trust

    # 관계 상태는 자동 전이 없음. 명시적으로만 설정
    if change.set_relationship_status is not None:
        updates["relationship_status"] = RelationshipStatus(change.set_relationship_status)

    if change.add_knowledge_flags or change.remove_knowledge_flags:
        flags = set(character.knowledge_flags)
        flags.update(change.add_knowledge_flags)
        flags.difference_update(change.remove_knowledge_flags)
        updates["knowledge_flags"] = frozenset(flags)

    if change.set_nervous_system_state is not None:
        updates["nervous_system_state"] = NervousSystemState(
            change.set_nervous_system_state
        )

    return replace(character, **updates)


def apply_state_changes(
    state: PlayerState,
    changes: Iterable[StateChange],
    clamp_trust_range: bool = True,
) -> PlayerState:
    """변경 목록을 순서대로 적용"""
    result = state
    for change in changes:
        result = apply_state_change(result, change, clamp_trust_range)
    return result


def record_conversation(
    state: PlayerState, character_id: Optional[str], node_id: str
) -> PlayerState:
    """캐릭터 대화 이력에 노드 ID 추가 (append-only)"""
    character = state.get_character(character_id)
    if character is None:
        logger.debug("No character '%s' to record node %s", character_id, node_id)
        return state
    characters = dict(state.characters)
    characters[character.character_id] = replace(
        character,
        conversation_history=character.conversation_history + (node_id,),
    )
    return replace(state, characters=characters)


def cross_session_boundary(state: PlayerState) -> PlayerState:
    return replace(state, session_boundaries_crossed=state.session_boundaries_crossed + 1)


def set_current_position(
    state: PlayerState, node_id: str, character_id: Optional[str] = None
) -> PlayerState:
    """현재 노드(및 대화 상대) 갱신"""
    if character_id is None:
        return replace(state, current_node_id=node_id)
    return replace(state, current_node_id=node_id, current_character_id=character_id)
