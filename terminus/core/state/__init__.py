"""상태 모델 Core 패키지

PlayerState 스냅샷, 패턴 메타데이터, 순수 상태 변경 함수.
"""

from terminus.core.state.models import (
    CHARACTER_IDS,
    MAX_TRUST,
    MIN_TRUST,
    SAVE_VERSION,
    CharacterState,
    NervousSystemState,
    PlayerState,
    RelationshipStatus,
    create_character_state,
    create_new_player_state,
)
from terminus.core.state.patterns import (
    PATTERN_COMBOS,
    PATTERN_THRESHOLDS,
    PATTERN_TYPES,
    PatternCombo,
    PatternType,
    get_combo_progress,
    get_orb_fill,
    get_unlocked_combos,
    is_combo_unlocked,
)
from terminus.core.state.changes import (
    StateChange,
    apply_state_change,
    apply_state_changes,
    clamp_trust,
    cross_session_boundary,
    record_conversation,
    set_current_position,
)

__all__ = [
    "CHARACTER_IDS",
    "MAX_TRUST",
    "MIN_TRUST",
    "SAVE_VERSION",
    "CharacterState",
    "NervousSystemState",
    "PlayerState",
    "RelationshipStatus",
    "create_character_state",
    "create_new_player_state",
    "PATTERN_COMBOS",
    "PATTERN_THRESHOLDS",
    "PATTERN_TYPES",
    "PatternCombo",
    "PatternType",
    "get_combo_progress",
    "get_orb_fill",
    "get_unlocked_combos",
    "is_combo_unlocked",
    "StateChange",
    "apply_state_change",
    "apply_state_changes",
    "clamp_trust",
    "cross_session_boundary",
    "record_conversation",
    "set_current_position",
]
