"""플레이어 상태 도메인 모델

세이브 데이터 전체(관계, 플래그, 패턴 누적치)를 표현한다.
DB 무관 순수 데이터 클래스. 모든 스냅샷은 불변이며
변경은 항상 새 인스턴스를 만든다 (state/changes.py).
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple, Union

from terminus.core.state.patterns import PATTERN_TYPES


class RelationshipStatus(str, Enum):
    """관계 상태 3단계"""

    STRANGER = "stranger"
    ACQUAINTANCE = "acquaintance"
    CONFIDANT = "confidant"


class NervousSystemState(str, Enum):
    """캐릭터의 생리적 상태 태그 (서사 중력 계산 전용)"""

    VENTRAL_VAGAL = "ventral_vagal"  # 안전, 사회적 연결
    SYMPATHETIC = "sympathetic"  # 동원, 불안 (투쟁/도피)
    DORSAL_VAGAL = "dorsal_vagal"  # 셧다운, 압도


# --- 상수 ---
MIN_TRUST = 0
MAX_TRUST = 10
DEFAULT_TRUST = 0
DEFAULT_RELATIONSHIP = RelationshipStatus.STRANGER
DEFAULT_NERVOUS_SYSTEM_STATE = NervousSystemState.VENTRAL_VAGAL

SAVE_VERSION = "1.1.0"

DEFAULT_START_NODE_ID = "station_arrival"
DEFAULT_CHARACTER_ID = "samuel"

CHARACTER_IDS: Tuple[str, ...] = (
    "samuel",
    "maya",
    "devon",
    "jordan",
    "marcus",
    "tess",
    "yaquin",
    "kai",
    "alex",
    "rohan",
    "silas",
    "elena",
    "grace",
    "asha",
    "lira",
    "zara",
    "quinn",
    "dante",
    "nadia",
    "isaiah",
)

MysteryValue = Union[str, int]


@dataclass(frozen=True)
class CharacterState:
    """캐릭터 1명과 플레이어의 관계 상태"""

    character_id: str
    trust: float = DEFAULT_TRUST  # 관례상 0 ~ 10
    relationship_status: RelationshipStatus = DEFAULT_RELATIONSHIP
    knowledge_flags: FrozenSet[str] = frozenset()
    conversation_history: Tuple[str, ...] = ()  # 방문한 노드 ID, append-only
    nervous_system_state: NervousSystemState = DEFAULT_NERVOUS_SYSTEM_STATE


@dataclass(frozen=True)
class PlayerState:
    """세이브 데이터 루트 스냅샷

    dict 필드는 관례상 읽기 전용으로 취급한다.
    변경이 필요한 하위 컬렉션만 새로 만들고, 나머지는 이전 스냅샷과 공유한다.
    """

    player_id: str
    save_version: str = SAVE_VERSION
    characters: Dict[str, CharacterState] = field(default_factory=dict)
    global_flags: FrozenSet[str] = frozenset()
    patterns: Dict[str, float] = field(
        default_factory=lambda: {p: 0 for p in PATTERN_TYPES}
    )
    mysteries: Dict[str, MysteryValue] = field(default_factory=dict)
    session_start_time: float = 0.0
    session_boundaries_crossed: int = 0
    current_node_id: str = DEFAULT_START_NODE_ID
    current_character_id: str = DEFAULT_CHARACTER_ID

    def get_character(self, character_id: Optional[str]) -> Optional[CharacterState]:
        """캐릭터 상태 조회. ID가 없거나 미등록이면 None."""
        if not character_id:
            return None
        return self.characters.get(character_id)

    def get_pattern(self, pattern: str) -> float:
        return self.patterns.get(pattern, 0)


def create_character_state(character_id: str) -> CharacterState:
    """초기 캐릭터 상태 생성"""
    return CharacterState(character_id=character_id)


def create_new_player_state(
    player_id: str,
    character_ids: Iterable[str] = CHARACTER_IDS,
    now: Optional[float] = None,
) -> PlayerState:
    """새 게임용 PlayerState 생성"""
    return PlayerState(
        player_id=player_id,
        characters={cid: create_character_state(cid) for cid in character_ids},
        session_start_time=time.time() if now is None else now,
    )
