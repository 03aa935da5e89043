"""서사 중력 (Narrative Gravity)

캐릭터의 신경계 상태에 따라 선택지 패턴별 표시 가중치를 정한다.
선택지를 거르지 않고 순서만 기울인다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from terminus.core.state.models import NervousSystemState, PlayerState

ATTRACT_WEIGHT = 1.5
REPEL_WEIGHT = 0.6
NEUTRAL_WEIGHT = 1.0


class GravityEffect(str, Enum):
    ATTRACT = "attract"
    REPEL = "repel"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class GravityRule:
    attracts: FrozenSet[str]
    repels: FrozenSet[str]


@dataclass(frozen=True)
class GravityResult:
    weight: float
    effect: GravityEffect


GRAVITY_TABLE: Dict[NervousSystemState, GravityRule] = {
    # 안전: 호기심과 만들기 쪽으로 끌린다
    NervousSystemState.VENTRAL_VAGAL: GravityRule(
        attracts=frozenset({"exploring", "building"}),
        repels=frozenset(),
    ),
    # 불안: 구조와 기다림에 끌리고, 떠맡기/탐색 압박은 밀어낸다
    NervousSystemState.SYMPATHETIC: GravityRule(
        attracts=frozenset({"patience", "analytical"}),
        repels=frozenset({"helping", "exploring"}),
    ),
    # 셧다운: 곁에 있어주기에 끌리고, 분석/만들기 요구는 밀어낸다
    NervousSystemState.DORSAL_VAGAL: GravityRule(
        attracts=frozenset({"helping", "patience"}),
        repels=frozenset({"analytical", "building"}),
    ),
}

_NEUTRAL = GravityResult(weight=NEUTRAL_WEIGHT, effect=GravityEffect.NEUTRAL)


def calculate_gravity(
    pattern: Optional[str],
    state: PlayerState,
    character_id: Optional[str],
) -> GravityResult:
    """패턴 × 캐릭터 신경계 상태 → 가중치. 캐릭터/패턴이 없으면 중립."""
    if not pattern:
        return _NEUTRAL

    character = state.get_character(character_id)
    if character is None:
        return _NEUTRAL

    rule = GRAVITY_TABLE.get(character.nervous_system_state)
    if rule is None:
        return _NEUTRAL

    if pattern in rule.attracts:
        return GravityResult(weight=ATTRACT_WEIGHT, effect=GravityEffect.ATTRACT)
    if pattern in rule.repels:
        return GravityResult(weight=REPEL_WEIGHT, effect=GravityEffect.REPEL)
    return _NEUTRAL
