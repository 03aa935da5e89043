"""선택지 표시 순서

작성 순서 편향을 깨기 위한 결정적 셔플과 서사 중력 가중치를 조합한다.
모든 variant는 순수 함수다: 같은 입력이면 항상 같은 출력.

variant:
- deterministic_shuffle: 안정 키로 정규화 후 시드 셔플
- gravity_strict: 중력 가중치 내림차순, 동률은 안정 키 오름차순
- gravity_bucket_shuffle (기본): 가중치 버킷 내림차순, 버킷 내부는 시드 셔플
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence, TypeVar, Union

from terminus.config import settings
from terminus.core.conditions.models import EvaluatedChoice
from terminus.core.graph.models import ConditionalChoice
from terminus.core.logging import get_logger
from terminus.core.ordering.gravity import calculate_gravity
from terminus.core.ordering.prng import seeded_shuffle
from terminus.core.state.models import PlayerState

logger = get_logger(__name__)

ChoiceT = TypeVar("ChoiceT", ConditionalChoice, EvaluatedChoice)


class OrderVariant(str, Enum):
    DETERMINISTIC_SHUFFLE = "deterministic_shuffle"
    GRAVITY_STRICT = "gravity_strict"
    GRAVITY_BUCKET_SHUFFLE = "gravity_bucket_shuffle"


DEFAULT_VARIANT = OrderVariant.GRAVITY_BUCKET_SHUFFLE


def _unwrap(item: Union[ConditionalChoice, EvaluatedChoice]) -> ConditionalChoice:
    if isinstance(item, EvaluatedChoice):
        return item.choice
    return item


def stable_key(item: Union[ConditionalChoice, EvaluatedChoice]) -> str:
    """입력 순서와 무관한 정렬 키. choice_id, 없으면 표시 텍스트."""
    choice = _unwrap(item)
    return choice.choice_id or choice.text


def _weight(
    item: Union[ConditionalChoice, EvaluatedChoice],
    state: Optional[PlayerState],
    character_id: Optional[str],
) -> float:
    if state is None:
        return 1.0
    return calculate_gravity(_unwrap(item).pattern, state, character_id).weight


def _resolve_variant(variant: Union[OrderVariant, str, None]) -> OrderVariant:
    if variant is None:
        variant = settings.DEFAULT_ORDER_VARIANT
    try:
        return OrderVariant(variant)
    except ValueError:
        logger.warning(
            "Unknown order variant '%s', falling back to %s",
            variant,
            DEFAULT_VARIANT.value,
        )
        return DEFAULT_VARIANT


def order_choices_for_display(
    choices: Sequence[ChoiceT],
    variant: Union[OrderVariant, str, None] = None,
    seed: str = "",
    state: Optional[PlayerState] = None,
    character_id: Optional[str] = None,
) -> List[ChoiceT]:
    """선택지 표시 순서 결정 (입력 시퀀스는 변경하지 않음).

    state가 없으면 모든 가중치가 1.0이 되어
    gravity variant들도 안정 키 순서/단일 버킷 셔플로 수렴한다.
    """
    resolved = _resolve_variant(variant)
    canonical = sorted(choices, key=stable_key)

    if resolved is OrderVariant.DETERMINISTIC_SHUFFLE:
        return seeded_shuffle(canonical, seed)

    weights = {id(c): _weight(c, state, character_id) for c in canonical}

    if resolved is OrderVariant.GRAVITY_STRICT:
        # canonical이 이미 안정 키 순이므로 안정 정렬로 동률 처리됨
        return sorted(canonical, key=lambda c: weights[id(c)], reverse=True)

    buckets: Dict[float, List[ChoiceT]] = {}
    for choice in canonical:
        buckets.setdefault(round(weights[id(choice)], 2), []).append(choice)

    ordered: List[ChoiceT] = []
    for weight in sorted(buckets, reverse=True):
        ordered.extend(seeded_shuffle(buckets[weight], f"{seed}:{weight}"))
    return ordered
