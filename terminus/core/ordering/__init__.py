"""선택지 표시 순서 Core 패키지

공개 API:
- 서사 중력: GravityEffect, GravityResult, GRAVITY_TABLE, calculate_gravity
- 표시 순서: OrderVariant, order_choices_for_display, stable_key
- 결정적 해시/난수: fnv1a_32, mulberry32, seeded_shuffle, hash_sorted_strings
"""

from terminus.core.ordering.gravity import (
    ATTRACT_WEIGHT,
    GRAVITY_TABLE,
    NEUTRAL_WEIGHT,
    REPEL_WEIGHT,
    GravityEffect,
    GravityResult,
    calculate_gravity,
)
from terminus.core.ordering.prng import (
    fnv1a_32,
    hash_sorted_strings,
    mulberry32,
    seeded_shuffle,
)
from terminus.core.ordering.display_order import (
    DEFAULT_VARIANT,
    OrderVariant,
    order_choices_for_display,
    stable_key,
)

__all__ = [
    "ATTRACT_WEIGHT",
    "GRAVITY_TABLE",
    "NEUTRAL_WEIGHT",
    "REPEL_WEIGHT",
    "GravityEffect",
    "GravityResult",
    "calculate_gravity",
    "fnv1a_32",
    "hash_sorted_strings",
    "mulberry32",
    "seeded_shuffle",
    "DEFAULT_VARIANT",
    "OrderVariant",
    "order_choices_for_display",
    "stable_key",
]
