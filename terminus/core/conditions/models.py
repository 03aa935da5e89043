"""접근 조건 도메인 모델

노드/선택지/콘텐츠 변형에 붙는 조건. 모든 그룹은 AND로 결합되며
없는 그룹(None)은 항상 통과한다. OR는 없다. 분기는 그래프 간선으로 표현한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

from terminus.core.keys import normalize_keys
from terminus.core.state.models import MysteryValue, RelationshipStatus

if TYPE_CHECKING:
    from terminus.core.graph.models import ConditionalChoice


@dataclass(frozen=True)
class Range:
    """min/max 포함 범위. 둘 다 None이면 항상 통과."""

    min: Optional[float] = None
    max: Optional[float] = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    @classmethod
    def from_value(cls, raw: Any) -> "Range":
        if isinstance(raw, Range):
            return raw
        if not isinstance(raw, Mapping):
            raise TypeError(f"range must be a mapping, got {type(raw).__name__}")
        bounds = (raw.get("min"), raw.get("max"))
        for bound in bounds:
            if bound is not None and (
                isinstance(bound, bool) or not isinstance(bound, (int, float))
            ):
                raise TypeError(f"range bound must be a number, got {bound!r}")
        return cls(min=bounds[0], max=bounds[1])


@dataclass(frozen=True)
class StateCondition:
    """상태 조건 (predicate 그룹의 AND 결합)"""

    # 캐릭터 대상 (character_id 필요)
    trust: Optional[Range] = None
    relationship: Optional[Tuple[RelationshipStatus, ...]] = None
    has_knowledge_flags: Optional[Tuple[str, ...]] = None
    lacks_knowledge_flags: Optional[Tuple[str, ...]] = None

    # 글로벌
    has_global_flags: Optional[Tuple[str, ...]] = None
    lacks_global_flags: Optional[Tuple[str, ...]] = None
    patterns: Optional[Mapping[str, Range]] = field(default=None, hash=False)
    mysteries: Optional[Mapping[str, MysteryValue]] = field(default=None, hash=False)
    required_combos: Optional[Tuple[str, ...]] = None

    @property
    def needs_character(self) -> bool:
        return (
            self.trust is not None
            or self.relationship is not None
            or self.has_knowledge_flags is not None
            or self.lacks_knowledge_flags is not None
        )

    @property
    def is_empty(self) -> bool:
        return not self.needs_character and all(
            g is None
            for g in (
                self.has_global_flags,
                self.lacks_global_flags,
                self.patterns,
                self.mysteries,
                self.required_combos,
            )
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StateCondition":
        """작성 데이터(dict) → StateCondition.

        camelCase/snake_case 모두 허용. 형식이 틀리면 TypeError/ValueError.
        """
        raw = normalize_keys(data)

        def _flags(key: str) -> Optional[Tuple[str, ...]]:
            value = raw.get(key)
            if value is None:
                return None
            if isinstance(value, str):
                raise TypeError(f"{key} must be a list of strings")
            return tuple(str(v) for v in value)

        trust = raw.get("trust")
        relationship = raw.get("relationship")
        patterns = raw.get("patterns")
        mysteries = raw.get("mysteries")

        return cls(
            trust=Range.from_value(trust) if trust is not None else None,
            relationship=(
                tuple(RelationshipStatus(r) for r in relationship)
                if relationship is not None
                else None
            ),
            has_knowledge_flags=_flags("has_knowledge_flags"),
            lacks_knowledge_flags=_flags("lacks_knowledge_flags"),
            has_global_flags=_flags("has_global_flags"),
            lacks_global_flags=_flags("lacks_global_flags"),
            patterns=(
                {str(p): Range.from_value(r) for p, r in patterns.items()}
                if patterns is not None
                else None
            ),
            mysteries=dict(mysteries) if mysteries is not None else None,
            required_combos=_flags("required_combos"),
        )


@dataclass(frozen=True)
class EvaluatedChoice:
    """선택지 평가 결과"""

    choice: ConditionalChoice
    visible: bool
    enabled: bool
    reason: Optional[str] = None  # visible인데 disabled인 이유 (툴팁/디버그)
    locked: bool = False  # 오브 채움 임계값 미달
    lock_reason: Optional[str] = None

    @property
    def selectable(self) -> bool:
        return self.visible and self.enabled and not self.locked
