"""시뮬레이션 접근 평가기

조건 평가기의 형제 모듈. 결과가 bool 하나가 아니라
첫 번째 실패 사유와 그 단계의 진행도(0~1)를 함께 돌려준다.

검사 순서 (고정): trust → 이전 단계 완료 → 패턴 레벨 → 지식 플래그 → 글로벌 플래그
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from terminus.core.logging import get_logger
from terminus.core.state.models import CharacterState, PlayerState
from terminus.core.state.patterns import is_valid_pattern

logger = get_logger(__name__)


class FlagScope(str, Enum):
    GLOBAL = "global"
    KNOWLEDGE = "knowledge"


class AccessDenialReason(str, Enum):
    CHARACTER_UNKNOWN = "character_unknown"
    TRUST = "trust"
    PRIOR_STAGE = "prior_stage"
    PATTERN = "pattern"
    KNOWLEDGE = "knowledge"
    GLOBAL_FLAGS = "global_flags"


@dataclass(frozen=True)
class StageFlag:
    """완료 여부를 나타내는 플래그와 그 저장 위치"""

    flag: str
    scope: FlagScope = FlagScope.GLOBAL


@dataclass(frozen=True)
class SimulationRequirements:
    min_trust: Optional[float] = None
    prior_stage: Optional[StageFlag] = None
    pattern: Optional[str] = None
    min_pattern_level: Optional[float] = None
    required_knowledge_flags: Tuple[str, ...] = ()
    required_global_flags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AccessResult:
    can_access: bool
    progress: float
    reason: Optional[AccessDenialReason] = None
    message: Optional[str] = None


def _ratio(current: float, required: float) -> float:
    if required <= 0:
        return 1.0
    return max(0.0, min(1.0, current / required))


def has_stage_flag(
    stage: StageFlag, state: PlayerState, character: Optional[CharacterState]
) -> bool:
    if stage.scope == FlagScope.KNOWLEDGE:
        return character is not None and stage.flag in character.knowledge_flags
    return stage.flag in state.global_flags


def _deny(reason: AccessDenialReason, message: str, progress: float) -> AccessResult:
    return AccessResult(can_access=False, progress=progress, reason=reason, message=message)


def evaluate_access(
    requirements: SimulationRequirements,
    state: PlayerState,
    character_id: str,
) -> AccessResult:
    """첫 번째 실패 단계에서 멈추고 그 단계의 부분 진행도를 보고한다."""
    character = state.get_character(character_id)
    if character is None:
        logger.warning("Access check for unknown character '%s'", character_id)
        return _deny(
            AccessDenialReason.CHARACTER_UNKNOWN,
            f"Unknown character: {character_id}",
            0.0,
        )

    if requirements.min_trust is not None and character.trust < requirements.min_trust:
        return _deny(
            AccessDenialReason.TRUST,
            f"Need {requirements.min_trust:g} trust (have {character.trust:g})",
            _ratio(character.trust, requirements.min_trust),
        )

    prior = requirements.prior_stage
    if prior is not None and not has_stage_flag(prior, state, character):
        return _deny(
            AccessDenialReason.PRIOR_STAGE,
            f"Complete the previous stage first ({prior.flag})",
            0.0,
        )

    if requirements.pattern is not None and requirements.min_pattern_level is not None:
        if not is_valid_pattern(requirements.pattern):
            logger.warning("Unknown pattern '%s' in access requirements", requirements.pattern)
            return _deny(
                AccessDenialReason.PATTERN,
                f"Unknown pattern: {requirements.pattern}",
                0.0,
            )
        level = state.get_pattern(requirements.pattern)
        if level < requirements.min_pattern_level:
            return _deny(
                AccessDenialReason.PATTERN,
                f"Need {requirements.pattern} {requirements.min_pattern_level:g} "
                f"(have {level:g})",
                _ratio(level, requirements.min_pattern_level),
            )

    required_knowledge = requirements.required_knowledge_flags
    held = [f for f in required_knowledge if f in character.knowledge_flags]
    if len(held) < len(required_knowledge):
        missing = [f for f in required_knowledge if f not in character.knowledge_flags]
        return _deny(
            AccessDenialReason.KNOWLEDGE,
            f"Missing knowledge: {', '.join(missing)}",
            _ratio(len(held), len(required_knowledge)),
        )

    required_global = requirements.required_global_flags
    held = [f for f in required_global if f in state.global_flags]
    if len(held) < len(required_global):
        missing = [f for f in required_global if f not in state.global_flags]
        return _deny(
            AccessDenialReason.GLOBAL_FLAGS,
            f"Missing requirement: {', '.join(missing)}",
            _ratio(len(held), len(required_global)),
        )

    return AccessResult(can_access=True, progress=1.0)
