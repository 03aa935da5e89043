"""조건 평가 Core 패키지"""

from terminus.core.conditions.models import (
    EvaluatedChoice,
    Range,
    StateCondition,
)
from terminus.core.conditions.evaluator import (
    apply_orb_locks,
    coerce_condition,
    describe_first_failure,
    evaluate,
    evaluate_choices,
    is_orb_locked,
)

__all__ = [
    "EvaluatedChoice",
    "Range",
    "StateCondition",
    "apply_orb_locks",
    "coerce_condition",
    "describe_first_failure",
    "evaluate",
    "evaluate_choices",
    "is_orb_locked",
]
