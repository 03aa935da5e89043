"""시뮬레이션 접근 Core 패키지

공개 API:
- 접근 평가: SimulationRequirements, StageFlag, FlagScope, AccessResult,
  AccessDenialReason, evaluate_access
- 레지스트리: SimulationMeta, SIMULATION_REGISTRY, get_simulation_by_id,
  get_simulation_by_character, get_simulations_for_characters, is_simulation_complete
"""

from terminus.core.simulation.access import (
    AccessDenialReason,
    AccessResult,
    FlagScope,
    SimulationRequirements,
    StageFlag,
    evaluate_access,
)
from terminus.core.simulation.registry import (
    SIMULATION_REGISTRY,
    SimulationMeta,
    get_simulation_by_character,
    get_simulation_by_id,
    get_simulations_for_characters,
    is_simulation_complete,
)

__all__ = [
    "AccessDenialReason",
    "AccessResult",
    "FlagScope",
    "SimulationRequirements",
    "StageFlag",
    "evaluate_access",
    "SIMULATION_REGISTRY",
    "SimulationMeta",
    "get_simulation_by_character",
    "get_simulation_by_id",
    "get_simulations_for_characters",
    "is_simulation_complete",
]
