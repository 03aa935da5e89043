"""패턴 메타데이터 테이블

5종 의사결정 패턴의 라벨, 해금 임계값, 오브 채움 구간, 콤보 정의.
조건 평가기와 서사 중력 계산이 읽기 전용으로 참조한다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Tuple


class PatternType(str, Enum):
    """의사결정 패턴 5종"""

    ANALYTICAL = "analytical"
    PATIENCE = "patience"
    EXPLORING = "exploring"
    HELPING = "helping"
    BUILDING = "building"


PATTERN_TYPES: Tuple[str, ...] = tuple(p.value for p in PatternType)

PATTERN_METADATA: Dict[str, Dict[str, str]] = {
    "analytical": {"label": "Analytical", "description": "Logic-based, data-driven choices"},
    "patience": {"label": "Patience", "description": "Thoughtful, long-term choices"},
    "exploring": {"label": "Exploring", "description": "Curious, discovery-oriented choices"},
    "helping": {"label": "Helping", "description": "People-focused, supportive choices"},
    "building": {"label": "Building", "description": "Creative, hands-on choices"},
}

# 패턴 수준 임계값 (누적치 기준)
PATTERN_THRESHOLDS: Dict[str, int] = {
    "EMERGING": 3,
    "DEVELOPING": 6,
    "FLOURISHING": 9,
}

# 오브 채움률 (0 ~ 100)
ORB_FILL_MAX = 100

ORB_FILL_TIERS: Dict[str, Tuple[int, int]] = {
    "nascent": (0, 24),
    "emerging": (25, 49),
    "developing": (50, 74),
    "flourishing": (75, 99),
    "mastered": (100, 100),
}


def is_valid_pattern(pattern: str) -> bool:
    return pattern in PATTERN_TYPES


def get_orb_fill(value: float) -> int:
    """패턴 누적치 → 표시용 채움률. 0 ~ 100 클램프."""
    return max(0, min(ORB_FILL_MAX, round(value)))


def get_orb_fill_tier(fill_percent: float) -> str:
    if fill_percent >= 100:
        return "mastered"
    if fill_percent >= 75:
        return "flourishing"
    if fill_percent >= 50:
        return "developing"
    if fill_percent >= 25:
        return "emerging"
    return "nascent"


def get_pattern_level_label(value: float) -> str:
    """누적치 → 수준 라벨 (dormant/emerging/developing/flourishing)"""
    if value >= PATTERN_THRESHOLDS["FLOURISHING"]:
        return "flourishing"
    if value >= PATTERN_THRESHOLDS["DEVELOPING"]:
        return "developing"
    if value >= PATTERN_THRESHOLDS["EMERGING"]:
        return "emerging"
    return "dormant"


# ── 콤보 ─────────────────────────────────────────────────


@dataclass(frozen=True)
class PatternCombo:
    """패턴 조합 → 진로 대사 해금"""

    combo_id: str
    requirements: Mapping[str, int]  # 모든 항목 충족 필요
    career_hint: str
    character_id: str


PATTERN_COMBOS: Tuple[PatternCombo, ...] = (
    PatternCombo("architect_vision", {"analytical": 5, "building": 4}, "systems architects", "maya"),
    PatternCombo("data_storyteller", {"analytical": 5, "exploring": 4}, "data scientists", "maya"),
    PatternCombo("creative_technologist", {"building": 5, "exploring": 4}, "creative technologists", "maya"),
    PatternCombo("healers_path", {"helping": 6, "patience": 3}, "nurses and therapists", "marcus"),
    PatternCombo("medical_detective", {"analytical": 5, "helping": 4}, "diagnosticians", "marcus"),
    PatternCombo("health_educator", {"helping": 5, "patience": 4}, "health educators", "marcus"),
    PatternCombo("systems_thinker", {"analytical": 5, "patience": 4}, "systems engineers", "devon"),
    PatternCombo("sustainable_builder", {"building": 5, "patience": 4}, "sustainable builders", "devon"),
    PatternCombo("patient_teacher", {"helping": 5, "patience": 5}, "teachers", "tess"),
    PatternCombo("curriculum_designer", {"building": 4, "helping": 5}, "curriculum designers", "tess"),
    PatternCombo("deep_coder", {"analytical": 6, "building": 4}, "software engineers", "rohan"),
    PatternCombo("security_guardian", {"analytical": 5, "patience": 5}, "security analysts", "rohan"),
    PatternCombo("research_navigator", {"exploring": 5, "analytical": 4}, "researchers", "elena"),
    PatternCombo("logistics_master", {"analytical": 4, "building": 5}, "logistics planners", "alex"),
    PatternCombo("care_coordinator", {"helping": 5, "analytical": 4}, "care coordinators", "grace"),
    PatternCombo("path_finder", {"helping": 4, "exploring": 5}, "career counselors", "jordan"),
    PatternCombo("safety_designer", {"analytical": 4, "helping": 4, "patience": 3}, "safety engineers", "kai"),
)

_COMBOS_BY_ID: Dict[str, PatternCombo] = {c.combo_id: c for c in PATTERN_COMBOS}


def get_combo_by_id(combo_id: str) -> PatternCombo | None:
    return _COMBOS_BY_ID.get(combo_id)


def meets_combo_requirements(patterns: Mapping[str, float], combo: PatternCombo) -> bool:
    for pattern, required in combo.requirements.items():
        if patterns.get(pattern, 0) < required:
            return False
    return True


def get_unlocked_combos(patterns: Mapping[str, float]) -> List[str]:
    """현재 패턴으로 달성한 콤보 ID 목록 (정의 순서)"""
    return [c.combo_id for c in PATTERN_COMBOS if meets_combo_requirements(patterns, c)]


def is_combo_unlocked(combo_id: str, patterns: Mapping[str, float]) -> bool:
    """미등록 콤보는 False."""
    combo = get_combo_by_id(combo_id)
    if combo is None:
        return False
    return meets_combo_requirements(patterns, combo)


def get_combo_progress(patterns: Mapping[str, float], combo: PatternCombo) -> int:
    """콤보 진행률 0 ~ 100 (요구치 합 대비 달성치 합)"""
    total_required = 0
    total_achieved = 0.0
    for pattern, required in combo.requirements.items():
        total_required += required
        total_achieved += min(max(patterns.get(pattern, 0), 0), required)
    if total_required == 0:
        return 100
    return round(total_achieved / total_required * 100)


def get_combo_flag(combo_id: str) -> str:
    """콤보 달성 시 사용하는 글로벌 플래그 이름"""
    return f"combo_{combo_id}_achieved"
