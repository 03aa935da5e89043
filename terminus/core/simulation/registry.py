"""시뮬레이션 레지스트리

캐릭터별 시뮬레이션 메타데이터와 완료 판정.
노드 태그로 완료를 표시하던 시뮬레이션은 해당 캐릭터의
`simulation_complete` 지식 플래그로 기록한다.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from terminus.core.simulation.access import FlagScope, StageFlag, has_stage_flag
from terminus.core.state.models import PlayerState

SIMULATION_COMPLETE_TAG = "simulation_complete"


@dataclass(frozen=True)
class SimulationMeta:
    simulation_id: str
    character_id: str
    title: str
    completion_flag: StageFlag
    entry_node_id: str


def _global(flag: str) -> StageFlag:
    return StageFlag(flag=flag, scope=FlagScope.GLOBAL)


def _knowledge(flag: str) -> StageFlag:
    return StageFlag(flag=flag, scope=FlagScope.KNOWLEDGE)


SIMULATION_REGISTRY: List[SimulationMeta] = [
    SimulationMeta("maya_pitch", "maya", "The Pitch",
                   _global("maya_simulation_complete"), "maya_robotics_passion"),
    SimulationMeta("grace_comfort", "grace", "Patient Comfort",
                   _knowledge("grace_simulation_complete"), "grace_the_moment_setup"),
    SimulationMeta("tess_classroom", "tess", "The Classroom",
                   _knowledge("tess_simulation_complete"), "tess_the_pitch_setup"),
    SimulationMeta("alex_logistics", "alex", "The Logistics Puzzle",
                   _knowledge("alex_logistics_completed"), "alex_llm_project_reveal"),
    SimulationMeta("yaquin_review", "yaquin", "The Review",
                   _global("yaquin_review_simulation_complete"), "yaquin_simulation_intro"),
    SimulationMeta("devon_system", "devon", "The System",
                   _global("devon_arc_complete"), "devon_explains_system"),
    SimulationMeta("jordan_launch", "jordan", "Launch Crisis",
                   _global("jordan_arc_complete"), "jordan_job_reveal_7"),
    SimulationMeta("marcus_automation", "marcus", "The Automation",
                   _global("marcus_arc_complete"), "marcus_simulation_cursor"),
    SimulationMeta("kai_drill", "kai", "The Safety Drill",
                   _knowledge(SIMULATION_COMPLETE_TAG), "kai_safety_drill_intro"),
    SimulationMeta("rohan_ghost", "rohan", "The Ghost",
                   _knowledge(SIMULATION_COMPLETE_TAG), "rohan_ghost_intro"),
    SimulationMeta("silas_drought", "silas", "The Drought",
                   _knowledge(SIMULATION_COMPLETE_TAG), "silas_drought_intro"),
    SimulationMeta("elena_search", "elena", "The Search",
                   _global("elena_arc_complete"), "elena_perplexity_intro"),
    SimulationMeta("asha_canvas", "asha", "The Canvas",
                   _global("asha_arc_complete"), "asha_visual_canvas_intro"),
    SimulationMeta("lira_studio", "lira", "The Studio",
                   _knowledge("lira_composition_complete"), "lira_audio_studio_intro"),
    SimulationMeta("zara_analysis", "zara", "The Analysis",
                   _global("zara_arc_complete"), "zara_data_analysis_intro"),
    SimulationMeta("samuel_listener", "samuel", "The Listener's Log",
                   _global("samuel_listener_complete"), "samuel_listener_intro"),
    SimulationMeta("quinn_pitch", "quinn", "Portfolio Analysis",
                   _global("quinn_simulation_complete"), "quinn_simulation_pitch_intro"),
    SimulationMeta("dante_pitch", "dante", "Pitch Deck Builder",
                   _global("dante_simulation_complete"), "dante_sim_reluctant"),
    SimulationMeta("nadia_news", "nadia", "Headline Editor",
                   _global("nadia_simulation_complete"), "nadia_sim_hype"),
    SimulationMeta("isaiah_logistics", "isaiah", "Supply Chain Map",
                   _global("isaiah_simulation_complete"), "isaiah_sim_donor"),
]


def get_simulation_by_id(simulation_id: str) -> Optional[SimulationMeta]:
    return next((s for s in SIMULATION_REGISTRY if s.simulation_id == simulation_id), None)


def get_simulation_by_character(character_id: str) -> Optional[SimulationMeta]:
    return next((s for s in SIMULATION_REGISTRY if s.character_id == character_id), None)


def get_simulations_for_characters(character_ids: Iterable[str]) -> List[SimulationMeta]:
    wanted = set(character_ids)
    return [s for s in SIMULATION_REGISTRY if s.character_id in wanted]


def is_simulation_complete(meta: SimulationMeta, state: PlayerState) -> bool:
    """완료 플래그 보유 여부. 지식 플래그는 시뮬레이션 캐릭터 기준."""
    character = state.get_character(meta.character_id)
    return has_stage_flag(meta.completion_flag, state, character)
