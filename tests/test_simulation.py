"""시뮬레이션 접근 평가기 / 레지스트리 테스트"""

import pytest

from terminus.core.simulation.access import (
    AccessDenialReason,
    FlagScope,
    SimulationRequirements,
    StageFlag,
    evaluate_access,
)
from terminus.core.simulation.registry import (
    SIMULATION_REGISTRY,
    get_simulation_by_character,
    get_simulation_by_id,
    get_simulations_for_characters,
    is_simulation_complete,
)
from terminus.core.state.changes import StateChange, apply_state_change
from terminus.core.state.models import CHARACTER_IDS

FULL_REQUIREMENTS = SimulationRequirements(
    min_trust=4,
    prior_stage=StageFlag("maya_stage_1_complete"),
    pattern="building",
    min_pattern_level=4,
    required_knowledge_flags=("knows_robotics", "knows_parents"),
    required_global_flags=("showcase_open",),
)


def _grant(state, **kwargs):
    return apply_state_change(state, StateChange(**kwargs))


class TestEvaluateAccess:
    def test_no_requirements(self, fresh_state):
        result = evaluate_access(SimulationRequirements(), fresh_state, "maya")
        assert result.can_access is True
        assert result.progress == 1.0
        assert result.reason is None

    def test_unknown_character(self, fresh_state):
        result = evaluate_access(SimulationRequirements(), fresh_state, "ghost")
        assert result.can_access is False
        assert result.reason == AccessDenialReason.CHARACTER_UNKNOWN
        assert result.progress == 0.0

    def test_trust_checked_first(self, maya_state):
        result = evaluate_access(FULL_REQUIREMENTS, maya_state, "maya")
        assert result.reason == AccessDenialReason.TRUST
        assert result.progress == pytest.approx(0.75)
        assert result.message == "Need 4 trust (have 3)"

    def test_prior_stage_after_trust(self, maya_state):
        state = _grant(maya_state, character_id="maya", trust_change=1)
        result = evaluate_access(FULL_REQUIREMENTS, state, "maya")
        assert result.reason == AccessDenialReason.PRIOR_STAGE
        assert result.progress == 0.0

    def test_pattern_progress(self, maya_state):
        state = _grant(maya_state, character_id="maya", trust_change=1)
        state = _grant(state, add_global_flags=("maya_stage_1_complete",), pattern_changes={"building": 1})
        result = evaluate_access(FULL_REQUIREMENTS, state, "maya")
        assert result.reason == AccessDenialReason.PATTERN
        assert result.progress == pytest.approx(0.25)

    def test_knowledge_fraction(self, maya_state):
        state = _grant(maya_state, character_id="maya", trust_change=1)
        state = _grant(state, add_global_flags=("maya_stage_1_complete",), pattern_changes={"building": 4})
        state = _grant(state, character_id="maya", add_knowledge_flags=("knows_robotics",))
        result = evaluate_access(FULL_REQUIREMENTS, state, "maya")
        assert result.reason == AccessDenialReason.KNOWLEDGE
        assert result.progress == pytest.approx(0.5)
        assert "knows_parents" in result.message

    def test_global_flags_last(self, maya_state):
        state = _grant(maya_state, character_id="maya", trust_change=1)
        state = _grant(state, add_global_flags=("maya_stage_1_complete",), pattern_changes={"building": 4})
        state = _grant(
            state, character_id="maya", add_knowledge_flags=("knows_robotics", "knows_parents")
        )
        result = evaluate_access(FULL_REQUIREMENTS, state, "maya")
        assert result.reason == AccessDenialReason.GLOBAL_FLAGS
        assert result.progress == 0.0

        state = _grant(state, add_global_flags=("showcase_open",))
        assert evaluate_access(FULL_REQUIREMENTS, state, "maya").can_access is True

    def test_knowledge_scoped_prior_stage(self, fresh_state):
        requirements = SimulationRequirements(
            prior_stage=StageFlag("grace_stage_1", scope=FlagScope.KNOWLEDGE)
        )
        assert evaluate_access(requirements, fresh_state, "grace").can_access is False
        state = _grant(fresh_state, character_id="grace", add_knowledge_flags=("grace_stage_1",))
        assert evaluate_access(requirements, state, "grace").can_access is True

    def test_unknown_pattern_denied(self, fresh_state):
        requirements = SimulationRequirements(pattern="charisma", min_pattern_level=1)
        result = evaluate_access(requirements, fresh_state, "maya")
        assert result.reason == AccessDenialReason.PATTERN


class TestRegistry:
    def test_ids_unique(self):
        ids = [s.simulation_id for s in SIMULATION_REGISTRY]
        assert len(ids) == len(set(ids))

    def test_characters_known(self):
        assert all(s.character_id in CHARACTER_IDS for s in SIMULATION_REGISTRY)

    def test_lookup(self):
        assert get_simulation_by_id("maya_pitch").character_id == "maya"
        assert get_simulation_by_character("grace").simulation_id == "grace_comfort"
        assert get_simulation_by_id("nope") is None
        found = get_simulations_for_characters(["maya", "kai"])
        assert {s.simulation_id for s in found} == {"maya_pitch", "kai_drill"}

    def test_global_completion(self, fresh_state):
        meta = get_simulation_by_id("maya_pitch")
        assert not is_simulation_complete(meta, fresh_state)
        state = _grant(fresh_state, add_global_flags=("maya_simulation_complete",))
        assert is_simulation_complete(meta, state)

    def test_knowledge_completion_is_per_character(self, fresh_state):
        meta = get_simulation_by_id("kai_drill")
        other = _grant(fresh_state, character_id="rohan", add_knowledge_flags=("simulation_complete",))
        assert not is_simulation_complete(meta, other)
        done = _grant(fresh_state, character_id="kai", add_knowledge_flags=("simulation_complete",))
        assert is_simulation_complete(meta, done)
