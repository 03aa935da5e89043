"""선택지 표시 순서 / 서사 중력 테스트"""

import pytest

from terminus.core.conditions.models import EvaluatedChoice
from terminus.core.graph.models import ConditionalChoice
from terminus.core.ordering.display_order import (
    OrderVariant,
    order_choices_for_display,
    stable_key,
)
from terminus.core.ordering.gravity import GravityEffect, calculate_gravity
from terminus.core.ordering.prng import (
    fnv1a_32,
    hash_sorted_strings,
    mulberry32,
    seeded_shuffle,
)
from terminus.core.state.changes import StateChange, apply_state_change
from terminus.core.state.models import NervousSystemState


def _with_nervous_state(state, nervous: NervousSystemState, character_id: str = "maya"):
    return apply_state_change(
        state, StateChange(character_id=character_id, set_nervous_system_state=nervous)
    )


def _choices() -> list:
    return [
        ConditionalChoice(choice_id="a_help", text="I'll handle it.", next_node_id="n", pattern="helping"),
        ConditionalChoice(choice_id="b_patience", text="Take your time.", next_node_id="n", pattern="patience"),
        ConditionalChoice(choice_id="c_build", text="Let's sketch it.", next_node_id="n", pattern="building"),
        ConditionalChoice(choice_id="d_analytical", text="What are the odds?", next_node_id="n", pattern="analytical"),
        ConditionalChoice(choice_id="e_explore", text="Look around?", next_node_id="n", pattern="exploring"),
    ]


def _ids(choices) -> list:
    return [stable_key(c) for c in choices]


class TestPrng:
    def test_fnv1a_known_vectors(self):
        assert fnv1a_32("") == 0x811C9DC5
        assert fnv1a_32("a") == 0xE40C292C
        assert fnv1a_32("foobar") == 0xBF9CF968

    def test_fnv1a_non_ascii_deterministic(self):
        assert fnv1a_32("여정") == fnv1a_32("여정")
        assert fnv1a_32("여정") != fnv1a_32("정여")

    def test_hash_sorted_strings_order_independent(self):
        assert hash_sorted_strings(["b", "a"]) == hash_sorted_strings(["a", "b"])
        assert hash_sorted_strings(["a"]) != hash_sorted_strings(["a", "b"])

    def test_mulberry32_range_and_repeatable(self):
        first = mulberry32(12345)
        second = mulberry32(12345)
        values = [first() for _ in range(100)]
        assert values == [second() for _ in range(100)]
        assert all(0 <= v < 1 for v in values)

    def test_seeded_shuffle_is_permutation(self):
        items = list(range(10))
        shuffled = seeded_shuffle(items, "seed")
        assert sorted(shuffled) == items
        assert items == list(range(10))
        assert seeded_shuffle(items, "seed") == shuffled


class TestGravity:
    def test_maya_sympathetic_repels_helping(self, fresh_state):
        state = _with_nervous_state(fresh_state, NervousSystemState.SYMPATHETIC)
        result = calculate_gravity("helping", state, "maya")
        assert result.effect == GravityEffect.REPEL
        assert result.weight == 0.6

    @pytest.mark.parametrize(
        "nervous, pattern, weight, effect",
        [
            (NervousSystemState.VENTRAL_VAGAL, "exploring", 1.5, GravityEffect.ATTRACT),
            (NervousSystemState.VENTRAL_VAGAL, "building", 1.5, GravityEffect.ATTRACT),
            (NervousSystemState.VENTRAL_VAGAL, "helping", 1.0, GravityEffect.NEUTRAL),
            (NervousSystemState.SYMPATHETIC, "patience", 1.5, GravityEffect.ATTRACT),
            (NervousSystemState.SYMPATHETIC, "analytical", 1.5, GravityEffect.ATTRACT),
            (NervousSystemState.SYMPATHETIC, "exploring", 0.6, GravityEffect.REPEL),
            (NervousSystemState.SYMPATHETIC, "building", 1.0, GravityEffect.NEUTRAL),
            (NervousSystemState.DORSAL_VAGAL, "helping", 1.5, GravityEffect.ATTRACT),
            (NervousSystemState.DORSAL_VAGAL, "analytical", 0.6, GravityEffect.REPEL),
            (NervousSystemState.DORSAL_VAGAL, "building", 0.6, GravityEffect.REPEL),
        ],
    )
    def test_table(self, fresh_state, nervous, pattern, weight, effect):
        state = _with_nervous_state(fresh_state, nervous)
        result = calculate_gravity(pattern, state, "maya")
        assert result.weight == weight
        assert result.effect == effect

    def test_missing_character_neutral(self, fresh_state):
        result = calculate_gravity("helping", fresh_state, "ghost")
        assert result.weight == 1.0
        assert result.effect == GravityEffect.NEUTRAL

    def test_no_pattern_neutral(self, fresh_state):
        state = _with_nervous_state(fresh_state, NervousSystemState.DORSAL_VAGAL)
        assert calculate_gravity(None, state, "maya").effect == GravityEffect.NEUTRAL


class TestDeterministicShuffle:
    def test_same_order_regardless_of_input_order(self):
        choices = _choices()
        forward = order_choices_for_display(choices, variant="deterministic_shuffle", seed="p1:node")
        backward = order_choices_for_display(
            list(reversed(choices)), variant="deterministic_shuffle", seed="p1:node"
        )
        rotated = order_choices_for_display(
            choices[2:] + choices[:2], variant="deterministic_shuffle", seed="p1:node"
        )
        assert _ids(forward) == _ids(backward) == _ids(rotated)

    def test_repeated_calls_identical(self):
        choices = _choices()
        results = {
            tuple(_ids(order_choices_for_display(choices, variant="deterministic_shuffle", seed="s")))
            for _ in range(5)
        }
        assert len(results) == 1

    def test_is_permutation(self):
        ordered = order_choices_for_display(_choices(), variant="deterministic_shuffle", seed="s")
        assert sorted(_ids(ordered)) == sorted(_ids(_choices()))

    def test_seed_changes_order(self):
        choices = _choices()
        orders = {
            tuple(_ids(order_choices_for_display(choices, variant="deterministic_shuffle", seed=f"seed-{i}")))
            for i in range(20)
        }
        assert len(orders) > 1

    def test_input_not_mutated(self):
        choices = _choices()
        before = list(choices)
        order_choices_for_display(choices, variant="deterministic_shuffle", seed="s")
        assert choices == before


class TestGravityOrdering:
    def test_strict(self, fresh_state):
        state = _with_nervous_state(fresh_state, NervousSystemState.SYMPATHETIC)
        ordered = order_choices_for_display(
            _choices(), variant=OrderVariant.GRAVITY_STRICT, state=state, character_id="maya"
        )
        assert _ids(ordered) == ["b_patience", "d_analytical", "c_build", "a_help", "e_explore"]

    def test_bucket_shuffle_keeps_macro_order(self, fresh_state):
        state = _with_nervous_state(fresh_state, NervousSystemState.SYMPATHETIC)
        ordered = _ids(
            order_choices_for_display(
                list(reversed(_choices())),
                variant="gravity_bucket_shuffle",
                seed="p1:maya_intro",
                state=state,
                character_id="maya",
            )
        )
        assert set(ordered[:2]) == {"b_patience", "d_analytical"}
        assert ordered[2] == "c_build"
        assert set(ordered[3:]) == {"a_help", "e_explore"}

    def test_bucket_shuffle_without_state_is_single_bucket(self):
        choices = _choices()
        ordered = order_choices_for_display(choices, variant="gravity_bucket_shuffle", seed="s")
        expected = seeded_shuffle(sorted(choices, key=stable_key), "s:1.0")
        assert _ids(ordered) == _ids(expected)

    def test_default_variant_is_bucket_shuffle(self, fresh_state):
        state = _with_nervous_state(fresh_state, NervousSystemState.DORSAL_VAGAL)
        default = order_choices_for_display(_choices(), seed="s", state=state, character_id="maya")
        explicit = order_choices_for_display(
            _choices(),
            variant="gravity_bucket_shuffle",
            seed="s",
            state=state,
            character_id="maya",
        )
        assert _ids(default) == _ids(explicit)

    def test_unknown_variant_falls_back(self, caplog):
        fallback = order_choices_for_display(_choices(), variant="alphabetical", seed="s")
        default = order_choices_for_display(_choices(), variant="gravity_bucket_shuffle", seed="s")
        assert _ids(fallback) == _ids(default)
        assert "alphabetical" in caplog.text

    def test_accepts_evaluated_choices(self, fresh_state):
        state = _with_nervous_state(fresh_state, NervousSystemState.SYMPATHETIC)
        evaluated = [EvaluatedChoice(choice=c, visible=True, enabled=True) for c in _choices()]
        ordered = order_choices_for_display(
            evaluated, variant="gravity_strict", state=state, character_id="maya"
        )
        assert all(isinstance(e, EvaluatedChoice) for e in ordered)
        assert _ids(ordered)[0] == "b_patience"

    def test_stable_key_falls_back_to_text(self):
        choice = ConditionalChoice(choice_id="", text="Wait.", next_node_id="n")
        assert stable_key(choice) == "Wait."
