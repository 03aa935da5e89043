"""도달성 시뮬레이션 (콘텐츠 QA)

정적 고아 노드 검사를 보완하는 행동 기반 도달성 검사.
시작 노드부터 활성화된 선택지를 실제로 적용하며 제한된 BFS/DFS를 돈다.
결정적이다: 같은 그래프와 초기 상태면 항상 같은 결과.
"""

import random
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, Dict, List, Mapping, Optional, Set, Tuple

from terminus.core.conditions.evaluator import apply_orb_locks, evaluate_choices
from terminus.core.graph.models import DialogueGraph, DialogueNode
from terminus.core.graph.transitions import apply_choice_effects, enter_node
from terminus.core.logging import get_logger
from terminus.core.ordering.prng import hash_sorted_strings
from terminus.core.state.models import PlayerState, create_character_state
from terminus.core.state.patterns import PATTERN_TYPES

logger = get_logger(__name__)

STRATEGIES = ("bfs", "dfs")
DEFAULT_MAX_UNIQUE_STATES_PER_NODE = 25


@dataclass
class ReachabilityResult:
    expanded_states: int = 0
    hit_max_states: bool = False
    visited_node_ids: List[str] = field(default_factory=list)
    visited_by_character: Dict[str, int] = field(default_factory=dict)


def find_node(
    graphs: Mapping[str, DialogueGraph], node_id: str
) -> Optional[Tuple[DialogueNode, str]]:
    """노드 ID로 (노드, 평가 대상 캐릭터) 검색. 그래프 키 정렬 순서로 탐색."""
    for key in sorted(graphs):
        graph = graphs[key]
        node = graph.get_node(node_id)
        if node is not None:
            return node, graph.character_for(node) or key
    return None


def _ensure_character(state: PlayerState, character_id: str) -> PlayerState:
    if character_id in state.characters:
        return state
    characters = dict(state.characters)
    characters[character_id] = create_character_state(character_id)
    return replace(state, characters=characters)


def summarize_state_key(node_id: str, state: PlayerState, character_id: str) -> str:
    """중복 확장 방지용 상태 요약 키"""
    pattern_key = ",".join(f"{state.get_pattern(p):g}" for p in PATTERN_TYPES)
    flags_key = f"{len(state.global_flags)}:{hash_sorted_strings(state.global_flags)}"

    character = state.get_character(character_id)
    if character is None:
        char_key = "missing_char"
    else:
        char_key = (
            f"t{character.trust:g}|r{character.relationship_status.value}"
            f"|k{len(character.knowledge_flags)}"
        )
    return f"{node_id}|{character_id}|{pattern_key}|{flags_key}|{char_key}"


def simulate_reachability(
    graphs: Mapping[str, DialogueGraph],
    initial_state: PlayerState,
    start_node_id: str,
    max_steps: int,
    max_states: int,
    strategy: str = "bfs",
    max_unique_states_per_node: int = DEFAULT_MAX_UNIQUE_STATES_PER_NODE,
) -> ReachabilityResult:
    """제한된 결정적 탐색으로 실제 도달 가능한 노드 집합을 구한다.

    Args:
        graphs: 캐릭터 ID → 대화 그래프
        max_steps: 시작 노드로부터 최대 선택 횟수
        max_states: 확장할 상태 수 상한 (도달 시 hit_max_states=True)
        strategy: "bfs" 또는 "dfs"
        max_unique_states_per_node: 노드별 확장 상태 수 상한
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"strategy must be one of {STRATEGIES}, got {strategy!r}")

    result = ReachabilityResult()
    frontier: Deque[Tuple[str, PlayerState, int]] = deque(
        [(start_node_id, initial_state, 0)]
    )
    seen_keys: Set[str] = set()
    states_per_node: Dict[str, int] = {}
    visited: Set[str] = set()

    while frontier:
        node_id, state, depth = frontier.pop() if strategy == "dfs" else frontier.popleft()
        if depth > max_steps:
            continue
        if result.expanded_states >= max_states:
            result.hit_max_states = True
            break

        found = find_node(graphs, node_id)
        if found is None:
            logger.warning("Reachability: node %s not found in any graph", node_id)
            continue
        node, character_id = found

        state = _ensure_character(state, character_id)
        key = summarize_state_key(node_id, state, character_id)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        result.expanded_states += 1

        bucket = f"{character_id}:{node_id}"
        count = states_per_node.get(bucket, 0)
        if count >= max_unique_states_per_node:
            continue
        states_per_node[bucket] = count + 1

        visited.add(node_id)
        result.visited_by_character[character_id] = (
            result.visited_by_character.get(character_id, 0) + 1
        )

        entered = enter_node(state, node, character_id, record_history=False)
        evaluated = evaluate_choices(node, entered, character_id)
        evaluated = apply_orb_locks(
            evaluated, entered, node_id=node_id, rng=random.Random(0)
        )

        for item in evaluated:
            if not item.selectable:
                continue
            next_state = apply_choice_effects(entered, node, item.choice)
            frontier.append((item.choice.next_node_id, next_state, depth + 1))

    result.visited_node_ids = sorted(visited)
    logger.info(
        "Reachability from %s: %d nodes visited, %d states expanded%s",
        start_node_id,
        len(result.visited_node_ids),
        result.expanded_states,
        " (state cap hit)" if result.hit_max_states else "",
    )
    return result
