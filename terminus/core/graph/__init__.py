"""대화 그래프 Core 패키지

공개 API:
- 모델: DialogueContent, ConditionalChoice, DialogueNode, DialogueGraph, OrbFillRequirement
- 탐색: get_available_nodes, select_content, NarrativeSession, select_content_for_session
- 전이: apply_choice_effects, enter_node
- 로더: load_graph, load_graph_from_json, GraphLoadError
- QA: simulate_reachability, ReachabilityResult
"""

from terminus.core.graph.models import (
    ConditionalChoice,
    DialogueContent,
    DialogueGraph,
    DialogueNode,
    OrbFillRequirement,
)
from terminus.core.graph.navigator import (
    MISSING_CONTENT,
    NarrativeSession,
    get_available_nodes,
    select_content,
    select_content_for_session,
)
from terminus.core.graph.transitions import apply_choice_effects, enter_node
from terminus.core.graph.loader import GraphLoadError, load_graph, load_graph_from_json
from terminus.core.graph.reachability import (
    ReachabilityResult,
    find_node,
    simulate_reachability,
)

__all__ = [
    "ConditionalChoice",
    "DialogueContent",
    "DialogueGraph",
    "DialogueNode",
    "OrbFillRequirement",
    "MISSING_CONTENT",
    "NarrativeSession",
    "get_available_nodes",
    "select_content",
    "select_content_for_session",
    "apply_choice_effects",
    "enter_node",
    "GraphLoadError",
    "load_graph",
    "load_graph_from_json",
    "ReachabilityResult",
    "find_node",
    "simulate_reachability",
]
