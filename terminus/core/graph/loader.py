"""작성된 대화 그래프 JSON 로더

콘텐츠 파일 형식:
    {
      "version": "1.0",
      "characterId": "maya",
      "startNodeId": "maya_introduction",
      "nodes": [
        {"nodeId": ..., "speaker": ..., "content": [...], "choices": [...]}
      ]
    }
키는 camelCase/snake_case 모두 허용.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from terminus.core.conditions.models import StateCondition
from terminus.core.graph.models import (
    ConditionalChoice,
    DialogueContent,
    DialogueGraph,
    DialogueNode,
    OrbFillRequirement,
)
from terminus.core.keys import normalize_keys
from terminus.core.logging import get_logger
from terminus.core.state.changes import StateChange

logger = get_logger(__name__)


class GraphLoadError(ValueError):
    """콘텐츠 파일 형식 오류"""


def _condition(raw: Optional[Mapping[str, Any]]) -> Optional[StateCondition]:
    if raw is None:
        return None
    return StateCondition.from_dict(raw)


def _change(raw: Optional[Mapping[str, Any]]) -> Optional[StateChange]:
    if raw is None:
        return None
    return StateChange.from_dict(raw)


def _content(raw: Mapping[str, Any]) -> DialogueContent:
    data = normalize_keys(raw)
    return DialogueContent(
        text=data["text"],
        variation_id=data["variation_id"],
        emotion=data.get("emotion"),
        condition=_condition(data.get("condition")),
    )


def _choice(raw: Mapping[str, Any]) -> ConditionalChoice:
    data = normalize_keys(raw)
    orb = data.get("required_orb_fill")
    return ConditionalChoice(
        choice_id=data["choice_id"],
        text=data["text"],
        next_node_id=data["next_node_id"],
        visible_condition=_condition(data.get("visible_condition")),
        enabled_condition=_condition(data.get("enabled_condition")),
        pattern=data.get("pattern"),
        consequence=_change(data.get("consequence")),
        required_orb_fill=(
            OrbFillRequirement(pattern=orb["pattern"], threshold=float(orb["threshold"]))
            if orb
            else None
        ),
        preview=data.get("preview"),
    )


def _node(raw: Mapping[str, Any]) -> DialogueNode:
    data = normalize_keys(raw)
    return DialogueNode(
        node_id=data["node_id"],
        speaker=data.get("speaker", ""),
        content=tuple(_content(c) for c in data.get("content", [])),
        character_id=data.get("character_id"),
        required_state=_condition(data.get("required_state")),
        choices=tuple(_choice(c) for c in data.get("choices", [])),
        on_enter=tuple(StateChange.from_dict(c) for c in data.get("on_enter", [])),
        on_exit=tuple(StateChange.from_dict(c) for c in data.get("on_exit", [])),
        tags=tuple(data.get("tags", [])),
        priority=int(data.get("priority", 0)),
    )


def load_graph(raw: Mapping[str, Any]) -> DialogueGraph:
    """dict → DialogueGraph. 형식 오류는 GraphLoadError."""
    try:
        data = normalize_keys(raw)
        nodes: Dict[str, DialogueNode] = {}
        for node_raw in data["nodes"]:
            node = _node(node_raw)
            if node.node_id in nodes:
                raise GraphLoadError(f"duplicate node id: {node.node_id}")
            nodes[node.node_id] = node
        graph = DialogueGraph(
            nodes=nodes,
            start_node_id=data["start_node_id"],
            character_id=data.get("character_id"),
            version=str(data.get("version", "1.0")),
            metadata=dict(data.get("metadata", {})),
        )
    except GraphLoadError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise GraphLoadError(f"invalid dialogue graph: {exc!r}") from exc

    if graph.start_node_id not in graph.nodes:
        logger.warning("Start node %s is not defined in graph", graph.start_node_id)

    logger.info(
        "Dialogue graph loaded: character=%s, nodes=%d",
        graph.character_id,
        len(graph.nodes),
    )
    return graph


def load_graph_from_json(path: str | Path) -> DialogueGraph:
    """콘텐츠 JSON 파일 로드"""
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    return load_graph(raw)
