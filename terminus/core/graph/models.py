"""대화 그래프 도메인 모델

작성된 콘텐츠(노드, 선택지, 콘텐츠 변형). 코어는 읽기 전용으로만 다룬다.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from terminus.core.conditions.models import StateCondition
from terminus.core.state.changes import StateChange


@dataclass(frozen=True)
class DialogueContent:
    """노드 콘텐츠 변형 1개"""

    text: str
    variation_id: str  # 노출 이력 추적용
    emotion: Optional[str] = None
    condition: Optional[StateCondition] = None  # 상황별 오버라이드 (예: 저신뢰 시 망설이는 버전)


@dataclass(frozen=True)
class OrbFillRequirement:
    """패턴 오브 채움률(0 ~ 100) 임계값 잠금"""

    pattern: str
    threshold: float


@dataclass(frozen=True)
class ConditionalChoice:
    """조건부 선택지. 숨김(visible=False)과 잠김(enabled=False)은 구분된다."""

    choice_id: str
    text: str
    next_node_id: str

    visible_condition: Optional[StateCondition] = None
    enabled_condition: Optional[StateCondition] = None

    pattern: Optional[str] = None  # 선택 시 +1 되는 패턴
    consequence: Optional[StateChange] = None
    required_orb_fill: Optional[OrbFillRequirement] = None
    preview: Optional[str] = None


@dataclass(frozen=True)
class DialogueNode:
    """대화 그래프 노드"""

    node_id: str
    speaker: str  # 표시용 화자 라벨
    content: Tuple[DialogueContent, ...] = ()

    # 조건 평가 대상 캐릭터 (화자 라벨에서 추론하지 않음)
    character_id: Optional[str] = None

    required_state: Optional[StateCondition] = None
    choices: Tuple[ConditionalChoice, ...] = ()

    on_enter: Tuple[StateChange, ...] = ()
    on_exit: Tuple[StateChange, ...] = ()

    tags: Tuple[str, ...] = ()
    priority: int = 0


@dataclass
class DialogueGraph:
    """캐릭터별 대화 그래프 (노드 ID → 노드)"""

    nodes: Dict[str, DialogueNode]
    start_node_id: str
    character_id: Optional[str] = None
    version: str = "1.0"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_node(self, node_id: Optional[str]) -> Optional[DialogueNode]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def character_for(self, node: DialogueNode) -> Optional[str]:
        """노드의 조건 평가 대상 캐릭터. 노드에 없으면 그래프 기본값."""
        return node.character_id or self.character_id
