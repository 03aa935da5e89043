"""세이브 문서 스키마 (pydantic)

저장 JSON은 camelCase 키를 쓴다. 파싱은 camelCase/snake_case 모두 허용.
PlayerState ↔ SaveDocument 변환도 여기서 담당한다.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from terminus.core.state.models import (
    DEFAULT_CHARACTER_ID,
    DEFAULT_NERVOUS_SYSTEM_STATE,
    DEFAULT_START_NODE_ID,
    CharacterState,
    NervousSystemState,
    PlayerState,
    RelationshipStatus,
)
from terminus.core.state.patterns import PATTERN_TYPES


class _DocumentModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CharacterDocument(_DocumentModel):
    """캐릭터 관계 상태"""

    character_id: str = Field(..., min_length=1)
    trust: float
    relationship_status: RelationshipStatus
    knowledge_flags: List[str] = Field(default_factory=list)
    conversation_history: List[str] = Field(default_factory=list)
    nervous_system_state: NervousSystemState = DEFAULT_NERVOUS_SYSTEM_STATE


class PatternsDocument(_DocumentModel):
    """패턴 누적치. 다섯 키 모두 필수."""

    analytical: float
    patience: float
    exploring: float
    helping: float
    building: float


class SaveDocument(_DocumentModel):
    """세이브 문서 루트"""

    player_id: str = Field(..., min_length=1)
    save_version: str
    characters: List[CharacterDocument]
    global_flags: List[str]
    patterns: PatternsDocument
    mysteries: Dict[str, Union[str, int]] = Field(default_factory=dict)
    session_start_time: float
    session_boundaries_crossed: int = Field(default=0, ge=0)
    current_node_id: str = DEFAULT_START_NODE_ID
    current_character_id: str = DEFAULT_CHARACTER_ID
    last_saved: Optional[float] = None

    @model_validator(mode="after")
    def _unique_character_ids(self) -> "SaveDocument":
        ids = [c.character_id for c in self.characters]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate characterId in save document")
        return self

    @classmethod
    def from_state(
        cls, state: PlayerState, last_saved: Optional[float] = None
    ) -> "SaveDocument":
        """PlayerState → 문서. 집합은 정렬된 리스트로 직렬화한다."""
        return cls(
            player_id=state.player_id,
            save_version=state.save_version,
            characters=[
                CharacterDocument(
                    character_id=c.character_id,
                    trust=c.trust,
                    relationship_status=c.relationship_status,
                    knowledge_flags=sorted(c.knowledge_flags),
                    conversation_history=list(c.conversation_history),
                    nervous_system_state=c.nervous_system_state,
                )
                for _, c in sorted(state.characters.items())
            ],
            global_flags=sorted(state.global_flags),
            patterns=PatternsDocument(**{p: state.get_pattern(p) for p in PATTERN_TYPES}),
            mysteries=dict(state.mysteries),
            session_start_time=state.session_start_time,
            session_boundaries_crossed=state.session_boundaries_crossed,
            current_node_id=state.current_node_id,
            current_character_id=state.current_character_id,
            last_saved=last_saved,
        )

    def to_state(self) -> PlayerState:
        """문서 → PlayerState. last_saved는 문서에만 남는다."""
        return PlayerState(
            player_id=self.player_id,
            save_version=self.save_version,
            characters={
                c.character_id: CharacterState(
                    character_id=c.character_id,
                    trust=c.trust,
                    relationship_status=c.relationship_status,
                    knowledge_flags=frozenset(c.knowledge_flags),
                    conversation_history=tuple(c.conversation_history),
                    nervous_system_state=c.nervous_system_state,
                )
                for c in self.characters
            },
            global_flags=frozenset(self.global_flags),
            patterns=self.patterns.model_dump(),
            mysteries=dict(self.mysteries),
            session_start_time=self.session_start_time,
            session_boundaries_crossed=self.session_boundaries_crossed,
            current_node_id=self.current_node_id,
            current_character_id=self.current_character_id,
        )


class SaveMetadata(BaseModel):
    """전체 로드 없이 확인하는 세이브 요약"""

    exists: bool
    version: Optional[str] = None
    last_saved: Optional[float] = None
    player_id: Optional[str] = None
