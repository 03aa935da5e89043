"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from terminus.core.conditions.models import Range, StateCondition
from terminus.core.event_bus import EventBus
from terminus.core.graph.models import (
    ConditionalChoice,
    DialogueContent,
    DialogueGraph,
    DialogueNode,
)
from terminus.core.state.changes import StateChange, apply_state_change
from terminus.core.state.models import PlayerState, create_new_player_state
from terminus.db.models import Base
from terminus.db.storage import KeyedStorage

SESSION_START = 1_700_000_000.0


@pytest.fixture()
def engine():
    """Create an in-memory SQLite engine."""
    eng = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=eng)
    return eng


@pytest.fixture()
def db_session(engine) -> Session:
    """Provide a database session with tables created."""
    session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    sess = session_factory()
    try:
        yield sess
    finally:
        sess.close()


@pytest.fixture()
def storage(db_session) -> KeyedStorage:
    return KeyedStorage(db_session)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def fresh_state() -> PlayerState:
    """캐릭터 20명 전원 초기값"""
    return create_new_player_state("player-001", now=SESSION_START)


@pytest.fixture()
def maya_state(fresh_state) -> PlayerState:
    """maya.trust = 3, 글로벌 플래그 test_flag"""
    return apply_state_change(
        fresh_state,
        StateChange(character_id="maya", trust_change=3, add_global_flags=("test_flag",)),
    )


@pytest.fixture()
def maya_graph() -> DialogueGraph:
    """maya 대화 그래프 (4노드)

    maya_intro ─ask_career→ maya_career ─back→ maya_intro
               ─offer_help (trust ≥ 5)→ maya_family
               ─ask_robots (knows_robotics일 때만 보임)→ maya_robotics
    """
    intro = DialogueNode(
        node_id="maya_intro",
        speaker="Maya",
        character_id="maya",
        content=(
            DialogueContent(text="Oh, hi.", variation_id="intro_a"),
            DialogueContent(text="You again?", variation_id="intro_b"),
        ),
        choices=(
            ConditionalChoice(
                choice_id="ask_career",
                text="What are you studying?",
                next_node_id="maya_career",
                pattern="exploring",
                consequence=StateChange(character_id="maya", trust_change=1),
            ),
            ConditionalChoice(
                choice_id="offer_help",
                text="Can I help?",
                next_node_id="maya_family",
                pattern="helping",
                enabled_condition=StateCondition(trust=Range(min=5)),
            ),
            ConditionalChoice(
                choice_id="ask_robots",
                text="Tell me about the robots.",
                next_node_id="maya_robotics",
                visible_condition=StateCondition(has_knowledge_flags=("knows_robotics",)),
            ),
        ),
    )
    career = DialogueNode(
        node_id="maya_career",
        speaker="Maya",
        character_id="maya",
        content=(DialogueContent(text="Pre-med. Supposedly.", variation_id="career_a"),),
        on_enter=(StateChange(character_id="maya", add_knowledge_flags=("knows_robotics",)),),
        choices=(
            ConditionalChoice(
                choice_id="back",
                text="Go on.",
                next_node_id="maya_intro",
                pattern="patience",
            ),
        ),
    )
    family = DialogueNode(
        node_id="maya_family",
        speaker="Maya",
        character_id="maya",
        required_state=StateCondition(trust=Range(min=5)),
        content=(DialogueContent(text="My parents...", variation_id="family_a"),),
    )
    robotics = DialogueNode(
        node_id="maya_robotics",
        speaker="Maya",
        character_id="maya",
        content=(DialogueContent(text="Look at this servo.", variation_id="robotics_a"),),
    )
    return DialogueGraph(
        nodes={n.node_id: n for n in (intro, career, family, robotics)},
        start_node_id="maya_intro",
        character_id="maya",
    )
