"""애플리케이션 진입점

호스트(UI 계층)는 bootstrap()을 한 번 호출해 로깅, DB 테이블, 대화 그래프,
엔진, 세이브 서비스를 준비한다.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from sqlalchemy.orm import Session

from terminus.config import settings
from terminus.core.engine import NarrativeEngine
from terminus.core.event_bus import EventBus
from terminus.core.graph.loader import load_graph_from_json
from terminus.core.graph.models import DialogueGraph
from terminus.core.logging import get_logger, setup_logging
from terminus.db import database
from terminus.db.storage import KeyedStorage
from terminus.services.persistence_service import PersistenceService

logger = get_logger(__name__)


@dataclass
class Runtime:
    """bootstrap() 결과 묶음"""

    event_bus: EventBus
    engine: NarrativeEngine
    persistence: PersistenceService
    db: Session


def load_graphs(graph_dir: Union[str, Path]) -> Dict[str, DialogueGraph]:
    """디렉터리의 *.json 그래프 전부 로드. 키는 그래프 characterId, 없으면 파일명."""
    graphs: Dict[str, DialogueGraph] = {}
    for path in sorted(Path(graph_dir).glob("*.json")):
        graph = load_graph_from_json(path)
        graphs[graph.character_id or path.stem] = graph
    logger.info("Loaded %d dialogue graphs from %s", len(graphs), graph_dir)
    return graphs


def bootstrap(
    graph_dir: Optional[Union[str, Path]] = None,
    session_factory: Optional[Callable[[], Session]] = None,
) -> Runtime:
    setup_logging(settings.LOG_LEVEL, sql_echo=settings.DEBUG)

    logger.info("Creating database tables...")
    database.init_db()

    graphs = load_graphs(graph_dir) if graph_dir is not None else {}

    event_bus = EventBus()
    db = (session_factory or database.SessionLocal)()
    runtime = Runtime(
        event_bus=event_bus,
        engine=NarrativeEngine(graphs, event_bus=event_bus),
        persistence=PersistenceService(KeyedStorage(db), event_bus),
        db=db,
    )
    logger.info("Terminus runtime ready.")
    return runtime
