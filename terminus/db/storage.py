"""키-값 저장소 (save_slots 테이블)

PersistenceService가 사용하는 최소 인터페이스:
get_item / set_item / remove_item. 예외는 호출자에게 그대로 전파된다.
"""

from typing import Optional

from sqlalchemy.orm import Session

from terminus.core.logging import get_logger
from terminus.db.models import SaveSlotModel

logger = get_logger(__name__)


class KeyedStorage:
    """SQLAlchemy Session 기반 문자열 키-값 저장소"""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_item(self, key: str) -> Optional[str]:
        row = self._db.get(SaveSlotModel, key)
        return row.document if row is not None else None

    def set_item(self, key: str, value: str) -> None:
        row = self._db.get(SaveSlotModel, key)
        if row is None:
            self._db.add(SaveSlotModel(key=key, document=value))
        else:
            row.document = value
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        logger.debug("Storage write: %s (%d bytes)", key, len(value))

    def remove_item(self, key: str) -> None:
        row = self._db.get(SaveSlotModel, key)
        if row is None:
            return
        self._db.delete(row)
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
