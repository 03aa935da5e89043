"""세이브 저장/로드 서비스

PlayerState ↔ 키-값 저장소. 이전 문서를 롤링 백업으로 보관한다.

실패 정책: 어떤 오류도 호출자에게 던지지 않는다.
- save / import_blob / reset → False
- load / export_blob → None ("세이브 없음"과 동일하게 취급)
"""

import json
import time
from typing import Callable, Optional, Protocol

from terminus.config import settings
from terminus.core.event_bus import EventBus, GameEvent
from terminus.core.event_types import EventTypes
from terminus.core.logging import get_logger
from terminus.core.state.models import PlayerState
from terminus.services.save_migrations import SaveMigrationError, migrate_if_needed
from terminus.services.save_schemas import SaveDocument, SaveMetadata

logger = get_logger(__name__)


class Storage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


def parse_document(raw: str) -> SaveDocument:
    """JSON 문자열 → 마이그레이션된 SaveDocument. 실패 시 예외."""
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise TypeError(f"save document must be an object, got {type(data).__name__}")
    return SaveDocument.model_validate(migrate_if_needed(data))


class PersistenceService:
    """세이브 슬롯 1개 (메인 + 백업) 관리"""

    def __init__(
        self,
        storage: Storage,
        event_bus: Optional[EventBus] = None,
        save_key: str = settings.SAVE_KEY,
        backup_key: str = settings.BACKUP_SAVE_KEY,
        autosave_interval: float = settings.AUTOSAVE_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._bus = event_bus
        self._save_key = save_key
        self._backup_key = backup_key
        self._autosave_interval = autosave_interval
        self._clock = clock
        self._last_autosave: Optional[float] = None

    # === 저장 ===

    def save(self, state: PlayerState) -> bool:
        """현재 세이브를 백업으로 옮긴 뒤 새 문서를 기록하고 재확인한다."""
        try:
            document = SaveDocument.from_state(state, last_saved=self._clock())
            payload = document.model_dump_json(by_alias=True)

            current = self._storage.get_item(self._save_key)
            if current is not None:
                self._storage.set_item(self._backup_key, current)

            self._storage.set_item(self._save_key, payload)

            if self._storage.get_item(self._save_key) != payload:
                logger.error("Save verification failed, restoring backup")
                self._restore_from_backup()
                self._emit(EventTypes.SAVE_FAILED, {"player_id": state.player_id})
                return False
        except Exception as e:
            logger.error("Failed to save game state: %s", e)
            self._emit(EventTypes.SAVE_FAILED, {"player_id": state.player_id})
            return False

        logger.info("Game saved (%d bytes)", len(payload))
        self._emit(
            EventTypes.GAME_SAVED,
            {"player_id": state.player_id, "bytes": len(payload)},
        )
        return True

    def autosave(self, state: PlayerState, now: Optional[float] = None) -> bool:
        """마지막 자동 저장 후 autosave_interval초가 지났을 때만 저장"""
        now = self._clock() if now is None else now
        if (
            self._last_autosave is not None
            and now - self._last_autosave <= self._autosave_interval
        ):
            return False
        self._last_autosave = now
        return self.save(state)

    # === 로드 ===

    def load(self) -> Optional[PlayerState]:
        """메인 세이브 로드. 손상됐으면 백업, 그것도 없으면 None."""
        try:
            raw = self._storage.get_item(self._save_key)
        except Exception as e:
            logger.error("Failed to read save slot: %s", e)
            return self._load_backup()

        if raw is None:
            logger.info("No save file found")
            return None

        try:
            state = parse_document(raw).to_state()
        except Exception as e:
            logger.error("Save file is corrupted or invalid: %s", e)
            return self._load_backup()

        logger.info("Game loaded (v%s)", state.save_version)
        self._emit(EventTypes.GAME_LOADED, {"player_id": state.player_id})
        return state

    def _load_backup(self) -> Optional[PlayerState]:
        try:
            raw = self._storage.get_item(self._backup_key)
            if raw is None:
                return None
            state = parse_document(raw).to_state()
        except Exception as e:
            logger.error("Backup save is unusable: %s", e)
            return None

        logger.warning("Main save unusable, restored from backup")
        self._emit(
            EventTypes.SAVE_RESTORED_FROM_BACKUP, {"player_id": state.player_id}
        )
        return state

    def _restore_from_backup(self) -> bool:
        try:
            backup = self._storage.get_item(self._backup_key)
            if backup is None:
                return False
            self._storage.set_item(self._save_key, backup)
            return True
        except Exception as e:
            logger.error("Failed to restore from backup: %s", e)
            return False

    # === 내보내기 / 가져오기 ===

    def export_blob(self) -> Optional[str]:
        """현재 세이브 JSON. 없거나 유효하지 않으면 None."""
        try:
            raw = self._storage.get_item(self._save_key)
            if raw is None:
                return None
            parse_document(raw)
        except Exception as e:
            logger.error("Save file is invalid, cannot export: %s", e)
            return None
        return raw

    def import_blob(self, blob: str) -> bool:
        """외부 세이브 가져오기. 완전히 검증된 뒤에만 저장소를 건드린다."""
        try:
            document = parse_document(blob)
        except Exception as e:
            logger.error("Imported save is invalid: %s", e)
            return False

        try:
            current = self._storage.get_item(self._save_key)
            if current is not None:
                self._storage.set_item(self._backup_key, current)
            self._storage.set_item(self._save_key, blob)
        except Exception as e:
            logger.error("Failed to import save: %s", e)
            return False

        logger.info("Save imported (player %s)", document.player_id)
        self._emit(EventTypes.SAVE_IMPORTED, {"player_id": document.player_id})
        return True

    # === 조회 / 초기화 ===

    def has_save(self) -> bool:
        try:
            return self._storage.get_item(self._save_key) is not None
        except Exception as e:
            logger.error("Failed to check save slot: %s", e)
            return False

    def get_save_metadata(self) -> SaveMetadata:
        """전체 검증 없이 세이브 요약만 읽는다."""
        try:
            raw = self._storage.get_item(self._save_key)
            if raw is None:
                return SaveMetadata(exists=False)
            data = json.loads(raw)
            return SaveMetadata(
                exists=True,
                version=data.get("saveVersion"),
                last_saved=data.get("lastSaved"),
                player_id=data.get("playerId"),
            )
        except Exception as e:
            logger.debug("Save metadata unreadable: %s", e)
            return SaveMetadata(exists=False)

    def reset(self) -> bool:
        """메인 세이브와 백업 모두 삭제"""
        try:
            self._storage.remove_item(self._save_key)
            self._storage.remove_item(self._backup_key)
        except Exception as e:
            logger.error("Failed to reset save data: %s", e)
            return False

        logger.warning("All save data deleted")
        self._last_autosave = None
        self._emit(EventTypes.SAVE_RESET, {})
        return True

    def _emit(self, event_type: str, data: dict) -> None:
        if self._bus is None:
            return
        self._bus.emit(
            GameEvent(event_type=event_type, data=data, source="persistence_service")
        )
