"""세이브 문서 버전 마이그레이션

파싱 전 원본 dict(camelCase 키)에 대해 명시적 단계 체인을 실행한다.
알 수 없는 버전(미래 버전 포함)은 SaveMigrationError.
"""

from typing import Any, Callable, Dict, Mapping, Tuple

from terminus.core.logging import get_logger
from terminus.core.state.models import (
    DEFAULT_CHARACTER_ID,
    DEFAULT_NERVOUS_SYSTEM_STATE,
    DEFAULT_START_NODE_ID,
    SAVE_VERSION,
)
from terminus.core.state.patterns import PATTERN_TYPES

logger = get_logger(__name__)

Document = Dict[str, Any]


class SaveMigrationError(Exception):
    """지원하지 않는 세이브 버전"""


def _v1_0_0_to_v1_1_0(document: Document) -> Document:
    """1.0.0 → 1.1.0: 신경계 상태, 미스터리, 세션 기록 기본값 추가"""
    migrated = dict(document)

    characters = []
    for character in migrated.get("characters", []):
        if isinstance(character, Mapping):
            character = dict(character)
            character.setdefault("nervousSystemState", DEFAULT_NERVOUS_SYSTEM_STATE.value)
        characters.append(character)
    migrated["characters"] = characters

    patterns = migrated.get("patterns")
    if isinstance(patterns, Mapping):
        patterns = dict(patterns)
        for pattern in PATTERN_TYPES:
            patterns.setdefault(pattern, 0)
        migrated["patterns"] = patterns

    migrated.setdefault("mysteries", {})
    migrated.setdefault("sessionStartTime", migrated.get("lastSaved") or 0)
    migrated.setdefault("sessionBoundariesCrossed", 0)
    migrated.setdefault("currentNodeId", DEFAULT_START_NODE_ID)
    migrated.setdefault("currentCharacterId", DEFAULT_CHARACTER_ID)
    return migrated


# 원본 버전 → (대상 버전, 변환 함수)
MIGRATIONS: Dict[str, Tuple[str, Callable[[Document], Document]]] = {
    "1.0.0": ("1.1.0", _v1_0_0_to_v1_1_0),
}


def _version_key(document: Mapping[str, Any]) -> str:
    return "saveVersion" if "saveVersion" in document else "save_version"


def migrate_if_needed(document: Mapping[str, Any]) -> Document:
    """현재 버전까지 단계별로 마이그레이션한 새 dict 반환 (입력은 변경하지 않음)"""
    key = _version_key(document)
    version = document.get(key)
    if not isinstance(version, str):
        raise SaveMigrationError(f"missing or invalid save version: {version!r}")

    migrated: Document = dict(document)
    while version != SAVE_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise SaveMigrationError(f"unsupported save version: {version}")
        target, migrate = step
        logger.info("Migrating save from v%s to v%s", version, target)
        migrated = migrate(migrated)
        migrated[key] = target
        version = target

    return migrated
