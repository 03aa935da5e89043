"""이벤트 유형 상수

각 컴포넌트가 발행하는 이벤트 이름을 한곳에 모은다.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # conditions (콘텐츠 QA 진단)
    CHOICES_FAIL_OPEN = "choices_fail_open"
    MERCY_UNLOCK = "mercy_unlock"

    # graph
    NODE_ENTERED = "node_entered"
    CHOICE_MADE = "choice_made"
    BROKEN_REFERENCE = "broken_reference"

    # persistence
    GAME_SAVED = "game_saved"
    GAME_LOADED = "game_loaded"
    SAVE_FAILED = "save_failed"
    SAVE_RESTORED_FROM_BACKUP = "save_restored_from_backup"
    SAVE_IMPORTED = "save_imported"
    SAVE_RESET = "save_reset"
