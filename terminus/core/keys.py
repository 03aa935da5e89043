"""작성 데이터(JSON) 키 정규화

콘텐츠 작성 도구는 camelCase 키를 내보낸다. 코어 모델은 snake_case를 쓴다.
"""

import re
from typing import Any, Dict, Mapping

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(key: str) -> str:
    """'hasGlobalFlags' → 'has_global_flags'. 이미 snake_case면 그대로."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """최상위 키만 snake_case로 변환 (값은 건드리지 않음)"""
    return {to_snake_case(str(k)): v for k, v in data.items()}
