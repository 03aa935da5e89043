"""결정적 해시/난수 (표시 순서 전용)

세션을 넘어 같은 입력이면 같은 순서가 나와야 하므로
파이썬 내장 hash()나 random 모듈 상태에 의존하지 않는다.
"""

from typing import Callable, Iterable, List, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193


def fnv1a_32(text: str, seed: int = FNV_OFFSET_BASIS) -> int:
    """FNV-1a 32비트 문자열 해시 (UTF-16 코드 유닛 단위)"""
    h = seed & _MASK32
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        h ^= encoded[i] | (encoded[i + 1] << 8)
        h = (h * FNV_PRIME) & _MASK32
    return h


def hash_sorted_strings(values: Iterable[str]) -> str:
    """정렬된 문자열 목록 → 16진 해시 (구분자 '\\0')"""
    h = FNV_OFFSET_BASIS
    for value in sorted(values):
        h = fnv1a_32(value, h)
        h = fnv1a_32("\0", h)
    return format(h, "x")


def mulberry32(seed: int) -> Callable[[], float]:
    """32비트 시드 → [0, 1) 난수 생성기"""
    state = seed & _MASK32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & _MASK32)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    return next_float


def seeded_shuffle(items: Iterable[T], seed: str) -> List[T]:
    """시드 문자열 기반 Fisher-Yates 셔플 (새 리스트 반환)"""
    result = list(items)
    rand = mulberry32(fnv1a_32(seed))
    for i in range(len(result) - 1, 0, -1):
        j = int(rand() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result
