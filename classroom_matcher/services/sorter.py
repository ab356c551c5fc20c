from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

from pyuca import Collator

from ..models.match_result import NO_CLASSROOM_LABEL, NOT_FOUND_LABEL, MatchResult

"""Result ordering.

Order: real classrooms (case-insensitive, Unicode collation order) < "Found but no classroom"
< "Not Found". sorted() is stable, so equal keys (including rows inside each sentinel group)
keep input order.

照合は pyuca (Unicode Collation Algorithm, DUCET) で行い、プロセスのロケール設定に依存しない。
"Élan" は "E" と "F" の間に並ぶ。
"""

# センチネルの並び順 (0 = 通常の教室)
_GROUP_RANK = {
    NO_CLASSROOM_LABEL: 1,
    NOT_FOUND_LABEL: 2,
}


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # allkeys.txt の読み込みが重いため初回のみ生成
    return Collator()


def collation_key(value: str) -> tuple[int, ...]:
    """Case-insensitive collation key for a classroom value."""
    return tuple(_collator().sort_key(value.casefold()))


def sort_key(result: MatchResult) -> tuple[int, tuple[int, ...]]:
    rank = _GROUP_RANK.get(result.classroom, 0)
    if rank:
        return rank, ()
    return 0, collation_key(result.classroom)


def sort_results(results: Iterable[MatchResult]) -> list[MatchResult]:
    return sorted(results, key=sort_key)
