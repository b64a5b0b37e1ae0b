"""
Activity filtering for gitnapped.

A repository is active when it has at least one commit in the analyzed
window. Filtering happens on members before any rollup is computed, so a
category or project total only ever contains what is listed under it.
"""

from typing import Iterable, List, Tuple, TypeVar

from .stats import RepositoryStats

T = TypeVar('T')


def is_active(stats: RepositoryStats) -> bool:
    return stats.commit_count > 0


def retain_active(
    entries: Iterable[Tuple[T, RepositoryStats]],
    active_only: bool
) -> List[Tuple[T, RepositoryStats]]:
    """
    Keep (key, stats) entries, dropping inactive ones when active_only is set.
    """
    if not active_only:
        return list(entries)
    return [(key, stats) for key, stats in entries if is_active(stats)]


def count_active(stats: Iterable[RepositoryStats]) -> int:
    return sum(1 for item in stats if is_active(item))
