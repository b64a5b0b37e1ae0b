"""
Statistics domain objects for gitnapped.

RepositoryStats is the unit of aggregation: one is produced per probed
repository and merge_stats() folds any number of them into a new one.
CategoryStats and ProjectStats pair a rollup with the members it was
built from.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


SORT_FIELDS = {
    'commits': 'commit_count',
    'files': 'file_count',
    'lines': 'line_count',
    'out-of-hours': 'out_of_hours_commits',
}


@dataclass(frozen=True)
class RepositoryStats:
    """
    Commit and file statistics for one repository or a rollup of several.

    Instances are never mutated; merge_stats() builds new ones.
    """
    commit_count: int = 0
    out_of_hours_commits: int = 0
    file_count: int = 0
    line_count: int = 0
    commits_by_date: Mapping[str, int] = field(default_factory=dict)
    file_types: Mapping[str, int] = field(default_factory=dict)

    @property
    def out_of_hours_percentage(self) -> int:
        """Share of out-of-hours commits, truncated to a whole percent."""
        if self.commit_count == 0:
            return 0
        return int(self.out_of_hours_commits * 100 / self.commit_count)

    def most_active_day(self) -> Optional[Tuple[str, int]]:
        """Date with the most commits; ties go to the earliest date."""
        if not self.commits_by_date:
            return None
        return min(self.commits_by_date.items(), key=lambda item: (-item[1], item[0]))

    def top_file_types(self, limit: Optional[int] = None) -> list:
        """File types by descending count, then extension."""
        ranked = sorted(self.file_types.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:limit] if limit is not None else ranked

    def sort_value(self, sort_by: str) -> int:
        return getattr(self, SORT_FIELDS.get(sort_by, 'commit_count'))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'commit_count': self.commit_count,
            'out_of_hours_commits': self.out_of_hours_commits,
            'file_count': self.file_count,
            'line_count': self.line_count,
            'commits_by_date': dict(sorted(self.commits_by_date.items())),
            'file_types': dict(self.top_file_types()),
        }


def merge_stats(stats: Iterable[RepositoryStats]) -> RepositoryStats:
    """
    Merge repository statistics into a new RepositoryStats.

    Scalars are summed and histograms are summed key by key. The inputs
    are left untouched and merging nothing yields all zeros.
    """
    commit_count = out_of_hours = file_count = line_count = 0
    commits_by_date: Counter = Counter()
    file_types: Counter = Counter()

    for item in stats:
        commit_count += item.commit_count
        out_of_hours += item.out_of_hours_commits
        file_count += item.file_count
        line_count += item.line_count
        commits_by_date.update(item.commits_by_date)
        file_types.update(item.file_types)

    return RepositoryStats(
        commit_count=commit_count,
        out_of_hours_commits=out_of_hours,
        file_count=file_count,
        line_count=line_count,
        commits_by_date=dict(commits_by_date),
        file_types=dict(file_types),
    )


@dataclass(frozen=True)
class CategoryStats:
    """A configured category and the repositories retained in it."""
    name: str
    repos: Tuple[Tuple[str, RepositoryStats], ...] = ()
    total: RepositoryStats = field(default_factory=RepositoryStats)

    @property
    def active_repos(self) -> int:
        from .activity import count_active
        return count_active(stats for _, stats in self.repos)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'active_repos': self.active_repos,
            'repos': [
                {'path': path, **stats.to_dict()} for path, stats in self.repos
            ],
            'total': self.total.to_dict(),
        }


@dataclass(frozen=True)
class ProjectStats:
    """Repositories sharing one vanity name, aggregated as a single project."""
    name: str
    group: Optional[str] = None
    repos: Tuple[str, ...] = ()
    stats: RepositoryStats = field(default_factory=RepositoryStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'group': self.group,
            'repos': list(self.repos),
            'stats': self.stats.to_dict(),
        }
