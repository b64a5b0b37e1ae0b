"""
Domain layer for gitnapped.

Contains pure domain objects with no I/O or side effects:
- RepositoryIdentity: Parsed repository descriptor (path, group, vanity name)
- RepositoryStats: Commit/file statistics and the merge_stats() aggregator
- CategoryStats / ProjectStats: Rollups over groups of repositories
- WorkingHours: Working-hours window and commit timestamp classification
"""

from .identity import RepositoryIdentity, group_by_vanity
from .stats import (
    RepositoryStats,
    CategoryStats,
    ProjectStats,
    merge_stats,
    SORT_FIELDS,
)
from .hours import (
    WorkingHours,
    CommitTimestamp,
    parse_commit_timestamp,
    is_within_working_hours,
)
from .activity import is_active, retain_active, count_active

__all__ = [
    'RepositoryIdentity',
    'group_by_vanity',
    'RepositoryStats',
    'CategoryStats',
    'ProjectStats',
    'merge_stats',
    'SORT_FIELDS',
    'WorkingHours',
    'CommitTimestamp',
    'parse_commit_timestamp',
    'is_within_working_hours',
    'is_active',
    'retain_active',
    'count_active',
]
