"""
Service layer for gitnapped.

Contains business logic that orchestrates domain objects and infrastructure:
- RepositoryProber: Statistics of a single repository
- StatsCache: Probe-once-per-run cache
- GroupingService: Category and project rollups
- ActivityAnalyzer: Full run orchestration

Services are the primary API for the CLI to use.
"""

from .prober import RepositoryProber, ProbeFilter
from .stats_cache import StatsCache
from .grouping import GroupingService
from .analyzer import ActivityAnalyzer, ActivityReport, AnalysisOptions, View

__all__ = [
    'RepositoryProber',
    'ProbeFilter',
    'StatsCache',
    'GroupingService',
    'ActivityAnalyzer',
    'ActivityReport',
    'AnalysisOptions',
    'View',
]
