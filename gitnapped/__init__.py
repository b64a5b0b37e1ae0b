"""
gitnapped - Commit activity across many git repositories.

gitnapped reads a YAML configuration that maps categories to repository
descriptors and reports commits, out-of-hours commits, files and lines,
per repository, per category and per project.

Quick Start:
    from gitnapped import ActivityAnalyzer, AnalysisOptions, View
    from gitnapped import GitClient, ProbeFilter, RepositoryProber, WorkingHours

    prober = RepositoryProber(
        GitClient(),
        ProbeFilter(since="2024-01-01", until="2024-12-31",
                    working_hours=WorkingHours.parse("09:00-17:00")),
    )
    report = ActivityAnalyzer(prober).analyze(
        {"Work": ["~/src/api [Backend][API]", "~/src/web [Frontend][Web]"]},
        AnalysisOptions(view=View.PROJECTS),
    )
    for project in report.projects:
        print(project.name, project.stats.commit_count)

Domain Objects:
    RepositoryIdentity - Parsed "path [Group][Vanity]" descriptor
    RepositoryStats - Commit/file statistics, merged with merge_stats()
    CategoryStats, ProjectStats - Rollups
    WorkingHours - Inclusive working-hours window

Services:
    RepositoryProber - Statistics of one repository
    StatsCache - Probe-once-per-run cache
    GroupingService - Category and project rollups
    ActivityAnalyzer - Full run orchestration
"""

__version__ = "0.4.0"

# Domain objects
from .domain import (
    RepositoryIdentity,
    RepositoryStats,
    CategoryStats,
    ProjectStats,
    WorkingHours,
    merge_stats,
    is_active,
)

# Infrastructure
from .infra import GitClient

# Services
from .services import (
    RepositoryProber,
    ProbeFilter,
    StatsCache,
    GroupingService,
    ActivityAnalyzer,
    ActivityReport,
    AnalysisOptions,
    View,
)

# Configuration
from .config import load_config

__all__ = [
    "__version__",
    "RepositoryIdentity",
    "RepositoryStats",
    "CategoryStats",
    "ProjectStats",
    "WorkingHours",
    "merge_stats",
    "is_active",
    "GitClient",
    "RepositoryProber",
    "ProbeFilter",
    "StatsCache",
    "GroupingService",
    "ActivityAnalyzer",
    "ActivityReport",
    "AnalysisOptions",
    "View",
    "load_config",
]
