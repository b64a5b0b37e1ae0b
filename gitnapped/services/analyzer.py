"""
Activity analysis service for gitnapped.

Orchestrates a full run: parse every configured descriptor, probe each
repository once (optionally with a worker pool), build the category and
project rollups through the shared cache, and derive the grand total and
active count from the view the caller asked for.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import logging

from ..domain import (
    CategoryStats,
    ProjectStats,
    RepositoryIdentity,
    RepositoryStats,
    count_active,
    merge_stats,
    retain_active,
)
from ..infra import GitClient
from .grouping import GroupingService
from .prober import ProbeFilter, RepositoryProber
from .stats_cache import StatsCache

logger = logging.getLogger(__name__)


class View(Enum):
    """Granularity that drives the grand total and the active count."""
    REPOSITORIES = "repositories"
    CATEGORIES = "categories"
    PROJECTS = "projects"


@dataclass
class AnalysisOptions:
    """Options for an analysis run."""
    view: View = View.REPOSITORIES
    active_only: bool = False
    parallel: int = 1  # Number of concurrent probes (1 = sequential)


@dataclass
class ActivityReport:
    """Plain result of an analysis run, ready for rendering or serialization."""
    view: View
    repositories: List[Tuple[str, RepositoryStats]] = field(default_factory=list)
    categories: List[CategoryStats] = field(default_factory=list)
    projects: List[ProjectStats] = field(default_factory=list)
    total: RepositoryStats = field(default_factory=RepositoryStats)
    active_count: int = 0
    probe_filter: ProbeFilter = field(default_factory=ProbeFilter)

    def to_dict(self) -> Dict[str, Any]:
        hours = self.probe_filter.working_hours
        result: Dict[str, Any] = {
            'view': self.view.value,
            'since': self.probe_filter.since,
            'until': self.probe_filter.until,
            'author': self.probe_filter.author,
            'working_hours': str(hours) if hours else None,
            'active_count': self.active_count,
            'total': self.total.to_dict(),
        }
        if self.view == View.CATEGORIES:
            result['categories'] = [c.to_dict() for c in self.categories]
        elif self.view == View.PROJECTS:
            result['projects'] = [p.to_dict() for p in self.projects]
        else:
            result['repositories'] = [
                {'path': path, **stats.to_dict()} for path, stats in self.repositories
            ]
        return result


def identities_from_config(repos: Mapping[str, Sequence[str]]) -> List[RepositoryIdentity]:
    """Parse every descriptor of a category -> descriptors mapping, in order."""
    return [
        RepositoryIdentity.parse(descriptor)
        for descriptors in repos.values()
        for descriptor in descriptors or []
    ]


class ActivityAnalyzer:
    """
    Runs the whole analysis for one configuration.

    Example:
        analyzer = ActivityAnalyzer(prober=RepositoryProber(GitClient(), ProbeFilter(since="7 days ago")))
        report = analyzer.analyze(config['repos'], AnalysisOptions(view=View.PROJECTS))
        print(report.total.commit_count, report.active_count)
    """

    def __init__(
        self,
        prober: Optional[RepositoryProber] = None,
        cache: Optional[StatsCache] = None
    ):
        """
        Initialize ActivityAnalyzer.

        Args:
            prober: Repository prober (creates default if None)
            cache: Stats cache shared by all views (creates new if None)
        """
        self.prober = prober or RepositoryProber(GitClient())
        self.cache = cache or StatsCache()

    def stats_for(self, path: str) -> RepositoryStats:
        return self.cache.get_or_compute(path, self.prober.probe)

    def warm(self, paths: Sequence[str], parallel: int = 1) -> None:
        """
        Probe every path into the cache.

        Results are only read back afterwards in configuration order,
        so completion order does not affect any listing.
        """
        unique = list(dict.fromkeys(paths))
        if parallel <= 1 or len(unique) <= 1:
            for path in unique:
                self.stats_for(path)
            return

        logger.debug(f"Probing {len(unique)} repositories with {parallel} workers")
        with ThreadPoolExecutor(max_workers=parallel) as executor:
            futures = {executor.submit(self.stats_for, path): path for path in unique}
            for future in as_completed(futures):
                future.result()

    def analyze(
        self,
        repos: Mapping[str, Sequence[str]],
        options: Optional[AnalysisOptions] = None
    ) -> ActivityReport:
        """
        Analyze all configured repositories.

        Args:
            repos: Category name -> descriptor strings
            options: Analysis options

        Returns:
            ActivityReport for the selected view
        """
        options = options or AnalysisOptions()
        identities = identities_from_config(repos)
        self.warm([identity.path for identity in identities], options.parallel)

        grouping = GroupingService(self.stats_for)
        categories = grouping.categories(repos, options.active_only)

        projects: List[ProjectStats] = []
        if options.view == View.PROJECTS:
            projects = grouping.projects(identities, options.active_only)

        unique_paths = dict.fromkeys(identity.path for identity in identities)
        repositories = retain_active(
            ((path, self.stats_for(path)) for path in unique_paths),
            options.active_only
        )

        if options.view == View.CATEGORIES:
            total = merge_stats(c.total for c in categories)
            active_count = count_active(c.total for c in categories)
        elif options.view == View.PROJECTS:
            total = merge_stats(p.stats for p in projects)
            active_count = count_active(p.stats for p in projects)
        else:
            total = merge_stats(stats for _, stats in repositories)
            active_count = count_active(stats for _, stats in repositories)

        logger.debug(
            f"Analyzed {len(unique_paths)} repositories: {total.commit_count} commits, "
            f"{active_count} active {options.view.value}, {len(self.cache)} cached"
        )

        return ActivityReport(
            view=options.view,
            repositories=repositories,
            categories=categories,
            projects=projects,
            total=total,
            active_count=active_count,
            probe_filter=self.prober.filter,
        )
