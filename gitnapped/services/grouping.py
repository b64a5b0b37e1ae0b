"""
Grouping service for gitnapped.

Builds the two rollup views over configured repositories:
- categories: the configuration mapping, one CategoryStats per key
- projects: repositories sharing a vanity name, one ProjectStats each

Both views fetch member statistics through the same resolver, normally
backed by the run's StatsCache, so a repository listed in several places
is probed once.
"""

from typing import Callable, Iterable, List, Mapping, Sequence, Set
import logging

from ..domain import (
    CategoryStats,
    ProjectStats,
    RepositoryIdentity,
    RepositoryStats,
    group_by_vanity,
    merge_stats,
    retain_active,
)

logger = logging.getLogger(__name__)

StatsResolver = Callable[[str], RepositoryStats]


class GroupingService:
    """
    Aggregates repository statistics into categories and projects.

    Example:
        cache = StatsCache()
        service = GroupingService(lambda path: cache.get_or_compute(path, prober.probe))
        categories = service.categories(config['repos'], active_only=True)
    """

    def __init__(self, resolve: StatsResolver):
        """
        Initialize GroupingService.

        Args:
            resolve: Returns the statistics of a repository path
        """
        self.resolve = resolve

    def _members(self, paths: Iterable[str], active_only: bool):
        """Resolve unique paths in order and apply the activity filter."""
        seen: Set[str] = set()
        entries = []
        for path in paths:
            if path in seen:
                continue
            seen.add(path)
            entries.append((path, self.resolve(path)))
        return retain_active(entries, active_only)

    def categories(
        self,
        repos: Mapping[str, Sequence[str]],
        active_only: bool = False
    ) -> List[CategoryStats]:
        """
        Build one CategoryStats per configured category, in mapping order.

        Args:
            repos: Category name -> descriptor strings
            active_only: Drop repositories without commits

        Returns:
            List of CategoryStats
        """
        result = []
        for name, descriptors in repos.items():
            paths = [RepositoryIdentity.parse(d).path for d in descriptors or []]
            members = self._members(paths, active_only)
            total = merge_stats(stats for _, stats in members)

            logger.debug(f"Category {name}: {len(members)} repositories, {total.commit_count} commits")
            result.append(CategoryStats(name=name, repos=tuple(members), total=total))
        return result

    def projects(
        self,
        identities: Iterable[RepositoryIdentity],
        active_only: bool = False
    ) -> List[ProjectStats]:
        """
        Build one ProjectStats per vanity name, in order of first appearance.

        The project group is the first group label declared by any member.

        Args:
            identities: All configured repository identities
            active_only: Drop repositories without commits

        Returns:
            List of ProjectStats
        """
        result = []
        for vanity_name, members in group_by_vanity(identities).items():
            group = next((m.group for m in members if m.group is not None), None)
            retained = self._members((m.path for m in members), active_only)
            stats = merge_stats(s for _, s in retained)

            logger.debug(f"Project {vanity_name}: {len(retained)} repositories, {stats.commit_count} commits")
            result.append(ProjectStats(
                name=vanity_name,
                group=group,
                repos=tuple(path for path, _ in retained),
                stats=stats,
            ))
        return result
