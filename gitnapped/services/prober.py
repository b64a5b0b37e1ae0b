"""
Repository prober for gitnapped.

Turns the text output of git into RepositoryStats for a single
repository: commits (submodules included) bucketed by date and by
working hours, tracked files, lines of text and a file-type histogram.
"""

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set
import logging
import os

from ..domain import RepositoryStats, WorkingHours, parse_commit_timestamp
from ..infra import GitClient

logger = logging.getLogger(__name__)

NO_EXTENSION = "none"


@dataclass(frozen=True)
class ProbeFilter:
    """Filters applied to every commit log query of a run."""
    since: Optional[str] = None
    until: Optional[str] = None
    author: Optional[str] = None
    working_hours: Optional[WorkingHours] = None


def file_extension(file_path: str) -> str:
    """Extension of a file name (text after its last '.'), or "none"."""
    name = os.path.basename(file_path)
    if '.' not in name:
        return NO_EXTENSION
    return name.rsplit('.', 1)[1]


def count_lines(text: str) -> int:
    """Count lines the way a text editor does: a trailing newline adds none."""
    if not text:
        return 0
    lines = text.count('\n')
    if not text.endswith('\n'):
        lines += 1
    return lines


class RepositoryProber:
    """
    Collects statistics for one repository at a time.

    Example:
        prober = RepositoryProber(GitClient(), ProbeFilter(since="2024-01-01"))
        stats = prober.probe("~/src/gateway")
        print(stats.commit_count, stats.out_of_hours_commits)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        probe_filter: Optional[ProbeFilter] = None
    ):
        self.git = git_client or GitClient()
        self.filter = probe_filter or ProbeFilter()

    def probe(self, path: str) -> RepositoryStats:
        """
        Probe a repository.

        Never raises for git or filesystem problems: a repository whose
        commit log cannot be read yields all-zero statistics.

        Args:
            path: Repository path

        Returns:
            RepositoryStats for the repository and its submodules
        """
        logger.debug(f"Probing repository: {path}")

        commits = self._log(path)
        if commits is None:
            logger.warning(f"Could not read commit log of {path}, counting it as empty")
            return RepositoryStats()

        commits.extend(self._submodule_commits(path, seen={self._key(path)}))

        commit_count = 0
        out_of_hours = 0
        commits_by_date: Counter = Counter()
        hours = self.filter.working_hours

        for line in commits:
            parts = line.split()
            timestamp = parse_commit_timestamp(parts[1]) if len(parts) > 1 else None
            if timestamp is None:
                logger.debug(f"Skipping log line without a readable date: {line!r}")
                continue

            commit_count += 1
            commits_by_date[timestamp.date] += 1

            if hours is not None and hours.is_out_of_hours(timestamp):
                out_of_hours += 1

        file_count, line_count, file_types = self._count_files(path)

        logger.debug(
            f"{path}: {commit_count} commits ({out_of_hours} out of hours), "
            f"{file_count} files, {line_count} lines"
        )

        return RepositoryStats(
            commit_count=commit_count,
            out_of_hours_commits=out_of_hours,
            file_count=file_count,
            line_count=line_count,
            commits_by_date=dict(commits_by_date),
            file_types=file_types,
        )

    def _log(self, path: str, annotation: Optional[str] = None) -> Optional[List[str]]:
        return self.git.log_lines(
            path,
            since=self.filter.since,
            until=self.filter.until,
            author=self.filter.author,
            annotation=annotation,
        )

    @staticmethod
    def _key(path: str) -> str:
        return os.path.realpath(os.path.expanduser(path))

    def _submodule_commits(self, path: str, seen: Set[str]) -> List[str]:
        """Commit lines of every submodule below path, depth first."""
        commits: List[str] = []

        for relative in self.git.submodule_paths(path):
            full_path = os.path.join(path, relative)
            key = self._key(full_path)
            if key in seen:
                continue
            seen.add(key)

            lines = self._log(full_path, annotation=f"[submodule {relative}]")
            if lines is None:
                logger.debug(f"Skipping submodule {full_path}: commit log unavailable")
                continue

            logger.debug(f"Added {len(lines)} commits from submodule {full_path}")
            commits.extend(lines)
            commits.extend(self._submodule_commits(full_path, seen))

        return commits

    def _count_files(self, path: str):
        """Return (file_count, line_count, file_types) for tracked files."""
        files = self.git.tracked_files(path)
        if not files:
            return 0, 0, {}

        root = Path(os.path.expanduser(path))
        line_count = 0
        unreadable = 0
        file_types: Counter = Counter()

        for name in files:
            file_types[file_extension(name)] += 1
            try:
                text = (root / name).read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError):
                unreadable += 1
                continue
            line_count += count_lines(text)

        if unreadable:
            logger.debug(f"{path}: {unreadable} tracked files could not be read as text")

        return len(files), line_count, dict(file_types)
