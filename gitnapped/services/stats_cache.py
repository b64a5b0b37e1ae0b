"""
Per-run statistics cache for gitnapped.

Guarantees that each repository path is probed at most once per run,
also when several worker threads ask for the same path at the same time.
"""

import threading
from typing import Callable, Dict, Optional
import logging

from ..domain import RepositoryStats

logger = logging.getLogger(__name__)


class StatsCache:
    """
    Write-once cache of RepositoryStats keyed by repository path.

    Example:
        cache = StatsCache()
        stats = cache.get_or_compute("/src/api", prober.probe)
        again = cache.get_or_compute("/src/api", prober.probe)  # no second probe
    """

    def __init__(self):
        self._entries: Dict[str, RepositoryStats] = {}
        self._lock = threading.Lock()
        self._path_locks: Dict[str, threading.Lock] = {}

    def _path_lock(self, path: str) -> threading.Lock:
        with self._lock:
            return self._path_locks.setdefault(path, threading.Lock())

    def get_or_compute(
        self,
        path: str,
        compute: Callable[[str], RepositoryStats]
    ) -> RepositoryStats:
        """
        Return the cached stats for path, computing them on first use.

        Concurrent first requests for one path are serialized; only the
        first runs compute.
        """
        cached = self.get(path)
        if cached is not None:
            return cached

        with self._path_lock(path):
            cached = self.get(path)
            if cached is not None:
                return cached

            stats = compute(path)
            with self._lock:
                self._entries[path] = stats
            logger.debug(f"Cached stats for {path}")
            return stats

    def get(self, path: str) -> Optional[RepositoryStats]:
        with self._lock:
            return self._entries.get(path)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
