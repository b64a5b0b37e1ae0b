"""Tests for the per-run statistics cache."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from gitnapped.domain import RepositoryStats
from gitnapped.services import StatsCache


class TestStatsCache:
    """Tests for StatsCache."""

    def test_computes_once(self):
        """A second request returns the cached value without computing."""
        cache = StatsCache()
        calls = []

        def compute(path):
            calls.append(path)
            return RepositoryStats(commit_count=4)

        first = cache.get_or_compute("/a", compute)
        second = cache.get_or_compute("/a", compute)

        assert first is second
        assert calls == ["/a"]
        assert cache.get("/a") is first
        assert len(cache) == 1

    def test_get_missing(self):
        assert StatsCache().get("/nope") is None

    def test_concurrent_requests_compute_once(self):
        """Threads racing on one path trigger a single computation."""
        cache = StatsCache()
        calls = []
        lock = threading.Lock()

        def slow_compute(path):
            with lock:
                calls.append(path)
            time.sleep(0.05)
            return RepositoryStats(commit_count=7)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: cache.get_or_compute("/shared", slow_compute), range(16)))

        assert calls == ["/shared"]
        assert all(r.commit_count == 7 for r in results)

    def test_distinct_paths_compute_independently(self):
        cache = StatsCache()
        with ThreadPoolExecutor(max_workers=4) as executor:
            list(executor.map(
                lambda p: cache.get_or_compute(p, lambda _: RepositoryStats(commit_count=len(p))),
                ["/a", "/bb", "/ccc"]
            ))
        assert cache.get("/ccc").commit_count == 4
        assert len(cache) == 3
