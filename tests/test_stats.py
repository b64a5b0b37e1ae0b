"""Tests for statistics aggregation and activity filtering."""

import pytest
from gitnapped.domain import (
    CategoryStats,
    ProjectStats,
    RepositoryStats,
    count_active,
    is_active,
    merge_stats,
    retain_active,
)


def make_stats(commits=0, ooh=0, files=0, lines=0, dates=None, types=None):
    return RepositoryStats(
        commit_count=commits,
        out_of_hours_commits=ooh,
        file_count=files,
        line_count=lines,
        commits_by_date=dates or {},
        file_types=types or {},
    )


A = make_stats(3, 1, 10, 100, {"2024-01-01": 2, "2024-01-02": 1}, {"py": 8, "md": 2})
B = make_stats(2, 2, 5, 50, {"2024-01-02": 2}, {"py": 1, "none": 4})
C = make_stats(1, 0, 1, 7, {"2024-01-05": 1}, {"rs": 1})


class TestMergeStats:
    """Tests for merge_stats."""

    def test_empty_is_zero(self):
        """Merging nothing yields the all-zero default."""
        assert merge_stats([]) == RepositoryStats()

    def test_sums_scalars_and_histograms(self):
        """Scalars add up and histograms add key by key."""
        merged = merge_stats([A, B])
        assert merged.commit_count == 5
        assert merged.out_of_hours_commits == 3
        assert merged.file_count == 15
        assert merged.line_count == 150
        assert merged.commits_by_date == {"2024-01-01": 2, "2024-01-02": 3}
        assert merged.file_types == {"py": 9, "md": 2, "none": 4}

    def test_commutative(self):
        """Order does not matter."""
        assert merge_stats([A, B, C]) == merge_stats([C, A, B])

    def test_associative(self):
        """Grouping does not matter."""
        left = merge_stats([merge_stats([A, B]), C])
        right = merge_stats([A, merge_stats([B, C])])
        assert left == right == merge_stats([A, B, C])

    def test_inputs_untouched(self):
        """Merging never mutates its inputs."""
        before = dict(A.commits_by_date)
        merge_stats([A, B])
        assert A.commits_by_date == before
        assert A.commit_count == 3

    def test_accepts_generator(self):
        """Any iterable works."""
        assert merge_stats(s for s in [A, C]).commit_count == 4

    def test_merged_keeps_invariants(self):
        """Histogram sum and out-of-hours bound survive merging."""
        merged = merge_stats([A, B, C])
        assert sum(merged.commits_by_date.values()) == merged.commit_count
        assert merged.out_of_hours_commits <= merged.commit_count


class TestRepositoryStats:
    """Tests for RepositoryStats helpers."""

    def test_out_of_hours_percentage_truncates(self):
        """Percentages are truncated to whole numbers."""
        assert make_stats(3, 1).out_of_hours_percentage == 33
        assert make_stats(3, 2).out_of_hours_percentage == 66
        assert make_stats(0, 0).out_of_hours_percentage == 0

    def test_most_active_day(self):
        """Highest count wins, ties go to the earliest date."""
        stats = make_stats(5, dates={"2024-01-03": 2, "2024-01-01": 2, "2024-01-02": 1})
        assert stats.most_active_day() == ("2024-01-01", 2)
        assert RepositoryStats().most_active_day() is None

    def test_top_file_types(self):
        """File types are ranked by count, then name."""
        stats = make_stats(types={"py": 3, "md": 3, "rs": 5, "go": 1})
        assert stats.top_file_types(3) == [("rs", 5), ("md", 3), ("py", 3)]
        assert len(stats.top_file_types()) == 4

    def test_sort_value(self):
        """Sort keys map to fields, unknown keys fall back to commits."""
        assert A.sort_value("files") == 10
        assert A.sort_value("lines") == 100
        assert A.sort_value("out-of-hours") == 1
        assert A.sort_value("bogus") == 3

    def test_to_dict(self):
        """Serialization has sorted dates."""
        d = make_stats(2, dates={"2024-02-01": 1, "2024-01-01": 1}).to_dict()
        assert list(d["commits_by_date"]) == ["2024-01-01", "2024-02-01"]
        assert d["commit_count"] == 2


class TestActivityFilter:
    """Tests for is_active, retain_active and count_active."""

    def test_is_active(self):
        """Active means at least one commit."""
        assert is_active(make_stats(1))
        assert not is_active(make_stats(0, files=20))

    def test_retain_active(self):
        """Inactive entries are dropped only when requested."""
        entries = [(f"/r{i}", make_stats(c)) for i, c in enumerate([0, 3, 0, 5])]

        kept = retain_active(entries, active_only=True)
        assert [path for path, _ in kept] == ["/r1", "/r3"]
        assert merge_stats(s for _, s in kept).commit_count == 8

        assert len(retain_active(entries, active_only=False)) == 4

    def test_count_active(self):
        """Count of stats with commits."""
        assert count_active([make_stats(0), make_stats(2), make_stats(1)]) == 2


class TestRollups:
    """Tests for CategoryStats and ProjectStats."""

    def test_category_active_repos(self):
        """Active repositories are counted among the listed ones."""
        category = CategoryStats(
            name="Work",
            repos=(("/a", make_stats(0)), ("/b", make_stats(4))),
            total=make_stats(4),
        )
        assert category.active_repos == 1
        d = category.to_dict()
        assert d["repos"][1]["path"] == "/b"
        assert d["total"]["commit_count"] == 4

    def test_active_repos_uses_activity_predicate(self):
        """A repository with files but no commits is not an active member."""
        category = CategoryStats(
            name="Docs",
            repos=(("/a", make_stats(0, files=12, lines=400)), ("/b", make_stats(1))),
            total=make_stats(1, files=12, lines=400),
        )
        assert category.active_repos == count_active(s for _, s in category.repos) == 1
        assert not hasattr(RepositoryStats(), "is_active")

    def test_project_to_dict(self):
        """Projects serialize their members."""
        project = ProjectStats(name="Gateway", group="Infra", repos=("/a", "/b"), stats=make_stats(7))
        d = project.to_dict()
        assert d["name"] == "Gateway"
        assert d["group"] == "Infra"
        assert d["repos"] == ["/a", "/b"]
        assert d["stats"]["commit_count"] == 7
