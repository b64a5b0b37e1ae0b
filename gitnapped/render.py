"""
Rendering functions for gitnapped output.

This module handles all pretty-printing and table formatting.
The analyzer returns plain data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich.markup import escape
from rich import box
from typing import Dict, List, Optional, Sequence, Tuple

from .domain import CategoryStats, ProjectStats, RepositoryStats, is_active
from .services.analyzer import ActivityReport, View

console = Console()

TOP_REPOSITORIES = 5
TOP_CATEGORY_REPOSITORIES = 3
TOP_GROUP_FILE_TYPES = 5
TOP_TOTAL_FILE_TYPES = 10


def make_console(quiet: bool = False) -> Console:
    """Console for report output; a quiet console prints nothing."""
    return Console(quiet=quiet)


def sort_by_key(
    entries: Sequence[Tuple[str, RepositoryStats]],
    sort_by: str
) -> List[Tuple[str, RepositoryStats]]:
    """Sort (name, stats) pairs descending; ties keep their input order."""
    return sorted(entries, key=lambda entry: entry[1].sort_value(sort_by), reverse=True)


def short_name(path: str) -> str:
    """Last segment of a repository path."""
    return path.rstrip('/').split('/')[-1] or path


def gitnapped_line(stats: RepositoryStats) -> str:
    return (
        f"[yellow]Gitnapped for[/yellow]: [red]{stats.out_of_hours_percentage}%[/red] "
        f"([red]{stats.out_of_hours_commits}[/red])"
    )


def render_file_types(
    stats: RepositoryStats,
    limit: int,
    title: str = "File types",
    out: Optional[Console] = None
) -> None:
    out = out or console
    if not stats.file_types:
        return
    out.print(f"  [bright_magenta]{escape(title)}:[/bright_magenta]")
    for ext, count in stats.top_file_types(limit):
        out.print(f"    [bright_yellow]{escape(ext)}[/bright_yellow] - {count} [green]files[/green]")


def render_top_repositories(
    repos: Sequence[Tuple[str, RepositoryStats]],
    sort_by: str = "commits",
    limit: int = TOP_REPOSITORIES,
    out: Optional[Console] = None
) -> None:
    """
    Render the most active repositories as a table.

    Inactive repositories are hidden when sorting by commits.
    """
    out = out or console
    ranked = sort_by_key(repos, sort_by)
    rows = [
        (path, stats) for path, stats in ranked[:limit]
        if is_active(stats) or sort_by != "commits"
    ]
    if not rows:
        out.print("[yellow]No active repositories in this period.[/yellow]")
        return

    table = Table(
        title=f"Most Active Repositories (sorted by {sort_by})",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("#", style="bright_yellow", justify="right")
    table.add_column("Repository", style="green")
    table.add_column("Commits", style="cyan", justify="right")
    table.add_column("Gitnapped", style="red", justify="right")
    table.add_column("Files", style="blue", justify="right")
    table.add_column("Lines", style="magenta", justify="right")

    for i, (path, stats) in enumerate(rows, 1):
        table.add_row(
            str(i),
            escape(path),
            str(stats.commit_count),
            str(stats.out_of_hours_commits),
            str(stats.file_count),
            str(stats.line_count),
        )

    out.print(table)


def render_repository_details(
    repos: Sequence[Tuple[str, RepositoryStats]],
    show_filetypes: bool = False,
    out: Optional[Console] = None
) -> None:
    """Render per-repository counts and the commits-by-date histogram."""
    out = out or console
    for path, stats in repos:
        out.print(f"\n[bright_blue]Repo:[/bright_blue] [green]{escape(path)}[/green]")
        out.print(f"[yellow]Commits[/yellow]: [cyan]{stats.commit_count}[/cyan]")
        out.print(f"[yellow]Files[/yellow]: [cyan]{stats.file_count}[/cyan]")
        out.print(f"[yellow]Lines of code[/yellow]: [cyan]{stats.line_count}[/cyan]")

        if stats.commits_by_date:
            out.print("[bright_magenta]Commits by date:[/bright_magenta]")
            for date, count in sorted(stats.commits_by_date.items(), reverse=True):
                out.print(f"  [bright_cyan]{date}[/bright_cyan] - {count} [green]commits[/green]")

        if show_filetypes:
            render_file_types(stats, limit=len(stats.file_types), out=out)


def render_categories(
    categories: Sequence[CategoryStats],
    sort_by: str = "commits",
    show_filetypes: bool = False,
    pretty: bool = False,
    out: Optional[Console] = None
) -> None:
    """Render one block per non-empty category."""
    out = out or console
    out.print("\n[bright_green]Category Statistics:[/bright_green]")

    for category in categories:
        if not category.repos:
            continue

        total = category.total
        out.print(f"\n[bright_yellow]Category:[/bright_yellow] [bright_cyan]{escape(category.name)}[/bright_cyan]")
        out.print(f"[yellow]Active repositories[/yellow]: [cyan]{category.active_repos}[/cyan]")
        out.print(f"[yellow]Commits[/yellow]: [cyan]{total.commit_count}[/cyan]")
        if total.out_of_hours_commits > 0:
            out.print(gitnapped_line(total))
        out.print(f"[yellow]Total files[/yellow]: [cyan]{total.file_count}[/cyan]")
        out.print(f"[yellow]Total lines of code[/yellow]: [cyan]{total.line_count}[/cyan]")

        if show_filetypes:
            render_file_types(total, TOP_GROUP_FILE_TYPES, out=out)

        ranked = sort_by_key(category.repos, sort_by)[:TOP_CATEGORY_REPOSITORIES]
        out.print(f"  [bright_blue]Top repositories:[/bright_blue] (sorted by {sort_by})")
        for i, (path, stats) in enumerate(ranked, 1):
            if not is_active(stats) and sort_by == "commits":
                continue
            if pretty:
                out.print(
                    f"   [bright_yellow]{i}.[/bright_yellow] [green]{escape(short_name(path))}[/green]"
                    f" - [cyan]{stats.commit_count}[/cyan] commits"
                )
            else:
                out.print(
                    f"   [bright_yellow]{i}.[/bright_yellow] [green]{escape(short_name(path))}[/green]"
                    f" - [cyan]{stats.commit_count}[/cyan] commits,"
                    f" [blue]{stats.file_count}[/blue] files,"
                    f" [magenta]{stats.line_count}[/magenta] lines"
                )
            if stats.out_of_hours_commits > 0:
                out.print(f"      [red]Gitnapped for {stats.out_of_hours_commits}[/red] commits")


def _projects_by_group(projects: Sequence[ProjectStats]) -> Dict[Optional[str], List[ProjectStats]]:
    grouped: Dict[Optional[str], List[ProjectStats]] = {}
    for project in projects:
        grouped.setdefault(project.group, []).append(project)
    # Ungrouped projects are listed last
    if None in grouped:
        grouped[None] = grouped.pop(None)
    return grouped


def render_projects(
    projects: Sequence[ProjectStats],
    sort_by: str = "commits",
    show_filetypes: bool = False,
    show_repos: bool = False,
    out: Optional[Console] = None
) -> None:
    """Render projects, grouped by their group label."""
    out = out or console
    out.print("\n[bright_green]Projects Statistics:[/bright_green]")

    for group, members in _projects_by_group([p for p in projects if p.repos]).items():
        if group is not None:
            out.print(f"\n[bright_yellow]Group:[/bright_yellow] [bright_cyan]{escape(group)}[/bright_cyan]")
        else:
            out.print("\n[bright_yellow]Ungrouped Projects:[/bright_yellow]")

        ranked = sorted(members, key=lambda p: p.stats.sort_value(sort_by), reverse=True)
        for i, project in enumerate(ranked, 1):
            stats = project.stats
            out.print(
                f"[bright_yellow]{i}.[/bright_yellow] [green]{escape(project.name)}[/green]"
                f" - [cyan]{stats.commit_count}[/cyan] commits,"
                f" [blue]{stats.file_count}[/blue] files,"
                f" [magenta]{stats.line_count}[/magenta] lines"
                f" (from [yellow]{len(project.repos)}[/yellow] repos)"
            )
            if stats.out_of_hours_commits > 0:
                out.print(f"   [red]Gitnapped for {stats.out_of_hours_commits}[/red] commits")
            if show_repos:
                for path in project.repos:
                    out.print(f"   • {escape(path)}")
            if show_filetypes:
                render_file_types(stats, TOP_GROUP_FILE_TYPES, out=out)


def render_totals(
    stats: RepositoryStats,
    active_count: int,
    entity_name: str,
    show_filetypes: bool = False,
    show_most_active: bool = False,
    hide_gitnapped: bool = False,
    out: Optional[Console] = None
) -> None:
    """Render the grand total block."""
    out = out or console
    out.print(f"\n[bright_green]Stats across analyzed {entity_name}:[/bright_green]")
    out.print(f"[yellow]Active {entity_name}[/yellow]: [cyan]{active_count}[/cyan]")
    out.print(f"[yellow]Commits[/yellow]: [cyan]{stats.commit_count}[/cyan]")
    if not hide_gitnapped:
        out.print(gitnapped_line(stats))
    out.print(f"[yellow]Total files[/yellow]: [cyan]{stats.file_count}[/cyan]")
    out.print(f"[yellow]Total lines of code[/yellow]: [cyan]{stats.line_count}[/cyan]")

    if show_most_active:
        day = stats.most_active_day()
        if day:
            out.print(
                f"\n[bright_magenta]Most active day:[/bright_magenta] "
                f"[bright_cyan]{day[0]}[/bright_cyan] ({day[1]} [green]commits[/green])"
            )

    if show_filetypes:
        render_file_types(stats, TOP_TOTAL_FILE_TYPES, title=f"File types across all {entity_name}", out=out)


def render_report(
    report: ActivityReport,
    sort_by: str = "commits",
    show_filetypes: bool = False,
    show_details: bool = False,
    show_most_active: bool = False,
    pretty: bool = False,
    hide_gitnapped: bool = False,
    out: Optional[Console] = None
) -> None:
    """Render a full report for its view."""
    out = out or console
    hours = report.probe_filter.working_hours

    if report.probe_filter.author:
        out.print(f"[bright_yellow]Author filter[/bright_yellow]: [green]{escape(report.probe_filter.author)}[/green]")
    else:
        out.print("[bright_yellow]Showing commits from all authors[/bright_yellow]")
    out.print(
        f"[bright_yellow]Analyzing repos from[/bright_yellow] [bright_cyan]{report.probe_filter.since}[/bright_cyan]"
        f" [bright_yellow]to[/bright_yellow] [bright_cyan]{report.probe_filter.until}[/bright_cyan]"
    )
    if hours and hours.wraps_midnight:
        out.print(f"[yellow]Working hours {hours} end before they start; no commit counts as in hours.[/yellow]")

    if show_details:
        render_repository_details(report.repositories, show_filetypes, out=out)

    if report.view == View.CATEGORIES:
        render_categories(report.categories, sort_by, show_filetypes, pretty, out=out)
        entity = "Categories"
    elif report.view == View.PROJECTS:
        render_projects(report.projects, sort_by, show_filetypes, show_details, out=out)
        entity = "Projects"
    else:
        if len(report.repositories) > 1:
            out.print()
            render_top_repositories(report.repositories, sort_by, out=out)
        entity = "Repositories"

    render_totals(
        report.total,
        report.active_count,
        entity,
        show_filetypes=show_filetypes,
        show_most_active=show_most_active or report.view == View.REPOSITORIES,
        hide_gitnapped=hide_gitnapped or hours is None,
        out=out,
    )
