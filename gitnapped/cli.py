#!/usr/bin/env python3

import click
import logging

from gitnapped import __version__
from gitnapped.config import (
    configure_logging,
    load_config,
    single_repository_config,
)
from gitnapped.cli_utils import RunOptions, standard_command
from gitnapped.domain import SORT_FIELDS, WorkingHours
from gitnapped.exit_codes import ConfigError, NoReposFoundError
from gitnapped.format_utils import FORMATS, format_output
from gitnapped.infra import GitClient
from gitnapped.render import make_console, render_report
from gitnapped.services import (
    ActivityAnalyzer,
    AnalysisOptions,
    ProbeFilter,
    RepositoryProber,
    View,
)
from gitnapped.timespec import resolve_author, resolve_window

logger = logging.getLogger(__name__)


def resolve_working_hours(cli_value, config_value):
    """
    Working-hours window from --working-hours or the config.

    "none"/"off" disables out-of-hours classification.
    """
    value = cli_value if cli_value is not None else config_value
    if value is None or str(value).strip().lower() in ('', 'none', 'off'):
        return None
    try:
        return WorkingHours.parse(str(value))
    except ValueError as e:
        if cli_value is not None:
            raise click.BadParameter(str(e), param_hint="'--working-hours'")
        raise ConfigError(str(e)) from e


def select_view(categories: bool, projects: bool) -> View:
    if categories:
        return View.CATEGORIES
    if projects:
        return View.PROJECTS
    return View.REPOSITORIES


@click.command(name='gitnapped')
@click.option('-c', '--config', 'config_path', metavar='FILE',
              help="Config file (default: ./gitnapped.yaml or $GITNAPPED_CONFIG)")
@click.option('-d', '--dir', 'directory', metavar='DIRECTORY',
              help='Analyze a single repository directory instead of a config file')
@click.option('-s', '--since', help='Start date for analysis (YYYY-MM-DD, default: yesterday)')
@click.option('-u', '--until', help='End date for analysis (YYYY-MM-DD, default: today)')
@click.option('-p', '--period', metavar='PERIOD', help='Relative time period (e.g. 6M, 2Y, 5D, 12H)')
@click.option('--active-only', is_flag=True, help='Show only repositories with commits in the period')
@click.option('--sort-by', type=click.Choice(list(SORT_FIELDS)), default='commits', show_default=True,
              help='Sort repositories and projects by this field')
@click.option('--categories', is_flag=True, help='Show statistics by category')
@click.option('--projects', is_flag=True, help='Group repositories by vanity name: [Group][Vanity Name]')
@click.option('--repo-details', is_flag=True, help='Show detailed information for each repository')
@click.option('--filetypes', is_flag=True, help='Show file types used in the repositories')
@click.option('-a', '--author', help='Filter commits by author (overrides config file)')
@click.option('--all-authors', is_flag=True, help='Include commits from all authors')
@click.option('--most-active-day', is_flag=True, help='Show the most active day')
@click.option('--working-hours', metavar='HH:MM-HH:MM',
              help="Working hours window, or 'none' to disable (default from config: 09:00-17:00)")
@click.option('--parallel', type=click.IntRange(min=1), default=None,
              help='Number of repositories probed concurrently')
@click.option('--pretty', is_flag=True, help='Show short repository names in category listings')
@click.option('--hide-gitnapped', is_flag=True, help='Hide out-of-hours statistics in the totals')
@click.option('--silent', is_flag=True, help='Silent mode, no output')
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
@click.option('-f', '--format', 'output_format', type=click.Choice(FORMATS), default=None,
              help='Output format (default: table)')
@click.option('--debug', is_flag=True, help='Enable debug messages')
@click.version_option(version=__version__, prog_name='gitnapped')
@standard_command
def cli(config_path, directory, since, until, period, active_only, sort_by, categories,
        projects, repo_details, filetypes, author, all_authors, most_active_day, working_hours,
        parallel, pretty, hide_gitnapped, silent, json_output, output_format, debug,
        run_options: RunOptions):
    """gitnapped - Find out why you didn't sleep: commit history across repos.

    Reads repositories from a YAML config mapping categories to repository
    descriptors ("path [Group][Vanity Name]") and reports commits, commits
    outside working hours, files and lines over a time window.

    Examples:

    \b
        gitnapped                             # yesterday, all configured repos
        gitnapped -p 6M --projects            # last six months, by project
        gitnapped --categories --active-only  # only categories with commits
        gitnapped -d . -a alice -p 2W --json  # one repository, JSON output
    """
    configure_logging(run_options.log_level)

    git = GitClient()
    if directory:
        logger.debug(f"Using directory: {directory}")
        config = single_repository_config(directory, git)
    else:
        config = load_config(config_path)
        configure_logging(
            "DEBUG" if debug else ("ERROR" if silent else config['logging'].get('level', 'WARNING')),
            config['logging'].get('format', '%(levelname)s: %(message)s'),
        )

    if not any(config['repos'].values()):
        raise NoReposFoundError()

    git.timeout = config.get('git', {}).get('timeout')

    since, until = resolve_window(since, until, period)
    author_filter = resolve_author(
        all_authors=all_authors,
        cli_author=author,
        config_author=config.get('author'),
        require_explicit=bool(directory),
    )

    probe_filter = ProbeFilter(
        since=since,
        until=until,
        author=author_filter,
        working_hours=resolve_working_hours(working_hours, config.get('working_hours')),
    )
    options = AnalysisOptions(
        view=select_view(categories, projects),
        active_only=active_only,
        parallel=parallel or config.get('parallel', 1),
    )

    analyzer = ActivityAnalyzer(RepositoryProber(git, probe_filter))
    report = analyzer.analyze(config['repos'], options)

    if run_options.machine_output:
        if not run_options.silent:
            click.echo(format_output(report.to_dict(), run_options.output_format))
        return

    render_report(
        report,
        sort_by=sort_by,
        show_filetypes=filetypes,
        show_details=repo_details,
        show_most_active=most_active_day,
        pretty=pretty,
        hide_gitnapped=hide_gitnapped,
        out=make_console(quiet=run_options.silent),
    )


def main():
    cli()


if __name__ == "__main__":
    main()
