"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
from dataclasses import dataclass
from functools import wraps
import logging

import click

from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .format_utils import format_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    """Output settings of one invocation, passed explicitly down the call chain."""
    debug: bool = False
    silent: bool = False
    output_format: str = "table"

    @property
    def log_level(self) -> str:
        if self.debug:
            return "DEBUG"
        if self.silent:
            return "ERROR"
        return "WARNING"

    @property
    def machine_output(self) -> bool:
        return self.output_format in ('json', 'yaml')


def run_options_from(kwargs) -> RunOptions:
    output_format = kwargs.get('output_format') or 'table'
    if kwargs.get('json_output'):
        output_format = 'json'
    return RunOptions(
        debug=bool(kwargs.get('debug')),
        silent=bool(kwargs.get('silent')),
        output_format=output_format,
    )


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - RunOptions built from --debug/--silent/--json/--format and injected
    - Errors reported on stderr (and as a JSON object in machine output mode)
    - Exit codes from exit_codes
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        options = run_options_from(kwargs)
        kwargs['run_options'] = options

        try:
            func(*args, **kwargs)
            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            report_error(e, e.exit_code, options)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            code = get_exit_code_for_exception(e)
            report_error(e, code, options)
            sys.exit(code)

    return wrapper


def report_error(error: Exception, exit_code: int, options: RunOptions) -> None:
    if options.machine_output:
        click.echo(format_json({
            "error": str(error),
            "type": type(error).__name__,
            "exit_code": exit_code,
        }))
    if not options.silent:
        click.echo(f"Error: {error}", err=True)
