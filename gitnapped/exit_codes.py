"""
Process exit codes used by the gitnapped command.

0-2 carry their usual shell meaning; the 64+ range follows sysexits.h
for failures specific to a gitnapped run.
"""
from typing import Dict, Optional, Type

import yaml

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2          # bad flag value, --dir outside a repository

NO_REPOS_FOUND = 64      # nothing listed under repos:
CONFIG_ERROR = 66        # config file missing, unreadable or malformed
PERMISSION_ERROR = 67
DATA_ERROR = 70
INTERRUPTED = 130        # SIGINT


class CommandError(Exception):
    """Failure of a gitnapped run that maps to a specific exit code."""

    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class NoReposFoundError(CommandError):
    def __init__(self, message: str = "No repositories configured"):
        super().__init__(message, NO_REPOS_FOUND)


class ConfigError(CommandError):
    """The configuration file cannot be used."""

    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class NotAGitRepositoryError(CommandError):
    """A directory given with --dir is not inside a git work tree."""

    def __init__(self, path: str):
        super().__init__(
            f"'{path}' is not a Git repository. Please provide a valid Git repository path.",
            USAGE_ERROR
        )
        self.path: Optional[str] = path


# Checked in order, so subclasses must precede their bases
EXCEPTION_EXIT_CODES: Dict[Type[BaseException], int] = {
    KeyboardInterrupt: INTERRUPTED,
    PermissionError: PERMISSION_ERROR,
    yaml.YAMLError: CONFIG_ERROR,
    ValueError: DATA_ERROR,
    KeyError: DATA_ERROR,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """Exit code for an exception that escaped a command."""
    if isinstance(exc, CommandError):
        return exc.exit_code
    for exc_type, code in EXCEPTION_EXIT_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return GENERAL_ERROR
