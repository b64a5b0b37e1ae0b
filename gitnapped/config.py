#!/usr/bin/env python3

import os
import sys
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exit_codes import ConfigError, NotAGitRepositoryError

logger = logging.getLogger("gitnapped")

DEFAULT_CONFIG_NAME = "gitnapped.yaml"
DEFAULT_WORKING_HOURS = "09:00-17:00"
LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(level: str = "WARNING", fmt: str = LOG_FORMAT) -> None:
    """
    Send gitnapped log records to stderr.

    stdout stays reserved for report output.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    logger.propagate = False


def get_config_path(explicit: Optional[str] = None) -> Path:
    """Get the path to the configuration file.

    Checks in order:
    1. Path given on the command line
    2. GITNAPPED_CONFIG environment variable
    3. gitnapped.yaml in the current directory
    4. ~/.gitnapped/config.yaml
    """
    if explicit:
        return Path(explicit).expanduser()

    if 'GITNAPPED_CONFIG' in os.environ:
        return Path(os.environ['GITNAPPED_CONFIG']).expanduser()

    local = Path.cwd() / DEFAULT_CONFIG_NAME
    if local.exists():
        return local

    home = Path.home() / '.gitnapped' / 'config.yaml'
    if home.exists():
        return home

    return local


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "author": None,
        "repos": {},
        "working_hours": DEFAULT_WORKING_HOURS,
        "parallel": 1,
        "git": {
            "timeout": None,
        },
        "logging": {
            "level": "WARNING",
            "format": LOG_FORMAT,
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.

    Supported: GITNAPPED_AUTHOR, GITNAPPED_WORKING_HOURS, GITNAPPED_PARALLEL.
    """
    if os.environ.get('GITNAPPED_AUTHOR'):
        config['author'] = os.environ['GITNAPPED_AUTHOR']

    if 'GITNAPPED_WORKING_HOURS' in os.environ:
        value = os.environ['GITNAPPED_WORKING_HOURS'].strip()
        config['working_hours'] = None if value.lower() in ('', 'none', 'off') else value

    parallel = os.environ.get('GITNAPPED_PARALLEL', '')
    if parallel.isdigit():
        config['parallel'] = int(parallel)

    return config


def validate_config(config: Dict[str, Any], source: str) -> Dict[str, Any]:
    """
    Check the shape of a loaded configuration.

    Raises:
        ConfigError: If a section has the wrong type
    """
    repos = config.get('repos')
    if repos is None:
        config['repos'] = {}
    elif not isinstance(repos, dict):
        raise ConfigError(f"'repos' in {source} must map category names to lists of repositories")
    else:
        for category, descriptors in repos.items():
            if descriptors is None:
                repos[category] = []
            elif not isinstance(descriptors, list) or not all(isinstance(d, str) for d in descriptors):
                raise ConfigError(f"Category '{category}' in {source} must be a list of repository strings")

    author = config.get('author')
    if author is not None and not isinstance(author, str):
        raise ConfigError(f"'author' in {source} must be a string")

    parallel = config.get('parallel')
    if not isinstance(parallel, int) or isinstance(parallel, bool) or parallel < 1:
        raise ConfigError(f"'parallel' in {source} must be a positive integer")

    git = config.get('git')
    if not isinstance(git, dict):
        raise ConfigError(f"'git' in {source} must be a mapping")
    timeout = git.get('timeout')
    if timeout is not None and (
        not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0
    ):
        raise ConfigError(f"'git.timeout' in {source} must be a positive number of seconds")

    logging_config = config.get('logging')
    if not isinstance(logging_config, dict):
        raise ConfigError(f"'logging' in {source} must be a mapping")
    for key in ('level', 'format'):
        if not isinstance(logging_config.get(key), str):
            raise ConfigError(f"'logging.{key}' in {source} must be a string")

    return config


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Explicit config path (resolved with get_config_path if None)

    Returns:
        Configuration merged over the defaults

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    config_path = get_config_path(path)

    if not config_path.exists():
        raise ConfigError(f"Config file '{config_path}' not found")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            file_config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Error reading config file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML format in config file '{config_path}': {e}") from e

    if file_config is None:
        file_config = {}
    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file '{config_path}' must contain a mapping")

    logger.debug(f"Loaded config from {config_path}")

    config = merge_configs(get_default_config(), file_config)
    config = apply_env_overrides(config)
    return validate_config(config, str(config_path))


def single_repository_config(directory: str, git_client) -> Dict[str, Any]:
    """
    Build a configuration analyzing one directory, bypassing any config file.

    Args:
        directory: Path of the repository
        git_client: GitClient used to check the directory

    Raises:
        NotAGitRepositoryError: If directory is not inside a git work tree
    """
    if not git_client.is_work_tree(directory):
        raise NotAGitRepositoryError(directory)

    name = Path(directory).expanduser().resolve().name or directory
    config = apply_env_overrides(get_default_config())
    config['author'] = None
    config['repos'] = {
        "Uncategorized": [f"{directory} [Uncategorized][{name}]"],
    }
    return config
