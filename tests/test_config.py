"""Tests for configuration loading."""

import logging
from unittest.mock import MagicMock

import pytest

from gitnapped.config import (
    DEFAULT_WORKING_HOURS,
    apply_env_overrides,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
    single_repository_config,
)
from gitnapped.exit_codes import CONFIG_ERROR, ConfigError, NotAGitRepositoryError, USAGE_ERROR
from gitnapped.infra import GitClient


def write_config(tmp_path, text, name="gitnapped.yaml"):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestGetConfigPath:
    """Tests for config file discovery."""

    def test_explicit_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv('GITNAPPED_CONFIG', str(tmp_path / "env.yaml"))
        assert get_config_path(str(tmp_path / "cli.yaml")) == tmp_path / "cli.yaml"

    def test_env_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv('GITNAPPED_CONFIG', str(tmp_path / "env.yaml"))
        assert get_config_path() == tmp_path / "env.yaml"

    def test_local_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('HOME', str(tmp_path / "home"))
        write_config(tmp_path, "repos: {}")
        assert get_config_path() == tmp_path / "gitnapped.yaml"

    def test_home_file(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        (home / ".gitnapped").mkdir(parents=True)
        (home / ".gitnapped" / "config.yaml").write_text("repos: {}")
        workdir = tmp_path / "work"
        workdir.mkdir()
        monkeypatch.chdir(workdir)
        monkeypatch.setenv('HOME', str(home))
        assert get_config_path() == home / ".gitnapped" / "config.yaml"


class TestMergeConfigs:
    def test_nested_merge(self):
        merged = merge_configs(get_default_config(), {"git": {"timeout": 5}, "author": "alice"})
        assert merged["git"]["timeout"] == 5
        assert merged["author"] == "alice"
        assert merged["logging"]["level"] == "WARNING"

    def test_base_untouched(self):
        base = get_default_config()
        merge_configs(base, {"parallel": 8})
        assert base["parallel"] == 1


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_repos_and_defaults(self, tmp_path):
        path = write_config(tmp_path, """
author: Alice
repos:
  Work:
    - ~/src/api [Backend][API]
    - ~/src/web
  Empty:
""")
        config = load_config(str(path))

        assert config['author'] == "Alice"
        assert config['repos']['Work'] == ["~/src/api [Backend][API]", "~/src/web"]
        assert config['repos']['Empty'] == []
        assert config['working_hours'] == DEFAULT_WORKING_HOURS
        assert config['parallel'] == 1

    def test_empty_file(self, tmp_path):
        config = load_config(str(write_config(tmp_path, "")))
        assert config['repos'] == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(str(tmp_path / "nope.yaml"))
        assert exc_info.value.exit_code == CONFIG_ERROR
        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(write_config(tmp_path, "repos: [unclosed")))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(write_config(tmp_path, "- just\n- a list\n")))

    @pytest.mark.parametrize("text", [
        "repos: [a, b]",
        "repos:\n  Work: ~/src/api",
        "repos:\n  Work:\n    - 42",
        "author: [a]",
        "parallel: 0",
        "parallel: true",
        "git: fast",
        "git:\n  timeout: soon",
        "git:\n  timeout: 0",
        "git:\n  timeout: true",
        "logging: debug",
        "logging:\n  level: [debug]",
    ])
    def test_invalid_shapes(self, tmp_path, text):
        with pytest.raises(ConfigError):
            load_config(str(write_config(tmp_path, text)))

    def test_git_and_logging_sections(self, tmp_path):
        config = load_config(str(write_config(tmp_path, """
git:
  timeout: 2.5
logging:
  level: DEBUG
""")))
        assert config['git']['timeout'] == 2.5
        assert config['logging']['level'] == "DEBUG"
        assert config['logging']['format'] == "%(levelname)s: %(message)s"

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv('GITNAPPED_AUTHOR', 'bob')
        monkeypatch.setenv('GITNAPPED_WORKING_HOURS', 'none')
        monkeypatch.setenv('GITNAPPED_PARALLEL', '4')
        config = load_config(str(write_config(tmp_path, "author: alice\nrepos: {}")))

        assert config['author'] == 'bob'
        assert config['working_hours'] is None
        assert config['parallel'] == 4


class TestApplyEnvOverrides:
    def test_ignores_non_numeric_parallel(self, monkeypatch):
        monkeypatch.setenv('GITNAPPED_PARALLEL', 'many')
        assert apply_env_overrides(get_default_config())['parallel'] == 1

    def test_working_hours_value(self, monkeypatch):
        monkeypatch.setenv('GITNAPPED_WORKING_HOURS', '08:00-16:30')
        assert apply_env_overrides(get_default_config())['working_hours'] == '08:00-16:30'


class TestSingleRepositoryConfig:
    """Tests for directory mode."""

    def test_builds_uncategorized(self, tmp_path):
        repo = tmp_path / "myrepo"
        repo.mkdir()
        git = MagicMock(spec=GitClient)
        git.is_work_tree.return_value = True

        config = single_repository_config(str(repo), git)

        assert config['author'] is None
        assert config['repos'] == {"Uncategorized": [f"{repo} [Uncategorized][myrepo]"]}
        git.is_work_tree.assert_called_once_with(str(repo))

    def test_rejects_non_repository(self, tmp_path):
        git = MagicMock(spec=GitClient)
        git.is_work_tree.return_value = False

        with pytest.raises(NotAGitRepositoryError) as exc_info:
            single_repository_config(str(tmp_path), git)
        assert exc_info.value.exit_code == USAGE_ERROR
        assert exc_info.value.path == str(tmp_path)


class TestConfigureLogging:
    def test_level_and_single_handler(self):
        configure_logging("DEBUG")
        configure_logging("ERROR")
        logger = logging.getLogger("gitnapped")
        assert logger.level == logging.ERROR
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_unknown_level_falls_back(self):
        configure_logging("chatty")
        assert logging.getLogger("gitnapped").level == logging.WARNING
