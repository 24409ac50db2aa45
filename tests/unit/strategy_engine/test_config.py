"""Unit tests for the strategy engine config module.

Tests YAML configuration loading, environment variable overrides,
path resolution and store construction.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from strategy_engine.config import (
    DEFAULT_CONFIG,
    ConfigurationError,
    _deep_merge,
    _resolve_path,
    configure_logging,
    create_store,
    enforce_references,
    get_project_root,
    get_store_path,
    load_config,
)
from strategy_engine.store import InMemoryEntityStore, SQLiteEntityStore


def write_yaml(path: Path, content) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(content, f)
    return path


class TestDeepMerge:
    """Tests for _deep_merge helper function."""

    def test_merge_nested_dicts(self):
        """Merge nested dictionaries."""
        result = _deep_merge({"outer": {"a": 1, "b": 2}}, {"outer": {"b": 3}})
        assert result == {"outer": {"a": 1, "b": 3}}

    def test_merge_does_not_modify_base(self):
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestResolvePath:
    """Tests for _resolve_path helper function."""

    def test_resolve_none_returns_none(self, tmp_path: Path):
        assert _resolve_path(None, tmp_path) is None

    def test_resolve_absolute_path(self, tmp_path: Path):
        assert _resolve_path("/absolute/db.sqlite", tmp_path) == Path("/absolute/db.sqlite")

    def test_resolve_relative_path(self, tmp_path: Path):
        """Resolve relative path makes it absolute from base_dir."""
        assert _resolve_path("data/s.db", tmp_path) == (tmp_path / "data/s.db").resolve()


class TestGetProjectRoot:
    """Tests for get_project_root function."""

    def test_finds_strategy_dir_in_parent(self, project_dir: Path):
        nested = project_dir / "a" / "b"
        nested.mkdir(parents=True)
        assert get_project_root(nested) == project_dir

    def test_falls_back_to_start(self, tmp_path: Path):
        assert get_project_root(tmp_path) == tmp_path


class TestDefaultConfig:
    """Tests for DEFAULT_CONFIG structure."""

    def test_default_backend_is_sqlite(self):
        assert DEFAULT_CONFIG["store"]["backend"] == "sqlite"
        assert DEFAULT_CONFIG["store"]["path"] is None

    def test_references_not_enforced_by_default(self):
        assert DEFAULT_CONFIG["integrity"]["enforce_references"] is False

    def test_default_log_level(self):
        assert DEFAULT_CONFIG["logging"]["level"] == "INFO"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_file(self, tmp_path: Path):
        config = load_config(project_root=tmp_path)
        assert config == DEFAULT_CONFIG

    def test_defaults_not_shared(self, tmp_path: Path):
        """Mutating a loaded config must not leak into DEFAULT_CONFIG."""
        config = load_config(project_root=tmp_path)
        config["store"]["backend"] = "memory"
        assert DEFAULT_CONFIG["store"]["backend"] == "sqlite"

    def test_load_default_config_file(self, project_dir: Path):
        write_yaml(project_dir / ".strategy" / "config.yaml", {"integrity": {"enforce_references": True}})

        config = load_config(project_root=project_dir)

        assert config["integrity"]["enforce_references"] is True
        assert config["store"]["backend"] == "sqlite"

    def test_load_from_explicit_path(self, tmp_path: Path):
        path = write_yaml(tmp_path / "custom.yaml", {"store": {"backend": "memory"}})
        config = load_config(str(path), project_root=tmp_path)
        assert config["store"]["backend"] == "memory"

    def test_load_from_env_var(self, tmp_path: Path):
        path = write_yaml(tmp_path / "env.yaml", {"logging": {"level": "DEBUG"}})
        with patch.dict(os.environ, {"STRATEGY_CONFIG_PATH": str(path)}):
            config = load_config(project_root=tmp_path)
        assert config["logging"]["level"] == "DEBUG"

    def test_missing_explicit_file_uses_defaults(self, tmp_path: Path):
        config = load_config(str(tmp_path / "nope.yaml"), project_root=tmp_path)
        assert config["store"]["backend"] == "sqlite"

    def test_invalid_explicit_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "invalid.yaml"
        path.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(path), project_root=tmp_path)

    def test_non_mapping_explicit_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(str(path), project_root=tmp_path)

    def test_invalid_default_yaml_ignored(self, project_dir: Path):
        (project_dir / ".strategy" / "config.yaml").write_text("store: [unclosed")
        config = load_config(project_root=project_dir)
        assert config["store"]["backend"] == "sqlite"

    def test_unknown_backend_raises(self, tmp_path: Path):
        path = write_yaml(tmp_path / "c.yaml", {"store": {"backend": "postgres"}})
        with pytest.raises(ConfigurationError, match="Unknown store backend"):
            load_config(str(path), project_root=tmp_path)

    def test_store_path_env_override(self, tmp_path: Path):
        with patch.dict(os.environ, {"STRATEGY_STORE_PATH": "data/other.db"}):
            config = load_config(project_root=tmp_path)
        assert config["store"]["path"] == str((tmp_path / "data/other.db").resolve())

    def test_log_level_env_override(self, tmp_path: Path):
        with patch.dict(os.environ, {"STRATEGY_LOG_LEVEL": "WARNING"}):
            config = load_config(project_root=tmp_path)
        assert config["logging"]["level"] == "WARNING"

    def test_relative_store_path_resolved(self, project_dir: Path):
        write_yaml(project_dir / ".strategy" / "config.yaml", {"store": {"path": "db/s.db"}})
        config = load_config(project_root=project_dir)
        assert config["store"]["path"] == str((project_dir / "db/s.db").resolve())


class TestStoreFactory:
    """Tests for get_store_path and create_store."""

    def test_default_store_path(self, tmp_path: Path):
        config = load_config(project_root=tmp_path)
        assert get_store_path(config, tmp_path) == tmp_path / ".strategy" / "strategy.db"

    def test_configured_store_path(self, tmp_path: Path):
        config = {"store": {"path": str(tmp_path / "x.db")}}
        assert get_store_path(config) == tmp_path / "x.db"

    def test_create_sqlite_store(self, tmp_path: Path):
        config = {"store": {"backend": "sqlite", "path": str(tmp_path / "s.db"), "timeout": 1}}
        store = create_store(config)
        assert isinstance(store, SQLiteEntityStore)
        assert store.db_path == tmp_path / "s.db"
        assert store.timeout == 1.0

    def test_create_memory_store(self):
        assert isinstance(create_store({"store": {"backend": "memory"}}), InMemoryEntityStore)

    def test_enforce_references_flag(self):
        assert enforce_references({}) is False
        assert enforce_references({"integrity": {"enforce_references": True}}) is True


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    def test_sets_root_level(self):
        configure_logging({"logging": {"level": "debug"}})
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        configure_logging({"logging": {"level": "CHATTY"}})
        assert logging.getLogger().level == logging.INFO
