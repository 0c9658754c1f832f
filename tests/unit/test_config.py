"""Unit tests for configuration management."""

import json
import logging

import pytest

from editgate.config import (
    DEFAULT_RULES_DIR,
    EditGateConfig,
    LogLevel,
    RulesConfig,
    find_config_file,
    find_project_root,
    load_config,
    resolve_rules_dir,
)
from editgate.errors import ConfigError


class TestEditGateConfig:
    """Test configuration models."""

    def test_defaults(self):
        config = EditGateConfig()
        assert config.rules.dir == DEFAULT_RULES_DIR
        assert config.rules.exclude == []
        assert config.logging.level == LogLevel.WARN

    def test_from_dict_with_aliases(self):
        config = EditGateConfig(**{
            "rules": {"rulesDir": "policy/rules", "exclude": ["drafts/*"]},
            "logging": {"level": "debug"},
        })
        assert config.rules.dir == "policy/rules"
        assert config.rules.exclude == ["drafts/*"]
        assert config.logging.level == LogLevel.DEBUG

    def test_field_name_accepted(self):
        assert RulesConfig(dir="custom").dir == "custom"

    def test_empty_rules_dir_rejected(self):
        with pytest.raises(ValueError):
            RulesConfig(dir="  ")

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValueError):
            EditGateConfig(**{"unknown": True})

    def test_log_level_mapping(self):
        assert LogLevel.WARN.to_logging() == logging.WARNING
        assert LogLevel.DEBUG.to_logging() == logging.DEBUG


class TestLoadConfig:
    """Test load_config and config discovery."""

    def test_load_explicit_file(self, tmp_path):
        config_file = tmp_path / ".editgate.json"
        config_file.write_text(json.dumps({"rules": {"dir": "rules"}}), encoding="utf-8")

        config = load_config(config_file)

        assert config.rules.dir == "rules"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / ".editgate.json"
        config_file.write_text("{broken", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(config_file)

    def test_invalid_schema(self, tmp_path):
        config_file = tmp_path / ".editgate.json"
        config_file.write_text(json.dumps({"logging": {"level": "loud"}}), encoding="utf-8")

        with pytest.raises(ConfigError, match="Failed to load config"):
            load_config(config_file)

    def test_defaults_when_no_file_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == EditGateConfig()

    def test_searches_parent_directories(self, tmp_path, monkeypatch):
        (tmp_path / ".editgate.json").write_text(
            json.dumps({"logging": {"level": "info"}}), encoding="utf-8"
        )
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert find_config_file() == (tmp_path / ".editgate.json").resolve()
        assert load_config().logging.level == LogLevel.INFO


class TestProjectRoot:
    """Test project root discovery and rules directory resolution."""

    def test_find_project_root(self, tmp_path):
        (tmp_path / ".claude").mkdir()
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()

    def test_claude_file_is_not_a_marker(self, tmp_path):
        project = tmp_path / "project"
        project.mkdir()
        (project / ".claude").write_text("", encoding="utf-8")

        root = find_project_root(project)

        assert root != project.resolve()

    def test_resolve_relative_rules_dir(self, tmp_path):
        (tmp_path / ".claude" / "rules").mkdir(parents=True)

        assert resolve_rules_dir(".claude/rules", tmp_path) == (tmp_path / ".claude" / "rules").resolve()

    def test_absolute_rules_dir_needs_no_root(self, tmp_path):
        assert resolve_rules_dir(tmp_path / "anywhere", tmp_path) == tmp_path / "anywhere"
