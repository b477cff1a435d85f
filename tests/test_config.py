"""Tests for the config module."""

import json

import pytest
from pydantic import ValidationError

from hless.config.loader import (
    ConfigNotFoundError,
    default_config_path,
    load_config,
    load_config_from_string,
    save_config,
)
from hless.config.schema import Config


class TestLoadConfigFromString:
    """Tests for load_config_from_string function."""

    def test_load_minimal_config(self):
        """Test loading an empty document."""
        config = load_config_from_string("")

        assert config.is_empty
        assert config.pager is None

    def test_load_full_config(self, sample_config):
        """Test loading all sections."""
        assert sample_config.foreground["ERROR"] == "#ff0000"
        assert sample_config.background["HIGHLIGHT"] == "#000080"
        assert sample_config.aliases == {"info": "INFO", "warn": "WARNING"}

    def test_capitalized_keys(self):
        """Test the capitalized section names load."""
        config = load_config_from_string(
            '{"Foreground": {"ERROR": "#ff0000"}, "Background": {}, "Aliases": {"e": "ERROR"}}'
        )

        assert config.foreground == {"ERROR": "#ff0000"}
        assert config.aliases == {"e": "ERROR"}

    def test_null_sections(self):
        """Test empty sections are empty mappings."""
        config = load_config_from_string("foreground:\naliases:\n")

        assert config.foreground == {}
        assert config.aliases == {}

    def test_pager_string(self):
        """Test the pager may be given as one command string."""
        config = load_config_from_string('pager: "less -R -S -"')

        assert config.pager == ["less", "-R", "-S", "-"]

    def test_malformed_color(self):
        """Test a malformed color fails validation."""
        with pytest.raises(ValidationError, match="ERROR"):
            load_config_from_string('foreground:\n  ERROR: "#ff00"\n')

    def test_missing_hash(self):
        """Test a color without # fails validation."""
        with pytest.raises(ValueError):
            load_config_from_string('background:\n  ERROR: "ff0000"\n')

    def test_wrong_structure(self):
        """Test a section of the wrong type fails validation."""
        with pytest.raises(ValidationError):
            load_config_from_string("foreground: [ERROR, WARNING]\n")

    def test_not_a_mapping(self):
        """Test a document that is not a mapping is rejected."""
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config_from_string("- just\n- a list\n")

    def test_duplicate_section(self):
        """Test a section given in two spellings is rejected."""
        with pytest.raises(ValidationError, match="more than once"):
            load_config_from_string(
                '{"Foreground": {"A": "#000000"}, "foreground": {"B": "#ffffff"}}'
            )

    def test_unquoted_color(self):
        """Test an unquoted hex color, which YAML reads as a comment."""
        with pytest.raises(ValidationError, match="no color for keyword 'ERROR'"):
            load_config_from_string("foreground:\n  ERROR: #ff0000\n")

    def test_invalid_yaml(self):
        """Test a syntax error is reported as ValueError."""
        with pytest.raises(ValueError):
            load_config_from_string("foreground: {ERROR: ")


class TestConfig:
    """Tests for Config class."""

    def test_merge(self, sample_config):
        """Test overlaying command-line settings."""
        overrides = Config(foreground={"ERROR": "#00ff00", "NEW": "#0000ff"}, pager=["cat"])

        merged = sample_config.merge(overrides)

        assert merged.foreground["ERROR"] == "#00ff00"
        assert merged.foreground["NEW"] == "#0000ff"
        assert merged.foreground["WARNING"] == "#ffff00"
        assert merged.aliases == sample_config.aliases
        assert merged.pager == ["cat"]

    def test_merge_keeps_pager(self):
        """Test merging without a pager keeps the current one."""
        merged = Config(pager=["more"]).merge(Config())

        assert merged.pager == ["more"]


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_nonexistent_file(self, tmp_path):
        """Test a missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "missing")

    def test_missing_is_file_not_found(self, tmp_path):
        """Test ConfigNotFoundError is a FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing"))

    def test_load_json_file(self, tmp_path):
        """Test a JSON config file loads."""
        path = tmp_path / "default"
        path.write_text(json.dumps({"Foreground": {"ERROR": "#ff0000"}, "Aliases": {"e": "E"}}))

        config = load_config(path)

        assert config.foreground == {"ERROR": "#ff0000"}
        assert config.aliases == {"e": "E"}

    def test_env_override(self, config_file):
        """Test $HLESS_CONFIG selects the default path."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text("aliases:\n  a: b\n")

        assert default_config_path() == config_file
        assert load_config().aliases == {"a": "b"}


class TestSaveConfig:
    """Tests for save_config function."""

    def test_round_trip(self, tmp_path, sample_config):
        """Test a saved config loads back equal."""
        path = save_config(sample_config, tmp_path / "nested" / "default")

        assert path.is_file()
        assert load_config(path) == sample_config

    def test_no_pager_key_when_unset(self, tmp_path):
        """Test an unset pager is not written."""
        path = save_config(Config(aliases={"a": "b"}), tmp_path / "default")

        assert "pager" not in path.read_text()
