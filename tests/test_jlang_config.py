"""
Tests for interpreter configuration loading.
"""

import pytest

from jlang import ConfigError, InterpreterConfig, load_config
from jlang.config import load_yaml_config


class TestDefaults:
    """Test built-in settings."""

    def test_defaults(self):
        config = InterpreterConfig()
        assert config.value_overhead == 16
        assert config.max_call_depth == 100
        assert config.trace is True
        assert config.encoding == "utf-8"

    def test_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == InterpreterConfig()

    def test_with_overrides(self):
        config = InterpreterConfig().with_overrides(trace=False)
        assert config.trace is False
        assert config.max_call_depth == 100

    def test_overrides_validated(self):
        with pytest.raises(ConfigError):
            InterpreterConfig().with_overrides(max_call_depth="deep")


class TestYamlConfig:
    """Test loading settings from YAML files."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text('schema_version: "1.0"\ntrace: false\nmax_call_depth: 7\n')
        config = load_config(path)
        assert config.trace is False
        assert config.max_call_depth == 7

    def test_local_file(self, tmp_path, monkeypatch):
        (tmp_path / "jlang.yaml").write_text("value_overhead: 0\n")
        monkeypatch.chdir(tmp_path)
        assert load_config().value_overhead == 0

    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "other.yaml"
        path.write_text("default_window_title: Popup\n")
        monkeypatch.setenv("JLANG_CONFIG", str(path))
        assert load_config().default_window_title == "Popup"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_config(path) == {}

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("colour: blue\n")
        with pytest.raises(ConfigError, match="Unknown configuration key 'colour'"):
            load_config(path)

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("max_call_depth: true\n")
        with pytest.raises(ConfigError, match="must be an integer"):
            load_config(path)

    def test_negative(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("value_overhead: -1\n")
        with pytest.raises(ConfigError, match="must not be negative"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="expected a mapping"):
            load_config(path)

    def test_unsupported_schema(self, tmp_path):
        path = tmp_path / "v2.yaml"
        path.write_text('schema_version: "2.0"\n')
        with pytest.raises(ConfigError, match="Unsupported schema version"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("trace: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "absent.yaml")


class TestEnvironmentOverrides:
    """Test JLANG_* environment variables."""

    def test_env_wins_over_file(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("trace: true\nmax_call_depth: 7\n")
        monkeypatch.setenv("JLANG_TRACE", "off")
        monkeypatch.setenv("JLANG_MAX_CALL_DEPTH", "12")
        config = load_config(path)
        assert config.trace is False
        assert config.max_call_depth == 12

    def test_overhead(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("JLANG_VALUE_OVERHEAD", "4")
        assert load_config().value_overhead == 4

    def test_bad_boolean(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("JLANG_TRACE", "maybe")
        with pytest.raises(ConfigError, match="JLANG_TRACE must be a boolean"):
            load_config()

    def test_bad_integer(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("JLANG_MAX_CALL_DEPTH", "ten")
        with pytest.raises(ConfigError, match="JLANG_MAX_CALL_DEPTH must be an integer"):
            load_config()
