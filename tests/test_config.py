"""Tests for configuration management."""

import pytest
import yaml

from runstate.config import (
    ConfigurationError,
    StateConfig,
    _parse_env_bool,
    load_config,
    validate_config,
)


class TestStateConfig:
    """Tests for StateConfig dataclass."""

    def test_defaults(self):
        config = StateConfig()
        assert config.report_format == "console"
        assert config.show_running is True
        assert config.fuzzy is False
        assert config.log_level == "INFO"

    def test_log_level_uppercased(self):
        assert StateConfig(log_level="debug").log_level == "DEBUG"


class TestParseEnvBool:
    """Tests for _parse_env_bool helper."""

    def test_returns_none_when_not_set(self, monkeypatch):
        monkeypatch.delenv("RUNSTATE_TEST_BOOL", raising=False)
        assert _parse_env_bool("RUNSTATE_TEST_BOOL") is None

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on"])
    def test_true_values(self, monkeypatch, value):
        monkeypatch.setenv("RUNSTATE_TEST_BOOL", value)
        assert _parse_env_bool("RUNSTATE_TEST_BOOL") is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "off", ""])
    def test_false_values(self, monkeypatch, value):
        monkeypatch.setenv("RUNSTATE_TEST_BOOL", value)
        assert _parse_env_bool("RUNSTATE_TEST_BOOL") is False

    def test_raises_on_invalid_value(self, monkeypatch):
        monkeypatch.setenv("RUNSTATE_TEST_BOOL", "maybe")
        with pytest.raises(ConfigurationError, match="must be a boolean"):
            _parse_env_bool("RUNSTATE_TEST_BOOL")


@pytest.fixture
def clean_env(monkeypatch):
    for var in (
        "RUNSTATE_REPORT_FORMAT",
        "RUNSTATE_LOG_LEVEL",
        "RUNSTATE_FUZZY",
        "RUNSTATE_SHOW_RUNNING",
    ):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, clean_env):
        config = load_config()
        assert config == StateConfig()

    def test_from_file(self, clean_env, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            yaml.safe_dump({"report_format": "json", "fuzzy": True, "show_running": False})
        )
        config = load_config(str(config_file))
        assert config.report_format == "json"
        assert config.fuzzy is True
        assert config.show_running is False

    def test_empty_file(self, clean_env, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == StateConfig()

    def test_env_overrides_file(self, clean_env, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("report_format: console\nfuzzy: false\n")
        clean_env.setenv("RUNSTATE_REPORT_FORMAT", "json")
        clean_env.setenv("RUNSTATE_FUZZY", "true")
        clean_env.setenv("RUNSTATE_LOG_LEVEL", "warning")
        config = load_config(str(config_file))
        assert config.report_format == "json"
        assert config.fuzzy is True
        assert config.log_level == "WARNING"

    def test_env_show_running(self, clean_env):
        clean_env.setenv("RUNSTATE_SHOW_RUNNING", "off")
        assert load_config().show_running is False

    def test_missing_file(self, clean_env, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, clean_env, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("report_format: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(config_file))

    def test_non_mapping_file(self, clean_env, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(str(config_file))

    def test_unknown_key(self, clean_env, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("server_url: http://localhost:8080\n")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(str(config_file))


class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid_defaults(self):
        assert validate_config(StateConfig()) == []

    def test_invalid_report_format(self):
        errors = validate_config(StateConfig(report_format="junit"))
        assert len(errors) == 1
        assert "report_format" in errors[0]

    def test_invalid_log_level(self):
        errors = validate_config(StateConfig(log_level="loud"))
        assert any("log_level" in e for e in errors)

    def test_non_bool_flags(self):
        errors = validate_config(StateConfig(fuzzy="sometimes", show_running=1))
        assert any("fuzzy" in e for e in errors)
        assert any("show_running" in e for e in errors)
