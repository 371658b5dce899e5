"""Tests for ActivityConfig env loading and the YAML config loader."""

import pytest

from agentline.engine.config import ActivityConfig
from agentline.engine.errors import AgentlineError, ConfigError
from agentline.engine.yaml_config import load_yaml_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "AGENTLINE_TOOL_RESULT_MAX_CHARS",
        "AGENTLINE_DESCRIPTION_MAX_CHARS",
        "AGENTLINE_LOADING_TEXT",
        "AGENTLINE_INCLUDE_SYSTEM",
        "AGENTLINE_RECENT_WINDOW",
        "AGENTLINE_SUGGESTION_LIMIT",
        "AGENTLINE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:
    def test_defaults(self):
        config = ActivityConfig.from_env()
        assert config == ActivityConfig()
        assert config.tool_result_max_chars == 1400
        assert config.generic_description_max_chars == 160
        assert config.loading_text == "Agent is preparing the next step..."
        assert config.include_system_messages is False
        assert config.log_level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("AGENTLINE_TOOL_RESULT_MAX_CHARS", "500")
        monkeypatch.setenv("AGENTLINE_INCLUDE_SYSTEM", "yes")
        monkeypatch.setenv("AGENTLINE_LOADING_TEXT", "Thinking...")
        monkeypatch.setenv("AGENTLINE_LOG_LEVEL", "debug")
        config = ActivityConfig.from_env()
        assert config.tool_result_max_chars == 500
        assert config.include_system_messages is True
        assert config.loading_text == "Thinking..."
        assert config.log_level == "DEBUG"

    def test_bad_integer_keeps_default(self, monkeypatch):
        monkeypatch.setenv("AGENTLINE_RECENT_WINDOW", "many")
        assert ActivityConfig.from_env().recent_message_window == 3


class TestYamlConfig:
    def test_activity_section(self, tmp_path):
        path = tmp_path / "agentline.yaml"
        path.write_text(
            "activity:\n"
            "  tool_result_max_chars: 2000\n"
            "  include_system_messages: true\n"
            "  loading_text: Working\n"
            "  log_level: debug\n"
        )
        config = load_yaml_config(path)
        assert config.tool_result_max_chars == 2000
        assert config.include_system_messages is True
        assert config.loading_text == "Working"
        assert config.log_level == "DEBUG"
        assert config.suggestion_limit == 10

    def test_env_is_the_base(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AGENTLINE_SUGGESTION_LIMIT", "4")
        path = tmp_path / "agentline.yaml"
        path.write_text("activity:\n  recent_message_window: 5\n")
        config = load_yaml_config(path)
        assert config.suggestion_limit == 4
        assert config.recent_message_window == 5

    def test_missing_section_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_config(path) == ActivityConfig()

    def test_unknown_key_ignored(self, tmp_path):
        path = tmp_path / "agentline.yaml"
        path.write_text("activity:\n  colour: blue\n")
        assert load_yaml_config(path) == ActivityConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="file not found"):
            load_yaml_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("activity: [unclosed\n")
        with pytest.raises(ConfigError, match="YAML parse error"):
            load_yaml_config(path)

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("activity: 3\n")
        with pytest.raises(ConfigError):
            load_yaml_config(path)

    def test_wrong_types(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("activity:\n  tool_result_max_chars: lots\n")
        with pytest.raises(ConfigError, match="must be an integer"):
            load_yaml_config(path)

        path.write_text("activity:\n  include_system_messages: 1\n")
        with pytest.raises(ConfigError, match="must be a boolean"):
            load_yaml_config(path)

    def test_config_error_is_agentline_error(self, tmp_path):
        with pytest.raises(AgentlineError):
            load_yaml_config(tmp_path / "nope.yaml")
