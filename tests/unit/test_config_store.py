"""Unit tests for settings and the client config store."""

import json

import pytest

from ollama_mcp_client.config import (
    DEFAULT_FOLLOW_UP_TEMPLATE,
    ClientConfig,
    ClientSettings,
    ServerLaunchSpec,
)
from ollama_mcp_client.services import ConfigStore


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "mcp_config.json"


class TestClientSettings:
    """Tests for environment-based settings."""

    def test_defaults(self):
        settings = ClientSettings()

        assert settings.port == 8000
        assert settings.history_max_turns == 20
        assert settings.reasoning_start == "<think>"
        assert settings.chat_log_tool is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_MCP_PORT", "9001")
        monkeypatch.setenv("OLLAMA_MCP_CHAT_LOG_TOOL", "pg_log.log_chat")

        settings = ClientSettings()

        assert settings.port == 9001
        assert settings.chat_log_tool == "pg_log.log_chat"

    def test_resolved_config_path(self, tmp_path):
        settings = ClientSettings(config_path=str(tmp_path / "c.json"))
        assert settings.resolved_config_path == tmp_path.resolve() / "c.json"


class TestClientConfig:
    """Tests for the config file model."""

    def test_camel_case_keys(self):
        config = ClientConfig.model_validate(
            {
                "mcpServers": {"weather": {"command": "node", "args": ["weather.js"]}},
                "ollama": {"host": "http://gpu:11434", "defaultModel": "qwen3"},
                "instructions": {"followUp": "R: {TOOL_RESULT}"},
            }
        )

        assert config.mcp_servers["weather"].args == ["weather.js"]
        assert config.ollama.default_model == "qwen3"
        assert config.instructions.follow_up == "R: {TOOL_RESULT}"

    def test_defaults(self):
        config = ClientConfig()

        assert config.mcp_servers == {}
        assert config.ollama.host == "http://localhost:11434"
        assert config.instructions.follow_up == DEFAULT_FOLLOW_UP_TEMPLATE
        assert "{TOOL_RESULT}" in config.instructions.follow_up


class TestConfigStore:
    """Tests for loading and saving the config file."""

    def test_load_creates_default_file(self, config_path):
        store = ConfigStore(config_path, import_claude_config=False)

        config = store.load()

        assert config == ClientConfig()
        assert config_path.exists()
        data = json.loads(config_path.read_text())
        assert data["mcpServers"] == {}
        assert data["ollama"]["defaultModel"] == "llama3.2"

    def test_load_existing_file(self, config_path):
        config_path.write_text(
            json.dumps(
                {
                    "mcpServers": {
                        "pg_log": {
                            "command": "python",
                            "args": ["log_server.py"],
                            "env": {"PGHOST": "db"},
                        }
                    },
                    "ollama": {"host": "http://gpu:11434", "defaultModel": "qwen3"},
                }
            )
        )
        store = ConfigStore(config_path, import_claude_config=False)

        config = store.load()

        assert config.mcp_servers["pg_log"].env == {"PGHOST": "db"}
        assert config.ollama.host == "http://gpu:11434"

    def test_invalid_file(self, config_path):
        config_path.write_text('{"mcpServers": {"x": {"args": []}}}')
        store = ConfigStore(config_path, import_claude_config=False)

        with pytest.raises(ValueError, match="Error loading config"):
            store.load()

    def test_malformed_json(self, config_path):
        config_path.write_text("{not json")
        store = ConfigStore(config_path, import_claude_config=False)

        with pytest.raises(ValueError):
            store.load()

    def test_imports_claude_desktop_servers(self, config_path, tmp_path):
        claude_path = tmp_path / "claude_desktop_config.json"
        claude_path.write_text(
            json.dumps(
                {
                    "mcpServers": {
                        "weather": {"command": "node", "args": ["weather.js"]},
                        "remote": {"url": "https://example.com/mcp"},
                    }
                }
            )
        )
        store = ConfigStore(config_path, claude_config_paths=(claude_path,))

        config = store.load()

        assert list(config.mcp_servers) == ["weather"]
        saved = json.loads(config_path.read_text())
        assert saved["mcpServers"]["weather"]["command"] == "node"
        assert json.loads(claude_path.read_text())["mcpServers"]["remote"]

    def test_imports_nested_servers_key(self, config_path, tmp_path):
        claude_path = tmp_path / "claude.json"
        claude_path.write_text(
            json.dumps({"mcp": {"servers": {"files": {"command": "mcp-files"}}}})
        )
        store = ConfigStore(config_path, claude_config_paths=(claude_path,))

        assert list(store.load().mcp_servers) == ["files"]

    def test_claude_import_disabled(self, config_path, tmp_path):
        claude_path = tmp_path / "claude.json"
        claude_path.write_text(json.dumps({"mcpServers": {"x": {"command": "x"}}}))
        store = ConfigStore(
            config_path,
            import_claude_config=False,
            claude_config_paths=(claude_path,),
        )

        assert store.load().mcp_servers == {}

    def test_updates_are_persisted(self, config_path):
        store = ConfigStore(config_path, import_claude_config=False)
        store.load()

        store.update_ollama(default_model="qwen3:8b")
        store.update_instructions(system="Be brief.")
        store.add_server("weather", ServerLaunchSpec(command="node", args=["w.js"]))
        store.save()

        reloaded = ConfigStore(config_path, import_claude_config=False).load()
        assert reloaded.ollama.default_model == "qwen3:8b"
        assert reloaded.ollama.host == "http://localhost:11434"
        assert reloaded.instructions.system == "Be brief."
        assert reloaded.instructions.follow_up == DEFAULT_FOLLOW_UP_TEMPLATE
        assert reloaded.mcp_servers["weather"].args == ["w.js"]

    def test_remove_server(self, config_path):
        store = ConfigStore(config_path, import_claude_config=False)
        store.add_server("weather", ServerLaunchSpec(command="node"))

        store.remove_server("weather")

        assert store.config.mcp_servers == {}
        with pytest.raises(KeyError):
            store.remove_server("weather")
