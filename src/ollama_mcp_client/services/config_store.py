"""Client config file management.

This module provides the ConfigStore class, which loads and saves the JSON
client config (MCP servers, Ollama settings and prompt templates). When no
config file exists yet, MCP servers can be imported from a Claude Desktop
config; the store always writes to its own file.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ollama_mcp_client.config import (
    ClientConfig,
    Instructions,
    OllamaConfig,
    ServerLaunchSpec,
)

logger = logging.getLogger(__name__)

CLAUDE_DESKTOP_CONFIG_PATHS = (
    Path.home() / ".config" / "claude" / "claude_desktop_config.json",
    Path.home() / "AppData" / "Roaming" / "Claude" / "claude_desktop_config.json",
    Path.home()
    / "Library"
    / "Application Support"
    / "Claude"
    / "claude_desktop_config.json",
)


class ConfigStore:
    """Loads, mutates and persists the client config.

    Attributes:
        path: File the config is saved to
        config: The in-memory config (defaults until ``load()`` is called)
    """

    def __init__(
        self,
        path: Path,
        import_claude_config: bool = True,
        claude_config_paths: tuple[Path, ...] = CLAUDE_DESKTOP_CONFIG_PATHS,
    ):
        self.path = path
        self.import_claude_config = import_claude_config
        self.claude_config_paths = claude_config_paths
        self.config = ClientConfig()

    def load(self) -> ClientConfig:
        """Load the config file, importing or creating one if needed.

        Returns:
            ClientConfig: The loaded config

        Raises:
            ValueError: If the file exists but is not a valid config
        """
        if self.path.exists():
            logger.info(f"Loading config from file: {self.path}")
            self.config = self._read(self.path)
            logger.info(
                f"Loaded {len(self.config.mcp_servers)} MCP servers, "
                f"Ollama host={self.config.ollama.host}, "
                f"model={self.config.ollama.default_model}"
            )
            return self.config

        claude_path = self._find_claude_config()
        if claude_path is not None:
            self.config = ClientConfig(mcp_servers=self._read_claude_servers(claude_path))
            logger.info(
                f"Loaded {len(self.config.mcp_servers)} MCP servers from Claude "
                f"config: {claude_path}"
            )
        else:
            logger.warning("No config file found. Creating default configuration.")
            self.config = ClientConfig()

        self.save()
        return self.config

    def save(self) -> None:
        """Write the config to ``path``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            self.config.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        logger.info(f"Config saved to: {self.path}")

    def update_ollama(
        self, host: str | None = None, default_model: str | None = None
    ) -> OllamaConfig:
        update = {}
        if host is not None:
            update["host"] = host
        if default_model is not None:
            update["default_model"] = default_model
        self.config.ollama = self.config.ollama.model_copy(update=update)
        return self.config.ollama

    def update_instructions(
        self, system: str | None = None, follow_up: str | None = None
    ) -> Instructions:
        update = {}
        if system is not None:
            update["system"] = system
        if follow_up is not None:
            update["follow_up"] = follow_up
        self.config.instructions = self.config.instructions.model_copy(update=update)
        return self.config.instructions

    def add_server(self, name: str, launch_spec: ServerLaunchSpec) -> None:
        self.config.mcp_servers[name] = launch_spec

    def remove_server(self, name: str) -> None:
        """Remove a server.

        Raises:
            KeyError: If no server with this name is configured
        """
        if name not in self.config.mcp_servers:
            raise KeyError(f"Server '{name}' is not configured")
        del self.config.mcp_servers[name]

    def _read(self, path: Path) -> ClientConfig:
        try:
            return ClientConfig.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise ValueError(f"Error loading config from {path}: {e}") from e

    def _find_claude_config(self) -> Path | None:
        if not self.import_claude_config:
            return None
        for candidate in self.claude_config_paths:
            if candidate.exists():
                return candidate
        return None

    def _read_claude_servers(self, path: Path) -> dict[str, ServerLaunchSpec]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ValueError(f"Error loading config from {path}: {e}") from e

        servers = data.get("mcpServers")
        if servers is None:
            servers = data.get("mcp", {}).get("servers", {})

        launch_specs = {}
        for name, spec in servers.items():
            # Only stdio servers can be imported; remote (url) entries are skipped.
            try:
                launch_specs[name] = ServerLaunchSpec.model_validate(spec)
            except ValidationError as e:
                logger.warning(f"Skipping MCP server '{name}' from {path}: {e}")
        return launch_specs
