"""Configuration module for ollama-mcp-client.

Process-level settings come from pydantic-settings (environment variables with
the OLLAMA_MCP_ prefix). The client config file, which lists the MCP servers to
launch, the Ollama host and model, and the prompt templates, is described by
the pydantic models below and persisted by ``services.config_store``.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

TOOL_RESULT_PLACEHOLDER = "{TOOL_RESULT}"

DEFAULT_SYSTEM_INSTRUCTIONS = (
    "You are a helpful AI assistant with access to various tools through "
    "MCP (Model Context Protocol) servers."
)

DEFAULT_FOLLOW_UP_TEMPLATE = (
    "Tool result: {TOOL_RESULT}\n\n"
    "Please provide a helpful summary of this information using proper "
    "markdown formatting."
)


class ClientSettings(BaseSettings):
    """Main configuration settings for ollama-mcp-client.

    All settings can be overridden via environment variables with the
    OLLAMA_MCP_ prefix. For example, OLLAMA_MCP_PORT overrides port.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Client config file
    config_path: str = "mcp_config.json"
    import_claude_config: bool = True

    # Conversation
    history_max_turns: int = 20
    reasoning_start: str = "<think>"
    reasoning_end: str = "</think>"

    # Qualified tool name called after every REPL turn, e.g. "pg_log.log_chat"
    chat_log_tool: str | None = None

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="OLLAMA_MCP_")

    @property
    def resolved_config_path(self) -> Path:
        """Get the absolute path of the client config file."""
        return Path(self.config_path).expanduser().resolve()


class ServerLaunchSpec(BaseModel):
    """How to launch one MCP server as a subprocess."""

    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)


class OllamaConfig(BaseModel):
    """Ollama host and default model."""

    host: str = "http://localhost:11434"
    default_model: str = Field(default="llama3.2", alias="defaultModel")

    model_config = ConfigDict(populate_by_name=True)


class Instructions(BaseModel):
    """Prompt templates.

    Attributes:
        system: System instructions sent at the start of every request
        follow_up: Template for the re-prompt after a tool call; the tool result
                   replaces the {TOOL_RESULT} placeholder
    """

    system: str = DEFAULT_SYSTEM_INSTRUCTIONS
    follow_up: str = Field(default=DEFAULT_FOLLOW_UP_TEMPLATE, alias="followUp")

    model_config = ConfigDict(populate_by_name=True)


class ClientConfig(BaseModel):
    """Contents of the client config file."""

    mcp_servers: dict[str, ServerLaunchSpec] = Field(
        default_factory=dict, alias="mcpServers"
    )
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    instructions: Instructions = Field(default_factory=Instructions)

    model_config = ConfigDict(populate_by_name=True)
