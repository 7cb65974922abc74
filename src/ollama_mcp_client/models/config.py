"""Pydantic models for the /api/v1/config endpoints."""

from pydantic import BaseModel, Field


class OllamaSettingsPayload(BaseModel):
    host: str
    default_model: str


class InstructionsPayload(BaseModel):
    system: str
    follow_up: str = Field(description="Follow-up template with a {TOOL_RESULT} placeholder")


class ConfigResponse(BaseModel):
    """Current client configuration."""

    config_path: str = Field(description="File the configuration is saved to")
    ollama: OllamaSettingsPayload
    mcp_servers: list[str] = Field(description="Configured MCP server names")
    instructions: InstructionsPayload


class OllamaSettingsUpdate(BaseModel):
    host: str | None = None
    default_model: str | None = None


class InstructionsUpdate(BaseModel):
    system: str | None = None
    follow_up: str | None = None


class ConfigUpdateRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    ollama: OllamaSettingsUpdate | None = None
    instructions: InstructionsUpdate | None = None
