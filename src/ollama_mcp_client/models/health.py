"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of ollama-mcp-client.
        ollama_connected: Whether Ollama answered the connectivity check.
        ollama_host: The Ollama host URL.
        servers: Connected MCP servers.
        tool_count: Number of tools in the registry.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of ollama-mcp-client")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    servers: list[str] = Field(
        default_factory=list, description="Connected MCP servers"
    )
    tool_count: int = Field(default=0, description="Number of available tools")
