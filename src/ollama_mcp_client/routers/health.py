"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from ollama_mcp_client import __version__
from ollama_mcp_client.models.health import HealthResponse
from ollama_mcp_client.ollama import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Reports the version, Ollama connectivity and the connected MCP servers.
    Components that are not initialized are reported as absent rather than
    failing the check.
    """
    ollama_connected = None
    ollama_host = None
    servers: list[str] = []
    tool_count = 0

    if hasattr(request.app.state, "ollama_client"):
        ollama_client: OllamaClient = request.app.state.ollama_client
        ollama_host = ollama_client.host

        try:
            ollama_connected = await ollama_client.check_connection()
            logger.debug(f"Ollama connectivity check: {ollama_connected}")
        except Exception as e:
            logger.warning(f"Ollama connectivity check failed: {e}")
            ollama_connected = False

    if hasattr(request.app.state, "hub"):
        hub = request.app.state.hub
        servers = hub.connected_servers()
        tool_count = len(hub.available_tools())

    return HealthResponse(
        status="ok",
        version=__version__,
        ollama_connected=ollama_connected,
        ollama_host=ollama_host,
        servers=servers,
        tool_count=tool_count,
    )
