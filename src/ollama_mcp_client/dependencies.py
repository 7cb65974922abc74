"""Dependency injection providers for FastAPI endpoints.

The long-lived objects (Ollama client, backend hub, orchestrator, config
store) are created once in the app lifespan and stored in app.state; these
functions hand them to route handlers.
"""

from functools import lru_cache
from typing import Any

from fastapi import HTTPException, Request

from ollama_mcp_client.backends import BackendHub
from ollama_mcp_client.config import ClientSettings
from ollama_mcp_client.ollama import OllamaClient
from ollama_mcp_client.services import ChatOrchestrator, ConfigStore


@lru_cache
def get_settings() -> ClientSettings:
    """Get the application settings instance.

    Cached so the same settings are reused across all requests. Settings are
    loaded from environment variables with the OLLAMA_MCP_ prefix.
    """
    return ClientSettings()


def _from_state(request: Request, name: str, label: str) -> Any:
    if not hasattr(request.app.state, name):
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": "not_initialized",
                    "message": f"{label} not initialized",
                    "details": {},
                }
            },
        )
    return getattr(request.app.state, name)


def get_ollama_client(request: Request) -> OllamaClient:
    """Get the Ollama client from app state.

    Raises:
        HTTPException: 503 if the client is not initialized.
    """
    return _from_state(request, "ollama_client", "Ollama client")


def get_hub(request: Request) -> BackendHub:
    """Get the MCP backend hub from app state.

    Raises:
        HTTPException: 503 if the hub is not initialized.
    """
    return _from_state(request, "hub", "MCP backend hub")


def get_orchestrator(request: Request) -> ChatOrchestrator:
    """Get the shared chat orchestrator from app state.

    Raises:
        HTTPException: 503 if the orchestrator is not initialized.
    """
    return _from_state(request, "orchestrator", "Chat orchestrator")


def get_config_store(request: Request) -> ConfigStore:
    """Get the client config store from app state.

    Raises:
        HTTPException: 503 if the store is not initialized.
    """
    return _from_state(request, "config_store", "Config store")
