"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and
configures the FastAPI application instance, including lifespan management for
startup/shutdown and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ollama_mcp_client import __version__
from ollama_mcp_client.backends import BackendHub
from ollama_mcp_client.config import ClientSettings
from ollama_mcp_client.ollama import OllamaClient
from ollama_mcp_client.routers import chat, config, health, models, tools
from ollama_mcp_client.services import (
    ChatOrchestrator,
    ConfigStore,
    ConversationHistory,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Loads the client config, connects to Ollama and to every configured MCP
    server, and builds the shared orchestrator. The MCP sessions are closed on
    shutdown from this same task, as the stdio transport requires.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ClientSettings = app.state.settings

    config_store = ConfigStore(
        settings.resolved_config_path,
        import_claude_config=settings.import_claude_config,
    )
    client_config = config_store.load()
    app.state.config_store = config_store

    app.state.ollama_client = OllamaClient(host=client_config.ollama.host)
    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    hub = BackendHub(client_config.mcp_servers)
    app.state.hub = hub

    try:
        await hub.start()
        logger.info(f"Available tools: {hub.available_tools()}")

        app.state.orchestrator = ChatOrchestrator(
            ollama_client=app.state.ollama_client,
            hub=hub,
            config_store=config_store,
            history=ConversationHistory(max_turns=settings.history_max_turns),
            reasoning_markers=(settings.reasoning_start, settings.reasoning_end),
        )

        yield
    finally:
        await hub.close()
        logger.info("MCP connections closed")
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(settings: ClientSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional ClientSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from ollama_mcp_client.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="ollama-mcp-client",
        description="Chat with local Ollama models that call MCP server tools",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(tools.router)
    app.include_router(models.router)
    app.include_router(config.router)

    return app
