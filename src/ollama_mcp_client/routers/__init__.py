"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
"""

from ollama_mcp_client.routers import chat, config, health, models, tools

__all__ = [
    "chat",
    "config",
    "health",
    "models",
    "tools",
]
