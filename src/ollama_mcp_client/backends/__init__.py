"""MCP tool server backends.

This package launches tool servers over stdio, discovers their tools and
resources, and dispatches invocations to the server that owns each tool.
"""

from ollama_mcp_client.backends.connection import BackendConnectionManager
from ollama_mcp_client.backends.hub import BackendHub
from ollama_mcp_client.backends.registry import ToolRegistry
from ollama_mcp_client.backends.types import (
    BackendConnection,
    ConnectionState,
    ResourceDescriptor,
    ToolDescriptor,
    ToolInvocationRequest,
)

__all__ = [
    "BackendConnection",
    "BackendConnectionManager",
    "BackendHub",
    "ConnectionState",
    "ResourceDescriptor",
    "ToolDescriptor",
    "ToolInvocationRequest",
    "ToolRegistry",
]
