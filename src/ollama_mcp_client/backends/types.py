"""Data types for tool server backends.

This module defines the descriptors produced by catalog discovery, the
per-backend connection record and the typed invocation request that every
call path is collapsed into.
"""

import asyncio
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mcp import ClientSession

from ollama_mcp_client.errors import ToolCallParseError


class ConnectionState(str, Enum):
    """Lifecycle of a backend connection."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool exposed by a backend.

    Attributes:
        name: Tool name, unique across the registry
        backend_id: Name of the server that serves the tool
        description: Human readable description from the server
        input_schema: JSON schema of the arguments, if the server sent one
    """

    name: str
    backend_id: str
    description: str = ""
    input_schema: dict[str, Any] | None = None


@dataclass(frozen=True)
class ResourceDescriptor:
    """A resource exposed by a backend, keyed by URI."""

    uri: str
    backend_id: str
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None


@dataclass
class BackendConnection:
    """An MCP session with one tool server process.

    Owned by BackendConnectionManager. ``lock`` serializes requests so a
    backend only ever sees one outstanding request from this client.
    """

    backend_id: str
    state: ConnectionState = ConnectionState.CONNECTING
    session: ClientSession | None = None
    exit_stack: AsyncExitStack | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED and self.session is not None


@dataclass(frozen=True)
class ToolInvocationRequest:
    """A request to call one tool.

    Attributes:
        tool: Tool name
        args: Tool arguments
        backend_id: Pin the call to this server instead of the registry default
    """

    tool: str
    args: dict[str, Any] = field(default_factory=dict)
    backend_id: str | None = None

    @classmethod
    def from_qualified_name(
        cls, qualified_name: str, args: dict[str, Any] | None = None
    ) -> "ToolInvocationRequest":
        """Build a request from a ``server.tool`` or ``server:tool`` name.

        A bare tool name is accepted and left unpinned.

        Raises:
            ToolCallParseError: If the name has more than one separator or an
                empty part
        """
        for separator in (".", ":"):
            if separator in qualified_name:
                parts = qualified_name.split(separator)
                if len(parts) != 2 or not all(parts):
                    raise ToolCallParseError(
                        "Use server.tool format, e.g., pg_log.log_chat"
                    )
                return cls(tool=parts[1], args=args or {}, backend_id=parts[0])

        if not qualified_name:
            raise ToolCallParseError("Tool name must not be empty")
        return cls(tool=qualified_name, args=args or {})
