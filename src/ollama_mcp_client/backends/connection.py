"""MCP stdio connection manager.

This module launches each configured tool server as a subprocess, keeps one
``mcp.ClientSession`` per server open for the lifetime of the client, and
performs single request/response exchanges over it.

Sessions are opened inside an AsyncExitStack. The stdio transport runs on anyio
task groups, so connections must be closed from the task that opened them and
in reverse order; ``close_all()`` does both.
"""

import logging
import os
from contextlib import AsyncExitStack
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError

from ollama_mcp_client.backends.types import (
    BackendConnection,
    ConnectionState,
    ResourceDescriptor,
    ToolDescriptor,
)
from ollama_mcp_client.config import ServerLaunchSpec
from ollama_mcp_client.errors import BackendConnectionError, InvocationError

logger = logging.getLogger(__name__)


def _error_text(result: Any) -> str:
    """Join the text blocks of an errored tool result."""
    texts = [
        getattr(block, "text", "")
        for block in getattr(result, "content", None) or []
        if getattr(block, "type", None) == "text"
    ]
    message = "\n".join(text for text in texts if text)
    return message or "Tool reported an error"


def _to_dict(result: Any) -> dict[str, Any]:
    if hasattr(result, "model_dump"):
        return result.model_dump(mode="json", exclude_none=True)
    return dict(result)


class BackendConnectionManager:
    """Owns one MCP session per configured tool server.

    Attributes:
        client_name: Name announced to servers during initialization
    """

    def __init__(self, client_name: str = "ollama-mcp-client") -> None:
        self.client_name = client_name
        self._connections: dict[str, BackendConnection] = {}

    @property
    def connections(self) -> list[BackendConnection]:
        """Open connections in the order they were established."""
        return [c for c in self._connections.values() if c.is_connected]

    def get(self, backend_id: str) -> BackendConnection | None:
        """Get the open connection for a backend, if any."""
        connection = self._connections.get(backend_id)
        if connection is None or not connection.is_connected:
            return None
        return connection

    async def connect(
        self, backend_id: str, launch_spec: ServerLaunchSpec
    ) -> BackendConnection:
        """Launch a tool server and initialize an MCP session with it.

        Args:
            backend_id: Name of the server in the client config
            launch_spec: Command, arguments and extra environment

        Returns:
            BackendConnection: The connected backend

        Raises:
            BackendConnectionError: If the process cannot be started or the
                MCP handshake fails
        """
        connection = BackendConnection(backend_id=backend_id)
        server_params = StdioServerParameters(
            command=launch_spec.command,
            args=launch_spec.args,
            env={**os.environ, **launch_spec.env},
        )

        exit_stack = AsyncExitStack()
        try:
            read, write = await exit_stack.enter_async_context(
                stdio_client(server_params)
            )
            session = await exit_stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
        except Exception as e:
            connection.state = ConnectionState.CLOSED
            try:
                await exit_stack.aclose()
            except Exception as close_error:
                logger.debug(f"Cleanup after failed connect to {backend_id}: {close_error}")
            raise BackendConnectionError(backend_id, str(e)) from e

        connection.session = session
        connection.exit_stack = exit_stack
        connection.state = ConnectionState.CONNECTED
        self._connections[backend_id] = connection
        logger.info(f"Connected to {backend_id} MCP server")
        return connection

    async def connect_all(
        self, launch_specs: dict[str, ServerLaunchSpec]
    ) -> list[BackendConnection]:
        """Connect to every configured server, skipping the ones that fail.

        Returns:
            list[BackendConnection]: The connections that succeeded
        """
        connected = []
        for backend_id, launch_spec in launch_specs.items():
            try:
                connected.append(await self.connect(backend_id, launch_spec))
            except BackendConnectionError as e:
                logger.error(str(e))
                continue
        return connected

    async def list_tools(self, connection: BackendConnection) -> list[ToolDescriptor]:
        """Request the tool catalog of a backend."""
        session = self._require_session(connection)
        async with connection.lock:
            result = await session.list_tools()

        return [
            ToolDescriptor(
                name=tool.name,
                backend_id=connection.backend_id,
                description=tool.description or "",
                input_schema=tool.inputSchema,
            )
            for tool in result.tools
        ]

    async def list_resources(
        self, connection: BackendConnection
    ) -> list[ResourceDescriptor]:
        """Request the resource catalog of a backend.

        Raises:
            McpError: Passed through unchanged so callers can recognise
                "method not found" from servers without resources
        """
        session = self._require_session(connection)
        async with connection.lock:
            result = await session.list_resources()

        return [
            ResourceDescriptor(
                uri=str(resource.uri),
                backend_id=connection.backend_id,
                name=resource.name,
                description=resource.description,
                mime_type=resource.mimeType,
            )
            for resource in result.resources or []
        ]

    async def invoke(
        self,
        connection: BackendConnection,
        tool_name: str,
        args: dict[str, Any],
    ) -> dict[str, Any]:
        """Call a tool and wait for its result.

        Args:
            connection: The backend serving the tool
            tool_name: Name of the tool
            args: Tool arguments

        Returns:
            dict: The CallToolResult as JSON-compatible data

        Raises:
            InvocationError: If the request fails or the tool reports an error
        """
        session = self._require_session(connection)
        logger.info(
            f"Calling tool '{tool_name}' on server '{connection.backend_id}' "
            f"with args: {args}"
        )

        try:
            async with connection.lock:
                result = await session.call_tool(tool_name, arguments=args)
        except McpError as e:
            raise InvocationError(e.error.message) from e
        except Exception as e:
            raise InvocationError(str(e)) from e

        if getattr(result, "isError", False):
            raise InvocationError(_error_text(result))

        return _to_dict(result)

    async def read_resource(
        self, connection: BackendConnection, uri: str
    ) -> dict[str, Any]:
        """Read one resource from a backend.

        Raises:
            InvocationError: If the backend rejects the request
        """
        session = self._require_session(connection)
        logger.info(f"Accessing resource: {uri}")

        try:
            async with connection.lock:
                result = await session.read_resource(uri)
        except McpError as e:
            raise InvocationError(e.error.message) from e
        except Exception as e:
            raise InvocationError(str(e)) from e

        return _to_dict(result)

    async def close_all(self) -> None:
        """Close every connection, newest first.

        Each close is attempted even if an earlier one failed.
        """
        for backend_id, connection in reversed(list(self._connections.items())):
            if connection.exit_stack is None:
                connection.state = ConnectionState.CLOSED
                continue
            try:
                await connection.exit_stack.aclose()
                logger.info(f"Closed connection to {backend_id}")
            except Exception as e:
                logger.error(f"Error closing {backend_id}: {e}")
            finally:
                connection.state = ConnectionState.CLOSED
                connection.session = None
                connection.exit_stack = None

        self._connections.clear()

    def _require_session(self, connection: BackendConnection) -> ClientSession:
        if not connection.is_connected or connection.session is None:
            raise InvocationError(
                f"Server '{connection.backend_id}' is not connected"
            )
        return connection.session
