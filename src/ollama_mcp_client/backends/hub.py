"""Single entry point to all configured tool servers."""

import logging
from typing import Any

from ollama_mcp_client.backends.connection import BackendConnectionManager
from ollama_mcp_client.backends.registry import ToolRegistry
from ollama_mcp_client.backends.types import ToolInvocationRequest
from ollama_mcp_client.config import ServerLaunchSpec
from ollama_mcp_client.errors import InvocationError

logger = logging.getLogger(__name__)


class BackendHub:
    """Connects every configured MCP server and dispatches tool calls.

    Attributes:
        launch_specs: Servers to launch, keyed by backend id
        connections: The connection manager owning the sessions
        registry: The merged tool/resource catalog
    """

    def __init__(self, launch_specs: dict[str, ServerLaunchSpec]) -> None:
        self.launch_specs = launch_specs
        self.connections = BackendConnectionManager()
        self.registry = ToolRegistry(self.connections)

    async def start(self) -> None:
        """Connect to all servers and load their catalogs.

        Servers that fail to start are logged and left out.
        """
        if not self.launch_specs:
            logger.warning(
                "No MCP servers configured. Add servers to your config file."
            )
            return

        logger.info(f"Initializing {len(self.launch_specs)} MCP servers...")
        await self.connections.connect_all(self.launch_specs)
        logger.info("MCP servers initialization complete")
        await self.registry.refresh()

    async def refresh(self) -> None:
        await self.registry.refresh()

    async def call_tool(self, request: ToolInvocationRequest) -> dict[str, Any]:
        """Resolve the backend for a tool and invoke it.

        Raises:
            ToolNotFoundError: If the tool is not registered
            InvocationError: If the backend is gone or the call fails
        """
        descriptor = self.registry.resolve(request.tool, request.backend_id)
        connection = self.connections.get(descriptor.backend_id)
        if connection is None:
            raise InvocationError(
                f"Server '{descriptor.backend_id}' is not connected"
            )
        return await self.connections.invoke(connection, descriptor.name, request.args)

    async def read_resource(self, uri: str) -> dict[str, Any]:
        """Read a resource from the backend that listed it.

        Raises:
            ResourceNotFoundError: If no backend lists the URI
            InvocationError: If the backend is gone or the read fails
        """
        resource = self.registry.resolve_resource(uri)
        connection = self.connections.get(resource.backend_id)
        if connection is None:
            raise InvocationError(f"Server '{resource.backend_id}' is not connected")
        return await self.connections.read_resource(connection, uri)

    def available_tools(self) -> list[str]:
        return self.registry.list_tools()

    def available_resources(self) -> list[str]:
        return self.registry.list_resources()

    def connected_servers(self) -> list[str]:
        return [c.backend_id for c in self.connections.connections]

    def server_info(self) -> dict[str, dict[str, list[str]]]:
        return self.registry.server_info()

    async def close(self) -> None:
        await self.connections.close_all()
