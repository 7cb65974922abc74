"""Merged tool and resource catalog of all connected backends."""

import logging
from collections.abc import Iterable

from mcp.shared.exceptions import McpError
from mcp.types import METHOD_NOT_FOUND

from ollama_mcp_client.backends.connection import BackendConnectionManager
from ollama_mcp_client.backends.types import (
    BackendConnection,
    ResourceDescriptor,
    ToolDescriptor,
)
from ollama_mcp_client.errors import ResourceNotFoundError, ToolNotFoundError

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Maps tool names and resource URIs to the backend that serves them.

    The maps are rebuilt wholesale by ``refresh()``. When two backends expose
    the same tool name, the backend discovered last owns the plain name; the
    per-backend catalogs keep every tool, so ``resolve(name, backend_id)`` can
    still reach a shadowed one.
    """

    def __init__(self, connection_manager: BackendConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._tools: dict[str, ToolDescriptor] = {}
        self._tools_by_backend: dict[str, dict[str, ToolDescriptor]] = {}
        self._resources: dict[str, ResourceDescriptor] = {}
        self._resources_by_backend: dict[str, dict[str, ResourceDescriptor]] = {}

    async def refresh(
        self, connections: Iterable[BackendConnection] | None = None
    ) -> None:
        """Rebuild the catalogs from the given (default: all open) connections."""
        if connections is None:
            connections = self._connection_manager.connections

        tools: dict[str, ToolDescriptor] = {}
        tools_by_backend: dict[str, dict[str, ToolDescriptor]] = {}
        resources: dict[str, ResourceDescriptor] = {}
        resources_by_backend: dict[str, dict[str, ResourceDescriptor]] = {}

        for connection in connections:
            backend_id = connection.backend_id

            try:
                descriptors = await self._connection_manager.list_tools(connection)
            except Exception as e:
                logger.error(f"Failed to load tools from {backend_id}: {e}")
                descriptors = []

            logger.info(f"{backend_id} tools: {[d.name for d in descriptors]}")
            tools_by_backend[backend_id] = {d.name: d for d in descriptors}
            for descriptor in descriptors:
                if descriptor.name in tools:
                    logger.warning(
                        f"Tool '{descriptor.name}' from {backend_id} shadows the one "
                        f"from {tools[descriptor.name].backend_id}"
                    )
                tools[descriptor.name] = descriptor

            backend_resources = await self._discover_resources(connection)
            resources_by_backend[backend_id] = {r.uri: r for r in backend_resources}
            for resource in backend_resources:
                resources[resource.uri] = resource

        self._tools = tools
        self._tools_by_backend = tools_by_backend
        self._resources = resources
        self._resources_by_backend = resources_by_backend
        logger.debug(
            f"Registry refreshed: {len(tools)} tools, {len(resources)} resources"
        )

    async def _discover_resources(
        self, connection: BackendConnection
    ) -> list[ResourceDescriptor]:
        # Resources are optional in MCP; servers without them answer -32601.
        try:
            resources = await self._connection_manager.list_resources(connection)
        except McpError as e:
            if e.error.code == METHOD_NOT_FOUND:
                logger.debug(f"{connection.backend_id} does not list resources")
            else:
                logger.error(
                    f"Failed to load resources from {connection.backend_id}: {e}"
                )
            return []
        except Exception as e:
            logger.error(f"Failed to load resources from {connection.backend_id}: {e}")
            return []

        if resources:
            logger.info(f"{connection.backend_id} resources: {[r.uri for r in resources]}")
        return resources

    def resolve(self, tool_name: str, backend_id: str | None = None) -> ToolDescriptor:
        """Find the descriptor for a tool.

        Args:
            tool_name: Name of the tool
            backend_id: If given, only this backend's catalog is searched

        Raises:
            ToolNotFoundError: If no matching tool is registered
        """
        if backend_id is None:
            descriptor = self._tools.get(tool_name)
        else:
            descriptor = self._tools_by_backend.get(backend_id, {}).get(tool_name)

        if descriptor is None:
            raise ToolNotFoundError(tool_name, backend_id)
        return descriptor

    def resolve_resource(self, uri: str) -> ResourceDescriptor:
        """Find the descriptor for a resource URI.

        Raises:
            ResourceNotFoundError: If no backend lists the URI
        """
        resource = self._resources.get(uri)
        if resource is None:
            raise ResourceNotFoundError(uri)
        return resource

    def list_tools(self, backend_id: str | None = None) -> list[str]:
        """Tool names, for all backends or a single one."""
        if backend_id is None:
            return list(self._tools)
        return list(self._tools_by_backend.get(backend_id, {}))

    def list_resources(self, backend_id: str | None = None) -> list[str]:
        """Resource URIs, for all backends or a single one."""
        if backend_id is None:
            return list(self._resources)
        return list(self._resources_by_backend.get(backend_id, {}))

    def tool_descriptors(self, backend_id: str | None = None) -> list[ToolDescriptor]:
        if backend_id is None:
            return list(self._tools.values())
        return list(self._tools_by_backend.get(backend_id, {}).values())

    def resource_descriptors(self) -> list[ResourceDescriptor]:
        return list(self._resources.values())

    @property
    def backends(self) -> list[str]:
        """Backends included in the last refresh."""
        return list(self._tools_by_backend)

    def server_info(self) -> dict[str, dict[str, list[str]]]:
        """Tool names and resource URIs per backend."""
        return {
            backend_id: {
                "tools": self.list_tools(backend_id),
                "resources": self.list_resources(backend_id),
            }
            for backend_id in self._tools_by_backend
        }
