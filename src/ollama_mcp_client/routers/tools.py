"""Tool and resource endpoints.

These expose the merged MCP catalog and allow calling a tool or reading a
resource directly, without going through the model.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ollama_mcp_client.backends import (
    BackendHub,
    ResourceDescriptor,
    ToolDescriptor,
    ToolInvocationRequest,
)
from ollama_mcp_client.dependencies import get_hub
from ollama_mcp_client.errors import InvocationError, NotFoundError
from ollama_mcp_client.models.tools import (
    GroupedToolsResponse,
    ResourceInfo,
    ResourceListResponse,
    ResourceReadRequest,
    ResourceReadResponse,
    ToolCallRequest,
    ToolCallResponse,
    ToolInfo,
    ToolListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["tools"])


def tool_to_info(descriptor: ToolDescriptor) -> ToolInfo:
    return ToolInfo(
        name=descriptor.name,
        server=descriptor.backend_id,
        description=descriptor.description,
        input_schema=descriptor.input_schema,
    )


def resource_to_info(descriptor: ResourceDescriptor) -> ResourceInfo:
    return ResourceInfo(
        uri=descriptor.uri,
        server=descriptor.backend_id,
        name=descriptor.name,
        description=descriptor.description,
        mime_type=descriptor.mime_type,
    )


def _error(status_code: int, code: str, message: str, **details) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": {"code": code, "message": message, "details": details}},
    )


@router.get("/tools", response_model=ToolListResponse)
async def list_tools(hub: BackendHub = Depends(get_hub)) -> ToolListResponse:
    """List every tool reachable by plain name."""
    tools = [tool_to_info(d) for d in hub.registry.tool_descriptors()]
    return ToolListResponse(tools=tools)


@router.get("/tools/grouped", response_model=GroupedToolsResponse)
async def list_tools_grouped(
    hub: BackendHub = Depends(get_hub),
) -> GroupedToolsResponse:
    """List tools per connected server, including shadowed names."""
    servers = {
        backend_id: [tool_to_info(d) for d in hub.registry.tool_descriptors(backend_id)]
        for backend_id in hub.connected_servers()
    }
    return GroupedToolsResponse(servers=servers)


@router.post("/tools/call", response_model=ToolCallResponse)
async def call_tool(
    request_body: ToolCallRequest,
    hub: BackendHub = Depends(get_hub),
) -> ToolCallResponse:
    """Call a tool directly.

    Raises:
        HTTPException: 404 if the tool is unknown, 502 if the server fails.
    """
    invocation = ToolInvocationRequest(
        tool=request_body.tool,
        args=request_body.args,
        backend_id=request_body.server,
    )

    try:
        result = await hub.call_tool(invocation)
    except NotFoundError as e:
        raise _error(404, "tool_not_found", str(e), tool=request_body.tool)
    except InvocationError as e:
        logger.error(f"Direct call of {request_body.tool} failed: {e}")
        raise _error(502, "tool_call_failed", str(e), tool=request_body.tool)

    return ToolCallResponse(
        tool=request_body.tool, server=request_body.server, result=result
    )


@router.get("/resources", response_model=ResourceListResponse)
async def list_resources(hub: BackendHub = Depends(get_hub)) -> ResourceListResponse:
    """List resources of every connected server."""
    resources = [resource_to_info(r) for r in hub.registry.resource_descriptors()]
    return ResourceListResponse(resources=resources)


@router.post("/resources/read", response_model=ResourceReadResponse)
async def read_resource(
    request_body: ResourceReadRequest,
    hub: BackendHub = Depends(get_hub),
) -> ResourceReadResponse:
    """Read a resource from the server that lists it.

    Raises:
        HTTPException: 404 if the URI is unknown, 502 if the server fails.
    """
    try:
        result = await hub.read_resource(request_body.uri)
    except NotFoundError as e:
        raise _error(404, "resource_not_found", str(e), uri=request_body.uri)
    except InvocationError as e:
        logger.error(f"Reading {request_body.uri} failed: {e}")
        raise _error(502, "resource_read_failed", str(e), uri=request_body.uri)

    return ResourceReadResponse(uri=request_body.uri, result=result)
