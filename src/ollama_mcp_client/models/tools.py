"""Pydantic models for tool and resource endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ToolInfo(BaseModel):
    """A tool exposed by a connected MCP server."""

    name: str = Field(description="Tool name")
    server: str = Field(description="Server that serves the tool")
    description: str = Field(default="", description="Tool description")
    input_schema: dict[str, Any] | None = Field(
        default=None, description="JSON schema of the tool arguments"
    )


class ToolListResponse(BaseModel):
    tools: list[ToolInfo] = Field(default_factory=list)


class GroupedToolsResponse(BaseModel):
    """Tools per connected server."""

    servers: dict[str, list[ToolInfo]] = Field(default_factory=dict)


class ToolCallRequest(BaseModel):
    """Direct tool invocation, bypassing the model."""

    tool: str = Field(..., min_length=1, description="Tool name")
    args: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")
    server: str | None = Field(
        default=None, description="Pin the call to this server"
    )


class ToolCallResponse(BaseModel):
    tool: str
    server: str | None = None
    result: Any = Field(description="Result returned by the tool")


class ResourceInfo(BaseModel):
    uri: str
    server: str
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None


class ResourceListResponse(BaseModel):
    resources: list[ResourceInfo] = Field(default_factory=list)


class ResourceReadRequest(BaseModel):
    uri: str = Field(..., min_length=1, description="Resource URI")


class ResourceReadResponse(BaseModel):
    uri: str
    result: Any = Field(description="Resource contents returned by the server")
