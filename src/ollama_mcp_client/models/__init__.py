"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from ollama_mcp_client.models.chat import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResultResponse,
    ClearHistoryResponse,
)
from ollama_mcp_client.models.config import ConfigResponse, ConfigUpdateRequest
from ollama_mcp_client.models.health import HealthResponse
from ollama_mcp_client.models.models import ModelDetail, ModelListResponse
from ollama_mcp_client.models.tools import (
    GroupedToolsResponse,
    ResourceListResponse,
    ToolCallRequest,
    ToolCallResponse,
    ToolInfo,
    ToolListResponse,
)

__all__ = [
    "ChatHistoryResponse",
    "ChatRequest",
    "ChatResultResponse",
    "ClearHistoryResponse",
    "ConfigResponse",
    "ConfigUpdateRequest",
    "GroupedToolsResponse",
    "HealthResponse",
    "ModelDetail",
    "ModelListResponse",
    "ResourceListResponse",
    "ToolCallRequest",
    "ToolCallResponse",
    "ToolInfo",
    "ToolListResponse",
]
