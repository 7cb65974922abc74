"""Pytest configuration for integration tests.

The Ollama client and the MCP backend hub are patched before the app is
created, so the lifespan wires a real ChatOrchestrator to these mocks.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ollama_mcp_client.backends import ResourceDescriptor, ToolDescriptor
from ollama_mcp_client.ollama import ModelInfo

WEATHER_TOOL = ToolDescriptor(
    name="get_current_weather",
    backend_id="weather",
    description="Get the current weather for a city",
    input_schema={"type": "object", "properties": {"city": {"type": "string"}}},
)
LOG_TOOL = ToolDescriptor(
    name="log_chat",
    backend_id="pg_log",
    description="Store a chat exchange",
)
FORECAST_RESOURCE = ResourceDescriptor(
    uri="weather://forecast/rome",
    backend_id="weather",
    name="Rome forecast",
    mime_type="application/json",
)


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests."""
    with patch("ollama_mcp_client.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.set_host = MagicMock()
        mock_instance.check_connection.return_value = True
        mock_instance.chat.return_value = "Hello! How can I help?"
        mock_instance.list_models.return_value = [
            ModelInfo(
                name="llama3.2:latest",
                size_mb=1926.3,
                family="llama",
                parameter_size="3.2B",
                quantization_level="Q4_K_M",
            ),
        ]

        mock_client_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture(autouse=True)
def mock_hub():
    """Mock BackendHub with a weather server and a pg_log server."""
    with patch("ollama_mcp_client.app.BackendHub") as mock_hub_class:
        hub = MagicMock()
        hub.start = AsyncMock()
        hub.close = AsyncMock()
        hub.call_tool = AsyncMock(
            return_value={"content": [{"type": "text", "text": "18°C, sunny"}]}
        )
        hub.read_resource = AsyncMock(
            return_value={"contents": [{"uri": FORECAST_RESOURCE.uri, "text": "{}"}]}
        )
        hub.available_tools.return_value = ["get_current_weather", "log_chat"]
        hub.available_resources.return_value = [FORECAST_RESOURCE.uri]
        hub.connected_servers.return_value = ["weather", "pg_log"]

        by_backend = {"weather": [WEATHER_TOOL], "pg_log": [LOG_TOOL]}
        hub.registry.tool_descriptors.side_effect = lambda backend_id=None: (
            [WEATHER_TOOL, LOG_TOOL] if backend_id is None else by_backend[backend_id]
        )
        hub.registry.resource_descriptors.return_value = [FORECAST_RESOURCE]

        mock_hub_class.return_value = hub
        yield hub
