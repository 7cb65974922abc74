"""Integration tests for the chat API endpoints.

Covers POST /api/v1/chat (direct and tool-augmented turns), the SSE stream
and the history endpoints with a full app setup.
"""

import json

import pytest
from httpx import AsyncClient

from ollama_mcp_client.backends import ToolInvocationRequest
from ollama_mcp_client.errors import ToolNotFoundError

WEATHER_CALL = (
    'Checking. {"action":"tool_call","tool":"get_current_weather",'
    '"args":{"city":"Rome"}}'
)


def parse_sse(text: str) -> list[tuple[str, dict]]:
    """Split an SSE body into (event, data) pairs."""
    events = []
    for block in text.replace("\r\n", "\n").split("\n\n"):
        event = None
        data = None
        for line in block.splitlines():
            if line.startswith("event:"):
                event = line[len("event:") :].strip()
            elif line.startswith("data:"):
                data = json.loads(line[len("data:") :].strip())
        if event is not None:
            events.append((event, data))
    return events


class TestChat:
    """Tests for POST /api/v1/chat."""

    @pytest.mark.asyncio
    async def test_direct_reply(self, async_client: AsyncClient, mock_hub):
        response = await async_client.post("/api/v1/chat", json={"message": "Hi"})

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Hello! How can I help?"
        assert data["tool_used"] is None
        assert data["error"] is None
        mock_hub.call_tool.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_system_prompt_lists_tools(
        self, async_client: AsyncClient, mock_ollama_client
    ):
        await async_client.post("/api/v1/chat", json={"message": "Hi"})

        messages = mock_ollama_client.chat.call_args.kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert "Available tools: get_current_weather, log_chat" in messages[0]["content"]

    @pytest.mark.asyncio
    async def test_tool_augmented_reply(
        self, async_client: AsyncClient, mock_ollama_client, mock_hub
    ):
        mock_ollama_client.chat.side_effect = [
            WEATHER_CALL,
            "<think>easy</think>It is 18°C and sunny in Rome.",
        ]

        response = await async_client.post(
            "/api/v1/chat", json={"message": "What's the weather in Rome?"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["tool_used"] == "get_current_weather"
        assert data["tool_result"] == {
            "content": [{"type": "text", "text": "18°C, sunny"}]
        }
        assert data["final_response"] == "It is 18°C and sunny in Rome."
        assert data["raw_response"] == WEATHER_CALL
        mock_hub.call_tool.assert_awaited_once_with(
            ToolInvocationRequest(tool="get_current_weather", args={"city": "Rome"})
        )

    @pytest.mark.asyncio
    async def test_tool_failure_is_reported_in_body(
        self, async_client: AsyncClient, mock_ollama_client, mock_hub
    ):
        mock_ollama_client.chat.side_effect = [WEATHER_CALL]
        mock_hub.call_tool.side_effect = ToolNotFoundError("get_current_weather")

        response = await async_client.post(
            "/api/v1/chat", json={"message": "What's the weather in Rome?"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["error"].startswith("Tool call failed:")
        assert data["raw_response"] == WEATHER_CALL
        assert mock_ollama_client.chat.await_count == 1

    @pytest.mark.asyncio
    async def test_model_override(self, async_client: AsyncClient, mock_ollama_client):
        await async_client.post(
            "/api/v1/chat", json={"message": "Hi", "model": "qwen3:8b"}
        )

        assert mock_ollama_client.chat.call_args.kwargs["model"] == "qwen3:8b"

    @pytest.mark.asyncio
    async def test_empty_message_is_rejected(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/chat", json={"message": ""})

        assert response.status_code == 422


class TestHistory:
    """Tests for the history endpoints."""

    @pytest.mark.asyncio
    async def test_history_after_chat(self, async_client: AsyncClient):
        await async_client.post("/api/v1/chat", json={"message": "Hi"})

        response = await async_client.get("/api/v1/chat/history")

        assert response.status_code == 200
        data = response.json()
        assert data["max_turns"] == 20
        assert data["turns"] == [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello! How can I help?"},
        ]

    @pytest.mark.asyncio
    async def test_clear_history(self, async_client: AsyncClient):
        await async_client.post("/api/v1/chat", json={"message": "Hi"})

        response = await async_client.delete("/api/v1/chat/history")

        assert response.status_code == 200
        assert response.json()["success"] is True
        history = await async_client.get("/api/v1/chat/history")
        assert history.json()["turns"] == []


class TestChatStream:
    """Tests for POST /api/v1/chat/stream."""

    @pytest.mark.asyncio
    async def test_stream_events(self, async_client: AsyncClient, mock_ollama_client):
        async def mock_stream(model, messages):
            for text in ["It ", "is ", "sunny."]:
                yield text

        mock_ollama_client.chat_stream = mock_stream

        response = await async_client.post(
            "/api/v1/chat/stream", json={"message": "Weather?"}
        )

        assert response.status_code == 200
        events = parse_sse(response.text)
        deltas = [data["content"] for event, data in events if event == "content_delta"]
        assert "".join(deltas) == "It is sunny."
        assert events[-1] == ("done", {"model": "llama3.2"})

    @pytest.mark.asyncio
    async def test_stream_error_event(
        self, async_client: AsyncClient, mock_ollama_client
    ):
        async def failing_stream(model, messages):
            raise ConnectionError("connection refused")
            yield  # pragma: no cover

        mock_ollama_client.chat_stream = failing_stream

        response = await async_client.post(
            "/api/v1/chat/stream", json={"message": "Weather?"}
        )

        events = parse_sse(response.text)
        assert events[-1][0] == "error"
        assert events[-1][1]["code"] == "ollama_error"

    @pytest.mark.asyncio
    async def test_stream_does_not_touch_history(
        self, async_client: AsyncClient, mock_ollama_client
    ):
        async def mock_stream(model, messages):
            yield "Hi"

        mock_ollama_client.chat_stream = mock_stream

        await async_client.post("/api/v1/chat/stream", json={"message": "Hello"})

        history = await async_client.get("/api/v1/chat/history")
        assert history.json()["turns"] == []
