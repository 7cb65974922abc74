"""Chat orchestration between Ollama and the MCP tool servers.

One ``chat()`` call is one user turn:

1. The model gets the system instructions (with the available tools and
   resources), the retained history and the new user message.
2. If the reply is not a tool directive it is returned as is.
3. Otherwise the tool is invoked, its result substituted into the follow-up
   template, and the model asked again. Reasoning blocks are stripped from the
   second reply before it is returned.

Every failure inside a turn is returned as ``ChatResult.error``; nothing is
raised to the caller.
"""

import asyncio
import json
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, AsyncIterator

from ollama_mcp_client.backends.hub import BackendHub
from ollama_mcp_client.config import TOOL_RESULT_PLACEHOLDER
from ollama_mcp_client.errors import ToolCallParseError
from ollama_mcp_client.ollama import ModelInfo, OllamaClient
from ollama_mcp_client.services.config_store import ConfigStore
from ollama_mcp_client.services.history import ConversationHistory
from ollama_mcp_client.services.interpreter import ToolCallInterpreter, strip_reasoning

logger = logging.getLogger(__name__)


class ChatState(str, Enum):
    """Where the orchestrator is within a user turn."""

    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    TOOL_REQUESTED = "tool_requested"
    AWAITING_TOOL_RESULT = "awaiting_tool_result"
    AWAITING_FOLLOW_UP_MODEL = "awaiting_follow_up_model"


@dataclass
class ChatResult:
    """Outcome of one user turn.

    Exactly one of three shapes is populated:
    - direct reply: ``response``
    - tool-augmented reply: ``tool_used``, ``tool_result``, ``final_response``
      and ``raw_response`` (the model's first reply)
    - failure: ``error``, plus ``raw_response`` when the model had answered
    """

    response: str | None = None
    tool_used: str | None = None
    tool_result: Any = None
    final_response: str | None = None
    raw_response: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def render_follow_up(template: str, tool_result: Any) -> str:
    """Substitute the serialized tool result into the follow-up template."""
    serialized = json.dumps(tool_result, indent=2, default=str)
    return template.replace(TOOL_RESULT_PLACEHOLDER, serialized)


class ChatOrchestrator:
    """Drives the conversation with the model and dispatches tool calls.

    Calls to ``chat()`` on one instance are serialized by an internal lock, so
    a shared instance can back concurrent HTTP requests.
    """

    def __init__(
        self,
        ollama_client: OllamaClient,
        hub: BackendHub,
        config_store: ConfigStore,
        history: ConversationHistory | None = None,
        interpreter: ToolCallInterpreter | None = None,
        reasoning_markers: tuple[str, str] = ("<think>", "</think>"),
    ) -> None:
        self.ollama_client = ollama_client
        self.hub = hub
        self.config_store = config_store
        self.history = history if history is not None else ConversationHistory()
        self.interpreter = interpreter if interpreter is not None else ToolCallInterpreter()
        self.reasoning_markers = reasoning_markers
        self.state = ChatState.IDLE
        self._lock = asyncio.Lock()

    @property
    def default_model(self) -> str:
        return self.config_store.config.ollama.default_model

    def build_system_prompt(self) -> str:
        instructions = self.config_store.config.instructions
        return (
            f"{instructions.system}\n\n"
            f"Available tools: {', '.join(self.hub.available_tools())}\n"
            f"Available resources: {', '.join(self.hub.available_resources())}"
        )

    def build_messages(self, user_message: str) -> list[dict[str, Any]]:
        """System turn, retained history, then the new user turn."""
        return [
            {"role": "system", "content": self.build_system_prompt()},
            *self.history.to_messages(),
            {"role": "user", "content": user_message},
        ]

    async def chat(self, user_message: str, model: str | None = None) -> ChatResult:
        """Run one user turn.

        Args:
            user_message: The user's text
            model: Model to use instead of the configured default

        Returns:
            ChatResult: Direct reply, tool-augmented reply, or error
        """
        async with self._lock:
            try:
                return await self._run_turn(user_message, model or self.default_model)
            finally:
                self.state = ChatState.IDLE

    async def _run_turn(self, user_message: str, model: str) -> ChatResult:
        messages = self.build_messages(user_message)

        self.state = ChatState.AWAITING_MODEL
        try:
            first_reply = await self.ollama_client.chat(model=model, messages=messages)
        except Exception as e:
            logger.error(f"Model request failed: {e}")
            return ChatResult(error=f"Model request failed: {e}")

        if not self.interpreter.detect(first_reply):
            self.history.record_exchange(user_message, first_reply)
            return ChatResult(response=first_reply)

        self.state = ChatState.TOOL_REQUESTED
        try:
            request = self.interpreter.extract(first_reply)
        except ToolCallParseError as e:
            logger.error(f"Tool call could not be parsed: {e}")
            self.history.record_error(user_message, str(e))
            return ChatResult(error=str(e), raw_response=first_reply)

        logger.info(f"Tool call detected: {request.tool} {request.args}")

        self.state = ChatState.AWAITING_TOOL_RESULT
        try:
            tool_result = await self.hub.call_tool(request)
        except Exception as e:
            logger.error(f"Error calling tool {request.tool}: {e}")
            self.history.record_error(user_message, str(e))
            return ChatResult(error=f"Tool call failed: {e}", raw_response=first_reply)

        follow_up = render_follow_up(
            self.config_store.config.instructions.follow_up, tool_result
        )
        messages.append({"role": "assistant", "content": first_reply})
        messages.append({"role": "user", "content": follow_up})

        self.state = ChatState.AWAITING_FOLLOW_UP_MODEL
        try:
            second_reply = await self.ollama_client.chat(model=model, messages=messages)
        except Exception as e:
            logger.error(f"Follow-up model request failed: {e}")
            self.history.record_error(user_message, str(e))
            return ChatResult(error=f"Model request failed: {e}", raw_response=first_reply)

        start, end = self.reasoning_markers
        final_response = strip_reasoning(second_reply, start, end)
        self.history.record_exchange(
            user_message, f"Used tool {request.tool} with result: {final_response}"
        )

        return ChatResult(
            tool_used=request.tool,
            tool_result=tool_result,
            final_response=final_response,
            raw_response=first_reply,
        )

    async def stream_chat(
        self, user_message: str, model: str | None = None
    ) -> AsyncIterator[str]:
        """Stream a direct reply to a single message.

        Tools are listed in the system prompt but never invoked, and the
        exchange is not added to history.
        """
        messages = [
            {"role": "system", "content": self.build_system_prompt()},
            {"role": "user", "content": user_message},
        ]
        async for text in self.ollama_client.chat_stream(
            model=model or self.default_model, messages=messages
        ):
            yield text

    async def list_models(self) -> list[ModelInfo]:
        return await self.ollama_client.list_models()

    def clear_history(self) -> None:
        self.history.clear()
        logger.info("Conversation history cleared")

    def get_conversation_history(self) -> list[dict[str, str]]:
        return self.history.to_messages()
