"""Pydantic models for chat API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat and /api/v1/chat/stream."""

    message: str = Field(..., min_length=1, description="The user message to send")
    model: str | None = Field(
        default=None,
        description="Model to use instead of the configured default",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"message": "What's the weather in Rome?", "model": None},
            ]
        }
    )


class ChatResultResponse(BaseModel):
    """Outcome of one chat turn.

    A direct reply sets ``response``. A tool-augmented reply sets
    ``tool_used``, ``tool_result``, ``final_response`` and ``raw_response``.
    A failed turn sets ``error`` and, if the model answered, ``raw_response``.
    """

    response: str | None = Field(default=None, description="Direct model reply")
    tool_used: str | None = Field(default=None, description="Name of the tool called")
    tool_result: Any = Field(default=None, description="Raw result of the tool")
    final_response: str | None = Field(
        default=None, description="Model reply after seeing the tool result"
    )
    raw_response: str | None = Field(
        default=None, description="The model's first reply (the tool directive)"
    )
    error: str | None = Field(default=None, description="Error message, if any")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "response": None,
                "tool_used": "get_current_weather",
                "tool_result": {"content": [{"type": "text", "text": "18°C"}]},
                "final_response": "It is currently 18°C in Rome.",
                "raw_response": '{"action":"tool_call","tool":"get_current_weather","args":{"city":"Rome"}}',
                "error": None,
            }
        }
    )


class ConversationTurnResponse(BaseModel):
    role: str = Field(description="Message role (user or assistant)")
    content: str = Field(description="Message content")


class ChatHistoryResponse(BaseModel):
    """Retained conversation history, oldest first."""

    turns: list[ConversationTurnResponse] = Field(default_factory=list)
    max_turns: int = Field(description="History capacity in turns")


class ClearHistoryResponse(BaseModel):
    success: bool = True
    message: str = "Conversation history cleared"


class ContentDeltaEvent(BaseModel):
    """SSE event: a chunk of generated text."""

    content: str = Field(description="Text chunk")


class DoneEvent(BaseModel):
    """SSE event: the stream is complete."""

    model: str = Field(description="Model that generated the reply")


class ErrorEvent(BaseModel):
    """SSE event: generation failed."""

    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    details: dict[str, Any] = Field(default_factory=dict)
