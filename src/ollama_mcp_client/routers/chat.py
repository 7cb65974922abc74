"""Chat API endpoints.

POST /api/v1/chat runs one orchestrated turn (with tool dispatch) and always
answers 200 with a ChatResult; failures inside the turn are reported in its
``error`` field. POST /api/v1/chat/stream streams a direct reply via SSE and
never calls tools.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sse_starlette.sse import EventSourceResponse

from ollama_mcp_client.dependencies import get_orchestrator
from ollama_mcp_client.models.chat import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResultResponse,
    ClearHistoryResponse,
    ContentDeltaEvent,
    ConversationTurnResponse,
    DoneEvent,
    ErrorEvent,
)
from ollama_mcp_client.services import ChatOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.post("", response_model=ChatResultResponse)
async def chat(
    request_body: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatResultResponse:
    """Send a message and receive the complete (possibly tool-augmented) reply."""
    logger.info(f"Chat request ({len(request_body.message)} characters)")
    result = await orchestrator.chat(request_body.message, model=request_body.model)

    if result.error:
        logger.warning(f"Chat turn failed: {result.error}")
    elif result.tool_used:
        logger.info(f"Chat turn used tool: {result.tool_used}")

    return ChatResultResponse(**result.to_dict())


@router.post("/stream")
async def chat_streaming(
    request_body: ChatRequest,
    request: Request,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> EventSourceResponse:
    """Stream a direct reply via Server-Sent Events (SSE).

    SSE Events:
        - content_delta: Each text chunk from the model
        - error: If the model request fails
        - done: Stream is complete
    """
    model = request_body.model or orchestrator.default_model

    async def event_generator():
        """Generate SSE events from the Ollama stream."""
        try:
            async for text in orchestrator.stream_chat(request_body.message, model=model):
                if await request.is_disconnected():
                    logger.warning("Client disconnected during streaming")
                    break

                yield {
                    "event": "content_delta",
                    "data": ContentDeltaEvent(content=text).model_dump_json(),
                }

            yield {
                "event": "done",
                "data": DoneEvent(model=model).model_dump_json(),
            }

        except Exception as e:
            logger.error(f"Error during streaming: {e}")
            error_event = ErrorEvent(
                code="ollama_error",
                message=f"Failed to generate response: {str(e)}",
                details={"model": model},
            )
            yield {
                "event": "error",
                "data": error_event.model_dump_json(),
            }

    return EventSourceResponse(event_generator())


@router.get("/history", response_model=ChatHistoryResponse)
async def get_history(
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatHistoryResponse:
    """Get the retained conversation history, oldest first."""
    turns = [
        ConversationTurnResponse(**turn)
        for turn in orchestrator.get_conversation_history()
    ]
    return ChatHistoryResponse(turns=turns, max_turns=orchestrator.history.max_turns)


@router.delete("/history", response_model=ClearHistoryResponse)
async def clear_history(
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ClearHistoryResponse:
    """Clear the conversation history."""
    orchestrator.clear_history()
    return ClearHistoryResponse()
