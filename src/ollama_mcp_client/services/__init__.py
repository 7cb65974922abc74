"""Business logic services for ollama-mcp-client.

This package contains the tool-call interpreter, the bounded conversation
history, the chat orchestrator and the client config store.
"""

from ollama_mcp_client.services.config_store import ConfigStore
from ollama_mcp_client.services.history import ConversationHistory, ConversationTurn
from ollama_mcp_client.services.interpreter import ToolCallInterpreter, strip_reasoning
from ollama_mcp_client.services.orchestrator import (
    ChatOrchestrator,
    ChatResult,
    ChatState,
)

__all__ = [
    "ChatOrchestrator",
    "ChatResult",
    "ChatState",
    "ConfigStore",
    "ConversationHistory",
    "ConversationTurn",
    "ToolCallInterpreter",
    "strip_reasoning",
]
