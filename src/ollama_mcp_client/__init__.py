"""ollama-mcp-client: Local Ollama models with MCP server tools.

This package connects to tool servers speaking the Model Context Protocol,
lets the model request tools with a JSON directive in its reply, and folds
tool results back into the conversation. It ships a REST/SSE API and an
interactive CLI.
"""

__version__ = "0.1.0"

from ollama_mcp_client.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
