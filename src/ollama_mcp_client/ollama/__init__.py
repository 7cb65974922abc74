"""Ollama client wrapper and integration layer.

This package provides an async client wrapper for communicating with the
Ollama API.
"""

from ollama_mcp_client.ollama.client import OllamaClient
from ollama_mcp_client.ollama.types import ModelInfo

__all__ = ["OllamaClient", "ModelInfo"]
