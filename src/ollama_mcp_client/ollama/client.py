"""Async Ollama client wrapper.

This module wraps ``ollama.AsyncClient`` with the few operations the client
needs: a blocking chat call for the tool loop, a streaming chat call for
direct display, model listing and a connectivity check.
"""

import logging
from typing import Any, AsyncIterator

import ollama

from ollama_mcp_client.ollama.types import ModelInfo, get_value

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for the Ollama API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    def set_host(self, host: str) -> None:
        """Point the client at a different Ollama server."""
        if host == self.host:
            return
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient host changed to: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def list_models(self) -> list[ModelInfo]:
        """List all locally available models.

        Raises:
            Exception: If the Ollama API request fails
        """
        try:
            response = await self._client.list()
        except Exception as e:
            logger.error(f"Failed to list models: {e}")
            raise

        entries = get_value(response, "models") or []
        models = [ModelInfo.from_list_entry(entry) for entry in entries]
        logger.debug(f"Listed {len(models)} models")
        return models

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> str:
        """Send a chat request and wait for the complete reply.

        Args:
            model: The model name to use
            messages: Messages in Ollama format: [{"role": ..., "content": ...}]
            options: Optional model parameters (temperature, etc.)

        Returns:
            str: The content of the assistant message ("" if absent)

        Raises:
            Exception: If the Ollama API request fails
        """
        logger.debug(f"Chat request to {model} with {len(messages)} messages")
        try:
            response = await self._client.chat(
                model=model,
                messages=messages,
                stream=False,
                options=options,
            )
        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

        message = get_value(response, "message") or {}
        return get_value(message, "content") or ""

    async def chat_stream(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> AsyncIterator[str]:
        """Stream the content of a chat reply as it is generated.

        Yields:
            str: Non-empty content chunks

        Raises:
            Exception: If the Ollama API request fails

        Example:
            >>> async for text in client.chat_stream(
            ...     model="llama3.2",
            ...     messages=[{"role": "user", "content": "Hello"}]
            ... ):
            ...     print(text, end="")
        """
        try:
            logger.debug(f"Starting chat stream with model: {model}")
            async for chunk in await self._client.chat(
                model=model,
                messages=messages,
                stream=True,
                options=options,
            ):
                message = get_value(chunk, "message") or {}
                content = get_value(message, "content") or ""
                if content:
                    yield content

            logger.debug("Chat stream completed")

        except Exception as e:
            logger.error(f"Chat stream failed: {e}")
            raise

    async def close(self) -> None:
        """Close the client.

        ollama.AsyncClient wraps an httpx client that is released on garbage
        collection; nothing to do here beyond logging.
        """
        logger.debug("OllamaClient closed")
