"""Exception hierarchy for ollama-mcp-client.

Failures during backend discovery are recovered where they happen (logged and
skipped). Failures inside a single chat turn are converted into a ChatResult
by the orchestrator, so none of these escape ``ChatOrchestrator.chat()``.
"""


class McpClientError(Exception):
    """Base class for all ollama-mcp-client errors."""


class BackendConnectionError(McpClientError):
    """A tool server could not be launched or its session initialized."""

    def __init__(self, backend_id: str, message: str):
        self.backend_id = backend_id
        super().__init__(f"Failed to connect to {backend_id} server: {message}")


class ToolCallParseError(McpClientError):
    """Model output does not contain a well-formed tool directive."""


class NotFoundError(McpClientError):
    """A tool or resource is not present in the registry."""


class ToolNotFoundError(NotFoundError):
    """No connected backend exposes the requested tool."""

    def __init__(self, tool_name: str, backend_id: str | None = None):
        self.tool_name = tool_name
        self.backend_id = backend_id
        if backend_id is None:
            message = f"Tool '{tool_name}' not found"
        else:
            message = f"Tool '{tool_name}' not found on server '{backend_id}'"
        super().__init__(message)


class ResourceNotFoundError(NotFoundError):
    """No connected backend exposes the requested resource URI."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Resource '{uri}' not found")


class InvocationError(McpClientError):
    """A backend rejected a request or reported a tool error."""
