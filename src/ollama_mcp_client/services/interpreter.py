"""Tool directive detection in free-form model output.

Models are asked to answer with ``{"action": "tool_call", "tool": ..., "args":
{...}}`` when they want a tool, but in practice the object arrives wrapped in
prose, markdown fences or trailing commentary. The interpreter finds the first
such object in the text and turns it into a ToolInvocationRequest:

1. The whole (stripped) text is tried as JSON first.
2. Otherwise the earliest anchor such as ``{"action":"tool_call"`` marks the
   opening brace; failing that, the ``"action"`` key and ``"tool_call"`` value
   are located independently and the scan backs up from the key to its ``{``.
3. A brace-depth scan finds the matching closing brace and the delimited
   substring is parsed.
"""

import json
import logging
import re
from enum import Enum
from typing import Any

from ollama_mcp_client.backends.types import ToolInvocationRequest
from ollama_mcp_client.errors import ToolCallParseError

logger = logging.getLogger(__name__)

TOOL_CALL_ACTION = "tool_call"

ANCHORS = (
    '{"action":"tool_call"',
    '{"action": "tool_call"',
    '{ "action": "tool_call"',
    '{\n  "action": "tool_call"',
)
ACTION_KEY = '"action"'
TOOL_CALL_VALUE = '"tool_call"'


class _ScanState(Enum):
    CODE = "code"
    STRING = "string"
    ESCAPE = "escape"


def find_directive_start(text: str) -> int | None:
    """Index of the opening brace of the first tool directive candidate."""
    positions = [index for index in (text.find(a) for a in ANCHORS) if index != -1]
    if positions:
        return min(positions)

    action_index = text.find(ACTION_KEY)
    if action_index == -1 or text.find(TOOL_CALL_VALUE) == -1:
        return None

    start = text.rfind("{", 0, action_index + 1)
    return start if start != -1 else None


def find_matching_brace(text: str, start: int) -> int | None:
    """Index of the brace closing the object that opens at ``start``.

    Braces inside JSON string literals are not counted. Returns None when the
    text ends before the depth returns to zero.
    """
    depth = 0
    state = _ScanState.CODE

    for index in range(start, len(text)):
        char = text[index]

        if state is _ScanState.ESCAPE:
            state = _ScanState.STRING
        elif state is _ScanState.STRING:
            if char == "\\":
                state = _ScanState.ESCAPE
            elif char == '"':
                state = _ScanState.CODE
        elif char == '"':
            state = _ScanState.STRING
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index

    return None


def _load_object(candidate: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _invalid_reason(payload: dict[str, Any]) -> str | None:
    if payload.get("action") != TOOL_CALL_ACTION:
        return "Object is not a tool call"
    tool = payload.get("tool")
    if not isinstance(tool, str) or not tool:
        return "Tool call has no tool name"
    if "args" not in payload:
        return "Tool call has no args"
    args = payload["args"]
    if args is not None and not isinstance(args, dict):
        return "Tool call args must be an object"
    return None


def _to_request(payload: dict[str, Any]) -> ToolInvocationRequest:
    reason = _invalid_reason(payload)
    if reason is not None:
        raise ToolCallParseError(reason)

    server = payload.get("server")
    return ToolInvocationRequest(
        tool=payload["tool"],
        args=payload["args"] or {},
        backend_id=server if isinstance(server, str) and server else None,
    )


class ToolCallInterpreter:
    """Classifies model output and extracts tool directives.

    The interpreter holds no state; ``detect`` may be called any number of
    times on the same text with the same outcome.
    """

    def detect(self, text: str) -> bool:
        """Whether the text contains a valid tool directive. Never raises."""
        try:
            self.extract(text)
        except ToolCallParseError:
            return False
        return True

    def extract(self, text: str) -> ToolInvocationRequest:
        """Extract the tool directive from model output.

        Args:
            text: Raw model reply

        Returns:
            ToolInvocationRequest: The requested tool, arguments and optional server

        Raises:
            ToolCallParseError: If no valid directive is present
        """
        if not isinstance(text, str) or not text.strip():
            raise ToolCallParseError("Could not parse tool call: empty text")

        whole = _load_object(text.strip())
        if whole is not None and _invalid_reason(whole) is None:
            return _to_request(whole)

        start = find_directive_start(text)
        if start is None:
            raise ToolCallParseError("Could not parse tool call: no directive found")

        end = find_matching_brace(text, start)
        if end is None:
            raise ToolCallParseError("Could not parse tool call: unbalanced braces")

        payload = _load_object(text[start : end + 1])
        if payload is None:
            raise ToolCallParseError("Could not parse tool call: invalid JSON")

        request = _to_request(payload)
        logger.debug(f"Tool call detected: {request}")
        return request


def strip_reasoning(text: str, start: str = "<think>", end: str = "</think>") -> str:
    """Remove every ``start ... end`` reasoning block and trim the result."""
    pattern = re.compile(f"{re.escape(start)}.*?{re.escape(end)}", re.DOTALL)
    return pattern.sub("", text).strip()
