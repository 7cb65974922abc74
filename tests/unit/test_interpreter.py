"""Unit tests for tool directive detection and extraction."""

import pytest

from ollama_mcp_client.backends import ToolInvocationRequest
from ollama_mcp_client.errors import ToolCallParseError
from ollama_mcp_client.services.interpreter import (
    ToolCallInterpreter,
    find_directive_start,
    find_matching_brace,
    strip_reasoning,
)

WEATHER_CALL = (
    '{"action":"tool_call","tool":"get_current_weather","args":{"city":"Rome"}}'
)


@pytest.fixture
def interpreter():
    return ToolCallInterpreter()


class TestDetect:
    """Tests for ToolCallInterpreter.detect()."""

    def test_plain_prose_is_not_a_tool_call(self, interpreter):
        """Text without any JSON object is a direct reply."""
        assert interpreter.detect("The capital of Italy is Rome.") is False

    def test_empty_text(self, interpreter):
        assert interpreter.detect("") is False
        assert interpreter.detect("   \n") is False

    def test_bare_directive(self, interpreter):
        assert interpreter.detect(WEATHER_CALL) is True

    def test_directive_wrapped_in_prose(self, interpreter):
        """A directive surrounded by commentary is still found."""
        text = f"Let me check that for you. {WEATHER_CALL} One moment please."
        assert interpreter.detect(text) is True

    def test_json_that_is_not_a_directive(self, interpreter):
        assert interpreter.detect('{"answer": 42}') is False

    def test_unbalanced_braces(self, interpreter):
        text = '{"action":"tool_call","tool":"x","args":{"city":"Rome"}'
        assert interpreter.detect(text) is False

    def test_detect_is_idempotent(self, interpreter):
        text = f"Sure. {WEATHER_CALL}"
        results = {interpreter.detect(text) for _ in range(5)}
        assert results == {True}

    def test_directive_with_invalid_args_is_not_detected(self, interpreter):
        text = '{"action":"tool_call","tool":"x","args":"city=Rome"}'
        assert interpreter.detect(text) is False


class TestExtract:
    """Tests for ToolCallInterpreter.extract()."""

    def test_prose_wrapped_weather_call(self, interpreter):
        """The canonical example: a weather lookup buried in prose."""
        text = f"I'll look up the weather.\n{WEATHER_CALL}\nHope that helps!"

        request = interpreter.extract(text)

        assert request == ToolInvocationRequest(
            tool="get_current_weather", args={"city": "Rome"}
        )
        assert request.backend_id is None

    def test_whole_text_json(self, interpreter):
        request = interpreter.extract(f"  {WEATHER_CALL}\n")
        assert request.tool == "get_current_weather"

    def test_pretty_printed_directive(self, interpreter):
        text = (
            "Here you go:\n"
            "```json\n"
            "{\n"
            '  "action": "tool_call",\n'
            '  "tool": "get_current_weather",\n'
            '  "args": {\n'
            '    "city": "Rome"\n'
            "  }\n"
            "}\n"
            "```"
        )

        request = interpreter.extract(text)

        assert request.tool == "get_current_weather"
        assert request.args == {"city": "Rome"}

    def test_nested_arguments(self, interpreter):
        """Nested objects do not end the directive early."""
        text = (
            'Calling: {"action": "tool_call", "tool": "search", "args": '
            '{"filter": {"range": {"from": 1, "to": 5}}, "q": "x"}} done'
        )

        request = interpreter.extract(text)

        assert request.args == {"filter": {"range": {"from": 1, "to": 5}}, "q": "x"}

    def test_braces_inside_strings(self, interpreter):
        """Braces and escaped quotes in string values are not counted."""
        text = (
            'Ok {"action":"tool_call","tool":"echo","args":'
            '{"text":"a } b { \\" }"}} trailing }'
        )

        request = interpreter.extract(text)

        assert request.tool == "echo"
        assert request.args == {"text": 'a } b { " }'}

    def test_first_of_multiple_directives(self, interpreter):
        text = (
            '{"action":"tool_call","tool":"first","args":{}} and then '
            '{"action":"tool_call","tool":"second","args":{}}'
        )
        assert interpreter.extract(text).tool == "first"

    def test_earliest_anchor_wins(self, interpreter):
        """Different spacing variants are compared by position."""
        text = (
            'A { "action": "tool_call", "tool": "first", "args": {}} '
            'B {"action":"tool_call","tool":"second","args":{}}'
        )
        assert interpreter.extract(text).tool == "first"

    def test_fallback_when_action_is_not_the_first_key(self, interpreter):
        text = 'Use this: {"tool": "lookup", "action": "tool_call", "args": {"id": 7}}'

        request = interpreter.extract(text)

        assert request.tool == "lookup"
        assert request.args == {"id": 7}

    def test_server_key_pins_backend(self, interpreter):
        text = (
            '{"action":"tool_call","tool":"log_chat","server":"pg_log",'
            '"args":{"user_text":"hi"}}'
        )

        request = interpreter.extract(text)

        assert request.backend_id == "pg_log"

    def test_null_args_become_empty(self, interpreter):
        request = interpreter.extract('{"action":"tool_call","tool":"now","args":null}')
        assert request.args == {}

    def test_missing_args(self, interpreter):
        with pytest.raises(ToolCallParseError, match="no args"):
            interpreter.extract('{"action":"tool_call","tool":"now"}')

    def test_missing_tool_name(self, interpreter):
        with pytest.raises(ToolCallParseError, match="no tool name"):
            interpreter.extract('{"action":"tool_call","args":{}}')

    def test_non_object_args(self, interpreter):
        with pytest.raises(ToolCallParseError, match="must be an object"):
            interpreter.extract('{"action":"tool_call","tool":"x","args":[1, 2]}')

    def test_no_directive(self, interpreter):
        with pytest.raises(ToolCallParseError, match="no directive found"):
            interpreter.extract("Nothing to see here.")

    def test_unbalanced(self, interpreter):
        with pytest.raises(ToolCallParseError, match="unbalanced braces"):
            interpreter.extract('text {"action":"tool_call","tool":"x","args":{}')

    def test_invalid_json_between_braces(self, interpreter):
        with pytest.raises(ToolCallParseError, match="invalid JSON"):
            interpreter.extract("{\"action\":\"tool_call\",'tool':x}")

    def test_empty_text(self, interpreter):
        with pytest.raises(ToolCallParseError):
            interpreter.extract("")


class TestScanning:
    """Tests for the brace scanning helpers."""

    def test_find_directive_start_with_anchor(self):
        text = f"abc {WEATHER_CALL}"
        assert find_directive_start(text) == 4

    def test_find_directive_start_without_value(self):
        assert find_directive_start('{"action": "answer"}') is None

    def test_find_matching_brace(self):
        text = '{"a": {"b": "}"}} tail'
        assert find_matching_brace(text, 0) == 16

    def test_find_matching_brace_unterminated(self):
        assert find_matching_brace('{"a": {', 0) is None


class TestStripReasoning:
    """Tests for strip_reasoning()."""

    def test_removes_block_and_trims(self):
        text = "<think>\nThe user wants the weather.\n</think>\n\nIt is 18°C in Rome."
        assert strip_reasoning(text) == "It is 18°C in Rome."

    def test_removes_every_block(self):
        text = "<think>a</think>One <think>b</think>two"
        assert strip_reasoning(text) == "One two"

    def test_text_without_reasoning(self):
        assert strip_reasoning("  Plain answer.  ") == "Plain answer."

    def test_custom_markers(self):
        text = "[r]hidden[/r]Shown"
        assert strip_reasoning(text, "[r]", "[/r]") == "Shown"
