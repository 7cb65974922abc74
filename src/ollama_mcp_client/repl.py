"""Interactive terminal front ends: the chat REPL and the connection test."""

import asyncio
import json
import logging

from ollama_mcp_client.backends import BackendHub, ToolInvocationRequest
from ollama_mcp_client.config import ClientSettings
from ollama_mcp_client.errors import McpClientError, ToolCallParseError
from ollama_mcp_client.ollama import OllamaClient
from ollama_mcp_client.services import (
    ChatOrchestrator,
    ChatResult,
    ConfigStore,
    ConversationHistory,
)

logger = logging.getLogger(__name__)

HELP_TEXT = (
    'Type "exit" to quit, "tools" or "resources" to list, "clear" to reset '
    'history, or "tool <server.tool> <jsonArgs>" to call a tool directly.'
)


def parse_tool_command(command: str) -> ToolInvocationRequest:
    """Parse the part of a ``tool`` REPL command after the keyword.

    ``pg_log.log_chat {"user_text": "hi"}`` becomes a request pinned to the
    pg_log server. The JSON arguments are optional.

    Raises:
        ToolCallParseError: If the name or the JSON arguments are malformed
    """
    qualified_name, _, arg_text = command.strip().partition(" ")
    try:
        args = json.loads(arg_text) if arg_text.strip() else {}
    except ValueError as e:
        raise ToolCallParseError(f"Invalid JSON arguments: {e}") from e
    if not isinstance(args, dict):
        raise ToolCallParseError("Tool arguments must be a JSON object")
    return ToolInvocationRequest.from_qualified_name(qualified_name, args)


def format_result(result: ChatResult) -> str:
    if result.error:
        return f"Error: {result.error}"
    if result.tool_used:
        return f"Tool used: {result.tool_used}\n{result.final_response}"
    return result.response or ""


async def log_chat(
    hub: BackendHub, tool_name: str, user_text: str, assistant_text: str
) -> None:
    """Send one exchange to a logging tool such as ``pg_log.log_chat``."""
    if not user_text or not assistant_text:
        return
    try:
        request = ToolInvocationRequest.from_qualified_name(
            tool_name, {"user_text": user_text, "assistant_text": assistant_text}
        )
        await hub.call_tool(request)
        logger.info("Chat logged")
    except McpClientError as e:
        logger.warning(f"{tool_name} failed: {e}")


def _load(settings: ClientSettings) -> ConfigStore:
    store = ConfigStore(
        settings.resolved_config_path,
        import_claude_config=settings.import_claude_config,
    )
    store.load()
    return store


async def run_chat(settings: ClientSettings) -> None:
    """Run the interactive chat loop until "exit" or end of input."""
    store = _load(settings)
    hub = BackendHub(store.config.mcp_servers)
    orchestrator = ChatOrchestrator(
        ollama_client=OllamaClient(host=store.config.ollama.host),
        hub=hub,
        config_store=store,
        history=ConversationHistory(max_turns=settings.history_max_turns),
        reasoning_markers=(settings.reasoning_start, settings.reasoning_end),
    )

    try:
        await hub.start()
        print(HELP_TEXT)

        while True:
            try:
                line = (await asyncio.to_thread(input, "\n> ")).strip()
            except EOFError:
                break

            if not line:
                continue
            command = line.lower()
            if command in ("exit", "quit"):
                break
            if command == "tools":
                print("Tools:", ", ".join(hub.available_tools()) or "(none)")
                continue
            if command == "resources":
                print("Resources:", ", ".join(hub.available_resources()) or "(none)")
                continue
            if command == "clear":
                orchestrator.clear_history()
                print("History cleared")
                continue

            if command.startswith("tool "):
                try:
                    request = parse_tool_command(line[5:])
                    result = await hub.call_tool(request)
                    print("Tool result:", json.dumps(result, indent=2, default=str))
                except McpClientError as e:
                    print(f"Tool call failed: {e}")
                continue

            print("Thinking...")
            result = await orchestrator.chat(line)
            print(format_result(result))

            if settings.chat_log_tool and not result.error:
                text = result.final_response or result.response or ""
                await log_chat(hub, settings.chat_log_tool, line, text)
    finally:
        await hub.close()
        await orchestrator.ollama_client.close()


async def run_connection_test(settings: ClientSettings) -> int:
    """Connect to every MCP server and print what they expose.

    Returns:
        int: Process exit code, 1 if servers are configured but none connected
    """
    store = _load(settings)
    hub = BackendHub(store.config.mcp_servers)

    try:
        await hub.start()
        servers = hub.connected_servers()
        tools = hub.registry.tool_descriptors()
        resources = hub.available_resources()

        print("\nConnection summary:")
        print(f"  Servers   : {len(servers)} of {len(store.config.mcp_servers)}")
        print(f"  Tools     : {len(tools)}")
        print(f"  Resources : {len(resources)}")

        if tools:
            print("\nTools:")
            for tool in tools:
                print(f"  - {tool.name} ({tool.backend_id}): {tool.description or '-'}")
        if resources:
            print("\nResources:")
            for uri in resources:
                print(f"  - {uri}")
    finally:
        await hub.close()

    if store.config.mcp_servers and not servers:
        return 1
    return 0
