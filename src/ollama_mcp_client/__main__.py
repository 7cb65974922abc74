"""CLI entry point for ollama-mcp-client.

It can be invoked as `ollama-mcp-client` (via the script entry point) or
`python -m ollama_mcp_client`. Without a command it starts the HTTP API.
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from ollama_mcp_client import __version__, create_app
from ollama_mcp_client.config import ClientConfig, ClientSettings, ServerLaunchSpec
from ollama_mcp_client.repl import run_chat, run_connection_test
from ollama_mcp_client.services import ConfigStore

logger = logging.getLogger(__name__)


def _parse_env(pairs: list[str]) -> dict[str, str]:
    env = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{pair}'")
        env[key] = value
    return env


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollama-mcp-client",
        description="Chat with local Ollama models that call MCP server tools",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ollama-mcp-client {__version__}",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Client config file (default: mcp_config.json, can be set via OLLAMA_MCP_CONFIG_PATH)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via OLLAMA_MCP_LOG_LEVEL)",
    )

    commands = parser.add_subparsers(dest="command")

    serve = commands.add_parser("serve", help="Start the HTTP API server")
    serve.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via OLLAMA_MCP_HOST)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via OLLAMA_MCP_PORT)",
    )

    commands.add_parser("chat", help="Interactive chat REPL")
    commands.add_parser("test", help="Connect to all MCP servers and list tools")
    commands.add_parser("init", help="Write a default config file")

    config = commands.add_parser("config", help="Manage the config file")
    actions = config.add_subparsers(dest="action", required=True)
    actions.add_parser("show", help="Show the current configuration")

    set_ollama = actions.add_parser("set-ollama", help="Change the Ollama host")
    set_ollama.add_argument("ollama_host")

    set_model = actions.add_parser("set-model", help="Change the default model")
    set_model.add_argument("model")

    add_server = actions.add_parser("add-server", help="Add an MCP server")
    add_server.add_argument("name")
    add_server.add_argument("--command", required=True, dest="server_command")
    add_server.add_argument("--arg", action="append", default=[], dest="server_args")
    add_server.add_argument(
        "--env", action="append", default=[], dest="server_env", metavar="KEY=VALUE"
    )

    remove_server = actions.add_parser("remove-server", help="Remove an MCP server")
    remove_server.add_argument("name")

    return parser


def print_config(store: ConfigStore) -> None:
    config = store.config
    print("\nCurrent configuration:")
    print(f"Config file: {store.path}")
    print(f"MCP servers: {len(config.mcp_servers)}")
    print(f"Ollama host: {config.ollama.host}")
    print(f"Default model: {config.ollama.default_model}")

    if config.mcp_servers:
        print("\nMCP servers:")
        for name, spec in config.mcp_servers.items():
            print(f"  - {name}: {spec.command} {' '.join(spec.args)}".rstrip())


def manage_config(settings: ClientSettings, args: argparse.Namespace) -> int:
    store = ConfigStore(
        settings.resolved_config_path,
        import_claude_config=settings.import_claude_config,
    )
    store.load()

    if args.action == "show":
        print_config(store)
        return 0

    if args.action == "set-ollama":
        store.update_ollama(host=args.ollama_host)
        print(f"Ollama host set to {args.ollama_host}")
    elif args.action == "set-model":
        store.update_ollama(default_model=args.model)
        print(f"Default model set to {args.model}")
    elif args.action == "add-server":
        store.add_server(
            args.name,
            ServerLaunchSpec(
                command=args.server_command,
                args=args.server_args,
                env=_parse_env(args.server_env),
            ),
        )
        print(f"Added server {args.name}")
    elif args.action == "remove-server":
        try:
            store.remove_server(args.name)
        except KeyError as e:
            print(e.args[0], file=sys.stderr)
            return 1
        print(f"Removed server {args.name}")

    store.save()
    return 0


def init_config(settings: ClientSettings) -> int:
    path = settings.resolved_config_path
    if path.exists():
        print(f"{path} already exists", file=sys.stderr)
        return 1
    store = ConfigStore(path, import_claude_config=False)
    store.config = ClientConfig()
    store.save()
    print(f"Wrote default configuration to {path}")
    return 0


def serve(settings: ClientSettings) -> int:
    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ollama-mcp-client CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.config is not None:
        settings_kwargs["config_path"] = args.config
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level
    if getattr(args, "host", None) is not None:
        settings_kwargs["host"] = args.host
    if getattr(args, "port", None) is not None:
        settings_kwargs["port"] = args.port

    settings = ClientSettings(**settings_kwargs)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "chat":
            asyncio.run(run_chat(settings))
            return 0
        if args.command == "test":
            return asyncio.run(run_connection_test(settings))
        if args.command == "init":
            return init_config(settings)
        if args.command == "config":
            return manage_config(settings, args)
        return serve(settings)
    except (ValueError, argparse.ArgumentTypeError) as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
