# Area: Shared
"""
server_warden.cli — Command-line interface
==========================================

Provides the CLI entry point for running the warden.

Usage:
    server-warden                              # .env / environment only
    server-warden --config config.json         # JSON file + environment
    python -m server_warden --config config.json --debug

Environment variables (also read from .env) override the JSON file.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Environment variable -> config key
ENV_MAPPINGS = {
    "DISCORD_BOT_TOKEN": "discord_token",
    "CHANNEL_ID": "channel_id",
    "SERVER_IP": "server_ip",
    "SERVER_PORT": "server_port",
    "SERVER_PASSWORD": "server_password",
    "SUPERVISOR_COMMAND": "supervisor_command",
    "SERVER_DIR": "server_dir",
    "GAMEDIG_PATH": "gamedig_path",
    "QUERY_TYPE": "query_type",
    "CHECK_INTERVAL_SECONDS": "check_interval",
    "HANDLES_PATH": "handles_path",
    "START_COMMAND": "start_command",
    "LOG_FILE": "log_file",
}

INT_KEYS = {"server_port"}
FLOAT_KEYS = {"check_interval"}


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Server Warden - start/stop a game server from Discord",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  server-warden --config config.json
  server-warden --env-file /etc/server-warden/.env
  DISCORD_BOT_TOKEN=... CHANNEL_ID=... server-warden
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path to .env file (default: .env)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load config from file, then override with the environment."""
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            value: Any = os.environ[env_key]
            if config_key in INT_KEYS:
                value = int(value)
            elif config_key in FLOAT_KEYS:
                value = float(value)
            config[config_key] = value

    return config


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    load_dotenv(args.env_file)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: Invalid config value: {e}", file=sys.stderr)
        return 1
    if args.debug:
        config["debug"] = True

    # Import runner here to keep --help fast
    from .warden_runner import WardenRunner

    try:
        runner = WardenRunner(config=config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set via config file or environment variables.", file=sys.stderr)
        return 1

    runner.run()
    return 0
