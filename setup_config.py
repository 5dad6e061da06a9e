#!/usr/bin/env python3
# Area: Shared
"""
Server Warden - Configuration Setup Script
==========================================

Interactive script to generate config.json and .env files.
Secrets (bot token, server password) only go to .env.

Usage:
    python setup_config.py
"""

import json
from pathlib import Path

# (section, config key, question, default, required, cast)
QUESTIONS = [
    ("Discord Bot", "discord_token", "Bot token", "", True, str),
    ("Discord Bot", "channel_id", "Channel ID", "", True, str),
    ("Discord Bot", "start_command", "Start command", "!start", True, str),
    ("Game Server", "server_ip", "Server IP shown to players", "127.0.0.1", True, str),
    ("Game Server", "server_port", "Server port", "26900", True, int),
    ("Game Server", "server_password", "Server password", "", False, str),
    ("Game Server", "supervisor_command", "Supervisor command", "./sdtdserver", True, str),
    ("Game Server", "server_dir", "Supervisor working directory", ".", True, str),
    ("Status Query", "gamedig_path", "gamedig executable", "gamedig", True, str),
    ("Status Query", "query_type", "gamedig query type", "protocol-valve", True, str),
    ("Timings", "check_interval", "Check interval in seconds", "10", False, float),
]

SECTION_HELP = {
    "Discord Bot": [
        "1. Create an application and bot at https://discord.com/developers",
        "2. Enable the MESSAGE CONTENT intent",
        "3. Right-click the status channel > Copy Channel ID (developer mode)",
    ],
}

# config key -> .env variable
SECRET_ENV = {
    "discord_token": "DISCORD_BOT_TOKEN",
    "server_password": "SERVER_PASSWORD",
}


def ask(question: str, default: str = "", required: bool = True) -> str:
    """Read one answer, falling back to the default on empty input."""
    suffix = f" [{default}]" if default else ""
    while True:
        answer = input(f"{question}{suffix}: ").strip() or default
        if answer or not required:
            return answer
        print("  A value is required.")


def banner(title: str) -> None:
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def collect() -> dict:
    """Walk through QUESTIONS, one section at a time."""
    config = {}
    section = None
    for name, key, question, default, required, cast in QUESTIONS:
        if name != section:
            section = name
            print(f"\n--- {section} ---\n")
            for line in SECTION_HELP.get(section, []):
                print(line)
        answer = ask(question, default, required)
        if answer:
            config[key] = cast(answer)
    return config


def write_files(config: dict, base: Path) -> None:
    """Split the answers into config.json (settings) and .env (secrets)."""
    settings = {k: v for k, v in config.items() if k not in SECRET_ENV}
    config_path = base / "config.json"
    config_path.write_text(json.dumps(settings, indent=4) + "\n", encoding="utf-8")
    print(f"  Created: {config_path}")

    env_lines = [f"{env}={config[key]}" for key, env in SECRET_ENV.items() if config.get(key)]
    env_path = base / ".env"
    env_path.write_text("\n".join(env_lines) + "\n", encoding="utf-8")
    print(f"  Created: {env_path}")


def main():
    banner("Server Warden - Configuration Setup")
    print("Press Enter to accept default values shown in [brackets].")

    try:
        config = collect()
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        return 1
    except ValueError as e:
        print(f"\n\nInvalid value: {e}")
        return 1

    print("\n--- Generating Files ---\n")
    write_files(config, Path.cwd())

    banner("Setup Complete!")
    print("Next steps:")
    print("  1. Install gamedig:   npm install -g gamedig")
    print("  2. Run the warden:    server-warden --config config.json")
    print(f"  3. Type {config.get('start_command', '!start')} in the channel to start the server")
    print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
