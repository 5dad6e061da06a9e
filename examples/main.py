"""
main.py — Run the warden from Python
====================================

Equivalent to ``server-warden --config config.json`` but lets you tweak
the config in code.

    python main.py

The warden will:
  1. Mirror the server status into the channel every 10 seconds
  2. Start the server when someone types !start
  3. Stop it again after ~70 seconds without players

Press Ctrl+C to stop.
"""

import os

from dotenv import load_dotenv

from server_warden import WardenRunner

load_dotenv()

# ── Configuration ──
config = {
    # Discord (keep the token in .env)
    "discord_token": os.environ.get("DISCORD_BOT_TOKEN", ""),
    "channel_id": os.environ.get("CHANNEL_ID", ""),

    # What players need to connect
    "server_ip": "203.0.113.10",
    "server_port": 26900,
    "server_password": os.environ.get("SERVER_PASSWORD", ""),

    # LinuxGSM install
    "supervisor_command": "./sdtdserver",
    "server_dir": "/home/sdtdserver",

    # Status query
    "gamedig_path": "gamedig",
    "query_type": "protocol-valve",

    # Timings (defaults shown)
    "check_interval": 10,
    "max_empty_checks": 7,
    "warning_check": 5,
    "player_wait_seconds": 300,
}

if __name__ == "__main__":
    WardenRunner(config=config).run()
