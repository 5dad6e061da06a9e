# Area: Lifecycle
"""
server_warden._lifecycle.messages — Channel message builder
===========================================================

Builds every text the warden posts to the channel. Keeping them in one
place means the controller only decides *when* to say something.
"""

from __future__ import annotations

from .._probe.snapshot import ErrorKind, ServerSnapshot
from .._runner_config import WardenConfig

JOINED_SUFFIX = "\n\n✅ A player has joined!"


class MessageBuilder:
    """Renders status, startup and announcement messages."""

    def __init__(self, config: WardenConfig):
        """
        Initialize builder with config.

        Args:
            config: Settings providing connection info and timings
        """
        self.config = config

    # ── status slot ─────────────────────────────────────────────

    def status(self, snapshot: ServerSnapshot) -> str:
        """Mirror of the latest snapshot."""
        if snapshot.error_kind is ErrorKind.PARSE_FAILURE:
            return "Server: error\nStatus: status check failed"
        if not snapshot.ok:
            return "Server: offline\nStatus: stopped"
        ping = f"{snapshot.ping}ms" if snapshot.ping is not None else "n/a"
        return (
            f"Online: {snapshot.player_count} players\n"
            f"ping: {ping}\n"
            f"Version: {snapshot.version or 'unknown'}"
        )

    # ── startup slot ────────────────────────────────────────────

    def startup(self, player_count: int, countdown: int = 0) -> str:
        """Connection info, optional join countdown and player count."""
        lines = [
            "🟢 Server startup complete",
            "```",
            f"IP: {self.config.server_ip}",
            f"Port: {self.config.server_port}",
        ]
        if self.config.server_password:
            lines.append(f"Password: {self.config.server_password}")
        lines.append("```")
        if countdown > 0:
            lines.append(f"⏰ Please join within {countdown} seconds")
        lines.append(f"👥 Current players: {player_count}")
        return "\n".join(lines)

    def startup_joined(self, player_count: int) -> str:
        return self.startup(player_count) + JOINED_SUFFIX

    def startup_warning(self) -> str:
        return self.startup(0) + (
            f"\n\n⚠️ The server will stop automatically if nobody joins "
            f"within {self.config.warning_lead_seconds} seconds"
        )

    # ── announcements ───────────────────────────────────────────

    def start_acknowledged(self) -> str:
        return "Starting the server..."

    def start_rejected(self, phase_name: str) -> str:
        return f"ℹ️ The server is not stopped (current phase: {phase_name}), start ignored"

    def start_failed(self, error: str) -> str:
        return f"❌ Failed to start the server: {error}"

    def start_timed_out(self) -> str:
        return "❌ Server start timed out"

    def auto_stop_notice(self) -> str:
        return (
            f"ℹ️ The server stops automatically once it has had 0 players "
            f"for {self.config.idle_shutdown_seconds} seconds"
        )

    def empty_warning(self) -> str:
        return (
            f"⚠️ The server will be stopped if nobody joins within "
            f"{self.config.warning_lead_seconds} seconds"
        )

    def stopping(self) -> str:
        return "🔴 No players online, stopping the server automatically"

    def stopped(self) -> str:
        return "✅ The server stopped successfully"

    def stop_failed(self, error: str) -> str:
        return f"❌ Failed to stop the server: {error}"
