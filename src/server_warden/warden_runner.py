# Area: Runner
"""
server_warden.warden_runner — Warden Runner
===========================================

Wires the probe, supervisor, Discord sink and lifecycle controller
together, starts the tick drivers and then polls the channel for the
start command until interrupted.
"""

from __future__ import annotations
import logging
import signal
import time
from typing import Any, Dict, Optional

from ._lifecycle import LifecycleController, SchedulerLoop
from ._probe import StatusProbe
from ._runner_config import validate_config
from ._shared import DiscordChannel, HandleStore, NotificationSink, setup_logging
from ._supervisor import ServerSupervisor
from .errors import NotificationError

logger = logging.getLogger("server_warden")


class WardenRunner:
    """
    Long-running warden process.

    The tick drivers run on their own threads; this object's run() loop
    only handles start triggers (channel command or SIGUSR1).
    """

    def __init__(self, config: Dict[str, Any]):
        self._running = False
        self._start_signalled = False

        # Setup logging
        log_file = config.get("log_file", "server_warden.log")
        setup_logging(
            log_file_path=log_file,
            level=logging.DEBUG if config.get("debug") else logging.INFO,
        )

        # Validate config
        self.config = validate_config(config)

        self.channel = DiscordChannel(
            token=self.config.discord_token,
            channel_id=self.config.channel_id,
            api_base=self.config.discord_api_base,
        )
        self.sink = NotificationSink(self.channel, HandleStore(self.config.handles_path))
        self.probe = StatusProbe(
            host=self.config.server_ip,
            port=self.config.server_port,
            query_type=self.config.query_type,
            executable=self.config.gamedig_path,
            timeout=self.config.probe_timeout,
        )
        self.supervisor = ServerSupervisor(
            command=self.config.supervisor_command,
            server_dir=self.config.server_dir,
            timeout=self.config.supervisor_timeout,
        )
        self.controller = LifecycleController(
            config=self.config,
            supervisor=self.supervisor,
            probe=self.probe,
            sink=self.sink,
        )
        self.scheduler = SchedulerLoop(
            self.controller,
            check_interval=self.config.check_interval,
            wait_interval=self.config.wait_player_interval,
        )

        self.poll_interval = self.config.command_poll_interval
        self._last_seen_id: Optional[str] = None
        # True once the newest pre-existing message id is known
        self._anchored = False

    def run(self) -> None:
        """Start the drivers and the command loop. Blocks until interrupted."""
        self._running = True
        signal.signal(signal.SIGINT, lambda s, f: setattr(self, "_running", False))
        signal.signal(signal.SIGTERM, lambda s, f: setattr(self, "_running", False))
        if hasattr(signal, "SIGUSR1"):
            signal.signal(signal.SIGUSR1, lambda s, f: setattr(self, "_start_signalled", True))

        self._log_startup()
        self._anchor_history()
        self.scheduler.start()

        while self._running:
            try:
                self._poll_and_process()
                time.sleep(self.poll_interval)
            except KeyboardInterrupt:
                break
            except Exception as e:
                logger.error(f"Loop error: {e}", exc_info=True)
                time.sleep(self.poll_interval)

        self.scheduler.stop()
        self.controller.shutdown()
        self.channel.close()
        logger.info("Warden stopped.")

    def _log_startup(self) -> None:
        """Log startup information."""
        logger.info("=" * 60)
        logger.info("  Server Warden — Starting")
        logger.info(f"  Server:  {self.config.server_ip}:{self.config.server_port}")
        logger.info(f"  Channel: {self.config.channel_id}")
        logger.info(f"  Check:   every {self.config.check_interval:.0f}s")
        logger.info(
            f"  Idle:    warn at {self.config.warning_check}, "
            f"stop at {self.config.max_empty_checks} empty checks"
        )
        logger.info("=" * 60)

    def _anchor_history(self) -> bool:
        """
        Remember the newest message already in the channel so commands
        posted before startup are never replayed. Retried every poll
        until it succeeds.
        """
        if self._anchored:
            return True
        try:
            self._last_seen_id = self.channel.latest_message_id()
        except NotificationError as e:
            logger.warning(f"Could not read channel history: {e}")
            return False
        self._anchored = True
        return True

    def _poll_and_process(self) -> None:
        """Single poll iteration: signal flag, then new channel messages."""
        if self._start_signalled:
            self._start_signalled = False
            logger.info("Start requested via SIGUSR1")
            self.handle_start_request()

        if not self._anchor_history():
            return

        try:
            messages = self.channel.fetch_messages(after=self._last_seen_id)
        except NotificationError as e:
            logger.warning(f"Command poll failed: {e}")
            return

        for msg in messages:
            self._last_seen_id = str(msg["id"])
            if self._is_start_command(msg):
                author = (msg.get("author") or {}).get("username", "unknown")
                logger.info(f"Start requested by {author}")
                self.handle_start_request()

    def _is_start_command(self, msg: Dict[str, Any]) -> bool:
        if (msg.get("author") or {}).get("bot"):
            return False
        content = (msg.get("content") or "").strip().lower()
        return content == self.config.start_command.lower()

    def handle_start_request(self) -> bool:
        """Hand a start trigger to the controller; announce a rejection."""
        if self.controller.request_start():
            return True
        self.sink.send(self.controller.messages.start_rejected(self.controller.phase.value))
        return False
