# Area: Runner Tests
"""Tests for WardenRunner wiring and the start-command loop."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from server_warden._lifecycle.enums import LifecyclePhase
from server_warden.errors import NotificationError
from server_warden.warden_runner import WardenRunner


def user_message(message_id, content, bot=False):
    return {
        "id": message_id,
        "content": content,
        "author": {"username": "alice", "bot": bot},
    }


@pytest.fixture(autouse=True)
def quiet_logging():
    yield
    # setup_logging() installs handlers on the package logger
    pkg_logger = logging.getLogger("server_warden")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()


class TestWardenRunner:
    """Tests for WardenRunner."""

    def create_config(self, tmp_path):
        return {
            "discord_token": "token",
            "channel_id": "42",
            "handles_path": str(tmp_path / "message_ids.json"),
            "log_file": str(tmp_path / "warden.log"),
        }

    def create_runner(self, tmp_path, mock_channel_cls):
        channel = mock_channel_cls.return_value
        channel.latest_message_id.return_value = None
        channel.fetch_messages.return_value = []
        runner = WardenRunner(config=self.create_config(tmp_path))
        runner.controller.request_start = MagicMock(return_value=True)
        return runner, channel

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_runner_creation(self, mock_channel_cls, tmp_path):
        runner = WardenRunner(config=self.create_config(tmp_path))

        assert runner.controller.phase == LifecyclePhase.STOPPED
        assert runner.probe.host == "127.0.0.1"
        mock_channel_cls.assert_called_once()
        assert mock_channel_cls.call_args.kwargs["channel_id"] == "42"

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_invalid_config_raises(self, mock_channel_cls, tmp_path):
        config = self.create_config(tmp_path)
        del config["discord_token"]
        with pytest.raises(ValueError):
            WardenRunner(config=config)
        mock_channel_cls.assert_not_called()

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_start_command_triggers_start(self, mock_channel_cls, tmp_path):
        runner, channel = self.create_runner(tmp_path, mock_channel_cls)
        channel.fetch_messages.return_value = [user_message("7", "  !START ")]

        runner._poll_and_process()

        runner.controller.request_start.assert_called_once()
        # The controller posts the acknowledgement itself
        channel.send_announcement.assert_not_called()
        assert runner._last_seen_id == "7"

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_bot_messages_are_ignored(self, mock_channel_cls, tmp_path):
        runner, channel = self.create_runner(tmp_path, mock_channel_cls)
        channel.fetch_messages.return_value = [user_message("8", "!start", bot=True)]

        runner._poll_and_process()

        runner.controller.request_start.assert_not_called()
        assert runner._last_seen_id == "8"

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_other_messages_are_ignored(self, mock_channel_cls, tmp_path):
        runner, channel = self.create_runner(tmp_path, mock_channel_cls)
        channel.fetch_messages.return_value = [user_message("9", "!start please")]

        runner._poll_and_process()

        runner.controller.request_start.assert_not_called()

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_rejected_start_is_announced(self, mock_channel_cls, tmp_path):
        runner, channel = self.create_runner(tmp_path, mock_channel_cls)
        runner.controller.request_start.return_value = False

        assert runner.handle_start_request() is False

        text = channel.send_announcement.call_args.args[0]
        assert "STOPPED" in text
        assert "Starting the server..." not in text

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_signal_flag_triggers_start(self, mock_channel_cls, tmp_path):
        runner, _ = self.create_runner(tmp_path, mock_channel_cls)
        runner._start_signalled = True

        runner._poll_and_process()

        runner.controller.request_start.assert_called_once()
        assert runner._start_signalled is False

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_poll_failure_is_logged_not_raised(self, mock_channel_cls, tmp_path):
        runner, channel = self.create_runner(tmp_path, mock_channel_cls)
        runner._anchored = True
        runner._last_seen_id = "3"
        channel.fetch_messages.side_effect = NotificationError("fetch_messages", "down")

        runner._poll_and_process()

        assert runner._last_seen_id == "3"

    @patch("server_warden.warden_runner.DiscordChannel")
    def test_history_anchor_retried_before_reading_commands(self, mock_channel_cls, tmp_path):
        runner, channel = self.create_runner(tmp_path, mock_channel_cls)
        channel.latest_message_id.side_effect = [
            NotificationError("fetch_messages", "down"),
            "20",
        ]
        channel.fetch_messages.return_value = [user_message("5", "!start")]

        runner._poll_and_process()

        # Old commands are never read while the history is unknown
        channel.fetch_messages.assert_not_called()
        runner.controller.request_start.assert_not_called()

        channel.fetch_messages.return_value = []
        runner._poll_and_process()

        channel.fetch_messages.assert_called_once_with(after="20")
        runner.controller.request_start.assert_not_called()
        assert runner._anchored is True

    @patch("server_warden.warden_runner.signal.signal")
    @patch("server_warden.warden_runner.DiscordChannel")
    def test_run_loop_lifecycle(self, mock_channel_cls, mock_signal, tmp_path):
        runner, channel = self.create_runner(tmp_path, mock_channel_cls)
        channel.latest_message_id.return_value = "10"
        runner.scheduler = MagicMock()

        with patch(
            "server_warden.warden_runner.time.sleep",
            side_effect=lambda s: setattr(runner, "_running", False),
        ):
            runner.run()

        channel.fetch_messages.assert_called_once_with(after="10")
        runner.scheduler.start.assert_called_once()
        runner.scheduler.stop.assert_called_once()
        channel.close.assert_called_once()
        assert mock_signal.call_count >= 2
