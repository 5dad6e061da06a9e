# Area: Shared Tests
"""Tests for the command-line entry point."""

import json
import logging
import os
from unittest.mock import patch

import pytest

from server_warden.cli import ENV_MAPPINGS, load_config, main, parse_args


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate each test from the caller's environment and .env file."""
    for env_key in ENV_MAPPINGS:
        monkeypatch.delenv(env_key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv() writes straight to os.environ
    for env_key in ENV_MAPPINGS:
        os.environ.pop(env_key, None)
    pkg_logger = logging.getLogger("server_warden")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.config is None
        assert args.env_file == ".env"
        assert args.debug is False

    def test_all_flags(self):
        args = parse_args(["--config", "c.json", "--env-file", "x.env", "--debug"])
        assert args.config == "c.json"
        assert args.env_file == "x.env"
        assert args.debug is True


class TestLoadConfig:
    """Tests for JSON + environment merging."""

    def test_reads_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"channel_id": "1", "server_ip": "10.0.0.1"}))

        config = load_config(str(path))

        assert config == {"channel_id": "1", "server_ip": "10.0.0.1"}

    def test_missing_file_is_empty(self, tmp_path):
        assert load_config(str(tmp_path / "nope.json")) == {}

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"server_ip": "10.0.0.1"}))
        monkeypatch.setenv("SERVER_IP", "10.0.0.2")
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "abc")

        config = load_config(str(path))

        assert config["server_ip"] == "10.0.0.2"
        assert config["discord_token"] == "abc"

    def test_numeric_values_are_cast(self, monkeypatch):
        monkeypatch.setenv("SERVER_PORT", "27015")
        monkeypatch.setenv("CHECK_INTERVAL_SECONDS", "2.5")

        config = load_config(None)

        assert config["server_port"] == 27015
        assert config["check_interval"] == 2.5


class TestMain:
    """Tests for main()."""

    def test_missing_token_exits_with_error(self, capsys):
        assert main([]) == 1
        assert "discord_token" in capsys.readouterr().err

    def test_bad_number_exits_with_error(self, monkeypatch):
        monkeypatch.setenv("SERVER_PORT", "not-a-port")
        assert main([]) == 1

    def test_runs_runner_with_env_file(self, tmp_path):
        env_file = tmp_path / "warden.env"
        env_file.write_text("DISCORD_BOT_TOKEN=abc\nCHANNEL_ID=42\n")

        with patch("server_warden.warden_runner.WardenRunner") as mock_runner:
            assert main(["--env-file", str(env_file), "--debug"]) == 0

        config = mock_runner.call_args.kwargs["config"]
        assert config["discord_token"] == "abc"
        assert config["channel_id"] == "42"
        assert config["debug"] is True
        mock_runner.return_value.run.assert_called_once()
