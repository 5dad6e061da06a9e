# Area: Shared
"""
server_warden._runner_config — Runner Configuration
====================================================

Configuration validation and constants for WardenRunner.

The defaults are tuned for a 7 Days to Die server:
the server is polled every 10 seconds, players get five minutes to join
after a start, and an empty server is warned at the 5th empty check and
stopped at the 7th.
"""

import logging
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger("server_warden")

MAX_EMPTY_CHECKS = 7
WARNING_CHECK = 5
CHECK_INTERVAL = 10.0
STARTUP_GRACE_PERIOD = 300.0
WAIT_PLAYER_INTERVAL = 3.0
SERVER_START_TIMEOUT = 300.0
START_POLL_INTERVAL = 5.0
PLAYER_WAIT_SECONDS = 300

# Required config keys (may come from the JSON file or the environment)
REQUIRED_CONFIG_KEYS = [
    "discord_token",
    "channel_id",
]


class WardenConfig(BaseModel):
    """Validated settings for one warden instance."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Discord
    discord_token: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    discord_api_base: str = "https://discord.com/api/v10"
    start_command: str = "!start"
    command_poll_interval: float = Field(default=5.0, gt=0)

    # Game server
    server_ip: str = "127.0.0.1"
    server_port: int = Field(default=26900, gt=0, lt=65536)
    server_password: str = ""

    # Supervisor
    supervisor_command: str = "./sdtdserver"
    server_dir: str = "."
    supervisor_timeout: float = Field(default=180.0, gt=0)

    # Status oracle
    gamedig_path: str = "gamedig"
    query_type: str = "protocol-valve"
    probe_timeout: float = Field(default=15.0, gt=0)

    # Lifecycle timings
    check_interval: float = Field(default=CHECK_INTERVAL, gt=0)
    wait_player_interval: float = Field(default=WAIT_PLAYER_INTERVAL, gt=0)
    player_wait_seconds: int = Field(default=PLAYER_WAIT_SECONDS, gt=0)
    startup_grace_period: float = Field(default=STARTUP_GRACE_PERIOD, ge=0)
    server_start_timeout: float = Field(default=SERVER_START_TIMEOUT, gt=0)
    start_poll_interval: float = Field(default=START_POLL_INTERVAL, gt=0)
    max_empty_checks: int = Field(default=MAX_EMPTY_CHECKS, ge=1)
    warning_check: int = Field(default=WARNING_CHECK, ge=1)

    # Files
    handles_path: str = "message_ids.json"
    log_file: str = "server_warden.log"
    debug: bool = False

    @field_validator("discord_token", "channel_id", "server_password", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # JSON configs often carry the channel id as a bare number
        if isinstance(value, int):
            return str(value)
        return value

    @model_validator(mode="after")
    def _warning_before_stop(self) -> "WardenConfig":
        if self.warning_check >= self.max_empty_checks:
            raise ValueError(
                f"warning_check ({self.warning_check}) must be lower than "
                f"max_empty_checks ({self.max_empty_checks})"
            )
        return self

    @property
    def idle_shutdown_seconds(self) -> int:
        """Seconds of continuous emptiness before the server is stopped."""
        return int(self.max_empty_checks * self.check_interval)

    @property
    def warning_lead_seconds(self) -> int:
        """Seconds between the empty-server warning and the stop."""
        return int((self.max_empty_checks - self.warning_check) * self.check_interval)


def validate_config(config: Dict[str, Any]) -> WardenConfig:
    """
    Validate a raw configuration dict.

    Args:
        config: Configuration dict (JSON file merged with environment)

    Returns:
        The validated WardenConfig

    Raises:
        ValueError: If required keys are missing or a value is invalid
            (pydantic's ValidationError is a ValueError)
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if not config.get(k)]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")
    validated = WardenConfig.model_validate(config)
    logger.debug(f"Config validated (channel={validated.channel_id}, server={validated.server_ip}:{validated.server_port})")
    return validated
