# Area: Shared
"""
server_warden._shared.discord_client — Discord REST channel client
==================================================================

Handles all channel I/O over the Discord HTTP API (v10) with a bot token.
The notification sink calls create_message()/edit_message(); the runner
calls fetch_messages() to pick up the start command.

This client is transport-only: it makes no decisions about what to send
or when, and it raises instead of retrying. Callers own recovery.

Setup:
    1. Create an application + bot at https://discord.com/developers
    2. Enable the MESSAGE CONTENT intent (needed to read "!start")
    3. Invite the bot with Send Messages / Read Message History
    4. Set DISCORD_BOT_TOKEN and CHANNEL_ID in .env
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import MessageNotFoundError, NotificationError

logger = logging.getLogger("server_warden.discord")

DEFAULT_API_BASE = "https://discord.com/api/v10"
USER_AGENT = "DiscordBot (https://github.com/server-warden/server-warden, 1.0)"

# Discord rejects message bodies above this length
MAX_CONTENT_LENGTH = 2000


class DiscordChannel:
    """Bot-token client bound to a single text channel."""

    def __init__(
        self,
        token: str,
        channel_id: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the channel client.

        Args:
            token: Bot token (without the "Bot " prefix)
            channel_id: Snowflake of the text channel to write to
            api_base: Discord API root URL
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.channel_id = str(channel_id)
        self._client = httpx.Client(
            base_url=api_base,
            headers={
                "Authorization": f"Bot {token}",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )
        logger.info(f"DiscordChannel initialized (channel={self.channel_id})")

    @property
    def _messages_path(self) -> str:
        return f"/channels/{self.channel_id}/messages"

    def create_message(self, content: str) -> str:
        """Post a new message. Returns its id."""
        data = self._request(
            "create_message", "POST", self._messages_path,
            json={"content": _clip(content)},
        )
        return _message_id("create_message", data)

    def edit_message(self, message_id: str, content: str) -> str:
        """
        Replace the content of an existing message.

        Raises:
            MessageNotFoundError: If the message was deleted
            NotificationError: On any other failure
        """
        data = self._request(
            "edit_message", "PATCH", f"{self._messages_path}/{message_id}",
            json={"content": _clip(content)},
            message_id=message_id,
        )
        if isinstance(data, dict) and data.get("id"):
            return str(data["id"])
        return message_id

    def send_announcement(self, content: str) -> str:
        """Post a one-off message that is never edited afterwards."""
        return self.create_message(content)

    def fetch_messages(self, after: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
        """
        Fetch recent channel messages, oldest first.

        Args:
            after: Only return messages newer than this message id
            limit: Maximum number of messages (Discord caps it at 100)
        """
        params: Dict[str, Any] = {"limit": max(1, min(limit, 100))}
        if after:
            params["after"] = after
        data = self._request("fetch_messages", "GET", self._messages_path, params=params)
        if not isinstance(data, list):
            raise NotificationError("fetch_messages", f"expected a list, got {type(data).__name__}")
        try:
            return sorted(data, key=lambda m: int(m["id"]))
        except (KeyError, TypeError, ValueError) as e:
            raise NotificationError("fetch_messages", f"malformed message in response: {e!r}") from e

    def latest_message_id(self) -> Optional[str]:
        """Id of the newest message in the channel, or None if empty."""
        messages = self.fetch_messages(limit=1)
        return str(messages[-1]["id"]) if messages else None

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        message_id: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise NotificationError(operation, str(e)) from e

        if response.status_code == 404 and message_id is not None:
            raise MessageNotFoundError(message_id, _error_detail(response))
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "?")
            raise NotificationError(
                operation, f"rate limited, retry after {retry_after}s", status_code=429
            )
        if response.is_error:
            raise NotificationError(operation, _error_detail(response), response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise NotificationError(operation, f"invalid JSON response: {e}") from e


def _message_id(operation: str, data: Any) -> str:
    if not isinstance(data, dict) or not data.get("id"):
        raise NotificationError(operation, "response carries no message id")
    return str(data["id"])


def _clip(content: str) -> str:
    if len(content) <= MAX_CONTENT_LENGTH:
        return content
    return content[: MAX_CONTENT_LENGTH - 1] + "…"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message", body))
    return str(body)
