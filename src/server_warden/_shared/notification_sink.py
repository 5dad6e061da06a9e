# Area: Shared
"""
server_warden._shared.notification_sink — Named message slots
=============================================================

A slot is a logical, long-lived message ("status", "startup") backed by
one Discord message that gets edited in place. The sink remembers which
message backs each slot, persists that mapping through HandleStore and
recreates the message when somebody deletes it from the channel.

Every operation is best-effort. Delivery failures are logged and
swallowed: the lifecycle state machine must behave the same whether or
not Discord accepted the write.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from ..errors import MessageNotFoundError, NotificationError
from .discord_client import DiscordChannel
from .handle_store import HandleStore

logger = logging.getLogger("server_warden.sink")


class NotificationSink:
    """Create-or-update access to named message slots."""

    def __init__(self, channel: DiscordChannel, store: HandleStore):
        self._channel = channel
        self._store = store
        self._lock = threading.Lock()
        self._slots: Dict[str, str] = store.load()
        if self._slots:
            logger.info(f"Loaded message slots: {self._slots}")

    def identifier(self, slot: str) -> Optional[str]:
        """Current message id of a slot, or None."""
        with self._lock:
            return self._slots.get(slot)

    def upsert(self, slot: str, content: str) -> Optional[str]:
        """
        Write ``content`` to a slot, creating its message if needed.

        Returns:
            The message id now backing the slot, or None if delivery failed
        """
        with self._lock:
            message_id = self._slots.get(slot)
            if message_id is None:
                return self._create_locked(slot, content)
            return self._edit_locked(slot, message_id, content)

    def update(self, slot: str, content: str) -> Optional[str]:
        """
        Edit a slot only if it currently has a message.

        A cleared slot stays cleared: late updates for a phase that has
        already ended must not bring its message back.
        """
        with self._lock:
            message_id = self._slots.get(slot)
            if message_id is None:
                logger.debug(f"Skipping update of empty slot '{slot}'")
                return None
            return self._edit_locked(slot, message_id, content)

    def create(self, slot: str, content: str) -> Optional[str]:
        """Post a fresh message for a slot, replacing any previous id."""
        with self._lock:
            return self._create_locked(slot, content)

    def clear(self, slot: str) -> None:
        """Forget the message backing a slot."""
        with self._lock:
            if self._slots.pop(slot, None) is not None:
                logger.debug(f"Cleared slot '{slot}'")
                self._persist_locked()

    def send(self, content: str) -> Optional[str]:
        """Post a one-off announcement that belongs to no slot."""
        try:
            return self._channel.send_announcement(content)
        except NotificationError as e:
            logger.warning(f"Announcement not delivered: {e}")
            return None

    def _create_locked(self, slot: str, content: str) -> Optional[str]:
        try:
            message_id = self._channel.create_message(content)
        except NotificationError as e:
            logger.warning(f"Could not create '{slot}' message: {e}")
            return None
        self._slots[slot] = message_id
        self._persist_locked()
        logger.info(f"Created '{slot}' message {message_id}")
        return message_id

    def _edit_locked(self, slot: str, message_id: str, content: str) -> Optional[str]:
        try:
            self._channel.edit_message(message_id, content)
            return message_id
        except MessageNotFoundError:
            logger.info(f"'{slot}' message {message_id} was deleted, recreating it")
            del self._slots[slot]
            self._persist_locked()
            return self._create_locked(slot, content)
        except NotificationError as e:
            logger.warning(f"Could not update '{slot}' message: {e}")
            return None

    def _persist_locked(self) -> None:
        self._store.save(dict(self._slots))
