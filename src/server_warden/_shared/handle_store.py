# Area: Shared
"""
server_warden._shared.handle_store — Persisted message handles
==============================================================

Keeps the Discord message ids of the notification slots in a small JSON
file so a restarted warden keeps editing the same status message instead
of posting a new one. File layout:

    {"status_message_id": "1234", "startup_message_id": ""}

Both directions fail soft. A missing or unreadable file loads as an empty
mapping, and a failed write is logged; the in-memory mapping stays
authoritative for the running process.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger("server_warden.handles")

STATUS_SLOT = "status"
STARTUP_SLOT = "startup"

# slot name -> field name in the handle file
SLOT_FIELDS = {
    STATUS_SLOT: "status_message_id",
    STARTUP_SLOT: "startup_message_id",
}


class MessageHandles(BaseModel):
    """On-disk record of slot identifiers."""

    model_config = ConfigDict(extra="ignore")

    status_message_id: str = ""
    startup_message_id: str = ""


class HandleStore:
    """Loads and saves the slot → message id mapping."""

    def __init__(self, path: str = "message_ids.json"):
        self.path = Path(path)

    def load(self) -> Dict[str, str]:
        """
        Read the mapping from disk.

        Returns:
            slot name → message id, containing only slots that have an id
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"{self.path} not found, starting with fresh message slots")
            return {}
        except OSError as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return {}

        try:
            record = MessageHandles.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupt handle file {self.path}: {e.error_count()} error(s)")
            return {}

        return {
            slot: getattr(record, field)
            for slot, field in SLOT_FIELDS.items()
            if getattr(record, field)
        }

    def save(self, mapping: Dict[str, str]) -> bool:
        """
        Write the mapping to disk, replacing the file atomically.

        Returns:
            True if the file was written
        """
        record = MessageHandles(**{
            field: mapping.get(slot) or ""
            for slot, field in SLOT_FIELDS.items()
        })
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(record.model_dump_json())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Failed to save message ids to {self.path}: {e}")
            return False
        logger.debug(f"Saved message ids: {mapping}")
        return True
