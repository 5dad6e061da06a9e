# Area: Probe
"""
server_warden._probe.snapshot — Probe result types
==================================================

A ServerSnapshot is the normalized result of one status query. It is
produced fresh for every probe and never mutated afterwards.

GamedigPayload is the schema of the JSON printed by the ``gamedig`` CLI.
Only the fields the warden displays are declared; everything else the
tool emits (player lists, raw rules, ...) is ignored.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(Enum):
    """Why a probe did not produce a usable status."""
    NONE = "none"
    UNREACHABLE = "unreachable"          # transport failure, timeout, server down
    PARSE_FAILURE = "parse_failure"      # oracle answered with something unreadable


@dataclass(frozen=True)
class ServerSnapshot:
    """One probe result."""
    player_count: int = 0
    online: bool = False
    error_kind: ErrorKind = ErrorKind.NONE
    ping: Optional[int] = None
    version: str = ""
    name: str = ""
    map_name: str = ""
    error_message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is ErrorKind.NONE

    @classmethod
    def unreachable(cls, message: str) -> "ServerSnapshot":
        return cls(error_kind=ErrorKind.UNREACHABLE, error_message=message)

    @classmethod
    def parse_failure(cls, message: str) -> "ServerSnapshot":
        return cls(error_kind=ErrorKind.PARSE_FAILURE, error_message=message)


class GamedigPayload(BaseModel):
    """JSON document printed by ``gamedig``."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    map: str = ""
    numplayers: int = Field(default=0, ge=0)
    ping: Optional[int] = None
    version: str = ""
    error: Optional[str] = None

    def to_snapshot(self) -> ServerSnapshot:
        """Convert a successful payload into a snapshot."""
        return ServerSnapshot(
            player_count=self.numplayers,
            online=True,
            ping=self.ping,
            version=self.version,
            name=self.name,
            map_name=self.map,
        )
