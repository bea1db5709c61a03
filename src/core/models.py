"""Core domain models.

Documents come back from the store as plain dicts. These frozen dataclasses
are what the screens and the CLI work with.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping


@dataclass(frozen=True)
class Message:
    """A single chat message row."""

    id: str
    creation_time: float
    author: str
    conversation: str
    body: str
    hidden: bool

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Message":
        return cls(
            id=document["_id"],
            creation_time=document["_creationTime"],
            author=document["author"],
            conversation=document["conversation"],
            body=document["body"],
            hidden=document["hidden"],
        )

    @property
    def created_at(self) -> datetime:
        return _to_datetime(self.creation_time)


@dataclass(frozen=True)
class User:
    """A user profile row. ``status`` is "active" or "inactive"."""

    id: str
    creation_time: float
    name: str
    token_identifier: str
    status: str

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "User":
        return cls(
            id=document["_id"],
            creation_time=document["_creationTime"],
            name=document["name"],
            token_identifier=document["tokenIdentifier"],
            status=document["status"],
        )

    @property
    def created_at(self) -> datetime:
        return _to_datetime(self.creation_time)


def _to_datetime(creation_time: float) -> datetime:
    # _creationTime is milliseconds since the epoch
    return datetime.fromtimestamp(creation_time / 1000.0, tz=timezone.utc)
