"""Form helpers for the query screens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.users import USER_STATUSES


@dataclass
class FormCheck:
    ok: bool
    error: str | None = None


def optional_filter(raw_value: str) -> Optional[str]:
    """An empty filter box means "no filter", not "match the empty string"."""

    return raw_value if raw_value != "" else None


def check_message_form(author: str, conversation: str, body: str) -> FormCheck:
    missing = [
        name
        for name, value in (("conversation", conversation), ("author", author), ("body", body))
        if not value
    ]
    if missing:
        return FormCheck(False, f"{', '.join(missing)} required")
    return FormCheck(True)


def check_user_form(name: str, token: str, status: object) -> FormCheck:
    if not name:
        return FormCheck(False, "name required")
    if not token:
        return FormCheck(False, "token required")
    if status not in USER_STATUSES:
        return FormCheck(False, "status must be active or inactive")
    return FormCheck(True)
