"""Shared constants for the Textual UI."""

from __future__ import annotations

ACCENT_BLUE = "#2563EB"
TIME_FORMAT = "%H:%M:%S"
