"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the handlers expect so the app and UI layers can build them safely.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_RESULTS = 10


@dataclass(frozen=True)
class QueryConfig:
    """Limits applied by the list handlers."""

    max_results: int = DEFAULT_MAX_RESULTS

    def __post_init__(self) -> None:
        if self.max_results < 0:
            raise ValueError(f"max_results must be >= 0, got {self.max_results}")
