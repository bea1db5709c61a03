"""Ports (interfaces) used by the query handlers.

Handlers only talk to a document store through these contracts, so the
SQLite adapter can be swapped for a fake in tests or another backend.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from core.query import QueryInitializer, QueryPlan

Document = Dict[str, Any]


class QueryExecutor(Protocol):
    """Runs a finished query plan."""

    def execute(self, plan: QueryPlan, limit: Optional[int]) -> List[Document]:
        ...


class DatabaseReader(Protocol):
    """Read side of the document store."""

    def query(self, table: str) -> QueryInitializer:
        ...

    def get(self, table: str, document_id: str) -> Optional[Document]:
        ...


class DatabaseWriter(DatabaseReader, Protocol):
    """Write side of the document store. Writers can also read."""

    def insert(self, table: str, fields: Mapping[str, Any]) -> str:
        ...
