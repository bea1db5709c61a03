"""SQLite document store adapter.

Implements the DatabaseWriter and QueryExecutor ports on top of a single
SQLite file. Each schema table becomes one SQL table and each declared index
one SQL index; search indexes are scored in Python by ``text_search``.
"""

from __future__ import annotations

import logging
import sqlite3
import time
import uuid
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from adapters.text_search import relevance
from core.query import QueryInitializer, QueryPlan, SearchFilter
from core.schema import Schema, TableDefinition

LOGGER = logging.getLogger(__name__)

Document = Dict[str, Any]


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _column_type(kind: str) -> str:
    if kind == "boolean":
        return "INTEGER"
    if kind == "string":
        return "TEXT"
    # literals and unions keep whatever SQLite gets
    return ""


class SQLiteDatabase:
    """Thin SQLite wrapper that satisfies the document store ports."""

    def __init__(self, db_path: str, schema: Schema) -> None:
        self._db_path = db_path
        self._schema = schema

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables and indexes if they do not exist.

        Every table gets the same system columns:
        - seq: insertion sequence, breaks _creationTime ties
        - _id: document id handed out by insert()
        - _creationTime: milliseconds since the epoch at insert time
        """

        with self._connect() as conn:
            for table in self._schema.tables.values():
                columns = [
                    "seq INTEGER PRIMARY KEY AUTOINCREMENT",
                    "_id TEXT NOT NULL UNIQUE",
                    "_creationTime REAL NOT NULL",
                ]
                for field_name, validator in table.fields.items():
                    column = f"{_quote(field_name)} {_column_type(validator.kind)}".rstrip()
                    columns.append(f"{column} NOT NULL")
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {_quote(table.name)} ({', '.join(columns)})"
                )
                for index in table.indexes.values():
                    indexed = ", ".join(_quote(name) for name in index.fields + ("_creationTime",))
                    conn.execute(
                        f"CREATE INDEX IF NOT EXISTS {_quote(f'{table.name}_{index.name}')} "
                        f"ON {_quote(table.name)} ({indexed})"
                    )
        LOGGER.debug("Initialized %s tables in %s", len(self._schema.tables), self._db_path)

    def query(self, table: str) -> QueryInitializer:
        return QueryInitializer(self, self._schema.table(table))

    def insert(self, table: str, fields: Mapping[str, Any]) -> str:
        """Validate ``fields`` against the schema and store them as a new document."""

        definition = self._schema.table(table)
        definition.validate(fields)

        document_id = uuid.uuid4().hex
        creation_time = time.time() * 1000.0
        names = list(definition.fields)
        values = [definition.fields[name].to_storage(fields[name]) for name in names]
        columns = ", ".join(["_id", "_creationTime"] + [_quote(name) for name in names])
        placeholders = ", ".join("?" for _ in range(len(names) + 2))
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO {_quote(table)} ({columns}) VALUES ({placeholders})",
                [document_id, creation_time] + values,
            )
        return document_id

    def get(self, table: str, document_id: str) -> Optional[Document]:
        definition = self._schema.table(table)
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT * FROM {_quote(table)} WHERE _id = ?",
                (document_id,),
            ).fetchone()
        return self._to_document(definition, row) if row else None

    def execute(self, plan: QueryPlan, limit: Optional[int]) -> List[Document]:
        """Run ``plan`` and return at most ``limit`` documents (all when None)."""

        definition = self._schema.table(plan.table)
        LOGGER.debug("Executing %r (limit=%s)", plan, limit)
        if limit == 0:
            return []

        results: List[Document] = []
        with self._connect() as conn:
            if plan.search is not None:
                candidates = self._search_candidates(conn, definition, plan.search)
            else:
                candidates = self._index_candidates(conn, definition, plan)
            for document in candidates:
                if not all(expression.evaluate(document) for expression in plan.filters):
                    continue
                results.append(document)
                if limit is not None and len(results) >= limit:
                    break
        return results

    def _index_candidates(
        self, conn: sqlite3.Connection, definition: TableDefinition, plan: QueryPlan
    ) -> Iterator[Document]:
        where: List[str] = []
        params: List[Any] = []
        order_columns: Tuple[str, ...] = ("_creationTime", "seq")
        if plan.index_range is not None:
            for field_name, value in plan.index_range.bounds:
                where.append(f"{_quote(field_name)} = ?")
                params.append(definition.fields[field_name].to_storage(value))
            order_columns = plan.index_range.fields + order_columns

        direction = "DESC" if plan.order == "desc" else "ASC"
        sql = f"SELECT * FROM {_quote(definition.name)}"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY " + ", ".join(f"{_quote(name)} {direction}" for name in order_columns)

        for row in conn.execute(sql, params):
            yield self._to_document(definition, row)

    def _search_candidates(
        self, conn: sqlite3.Connection, definition: TableDefinition, search: SearchFilter
    ) -> Iterator[Document]:
        rows = conn.execute(
            f"SELECT * FROM {_quote(definition.name)} ORDER BY _creationTime ASC, seq ASC"
        ).fetchall()

        scored = []
        for row in rows:
            score = relevance(search.query, row[search.field])
            if score[0]:
                scored.append((score, row))
        # sort is stable, so equal scores stay in creation order
        scored.sort(key=lambda item: item[0], reverse=True)
        for _, row in scored:
            yield self._to_document(definition, row)

    @staticmethod
    def _to_document(definition: TableDefinition, row: sqlite3.Row) -> Document:
        document: Document = {
            "_id": row["_id"],
            "_creationTime": row["_creationTime"],
        }
        for field_name, validator in definition.fields.items():
            document[field_name] = validator.from_storage(row[field_name])
        return document
