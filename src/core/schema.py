"""Schema declarations: tables, indexes and search indexes.

A schema is fixed at startup. Index names are the only way a query can reach
an index, so the store resolves them here and fails loudly on typos.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from core.values import Validator

SYSTEM_FIELDS = ("_id", "_creationTime")


class SchemaError(ValueError):
    """Raised by the document store for unknown names or bad document shapes."""


@dataclass(frozen=True)
class IndexDefinition:
    name: str
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class SearchIndexDefinition:
    name: str
    search_field: str


@dataclass(frozen=True)
class TableDefinition:
    """Fields plus the indexes declared on them."""

    name: str
    fields: Dict[str, Validator]
    indexes: Dict[str, IndexDefinition] = field(default_factory=dict)
    search_indexes: Dict[str, SearchIndexDefinition] = field(default_factory=dict)

    def index(self, name: str, fields: list[str]) -> "TableDefinition":
        self._check_index_name(name)
        for field_name in fields:
            self._check_field(field_name)
        indexes = dict(self.indexes)
        indexes[name] = IndexDefinition(name=name, fields=tuple(fields))
        return TableDefinition(self.name, self.fields, indexes, self.search_indexes)

    def search_index(self, name: str, search_field: str) -> "TableDefinition":
        self._check_index_name(name)
        self._check_field(search_field)
        search_indexes = dict(self.search_indexes)
        search_indexes[name] = SearchIndexDefinition(name=name, search_field=search_field)
        return TableDefinition(self.name, self.fields, self.indexes, search_indexes)

    def get_index(self, name: str) -> IndexDefinition:
        try:
            return self.indexes[name]
        except KeyError:
            raise SchemaError(f"Index {self.name}.{name} not found") from None

    def get_search_index(self, name: str) -> SearchIndexDefinition:
        try:
            return self.search_indexes[name]
        except KeyError:
            raise SchemaError(f"Search index {self.name}.{name} not found") from None

    def validate(self, document: Mapping[str, Any]) -> None:
        """Check that ``document`` has exactly the declared fields with valid values."""

        unknown = sorted(set(document) - set(self.fields))
        if unknown:
            raise SchemaError(f"{self.name}: unexpected field(s) {', '.join(unknown)}")
        for field_name, validator in self.fields.items():
            if field_name not in document:
                raise SchemaError(f"{self.name}: missing field {field_name}")
            value = document[field_name]
            if not validator.check(value):
                raise SchemaError(
                    f"{self.name}.{field_name}: expected {validator.describe()}, got {value!r}"
                )

    def _check_field(self, field_name: str) -> None:
        if field_name not in self.fields:
            raise SchemaError(f"{self.name}: unknown field {field_name}")

    def _check_index_name(self, name: str) -> None:
        if name in self.indexes or name in self.search_indexes:
            raise SchemaError(f"{self.name}: duplicate index {name}")


@dataclass(frozen=True)
class Schema:
    tables: Dict[str, TableDefinition]

    def table(self, name: str) -> TableDefinition:
        try:
            return self.tables[name]
        except KeyError:
            raise SchemaError(f"Table {name} not found") from None


def define_table(name: str, fields: Dict[str, Validator]) -> TableDefinition:
    for field_name in fields:
        if field_name in SYSTEM_FIELDS:
            raise SchemaError(f"{name}: {field_name} is a system field")
    return TableDefinition(name=name, fields=dict(fields))


def define_schema(*tables: TableDefinition) -> Schema:
    return Schema(tables={table.name: table for table in tables})
