"""Staged query handles.

A query is built in stages and every stage has its own class:

    QueryInitializer  table picked, no index, no order
    Query             index picked (or the default one), no order
    OrderedQuery      index and order picked; only filter/take remain

``QueryInitializer`` is a ``Query`` and ``Query`` is an ``OrderedQuery``, so a
handle from an earlier stage can always stand in for a later one (see
``default_index`` / ``default_order``). The reverse never holds: once an index
or an order is applied the returned handle no longer has ``with_index``,
``with_search_index`` or ``order``. A text search index is both an index and
an order, so ``with_search_index`` jumps straight to ``OrderedQuery``.

Handles are immutable. Execution is delegated to a ``QueryExecutor``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from core.expressions import Expression, FilterBuilder
from core.schema import IndexDefinition, SchemaError, SearchIndexDefinition, TableDefinition

if TYPE_CHECKING:
    from core.ports import QueryExecutor

Document = Dict[str, Any]

ORDER_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class IndexRange:
    """Equality bounds on a prefix of an index's fields."""

    index: str
    fields: Tuple[str, ...]
    bounds: Tuple[Tuple[str, Any], ...] = ()


@dataclass(frozen=True)
class SearchFilter:
    index: str
    field: str
    query: str


@dataclass(frozen=True)
class QueryPlan:
    """Everything the executor needs to run a query."""

    table: str
    index_range: Optional[IndexRange] = None
    search: Optional[SearchFilter] = None
    order: str = "asc"
    filters: Tuple[Expression, ...] = ()

    def __post_init__(self) -> None:
        if self.index_range is not None and self.search is not None:
            raise SchemaError(f"A query on {self.table} uses a single index, not a range and a search")
        if self.order not in ORDER_DIRECTIONS:
            raise ValueError(f"order must be 'asc' or 'desc', got {self.order!r}")


class IndexRangeBuilder:
    """Passed to ``with_index``. Bounds must follow the index field order."""

    def __init__(self, index: IndexDefinition, bounds: Tuple[Tuple[str, Any], ...] = ()) -> None:
        self._index = index
        self._bounds = bounds

    def eq(self, field_name: str, value: Any) -> "IndexRangeBuilder":
        position = len(self._bounds)
        if position >= len(self._index.fields):
            raise SchemaError(f"Index {self._index.name} has no field left to bound")
        expected = self._index.fields[position]
        if field_name != expected:
            raise SchemaError(
                f"Index {self._index.name}: expected a bound on {expected}, got {field_name}"
            )
        return IndexRangeBuilder(self._index, self._bounds + ((field_name, value),))

    def build(self) -> IndexRange:
        return IndexRange(index=self._index.name, fields=self._index.fields, bounds=self._bounds)


class SearchFilterBuilder:
    """Passed to ``with_search_index``."""

    def __init__(self, index: SearchIndexDefinition) -> None:
        self._index = index
        self._query: Optional[str] = None

    def search(self, field_name: str, query: str) -> "SearchFilterBuilder":
        if field_name != self._index.search_field:
            raise SchemaError(
                f"Search index {self._index.name} searches {self._index.search_field}, not {field_name}"
            )
        self._query = query
        return self

    def build(self) -> SearchFilter:
        if self._query is None:
            raise SchemaError(f"Search index {self._index.name} needs a search() term")
        return SearchFilter(index=self._index.name, field=self._index.search_field, query=self._query)


class OrderedQuery:
    """Index and order are fixed. Filter and fetch results."""

    def __init__(self, executor: "QueryExecutor", table: TableDefinition, plan: QueryPlan) -> None:
        self._executor = executor
        self._table = table
        self._plan = plan

    @property
    def plan(self) -> QueryPlan:
        return self._plan

    def filter(self, predicate: Callable[[FilterBuilder], Expression]) -> "OrderedQuery":
        expression = predicate(FilterBuilder())
        plan = replace(self._plan, filters=self._plan.filters + (expression,))
        return OrderedQuery(self._executor, self._table, plan)

    def take(self, n: int) -> List[Document]:
        if n < 0:
            raise ValueError(f"take() needs a non-negative count, got {n}")
        return self._executor.execute(self._plan, n)

    def collect(self) -> List[Document]:
        return self._executor.execute(self._plan, None)

    def first(self) -> Optional[Document]:
        rows = self.take(1)
        return rows[0] if rows else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._plan!r})"


class Query(OrderedQuery):
    """Index is fixed, order is still open."""

    def order(self, direction: str) -> OrderedQuery:
        if direction not in ORDER_DIRECTIONS:
            raise ValueError(f"order must be 'asc' or 'desc', got {direction!r}")
        plan = replace(self._plan, order=direction)
        return OrderedQuery(self._executor, self._table, plan)


class QueryInitializer(Query):
    """A bare table: pick an index, a search index, an order, or nothing."""

    def __init__(self, executor: "QueryExecutor", table: TableDefinition) -> None:
        super().__init__(executor, table, QueryPlan(table=table.name))

    def with_index(
        self,
        index_name: str,
        index_range: Optional[Callable[[IndexRangeBuilder], IndexRangeBuilder]] = None,
    ) -> Query:
        index = self._table.get_index(index_name)
        builder = IndexRangeBuilder(index)
        if index_range is not None:
            builder = index_range(builder)
            if not isinstance(builder, IndexRangeBuilder):
                raise SchemaError(f"Index range for {index_name} must return the range builder")
        plan = replace(self._plan, index_range=builder.build())
        return Query(self._executor, self._table, plan)

    def with_search_index(
        self,
        index_name: str,
        search_filter: Callable[[SearchFilterBuilder], SearchFilterBuilder],
    ) -> OrderedQuery:
        index = self._table.get_search_index(index_name)
        builder = search_filter(SearchFilterBuilder(index))
        if not isinstance(builder, SearchFilterBuilder):
            raise SchemaError(f"Search filter for {index_name} must return the search builder")
        plan = replace(self._plan, search=builder.build())
        return OrderedQuery(self._executor, self._table, plan)


def default_index(query: QueryInitializer) -> Query:
    """Widen a table handle to "any indexed query" without a cast."""

    return query


def default_order(query: Query) -> OrderedQuery:
    """Widen an indexed handle to "any ordered query" without a cast."""

    return query
