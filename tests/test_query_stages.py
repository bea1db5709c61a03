from __future__ import annotations

from typing import Optional

import pytest

from core.query import (
    OrderedQuery,
    Query,
    QueryInitializer,
    QueryPlan,
    default_index,
    default_order,
)
from core.schema import SchemaError
from core.tables import MESSAGES


class FakeExecutor:
    def __init__(self, rows: "list[dict] | None" = None) -> None:
        self.rows = rows or []
        self.plans: list[tuple[QueryPlan, Optional[int]]] = []

    def execute(self, plan: QueryPlan, limit: Optional[int]) -> list[dict]:
        self.plans.append((plan, limit))
        return self.rows if limit is None else self.rows[:limit]


def _table(executor: "FakeExecutor | None" = None) -> QueryInitializer:
    return QueryInitializer(executor or FakeExecutor(), MESSAGES)


def test_with_index_returns_query_without_index_methods() -> None:
    indexed = _table().with_index("by_author", lambda q: q.eq("author", "alice"))
    assert type(indexed) is Query
    assert not hasattr(indexed, "with_index")
    assert not hasattr(indexed, "with_search_index")
    assert indexed.plan.index_range is not None
    assert indexed.plan.index_range.bounds == (("author", "alice"),)


def test_order_returns_ordered_query_without_order() -> None:
    ordered = _table().with_index("by_author", lambda q: q.eq("author", "alice")).order("desc")
    assert type(ordered) is OrderedQuery
    assert not hasattr(ordered, "order")
    assert ordered.plan.order == "desc"


def test_search_index_is_index_and_order() -> None:
    searched = _table().with_search_index("by_body", lambda q: q.search("body", "hello"))
    assert type(searched) is OrderedQuery
    assert not hasattr(searched, "order")
    assert searched.plan.search is not None
    assert searched.plan.search.query == "hello"
    assert searched.plan.index_range is None


def test_filter_keeps_index_and_order() -> None:
    ordered = _table().with_index("by_author", lambda q: q.eq("author", "alice")).order("desc")
    filtered = ordered.filter(lambda q: q.eq(q.field("hidden"), False)).filter(
        lambda q: q.neq(q.field("body"), "")
    )
    assert filtered.plan.index_range == ordered.plan.index_range
    assert filtered.plan.order == "desc"
    assert len(filtered.plan.filters) == 2
    assert ordered.plan.filters == ()


def test_default_coercions_are_identity() -> None:
    table = _table()
    assert default_index(table) is table
    assert default_order(table) is table


def test_take_first_collect_delegate_to_executor() -> None:
    executor = FakeExecutor(rows=[{"_id": "a"}, {"_id": "b"}, {"_id": "c"}])
    table = _table(executor)

    assert table.take(2) == [{"_id": "a"}, {"_id": "b"}]
    assert table.first() == {"_id": "a"}
    assert len(table.collect()) == 3
    assert [limit for _, limit in executor.plans] == [2, 1, None]


def test_first_returns_none_when_empty() -> None:
    assert _table().first() is None


def test_take_rejects_negative_count() -> None:
    with pytest.raises(ValueError):
        _table().take(-1)


def test_unknown_index_raises_schema_error() -> None:
    with pytest.raises(SchemaError):
        _table().with_index("by_missing", lambda q: q.eq("author", "x"))
    with pytest.raises(SchemaError):
        _table().with_search_index("by_author", lambda q: q.search("author", "x"))


def test_index_range_must_follow_index_fields() -> None:
    with pytest.raises(SchemaError):
        _table().with_index("by_author", lambda q: q.eq("conversation", "room1"))
    with pytest.raises(SchemaError):
        _table().with_index("by_author", lambda q: q.eq("author", "a").eq("author", "b"))


def test_search_must_target_search_field() -> None:
    with pytest.raises(SchemaError):
        _table().with_search_index("by_body", lambda q: q.search("author", "alice"))


def test_invalid_order_direction() -> None:
    with pytest.raises(ValueError):
        _table().order("sideways")


def test_plan_rejects_index_and_search_together() -> None:
    indexed = _table().with_index("by_author", lambda q: q.eq("author", "alice"))
    searched = _table().with_search_index("by_body", lambda q: q.search("body", "hi"))
    with pytest.raises(SchemaError):
        QueryPlan(
            table="messages",
            index_range=indexed.plan.index_range,
            search=searched.plan.search,
        )


def test_plan_rejects_unknown_order() -> None:
    with pytest.raises(ValueError):
        QueryPlan(table="messages", order="sideways")
