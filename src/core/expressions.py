"""Post-filter expressions.

Filters are built with a ``FilterBuilder`` passed to ``OrderedQuery.filter``:

    query.filter(lambda q: q.eq(q.field("hidden"), False))

Expressions are evaluated against each candidate document after the index and
order have been chosen, so they never make a query cheaper, only narrower.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Dict

Document = Dict[str, Any]


class Expression:
    """A value computed from a document. Truthy results keep the document."""

    def __init__(self, fn: Callable[[Document], Any], text: str) -> None:
        self._fn = fn
        self._text = text

    def evaluate(self, document: Document) -> Any:
        return self._fn(document)

    def __repr__(self) -> str:
        return self._text


def _lift(value: Any) -> Expression:
    if isinstance(value, Expression):
        return value
    return Expression(lambda _doc: value, repr(value))


def _compare(name: str, op: Callable[[Any, Any], bool], left: Any, right: Any) -> Expression:
    lhs = _lift(left)
    rhs = _lift(right)

    def evaluate(document: Document) -> bool:
        a = lhs.evaluate(document)
        b = rhs.evaluate(document)
        if name not in ("eq", "neq") and (a is None or b is None):
            return False
        return op(a, b)

    return Expression(evaluate, f"{name}({lhs!r}, {rhs!r})")


class FilterBuilder:
    def field(self, name: str) -> Expression:
        return Expression(lambda doc: doc.get(name), f"field({name!r})")

    def eq(self, left: Any, right: Any) -> Expression:
        return _compare("eq", operator.eq, left, right)

    def neq(self, left: Any, right: Any) -> Expression:
        return _compare("neq", operator.ne, left, right)

    def lt(self, left: Any, right: Any) -> Expression:
        return _compare("lt", operator.lt, left, right)

    def lte(self, left: Any, right: Any) -> Expression:
        return _compare("lte", operator.le, left, right)

    def gt(self, left: Any, right: Any) -> Expression:
        return _compare("gt", operator.gt, left, right)

    def gte(self, left: Any, right: Any) -> Expression:
        return _compare("gte", operator.ge, left, right)

    def and_(self, *exprs: Any) -> Expression:
        parts = [_lift(expr) for expr in exprs]
        return Expression(
            lambda doc: all(part.evaluate(doc) for part in parts),
            f"and({', '.join(map(repr, parts))})",
        )

    def or_(self, *exprs: Any) -> Expression:
        parts = [_lift(expr) for expr in exprs]
        return Expression(
            lambda doc: any(part.evaluate(doc) for part in parts),
            f"or({', '.join(map(repr, parts))})",
        )

    def not_(self, expr: Any) -> Expression:
        inner = _lift(expr)
        return Expression(lambda doc: not inner.evaluate(doc), f"not({inner!r})")
