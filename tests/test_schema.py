from __future__ import annotations

import pytest

from core import values as v
from core.schema import SchemaError, define_schema, define_table
from core.tables import MESSAGES, SCHEMA, USERS


def test_declared_indexes() -> None:
    assert set(MESSAGES.indexes) == {"by_author", "by_conversation"}
    assert MESSAGES.indexes["by_author"].fields == ("author",)
    assert MESSAGES.search_indexes["by_body"].search_field == "body"
    assert set(USERS.indexes) == {"by_token", "by_name"}
    assert USERS.indexes["by_token"].fields == ("tokenIdentifier",)
    assert not USERS.search_indexes
    assert SCHEMA.table("users") is USERS


def test_validate_accepts_exact_shape() -> None:
    MESSAGES.validate({"author": "a", "conversation": "c", "body": "b", "hidden": False})
    USERS.validate({"name": "n", "tokenIdentifier": "t", "status": "inactive"})


@pytest.mark.parametrize(
    "document",
    [
        {"author": "a", "conversation": "c", "body": "b"},
        {"author": "a", "conversation": "c", "body": "b", "hidden": 0},
        {"author": 1, "conversation": "c", "body": "b", "hidden": False},
        {"author": "a", "conversation": "c", "body": "b", "hidden": False, "extra": 1},
    ],
)
def test_validate_rejects_bad_messages(document: dict) -> None:
    with pytest.raises(SchemaError):
        MESSAGES.validate(document)


def test_union_of_literals() -> None:
    status = v.union(v.literal("active"), v.literal("inactive"))
    assert status.check("active")
    assert not status.check("Active")
    assert status.describe() == "'active' | 'inactive'"


def test_literal_does_not_confuse_bool_and_int() -> None:
    assert not v.literal(1).check(True)
    assert v.literal(True).check(True)


def test_base_validator_is_abstract() -> None:
    with pytest.raises(TypeError):
        v.Validator(kind="anything")


def test_define_table_rejects_bad_declarations() -> None:
    with pytest.raises(SchemaError):
        define_table("t", {"_id": v.string()})
    table = define_table("t", {"a": v.string()})
    with pytest.raises(SchemaError):
        table.index("by_b", ["b"])
    with pytest.raises(SchemaError):
        table.index("by_a", ["a"]).search_index("by_a", search_field="a")


def test_unknown_names_raise() -> None:
    schema = define_schema(define_table("t", {"a": v.string()}))
    with pytest.raises(SchemaError):
        schema.table("missing")
    with pytest.raises(SchemaError):
        schema.table("t").get_index("by_a")
    with pytest.raises(SchemaError):
        schema.table("t").get_search_index("by_a")


def test_schema_error_is_value_error() -> None:
    assert issubclass(SchemaError, ValueError)
