from __future__ import annotations

from core.messages import ListMessagesArgs, messages_sql


def test_no_filters() -> None:
    sql, params = messages_sql(ListMessagesArgs())
    assert sql == "SELECT * FROM messages ORDER BY _creationTime LIMIT ?"
    assert params == [10]


def test_all_filters_combine_in_one_where() -> None:
    sql, params = messages_sql(
        ListMessagesArgs(
            author_filter="alice",
            conversation_filter="room1",
            body_filter="hello",
            exclude_hidden=True,
            newest_first=True,
        ),
        limit=5,
    )
    assert sql == (
        "SELECT * FROM messages WHERE author = ? AND conversation = ? AND body LIKE ? "
        "AND hidden = 0 ORDER BY _creationTime DESC LIMIT ?"
    )
    assert params == ["alice", "room1", "%hello%", 5]


def test_values_are_bound_not_inlined() -> None:
    sql, params = messages_sql(ListMessagesArgs(author_filter="x' OR '1'='1"))
    assert "'1'='1" not in sql
    assert params[0] == "x' OR '1'='1"
