from __future__ import annotations

import asyncio

from textual.widgets import DataTable, Input, Switch

from adapters.sqlite_storage import SQLiteDatabase
from core.messages import create_message
from core.tables import SCHEMA
from core.users import create_user
from frontend.app import QueryCookbookApp
from frontend.validators import check_message_form, check_user_form, optional_filter


def test_optional_filter() -> None:
    assert optional_filter("") is None
    assert optional_filter("alice") == "alice"
    assert optional_filter(" ") == " "


def test_message_form_requires_all_text_fields() -> None:
    assert check_message_form("alice", "room1", "hi").ok
    check = check_message_form("alice", "", "")
    assert not check.ok
    assert check.error == "conversation, body required"


def test_user_form() -> None:
    assert check_user_form("alice", "token-a", "active").ok
    assert not check_user_form("", "token-a", "active").ok
    assert not check_user_form("alice", "", "active").ok
    assert not check_user_form("alice", "token-a", "banned").ok


def test_app_lists_and_filters(tmp_path) -> None:
    db = SQLiteDatabase(str(tmp_path / "ui.db"), SCHEMA)
    db.init_db()
    create_message(db, "alice", "room1", "hello", False)
    create_message(db, "bob", "room1", "hi alice", False)
    create_message(db, "alice", "room2", "hidden note", True)
    create_user(db, "alice", "token-a", "active")
    create_user(db, "bob", "token-b", "inactive")

    async def scenario() -> None:
        app = QueryCookbookApp(db, max_results=10)
        async with app.run_test() as pilot:
            await pilot.pause()
            messages = app.query_one("#messages-table", DataTable)
            users = app.query_one("#users-table", DataTable)
            assert messages.row_count == 3
            assert users.row_count == 2

            app.query_one("#filter-author", Input).value = "alice"
            await pilot.pause()
            assert messages.row_count == 2

            app.query_one("#filter-exclude-hidden", Switch).value = True
            await pilot.pause()
            assert messages.row_count == 1

            app.query_one("#filter-only-active", Switch).value = True
            await pilot.pause()
            assert users.row_count == 1

    asyncio.run(scenario())
