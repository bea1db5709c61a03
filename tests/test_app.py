from __future__ import annotations

import importlib
import json

import pytest

import app
import settings
from core.config import QueryConfig
from core.messages import ListMessagesArgs, list_messages
from core.users import ListUsersArgs, list_users


def test_load_json_config(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"query": {"max_results": 3}}), encoding="utf-8")
    assert settings.load_json_config(str(path)) == {"query": {"max_results": 3}}


def test_load_json_config_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        settings.load_json_config(str(tmp_path / "missing.json"))
    path = tmp_path / "config.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        settings.load_json_config(str(path))


def test_resolve_path(tmp_path) -> None:
    assert settings.resolve_path(":memory:") == ":memory:"
    assert settings.resolve_path(str(tmp_path)) == str(tmp_path)
    assert settings.resolve_path("data.db").startswith(settings.PROJECT_ROOT)


def test_query_config_rejects_negative_limit() -> None:
    assert QueryConfig().max_results == 10
    with pytest.raises(ValueError):
        QueryConfig(max_results=-1)


def test_seed_inserts_demo_rows(tmp_path) -> None:
    db = app.open_database(str(tmp_path / "seed.db"))
    app.seed(db)

    messages = list_messages(db, ListMessagesArgs())
    assert len(messages) == len(app.SEED_MESSAGES)
    assert [message.body for message in messages] == [row[2] for row in app.SEED_MESSAGES]
    assert len(list_users(db, ListUsersArgs(only_active=True))) == 2


def test_parser_reads_message_filters() -> None:
    args = app.build_parser().parse_args(
        ["messages", "--author", "alice", "--exclude-hidden", "--newest-first"]
    )
    assert args.command == "messages"
    assert args.author == "alice"
    assert args.conversation is None
    assert args.exclude_hidden and args.newest_first


def test_config_path_override(tmp_path, monkeypatch) -> None:
    path = tmp_path / "other.json"
    path.write_text(
        json.dumps({"database": {"path": str(tmp_path / "other.db")}, "query": {"max_results": 4}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("QUERYBOOK_CONFIG", str(path))
    try:
        importlib.reload(settings)
        assert settings.CONFIG_PATH == str(path)
        assert settings.DB_PATH == str(tmp_path / "other.db")
        assert settings.MAX_RESULTS == 4
    finally:
        monkeypatch.delenv("QUERYBOOK_CONFIG")
        importlib.reload(settings)
