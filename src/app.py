"""Application entry point for querybook."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Sequence

from art import tprint
from rich.console import Console
from rich.table import Table

import settings
from adapters.sqlite_storage import SQLiteDatabase
from core.config import QueryConfig
from core.messages import ListMessagesArgs, create_message, list_messages, messages_sql
from core.models import Message, User
from core.tables import SCHEMA
from core.users import USER_STATUSES, ListUsersArgs, create_user, list_users

NAME = "QUERYBOOK"
FONT = "tarty-1"

# Demo rows for `seed`. Inserted in this order, so creation order matches.
SEED_MESSAGES = [
    ("alice", "room1", "hello everyone", False),
    ("bob", "room1", "hello alice", False),
    ("alice", "room2", "secret plans", True),
    ("carol", "room2", "hello hello world", False),
    ("alice", "room1", "lunch at noon?", False),
    ("bob", "room2", "see you there", False),
]
SEED_USERS = [
    ("alice", "token-alice", "active"),
    ("bob", "token-bob", "inactive"),
    ("carol", "token-carol", "active"),
]

console = Console()


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = settings.resolve_path(file_cfg.get("path", "logs/querybook.log"))
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def open_database(db_path: Optional[str] = None) -> SQLiteDatabase:
    db = SQLiteDatabase(db_path or settings.DB_PATH, SCHEMA)
    db.init_db()
    return db


def seed(db: SQLiteDatabase) -> None:
    """Insert the demo messages and users."""

    for author, conversation, body, hidden in SEED_MESSAGES:
        create_message(db, author, conversation, body, hidden)
    for name, token, status in SEED_USERS:
        create_user(db, name, token, status)


def _messages_table(messages: Sequence[Message]) -> Table:
    table = Table(title="messages")
    table.add_column("time")
    table.add_column("author")
    table.add_column("conversation")
    table.add_column("body")
    table.add_column("hidden")
    for message in messages:
        table.add_row(
            message.created_at.astimezone().strftime("%H:%M:%S"),
            message.author,
            message.conversation,
            message.body,
            "yes" if message.hidden else "",
            style="dim" if message.hidden else None,
        )
    return table


def _users_table(users: Sequence[User]) -> Table:
    table = Table(title="users")
    table.add_column("time")
    table.add_column("name")
    table.add_column("token")
    table.add_column("status")
    for user in users:
        table.add_row(
            user.created_at.astimezone().strftime("%H:%M:%S"),
            user.name,
            user.token_identifier,
            user.status,
        )
    return table


def _messages_args(args: argparse.Namespace) -> ListMessagesArgs:
    return ListMessagesArgs(
        author_filter=args.author,
        conversation_filter=args.conversation,
        body_filter=args.body,
        exclude_hidden=args.exclude_hidden,
        newest_first=args.newest_first,
    )


def _add_message_filters(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--author")
    parser.add_argument("--conversation")
    parser.add_argument("--body", help="Text search on the message body")
    parser.add_argument("--exclude-hidden", action="store_true")
    parser.add_argument("--newest-first", action="store_true")


def _ui(db: SQLiteDatabase, query_config: QueryConfig) -> None:
    from frontend.app import QueryCookbookApp

    QueryCookbookApp(db, max_results=query_config.max_results).run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="querybook")
    parser.add_argument("--db", help="SQLite file (defaults to database.path in config.json)")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("ui", help="Launch the TUI (default)")
    subparsers.add_parser("seed", help="Insert demo messages and users")

    messages = subparsers.add_parser("messages", help="List messages")
    _add_message_filters(messages)

    sql = subparsers.add_parser("sql", help="Show the equivalent SQL for a messages query")
    _add_message_filters(sql)

    new_message = subparsers.add_parser("create-message", help="Create a message")
    new_message.add_argument("author")
    new_message.add_argument("conversation")
    new_message.add_argument("body")
    new_message.add_argument("--hidden", action="store_true")

    users = subparsers.add_parser("users", help="List users")
    users.add_argument("--name")
    users.add_argument("--token")
    users.add_argument("--only-active", action="store_true")
    users.add_argument("--desc", action="store_true")

    new_user = subparsers.add_parser("create-user", help="Create a user")
    new_user.add_argument("name")
    new_user.add_argument("token")
    new_user.add_argument("--status", choices=USER_STATUSES, default="active")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    query_config = QueryConfig(max_results=settings.MAX_RESULTS)
    _configure_logging()
    logger = logging.getLogger(__name__)

    if args.command == "sql":
        sql, params = messages_sql(_messages_args(args), limit=query_config.max_results)
        console.print(sql)
        console.print(f"params: {params!r}")
        return

    db = open_database(args.db)
    logger.info("Using database %s", args.db or settings.DB_PATH)

    if args.command == "seed":
        seed(db)
        console.print(f"Inserted {len(SEED_MESSAGES)} messages and {len(SEED_USERS)} users")
    elif args.command == "messages":
        messages = list_messages(db, _messages_args(args), limit=query_config.max_results)
        console.print(_messages_table(messages))
    elif args.command == "create-message":
        message_id = create_message(db, args.author, args.conversation, args.body, args.hidden)
        console.print(f"created {message_id}")
    elif args.command == "users":
        users = list_users(
            db,
            ListUsersArgs(name=args.name, token=args.token, only_active=args.only_active, desc=args.desc),
            limit=query_config.max_results,
        )
        console.print(_users_table(users))
    elif args.command == "create-user":
        user_id = create_user(db, args.name, args.token, args.status)
        console.print(f"created {user_id}")
    else:
        _print_banner()
        _ui(db, query_config)


if __name__ == "__main__":
    main()
