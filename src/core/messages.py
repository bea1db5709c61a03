"""List and create handlers for the ``messages`` table.

``list_messages`` is the dynamic query: which index it uses, which order it
applies and which filters run all depend on optional arguments. It keeps one
variable per stage so that at most one index and one order can ever apply,
whichever branches run:

1) ``table_query``   the table, nothing applied
2) ``indexed_query`` at most one ``with_index``, always called on table_query
3) ``ordered_query`` either ``indexed_query.order`` or, for a text search,
   ``table_query.with_search_index`` (a search index is an index and an order)
4) post-filters on ``ordered_query``
5) ``take``

Filter priority when several are given: body search, then author, then
conversation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from core.config import DEFAULT_MAX_RESULTS
from core.models import Message
from core.ports import DatabaseReader, DatabaseWriter
from core.query import OrderedQuery, Query, QueryInitializer, default_index, default_order

LOGGER = logging.getLogger(__name__)

TABLE = "messages"


@dataclass(frozen=True)
class ListMessagesArgs:
    author_filter: Optional[str] = None
    conversation_filter: Optional[str] = None
    body_filter: Optional[str] = None
    exclude_hidden: bool = False
    newest_first: bool = False


def list_messages(
    db: DatabaseReader,
    args: ListMessagesArgs,
    limit: int = DEFAULT_MAX_RESULTS,
) -> List[Message]:
    """Return up to ``limit`` messages matching ``args``."""

    # Stage 1: pick the table.
    table_query: QueryInitializer = db.query(TABLE)

    # Stage 2: pick the index. Always branch from table_query, never from
    # indexed_query, because only a single index can apply. A body search
    # brings its own index in stage 3.
    indexed_query: Query = default_index(table_query)
    if not args.body_filter:
        if args.author_filter is not None:
            author = args.author_filter
            indexed_query = table_query.with_index("by_author", lambda q: q.eq("author", author))
        elif args.conversation_filter is not None:
            conversation = args.conversation_filter
            indexed_query = table_query.with_index(
                "by_conversation", lambda q: q.eq("conversation", conversation)
            )

    # Stage 3: pick the order, or the text search index, which fixes both the
    # index and the order (by relevance). The search branches from
    # table_query, never from indexed_query.
    ordered_query: OrderedQuery = default_order(indexed_query)
    if args.body_filter:
        body = args.body_filter
        ordered_query = table_query.with_search_index("by_body", lambda q: q.search("body", body))
    elif args.newest_first:
        ordered_query = indexed_query.order("desc")

    # Stage 4: post-filters.
    if args.exclude_hidden:
        ordered_query = ordered_query.filter(lambda q: q.eq(q.field("hidden"), False))

    LOGGER.debug("list_messages plan: %r", ordered_query)

    # Stage 5: fetch.
    return [Message.from_document(doc) for doc in ordered_query.take(limit)]


def create_message(
    db: DatabaseWriter,
    author: str,
    conversation: str,
    body: str,
    hidden: bool,
) -> str:
    """Insert a message verbatim and return its id."""

    message_id = db.insert(
        TABLE,
        {
            "author": author,
            "conversation": conversation,
            "body": body,
            "hidden": hidden,
        },
    )
    LOGGER.info("Message %s created in %s by %s", message_id, conversation, author)
    return message_id


def messages_sql(args: ListMessagesArgs, limit: int = DEFAULT_MAX_RESULTS) -> Tuple[str, List[Any]]:
    """Return the SQL a relational store would run for the same ``list_messages`` call.

    Only used for display. Unlike the document query, SQL happily combines all
    filters in one WHERE clause and lets the planner choose the index.
    """

    sql = "SELECT * FROM messages"
    clauses: List[str] = []
    params: List[Any] = []
    if args.author_filter is not None:
        clauses.append("author = ?")
        params.append(args.author_filter)
    if args.conversation_filter is not None:
        clauses.append("conversation = ?")
        params.append(args.conversation_filter)
    if args.body_filter:
        clauses.append("body LIKE ?")
        params.append(f"%{args.body_filter}%")
    if args.exclude_hidden:
        clauses.append("hidden = 0")
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY _creationTime"
    if args.newest_first:
        sql += " DESC"
    sql += " LIMIT ?"
    params.append(limit)
    return sql, params
