"""List and create handlers for the ``users`` table.

Same staging as ``core.messages``. Users have two plain indexes and no search
index; a token filter wins over a name filter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from core.config import DEFAULT_MAX_RESULTS
from core.models import User
from core.ports import DatabaseReader, DatabaseWriter
from core.query import OrderedQuery, Query, QueryInitializer, default_index, default_order

LOGGER = logging.getLogger(__name__)

TABLE = "users"
USER_STATUSES = ("active", "inactive")


@dataclass(frozen=True)
class ListUsersArgs:
    name: Optional[str] = None
    token: Optional[str] = None
    only_active: bool = False
    desc: bool = False


def list_users(
    db: DatabaseReader,
    args: ListUsersArgs,
    limit: int = DEFAULT_MAX_RESULTS,
) -> List[User]:
    """Return up to ``limit`` users matching ``args``."""

    table_query: QueryInitializer = db.query(TABLE)

    indexed_query: Query = default_index(table_query)
    if args.token is not None:
        token = args.token
        indexed_query = table_query.with_index("by_token", lambda q: q.eq("tokenIdentifier", token))
    elif args.name is not None:
        name = args.name
        indexed_query = table_query.with_index("by_name", lambda q: q.eq("name", name))

    ordered_query: OrderedQuery = default_order(indexed_query)
    if args.desc:
        ordered_query = indexed_query.order("desc")

    if args.only_active:
        ordered_query = ordered_query.filter(lambda q: q.eq(q.field("status"), "active"))

    LOGGER.debug("list_users plan: %r", ordered_query)
    return [User.from_document(doc) for doc in ordered_query.take(limit)]


def create_user(db: DatabaseWriter, name: str, token: str, status: str) -> str:
    """Insert a user and return its id. The token is stored as tokenIdentifier."""

    user_id = db.insert(
        TABLE,
        {
            "name": name,
            "tokenIdentifier": token,
            "status": status,
        },
    )
    LOGGER.info("User %s created (%s)", user_id, status)
    return user_id
