"""Tables used by the cookbook screens."""

from __future__ import annotations

from core import values as v
from core.schema import define_schema, define_table

MESSAGES = (
    define_table(
        "messages",
        {
            "author": v.string(),
            "conversation": v.string(),
            "body": v.string(),
            "hidden": v.boolean(),
        },
    )
    .index("by_author", ["author"])
    .index("by_conversation", ["conversation"])
    .search_index("by_body", search_field="body")
)

USERS = (
    define_table(
        "users",
        {
            "name": v.string(),
            "tokenIdentifier": v.string(),
            "status": v.union(v.literal("active"), v.literal("inactive")),
        },
    )
    .index("by_token", ["tokenIdentifier"])
    .index("by_name", ["name"])
)

SCHEMA = define_schema(MESSAGES, USERS)
