from __future__ import annotations

from datetime import datetime, timezone

from core.models import Message, User


def test_message_from_document() -> None:
    message = Message.from_document(
        {
            "_id": "m1",
            "_creationTime": 1704067200000.0,
            "author": "alice",
            "conversation": "room1",
            "body": "hi",
            "hidden": False,
        }
    )
    assert message.id == "m1"
    assert message.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_user_from_document_maps_token_identifier() -> None:
    user = User.from_document(
        {
            "_id": "u1",
            "_creationTime": 0.0,
            "name": "alice",
            "tokenIdentifier": "token-a",
            "status": "active",
        }
    )
    assert user.token_identifier == "token-a"
    assert user.status == "active"
