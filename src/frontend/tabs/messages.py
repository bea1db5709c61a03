"""Messages tab: dynamic message query plus a create form."""

from __future__ import annotations

import sqlite3
from typing import Any

from rich.text import Text
from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Static, Switch

from core.messages import ListMessagesArgs, create_message, list_messages, messages_sql
from ..constants import TIME_FORMAT
from ..validators import check_message_form, optional_filter


class MessagesTab(Container):
    """Filter boxes and toggles drive ``list_messages``; the table re-runs on every change."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._table_ready = False

    def compose(self):
        with Vertical(id="messages-panel"):
            yield Static("Filter", classes="section-title")
            with Horizontal(classes="filter-row"):
                yield Input(placeholder="Conversation", id="filter-conversation")
                yield Input(placeholder="Author", id="filter-author")
                yield Input(placeholder="Body", id="filter-body")
            with Horizontal(classes="toggle-row"):
                yield Static("exclude hidden", classes="form-label")
                yield Switch(value=False, id="filter-exclude-hidden")
                yield Static("newest first", classes="form-label")
                yield Switch(value=False, id="filter-newest-first")
            yield Static("", id="messages-sql", classes="subtle")
            yield DataTable(id="messages-table", cursor_type="row")
            yield Static("Create new message", classes="section-title")
            with Horizontal(classes="form-row"):
                yield Input(placeholder="Conversation", id="new-message-conversation")
                yield Input(placeholder="Author", id="new-message-author")
                yield Input(placeholder="Body", id="new-message-body")
                yield Static("visible", classes="form-label")
                yield Switch(value=True, id="new-message-visible")
                yield Button("Send", id="send-message", variant="success", disabled=True)
            yield Static("", id="messages-output")

    def on_mount(self) -> None:
        table = self.query_one("#messages-table", DataTable)
        table.add_column("author", key="author", width=14)
        table.add_column("body", key="body", width=40)
        table.add_column("conversation", key="conversation", width=16)
        table.add_column("time", key="time", width=10)
        table.zebra_stripes = True
        self._table_ready = True
        self.reload()

    def current_args(self) -> ListMessagesArgs:
        return ListMessagesArgs(
            author_filter=optional_filter(self.query_one("#filter-author", Input).value),
            conversation_filter=optional_filter(self.query_one("#filter-conversation", Input).value),
            body_filter=optional_filter(self.query_one("#filter-body", Input).value),
            exclude_hidden=self.query_one("#filter-exclude-hidden", Switch).value,
            newest_first=self.query_one("#filter-newest-first", Switch).value,
        )

    def reload(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#messages-table", DataTable)
        table.clear()
        args = self.current_args()

        sql, params = messages_sql(args, limit=self.app.max_results)
        self.query_one("#messages-sql", Static).update(Text(f"SQL: {sql}  {params!r}"))

        try:
            messages = list_messages(self.app.db, args, limit=self.app.max_results)
        except (sqlite3.Error, ValueError) as exc:
            self._set_output(f"query failed: {exc}")
            return

        for message in messages:
            style = "dim" if message.hidden else ""
            table.add_row(
                Text(f"{message.author}:", style=style),
                Text(message.body, style=style),
                Text(message.conversation, style=style),
                Text(message.created_at.astimezone().strftime(TIME_FORMAT), style=style),
                key=message.id,
            )
        self._set_output(f"{len(messages)} message(s)")

    def on_input_changed(self, event: Input.Changed) -> None:
        input_id = event.input.id or ""
        if input_id.startswith("filter-"):
            self.reload()
        elif input_id.startswith("new-message-"):
            self._update_send_state()

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if (event.switch.id or "").startswith("filter-"):
            self.reload()

    @on(Button.Pressed, "#send-message")
    def _on_send(self) -> None:
        author = self.query_one("#new-message-author", Input).value
        conversation = self.query_one("#new-message-conversation", Input).value
        body_input = self.query_one("#new-message-body", Input)
        visible = self.query_one("#new-message-visible", Switch)

        check = check_message_form(author, conversation, body_input.value)
        if not check.ok:
            self._set_output(check.error or "invalid message")
            return
        try:
            create_message(self.app.db, author, conversation, body_input.value, not visible.value)
        except (sqlite3.Error, ValueError) as exc:
            self._set_output(f"create failed: {exc}")
            return

        # Keep author and conversation for the next message.
        body_input.value = ""
        visible.value = True
        self.reload()

    def _update_send_state(self) -> None:
        check = check_message_form(
            self.query_one("#new-message-author", Input).value,
            self.query_one("#new-message-conversation", Input).value,
            self.query_one("#new-message-body", Input).value,
        )
        self.query_one("#send-message", Button).disabled = not check.ok

    def _set_output(self, message: str) -> None:
        self.query_one("#messages-output", Static).update(message)
