"""Users tab: dynamic user query plus a create form."""

from __future__ import annotations

import sqlite3
from typing import Any

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Select, Static, Switch

from core.users import USER_STATUSES, ListUsersArgs, create_user, list_users
from ..constants import TIME_FORMAT
from ..validators import check_user_form, optional_filter


class UsersTab(Container):
    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._table_ready = False

    def compose(self):
        with Vertical(id="users-panel"):
            yield Static("Filter", classes="section-title")
            with Horizontal(classes="filter-row"):
                yield Input(placeholder="Name", id="filter-name")
                yield Input(placeholder="Token", id="filter-token")
            with Horizontal(classes="toggle-row"):
                yield Static("only active", classes="form-label")
                yield Switch(value=False, id="filter-only-active")
                yield Static("descending", classes="form-label")
                yield Switch(value=False, id="filter-desc")
            yield DataTable(id="users-table", cursor_type="row")
            yield Static("Create new user", classes="section-title")
            with Horizontal(classes="form-row"):
                yield Input(placeholder="Name", id="new-user-name")
                yield Input(placeholder="Token", id="new-user-token")
                yield Select(
                    [(status, status) for status in USER_STATUSES],
                    id="new-user-status",
                    allow_blank=False,
                )
                yield Button("Create", id="create-user", variant="success")
            yield Static("", id="users-output")

    def on_mount(self) -> None:
        table = self.query_one("#users-table", DataTable)
        table.add_column("name", key="name", width=20)
        table.add_column("token", key="token", width=28)
        table.add_column("status", key="status", width=10)
        table.add_column("time", key="time", width=10)
        table.zebra_stripes = True
        self._table_ready = True
        self.reload()

    def current_args(self) -> ListUsersArgs:
        return ListUsersArgs(
            name=optional_filter(self.query_one("#filter-name", Input).value),
            token=optional_filter(self.query_one("#filter-token", Input).value),
            only_active=self.query_one("#filter-only-active", Switch).value,
            desc=self.query_one("#filter-desc", Switch).value,
        )

    def reload(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#users-table", DataTable)
        table.clear()
        try:
            users = list_users(self.app.db, self.current_args(), limit=self.app.max_results)
        except (sqlite3.Error, ValueError) as exc:
            self._set_output(f"query failed: {exc}")
            return

        for user in users:
            table.add_row(
                user.name,
                user.token_identifier,
                user.status,
                user.created_at.astimezone().strftime(TIME_FORMAT),
                key=user.id,
            )
        self._set_output(f"{len(users)} user(s)")

    def on_input_changed(self, event: Input.Changed) -> None:
        if (event.input.id or "").startswith("filter-"):
            self.reload()

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if (event.switch.id or "").startswith("filter-"):
            self.reload()

    @on(Button.Pressed, "#create-user")
    def _on_create(self) -> None:
        name_input = self.query_one("#new-user-name", Input)
        token_input = self.query_one("#new-user-token", Input)
        status = self.query_one("#new-user-status", Select).value

        check = check_user_form(name_input.value, token_input.value, status)
        if not check.ok:
            self._set_output(check.error or "invalid user")
            return
        try:
            create_user(self.app.db, name_input.value, token_input.value, str(status))
        except (sqlite3.Error, ValueError) as exc:
            self._set_output(f"create failed: {exc}")
            return

        name_input.value = ""
        token_input.value = ""
        self.reload()

    def _set_output(self, message: str) -> None:
        self.query_one("#users-output", Static).update(message)
