"""Main Textual app for the querybook screens."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import ContentSwitcher, Footer, Static, Tab, Tabs

from adapters.sqlite_storage import SQLiteDatabase
from core.config import DEFAULT_MAX_RESULTS
from .constants import ACCENT_BLUE
from .tabs.messages import MessagesTab
from .tabs.users import UsersTab


class QueryCookbookApp(App):
    """Tabbed UI over one document store."""

    BINDINGS = [
        ("ctrl+r", "reload", "Reload"),
        ("ctrl+q", "quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def __init__(self, db: SQLiteDatabase, max_results: int = DEFAULT_MAX_RESULTS, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.db = db
        self.max_results = max_results

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("dynamic queries, one index at a time", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(f"limit: {self.max_results}", classes="subtle")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Messages", id="messages"),
                    Tab("Users", id="users"),
                    id="tabs",
                )

        with ContentSwitcher(id="content"):
            yield MessagesTab(id="messages")
            yield UsersTab(id="users")
        yield Footer()

    def on_mount(self) -> None:
        self._set_active_tab("messages")

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        if not tab_id:
            label = event.tab.label
            if hasattr(label, "plain"):
                label = label.plain
            tab_id = str(label).strip().lower()
        self._set_active_tab(tab_id)

    def _set_active_tab(self, tab_id: str) -> None:
        switcher = self.query_one("#content", ContentSwitcher)
        switcher.current = tab_id

    def action_reload(self) -> None:
        self.query_one(MessagesTab).reload()
        self.query_one(UsersTab).reload()

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("QUERY", ACCENT_BLUE),
            ("BOOK > Dynamic Query", "bold"),
        )
