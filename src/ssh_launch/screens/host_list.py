"""Host list screen for SSH Launch."""

from __future__ import annotations
import logging

from textual.app import ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Header, Input

from ssh_launch.exceptions import SSHLaunchError
from ssh_launch.widgets.host_table import HostTable

logger = logging.getLogger(__name__)


class HostListScreen(Screen):
    """Screen listing SSH config hosts with search and connect."""

    BINDINGS = [
        Binding("enter", "connect", "Connect", show=True),
        Binding("/", "focus_search", "Search", show=True),
        Binding("r", "reload", "Reload", show=True),
        Binding("escape", "focus_table", "Table", show=False),
        Binding("q", "quit", "Quit", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Input(placeholder="Search hosts...", id="search_input"),
            HostTable(),
            id="host_list_container"
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one(HostTable)
        table.populate(self.app.session.hosts)
        table.focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.query_one(HostTable).filter(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.query_one(HostTable).focus()

    def on_data_table_row_selected(self, event: HostTable.RowSelected) -> None:
        self.action_connect()

    def action_focus_search(self) -> None:
        self.query_one("#search_input", Input).focus()

    def action_focus_table(self) -> None:
        self.query_one(HostTable).focus()

    def action_reload(self) -> None:
        try:
            hosts = self.app.session.reload()
        except SSHLaunchError as e:
            logger.error("Reload failed: %s", e)
            self.app.notify(str(e), severity="error")
            return
        table = self.query_one(HostTable)
        table.populate(hosts)
        table.filter(self.query_one("#search_input", Input).value)
        self.app.notify(f"Loaded {len(hosts)} host(s)")

    def action_connect(self) -> None:
        """Suspend the UI and run the connection sequence for the host."""
        host = self.query_one(HostTable).get_selected_host()
        if host is None:
            self.app.notify("No host selected.", severity="warning")
            return

        try:
            with self.app.suspend():
                print(f"Connecting to {host.alias}...")
                attempt = self.app.session.connect(host)
        except SuspendNotSupported:
            self.app.notify(
                "This terminal cannot hand over to ssh. Use the numbered menu instead.",
                severity="error",
            )
            return
        except SSHLaunchError as e:
            logger.error("Connection to %s failed: %s", host.alias, e)
            self.app.notify(str(e), severity="error")
            return

        self.app.notify(f"Session to {host.alias} closed ({attempt}).")

    def action_quit(self) -> None:
        self.app.exit()
