"""Textual host picker for SSH Launch."""

from __future__ import annotations

from textual.app import App
from textual.binding import Binding

from ssh_launch.session import LaunchSession


class SSHLaunchApp(App):
    """Full-screen alternative to the numbered menu."""

    TITLE = "SSH Launch"
    CSS = """
    #host_list_container {
        height: 1fr;
    }
    #search_input {
        margin: 0 0 1 0;
    }
    """
    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=False),
    ]

    def __init__(self, session: LaunchSession) -> None:
        super().__init__()
        self.session = session

    def on_mount(self) -> None:
        from ssh_launch.screens.host_list import HostListScreen
        self.sub_title = self.session.config_path
        self.push_screen(HostListScreen())
