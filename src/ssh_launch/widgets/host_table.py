"""Host table widget for SSH Launch."""

from __future__ import annotations
from typing import List, Optional

from textual.widgets import DataTable

from ssh_launch.services.ssh_config_parser import HostRecord


class HostTable(DataTable):
    """DataTable subclass for displaying SSH config hosts."""

    def __init__(self) -> None:
        """Initialize host table."""
        super().__init__(cursor_type="row")
        self._all_hosts: List[HostRecord] = []
        self._filtered_hosts: List[HostRecord] = []
        self._setup_columns()

    def _setup_columns(self) -> None:
        self.add_column("#", width=4, key="index")
        self.add_column("Alias", width=24, key="alias")
        self.add_column("Address", width=24, key="address")
        self.add_column("User", width=14, key="user")
        self.add_column("Description", width=50, key="description")

    def populate(self, hosts: List[HostRecord]) -> None:
        """Populate table with hosts.

        Args:
            hosts: Parsed host records.
        """
        self._all_hosts = list(hosts)
        self._filtered_hosts = list(hosts)
        self._refresh_table()

    def filter(self, query: str) -> None:
        """Filter rows by alias, address or description (case-insensitive).

        Args:
            query: Search query string.
        """
        if not query:
            self._filtered_hosts = list(self._all_hosts)
        else:
            query_lower = query.lower()
            self._filtered_hosts = [
                host for host in self._all_hosts
                if query_lower in host.alias.lower()
                or query_lower in host.remote_address.lower()
                or query_lower in host.description.lower()
            ]
        self._refresh_table()

    def get_selected_host(self) -> Optional[HostRecord]:
        """Get the host under the cursor, or None."""
        if not self._filtered_hosts:
            return None

        cursor_row = self.cursor_row
        if cursor_row < 0 or cursor_row >= len(self._filtered_hosts):
            return None

        return self._filtered_hosts[cursor_row]

    def _refresh_table(self) -> None:
        self.clear()

        for idx, host in enumerate(self._filtered_hosts):
            self.add_row(
                str(idx + 1),
                host.alias,
                host.remote_address or '-',
                host.user or '-',
                host.description,
            )
