"""Widgets package for SSH Launch."""

from __future__ import annotations

from ssh_launch.widgets.host_table import HostTable

__all__ = [
    'HostTable',
]
