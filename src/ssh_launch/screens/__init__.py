"""Screens package for SSH Launch."""

from __future__ import annotations

from ssh_launch.screens.host_list import HostListScreen

__all__ = [
    'HostListScreen',
]
