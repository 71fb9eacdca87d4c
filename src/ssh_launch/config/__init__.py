"""Settings management for SSH Launch."""

from __future__ import annotations

from .manager import SettingsManager
from .schema import AppSettings, HostSettings, PathsConfig
from .store import SettingsStore

__all__ = [
    'SettingsManager',
    'SettingsStore',
    'AppSettings',
    'HostSettings',
    'PathsConfig',
]
