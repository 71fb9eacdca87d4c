"""Layered settings lookup: explicit value > per-host override > defaults."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .schema import AppSettings, HostSettings

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"


class SettingsStore:
    """Read-only view over AppSettings with a single resolution function.

    The precedence is the same for every field and is never reordered:
    an explicit value from the SSH config wins, then the per-host override
    for the alias, then the defaults.
    """

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def override_for(self, alias: str) -> Optional[HostSettings]:
        return self._settings.per_host.get(alias)

    def resolve(self, alias: str, field_name: str, explicit: Any = None) -> Any:
        """Resolve one connection field for a host.

        Args:
            alias: Host alias.
            field_name: HostSettings field name (port, user, ...).
            explicit: Value taken from the SSH config; None or "" means unset.

        Returns:
            The effective value.
        """
        if explicit not in (None, ''):
            return explicit

        override = self.override_for(alias)
        if override is not None:
            value = getattr(override, field_name)
            if value is not None:
                logger.debug("Using per-host %s for %s", field_name, alias)
                return value

        return getattr(self._settings.defaults, field_name)

    def describe(self, alias: str) -> str:
        """Configured description for an alias, or the fallback text."""
        return self._settings.host_descriptions.get(alias) or NO_DESCRIPTION
