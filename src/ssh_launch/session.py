"""Wiring of settings, host discovery, and connection services."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from ssh_launch.config.manager import SettingsManager
from ssh_launch.config.schema import AppSettings
from ssh_launch.config.store import SettingsStore
from ssh_launch.services.connection_resolver import (
    ConnectionAttempt,
    ConnectionResolver,
    EffectiveParams,
)
from ssh_launch.services.key_locator import KeyLocator
from ssh_launch.services.known_hosts import KNOWN_HOSTS_NAME, consolidate_known_hosts
from ssh_launch.services.ssh_config_parser import HostRecord, SSHConfigParser
from ssh_launch.services.ssh_service import SSHService

logger = logging.getLogger(__name__)


class LaunchSession:
    """Holds the services for one launcher run.

    Settings are loaded once and passed to every service. The host list is
    built by start() and only replaced by an explicit reload().
    """

    def __init__(
        self,
        settings: AppSettings,
        config_path: Optional[str] = None,
        ssh_service: Optional[SSHService] = None,
    ) -> None:
        """Initialize the session.

        Args:
            settings: Loaded application settings.
            config_path: SSH config to read instead of Paths.SSHConfig.
            ssh_service: SSH service (default: one running the real client).
        """
        self.settings = settings
        self.store = SettingsStore(settings)
        self.parser = SSHConfigParser(self.store)
        self.resolver = ConnectionResolver(self.store, KeyLocator())
        self.ssh_service = ssh_service or SSHService()
        self.config_path = config_path or settings.paths.ssh_config
        self.known_hosts_file: Optional[Path] = None
        self._hosts: List[HostRecord] = []

    @classmethod
    def from_manager(cls, manager: SettingsManager, **kwargs) -> 'LaunchSession':
        return cls(manager.get(), **kwargs)

    @property
    def hosts(self) -> List[HostRecord]:
        return list(self._hosts)

    def start(self) -> List[HostRecord]:
        """Parse the SSH config and consolidate known_hosts.

        Raises:
            ConfigNotFound: If the SSH config is missing.
            NoHostsFound: If the SSH config has no usable hosts.
        """
        self._hosts = self.parser.parse_file(self.config_path)
        self.known_hosts_file = self._consolidate_known_hosts()
        return self.hosts

    def reload(self) -> List[HostRecord]:
        """Re-read the SSH config. The current list is kept on failure."""
        self._hosts = self.parser.parse_file(self.config_path)
        return self.hosts

    def resolve(self, host: HostRecord) -> EffectiveParams:
        return self.resolver.resolve(host)

    def connect(
        self,
        host: HostRecord,
        on_attempt: Optional[Callable[[ConnectionAttempt], None]] = None,
    ) -> ConnectionAttempt:
        """Resolve parameters for a host and run the attempt sequence."""
        params = self.resolve(host)
        return self.ssh_service.connect(params, self.known_hosts_file, on_attempt)

    def _consolidate_known_hosts(self) -> Optional[Path]:
        paths = self.settings.paths
        primary = Path(paths.ssh_dir) / KNOWN_HOSTS_NAME
        fallback = Path(paths.default_ssh_dir) / KNOWN_HOSTS_NAME
        try:
            return consolidate_known_hosts(primary, fallback)
        except OSError as e:
            logger.error("Could not consolidate known_hosts into %s: %s", primary, e)
            return None
