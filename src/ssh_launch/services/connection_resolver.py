"""Connection parameter resolution and the connection attempt sequence."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ssh_launch.config.store import SettingsStore
from ssh_launch.services.interfaces import ConnectionResolverInterface
from ssh_launch.services.key_locator import KeyLocator
from ssh_launch.services.ssh_config_parser import HostRecord
from ssh_launch.utils.ssh_utils import expand_key_path, validate_key_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveParams:
    """Final parameters for connecting to one host.

    Attributes:
        alias: Host alias from the SSH config.
        target: Address passed to ssh (HostName, or the alias).
        user: Remote username, empty to let ssh decide.
        port: SSH port.
        post_connect_command: Remote command appended to the ssh call.
        working_directory: Local directory ssh is started in.
        identity_candidates: Key files tried after the agent attempt.
        searched_directories: Directories scanned for keys, if any.
    """
    alias: str
    target: str
    user: str
    port: int
    post_connect_command: str = ''
    working_directory: str = ''
    identity_candidates: Tuple[str, ...] = ()
    searched_directories: Tuple[str, ...] = ()

    @property
    def has_identities(self) -> bool:
        """False when no key could be resolved (NoKeysAvailable)."""
        return bool(self.identity_candidates)

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.target}" if self.user else self.target


@dataclass(frozen=True)
class ConnectionAttempt:
    """One step of the attempt sequence.

    Attempt 0 relies on agent-loaded keys; attempt i >= 1 forces the i-th
    identity candidate with IdentitiesOnly.
    """
    number: int
    identity: Optional[str] = None

    @property
    def uses_agent(self) -> bool:
        return self.identity is None

    def __str__(self) -> str:
        if self.uses_agent:
            return "ssh-agent"
        return f"key {self.identity}"


def next_attempt(
    params: EffectiveParams,
    previous: Optional[ConnectionAttempt] = None,
    exit_status: Optional[int] = None,
) -> Optional[ConnectionAttempt]:
    """Decide the next connection attempt.

    Args:
        params: Resolved connection parameters.
        previous: The attempt just made, or None to start the sequence.
        exit_status: Exit status of the previous attempt.

    Returns:
        The next attempt, or None when the sequence is over (either the
        previous attempt succeeded or every candidate has been tried).
    """
    if previous is None:
        return ConnectionAttempt(number=0)
    if exit_status == 0:
        return None

    number = previous.number + 1
    if number > len(params.identity_candidates):
        return None
    return ConnectionAttempt(number=number, identity=params.identity_candidates[number - 1])


class ConnectionResolver(ConnectionResolverInterface):
    """Merges a HostRecord with the settings into EffectiveParams.

    Example:
        resolver = ConnectionResolver(SettingsStore(settings))
        params = resolver.resolve(host)
    """

    def __init__(self, store: SettingsStore,
                 key_locator: Optional[KeyLocator] = None) -> None:
        """Initialize connection resolver.

        Args:
            store: Settings store providing per-host overrides and defaults.
            key_locator: Key finder used when the host names no identity.
        """
        self._store = store
        self._key_locator = key_locator or KeyLocator()

    def resolve(self, host: HostRecord) -> EffectiveParams:
        """Resolve effective connection parameters for a host.

        Never raises for missing keys: an empty identity_candidates tuple
        signals the NoKeysAvailable condition.

        Args:
            host: Host record chosen from the menu.

        Returns:
            EffectiveParams for the connection sequence.
        """
        alias = host.alias
        searched = self._search_directories() if not self._explicit_identity(host) else []
        candidates = self.identity_candidates(host)

        params = EffectiveParams(
            alias=alias,
            target=host.target,
            user=self._store.resolve(alias, 'user', host.user) or '',
            port=int(self._store.resolve(alias, 'port')),
            post_connect_command=self._store.resolve(alias, 'post_connect_command') or '',
            working_directory=self._store.resolve(alias, 'working_directory') or '',
            identity_candidates=tuple(candidates),
            searched_directories=tuple(searched),
        )

        if not params.has_identities:
            logger.warning("No SSH keys available for %s", alias)
        logger.info(
            "Resolved %s: destination=%s port=%d candidates=%d",
            alias, params.destination, params.port, len(candidates)
        )
        return params

    def identity_candidates(self, host: HostRecord) -> List[str]:
        """Ordered identity files to try for a host.

        The configured IdentityFile is used alone when it exists; otherwise
        the key directories are searched. Recomputed on every call.

        Args:
            host: Host record.

        Returns:
            List of existing key file paths (may be empty).
        """
        explicit = self._explicit_identity(host)
        if explicit:
            return [explicit]

        if host.identity_file:
            logger.warning(
                "IdentityFile for %s does not exist: %s, searching key directories",
                host.alias, host.identity_file
            )

        found = self._key_locator.find_keys(self._search_directories())
        return [path for path in found if os.path.isfile(path)]

    @staticmethod
    def _explicit_identity(host: HostRecord) -> Optional[str]:
        if validate_key_path(host.identity_file):
            return expand_key_path(host.identity_file)
        return None

    def _search_directories(self) -> List[str]:
        directories: List[str] = []
        for directory in self._store.settings.paths.key_directories:
            if directory and directory not in directories:
                directories.append(directory)
        return directories
