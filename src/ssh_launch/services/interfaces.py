"""Abstract base classes for all services in SSH Launch."""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ssh_launch.services.connection_resolver import ConnectionAttempt, EffectiveParams
    from ssh_launch.services.ssh_config_parser import HostRecord


class HostParserInterface(ABC):
    """Interface for turning SSH config text into host records."""

    @abstractmethod
    def parse(self, config_text: str, source: Optional[str] = None) -> List[HostRecord]:
        """Parse SSH config text.

        Args:
            config_text: Raw SSH config contents.
            source: Where the text came from.

        Returns:
            Ordered list of host records.
        """
        pass

    @abstractmethod
    def parse_file(self, path) -> List[HostRecord]:
        """Parse an SSH config file.

        Args:
            path: Path to the SSH config file.

        Returns:
            Ordered list of host records.
        """
        pass


class KeyLocatorInterface(ABC):
    """Interface for private key discovery."""

    @abstractmethod
    def find_keys(self, directories: Iterable) -> List[str]:
        """Find plausible private keys in the given directories.

        Args:
            directories: Directories to scan, in priority order.

        Returns:
            Sorted, deduplicated list of absolute paths.
        """
        pass


class ConnectionResolverInterface(ABC):
    """Interface for resolving effective connection parameters."""

    @abstractmethod
    def resolve(self, host: HostRecord) -> EffectiveParams:
        """Resolve user, port, identities and command for a host.

        Args:
            host: Host record.

        Returns:
            EffectiveParams instance.
        """
        pass

    @abstractmethod
    def identity_candidates(self, host: HostRecord) -> List[str]:
        """Ordered identity files to try for a host.

        Args:
            host: Host record.

        Returns:
            List of key file paths.
        """
        pass


class SSHServiceInterface(ABC):
    """Interface for invoking the external ssh client."""

    @abstractmethod
    def build_ssh_command(
        self,
        params: EffectiveParams,
        attempt: ConnectionAttempt,
        known_hosts_file: Optional[Path] = None,
    ) -> List[str]:
        """Build the ssh argv for one attempt.

        Args:
            params: Resolved connection parameters.
            attempt: Attempt to build the command for.
            known_hosts_file: known_hosts file override.

        Returns:
            List of command arguments.
        """
        pass

    @abstractmethod
    def connect(
        self,
        params: EffectiveParams,
        known_hosts_file: Optional[Path] = None,
        on_attempt: Optional[Callable[[ConnectionAttempt], None]] = None,
    ) -> ConnectionAttempt:
        """Run the connection attempt sequence.

        Args:
            params: Resolved connection parameters.
            known_hosts_file: known_hosts file override.
            on_attempt: Progress callback.

        Returns:
            The attempt that succeeded.
        """
        pass
