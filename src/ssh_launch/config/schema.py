"""Settings schema definitions for SSH Launch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ssh_launch.utils.ssh_utils import HOME_PLACEHOLDER

DEFAULT_PORT = 22


@dataclass
class PathsConfig:
    """Filesystem locations used by the launcher.

    Attributes:
        ssh_config: SSH client config file to read hosts from
        ssh_dir: Primary key-search directory, also holds the consolidated
            known_hosts file
        default_ssh_dir: Fallback key-search directory and fallback
            known_hosts location
    """
    ssh_config: str = f"{HOME_PLACEHOLDER}/.ssh/config"
    ssh_dir: str = f"{HOME_PLACEHOLDER}/.ssh"
    default_ssh_dir: str = f"{HOME_PLACEHOLDER}/.ssh"

    @property
    def key_directories(self) -> list:
        """Key-search directories in priority order."""
        return [self.ssh_dir, self.default_ssh_dir]


@dataclass
class HostSettings:
    """Connection settings for one tier (defaults or a per-host override).

    In a per-host override any field left as None falls through to the
    defaults.

    Attributes:
        port: SSH port
        user: Remote username
        post_connect_command: Command run on the remote side after login
        working_directory: Local directory the ssh client is started in
    """
    port: Optional[int] = None
    user: Optional[str] = None
    post_connect_command: Optional[str] = None
    working_directory: Optional[str] = None


def default_host_settings() -> HostSettings:
    return HostSettings(
        port=DEFAULT_PORT,
        user="",
        post_connect_command="",
        working_directory="",
    )


@dataclass
class AppSettings:
    """Main application settings.

    Attributes:
        paths: Filesystem locations
        host_descriptions: Free-text description per alias
        defaults: Universal fallback connection settings
        per_host: Per-alias partial overrides of the defaults
    """
    paths: PathsConfig = field(default_factory=PathsConfig)
    host_descriptions: Dict[str, str] = field(default_factory=dict)
    defaults: HostSettings = field(default_factory=default_host_settings)
    per_host: Dict[str, HostSettings] = field(default_factory=dict)
