"""Exception classes for SSH Launch.

Startup-fatal conditions (ConfigNotFound, NoHostsFound) abort the session
before the menu is shown. Everything else is caught at the menu loop and
reported to the user.
"""

from __future__ import annotations

from typing import Optional


class SSHLaunchError(Exception):
    """Base class for all launcher errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context for logging.
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ConfigNotFound(SSHLaunchError):
    """The SSH config file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"SSH config file not found: {path}")


SSHConfigMissing = ConfigNotFound


class NoHostsFound(SSHLaunchError):
    """The SSH config was parsed but contained no usable Host entries."""

    def __init__(self, source: Optional[str] = None) -> None:
        self.source = source
        super().__init__("No hosts found in SSH config", source)


class NoKeysAvailable(SSHLaunchError):
    """No identity file could be resolved for the chosen host."""

    def __init__(self, alias: str, searched: Optional[list] = None) -> None:
        self.alias = alias
        self.searched = list(searched or [])
        details = f"searched: {', '.join(self.searched)}" if self.searched else None
        super().__init__(f"No SSH keys available for '{alias}'", details)


class ConnectionFailed(SSHLaunchError):
    """Every attempt in the connection sequence failed."""

    def __init__(self, alias: str, attempts: int) -> None:
        self.alias = alias
        self.attempts = attempts
        super().__init__(
            f"Could not connect to '{alias}' after {attempts} attempt(s)"
        )


class InvalidSelection(SSHLaunchError):
    """Menu input outside the valid range."""

    def __init__(self, value: str, maximum: int) -> None:
        self.value = value
        self.maximum = maximum
        super().__init__(
            f"Invalid selection '{value}'. Enter a number between 1 and {maximum}."
        )


class SSHClientMissing(SSHLaunchError):
    """The external ssh client could not be executed."""

    def __init__(self, command: str = "ssh") -> None:
        self.command = command
        super().__init__(
            f"'{command}' command not found. Make sure the OpenSSH client is "
            "installed and on your PATH."
        )
