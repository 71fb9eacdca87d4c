"""Platform helpers."""

from __future__ import annotations
import shutil


def command_exists(cmd: str) -> bool:
    """Check if a command exists in PATH.

    Args:
        cmd: Command name to check (e.g., 'ssh').

    Returns:
        True if command is available in PATH.
    """
    return shutil.which(cmd) is not None
