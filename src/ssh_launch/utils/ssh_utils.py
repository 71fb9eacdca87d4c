"""SSH utility functions for path handling and validation."""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

HOME_PLACEHOLDER = "{HOME}"


def expand_home(path: str, home: Optional[Path] = None) -> str:
    """Replace the {HOME} placeholder and a leading ~ with the home directory.

    Args:
        path: Path that may contain {HOME} or start with ~.
        home: Home directory to substitute (default: current user's).

    Returns:
        Path string with the home directory substituted.

    Examples:
        >>> expand_home('{HOME}/.ssh', Path('/home/alice'))
        '/home/alice/.ssh'
        >>> expand_home('~/.ssh/config', Path('/home/alice'))
        '/home/alice/.ssh/config'
    """
    home_str = str(home if home is not None else Path.home())
    path = path.replace(HOME_PLACEHOLDER, home_str)
    if path == '~' or path.startswith('~/') or path.startswith('~' + os.sep):
        path = home_str + path[1:]
    return path


def expand_key_path(key_path: str) -> str:
    """Expand ~ and environment variables in key path.

    Args:
        key_path: Path to SSH key file (may contain ~ or env vars).

    Returns:
        Fully expanded path.

    Examples:
        >>> expand_key_path('~/my-key')  # doctest: +SKIP
        '/home/user/my-key'
    """
    return os.path.expanduser(os.path.expandvars(key_path))


def validate_key_path(key_path: str) -> bool:
    """Check if key file exists and is a regular file.

    Args:
        key_path: Path to SSH key file.

    Returns:
        True if key file exists and is a regular file.

    Examples:
        >>> validate_key_path('/path/to/nonexistent.pem')
        False
    """
    if not key_path:
        return False
    return os.path.isfile(expand_key_path(key_path))
