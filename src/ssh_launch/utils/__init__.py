"""Utilities package for SSH Launch."""

from __future__ import annotations

from ssh_launch.utils.formatting import (
    truncate_string,
    or_dash,
)
from ssh_launch.utils.platform_utils import (
    command_exists,
)
from ssh_launch.utils.ssh_utils import (
    expand_home,
    expand_key_path,
    validate_key_path,
)

__all__ = [
    'truncate_string',
    'or_dash',
    'command_exists',
    'expand_home',
    'expand_key_path',
    'validate_key_path',
]
