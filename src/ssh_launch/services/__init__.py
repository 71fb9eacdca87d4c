"""Services package for SSH Launch."""

from __future__ import annotations

from ssh_launch.services.interfaces import (
    HostParserInterface,
    KeyLocatorInterface,
    ConnectionResolverInterface,
    SSHServiceInterface,
)
from ssh_launch.services.ssh_config_parser import HostRecord, SSHConfigParser
from ssh_launch.services.key_locator import KeyLocator
from ssh_launch.services.connection_resolver import (
    ConnectionAttempt,
    ConnectionResolver,
    EffectiveParams,
    next_attempt,
)
from ssh_launch.services.known_hosts import consolidate_known_hosts, merge_known_hosts
from ssh_launch.services.ssh_service import SSHService

__all__ = [
    'HostParserInterface',
    'KeyLocatorInterface',
    'ConnectionResolverInterface',
    'SSHServiceInterface',
    'HostRecord',
    'SSHConfigParser',
    'KeyLocator',
    'ConnectionAttempt',
    'ConnectionResolver',
    'EffectiveParams',
    'next_attempt',
    'consolidate_known_hosts',
    'merge_known_hosts',
    'SSHService',
]
