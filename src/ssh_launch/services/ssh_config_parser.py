"""Parser that turns SSH client config text into connectable host records."""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

from ssh_launch.config.store import NO_DESCRIPTION, SettingsStore
from ssh_launch.exceptions import ConfigNotFound, NoHostsFound
from ssh_launch.services.interfaces import HostParserInterface

logger = logging.getLogger(__name__)

# "Keyword value" or "Keyword=value", keyword matched case-insensitively
_DIRECTIVE_RE = re.compile(r'^(?P<key>[A-Za-z][A-Za-z0-9]*)(?:\s*=\s*|\s+|$)(?P<value>.*)$')

_WILDCARD_CHARS = ('*', '?')

# directive -> HostRecord field
_TRACKED = {
    'hostname': 'remote_address',
    'user': 'user',
    'identityfile': 'identity_file',
}


@dataclass(frozen=True)
class HostRecord:
    """One connectable Host block from the SSH config.

    Attributes:
        alias: First non-wildcard name on the Host line.
        remote_address: HostName value, may be empty.
        user: User value, may be empty.
        identity_file: IdentityFile value with ~ expanded, may be empty.
        description: Menu description, filled in after parsing.
    """
    alias: str
    remote_address: str = ''
    user: str = ''
    identity_file: str = ''
    description: str = ''

    @property
    def target(self) -> str:
        """Address handed to the ssh client."""
        return self.remote_address or self.alias


@dataclass
class _HostBuilder:
    alias: str
    fields: Dict[str, str] = field(default_factory=dict)

    def build(self) -> HostRecord:
        return HostRecord(alias=self.alias, **self.fields)


def is_wildcard(token: str) -> bool:
    """True for Host patterns that cannot be connected to directly."""
    return token.startswith('!') or any(c in token for c in _WILDCARD_CHARS)


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


class SSHConfigParser(HostParserInterface):
    """Reads SSH config text and produces an ordered list of HostRecords.

    Only Host, HostName, User and IdentityFile are interpreted. A Match line
    closes the current block; every other directive is ignored.
    """

    def __init__(self, store: Optional[SettingsStore] = None,
                 home: Optional[Path] = None) -> None:
        """Initialize the parser.

        Args:
            store: Settings store used for host descriptions.
            home: Directory substituted for a leading ~ in IdentityFile.
        """
        self._store = store
        self._home = str(home if home is not None else Path.home())

    def parse_file(self, path) -> List[HostRecord]:
        """Parse an SSH config file.

        Args:
            path: Path to the SSH config file.

        Returns:
            Ordered list of host records.

        Raises:
            ConfigNotFound: If the file does not exist.
            NoHostsFound: If no usable Host block was found.
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigNotFound(str(config_path))

        logger.info("Reading SSH config from %s", config_path)
        text = config_path.read_text(encoding='utf-8', errors='replace')
        return self.parse(text, source=str(config_path))

    def parse(self, config_text: str, source: Optional[str] = None) -> List[HostRecord]:
        """Parse SSH config text.

        Args:
            config_text: Raw SSH config contents.
            source: Where the text came from, used in error messages.

        Returns:
            Ordered list of host records with descriptions filled in.

        Raises:
            NoHostsFound: If no usable Host block was found.
        """
        records = self._scan(config_text)
        if not records:
            raise NoHostsFound(source)

        records = self._describe(records)
        logger.info("Parsed %d host(s)", len(records))
        return records

    def _scan(self, config_text: str) -> List[HostRecord]:
        records: List[HostRecord] = []
        current: Optional[_HostBuilder] = None

        for raw_line in config_text.splitlines():
            line = raw_line.strip()
            if not line or line.startswith('#'):
                continue

            match = _DIRECTIVE_RE.match(line)
            if not match:
                continue
            key = match.group('key').lower()
            value = match.group('value').strip()

            if key in ('host', 'match'):
                if current is not None:
                    records.append(current.build())
                current = None
                if key == 'host':
                    current = self._open_block(value)
                continue

            if current is None or key not in _TRACKED:
                continue

            value = _unquote(value)
            if key == 'identityfile' and value.startswith('~'):
                value = self._home + value[1:]
            current.fields[_TRACKED[key]] = value

        if current is not None:
            records.append(current.build())

        return records

    def _open_block(self, args: str) -> Optional[_HostBuilder]:
        names = [_unquote(token) for token in args.split()]
        concrete = [name for name in names if name and not is_wildcard(name)]
        if not concrete:
            logger.debug("Skipping wildcard-only Host block: %s", args)
            return None
        if len(concrete) > 1:
            logger.debug("Host line lists %s, tracking only %s", concrete, concrete[0])
        return _HostBuilder(alias=concrete[0])

    def _describe(self, records: List[HostRecord]) -> List[HostRecord]:
        counts = Counter(record.alias for record in records)
        seen: Counter = Counter()
        described = []

        for record in records:
            base = self._store.describe(record.alias) if self._store else NO_DESCRIPTION
            if counts[record.alias] > 1:
                seen[record.alias] += 1
                base = f"{base} (#{seen[record.alias]} - {record.remote_address})"
            described.append(replace(record, description=base))

        duplicates = sorted(alias for alias, count in counts.items() if count > 1)
        if duplicates:
            logger.warning("Duplicate host aliases in SSH config: %s", ', '.join(duplicates))

        return described
