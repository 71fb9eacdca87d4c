"""Known hosts consolidation.

Merges the primary and fallback known_hosts files into the primary one,
keeping the first line seen for every (host pattern, key type) pair.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

KNOWN_HOSTS_NAME = 'known_hosts'


def _read_lines(path: Optional[Path]) -> List[str]:
    if path is None or not path.is_file():
        return []
    try:
        return path.read_text(encoding='utf-8', errors='surrogateescape').splitlines()
    except OSError as e:
        logger.warning("Cannot read known_hosts file %s: %s", path, e)
        return []


def merge_known_hosts(lines: Iterable[str]) -> List[str]:
    """Deduplicate known_hosts lines.

    Lines with fewer than three whitespace-separated fields are dropped.
    Of the remaining lines, the first one for each (host pattern, key type)
    pair wins.

    Args:
        lines: known_hosts lines in priority order.

    Returns:
        Merged lines in first-seen order.
    """
    seen: Set[Tuple[str, str]] = set()
    merged = []
    for line in lines:
        parts = line.split()
        if len(parts) < 3:
            continue
        key = (parts[0], parts[1])
        if key in seen:
            continue
        seen.add(key)
        merged.append(line.strip())
    return merged


def consolidate_known_hosts(primary: Path, fallback: Optional[Path] = None) -> Path:
    """Merge the fallback known_hosts into the primary file.

    The primary directory and an empty file are created when needed. The
    file is only rewritten when the merged content differs.

    Args:
        primary: known_hosts file that ssh is pointed at.
        fallback: Secondary known_hosts file, read if present.

    Returns:
        Path of the consolidated file.
    """
    primary = Path(primary)
    sources = [primary]
    if fallback is not None and Path(fallback).resolve() != primary.resolve():
        sources.append(Path(fallback))

    lines: List[str] = []
    for source in sources:
        lines.extend(_read_lines(source))

    merged = merge_known_hosts(lines)
    content = '\n'.join(merged) + '\n' if merged else ''

    existing = None
    if primary.is_file():
        existing = primary.read_text(encoding='utf-8', errors='surrogateescape')

    if existing == content:
        logger.debug("known_hosts already consolidated: %s", primary)
        return primary

    primary.parent.mkdir(parents=True, exist_ok=True)
    primary.write_text(content, encoding='utf-8', errors='surrogateescape')
    logger.info(
        "Consolidated %d known_hosts entries into %s (%d input lines)",
        len(merged), primary, len(lines)
    )
    return primary
