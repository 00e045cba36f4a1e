"""Data models for robot FTP listings."""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# -rw-r--r--   1 owner  group     1024 Jan 01 12:00 MAIN.LS
_UNIX_RE = re.compile(
    r"^(?P<perms>[-dlbcps][-rwxsStT]{9})\S*\s+\d+\s+\S+\s+\S+\s+(?P<size>\d+)\s+"
    r"\w{3}\s+\d{1,2}\s+(?:\d{1,2}:\d{2}|\d{4})\s+(?P<name>.+)$"
)

# 01-01-24  12:00PM       <DIR>          md
# 01-01-24  12:00PM                 1024 MAIN.LS
_DOS_RE = re.compile(
    r"^\d{2}-\d{2}-\d{2,4}\s+\d{1,2}:\d{2}(?:[AaPp][Mm])?\s+"
    r"(?:(?P<dir><DIR>)|(?P<size>\d+))\s+(?P<name>.+)$"
)


@dataclass(frozen=True)
class RemoteEntry:
    """A single entry from a remote directory listing."""

    name: str
    """Entry name"""

    is_file: bool = True
    """True for regular files, False for directories and links"""

    size: int = 0
    """Size in bytes as reported by the listing (0 if unknown)"""

    @property
    def is_dir(self) -> bool:
        return not self.is_file


def parse_list_line(line: str) -> Optional[RemoteEntry]:
    """Parse one line of FTP ``LIST`` output.

    Both Unix ``ls -l`` style and DOS style listings are understood.

    Args:
        line: Raw listing line

    Returns:
        RemoteEntry, or None for blank, ``.``/``..`` and unparseable lines
    """
    line = line.rstrip("\r\n")
    if not line.strip() or line.lower().startswith("total "):
        return None

    match = _UNIX_RE.match(line)
    if match:
        perms = match.group("perms")
        name = match.group("name")
        if perms.startswith("l") and " -> " in name:
            name = name.split(" -> ", 1)[0]
        entry = RemoteEntry(
            name=name,
            is_file=perms.startswith("-"),
            size=int(match.group("size")),
        )
    else:
        match = _DOS_RE.match(line)
        if not match:
            logger.debug(f"Skipping unparseable listing line: {line!r}")
            return None
        is_dir = match.group("dir") is not None
        entry = RemoteEntry(
            name=match.group("name"),
            is_file=not is_dir,
            size=0 if is_dir else int(match.group("size")),
        )

    if entry.name in (".", ".."):
        return None
    if "/" in entry.name or "\\" in entry.name:
        # Remote names become local file names, never paths
        logger.warning(f"Ignoring remote entry with a path separator: {entry.name!r}")
        return None
    return entry


def parse_listing(lines: Iterable[str]) -> list[RemoteEntry]:
    """Parse a full ``LIST`` response, keeping the server's order."""
    entries: list[RemoteEntry] = []
    for line in lines:
        entry = parse_list_line(line)
        if entry is not None:
            entries.append(entry)
    return entries
