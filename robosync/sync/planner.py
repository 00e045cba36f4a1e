"""Transfer planning for uploads and downloads.

Planners are pure selection logic: they turn local directory entries or a
remote listing into an ordered, immutable ``TransferPlan``. Nothing here
touches the network.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..exceptions import InvalidSelectionError
from ..models import RemoteEntry
from ..utils import LS_SUFFIX, matches_suffix
from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


class TransferDirection(str, Enum):
    """Direction of a transfer plan."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class TransferItem:
    """One source/target pair of a transfer plan.

    For uploads ``source`` is a local path and ``target`` a remote name; for
    downloads ``source`` is a remote name and ``target`` a local path.
    """

    source: str
    target: str


@dataclass(frozen=True)
class TransferPlan:
    """Ordered, immutable sequence of transfers."""

    direction: TransferDirection
    items: tuple[TransferItem, ...] = ()

    def __iter__(self) -> Iterator[TransferItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    @property
    def remote_names(self) -> list[str]:
        """Remote file names in plan order."""
        if self.direction == TransferDirection.UPLOAD:
            return [item.target for item in self.items]
        return [item.source for item in self.items]


def plan_upload(
    local_path: Path, is_directory: bool, suffix: str = LS_SUFFIX
) -> TransferPlan:
    """Plan an upload of a file or of a directory's program files.

    Args:
        local_path: File or directory to upload
        is_directory: Upload the directory's matching files instead of one file
        suffix: Suffix a directory entry must end with (case-insensitive)

    Returns:
        Upload plan; remote names are base names (the remote side is flat)

    Raises:
        InvalidSelectionError: If a single file is requested but is not a file
        LocalIOError: If the directory cannot be listed
    """
    if not is_directory:
        if not local_path.is_file():
            raise InvalidSelectionError(
                f"Please select a file to upload: {local_path}", path=local_path
            )
        item = TransferItem(source=str(local_path), target=local_path.name)
        return TransferPlan(TransferDirection.UPLOAD, (item,))

    if not local_path.is_dir():
        raise InvalidSelectionError(
            f"Please select a folder to upload: {local_path}", path=local_path
        )

    files = DirectoryScanner(suffix=suffix).scan_local(local_path)
    items = tuple(TransferItem(source=str(f.path), target=f.name) for f in files)
    logger.debug(f"Planned {len(items)} upload(s) from {local_path}")
    return TransferPlan(TransferDirection.UPLOAD, items)


def _remote_files(
    entries: Iterable[RemoteEntry], suffix: Optional[str]
) -> list[RemoteEntry]:
    return [e for e in entries if e.is_file and matches_suffix(e.name, suffix)]


def plan_download(
    entries: Iterable[RemoteEntry], destination: Path, suffix: Optional[str] = None
) -> TransferPlan:
    """Plan a bulk download of remote files into a destination folder.

    Args:
        entries: Remote listing
        destination: Local folder receiving the files
        suffix: Only download files with this suffix; None downloads all files

    Returns:
        Download plan in listing order
    """
    items = tuple(
        TransferItem(source=e.name, target=str(destination / e.name))
        for e in _remote_files(entries, suffix)
    )
    return TransferPlan(TransferDirection.DOWNLOAD, items)


def plan_update_existing(
    entries: Iterable[RemoteEntry], destination: Path, suffix: Optional[str] = LS_SUFFIX
) -> tuple[TransferPlan, list[str]]:
    """Plan a refresh of the files already present in a local folder.

    Remote files whose name (case-insensitively) is not present locally are
    skipped, not downloaded.

    Args:
        entries: Remote listing
        destination: Local folder whose files are refreshed
        suffix: Only consider remote files with this suffix

    Returns:
        Tuple of (download plan, names of skipped remote files)

    Raises:
        LocalIOError: If the destination cannot be listed
    """
    existing = {f.name.lower(): f.path for f in DirectoryScanner().scan_local(destination)}

    items: list[TransferItem] = []
    skipped: list[str] = []
    for entry in _remote_files(entries, suffix):
        local_path = existing.get(entry.name.lower())
        if local_path is not None:
            # Overwrite the local file under its existing spelling
            items.append(TransferItem(source=entry.name, target=str(local_path)))
        else:
            logger.info(f"Skipping {entry.name}: not present in {destination}")
            skipped.append(entry.name)

    return TransferPlan(TransferDirection.DOWNLOAD, tuple(items)), skipped


def plan_single(selection: Path, destination: Path) -> TransferPlan:
    """Plan the download of the remote file named after a local selection."""
    item = TransferItem(source=selection.name, target=str(destination / selection.name))
    return TransferPlan(TransferDirection.DOWNLOAD, (item,))
