"""Local directory scanning for sync operations."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..exceptions import LocalIOError
from ..utils import matches_suffix

logger = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """Represents a local file with metadata."""

    path: Path
    """Absolute path to the file"""

    size: int
    """File size in bytes"""

    @property
    def name(self) -> str:
        """Base name of the file."""
        return self.path.name

    @classmethod
    def from_path(cls, file_path: Path) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Path to the file

        Returns:
            LocalFile instance
        """
        return cls(path=file_path, size=file_path.stat().st_size)


class DirectoryScanner:
    """Lists the regular files directly inside a directory.

    Robot program folders are flat, so scanning never recurses into
    subdirectories.

    Examples:
        >>> scanner = DirectoryScanner(suffix=".LS")
        >>> files = scanner.scan_local(Path("/robot/programs"))
    """

    def __init__(self, suffix: Optional[str] = None):
        """Initialize directory scanner.

        Args:
            suffix: Only keep files ending with this suffix (case-insensitive)
        """
        self.suffix = suffix

    def scan_local(self, directory: Path) -> list[LocalFile]:
        """Scan the immediate regular files of a directory.

        Args:
            directory: Directory to scan

        Returns:
            List of LocalFile objects in the directory's listing order

        Raises:
            LocalIOError: If the directory cannot be listed
        """
        files: list[LocalFile] = []
        try:
            for item in directory.iterdir():
                if not item.is_file():
                    continue
                if not matches_suffix(item.name, self.suffix):
                    logger.debug(f"Ignoring (suffix): {item.name}")
                    continue
                files.append(LocalFile.from_path(item))
        except OSError as e:
            raise LocalIOError(directory, f"Could not list directory ({e})") from e

        return files
