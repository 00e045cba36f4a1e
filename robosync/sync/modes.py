"""Download policies."""

from enum import Enum


class DownloadPolicy(str, Enum):
    """How remote files are selected for download."""

    ALL = "all"
    """Every remote file, into a fresh destination folder"""

    FILTERED = "filtered"
    """Remote files matching a suffix, into a fresh destination folder"""

    UPDATE_EXISTING = "updateExisting"
    """Refresh only files that already exist in the destination"""

    SINGLE = "single"
    """One file named after a local selection"""

    @property
    def creates_folder(self) -> bool:
        """Whether the policy downloads into a new date-stamped folder."""
        return self in (DownloadPolicy.ALL, DownloadPolicy.FILTERED)

    @property
    def uses_suffix_filter(self) -> bool:
        """Whether remote entries are filtered by name suffix."""
        return self != DownloadPolicy.ALL
