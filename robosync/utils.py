"""Utility functions for robosync."""

import re
from datetime import date
from typing import Optional

# =============================================================================
# Constants for file selection
# =============================================================================

# Robot program files
LS_SUFFIX: str = ".LS"

# Tag used for download-all destination folders
ALL_TAG: str = "ALL"

# Tag used for filtered destination folders when none is given
LS_TAG: str = "LS"

# Option label that switches the address selection to free text entry
CUSTOM_ADDRESS_OPTION: str = "Other"


# =============================================================================
# Address validation
# =============================================================================

_OCTET = r"(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])"
_ADDRESS_RE = re.compile(rf"^{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}$")


def is_valid_address(text: Optional[str]) -> bool:
    """Check whether text is a dotted-quad address.

    Args:
        text: Candidate address

    Returns:
        True if text has exactly four dot separated decimal octets in 0..255

    Examples:
        >>> is_valid_address("192.168.1.1")
        True
        >>> is_valid_address("999.1.1.1")
        False
    """
    if text is None:
        return False
    return _ADDRESS_RE.match(text.strip()) is not None


# =============================================================================
# Name matching
# =============================================================================


def matches_suffix(name: str, suffix: Optional[str]) -> bool:
    """Case-insensitive suffix match; a missing suffix matches everything."""
    if not suffix:
        return True
    return name.lower().endswith(suffix.lower())


def normalize_suffix(suffix: Optional[str]) -> Optional[str]:
    """Normalize a user supplied suffix such as ``LS`` or ``*.ls`` to ``.ls``."""
    if suffix is None:
        return None
    suffix = suffix.strip().lstrip("*")
    if not suffix:
        return None
    if not suffix.startswith("."):
        suffix = "." + suffix
    return suffix


# =============================================================================
# Formatting utilities
# =============================================================================


def format_date(day: date) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return day.strftime("%Y-%m-%d")


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
