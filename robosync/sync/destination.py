"""Date-stamped destination folders for bulk downloads.

Every bulk download gets its own folder ``<YYYY-MM-DD>-<TAG>_<NN>`` under the
destination root, where ``NN`` is the smallest counter from 01 whose folder
does not exist yet.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from ..exceptions import LocalIOError
from ..utils import format_date

logger = logging.getLogger(__name__)


def folder_base_name(tag: str, today: Optional[date] = None) -> str:
    """Base folder name ``<YYYY-MM-DD>-<TAG>`` for a tag."""
    return f"{format_date(today or date.today())}-{tag}"


def _is_taken(path: Path) -> bool:
    # A dangling symlink does not exist() but still blocks mkdir
    return path.exists() or path.is_symlink()


def _first_free_counter(root: Path, base: str, start: int = 1) -> int:
    counter = start
    while _is_taken(root / f"{base}_{counter:02d}"):
        counter += 1
    return counter


def next_destination_folder(
    root: Path, tag: str, today: Optional[date] = None
) -> Path:
    """Find the first free ``<base>_<NN>`` folder under root.

    Args:
        root: Destination root
        tag: Save type tag, e.g. ``ALL`` or ``LS``
        today: Date used in the name (defaults to today)

    Returns:
        Path of a folder that does not exist yet
    """
    base = folder_base_name(tag, today)
    return root / f"{base}_{_first_free_counter(root, base):02d}"


def create_destination_folder(
    root: Path, tag: str, today: Optional[date] = None
) -> Path:
    """Create a new, collision-free destination folder.

    Args:
        root: Destination root (created if missing)
        tag: Save type tag
        today: Date used in the name (defaults to today)

    Returns:
        Path of the created folder

    Raises:
        LocalIOError: If the folder cannot be created
    """
    base = folder_base_name(tag, today)
    counter = 1
    while True:
        counter = _first_free_counter(root, base, counter)
        folder = root / f"{base}_{counter:02d}"
        try:
            folder.mkdir(parents=True, exist_ok=False)
        except FileExistsError:
            # Taken between the check and mkdir, move past it
            counter += 1
            continue
        except OSError as e:
            raise LocalIOError(folder, f"Could not create destination folder ({e})") from e
        logger.info(f"Created destination folder {folder}")
        return folder
