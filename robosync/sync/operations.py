"""Sync operations wrapper for unified upload/download interface."""

import logging
from pathlib import Path

from ..session import TransferSession
from .planner import TransferItem

logger = logging.getLogger(__name__)


class SyncOperations:
    """Executes single plan items against an open transfer session."""

    def __init__(self, session: TransferSession):
        """Initialize sync operations.

        Args:
            session: Open transfer session
        """
        self.session = session

    def upload_item(self, item: TransferItem) -> None:
        """Upload a local file to the robot.

        Args:
            item: Plan item with a local source path and remote target name

        Raises:
            TransferError: If the upload fails
        """
        logger.info(f"Uploading file: {item.target}")
        self.session.upload_file(Path(item.source), item.target)

    def download_item(self, item: TransferItem) -> Path:
        """Download a remote file to local storage.

        Args:
            item: Plan item with a remote source name and local target path

        Returns:
            Path where file was saved

        Raises:
            TransferError: If the download fails
        """
        local_path = Path(item.target)
        logger.info(f"Downloading file: {item.source}")
        self.session.download_file(item.source, local_path)
        return local_path
