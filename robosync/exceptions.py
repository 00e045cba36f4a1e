"""Exceptions raised by the robot file synchronization engine."""

from pathlib import Path
from typing import Optional, Union


class RobotSyncError(Exception):
    """Base exception for all robosync errors."""

    pass


class AddressRequiredError(RobotSyncError):
    """Raised when no robot address could be resolved."""

    def __init__(self, message: str = "A robot address is required."):
        super().__init__(message)


class RobotConnectionError(RobotSyncError):
    """Raised when opening the FTP session or switching to binary mode fails."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Could not connect to robot at {address}: {reason}")


class TransferError(RobotSyncError):
    """Raised when a single file upload or download fails."""

    def __init__(self, filename: str, reason: str, direction: str = "transfer"):
        self.filename = filename
        self.reason = reason
        self.direction = direction
        super().__init__(f"Failed to {direction} {filename}: {reason}")


class LocalIOError(RobotSyncError):
    """Raised when a local filesystem operation fails."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class InvalidSelectionError(RobotSyncError):
    """Raised when the caller did not supply a usable local path."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)
