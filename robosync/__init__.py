"""robosync - synchronize robot program files with a controller over FTP."""

from .address import AddressResolver, read_hint, write_hint
from .exceptions import (
    AddressRequiredError,
    InvalidSelectionError,
    LocalIOError,
    RobotConnectionError,
    RobotSyncError,
    TransferError,
)
from .models import RemoteEntry
from .session import TransferSession, open_session
from .utils import is_valid_address

__version__ = "0.1.0"

__all__ = [
    "AddressResolver",
    "AddressRequiredError",
    "InvalidSelectionError",
    "LocalIOError",
    "RemoteEntry",
    "RobotConnectionError",
    "RobotSyncError",
    "TransferError",
    "TransferSession",
    "is_valid_address",
    "open_session",
    "read_hint",
    "write_hint",
]
