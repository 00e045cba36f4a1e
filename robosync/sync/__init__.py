"""Sync engine for robosync - upload, bulk download and update operations."""

from .destination import (
    create_destination_folder,
    folder_base_name,
    next_destination_folder,
)
from .engine import SyncEngine
from .modes import DownloadPolicy
from .operations import SyncOperations
from .planner import (
    TransferDirection,
    TransferItem,
    TransferPlan,
    plan_download,
    plan_single,
    plan_update_existing,
    plan_upload,
)
from .scanner import DirectoryScanner, LocalFile

__all__ = [
    "SyncEngine",
    "DownloadPolicy",
    "SyncOperations",
    "DirectoryScanner",
    "LocalFile",
    "TransferDirection",
    "TransferItem",
    "TransferPlan",
    "plan_download",
    "plan_single",
    "plan_update_existing",
    "plan_upload",
    "create_destination_folder",
    "folder_base_name",
    "next_destination_folder",
]
