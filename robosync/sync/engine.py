"""Core sync engine for executing robot file transfers."""

import logging
from contextlib import AbstractContextManager
from functools import partial
from pathlib import Path
from typing import Callable, Optional, Union

from ..address import AddressResolver
from ..config import config
from ..exceptions import InvalidSelectionError, LocalIOError, TransferError
from ..interaction import InteractionProvider
from ..output import OutputFormatter
from ..session import TransferSession, open_session
from ..utils import ALL_TAG, LS_SUFFIX, LS_TAG, format_size, matches_suffix
from .destination import create_destination_folder
from .modes import DownloadPolicy
from .operations import SyncOperations
from .planner import (
    TransferDirection,
    TransferPlan,
    plan_download,
    plan_single,
    plan_update_existing,
    plan_upload,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[str], AbstractContextManager[TransferSession]]


def _new_stats(policy: Optional[DownloadPolicy], address: Optional[str] = None) -> dict:
    return {
        "policy": policy.value if policy else "upload",
        "address": address,
        "uploads": 0,
        "downloads": 0,
        "skips": 0,
        "destination": None,
        "files": [],
    }


class SyncEngine:
    """Core sync engine that orchestrates transfers with a robot controller.

    Every public operation resolves the robot address, opens exactly one
    transfer session, runs its plan strictly in order and closes the session
    again, whatever happens in between. The first failed transfer aborts the
    rest of the plan.
    """

    def __init__(
        self,
        interaction: InteractionProvider,
        output: Optional[OutputFormatter] = None,
        session_factory: Optional[SessionFactory] = None,
        resolver: Optional[AddressResolver] = None,
        default_address: Optional[str] = None,
        address: Optional[str] = None,
    ):
        """Initialize sync engine.

        Args:
            interaction: Provider for address and folder prompts
            output: Output formatter for displaying progress/status
            session_factory: Callable taking an address and returning a context
                manager that yields an open TransferSession
            resolver: Address resolver (built from config if not given)
            default_address: Suggested address (defaults to config)
            address: Fixed address; skips address resolution entirely
        """
        self.interaction = interaction
        self.output = output or OutputFormatter()
        self.session_factory = session_factory or partial(
            open_session, timeout=config.timeout, port=config.port
        )
        self.resolver = resolver or AddressResolver(
            interaction,
            known_addresses=config.known_addresses,
            hint_file_name=config.hint_file_name,
        )
        self.default_address = default_address or config.default_address
        self.address = address

    def resolve_address(self, directory: Path) -> str:
        """Resolve the robot address for a local directory.

        Raises:
            AddressRequiredError: If no address could be established
        """
        if self.address:
            return self.address
        return self.resolver.resolve(directory, self.default_address)

    def _execute_plan(
        self, plan: TransferPlan, session: TransferSession, stats: dict
    ) -> None:
        """Run a plan in order, stopping at the first failed transfer."""
        operations = SyncOperations(session)
        completed = 0
        try:
            for item in plan:
                if plan.direction == TransferDirection.UPLOAD:
                    operations.upload_item(item)
                    stats["uploads"] += 1
                    stats["files"].append(item.target)
                else:
                    operations.download_item(item)
                    stats["downloads"] += 1
                    stats["files"].append(item.source)
                completed += 1
        except TransferError as e:
            logger.warning(
                f"{completed} of {len(plan)} file(s) transferred before "
                f"{e.filename} failed; remaining files were not attempted"
            )
            raise

    def upload_path(
        self, path: Union[str, Path], is_directory: Optional[bool] = None
    ) -> dict:
        """Upload a program file, or every program file of a directory.

        Args:
            path: Local file or directory
            is_directory: Directory mode; detected from the path if None

        Returns:
            Dictionary with sync statistics

        Raises:
            InvalidSelectionError: If the path does not exist
            AddressRequiredError: If no address could be resolved
            RobotConnectionError: If the session cannot be opened
            TransferError: On the first failed upload
        """
        path = Path(path)
        if not path.exists():
            raise InvalidSelectionError(
                f"Please select a file or folder to upload: {path}", path=path
            )
        if is_directory is None:
            is_directory = path.is_dir()

        plan = plan_upload(path, is_directory, suffix=LS_SUFFIX)
        stats = _new_stats(None)
        if not plan:
            self.output.warning(f"No {LS_SUFFIX} files found in {path}")
            return stats

        address = self.resolve_address(path if is_directory else path.parent)
        stats["address"] = address

        with self.session_factory(address) as session:
            logger.info(f"Connected to the robot at {address}")
            self._execute_plan(plan, session, stats)

        self.output.success(f"{stats['uploads']} file(s) uploaded successfully to {address}")
        return stats

    def _download_into_new_folder(
        self,
        destination_root: Union[str, Path],
        policy: DownloadPolicy,
        suffix: Optional[str],
        tag: str,
    ) -> dict:
        if not policy.creates_folder:
            raise ValueError(f"{policy.value} does not download into a new folder")
        if not policy.uses_suffix_filter:
            suffix = None

        root = Path(destination_root)
        address = self.resolve_address(root)
        stats = _new_stats(policy, address)

        with self.session_factory(address) as session:
            entries = session.list()
            wanted = [e for e in entries if e.is_file and matches_suffix(e.name, suffix)]
            if not wanted:
                what = f"{suffix} files" if suffix else "files"
                self.output.warning(f"No {what} found on the robot at {address}")
                return stats

            folder = create_destination_folder(root, tag)
            stats["destination"] = str(folder)
            plan = plan_download(entries, folder, suffix=suffix)
            self._execute_plan(plan, session, stats)

        total_size = sum(e.size for e in wanted)
        self.output.success(
            f"{stats['downloads']} file(s) ({format_size(total_size)}) downloaded to {folder}"
        )
        return stats

    def download_all(self, destination_root: Union[str, Path]) -> dict:
        """Download every remote file into a fresh ``<date>-ALL_<NN>`` folder.

        Raises:
            AddressRequiredError, RobotConnectionError, TransferError, LocalIOError
        """
        return self._download_into_new_folder(
            destination_root, DownloadPolicy.ALL, None, ALL_TAG
        )

    def download_filtered(
        self,
        destination_root: Union[str, Path],
        suffix: str = LS_SUFFIX,
        tag: str = LS_TAG,
    ) -> dict:
        """Download remote files with a suffix into a fresh ``<date>-<tag>_<NN>`` folder.

        Raises:
            AddressRequiredError, RobotConnectionError, TransferError, LocalIOError
        """
        return self._download_into_new_folder(
            destination_root, DownloadPolicy.FILTERED, suffix, tag
        )

    def sync_existing(
        self, destination: Union[str, Path], suffix: str = LS_SUFFIX
    ) -> dict:
        """Refresh the local files that also exist on the robot.

        Remote files missing locally are skipped and reported, never
        downloaded. No new folder is created.

        Raises:
            InvalidSelectionError: If destination is not a directory
            AddressRequiredError, RobotConnectionError, TransferError, LocalIOError
        """
        destination = Path(destination)
        if not destination.is_dir():
            raise InvalidSelectionError(
                f"Please select a folder to update: {destination}", path=destination
            )

        address = self.resolve_address(destination)
        stats = _new_stats(DownloadPolicy.UPDATE_EXISTING, address)
        stats["destination"] = str(destination)

        with self.session_factory(address) as session:
            plan, skipped = plan_update_existing(session.list(), destination, suffix)
            stats["skips"] = len(skipped)
            self._execute_plan(plan, session, stats)

        self.output.success(
            f"{stats['downloads']} file(s) updated in {destination}, "
            f"{stats['skips']} skipped (not present locally)"
        )
        return stats

    def download_one(
        self,
        selection: Union[str, Path],
        destination: Optional[Union[str, Path]] = None,
        suffix: str = LS_SUFFIX,
    ) -> dict:
        """Download the remote file named after a local selection.

        The remote listing is only used for messages: an empty filtered listing
        stops early, a name missing from it is reported but still requested.

        Args:
            selection: Local file whose base name is downloaded
            destination: Local folder; asked through the interaction provider
                if None
            suffix: Suffix used to filter the listing

        Raises:
            InvalidSelectionError: If no destination was chosen
            AddressRequiredError, RobotConnectionError, TransferError, LocalIOError
        """
        selection = Path(selection)
        if destination is None:
            destination = self.interaction.choose_folder(
                f"Destination folder for {selection.name}"
            )
            if destination is None:
                raise InvalidSelectionError("A destination folder is required.")
        destination = Path(destination)

        address = self.resolve_address(selection.parent)
        stats = _new_stats(DownloadPolicy.SINGLE, address)
        stats["destination"] = str(destination)

        with self.session_factory(address) as session:
            listed = [
                e.name
                for e in session.list()
                if e.is_file and matches_suffix(e.name, suffix)
            ]
            if not listed:
                self.output.warning(f"No {suffix} files found on the robot at {address}")
                return stats
            if selection.name.lower() not in {name.lower() for name in listed}:
                self.output.warning(
                    f"{selection.name} is not in the robot's {suffix} listing, "
                    "requesting it anyway"
                )

            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LocalIOError(
                    destination, f"Could not create destination folder ({e})"
                ) from e

            self._execute_plan(plan_single(selection, destination), session, stats)

        self.output.success(f"{selection.name} downloaded to {destination}")
        return stats
