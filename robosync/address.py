"""Robot address resolution.

The address for a local directory is remembered in a single-line hint file
(``ip.txt``) next to the robot programs. A non-empty hint file always wins;
otherwise the user is asked, optionally persisting the answer.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import HINT_FILE_NAME
from .exceptions import AddressRequiredError, LocalIOError
from .interaction import InteractionProvider
from .utils import CUSTOM_ADDRESS_OPTION, is_valid_address

logger = logging.getLogger(__name__)


def hint_path(directory: Union[str, Path], hint_file_name: str = HINT_FILE_NAME) -> Path:
    """Path of the hint file for a directory."""
    return Path(directory) / hint_file_name


def read_hint(
    directory: Union[str, Path], hint_file_name: str = HINT_FILE_NAME
) -> Optional[str]:
    """Read the hint file for a directory.

    Args:
        directory: Directory the hint file lives in
        hint_file_name: Name of the hint file

    Returns:
        The trimmed content (possibly empty), or None if there is no hint file

    Raises:
        LocalIOError: If the hint file exists but cannot be read
    """
    path = hint_path(directory, hint_file_name)
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise LocalIOError(path, f"Could not read address hint ({e})") from e


def write_hint(
    directory: Union[str, Path], address: str, hint_file_name: str = HINT_FILE_NAME
) -> Path:
    """Write the hint file for a directory.

    The content goes to a temporary file in the same directory which is then
    renamed over the hint file, so a reader only ever sees a complete value.

    Args:
        directory: Directory the hint file lives in (created if missing)
        address: Address to store, or an empty string to mark the hint unused
        hint_file_name: Name of the hint file

    Returns:
        Path of the written hint file

    Raises:
        LocalIOError: If the hint file cannot be written
    """
    path = hint_path(directory, hint_file_name)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{hint_file_name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(address.strip())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise LocalIOError(path, f"Could not write address hint ({e})") from e

    logger.debug(f"Wrote address hint {path}: {address!r}")
    return path


class AddressResolver:
    """Determines which robot address to use for a local directory.

    Examples:
        >>> resolver = AddressResolver(ClickInteraction())
        >>> address = resolver.resolve(Path("programs"), "192.168.10.124")
    """

    def __init__(
        self,
        interaction: InteractionProvider,
        known_addresses: Iterable[str] = (),
        hint_file_name: str = HINT_FILE_NAME,
    ):
        """Initialize address resolver.

        Args:
            interaction: Provider used for prompts
            known_addresses: Extra addresses offered in the short-list
            hint_file_name: Name of the per-directory hint file
        """
        self.interaction = interaction
        self.known_addresses = list(known_addresses)
        self.hint_file_name = hint_file_name

    def resolve(self, directory: Union[str, Path], default_candidate: str) -> str:
        """Resolve the robot address for a directory.

        Args:
            directory: Local directory under sync
            default_candidate: Address suggested first to the user

        Returns:
            The resolved address

        Raises:
            AddressRequiredError: If the user cancelled or entered nothing
            LocalIOError: If the hint file cannot be read or written
        """
        directory = Path(directory)
        hint = read_hint(directory, self.hint_file_name)

        if hint:
            logger.info(f"Using address {hint} from {self.hint_file_name}")
            return hint

        if hint is None:
            address = self._offer_hint_creation(directory, default_candidate)
            if address:
                return address

        return self._choose_address(default_candidate)

    def _offer_hint_creation(
        self, directory: Path, default_candidate: str
    ) -> Optional[str]:
        """Offer to create the hint file and return the persisted address."""
        accepted = self.interaction.confirm(
            f"No {self.hint_file_name} found in {directory}. "
            "Save the robot address there for next time?"
        )
        if not accepted:
            return None

        address = self.interaction.prompt_text(
            "Robot address",
            default=default_candidate,
            validate=is_valid_address,
        )
        if address is not None:
            address = address.strip()

        if not address or not is_valid_address(address):
            # An empty hint means "unused"; it is never read back as an address
            logger.info(f"No valid address entered, leaving {self.hint_file_name} empty")
            write_hint(directory, "", self.hint_file_name)
            return None

        write_hint(directory, address, self.hint_file_name)
        return address

    def _choose_address(self, default_candidate: str) -> str:
        """Pick an address from the short-list or enter a custom one."""
        options = [(default_candidate, "Default address")]
        for address in self.known_addresses:
            if address != default_candidate and address not in [o[0] for o in options]:
                options.append((address, "Known address"))
        options.append((CUSTOM_ADDRESS_OPTION, "Enter a custom address"))

        choice = self.interaction.choose_one(
            options,
            placeholder=(
                "Select the robot's address or choose "
                f'"{CUSTOM_ADDRESS_OPTION}" to enter a custom one.'
            ),
        )
        if not choice:
            raise AddressRequiredError("An address selection is required.")

        if choice != CUSTOM_ADDRESS_OPTION:
            return choice

        address = self.interaction.prompt_text(
            "Enter the robot's address",
            validate=is_valid_address,
        )
        if not address or not is_valid_address(address):
            raise AddressRequiredError("A custom address is required.")
        return address.strip()
