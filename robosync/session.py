"""FTP transfer session with the robot controller.

A session owns exactly one control connection. It is opened once per sync
operation, used for any number of sequential transfers and always closed by
the operation that opened it.
"""

import ftplib
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from .config import DEFAULT_PORT, DEFAULT_TIMEOUT
from .exceptions import RobotConnectionError, TransferError
from .models import RemoteEntry, parse_listing

logger = logging.getLogger(__name__)

PART_SUFFIX = ".part"


@dataclass(frozen=True)
class Credentials:
    """FTP login credentials."""

    user: str
    password: str


ANONYMOUS = Credentials(user="anonymous", password="anonymous")


class SessionState(str, Enum):
    """Lifecycle states of a transfer session."""

    CLOSED = "closed"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


class TransferSession:
    """One FTP control connection to a robot controller.

    Examples:
        >>> with open_session("192.168.10.124") as session:
        ...     session.upload_file(Path("MAIN.LS"), "MAIN.LS")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        port: int = DEFAULT_PORT,
        verbose: bool = False,
        ftp_factory: Callable[..., ftplib.FTP] = ftplib.FTP,
    ):
        """Initialize a closed session.

        Args:
            timeout: Socket timeout in seconds for connect and transfers
            port: FTP control port
            verbose: Log the FTP protocol exchange (ftplib debug output)
            ftp_factory: Callable returning an unconnected ftplib.FTP
        """
        self.timeout = timeout
        self.port = port
        self.verbose = verbose
        self.ftp_factory = ftp_factory
        self.address: Optional[str] = None
        self.state = SessionState.CLOSED
        self._ftp: Optional[ftplib.FTP] = None

    @property
    def is_open(self) -> bool:
        return self.state == SessionState.OPEN

    def open(self, address: str, credentials: Credentials = ANONYMOUS) -> None:
        """Connect, log in and switch to binary transfer mode.

        Args:
            address: Robot host address
            credentials: Login credentials (anonymous by default)

        Raises:
            RobotConnectionError: If the host is unreachable, login is rejected
                or binary mode cannot be set
        """
        if self.state != SessionState.CLOSED:
            raise RobotConnectionError(address, f"session is already {self.state.value}")

        self.address = address
        self.state = SessionState.CONNECTING
        logger.debug(f"Connecting to {address}:{self.port}")

        try:
            self._ftp = self.ftp_factory(timeout=self.timeout)
            if self.verbose:
                self._ftp.set_debuglevel(1)
            self._ftp.connect(address, self.port)
            self._ftp.login(user=credentials.user, passwd=credentials.password)
            self._ftp.voidcmd("TYPE I")
        except ftplib.all_errors as e:
            raise RobotConnectionError(address, str(e) or type(e).__name__) from e

        self.state = SessionState.OPEN
        logger.info(f"Connected to robot at {address}")

    def _require_open(self) -> ftplib.FTP:
        if self.state != SessionState.OPEN or self._ftp is None:
            raise RuntimeError("Transfer session is not open")
        return self._ftp

    def list(self) -> list[RemoteEntry]:
        """List the remote current directory.

        Raises:
            TransferError: If the listing fails
        """
        ftp = self._require_open()
        lines: list[str] = []
        try:
            ftp.retrlines("LIST", lines.append)
        except ftplib.all_errors as e:
            raise TransferError("directory listing", str(e), direction="list") from e

        entries = parse_listing(lines)
        logger.debug(f"Listed {len(entries)} remote entries")
        return entries

    def upload_file(self, local_path: Union[str, Path], remote_name: str) -> None:
        """Upload a local file to the remote current directory.

        Raises:
            TransferError: If the local file cannot be read or STOR fails
        """
        ftp = self._require_open()
        logger.debug(f"Uploading {local_path} -> {remote_name}")
        try:
            with open(local_path, "rb") as f:
                ftp.storbinary(f"STOR {remote_name}", f)
        except ftplib.all_errors as e:
            raise TransferError(remote_name, str(e), direction="upload") from e

    def download_file(self, remote_name: str, local_path: Union[str, Path]) -> None:
        """Download a remote file to a local path.

        The data is written to ``<local_path>.part`` first and renamed over the
        target only after the transfer completed, so a failed download never
        leaves a truncated file behind.

        Raises:
            TransferError: If RETR fails or the local file cannot be written
        """
        ftp = self._require_open()
        target = Path(local_path)
        partial = target.with_name(target.name + PART_SUFFIX)
        logger.debug(f"Downloading {remote_name} -> {target}")
        try:
            with open(partial, "wb") as f:
                ftp.retrbinary(f"RETR {remote_name}", f.write)
            partial.replace(target)
        except ftplib.all_errors as e:
            partial.unlink(missing_ok=True)
            raise TransferError(remote_name, str(e), direction="download") from e

    def close(self) -> None:
        """Close the connection.

        Never raises: a failing QUIT falls back to closing the socket, and any
        error is only logged.
        """
        if self.state == SessionState.CLOSED and self._ftp is None:
            return

        self.state = SessionState.CLOSING
        ftp, self._ftp = self._ftp, None
        if ftp is not None:
            try:
                ftp.quit()
            except Exception as e:
                logger.warning(f"QUIT to {self.address} failed: {e}")
                try:
                    ftp.close()
                except Exception as close_error:
                    logger.warning(f"Closing connection to {self.address} failed: {close_error}")
        self.state = SessionState.CLOSED
        logger.debug(f"Disconnected from {self.address}")


@contextmanager
def open_session(
    address: str,
    credentials: Credentials = ANONYMOUS,
    timeout: float = DEFAULT_TIMEOUT,
    port: int = DEFAULT_PORT,
    verbose: bool = False,
    ftp_factory: Callable[..., ftplib.FTP] = ftplib.FTP,
) -> Iterator[TransferSession]:
    """Open a transfer session and close it on every exit path.

    ``close()`` runs exactly once, including when ``open()`` fails after the
    socket was already connected.

    Raises:
        RobotConnectionError: If the session cannot be opened
    """
    session = TransferSession(
        timeout=timeout, port=port, verbose=verbose, ftp_factory=ftp_factory
    )
    try:
        session.open(address, credentials)
        yield session
    finally:
        session.close()
