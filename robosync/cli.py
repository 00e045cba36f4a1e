"""CLI interface for robosync."""

import logging
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

import click

from .config import config
from .exceptions import RobotSyncError
from .interaction import ClickInteraction
from .output import OutputFormatter
from .session import open_session
from .sync import SyncEngine
from .utils import LS_SUFFIX, LS_TAG, is_valid_address, normalize_suffix

logger = logging.getLogger(__name__)


def _validate_address(ctx: Any, param: Any, value: Optional[str]) -> Optional[str]:
    if value is not None and not is_valid_address(value):
        raise click.BadParameter(f"'{value}' is not a valid IPv4 address")
    return value.strip() if value else value


def _build_engine(ctx: Any) -> SyncEngine:
    """Create a sync engine from the settings stored in the click context."""
    session_factory = partial(
        open_session,
        timeout=config.timeout,
        port=config.port,
        verbose=ctx.obj["verbose"],
    )
    return SyncEngine(
        ClickInteraction(),
        output=ctx.obj["out"],
        session_factory=session_factory,
        address=ctx.obj["address"],
    )


def _run(ctx: Any, operation: Callable[[SyncEngine], dict]) -> None:
    """Run one engine operation and report exactly one outcome."""
    out: OutputFormatter = ctx.obj["out"]
    try:
        stats = operation(_build_engine(ctx))
    except KeyboardInterrupt:
        out.warning("\nOperation cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT
    except RobotSyncError as e:
        logger.debug("Operation failed", exc_info=True)
        out.error(str(e))
        ctx.exit(1)
    else:
        if out.json_output:
            out.output_json(stats)


@click.group()
@click.option(
    "--address",
    "-a",
    envvar="ROBOSYNC_ADDRESS",
    callback=_validate_address,
    help="Robot address (skips ip.txt lookup and prompts)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output, including the FTP exchange",
)
@click.version_option(package_name="robosync")
@click.pass_context
def main(
    ctx: Any,
    address: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """robosync - Upload & download robot program files over FTP."""
    ctx.ensure_object(dict)
    ctx.obj["address"] = address
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("robosync").setLevel(logging.DEBUG)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def upload(ctx: Any, path: Path) -> None:
    """Upload a program file or a folder of program files to the robot.

    PATH: A single file (uploaded whatever its extension) or a folder, of
    which every .LS file directly inside is uploaded.

    Examples:
        robosync upload MAIN.LS
        robosync upload ./programs
        robosync -a 192.168.10.50 upload ./programs
    """
    _run(ctx, lambda engine: engine.upload_path(path))


@main.command("download-all")
@click.argument("dest_root", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def download_all(ctx: Any, dest_root: Path) -> None:
    """Download every file from the robot into a new dated folder.

    Files land in DEST_ROOT/<YYYY-MM-DD>-ALL_<NN>/.
    """
    _run(ctx, lambda engine: engine.download_all(dest_root))


@main.command()
@click.argument("dest_root", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--suffix", "-s", default=LS_SUFFIX, show_default=True, help="File suffix to fetch"
)
@click.option(
    "--tag", "-t", default=None, help="Folder tag (defaults to the suffix, e.g. LS)"
)
@click.pass_context
def download(ctx: Any, dest_root: Path, suffix: str, tag: Optional[str]) -> None:
    """Download matching files from the robot into a new dated folder.

    Files land in DEST_ROOT/<YYYY-MM-DD>-<TAG>_<NN>/.

    Examples:
        robosync download ./backups
        robosync download ./backups --suffix .VA --tag VA
    """
    normalized = normalize_suffix(suffix) or LS_SUFFIX
    folder_tag = tag or normalized.lstrip(".").upper() or LS_TAG
    _run(ctx, lambda engine: engine.download_filtered(dest_root, normalized, folder_tag))


@main.command()
@click.argument(
    "dest_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--suffix", "-s", default=LS_SUFFIX, show_default=True, help="File suffix to update"
)
@click.pass_context
def sync(ctx: Any, dest_dir: Path, suffix: str) -> None:
    """Refresh the files in DEST_DIR from the robot.

    Only files that already exist locally are downloaded; files that exist
    only on the robot are skipped.
    """
    normalized = normalize_suffix(suffix) or LS_SUFFIX
    _run(ctx, lambda engine: engine.sync_existing(dest_dir, normalized))


@main.command("download-one")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--dest",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Destination folder (prompted for if omitted)",
)
@click.option(
    "--suffix", "-s", default=LS_SUFFIX, show_default=True, help="Listing filter"
)
@click.pass_context
def download_one(ctx: Any, file: Path, dest: Optional[Path], suffix: str) -> None:
    """Download the robot's copy of FILE.

    The remote file with FILE's name is fetched into the destination folder.
    """
    normalized = normalize_suffix(suffix) or LS_SUFFIX
    _run(ctx, lambda engine: engine.download_one(file, dest, normalized))


@main.group("config")
def config_group() -> None:
    """Show or change robosync settings."""


@config_group.command("show")
@click.pass_context
def config_show(ctx: Any) -> None:
    """Show the effective configuration."""
    out: OutputFormatter = ctx.obj["out"]
    settings = config.as_dict()
    if out.json_output:
        out.output_json(settings)
        return

    for key, value in settings.items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        out.print(f"{key}: {value}")
    if not config.is_configured():
        out.info(f"No settings saved in {config.get_config_path()}, showing defaults")


@config_group.command("set-address")
@click.argument("address", callback=_validate_address)
@click.pass_context
def config_set_address(ctx: Any, address: str) -> None:
    """Set the default robot ADDRESS suggested in prompts."""
    out: OutputFormatter = ctx.obj["out"]
    config.save_default_address(address)
    out.success(f"Default address set to {address} ({config.get_config_path()})")


@config_group.command("add-known")
@click.argument("address", callback=_validate_address)
@click.pass_context
def config_add_known(ctx: Any, address: str) -> None:
    """Add ADDRESS to the short-list offered when choosing a robot."""
    out: OutputFormatter = ctx.obj["out"]
    addresses = config.known_addresses
    if address in addresses:
        out.info(f"{address} is already a known address")
        return
    config.save_known_addresses(addresses + [address])
    out.success(f"Added {address} to known addresses")


if __name__ == "__main__":
    main()
