"""Unit tests for the robosync CLI commands."""

from functools import partial
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from robosync.cli import main
from robosync.session import open_session

ADDRESS = "10.0.0.5"


@pytest.fixture
def runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def robot(make_robot):
    """Route CLI sessions to an in-memory robot."""
    fake = make_robot(files={"MAIN.LS": b"main", "NUMREG.VR": b"regs"})
    with patch(
        "robosync.cli.open_session", partial(open_session, ftp_factory=fake.factory)
    ):
        yield fake


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_main_help(self, runner):
        """Test main help shows all commands."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "robosync" in result.output
        for command in ["upload", "download-all", "download", "sync", "download-one"]:
            assert command in result.output

    def test_invalid_address_is_rejected(self, runner, tmp_path):
        """Test that --address must be a dotted quad."""
        result = runner.invoke(main, ["-a", "999.1.1.1", "upload", str(tmp_path)])
        assert result.exit_code == 2
        assert "not a valid IPv4 address" in result.output


class TestUploadCommand:
    """Tests for the upload command."""

    def test_upload_folder(self, runner, robot, tmp_path):
        """Test uploading a folder with a fixed address."""
        (tmp_path / "A.LS").write_text("a")
        (tmp_path / "notes.txt").write_text("n")

        result = runner.invoke(main, ["-a", ADDRESS, "upload", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "uploaded successfully" in result.output
        assert robot.stored == ["A.LS"]
        robot.ftp.connect.assert_called_once_with(ADDRESS, 21)

    def test_upload_reads_hint_file(self, runner, robot, tmp_path):
        """Test that ip.txt supplies the address without prompting."""
        (tmp_path / "ip.txt").write_text("10.0.0.9")
        (tmp_path / "A.LS").write_text("a")

        result = runner.invoke(main, ["upload", str(tmp_path)])

        assert result.exit_code == 0, result.output
        robot.ftp.connect.assert_called_once_with("10.0.0.9", 21)

    def test_upload_prompts_for_address(self, runner, robot, tmp_path, monkeypatch):
        """Test declining ip.txt creation and picking the default address."""
        monkeypatch.setenv("ROBOSYNC_DEFAULT_ADDRESS", "10.0.0.7")
        (tmp_path / "A.LS").write_text("a")

        result = runner.invoke(main, ["upload", str(tmp_path)], input="n\n1\n")

        assert result.exit_code == 0, result.output
        robot.ftp.connect.assert_called_once_with("10.0.0.7", 21)
        assert not (tmp_path / "ip.txt").exists()

    def test_upload_saves_hint_file(self, runner, robot, tmp_path):
        """Test accepting ip.txt creation and typing an address."""
        (tmp_path / "A.LS").write_text("a")

        result = runner.invoke(
            main, ["upload", str(tmp_path)], input="y\n10.0.0.8\n"
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "ip.txt").read_text() == "10.0.0.8"
        robot.ftp.connect.assert_called_once_with("10.0.0.8", 21)

    def test_upload_connection_error(self, runner, robot, tmp_path):
        """Test that connection failures exit with a single error."""
        robot.ftp.connect.side_effect = OSError("timed out")
        (tmp_path / "A.LS").write_text("a")

        result = runner.invoke(main, ["-a", ADDRESS, "upload", str(tmp_path)])

        assert result.exit_code == 1
        assert "Could not connect" in result.output
        assert "uploaded successfully" not in result.output

    def test_upload_address_cancelled(self, runner, robot, tmp_path):
        """Test that an aborted address prompt exits without connecting."""
        (tmp_path / "A.LS").write_text("a")

        result = runner.invoke(main, ["upload", str(tmp_path)], input="n\n")

        assert result.exit_code == 1
        robot.factory.assert_not_called()


class TestDownloadCommands:
    """Tests for the download commands."""

    def test_download_all_json(self, runner, robot, tmp_path):
        """Test download-all with JSON output."""
        result = runner.invoke(
            main, ["--json", "-a", ADDRESS, "download-all", str(tmp_path)]
        )

        assert result.exit_code == 0, result.output
        assert '"downloads": 2' in result.output
        (folder,) = tmp_path.iterdir()
        assert folder.name.endswith("-ALL_01")

    def test_download_filtered_tag(self, runner, robot, tmp_path):
        """Test that the folder tag defaults to the suffix."""
        result = runner.invoke(
            main, ["-a", ADDRESS, "download", str(tmp_path), "--suffix", "vr"]
        )

        assert result.exit_code == 0, result.output
        (folder,) = tmp_path.iterdir()
        assert folder.name.endswith("-VR_01")
        assert [p.name for p in folder.iterdir()] == ["NUMREG.VR"]

    def test_sync_existing(self, runner, robot, tmp_path):
        """Test that sync refreshes existing files only."""
        (tmp_path / "MAIN.LS").write_text("old")

        result = runner.invoke(main, ["-a", ADDRESS, "sync", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "MAIN.LS").read_bytes() == b"main"
        assert robot.retrieved == ["MAIN.LS"]

    def test_download_one(self, runner, robot, tmp_path):
        """Test download-one into an explicit destination."""
        dest = tmp_path / "restore"

        result = runner.invoke(
            main,
            ["-a", ADDRESS, "download-one", str(tmp_path / "MAIN.LS"), "--dest", str(dest)],
        )

        assert result.exit_code == 0, result.output
        assert (dest / "MAIN.LS").read_bytes() == b"main"


class TestConfigCommands:
    """Tests for the config commands."""

    @patch("robosync.cli.config")
    def test_config_show(self, mock_config, runner):
        """Test showing the configuration."""
        mock_config.as_dict.return_value = {
            "default_address": "192.168.10.124",
            "known_addresses": ["10.0.0.8"],
        }

        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        assert "default_address: 192.168.10.124" in result.output
        assert "known_addresses: 10.0.0.8" in result.output
        assert "No settings saved" not in result.output

    @patch("robosync.cli.config")
    def test_config_show_unconfigured(self, mock_config, runner):
        """Test that showing defaults without a config file says so."""
        mock_config.as_dict.return_value = {"default_address": "192.168.10.124"}
        mock_config.is_configured.return_value = False
        mock_config.get_config_path.return_value = Path("/mock/config")

        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        assert "No settings saved in /mock/config" in result.output


    @patch("robosync.cli.config")
    def test_config_set_address(self, mock_config, runner):
        """Test saving the default address."""
        result = runner.invoke(main, ["config", "set-address", "10.0.0.3"])

        assert result.exit_code == 0
        mock_config.save_default_address.assert_called_once_with("10.0.0.3")

    @patch("robosync.cli.config")
    def test_config_add_known(self, mock_config, runner):
        """Test adding a known address."""
        mock_config.known_addresses = ["10.0.0.8"]

        result = runner.invoke(main, ["config", "add-known", "10.0.0.9"])

        assert result.exit_code == 0
        mock_config.save_known_addresses.assert_called_once_with(
            ["10.0.0.8", "10.0.0.9"]
        )

    @patch("robosync.cli.config")
    def test_config_set_invalid_address(self, mock_config, runner):
        """Test that invalid addresses are rejected."""
        result = runner.invoke(main, ["config", "set-address", "1.2.3"])

        assert result.exit_code == 2
        mock_config.save_default_address.assert_not_called()
