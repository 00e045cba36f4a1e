"""Unit tests for upload and download planning."""

from pathlib import Path

import pytest

from robosync.exceptions import InvalidSelectionError, LocalIOError
from robosync.models import RemoteEntry
from robosync.sync import (
    DirectoryScanner,
    DownloadPolicy,
    TransferDirection,
    plan_download,
    plan_single,
    plan_update_existing,
    plan_upload,
)


def _touch(directory: Path, *names: str) -> None:
    for name in names:
        (directory / name).write_text(name)


class TestDirectoryScanner:
    """Tests for DirectoryScanner."""

    def test_scan_is_not_recursive(self, tmp_path):
        """Test that only immediate regular files are returned."""
        _touch(tmp_path, "A.LS")
        (tmp_path / "sub").mkdir()
        _touch(tmp_path / "sub", "B.LS")

        files = DirectoryScanner().scan_local(tmp_path)

        assert [f.name for f in files] == ["A.LS"]
        assert files[0].size == len("A.LS")

    def test_scan_missing_directory(self, tmp_path):
        """Test that listing failures raise LocalIOError."""
        with pytest.raises(LocalIOError, match="Could not list directory"):
            DirectoryScanner().scan_local(tmp_path / "missing")


class TestPlanUpload:
    """Tests for plan_upload."""

    def test_directory_filters_by_suffix(self, tmp_path):
        """Test that only .LS files (any case) are planned."""
        _touch(tmp_path, "a.LS", "b.ls", "c.txt", "d.LSX")

        plan = plan_upload(tmp_path, is_directory=True)

        assert plan.direction == TransferDirection.UPLOAD
        assert sorted(plan.remote_names) == ["a.LS", "b.ls"]

    def test_directory_upload_uses_base_names(self, tmp_path):
        """Test that remote names are flat base names."""
        _touch(tmp_path, "MAIN.LS")

        (item,) = plan_upload(tmp_path, is_directory=True)

        assert item.source == str(tmp_path / "MAIN.LS")
        assert item.target == "MAIN.LS"

    def test_single_file_ignores_extension(self, tmp_path):
        """Test that a single file is planned whatever its extension."""
        _touch(tmp_path, "notes.txt")

        plan = plan_upload(tmp_path / "notes.txt", is_directory=False)

        assert plan.remote_names == ["notes.txt"]
        assert len(plan) == 1

    def test_single_file_must_be_a_file(self, tmp_path):
        """Test that a directory passed in file mode is rejected."""
        with pytest.raises(InvalidSelectionError):
            plan_upload(tmp_path, is_directory=False)

    def test_directory_mode_must_be_a_directory(self, tmp_path):
        """Test that a file passed in directory mode is rejected."""
        _touch(tmp_path, "MAIN.LS")
        with pytest.raises(InvalidSelectionError):
            plan_upload(tmp_path / "MAIN.LS", is_directory=True)

    def test_empty_directory_gives_empty_plan(self, tmp_path):
        """Test that a folder without program files plans nothing."""
        _touch(tmp_path, "readme.txt")
        assert not plan_upload(tmp_path, is_directory=True)


class TestPlanDownload:
    """Tests for plan_download and plan_single."""

    ENTRIES = [
        RemoteEntry("MAIN.LS", True, 10),
        RemoteEntry("md", False, 0),
        RemoteEntry("sub.ls", True, 5),
        RemoteEntry("NUMREG.VR", True, 7),
    ]

    def test_all_files(self, tmp_path):
        """Test that every file entry is planned in listing order."""
        plan = plan_download(self.ENTRIES, tmp_path)

        assert plan.direction == TransferDirection.DOWNLOAD
        assert plan.remote_names == ["MAIN.LS", "sub.ls", "NUMREG.VR"]
        assert [item.target for item in plan][0] == str(tmp_path / "MAIN.LS")

    def test_filtered_files(self, tmp_path):
        """Test that a suffix filters case-insensitively."""
        plan = plan_download(self.ENTRIES, tmp_path, suffix=".LS")
        assert plan.remote_names == ["MAIN.LS", "sub.ls"]

    def test_single_uses_selection_name(self, tmp_path):
        """Test that a single download targets the selection's base name."""
        plan = plan_single(Path("/work/programs/MAIN.LS"), tmp_path)

        assert plan.remote_names == ["MAIN.LS"]
        assert list(plan)[0].target == str(tmp_path / "MAIN.LS")


class TestPlanUpdateExisting:
    """Tests for plan_update_existing."""

    def test_only_existing_files_are_planned(self, tmp_path):
        """Test that remote-only files are skipped, not planned."""
        _touch(tmp_path, "x.ls")
        entries = [RemoteEntry("x.ls", True, 1), RemoteEntry("y.ls", True, 1)]

        plan, skipped = plan_update_existing(entries, tmp_path, ".LS")

        assert plan.remote_names == ["x.ls"]
        assert skipped == ["y.ls"]

    def test_match_is_case_insensitive(self, tmp_path):
        """Test that local names match remote names ignoring case."""
        _touch(tmp_path, "Main.LS")
        entries = [RemoteEntry("MAIN.LS", True, 1)]

        plan, skipped = plan_update_existing(entries, tmp_path, ".LS")

        (item,) = plan
        assert item.source == "MAIN.LS"
        assert item.target == str(tmp_path / "Main.LS")
        assert skipped == []

    def test_suffix_and_directories_are_ignored(self, tmp_path):
        """Test that non-matching and directory entries are neither planned nor skipped."""
        _touch(tmp_path, "NUMREG.VR")
        entries = [RemoteEntry("NUMREG.VR", True, 1), RemoteEntry("md", False, 0)]

        plan, skipped = plan_update_existing(entries, tmp_path, ".LS")

        assert not plan
        assert skipped == []


class TestDownloadPolicy:
    """Tests for DownloadPolicy."""

    def test_properties(self):
        """Test which policies create folders and filter by suffix."""
        assert DownloadPolicy.ALL.creates_folder
        assert DownloadPolicy.FILTERED.creates_folder
        assert not DownloadPolicy.UPDATE_EXISTING.creates_folder
        assert not DownloadPolicy.ALL.uses_suffix_filter
        assert DownloadPolicy.SINGLE.uses_suffix_filter
