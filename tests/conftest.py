"""Shared fixtures for robosync tests."""

import ftplib
from functools import partial
from unittest.mock import MagicMock, Mock

import pytest

from robosync.output import OutputFormatter
from robosync.session import open_session


class ScriptedInteraction:
    """Headless InteractionProvider answering from pre-recorded replies."""

    def __init__(self, choices=(), texts=(), confirms=(), folders=()):
        self.choices = list(choices)
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.folders = list(folders)
        self.calls = []

    def choose_one(self, options, placeholder=""):
        self.calls.append(("choose_one", [label for label, _ in options]))
        return self.choices.pop(0) if self.choices else None

    def prompt_text(self, prompt, default=None, validate=None):
        self.calls.append(("prompt_text", default))
        return self.texts.pop(0) if self.texts else None

    def confirm(self, message):
        self.calls.append(("confirm", message))
        return self.confirms.pop(0) if self.confirms else False

    def choose_folder(self, prompt=""):
        self.calls.append(("choose_folder", prompt))
        return self.folders.pop(0) if self.folders else None


class FakeRobot:
    """In-memory robot controller behind a mocked ftplib.FTP."""

    def __init__(self, files=None, dirs=(), fail_on=()):
        self.files = dict(files or {})
        self.dirs = list(dirs)
        self.fail_on = set(fail_on)
        self.stored = []
        self.retrieved = []

        self.ftp = MagicMock(spec=ftplib.FTP)
        self.ftp.retrlines.side_effect = self._retrlines
        self.ftp.storbinary.side_effect = self._storbinary
        self.ftp.retrbinary.side_effect = self._retrbinary
        self.factory = Mock(return_value=self.ftp)

    def _retrlines(self, cmd, callback):
        for name in self.dirs:
            callback(f"drwxr-xr-x   2 robot    robot        4096 Jan 01 12:00 {name}")
        for name, data in self.files.items():
            callback(f"-rw-r--r--   1 robot    robot    {len(data):>8} Jan 01 12:00 {name}")
        return "226 Transfer complete"

    def _storbinary(self, cmd, fp, *args, **kwargs):
        name = cmd.split(" ", 1)[1]
        if name in self.fail_on:
            raise ftplib.error_perm("550 Permission denied")
        self.files[name] = fp.read()
        self.stored.append(name)
        return "226 Transfer complete"

    def _retrbinary(self, cmd, callback, *args, **kwargs):
        name = cmd.split(" ", 1)[1]
        if name in self.fail_on or name not in self.files:
            raise ftplib.error_perm(f"550 {name}: No such file")
        callback(self.files[name])
        self.retrieved.append(name)
        return "226 Transfer complete"

    def session_factory(self):
        return partial(open_session, ftp_factory=self.factory)


@pytest.fixture
def scripted():
    """Provide the ScriptedInteraction class."""
    return ScriptedInteraction


@pytest.fixture
def make_robot():
    """Provide the FakeRobot class."""
    return FakeRobot


@pytest.fixture
def mock_output():
    """Create a mock output formatter."""
    output = Mock(spec=OutputFormatter)
    output.quiet = True  # Suppress output during tests
    output.json_output = False
    return output
