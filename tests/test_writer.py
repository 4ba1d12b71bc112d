import os
from unittest.mock import MagicMock, patch

import pytest

from nixshares.exceptions import ConfigIOError
from nixshares.system.writer import (
    AuthorizationCancelled,
    CopyCommandStrategy,
    DirectWriter,
    DirectWriteStrategy,
    PrivilegedWriter,
    StrategyFailed,
    StrategyUnavailable,
)


class RecordingStrategy:
    def __init__(self, name, error=None, needs_staging=True):
        self.name = name
        self.error = error
        self.needs_staging = needs_staging
        self.calls = []

    def write(self, path, content, staged_path):
        staged = None
        if staged_path is not None:
            with open(staged_path) as f:
                staged = f.read()
        self.calls.append((path, content, staged_path, staged))
        if self.error is not None:
            raise self.error


def test_direct_writer(tmp_path):
    target = tmp_path / "default.nix"
    DirectWriter().write(str(target), "{ }\n")
    assert target.read_text() == "{ }\n"


def test_first_success_wins():
    failing = RecordingStrategy("a", StrategyFailed("read-only file system"))
    working = RecordingStrategy("b")
    unused = RecordingStrategy("c")

    PrivilegedWriter([failing, working, unused]).write("/etc/nixos/x.nix", "text")

    assert len(failing.calls) == 1
    assert working.calls[0][3] == "text"
    assert unused.calls == []
    staged_path = working.calls[0][2]
    assert not os.path.exists(staged_path)


def test_unavailable_strategies_are_skipped():
    missing = RecordingStrategy("missing", StrategyUnavailable("not installed"))
    working = RecordingStrategy("ok")
    PrivilegedWriter([missing, working]).write("/etc/x", "text")
    assert len(working.calls) == 1


def test_cancelled_authorization_stops():
    cancelled = RecordingStrategy("pkexec", AuthorizationCancelled("Request dismissed"))
    never = RecordingStrategy("sudo")
    with pytest.raises(ConfigIOError, match="Authorization cancelled by user"):
        PrivilegedWriter([cancelled, never]).write("/etc/x", "text")
    assert never.calls == []
    assert not os.path.exists(cancelled.calls[0][2])


def test_all_strategies_failing():
    with pytest.raises(ConfigIOError, match="security.polkit.enable = true;"):
        PrivilegedWriter([RecordingStrategy("a", StrategyFailed("no"))]).write("/etc/x", "text")


def test_direct_strategy_needs_no_staging(tmp_path):
    strategy = DirectWriteStrategy()
    strategy.write(str(tmp_path / "f"), "x", None)
    assert (tmp_path / "f").read_text() == "x"
    with pytest.raises(StrategyFailed):
        strategy.write(str(tmp_path / "missing" / "f"), "x", None)


@patch("subprocess.run")
def test_copy_command_strategy(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stderr="")
    CopyCommandStrategy("sudo", ["sudo", "-n"]).write("/etc/x", "text", "/tmp/staged")
    mock_run.assert_called_once_with(
        ["sudo", "-n", "cp", "/tmp/staged", "/etc/x"], capture_output=True, text=True
    )


@patch("subprocess.run")
def test_copy_command_strategy_outcomes(mock_run):
    strategy = CopyCommandStrategy("pkexec", ["pkexec"], ("dismissed",))

    mock_run.side_effect = FileNotFoundError("pkexec")
    with pytest.raises(StrategyUnavailable):
        strategy.write("/etc/x", "text", "/tmp/staged")

    mock_run.side_effect = None
    mock_run.return_value = MagicMock(returncode=126, stderr="Error executing command as another user: Request dismissed")
    with pytest.raises(AuthorizationCancelled):
        strategy.write("/etc/x", "text", "/tmp/staged")

    mock_run.return_value = MagicMock(returncode=1, stderr="cp: cannot create regular file")
    with pytest.raises(StrategyFailed):
        strategy.write("/etc/x", "text", "/tmp/staged")
