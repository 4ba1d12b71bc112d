from click.testing import CliRunner
from unittest.mock import patch

from nixshares.cli import main
from nixshares.exceptions import ExternalCommandError


def test_system_help():
    runner = CliRunner()
    result = runner.invoke(main, ['system', '--help'])
    assert result.exit_code == 0
    assert "Host information and configuration activation." in result.output


@patch("nixshares.system.users.get_system_users", return_value=["alice", "bob"])
def test_users(mock_users):
    runner = CliRunner()
    result = runner.invoke(main, ["system", "users"])
    assert result.output.splitlines() == ["alice", "bob"]


@patch("nixshares.system.rebuild.rebuild_system")
def test_rebuild_failure(mock_rebuild):
    mock_rebuild.side_effect = ExternalCommandError("Rebuild failed: error: syntax error")
    runner = CliRunner()
    result = runner.invoke(main, ["system", "rebuild"])
    assert "Error rebuilding system: Rebuild failed" in result.output
