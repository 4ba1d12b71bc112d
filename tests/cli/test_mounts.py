from click.testing import CliRunner
from unittest.mock import patch

from nixshares.cli import main
from nixshares.exceptions import ExternalCommandError
from nixshares.shares.models import MountedShare


def test_mounts_help():
    runner = CliRunner()
    result = runner.invoke(main, ['mounts', '--help'])
    assert result.exit_code == 0
    assert "Mount and unmount remote CIFS shares." in result.output


@patch("nixshares.mounts.cifs.CifsMountManager.mount")
def test_mount_prompts_for_password(mock_mount):
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["mounts", "mount", "//nas/share", "/mnt/nas", "--username", "alice", "-o", "vers=3.0"],
        input="s3cret\n",
    )
    assert result.exit_code == 0
    assert "Mounted //nas/share on /mnt/nas." in result.output
    args = mock_mount.call_args[0]
    assert args[:4] == ("//nas/share", "/mnt/nas", "alice", "s3cret")
    assert args[4].additional_opts[-1] == "vers=3.0"
    assert "s3cret" not in result.output


@patch("nixshares.mounts.cifs.CifsMountManager.mount")
def test_mount_failure_message(mock_mount):
    mock_mount.side_effect = ExternalCommandError("Permission denied. Check your credentials or run with sudo.")
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["mounts", "mount", "//nas/share", "/mnt/nas", "--username", "alice", "--password", "pw"],
    )
    assert "Error mounting share: Permission denied." in result.output


@patch("nixshares.mounts.cifs.CifsMountManager.unmount")
def test_unmount(mock_unmount):
    runner = CliRunner()
    result = runner.invoke(main, ["mounts", "unmount", "/mnt/nas"])
    assert result.exit_code == 0
    mock_unmount.assert_called_once_with("/mnt/nas")


@patch("nixshares.mounts.state.is_mounted", return_value=True)
def test_status(mock_is_mounted):
    runner = CliRunner()
    result = runner.invoke(main, ["mounts", "status", "/mnt/nas"])
    assert "/mnt/nas is mounted." in result.output


@patch("nixshares.mounts.state.list_mounted")
def test_list(mock_list, tmp_path):
    config_file = tmp_path / "default.nix"
    config_file.write_text('{\n  fileSystems."/media/x" = { device = "//nas/x"; fsType = "cifs"; };\n}\n')
    mock_list.return_value = [
        MountedShare(source="//other/y", target="/media/y", fs_type="cifs", options="rw", is_mounted=True),
    ]
    runner = CliRunner()
    result = runner.invoke(main, ["--config", str(config_file), "mounts", "list"])
    assert result.exit_code == 0
    assert "/media/x: //nas/x (not mounted)" in result.output
    assert "/media/y: //other/y (mounted)" in result.output
