import unittest
from unittest.mock import MagicMock, patch

from nixshares.exceptions import ExternalCommandError
from nixshares.system.rebuild import rebuild_system
from nixshares.system.users import get_system_groups, get_system_users


class TestUsers(unittest.TestCase):
    @patch("pwd.getpwall")
    def test_users_sorted_and_unique(self, mock_getpwall):
        mock_getpwall.return_value = [
            MagicMock(pw_name="bob"),
            MagicMock(pw_name="alice"),
            MagicMock(pw_name="bob"),
        ]
        self.assertEqual(get_system_users(), ["alice", "bob"])

    @patch("pwd.getpwall", return_value=[])
    def test_users_fallback(self, mock_getpwall):
        self.assertEqual(get_system_users(), ["root", "nobody"])

    @patch("grp.getgrall")
    def test_groups(self, mock_getgrall):
        mock_getgrall.return_value = [MagicMock(gr_name="users"), MagicMock(gr_name="wheel")]
        self.assertEqual(get_system_groups(), ["users", "wheel"])


class TestRebuild(unittest.TestCase):
    @patch("subprocess.run")
    def test_rebuild(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="activating the configuration...\n", stderr="")
        output = rebuild_system("nixos-rebuild switch")
        mock_run.assert_called_once_with(["nixos-rebuild", "switch"], capture_output=True, text=True)
        self.assertIn("activating", output)

    @patch("subprocess.run")
    def test_rebuild_failure(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="error: syntax error, unexpected '}'\n")
        with self.assertRaises(ExternalCommandError) as ctx:
            rebuild_system("nixos-rebuild switch")
        self.assertIn("syntax error", str(ctx.exception))
        self.assertEqual(ctx.exception.returncode, 1)

    @patch("subprocess.run", side_effect=FileNotFoundError("nixos-rebuild"))
    def test_rebuild_missing_command(self, mock_run):
        with self.assertRaises(ExternalCommandError):
            rebuild_system("nixos-rebuild switch")
