import logging
import os
import subprocess
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from nixshares.config.settings import config
from nixshares.exceptions import (
    AlreadyInStateError,
    ConfigIOError,
    ExternalCommandError,
    ValidationError,
)
from nixshares.mounts.errors import classify_mount_error, classify_unmount_error
from nixshares.mounts.state import is_mounted
from nixshares.mounts.validation import SHELL_METACHARACTERS, validate_mount_point, validate_remote_url
from nixshares.shares.models import MountOptions

logger = logging.getLogger(__name__)


@contextmanager
def credentials_file(username: str, password: str, directory: Optional[str] = None) -> Iterator[str]:
    """Write a ``username=``/``password=`` file readable only by its owner.

    The file is removed when the block exits, whatever the outcome.
    """
    directory = directory or config.credentials_dir
    path = os.path.join(directory, f"smb_creds_{os.getpid()}_{time.time_ns()}")
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except OSError as e:
        raise ConfigIOError(f"Failed to create credentials file: {e}")

    try:
        try:
            with os.fdopen(fd, "w") as f:
                f.write(f"username={username}\npassword={password}\n")
            os.chmod(path, 0o600)
        except OSError as e:
            raise ConfigIOError(f"Failed to write credentials file: {e}")
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def build_mount_options(credentials_path: str, options: MountOptions) -> List[str]:
    for extra in options.additional_opts:
        if "," in extra or any(c in extra for c in SHELL_METACHARACTERS):
            raise ValidationError(f"Invalid mount option: {extra!r}")

    uid = options.uid if options.uid is not None else os.geteuid()
    gid = options.gid if options.gid is not None else os.getegid()
    return [
        f"credentials={credentials_path}",
        f"uid={uid}",
        f"gid={gid}",
    ] + list(options.additional_opts)


class CifsMountManager:
    """Mount and unmount CIFS shares with the system ``mount``/``umount`` commands.

    Passwords never appear on a command line: they go into a short-lived
    credentials file that ``mount.cifs`` reads.
    """

    def __init__(self, fs_type: Optional[str] = None, credentials_dir: Optional[str] = None):
        self.fs_type = fs_type or config.remote_fs_type
        self.credentials_dir = credentials_dir or config.credentials_dir

    def _run(self, cmd: List[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ExternalCommandError(f"Failed to execute {cmd[0]} command: {e}")

    def mount(
        self,
        remote_url: str,
        mount_point: str,
        username: str,
        password: str,
        options: Optional[MountOptions] = None,
    ):
        options = options or MountOptions()
        validate_remote_url(remote_url)
        validate_mount_point(mount_point)
        if "\n" in username or "\n" in password:
            raise ValidationError("Username and password must not contain line breaks")

        if is_mounted(mount_point, self.fs_type):
            raise AlreadyInStateError(f"Mount point {mount_point} is already mounted")

        if not os.path.isdir(mount_point):
            try:
                os.makedirs(mount_point, exist_ok=True)
            except OSError as e:
                raise ConfigIOError(f"Failed to create mount point directory: {e}")

        with credentials_file(username, password, self.credentials_dir) as creds_path:
            mount_opts = build_mount_options(creds_path, options)
            cmd = ["mount", "-t", self.fs_type, remote_url, mount_point, "-o", ",".join(mount_opts)]
            logger.info(f"Mounting {remote_url} on {mount_point}")
            result = self._run(cmd)

        if result.returncode != 0:
            classified = classify_mount_error(result.stderr or "")
            logger.error(f"Mount of {remote_url} failed: {(result.stderr or '').strip()}")
            raise ExternalCommandError(
                classified.message,
                category=classified.category,
                stderr=result.stderr or "",
                returncode=result.returncode,
            )

    def unmount(self, mount_point: str):
        validate_mount_point(mount_point)
        if not is_mounted(mount_point, self.fs_type):
            raise AlreadyInStateError(f"Mount point {mount_point} is not currently mounted")

        logger.info(f"Unmounting {mount_point}")
        result = self._run(["umount", mount_point])
        if result.returncode != 0:
            classified = classify_unmount_error(result.stderr or "")
            logger.error(f"Unmount of {mount_point} failed: {(result.stderr or '').strip()}")
            raise ExternalCommandError(
                classified.message,
                category=classified.category,
                stderr=result.stderr or "",
                returncode=result.returncode,
            )
