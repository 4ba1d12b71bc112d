import json
import logging
import os
import subprocess
from typing import List, Optional

import psutil

from nixshares.config.settings import config
from nixshares.exceptions import ConfigIOError, ExternalCommandError, NixSharesError
from nixshares.shares.models import MountedShare, RemoteShare

logger = logging.getLogger(__name__)

FINDMNT_COLUMNS = "SOURCE,TARGET,FSTYPE,OPTIONS"


def _flatten(filesystems: list) -> list:
    flat = []
    for fs in filesystems:
        flat.append(fs)
        flat.extend(_flatten(fs.get("children", [])))
    return flat


def list_mounted_findmnt(fs_type: str) -> List[MountedShare]:
    """Active mounts of ``fs_type`` as reported by ``findmnt --json``."""
    cmd = ["findmnt", "--list", "-t", fs_type, "--json", "-o", FINDMNT_COLUMNS]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ExternalCommandError(f"Failed to run findmnt: {e}")

    # findmnt also exits 1 when nothing matches; the caller falls back either way
    if result.returncode != 0:
        raise ExternalCommandError("findmnt command failed", stderr=result.stderr, returncode=result.returncode)

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ExternalCommandError(f"Failed to parse findmnt JSON: {e}")

    shares = []
    for fs in _flatten(data.get("filesystems", [])):
        fs = {key.lower(): value for key, value in fs.items()}
        if fs.get("fstype", fs_type) != fs_type:
            continue
        shares.append(MountedShare(
            source=fs.get("source") or "",
            target=fs.get("target") or "",
            fs_type=fs.get("fstype") or fs_type,
            options=fs.get("options") or "",
            is_mounted=True,
        ))
    return shares


def list_mounted_table(fs_type: str) -> List[MountedShare]:
    """Active mounts of ``fs_type`` read from the kernel mount table."""
    try:
        partitions = psutil.disk_partitions(all=True)
    except OSError as e:
        raise ConfigIOError(f"Failed to read the mount table: {e}")

    return [
        MountedShare(
            source=part.device,
            target=part.mountpoint,
            fs_type=part.fstype,
            options=part.opts,
            is_mounted=True,
        )
        for part in partitions
        if part.fstype == fs_type
    ]


def list_mounted(fs_type: Optional[str] = None) -> List[MountedShare]:
    """Every currently mounted filesystem of ``fs_type`` (CIFS by default)."""
    fs_type = fs_type or config.remote_fs_type
    try:
        return list_mounted_findmnt(fs_type)
    except ExternalCommandError as e:
        logger.debug(f"findmnt unavailable ({e}), falling back to the mount table")
    return list_mounted_table(fs_type)


def is_mounted(mount_point: str, fs_type: Optional[str] = None) -> bool:
    target = os.path.normpath(mount_point)
    try:
        mounted = list_mounted(fs_type)
    except NixSharesError as e:
        logger.warning(f"Could not determine mount state of {mount_point}: {e}")
        return False
    return any(os.path.normpath(share.target) == target for share in mounted)


def _configured_options(share: RemoteShare) -> str:
    options = []
    if share.credentials:
        options.append(f"credentials={share.credentials}")
    if share.force_user:
        options.append(f"uid={share.force_user}")
    if share.force_group:
        options.append(f"gid={share.force_group}")
    return ",".join(options)


def list_all_shares(configured: List[RemoteShare], fs_type: Optional[str] = None) -> List[MountedShare]:
    """Merge configured remote shares with the live mount table.

    Each configured share appears once, flagged by whether its mount point is
    currently mounted. Live mounts with no configured counterpart are
    appended after them.
    """
    try:
        mounted = list_mounted(fs_type)
    except NixSharesError as e:
        logger.warning(f"Could not list mounted shares: {e}")
        mounted = []

    by_target = {os.path.normpath(share.target): share for share in mounted}

    result = []
    seen = set()
    for share in configured:
        target = os.path.normpath(share.name)
        live = by_target.get(target)
        seen.add(target)
        result.append(MountedShare(
            source=share.remote_path,
            target=share.name,
            fs_type=share.fs_type,
            options=live.options if live else _configured_options(share),
            is_mounted=live is not None,
        ))

    for target, share in by_target.items():
        if target not in seen:
            result.append(share)
    return result
