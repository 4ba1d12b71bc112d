from typing import List, Optional

from pydantic import BaseModel, Field


class LocalShare(BaseModel):
    """A Samba export declared under ``services.samba.settings``."""

    name: str
    path: str
    browsable: bool = True
    read_only: bool = False
    guest_ok: bool = False
    force_user: str = ""
    force_group: str = ""


class RemoteShare(BaseModel):
    """A CIFS mount declared as ``fileSystems."<mount point>"``.

    ``name`` is the local mount point and doubles as the unique key.
    """

    name: str
    remote_path: str
    fs_type: str = "cifs"
    credentials: str = ""
    force_user: str = "1000"
    force_group: str = "100"


class MountedShare(BaseModel):
    source: str
    target: str
    fs_type: str
    options: str = ""
    is_mounted: bool = False


DEFAULT_MOUNT_OPTIONS = [
    "x-systemd.automount",
    "noauto",
    "x-systemd.idle-timeout=300",
]


class MountOptions(BaseModel):
    # None means the effective uid/gid of the calling process
    uid: Optional[int] = None
    gid: Optional[int] = None
    additional_opts: List[str] = Field(default_factory=lambda: list(DEFAULT_MOUNT_OPTIONS))
