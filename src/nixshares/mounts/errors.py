from enum import Enum
from typing import NamedTuple


class MountErrorCategory(str, Enum):
    PERMISSION = "permission"
    UNREACHABLE = "unreachable"
    IN_USE = "in_use"
    NOT_FOUND = "not_found"
    INVALID_OPTIONS = "invalid_options"
    HOST_DOWN = "host_down"
    NOT_MOUNTED = "not_mounted"
    UNKNOWN = "unknown"


class ClassifiedError(NamedTuple):
    category: MountErrorCategory
    message: str


MOUNT = "mount"
UNMOUNT = "unmount"

# (category, substrings, message); first match wins
_MOUNT_RULES = [
    (
        MountErrorCategory.PERMISSION,
        ("permission denied", "access denied"),
        "Permission denied. Check your credentials or run with sudo.",
    ),
    (
        MountErrorCategory.UNREACHABLE,
        ("connection refused", "could not resolve"),
        "Connection refused. Server may be offline or unreachable.",
    ),
    (
        MountErrorCategory.IN_USE,
        ("already mounted", "busy"),
        "Mount point is already in use or mounted.",
    ),
    (
        MountErrorCategory.NOT_FOUND,
        ("no such file or directory",),
        "Server or share not found. Check the remote URL.",
    ),
    (
        MountErrorCategory.INVALID_OPTIONS,
        ("invalid argument",),
        "Invalid mount options. Check your configuration.",
    ),
    (
        MountErrorCategory.HOST_DOWN,
        ("host is down",),
        "Host is unreachable. Check network connectivity.",
    ),
]

_UNMOUNT_RULES = [
    (
        MountErrorCategory.NOT_MOUNTED,
        ("not mounted",),
        "The specified path is not currently mounted.",
    ),
    (
        MountErrorCategory.IN_USE,
        ("busy",),
        "Mount point is busy. Close any programs using files from this share.",
    ),
    (
        MountErrorCategory.PERMISSION,
        ("permission denied",),
        "Permission denied. You may need to run with sudo.",
    ),
]


def classify_error(stderr: str, operation: str = MOUNT) -> ClassifiedError:
    """Map the error output of ``mount``/``umount`` to a user-facing category.

    Matching is a case-insensitive substring search over a fixed, ordered
    table per operation. Unrecognised output is passed through, trimmed,
    behind a generic prefix.
    """
    lower = stderr.lower()
    rules = _UNMOUNT_RULES if operation == UNMOUNT else _MOUNT_RULES
    for category, needles, message in rules:
        if any(needle in lower for needle in needles):
            return ClassifiedError(category, message)

    prefix = "Unmount failed" if operation == UNMOUNT else "Mount failed"
    return ClassifiedError(MountErrorCategory.UNKNOWN, f"{prefix}: {stderr.strip()}")


def classify_mount_error(stderr: str) -> ClassifiedError:
    return classify_error(stderr, MOUNT)


def classify_unmount_error(stderr: str) -> ClassifiedError:
    return classify_error(stderr, UNMOUNT)
