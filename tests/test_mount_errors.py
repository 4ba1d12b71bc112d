import pytest

from nixshares.mounts.errors import (
    MountErrorCategory,
    classify_mount_error,
    classify_unmount_error,
)


def test_permission_denied():
    classified = classify_mount_error("mount error: permission denied")
    assert classified.category == MountErrorCategory.PERMISSION
    assert classified.message == "Permission denied. Check your credentials or run with sudo."


def test_busy_mount_point():
    classified = classify_mount_error("mount point /x is busy")
    assert classified.category == MountErrorCategory.IN_USE


def test_unrecognized_message_passes_through():
    classified = classify_mount_error("  mount error(95): Operation not supported\n")
    assert classified.category == MountErrorCategory.UNKNOWN
    assert classified.message == "Mount failed: mount error(95): Operation not supported"


@pytest.mark.parametrize("stderr, category", [
    ("mount error(13): Permission denied", MountErrorCategory.PERMISSION),
    ("Access Denied", MountErrorCategory.PERMISSION),
    ("mount error(111): could not connect: Connection refused", MountErrorCategory.UNREACHABLE),
    ("Could not resolve address for nas", MountErrorCategory.UNREACHABLE),
    ("/mnt/x already mounted", MountErrorCategory.IN_USE),
    ("mount error(2): No such file or directory", MountErrorCategory.NOT_FOUND),
    ("mount error(22): Invalid argument", MountErrorCategory.INVALID_OPTIONS),
    ("mount error(112): Host is down", MountErrorCategory.HOST_DOWN),
])
def test_mount_categories(stderr, category):
    assert classify_mount_error(stderr).category == category


def test_first_matching_rule_wins():
    classified = classify_mount_error("permission denied; device busy")
    assert classified.category == MountErrorCategory.PERMISSION


def test_not_mounted_applies_to_unmount_only():
    assert classify_unmount_error("umount: /mnt/x: not mounted.").category == MountErrorCategory.NOT_MOUNTED
    assert classify_mount_error("not mounted").category == MountErrorCategory.UNKNOWN


def test_unmount_messages():
    busy = classify_unmount_error("umount: /mnt/x: target is busy.")
    assert busy.category == MountErrorCategory.IN_USE
    assert "Close any programs" in busy.message
    other = classify_unmount_error("weird failure")
    assert other.message == "Unmount failed: weird failure"


def test_unmount_rules_check_not_mounted_first():
    classified = classify_unmount_error("umount: /mnt/x: not mounted (permission denied?)")
    assert classified.category == MountErrorCategory.NOT_MOUNTED
    assert classify_unmount_error("target is busy, permission denied").category == MountErrorCategory.IN_USE
    assert classify_unmount_error("umount: permission denied").category == MountErrorCategory.PERMISSION


def test_unmount_ignores_mount_only_rules():
    classified = classify_unmount_error("mount error(112): Host is down")
    assert classified.category == MountErrorCategory.UNKNOWN
    assert classified.message == "Unmount failed: mount error(112): Host is down"
