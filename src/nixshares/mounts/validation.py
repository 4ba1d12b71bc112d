import os

from nixshares.exceptions import ValidationError

# Characters that could chain or substitute commands if an argument ever reached a shell
SHELL_METACHARACTERS = (";", "&", "|", "`")

REMOTE_PREFIX = "//"


def _has_metacharacters(value: str) -> bool:
    return any(c in value for c in SHELL_METACHARACTERS)


def validate_remote_url(url: str) -> None:
    """Check a ``//server/share`` address; raise ValidationError when malformed."""
    if not url.startswith(REMOTE_PREFIX):
        raise ValidationError("Remote URL must start with '//' (e.g., //server/share)")
    if url.count("/") < 3:
        raise ValidationError("Remote URL must include server and share name (e.g., //server/share)")
    if _has_metacharacters(url):
        raise ValidationError("Remote URL contains invalid characters")


def validate_mount_point(path: str) -> None:
    if not os.path.isabs(path):
        raise ValidationError("Mount point must be an absolute path")
    if _has_metacharacters(path):
        raise ValidationError("Mount point path contains invalid characters")
