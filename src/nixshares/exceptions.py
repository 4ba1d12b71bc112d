from typing import Optional


class NixSharesError(Exception):
    """Base class for every error surfaced to the caller.

    The string form of each error is meant to be shown to a user as is.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ValidationError(NixSharesError):
    """Input rejected before touching the configuration or the OS."""


class NotFoundError(NixSharesError):
    """A container, entry or share record does not exist."""


class AlreadyInStateError(NixSharesError):
    """Mount requested on a mounted point, or unmount on an unmounted one."""


class ConfigIOError(NixSharesError):
    """Reading or writing a file (config, credentials, temp copy) failed."""


class StructuralError(NixSharesError):
    """The configuration text has no place where the edit can be made."""


class AmbiguousInsertionError(StructuralError):
    """A container was found but it has no recognizable closing delimiter."""


class ExternalCommandError(NixSharesError):
    """An external command failed to start or exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        category=None,
        stderr: str = "",
        returncode: Optional[int] = None,
    ):
        super().__init__(message)
        self.category = category
        self.stderr = stderr
        self.returncode = returncode
