"""Commit text to a root-owned file.

Strategies are tried in order and the first one that succeeds wins. A
strategy that is not installed is skipped; a user dismissing the
authorization prompt stops the whole attempt.
"""
import logging
import os
import subprocess
import tempfile
from typing import List, Optional, Sequence

from nixshares.exceptions import ConfigIOError

logger = logging.getLogger(__name__)

CANCEL_MARKERS = ("dismissed", "Not authorized")

POLKIT_HINT = (
    "Failed to write file with elevated privileges.\n\n"
    "On NixOS, you need to enable polkit in your configuration:\n\n"
    "security.polkit.enable = true;\n\n"
    "Then rebuild with: sudo nixos-rebuild switch"
)


class StrategyUnavailable(Exception):
    pass


class StrategyFailed(Exception):
    pass


class AuthorizationCancelled(Exception):
    pass


class DirectWriteStrategy:
    name = "direct"
    needs_staging = False

    def write(self, path: str, content: str, staged_path: Optional[str]):
        try:
            with open(path, "w") as f:
                f.write(content)
        except OSError as e:
            raise StrategyFailed(str(e))


class CopyCommandStrategy:
    """Copy a staged file into place with ``<prefix> cp <staged> <path>``."""

    needs_staging = True

    def __init__(self, name: str, prefix: Sequence[str], cancel_markers: Sequence[str] = ()):
        self.name = name
        self.prefix = list(prefix)
        self.cancel_markers = tuple(cancel_markers)

    def write(self, path: str, content: str, staged_path: Optional[str]):
        cmd = self.prefix + ["cp", staged_path, path]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except (FileNotFoundError, PermissionError):
            raise StrategyUnavailable(f"{self.prefix[0]} is not available")

        if result.returncode == 0:
            return
        stderr = result.stderr or ""
        if any(marker in stderr for marker in self.cancel_markers):
            raise AuthorizationCancelled(stderr.strip())
        raise StrategyFailed(stderr.strip() or f"exit status {result.returncode}")


def default_strategies() -> list:
    return [
        DirectWriteStrategy(),
        CopyCommandStrategy("pkexec (NixOS wrapper)", ["/run/wrappers/bin/pkexec"], CANCEL_MARKERS),
        CopyCommandStrategy("run0", ["run0"]),
        CopyCommandStrategy("pkexec", ["pkexec"], CANCEL_MARKERS),
        CopyCommandStrategy("sudo", ["sudo", "-n"]),
    ]


class PrivilegedWriter:
    def __init__(self, strategies: Optional[List] = None):
        self.strategies = strategies if strategies is not None else default_strategies()

    def _stage(self, content: str) -> str:
        try:
            fd, staged_path = tempfile.mkstemp(prefix="nixshares_config_", suffix=".tmp")
            with os.fdopen(fd, "w") as f:
                f.write(content)
        except OSError as e:
            raise ConfigIOError(f"Failed to write temporary file: {e}")
        return staged_path

    def write(self, path: str, content: str) -> None:
        staged_path = None
        try:
            for strategy in self.strategies:
                if strategy.needs_staging and staged_path is None:
                    staged_path = self._stage(content)
                try:
                    strategy.write(path, content, staged_path)
                except AuthorizationCancelled:
                    raise ConfigIOError("Authorization cancelled by user")
                except StrategyUnavailable as e:
                    logger.debug(f"Write strategy '{strategy.name}' unavailable: {e}")
                    continue
                except StrategyFailed as e:
                    logger.info(f"Write strategy '{strategy.name}' failed for {path}: {e}")
                    continue
                logger.info(f"Wrote {path} using '{strategy.name}'")
                return
        finally:
            if staged_path is not None and os.path.exists(staged_path):
                os.remove(staged_path)

        raise ConfigIOError(POLKIT_HINT)


class DirectWriter(PrivilegedWriter):
    """Plain file write, for paths the current user already owns."""

    def __init__(self):
        super().__init__([DirectWriteStrategy()])
