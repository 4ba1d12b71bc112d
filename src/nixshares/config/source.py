"""Handles for the configuration text.

Share managers never touch a hard-coded path: they read and write through a
source so tests can work on in-memory text.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from nixshares.config.settings import config
from nixshares.exceptions import ConfigIOError

logger = logging.getLogger(__name__)


class ConfigSource(ABC):
    @abstractmethod
    def read(self) -> str:
        """Return the current configuration text."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Persist new configuration text."""


class TextConfigSource(ConfigSource):
    def __init__(self, text: str = ""):
        self.text = text

    def read(self) -> str:
        return self.text

    def write(self, text: str) -> None:
        self.text = text


class FileConfigSource(ConfigSource):
    def __init__(self, path: Optional[str] = None, writer=None):
        self.path = path or config.nix_config_path
        if writer is None:
            from nixshares.system.writer import PrivilegedWriter
            writer = PrivilegedWriter()
        self.writer = writer

    def read(self) -> str:
        try:
            with open(self.path, "r") as f:
                return f.read()
        except OSError as e:
            raise ConfigIOError(f"Failed to read {self.path}: {e}")

    def write(self, text: str) -> None:
        logger.info(f"Writing configuration to {self.path}")
        self.writer.write(self.path, text)

    def __repr__(self):
        return f"FileConfigSource({self.path!r})"
