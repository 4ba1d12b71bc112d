import logging
from typing import List, Optional

from nixshares.config.source import ConfigSource, FileConfigSource
from nixshares.exceptions import NotFoundError, StructuralError, ValidationError
from nixshares.nixconf.editor import delete_entry, insert_entry, insert_into_module, replace_entry
from nixshares.nixconf.extractor import GLOBAL_SECTION, extract_local_shares
from nixshares.nixconf.locator import find_direct_entry, find_samba_settings
from nixshares.nixconf.parser import Node, parse
from nixshares.nixconf.serializer import render_local_share, render_samba_section
from nixshares.shares.models import LocalShare

logger = logging.getLogger(__name__)


def parse_for_edit(text: str) -> Node:
    """Parse text that is about to be modified; refuse to edit a file with syntax errors."""
    result = parse(text)
    if result.errors:
        first = result.errors[0]
        line = text.count("\n", 0, first.offset) + 1
        raise StructuralError(f"Configuration file has syntax errors (line {line}: {first.message})")
    return result.root


def validate_local_share(share: LocalShare):
    if not share.name.strip():
        raise ValidationError("Share name must not be empty.")
    if share.name == GLOBAL_SECTION:
        raise ValidationError(f"'{GLOBAL_SECTION}' is reserved for server settings.")
    if not share.path.strip():
        raise ValidationError("Share path must not be empty.")


def add_local_share(text: str, share: LocalShare) -> str:
    """Return ``text`` with ``share`` added to ``services.samba.settings``.

    If the configuration has no samba settings yet, a whole ``services.samba``
    section is created before the module's closing brace.
    """
    validate_local_share(share)
    root = parse_for_edit(text)
    settings = find_samba_settings(root)

    if settings is None:
        logger.info("No services.samba.settings section found, creating one")
        return insert_into_module(text, root, render_samba_section(share))

    if find_direct_entry(settings, share.name) is not None:
        raise ValidationError(f"Share '{share.name}' already exists.")
    return insert_entry(text, settings, render_local_share(share))


def delete_local_share(text: str, name: str) -> str:
    root = parse_for_edit(text)
    settings = find_samba_settings(root)
    if settings is None or name == GLOBAL_SECTION or find_direct_entry(settings, name) is None:
        raise NotFoundError(f"Share '{name}' not found in configuration")
    return delete_entry(text, settings, name)


def update_local_share(text: str, old_name: str, share: LocalShare) -> str:
    """Replace the share stored as ``old_name`` with ``share``.

    A rename removes the old entry and appends the new one, since the key
    is the share's identity.
    """
    validate_local_share(share)
    root = parse_for_edit(text)
    settings = find_samba_settings(root)
    if settings is None or find_direct_entry(settings, old_name) is None:
        raise NotFoundError(f"Share '{old_name}' not found in configuration")

    if share.name != old_name:
        if find_direct_entry(settings, share.name) is not None:
            raise ValidationError(f"Share '{share.name}' already exists.")
        return add_local_share(delete_local_share(text, old_name), share)

    return replace_entry(text, settings, old_name, render_local_share(share))


class LocalShareManager:
    """Samba shares exported by this machine, stored in the NixOS configuration."""

    def __init__(self, source: Optional[ConfigSource] = None):
        self.source = source or FileConfigSource()

    def list_shares(self) -> List[LocalShare]:
        return extract_local_shares(self.source.read())

    def get_share(self, name: str) -> LocalShare:
        for share in self.list_shares():
            if share.name == name:
                return share
        raise NotFoundError(f"Share '{name}' not found in configuration")

    def create_share(self, share: LocalShare):
        self.source.write(add_local_share(self.source.read(), share))
        logger.info(f"Added samba share '{share.name}' ({share.path})")

    def update_share(self, old_name: str, share: LocalShare):
        self.source.write(update_local_share(self.source.read(), old_name, share))
        logger.info(f"Updated samba share '{old_name}' -> '{share.name}'")

    def delete_share(self, name: str):
        self.source.write(delete_local_share(self.source.read(), name))
        logger.info(f"Deleted samba share '{name}'")
