import logging
from typing import List, Optional

from nixshares.config.settings import config
from nixshares.config.source import ConfigSource, FileConfigSource
from nixshares.exceptions import NotFoundError, ValidationError
from nixshares.mounts.validation import validate_mount_point, validate_remote_url
from nixshares.nixconf.editor import delete_node, insert_entry, insert_into_module, replace_node
from nixshares.nixconf.extractor import extract_remote_shares
from nixshares.nixconf.locator import (
    attrpath_segments,
    direct_entries,
    find_filesystem_block,
    find_filesystem_entries,
)
from nixshares.nixconf.parser import ATTR_SET, Node
from nixshares.nixconf.serializer import render_remote_share
from nixshares.shares.local import parse_for_edit
from nixshares.shares.models import RemoteShare

logger = logging.getLogger(__name__)


def _indent_of(text: str, node: Node, fallback: str) -> str:
    line_start = text.rfind("\n", 0, node.start) + 1
    prefix = text[line_start:node.start]
    return prefix if prefix.strip() == "" else fallback


def _is_nested(entry: Node) -> bool:
    # "<mp>" = {...} inside a fileSystems block, as opposed to fileSystems."<mp>" = {...}
    return len(attrpath_segments(entry)) == 1


def validate_remote_share(share: RemoteShare):
    validate_mount_point(share.name)
    validate_remote_url(share.remote_path)
    if not share.fs_type:
        raise ValidationError("Filesystem type must not be empty.")


def _find_mount_entry(root: Node, mount_point: str) -> Optional[Node]:
    for name, entry in find_filesystem_entries(root):
        if name == mount_point:
            return entry
    return None


def add_remote_share(text: str, share: RemoteShare) -> str:
    """Return ``text`` with a ``fileSystems`` entry for ``share``.

    The entry goes into an existing ``fileSystems = { ... }`` block if there
    is one, otherwise next to the last existing ``fileSystems."..."`` entry,
    otherwise just before the module's closing brace.
    """
    validate_remote_share(share)
    root = parse_for_edit(text)
    entries = find_filesystem_entries(root)
    if any(name == share.name for name, _ in entries):
        raise ValidationError(f"A filesystem entry for '{share.name}' already exists.")

    block = find_filesystem_block(root)
    if block is not None:
        existing = direct_entries(block)
        indent = _indent_of(text, existing[0], "    ") if existing else "    "
        return insert_entry(text, block, render_remote_share(share, indent=indent, nested=True))

    dotted = [entry for _, entry in entries if not _is_nested(entry)]
    if dotted and dotted[-1].parent is not None and dotted[-1].parent.kind == ATTR_SET:
        last = dotted[-1]
        indent = _indent_of(text, last, "  ")
        return insert_entry(text, last.parent, render_remote_share(share, indent=indent))

    return insert_into_module(text, root, render_remote_share(share))


def delete_remote_share(text: str, name: str) -> str:
    root = parse_for_edit(text)
    entry = _find_mount_entry(root, name)
    if entry is None:
        raise NotFoundError(f"Could not find filesystem entry for '{name}'")
    return delete_node(text, entry)


def update_remote_share(text: str, old_name: str, share: RemoteShare) -> str:
    """Rewrite the entry for ``old_name``; a changed mount point is a delete plus an add."""
    validate_remote_share(share)
    root = parse_for_edit(text)
    entry = _find_mount_entry(root, old_name)
    if entry is None:
        raise NotFoundError(f"Could not find filesystem entry for '{old_name}'")

    if share.name != old_name:
        if _find_mount_entry(root, share.name) is not None:
            raise ValidationError(f"A filesystem entry for '{share.name}' already exists.")
        return add_remote_share(delete_remote_share(text, old_name), share)

    rendered = render_remote_share(
        share,
        indent=_indent_of(text, entry, "  "),
        nested=_is_nested(entry),
    )
    return replace_node(text, entry, rendered)


class RemoteShareManager:
    """CIFS mounts declared in the NixOS configuration."""

    def __init__(self, source: Optional[ConfigSource] = None, fs_type: Optional[str] = None):
        self.source = source or FileConfigSource()
        self.fs_type = fs_type or config.remote_fs_type

    def list_shares(self) -> List[RemoteShare]:
        return extract_remote_shares(self.source.read(), self.fs_type)

    def get_share(self, name: str) -> RemoteShare:
        for share in self.list_shares():
            if share.name == name:
                return share
        raise NotFoundError(f"Remote share '{name}' not found in configuration")

    def create_share(self, share: RemoteShare):
        self.source.write(add_remote_share(self.source.read(), share))
        logger.info(f"Added {share.fs_type} mount {share.remote_path} -> {share.name}")

    def update_share(self, old_name: str, share: RemoteShare):
        self.source.write(update_remote_share(self.source.read(), old_name, share))
        logger.info(f"Updated {share.fs_type} mount '{old_name}' -> '{share.name}'")

    def delete_share(self, name: str):
        self.source.write(delete_remote_share(self.source.read(), name))
        logger.info(f"Deleted mount '{name}'")
