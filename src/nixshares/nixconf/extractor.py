import logging
from typing import Dict, List, Optional, Union

from nixshares.config.settings import config
from nixshares.nixconf.locator import (
    attrpath_name,
    direct_entries,
    entry_value,
    find_filesystem_entries,
    find_samba_settings,
    unquote,
)
from nixshares.nixconf.parser import ATTR_SET, IDENT, LIST, LITERAL, STRING, Node, parse
from nixshares.shares.models import LocalShare, RemoteShare

logger = logging.getLogger(__name__)

PropertyValue = Union[str, List[str]]

# The samba section that holds server-wide options, not a share
GLOBAL_SECTION = "global"


def scalar_value(node: Optional[Node]) -> Optional[str]:
    if node is None:
        return None
    if node.kind == STRING:
        return unquote(node.text)
    if node.kind in (IDENT, LITERAL):
        return node.text
    return None


def list_value(node: Optional[Node]) -> Optional[List[str]]:
    if node is None or node.kind != LIST:
        return None
    items = []
    for item in node.children:
        value = scalar_value(item)
        if value is not None:
            items.append(value)
    return items


def entry_properties(entry: Node) -> Dict[str, PropertyValue]:
    """Read the ``key = value;`` pairs of an entry whose value is an attribute set.

    Strings and identifiers become ``str``, lists become ``List[str]``;
    anything else (nested sets, function calls, ...) is ignored.
    """
    props = {}
    value = entry_value(entry)
    if value is None or value.kind != ATTR_SET:
        return props
    for prop in direct_entries(value):
        prop_node = entry_value(prop)
        parsed = list_value(prop_node)
        if parsed is None:
            parsed = scalar_value(prop_node)
        if parsed is not None:
            props[attrpath_name(prop)] = parsed
    return props


def _as_bool(value: Optional[PropertyValue], default: bool) -> bool:
    if not isinstance(value, str):
        return default
    return value.lower() in ("yes", "true", "1", "on")


def _as_str(value: Optional[PropertyValue], default: str = "") -> str:
    return value if isinstance(value, str) else default


def extract_local_shares(text: str) -> List[LocalShare]:
    """Samba shares declared under ``services.samba.settings``.

    Returns an empty list when the section does not exist. The ``global``
    section is not a share and is skipped.
    """
    result = parse(text)
    if result.errors:
        logger.debug(f"Parsed configuration with {len(result.errors)} syntax issue(s)")

    settings = find_samba_settings(result.root)
    if settings is None:
        return []

    shares = []
    for entry in direct_entries(settings):
        name = attrpath_name(entry)
        if name == GLOBAL_SECTION:
            continue
        value = entry_value(entry)
        if value is None or value.kind != ATTR_SET:
            continue
        props = entry_properties(entry)
        browsable = props.get("browseable", props.get("browsable"))
        shares.append(LocalShare(
            name=name,
            path=_as_str(props.get("path")),
            browsable=_as_bool(browsable, True),
            read_only=_as_bool(props.get("read only"), False),
            guest_ok=_as_bool(props.get("guest ok"), False),
            force_user=_as_str(props.get("force user")),
            force_group=_as_str(props.get("force group")),
        ))
    return shares


def _option_value(options: List[str], prefix: str) -> Optional[str]:
    for option in options:
        if option.startswith(prefix):
            return option[len(prefix):]
    return None


def extract_remote_shares(text: str, fs_type: Optional[str] = None) -> List[RemoteShare]:
    """Mounts declared as ``fileSystems."<mount point>"`` with the given filesystem type.

    Entries of any other type are skipped without complaint.
    """
    fs_type = fs_type or config.remote_fs_type
    result = parse(text)

    shares = []
    for mount_point, entry in find_filesystem_entries(result.root):
        props = entry_properties(entry)
        entry_type = _as_str(props.get("fsType"))
        if entry_type != fs_type:
            logger.debug(f"Skipping fileSystems entry {mount_point} of type '{entry_type}'")
            continue

        options = props.get("options")
        if not isinstance(options, list):
            options = []
        shares.append(RemoteShare(
            name=mount_point,
            remote_path=_as_str(props.get("device")),
            fs_type=entry_type,
            credentials=_option_value(options, "credentials=") or "",
            force_user=_option_value(options, "uid=") or config.default_uid,
            force_group=_option_value(options, "gid=") or config.default_gid,
        ))
    return shares
