"""Find attribute sets and entries in a parsed Nix tree by their key paths.

Lookups are pattern based rather than schema based: whitespace, comments,
dotted versus nested keys and quoted versus bare identifiers all resolve to
the same logical path. A missing container is reported as ``None``, never as
an error, so callers can decide to synthesise one.
"""
from typing import List, Optional, Sequence, Tuple

from nixshares.nixconf.parser import (
    ATTR_SET,
    ATTRPATH,
    ATTRPATH_VALUE,
    IDENT,
    LAMBDA,
    LET,
    ROOT,
    STRING,
    WITH,
    Node,
)

SAMBA_SETTINGS_PATH = ("services", "samba", "settings")
FILESYSTEMS_KEY = "fileSystems"


def unquote(text: str) -> str:
    """Strip one pair of surrounding quotes and undo the common escapes."""
    text = text.strip()
    if text.startswith("''") and text.endswith("''") and len(text) >= 4:
        return text[2:-2]
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    if "\\" not in text:
        return text

    out = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            out.append({"n": "\n", "t": "\t", "r": "\r"}.get(nxt, nxt))
            i += 2
        else:
            out.append(c)
            i += 1
    return "".join(out)


def attrpath_segments(entry: Node) -> List[str]:
    """Key segments of an ``ATTRPATH_VALUE`` node, quotes removed."""
    for child in entry.children:
        if child.kind != ATTRPATH:
            continue
        parts = []
        for segment in child.children:
            if segment.kind == IDENT:
                parts.append(segment.text)
            elif segment.kind == STRING:
                parts.append(unquote(segment.text))
            else:
                # ${...} keys cannot be resolved without evaluation
                parts.append(segment.text)
        return parts
    return []


def attrpath_name(entry: Node) -> str:
    """Key of an entry, multi-segment paths joined with ``.``."""
    return ".".join(attrpath_segments(entry))


def entry_value(entry: Node) -> Optional[Node]:
    for child in entry.children:
        if child.kind != ATTRPATH:
            return child
    return None


def direct_entries(attrset: Node) -> List[Node]:
    """Immediate ``key = value;`` children of an attribute set, in source order."""
    return [child for child in attrset.children if child.kind == ATTRPATH_VALUE]


def find_direct_entry(attrset: Node, key) -> Optional[Node]:
    """Find an immediate child entry by key; deeper entries never match.

    ``key`` is either the joined key text or a sequence of segments.
    """
    for entry in direct_entries(attrset):
        if isinstance(key, str):
            if attrpath_name(entry) == key:
                return entry
        elif attrpath_segments(entry) == list(key):
            return entry
    return None


def _descend(attrset: Node, remaining: Sequence[str]) -> Optional[Node]:
    for entry in direct_entries(attrset):
        segments = attrpath_segments(entry)
        if list(remaining[:len(segments)]) != segments:
            continue
        value = entry_value(entry)
        if value is None or value.kind != ATTR_SET:
            continue
        rest = remaining[len(segments):]
        if not rest:
            return value
        found = _descend(value, rest)
        if found is not None:
            return found
    return None


def find_attrset(node: Node, path: Sequence[str]) -> Optional[Node]:
    """Depth-first search for the attribute set stored under ``path``.

    Matches ``a.b.c = {..}``, ``a.b = { c = {..}; }``, ``a = { b.c = {..}; }``
    and so on, anywhere in the tree. The first match in source order wins.
    """
    path = list(path)
    for child in node.children:
        if child.kind == ATTRPATH_VALUE:
            segments = attrpath_segments(child)
            if segments and path[:len(segments)] == segments:
                value = entry_value(child)
                if value is not None and value.kind == ATTR_SET:
                    rest = path[len(segments):]
                    if not rest:
                        return value
                    found = _descend(value, rest)
                    if found is not None:
                        return found
        found = find_attrset(child, path)
        if found is not None:
            return found
    return None


def find_samba_settings(root: Node) -> Optional[Node]:
    return find_attrset(root, SAMBA_SETTINGS_PATH)


def find_filesystem_entries(root: Node) -> List[Tuple[str, Node]]:
    """All ``fileSystems."<mount point>"`` entries as ``(mount point, entry)`` pairs.

    Both the dotted form and entries nested in a ``fileSystems = { ... };``
    block are returned, in source order.
    """
    found = []
    for node in root.walk():
        if node.kind != ATTRPATH_VALUE:
            continue
        segments = attrpath_segments(node)
        if len(segments) == 2 and segments[0] == FILESYSTEMS_KEY:
            found.append((segments[1], node))
        elif segments == [FILESYSTEMS_KEY]:
            value = entry_value(node)
            if value is not None and value.kind == ATTR_SET:
                for entry in direct_entries(value):
                    entry_segments = attrpath_segments(entry)
                    if len(entry_segments) == 1:
                        found.append((entry_segments[0], entry))
    return found


def find_filesystem_block(root: Node) -> Optional[Node]:
    """The ``fileSystems = { ... };`` attribute set, when the nested form is used."""
    return find_attrset(root, (FILESYSTEMS_KEY,))


def module_body(root: Node) -> Optional[Node]:
    """The outermost attribute set of a module, looking through ``args: ...``, ``let`` and ``with``."""
    node = root
    while node is not None:
        if node.kind == ATTR_SET:
            return node
        if node.kind in (ROOT, LAMBDA, LET, WITH) and node.children:
            node = node.children[-1]
        else:
            return None
    return None
