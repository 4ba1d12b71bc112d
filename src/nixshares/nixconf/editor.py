"""Surgical edits of Nix text.

Every function here is a pure text transform: it takes the current text plus
nodes from :func:`nixshares.nixconf.parser.parse` of that same text and
returns new text. Only the targeted span changes; everything before and after
it is copied through untouched. Persisting the result is the caller's job.
"""
from typing import Tuple

from nixshares.exceptions import AmbiguousInsertionError, NotFoundError, StructuralError
from nixshares.nixconf.locator import find_direct_entry, module_body
from nixshares.nixconf.parser import ATTR_SET, ATTRPATH_VALUE, INHERIT, Node


def _line_start(text: str, pos: int) -> int:
    return text.rfind("\n", 0, pos) + 1


def closing_brace(text: str, container: Node) -> int:
    """Offset of the ``}`` that closes ``container``."""
    brace = container.end - 1
    if container.kind != ATTR_SET or brace <= container.start or text[brace] != "}":
        raise AmbiguousInsertionError("Could not find the closing brace of the attribute set")
    return brace


def insert_entry(text: str, container: Node, entry_text: str) -> str:
    """Insert ``entry_text`` as the last entry of ``container``.

    When the closing brace sits on its own line the entry goes on new lines
    above it, separated from the previous entry by a blank line.
    """
    brace = closing_brace(text, container)
    line_start = _line_start(text, brace)

    if text[line_start:brace].strip() == "" and line_start > container.start:
        before, after = text[:line_start], text[line_start:]
        separator = "" if before.rstrip().endswith("{") else "\n"
        return f"{before}{separator}{entry_text}\n{after}"

    before, after = text[:brace].rstrip(), text[brace:]
    return f"{before}\n{entry_text}\n{after}"


def insert_into_module(text: str, root: Node, block: str) -> str:
    """Append ``block`` just before the outermost closing brace of the module."""
    body = module_body(root)
    if body is None:
        raise StructuralError("Could not find the top-level attribute set of the configuration")
    return insert_entry(text, body, block)


def _is_last_entry(node: Node) -> bool:
    if node.parent is None:
        return False
    entries = [child for child in node.parent.children if child.kind in (ATTRPATH_VALUE, INHERIT)]
    return bool(entries) and entries[-1] is node


def entry_span(text: str, node: Node, include_trailing_newlines: bool = False) -> Tuple[int, int]:
    """Character span of an entry, optionally widened for clean removal.

    The widened span also takes the indentation in front of the entry and any
    newlines directly after its closing ``;``. For the last entry of its
    attribute set it also takes one blank line in front, the one
    :func:`insert_entry` adds, so an insert followed by a delete gives back
    the original text.
    """
    start, end = node.start, node.end
    if not include_trailing_newlines:
        return start, end

    line_start = _line_start(text, start)
    if text[line_start:start].strip() == "":
        start = line_start
        if start > 0 and _is_last_entry(node):
            previous = _line_start(text, start - 1)
            if text[previous:start].strip() == "" and previous > node.parent.start:
                start = previous
    else:
        while start > line_start and text[start - 1] in " \t":
            start -= 1
    while end < len(text) and text[end] in "\r\n":
        end += 1
    return start, end

    line_start = _line_start(text, start)
    if text[line_start:start].strip() == "":
        start = line_start
    else:
        while start > line_start and text[start - 1] in " \t":
            start -= 1
    while end < len(text) and text[end] in "\r\n":
        end += 1
    return start, end


def find_entry(container: Node, key) -> Node:
    entry = find_direct_entry(container, key)
    if entry is None:
        raise NotFoundError(f"Entry '{key}' not found in configuration")
    return entry


def replace_node(text: str, node: Node, entry_text: str) -> str:
    # The entry keeps the indentation already present in front of it
    start, end = entry_span(text, node)
    return text[:start] + entry_text.lstrip(" \t") + text[end:]


def delete_node(text: str, node: Node) -> str:
    start, end = entry_span(text, node, include_trailing_newlines=True)
    return text[:start] + text[end:]


def replace_entry(text: str, container: Node, key, entry_text: str) -> str:
    return replace_node(text, find_entry(container, key), entry_text)


def delete_entry(text: str, container: Node, key) -> str:
    return delete_node(text, find_entry(container, key))
