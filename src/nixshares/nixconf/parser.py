"""Span-preserving view of Nix source, built on the tree-sitter Nix grammar.

Nothing is evaluated. tree-sitter produces the concrete syntax tree; this
module folds it into a small tree of :class:`Node` objects that carry
character offsets into the original text, which is what the editor needs to
splice a single entry without touching anything else. ``ERROR`` and
``MISSING`` nodes from tree-sitter's error recovery are reported in
:attr:`ParseResult.errors`, so a half-broken file still yields every
attribute set that can be recognised.
"""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import tree_sitter
import tree_sitter_nix

# Node kinds
ROOT = "ROOT"
ATTR_SET = "ATTR_SET"
ATTRPATH_VALUE = "ATTRPATH_VALUE"
ATTRPATH = "ATTRPATH"
IDENT = "IDENT"
STRING = "STRING"
LIST = "LIST"
LITERAL = "LITERAL"
LAMBDA = "LAMBDA"
LET = "LET"
WITH = "WITH"
INHERIT = "INHERIT"
EXPR = "EXPR"
ERROR = "ERROR"

_ATTRSET_TYPES = {"attrset_expression", "rec_attrset_expression", "let_attrset_expression"}
_STRING_TYPES = {"string_expression", "indented_string_expression"}
_LITERAL_TYPES = {
    "integer_expression",
    "float_expression",
    "path_expression",
    "hpath_expression",
    "spath_expression",
    "uri_expression",
}
_IDENT_TYPES = {"identifier", "variable_expression"}
_INHERIT_TYPES = {"inherit", "inherit_from"}

_NIX = tree_sitter.Language(tree_sitter_nix.language())


@dataclass
class SyntaxIssue:
    message: str
    offset: int


@dataclass(eq=False)
class Node:
    kind: str
    start: int
    end: int
    children: List["Node"] = field(default_factory=list)
    source: str = field(default="", repr=False)
    parent: Optional["Node"] = field(default=None, repr=False)

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all of its descendants in source order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class ParseResult:
    root: Node
    errors: List[SyntaxIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _char_offsets(source: str, data: bytes) -> Optional[List[int]]:
    """Map every UTF-8 byte offset of ``data`` to a character offset of ``source``.

    ``None`` means the text is pure ASCII and both offsets agree.
    """
    if len(data) == len(source):
        return None
    offsets = []
    for index, char in enumerate(source):
        offsets.extend([index] * len(char.encode("utf-8")))
    offsets.append(len(source))
    return offsets


class _Converter:
    def __init__(self, source: str, data: bytes):
        self.source = source
        self.data = data
        self.offsets = _char_offsets(source, data)
        self.errors: List[SyntaxIssue] = []

    def char(self, byte_offset: int) -> int:
        if self.offsets is None:
            return byte_offset
        return self.offsets[byte_offset]

    def node(self, kind: str, ts_node, children: Optional[List[Node]] = None) -> Node:
        n = Node(kind, self.char(ts_node.start_byte), self.char(ts_node.end_byte), children or [], self.source)
        for child in n.children:
            child.parent = n
        return n

    # -- issues ------------------------------------------------------------

    def collect_issues(self, ts_node):
        if ts_node.is_missing:
            self.errors.append(SyntaxIssue(f"missing {ts_node.type!r}", self.char(ts_node.start_byte)))
            return
        if ts_node.type == "ERROR":
            snippet = self.data[ts_node.start_byte:ts_node.end_byte].decode("utf-8", "replace")
            snippet = snippet.strip().splitlines()[0][:40] if snippet.strip() else ""
            message = f"unexpected {snippet!r}" if snippet else "syntax error"
            self.errors.append(SyntaxIssue(message, self.char(ts_node.start_byte)))
        for child in ts_node.children:
            self.collect_issues(child)

    # -- conversion --------------------------------------------------------

    def convert_all(self, ts_nodes) -> List[Node]:
        converted = []
        for ts_node in ts_nodes:
            if not ts_node.is_named or ts_node.type == "comment":
                continue
            if ts_node.type == "binding_set":
                converted.extend(self.convert_all(ts_node.children))
            elif ts_node.type == "ERROR":
                # Complete bindings caught up in error recovery stay reachable as siblings
                converted.append(self.node(ERROR, ts_node))
                converted.extend(self.convert_all(ts_node.children))
            else:
                converted.append(self.convert(ts_node))
        return converted

    def by_field(self, ts_node, name: str) -> List[Node]:
        return self.convert_all(ts_node.children_by_field_name(name))

    def convert(self, ts_node) -> Node:
        kind = ts_node.type

        if kind in _ATTRSET_TYPES:
            return self.node(ATTR_SET, ts_node, self.convert_all(ts_node.children))
        if kind == "binding":
            parts = self.by_field(ts_node, "attrpath") + self.by_field(ts_node, "expression")
            return self.node(ATTRPATH_VALUE, ts_node, parts)
        if kind == "attrpath":
            return self.node(ATTRPATH, ts_node, self.by_field(ts_node, "attr"))
        if kind in _IDENT_TYPES:
            return self.node(IDENT, ts_node)
        if kind in _STRING_TYPES:
            interpolations = [c for c in ts_node.children if c.type == "interpolation"]
            return self.node(STRING, ts_node, self.convert_all(interpolations))
        if kind in _LITERAL_TYPES:
            return self.node(LITERAL, ts_node)
        if kind == "list_expression":
            return self.node(LIST, ts_node, self.convert_all(ts_node.children))
        if kind in _INHERIT_TYPES:
            return self.node(INHERIT, ts_node)
        if kind == "function_expression":
            return self.node(LAMBDA, ts_node, self.by_field(ts_node, "body"))
        if kind == "let_expression":
            bindings = self.convert_all(c for c in ts_node.children if c.type in ("binding_set", "ERROR"))
            return self.node(LET, ts_node, bindings + self.by_field(ts_node, "body"))
        if kind == "with_expression":
            return self.node(WITH, ts_node, self.by_field(ts_node, "environment") + self.by_field(ts_node, "body"))
        if kind == "assert_expression":
            return self.node(WITH, ts_node, self.by_field(ts_node, "condition") + self.by_field(ts_node, "body"))
        return self.node(EXPR, ts_node, self.convert_all(ts_node.children))


def parse(source: str) -> ParseResult:
    """Parse Nix source text into a span-preserving tree. Never raises on bad syntax."""
    data = source.encode("utf-8")
    tree = tree_sitter.Parser(_NIX).parse(data)
    converter = _Converter(source, data)

    ts_root = tree.root_node
    root = Node(ROOT, 0, len(source), converter.convert_all(ts_root.children), source)
    for child in root.children:
        child.parent = root
    if ts_root.has_error:
        converter.collect_issues(ts_root)

    errors = sorted(converter.errors, key=lambda issue: issue.offset)
    return ParseResult(root=root, errors=errors)
