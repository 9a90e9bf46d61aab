"""Relaxed JSON (JSONC) parsing and minimal-diff editing.

Client configuration files are edited by hand and commonly contain
``// line`` and ``/* block */`` comments and trailing commas. The standard
``json`` module rejects those, and a parse/dump round trip would throw the
comments away. This module parses JSONC into a small tree that records the
source span of every value, so that a single member can be inserted or
replaced by splicing text while every other byte of the document is kept.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

_WHITESPACE = " \t\n\r\ufeff"
_STRING_RE = re.compile(r'"(?:[^"\\\x00-\x1f]|\\["\\/bfnrt]|\\u[0-9a-fA-F]{4})*"')
_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_LITERALS = (("true", True), ("false", False), ("null", None))

DEFAULT_INDENT = "  "


class JSONCError(ValueError):
    """Malformed JSONC input, with the position of the problem."""

    def __init__(self, message: str, text: str, pos: int):
        self.msg = message
        self.pos = pos
        self.lineno = text.count("\n", 0, pos) + 1
        self.colno = pos - text.rfind("\n", 0, pos)
        super().__init__(f"{message}: line {self.lineno} column {self.colno} (char {pos})")


# =============================================================================
# Syntax tree
# =============================================================================


@dataclass
class Node:
    """A parsed value; ``end`` is exclusive."""

    start: int
    end: int


@dataclass
class Scalar(Node):
    value: Any = None


@dataclass
class Array(Node):
    items: list[Node] = field(default_factory=list)


@dataclass
class Member:
    """A key/value pair inside an object."""

    key: str
    key_start: int
    value: Node
    # Index just past the comma that follows the value, if any
    comma_end: int | None = None


@dataclass
class Object(Node):
    members: list[Member] = field(default_factory=list)

    def find(self, key: str) -> Member | None:
        """Return the member for ``key``; the last one wins on duplicates."""
        for member in reversed(self.members):
            if member.key == key:
                return member
        return None


@dataclass
class Document:
    text: str
    root: Node
    has_comments: bool


def to_python(node: Node) -> Any:
    """Convert a parsed node into plain Python values."""
    if isinstance(node, Object):
        return {member.key: to_python(member.value) for member in node.members}
    if isinstance(node, Array):
        return [to_python(item) for item in node.items]
    if isinstance(node, Scalar):
        return node.value
    raise TypeError(f"Unexpected node type: {type(node).__name__}")


# =============================================================================
# Parser
# =============================================================================


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.has_comments = False

    def parse(self) -> Document:
        root = self._parse_value()
        self._skip()
        if self.pos != len(self.text):
            raise self._error("Extra data")
        return Document(self.text, root, self.has_comments)

    def _error(self, message: str) -> JSONCError:
        return JSONCError(message, self.text, self.pos)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip(self) -> None:
        """Skip whitespace and comments."""
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch in _WHITESPACE:
                self.pos += 1
            elif text.startswith("//", self.pos):
                self.has_comments = True
                eol = text.find("\n", self.pos)
                self.pos = len(text) if eol == -1 else eol
            elif text.startswith("/*", self.pos):
                self.has_comments = True
                close = text.find("*/", self.pos + 2)
                if close == -1:
                    raise self._error("Unterminated comment")
                self.pos = close + 2
            else:
                return

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            raise self._error(f"Expecting '{ch}' delimiter")
        self.pos += 1

    def _parse_value(self) -> Node:
        self._skip()
        ch = self._peek()
        if ch == "{":
            return self._parse_object()
        if ch == "[":
            return self._parse_array()
        if ch == '"':
            return self._parse_string()
        if ch == "-" or ch.isdigit():
            return self._parse_number()
        for word, value in _LITERALS:
            if self.text.startswith(word, self.pos):
                start = self.pos
                self.pos += len(word)
                return Scalar(start, self.pos, value)
        raise self._error("Expecting value")

    def _parse_object(self) -> Object:
        start = self.pos
        self.pos += 1
        members: list[Member] = []
        while True:
            self._skip()
            ch = self._peek()
            if ch == "}":
                self.pos += 1
                return Object(start, self.pos, members)
            if ch != '"':
                raise self._error("Expecting property name enclosed in double quotes")
            key_start = self.pos
            key = self._parse_string().value
            self._skip()
            self._expect(":")
            member = Member(key, key_start, self._parse_value())
            members.append(member)
            self._skip()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
                member.comma_end = self.pos
            elif ch != "}":
                raise self._error("Expecting ',' delimiter")

    def _parse_array(self) -> Array:
        start = self.pos
        self.pos += 1
        items: list[Node] = []
        while True:
            self._skip()
            if self._peek() == "]":
                self.pos += 1
                return Array(start, self.pos, items)
            items.append(self._parse_value())
            self._skip()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
            elif ch != "]":
                raise self._error("Expecting ',' delimiter")

    def _parse_string(self) -> Scalar:
        match = _STRING_RE.match(self.text, self.pos)
        if match is None:
            raise self._error("Invalid string")
        start = self.pos
        self.pos = match.end()
        return Scalar(start, self.pos, json.loads(match.group()))

    def _parse_number(self) -> Scalar:
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            raise self._error("Invalid number")
        start = self.pos
        self.pos = match.end()
        return Scalar(start, self.pos, json.loads(match.group()))


def parse_document(text: str) -> Document:
    """Parse JSONC text into a span-annotated tree.

    Raises:
        JSONCError: If the text is not valid JSONC or is nested too deeply
    """
    parser = _Parser(text)
    try:
        return parser.parse()
    except RecursionError:
        raise JSONCError("Document nested too deeply", text, parser.pos) from None


def loads(text: str) -> Any:
    """Parse JSONC text into plain Python values."""
    return to_python(parse_document(text).root)


# =============================================================================
# Editing
# =============================================================================


def _line_start(text: str, pos: int) -> int:
    return text.rfind("\n", 0, pos) + 1


def _indent_at(text: str, pos: int) -> str:
    """Leading whitespace of the line containing ``pos``."""
    start = _line_start(text, pos)
    end = start
    while end < len(text) and text[end] in " \t":
        end += 1
    return text[start:end]


def _starts_line(text: str, pos: int) -> bool:
    return not text[_line_start(text, pos) : pos].strip()


def _insertion_point(text: str, pos: int) -> int:
    """Move ``pos`` to the end of its line if only a line comment follows it."""
    eol = text.find("\n", pos)
    if eol == -1:
        eol = len(text)
    rest = text[pos:eol].strip()
    if rest and not rest.startswith("//"):
        return pos
    if eol > pos and text[eol - 1] == "\r":
        eol -= 1
    return eol


def detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def _layout(text: str, obj: Object) -> tuple[str, str, str]:
    """Return (object indent, member indent, indent unit) for ``obj``."""
    own = _indent_at(text, obj.start)
    for member in obj.members:
        if _starts_line(text, member.key_start):
            child = _indent_at(text, member.key_start)
            if child.startswith(own) and len(child) > len(own):
                return own, child, child[len(own) :]
            break
    return own, own + DEFAULT_INDENT, DEFAULT_INDENT


def render_value(value: Any, indent: str | None, unit: str = DEFAULT_INDENT, newline: str = "\n") -> str:
    """Serialize ``value`` for splicing into a document.

    With ``indent`` None the value is rendered on one line; otherwise it is
    pretty-printed with ``unit`` per level and continuation lines prefixed
    by ``indent``.
    """
    if indent is None:
        return json.dumps(value, ensure_ascii=False, separators=(", ", ": "))
    rendered = json.dumps(value, ensure_ascii=False, indent=unit)
    return rendered.replace("\n", newline + indent)


def set_member(text: str, obj: Object, key: str, value: Any) -> str:
    """Insert or replace ``key`` in the object ``obj`` parsed from ``text``.

    Only the replaced value or the inserted member changes; comments, key
    order and formatting elsewhere are kept. Inserted text follows the
    surrounding layout: multi-line objects get a new indented line, single
    line objects stay on one line, and empty objects are expanded.

    Returns:
        The edited text
    """
    newline = detect_newline(text)
    multiline = "\n" in text[obj.start : obj.end]
    own, child, unit = _layout(text, obj)

    existing = obj.find(key)
    if existing is not None:
        indent = _indent_at(text, existing.key_start) if multiline else None
        rendered = render_value(value, indent, unit, newline)
        return text[: existing.value.start] + rendered + text[existing.value.end :]

    def member_text(indent: str | None) -> str:
        return json.dumps(key, ensure_ascii=False) + ": " + render_value(value, indent, unit, newline)

    if not obj.members:
        close = obj.end - 1
        if not text[obj.start + 1 : close].strip():
            expanded = "{" + newline + child + member_text(child) + newline + own + "}"
            return text[: obj.start] + expanded + text[obj.end :]
        # Only comments inside the braces
        if _starts_line(text, close):
            at = _line_start(text, close)
            return text[:at] + child + member_text(child) + newline + text[at:]
        return text[:close] + newline + child + member_text(child) + newline + own + text[close:]

    last = obj.members[-1]

    if not multiline:
        if last.comma_end is not None:
            at = last.comma_end
            return text[:at] + " " + member_text(None) + "," + text[at:]
        at = last.value.end
        return text[:at] + ", " + member_text(None) + text[at:]

    indent = _indent_at(text, last.key_start) if _starts_line(text, last.key_start) else child
    if last.comma_end is not None:
        at = _insertion_point(text, last.comma_end)
        return text[:at] + newline + indent + member_text(indent) + "," + text[at:]

    at = _insertion_point(text, last.value.end)
    text = text[:at] + newline + indent + member_text(indent) + text[at:]
    return text[: last.value.end] + "," + text[last.value.end :]


def normalize(doc: Document, unit: str = DEFAULT_INDENT) -> str:
    """Pretty-print documents that were written on a single line.

    Single-line documents without comments are machine-written; expanding
    them gives later edits a stable multi-line layout. Anything else is
    returned unchanged.
    """
    text = doc.text
    root = doc.root
    if doc.has_comments or "\n" in text[root.start : root.end]:
        return text
    if not isinstance(root, Object) or not root.members:
        return text
    rendered = json.dumps(to_python(root), ensure_ascii=False, indent=unit)
    return text[: root.start] + rendered + text[root.end :]
