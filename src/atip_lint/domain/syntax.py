"""Location-accurate JSON syntax tree shared by the reporter and the fixer."""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

PathSegment = Union[str, int]
Path = tuple[PathSegment, ...]


@dataclass(frozen=True)
class SyntaxNode:
    """
    One node of the JSON syntax tree.

    ``kind`` is one of object, array, property, string, number, boolean, null.
    A property node has exactly two children: the key (a string node) and the value.
    The extent is the half-open range ``[offset, offset + length)`` into the source text.
    """

    kind: str
    offset: int
    length: int
    children: tuple["SyntaxNode", ...] = field(default=())
    value: Any = None

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def key(self) -> Optional[str]:
        """Key of a property node, None for every other kind."""
        if self.kind != "property" or not self.children:
            return None
        return self.children[0].value

    @property
    def property_value(self) -> Optional["SyntaxNode"]:
        if self.kind != "property" or len(self.children) < 2:
            return None
        return self.children[1]


@dataclass(frozen=True)
class ParseError:
    """A syntax error with its source position (line and column are 1-based)."""

    message: str
    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class ParseOutcome:
    """Result of building a syntax tree. ``root`` is None when nothing could be parsed."""

    root: Optional[SyntaxNode]
    errors: tuple[ParseError, ...] = ()

    @property
    def ok(self) -> bool:
        return self.root is not None and not self.errors


def find_property(node: SyntaxNode, key: str) -> Optional[SyntaxNode]:
    """Return the last property node named ``key`` in an object node (JSON last-wins)."""
    found: Optional[SyntaxNode] = None
    for child in node.children:
        if child.kind == "property" and child.key == key:
            found = child
    return found


def find_node(root: Optional[SyntaxNode], path: Path) -> Optional[SyntaxNode]:
    """Follow ``path`` from ``root``. Returns None as soon as a segment does not resolve."""
    node = root
    for segment in path:
        if node is None:
            return None
        if node.kind == "object" and isinstance(segment, str):
            prop = find_property(node, segment)
            node = prop.property_value if prop is not None else None
        elif node.kind == "array" and isinstance(segment, int) and not isinstance(segment, bool):
            node = node.children[segment] if 0 <= segment < len(node.children) else None
        else:
            return None
    return node


def find_nearest_node(root: Optional[SyntaxNode], path: Path) -> Optional[SyntaxNode]:
    """Like find_node, but falls back to the deepest ancestor that exists."""
    for depth in range(len(path), -1, -1):
        node = find_node(root, path[:depth])
        if node is not None:
            return node
    return None


def node_value(node: SyntaxNode) -> Any:
    """Materialise the plain Python value of a syntax node (duplicate keys: last wins)."""
    if node.kind == "property":
        value_node = node.property_value
        return node_value(value_node) if value_node is not None else None

    result: list[Any] = [None]
    pending: list[tuple[SyntaxNode, Any, Union[str, int]]] = [(node, result, 0)]
    while pending:
        current, container, slot = pending.pop()
        if current.kind == "object":
            value: Any = {}
            members = [(child.property_value, child.key) for child in current.children]
            children = [(member, value, key) for member, key in members if member is not None]
        elif current.kind == "array":
            value = [None] * len(current.children)
            children = [(child, value, index) for index, child in enumerate(current.children)]
        else:
            value = current.value
            children = []
        container[slot] = value
        # Reversed so siblings are stored in document order.
        pending.extend(reversed(children))
    return result[0]


def position_at(text: str, offset: int) -> tuple[int, int]:
    """Convert a zero-based offset into a one-based (line, column) pair."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1
