"""JSON Syntax Gateway - builds an offset-accurate syntax tree with tree-sitter-json."""

import json
import logging
from bisect import bisect_left
from typing import Any, Callable, Optional

import tree_sitter
import tree_sitter_json

from atip_lint.domain.syntax import ParseError, ParseOutcome, SyntaxNode, position_at

logger = logging.getLogger(__name__)

JSON_LANGUAGE = tree_sitter.Language(tree_sitter_json.language())

_JSON_WHITESPACE = b" \t\n\r"
_SCALAR_KINDS: dict[str, str] = {
    "string": "string",
    "number": "number",
    "true": "boolean",
    "false": "boolean",
    "null": "null",
}
_CONTAINER_KINDS = frozenset({"object", "array", "pair"})


class _SyntaxFailure(Exception):
    def __init__(self, message: str, byte_offset: int) -> None:
        super().__init__(message)
        self.message = message
        self.byte_offset = byte_offset


def _char_offsets(text: str) -> Callable[[int], int]:
    """Map UTF-8 byte offsets produced by tree-sitter back to ``str`` indices."""
    if text.isascii():
        return lambda byte_offset: byte_offset
    starts: list[int] = []
    position = 0
    for char in text:
        starts.append(position)
        position += len(char.encode("utf-8", "surrogatepass"))
    starts.append(position)
    return lambda byte_offset: bisect_left(starts, byte_offset)


def _first_problem(root: Any, data: bytes) -> Optional[tuple[str, int]]:
    """
    Earliest strictness violation in the tree: ERROR or MISSING nodes, comments,
    or non-JSON whitespace between tokens. Returns (message, byte offset).
    """
    problems: list[tuple[int, str]] = []
    previous_end = 0
    pending = list(reversed(root.children))
    while pending:
        node = pending.pop()
        if node.is_missing:
            problems.append((node.start_byte, f"Expecting {node.type}"))
            continue
        if node.type == "ERROR":
            problems.append((node.start_byte, "Unexpected token"))
            previous_end = max(previous_end, node.end_byte)
            continue
        if node.type == "comment":
            problems.append((node.start_byte, "Comments are not allowed"))
            previous_end = max(previous_end, node.end_byte)
            continue
        if node.type in _SCALAR_KINDS or node.child_count == 0:
            gap = data[previous_end : node.start_byte]
            stray = len(gap) - len(gap.lstrip(_JSON_WHITESPACE))
            if gap.strip(_JSON_WHITESPACE):
                problems.append((previous_end + stray, "Unexpected character"))
            if node.has_error:
                problems.append((node.start_byte, f"Invalid {node.type} literal"))
            previous_end = max(previous_end, node.end_byte)
            continue
        pending.extend(reversed(node.children))
    tail = data[previous_end:]
    if tail.strip(_JSON_WHITESPACE):
        problems.append((previous_end + len(tail) - len(tail.lstrip(_JSON_WHITESPACE)), "Extra data"))
    if not problems:
        return None
    offset, message = min(problems, key=lambda problem: problem[0])
    return message, offset


class _TreeBuilder:
    """Converts a tree-sitter JSON tree into SyntaxNodes without recursion."""

    def __init__(self, text: str, data: bytes) -> None:
        self.data = data
        self.to_char = _char_offsets(text)

    def build(self, value: Any) -> SyntaxNode:
        order: list[tuple[Any, int]] = []
        pending: list[tuple[Any, int]] = [(value, -1)]
        while pending:
            node, parent = pending.pop()
            index = len(order)
            order.append((node, parent))
            if node.type in _CONTAINER_KINDS:
                for child in reversed(self._children(node)):
                    pending.append((child, index))

        # Children always come after their parent in pre-order, so a reverse
        # sweep finishes every child before the parent that collects it.
        built: list[list[SyntaxNode]] = [[] for _ in order]
        for index in range(len(order) - 1, 0, -1):
            node, parent = order[index]
            built[parent].append(self._node(node, tuple(reversed(built[index]))))
        return self._node(value, tuple(reversed(built[0])))

    def _children(self, node: Any) -> list[Any]:
        if node.type == "pair":
            key = node.child_by_field_name("key")
            value = node.child_by_field_name("value")
            if key is None or key.type != "string":
                raise _SyntaxFailure("Expecting property name enclosed in double quotes", node.start_byte)
            if value is None:
                raise _SyntaxFailure("Expecting value", node.end_byte)
            return [key, value]
        return [child for child in node.named_children if child.type != "comment"]

    def _node(self, node: Any, children: tuple[SyntaxNode, ...]) -> SyntaxNode:
        start = self.to_char(node.start_byte)
        length = self.to_char(node.end_byte) - start
        kind = "property" if node.type == "pair" else _SCALAR_KINDS.get(node.type, node.type)
        if node.type in _CONTAINER_KINDS:
            return SyntaxNode(kind, start, length, children=children)
        if node.type not in _SCALAR_KINDS:
            raise _SyntaxFailure("Expecting value", node.start_byte)
        return SyntaxNode(kind, start, length, value=self._literal(node))

    def _literal(self, node: Any) -> Any:
        source = self.data[node.start_byte : node.end_byte].decode("utf-8", "surrogatepass")
        try:
            return json.loads(source)
        except json.JSONDecodeError as exc:
            raise _SyntaxFailure(f"Invalid {node.type} literal", node.start_byte) from exc
        except ValueError as exc:
            # Integer literals longer than the interpreter's digit limit
            logger.debug("Cannot convert literal at byte %d: %s", node.start_byte, exc)
            raise _SyntaxFailure("Number literal too large", node.start_byte) from exc


class JsonSyntaxGateway:
    """Parses strict JSON into a SyntaxNode tree. Stops at the first syntax error."""

    def parse(self, text: str) -> ParseOutcome:
        """Build the syntax tree for ``text``; errors are returned, never raised."""
        data = text.encode("utf-8", "surrogatepass")
        tree = tree_sitter.Parser(JSON_LANGUAGE).parse(data)
        try:
            root = self._build(tree.root_node, text, data)
        except _SyntaxFailure as failure:
            offset = _char_offsets(text)(failure.byte_offset)
            return ParseOutcome(root=None, errors=(self._error(text, failure.message, offset),))
        return ParseOutcome(root=root)

    @staticmethod
    def _build(document: Any, text: str, data: bytes) -> SyntaxNode:
        problem = _first_problem(document, data)
        if problem is not None:
            raise _SyntaxFailure(*problem)
        if document.has_error:
            raise _SyntaxFailure("Unexpected token", document.start_byte)
        values = [child for child in document.named_children if child.type != "comment"]
        if not values:
            raise _SyntaxFailure("Expecting value", len(data) - len(data.lstrip(_JSON_WHITESPACE)))
        if len(values) > 1:
            raise _SyntaxFailure("Extra data", values[1].start_byte)
        return _TreeBuilder(text, data).build(values[0])

    @staticmethod
    def _error(text: str, message: str, offset: int) -> ParseError:
        line, column = position_at(text, offset)
        return ParseError(
            message=f"{message}: line {line} column {column} (char {offset})",
            offset=offset,
            line=line,
            column=column,
        )
