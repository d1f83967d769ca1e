"""Fix generation helpers and the conflict-safe fix composer."""

import json
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from atip_lint.domain.entities import LintFix
from atip_lint.domain.errors import FixGenerationError
from atip_lint.domain.syntax import Path, SyntaxNode, find_node


def _format_path(path: Path) -> str:
    return ".".join(str(segment) for segment in path) or "<root>"


class Fixer:
    """
    Builds LintFix edits against one source text and its syntax tree.

    Every method raises FixGenerationError when the target cannot be located;
    the reporter then keeps the issue without a fix.
    """

    def __init__(self, source: str, root: Optional[SyntaxNode]) -> None:
        self._source = source
        self._root = root

    def _require(self, path: Path) -> SyntaxNode:
        node = find_node(self._root, path)
        if node is None:
            raise FixGenerationError(f"Node not found at path: {_format_path(path)}")
        return node

    def replace_at(self, path: Path, value: Any) -> LintFix:
        """Replace the value at ``path`` with the compact JSON encoding of ``value``."""
        node = self._require(path)
        return LintFix(node.offset, node.end, json.dumps(value))

    def set_at(self, path: Path, value: Any) -> LintFix:
        """Replace the value at ``path`` with an indented JSON encoding of ``value``."""
        node = self._require(path)
        return LintFix(node.offset, node.end, json.dumps(value, indent=2))

    def insert_at(self, path: Path, key: str, value: Any) -> LintFix:
        """Insert ``"key": value`` as the last property of the object at ``path``."""
        node = self._require(path)
        if node.kind != "object":
            raise FixGenerationError(f"Object not found at path: {_format_path(path)}")
        property_text = f"{json.dumps(key)}: {json.dumps(value)}"
        if not node.children:
            return LintFix(node.offset + 1, node.offset + 1, property_text)
        last = node.children[-1]
        return LintFix(last.end, last.end, f", {property_text}")

    def insert_properties(self, path: Path, values: dict[str, Any]) -> LintFix:
        """Insert several properties at once, in ``values`` order, as a single edit."""
        if not values:
            raise FixGenerationError("Nothing to insert")
        node = self._require(path)
        if node.kind != "object":
            raise FixGenerationError(f"Object not found at path: {_format_path(path)}")
        text = ", ".join(f"{json.dumps(key)}: {json.dumps(value)}" for key, value in values.items())
        if not node.children:
            return LintFix(node.offset + 1, node.offset + 1, text)
        last = node.children[-1]
        return LintFix(last.end, last.end, f", {text}")

    def remove_at(self, path: Path) -> LintFix:
        """Remove the property or array element at ``path`` together with one separating comma."""
        if not path:
            raise FixGenerationError("Cannot remove the document root")
        parent = self._require(path[:-1])
        segment = path[-1]
        if parent.kind == "object" and isinstance(segment, str):
            members = [c for c in parent.children if c.key == segment]
            if not members:
                raise FixGenerationError(f"Node not found at path: {_format_path(path)}")
            target = members[-1]
        elif parent.kind == "array" and isinstance(segment, int) and 0 <= segment < len(parent.children):
            target = parent.children[segment]
        else:
            raise FixGenerationError(f"Node not found at path: {_format_path(path)}")
        index = parent.children.index(target)
        if index + 1 < len(parent.children):
            return LintFix(target.offset, parent.children[index + 1].offset, "")
        if index > 0:
            return LintFix(parent.children[index - 1].end, target.end, "")
        return LintFix(target.offset, target.end, "")

    def replace_range(self, start: int, end: int, text: str) -> LintFix:
        if start < 0 or end < start or end > len(self._source):
            raise FixGenerationError(f"Invalid range [{start}, {end})")
        return LintFix(start, end, text)


@dataclass(frozen=True)
class FixOutcome:
    output: str
    applied: tuple[LintFix, ...]
    conflicts: tuple[LintFix, ...]

    @property
    def applied_count(self) -> int:
        return len(self.applied)


def compose_fixes(source: str, fixes: Iterable[LintFix]) -> FixOutcome:
    """
    Apply non-overlapping fixes right to left.

    Candidates are sorted by start offset, descending. A fix is accepted only
    if it ends at or before the start of the previously accepted fix; anything
    else is a conflict. Because accepted ranges are disjoint and applied from
    the right, earlier offsets stay valid after every replacement.
    """
    candidates = sorted(fixes, key=lambda f: f.start, reverse=True)
    if not candidates:
        return FixOutcome(output=source, applied=(), conflicts=())

    accepted: list[LintFix] = []
    conflicts: list[LintFix] = []
    last_start = len(source)
    for fix in candidates:
        if fix.start >= 0 and fix.end <= last_start:
            accepted.append(fix)
            last_start = fix.start
        else:
            conflicts.append(fix)

    output = source
    for fix in accepted:
        output = output[: fix.start] + fix.text + output[fix.end :]
    return FixOutcome(output=output, applied=tuple(accepted), conflicts=tuple(conflicts))


def merge_fixes(source: str, fixes: Iterable[LintFix]) -> LintFix:
    """
    Fold several edits from one fix function into a single edit spanning all of them.

    The untouched text between edits is carried into the merged replacement.
    Overlapping edits cannot be merged and raise FixGenerationError.
    """
    ordered = sorted(fixes, key=lambda f: (f.start, f.end))
    if not ordered:
        raise FixGenerationError("No edits to merge")
    start = ordered[0].start
    end = start
    pieces: list[str] = []
    for fix in ordered:
        if fix.start < end:
            raise FixGenerationError(f"Overlapping edits at [{fix.start}, {fix.end})")
        pieces.append(source[end : fix.start])
        pieces.append(fix.text)
        end = fix.end
    return LintFix(start, end, "".join(pieces))
