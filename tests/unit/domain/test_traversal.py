from typing import Any

from atip_lint.domain.metadata import project_document
from atip_lint.domain.syntax import Path
from atip_lint.domain.traversal import build_dispatch_table, traverse

DOCUMENT = {
    "name": "tool",
    "trust": {"source": "native"},
    "effects": {"network": False},
    "arguments": [{"name": "target"}],
    "globalOptions": [{"name": "verbose", "flags": ["-v"]}],
    "commands": {
        "repo": {
            "effects": {"network": True},
            "arguments": [{"name": "url"}],
            "options": [{"name": "depth", "flags": ["--depth"]}],
            "commands": {"clone": {"options": [{"name": "quiet", "flags": ["-q"]}]}},
        },
        "status": {},
    },
    "patterns": [{"name": "setup"}],
}


def _recording_visitor(seen: list[tuple[str, Path]]) -> dict[str, Any]:
    def record(kind: str):
        return lambda node, path: seen.append((kind, path))

    return {kind: record(kind) for kind in ("Document", "Command", "Argument", "Option", "Effects", "Trust", "Pattern")}


def test_traversal_order() -> None:
    seen: list[tuple[str, Path]] = []

    traverse(project_document(DOCUMENT), build_dispatch_table([_recording_visitor(seen)]))

    assert seen == [
        ("Document", ()),
        ("Trust", ("trust",)),
        ("Effects", ("effects",)),
        ("Argument", ("arguments", 0)),
        ("Option", ("globalOptions", 0)),
        ("Command", ("commands", "repo")),
        ("Effects", ("commands", "repo", "effects")),
        ("Argument", ("commands", "repo", "arguments", 0)),
        ("Option", ("commands", "repo", "options", 0)),
        ("Command", ("commands", "repo", "commands", "clone")),
        ("Option", ("commands", "repo", "commands", "clone", "options", 0)),
        ("Command", ("commands", "status")),
        ("Pattern", ("patterns", 0)),
    ]


def test_callbacks_for_one_kind_run_in_rule_order() -> None:
    calls: list[str] = []
    first = {"Command": lambda node, path: calls.append(f"first:{node.name}")}
    second = {"Command": lambda node, path: calls.append(f"second:{node.name}")}

    traverse(project_document({"commands": {"a": {}, "b": {}}}), build_dispatch_table([first, second]))

    assert calls == ["first:a", "second:a", "first:b", "second:b"]


def test_empty_document_only_visits_root() -> None:
    seen: list[tuple[str, Path]] = []

    traverse(project_document({}), build_dispatch_table([_recording_visitor(seen)]))

    assert seen == [("Document", ())]
