"""
Single depth-first traversal shared by every enabled rule of one file.

Order: Document; document Trust and Effects; top-level arguments; global
options in declaration order; then every command pre-order (the command,
its Effects, its arguments, its options, its children); finally patterns.
Global options come before any command so accumulating rules see global
flags first.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from atip_lint.domain.constants import NODE_KINDS
from atip_lint.domain.metadata import Argument, Command, MetadataDocument, Option
from atip_lint.domain.rules import RuleVisitor, VisitorCallback
from atip_lint.domain.syntax import Path

DispatchTable = dict[str, list[VisitorCallback]]


def build_dispatch_table(visitors: Iterable[RuleVisitor]) -> DispatchTable:
    """Map each node kind to the callbacks interested in it, in rule order."""
    table: DispatchTable = {kind: [] for kind in NODE_KINDS}
    for visitor in visitors:
        for kind, callback in visitor.items():
            if kind in table:
                table[kind].append(callback)
    return table


def _emit(table: DispatchTable, kind: str, node: Any, path: Path) -> None:
    for callback in table[kind]:
        callback(node, path)


def _visit_arguments(table: DispatchTable, arguments: Optional[tuple[Argument, ...]]) -> None:
    for argument in arguments or ():
        _emit(table, "Argument", argument, argument.path)


def _visit_options(table: DispatchTable, options: Optional[tuple[Option, ...]]) -> None:
    for option in options or ():
        _emit(table, "Option", option, option.path)


def _visit_commands(table: DispatchTable, commands: Optional[Mapping[str, Command]]) -> None:
    for command in (commands or {}).values():
        _emit(table, "Command", command, command.path)
        if command.effects is not None:
            _emit(table, "Effects", command.effects, command.effects.path)
        _visit_arguments(table, command.arguments)
        _visit_options(table, command.options)
        _visit_commands(table, command.commands)


def traverse(document: MetadataDocument, table: DispatchTable) -> None:
    """Drive one pre-order pass over ``document``, invoking callbacks from ``table``."""
    _emit(table, "Document", document, document.path)
    if document.trust is not None:
        _emit(table, "Trust", document.trust, document.trust.path)
    if document.effects is not None:
        _emit(table, "Effects", document.effects, document.effects.path)
    _visit_arguments(table, document.arguments)
    _visit_options(table, document.global_options)
    _visit_commands(table, document.commands)
    for pattern in document.patterns or ():
        _emit(table, "Pattern", pattern, pattern.path)
