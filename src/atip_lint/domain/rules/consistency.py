"""Consistency rules: duplicate flags, effects value validity and naming conventions."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from atip_lint.domain.constants import COST_ESTIMATES, DURATION_PATTERN, STDIN_MODES
from atip_lint.domain.metadata import Command, Effects, Option
from atip_lint.domain.rules import RuleContext, RuleIssue, RuleVisitor, define_rule
from atip_lint.domain.syntax import Path

GLOBAL_OPTIONS_PATH: Path = ("globalOptions",)


@dataclass
class FlagCollisionState:
    """
    Flags seen so far in one file.

    ``global_flags`` is filled while global options are visited, which the
    traversal guarantees happens before any command option is visited.
    """

    global_flags: dict[str, int] = field(default_factory=dict)
    scopes: dict[Path, dict[str, int]] = field(default_factory=dict)

    def seen_in(self, scope: Path) -> dict[str, int]:
        return self.scopes.setdefault(scope, {})


def _create_duplicate_flags(context: RuleContext) -> RuleVisitor:
    state = FlagCollisionState()

    def option(node: Option, path: Path) -> None:
        if not isinstance(node.flags, list):
            return
        scope = path[:-1]
        index = path[-1]
        is_global = scope == GLOBAL_OPTIONS_PATH
        label = "global option" if is_global else "option"
        flags_path = (*path, "flags")

        unique: list[str] = []
        for flag in node.flags:
            if not isinstance(flag, str):
                continue
            if flag in unique:
                context.report(RuleIssue(message=f'duplicate flag "{flag}" within {label}', path=flags_path))
                continue
            unique.append(flag)

        seen = state.seen_in(scope)
        for flag in unique:
            if not is_global and flag in state.global_flags:
                context.report(
                    RuleIssue(
                        message=(
                            f'Flag "{flag}" conflicts with global option at index '
                            f"{state.global_flags[flag]}"
                        ),
                        path=flags_path,
                    )
                )
            if flag in seen:
                context.report(
                    RuleIssue(
                        message=f'duplicate flag "{flag}" already used by {label} at index {seen[flag]}',
                        path=flags_path,
                    )
                )
                continue
            seen[flag] = index
            if is_global:
                state.global_flags[flag] = index

    return {"Option": option}


duplicate_flags = define_rule(
    "duplicate-flags",
    category="consistency",
    description="Options should not have duplicate or globally conflicting flags",
    create=_create_duplicate_flags,
    fixable=False,
    default_severity="error",
)

_EFFECT_BOOLEANS: tuple[str, ...] = ("destructive", "reversible", "idempotent", "network", "subprocess")
_EFFECT_GROUPS: dict[str, tuple[tuple[str, Any], ...]] = {
    "filesystem": (("read", bool), ("write", bool), ("delete", bool)),
    "cost": (("billable", bool), ("estimate", COST_ESTIMATES)),
    "interactive": (("stdin", STDIN_MODES), ("prompts", bool), ("tty", bool)),
    "duration": (("typical", "duration"), ("timeout", "duration")),
}


def _create_effects_value_validity(context: RuleContext) -> RuleVisitor:
    def check_boolean(value: Any, path: Path, label: str) -> None:
        if not isinstance(value, bool):
            context.report(RuleIssue(message=f'Field "{label}" must be a boolean', path=path))

    def check_enum(value: Any, path: Path, label: str, allowed: tuple[str, ...]) -> None:
        if value not in allowed:
            context.report(
                RuleIssue(message=f'Field "{label}" must be one of: {", ".join(allowed)}', path=path)
            )

    def check_duration(value: Any, path: Path, label: str) -> None:
        if not isinstance(value, str):
            context.report(RuleIssue(message=f'Field "{label}" must be a string', path=path))
            return
        if not DURATION_PATTERN.fullmatch(value):
            context.report(
                RuleIssue(
                    message=(
                        f'Field "{label}" has invalid duration format. '
                        'Expected format like "5s", "30s", "1-5s"'
                    ),
                    path=path,
                )
            )

    def effects(node: Effects, path: Path) -> None:
        for name in _EFFECT_BOOLEANS:
            if node.has(name):
                check_boolean(node.raw[name], (*path, name), name)

        for group, fields in _EFFECT_GROUPS.items():
            if not node.has(group):
                continue
            data = node.raw[group]
            if not isinstance(data, Mapping):
                context.report(RuleIssue(message=f'Field "{group}" must be an object', path=(*path, group)))
                continue
            for name, kind in fields:
                if name not in data:
                    continue
                field_path = (*path, group, name)
                label = f"{group}.{name}"
                if kind is bool:
                    check_boolean(data[name], field_path, label)
                elif kind == "duration":
                    check_duration(data[name], field_path, label)
                else:
                    check_enum(data[name], field_path, label, kind)

    return {"Effects": effects}


effects_value_validity = define_rule(
    "effects-value-validity",
    category="consistency",
    description="Effects values should be valid and consistent",
    create=_create_effects_value_validity,
    fixable=False,
    default_severity="error",
)

_CASE_PATTERNS: dict[str, re.Pattern[str]] = {
    "kebab-case": re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$"),
    "camelCase": re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    "snake_case": re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$"),
}


def _create_consistent_naming(context: RuleContext) -> RuleVisitor:
    command_case = str(context.option("commandCase", "kebab-case"))
    option_case = str(context.option("optionCase", "kebab-case"))
    allow_uppercase = bool(context.option("allowUppercase", False))
    allow_numbers = bool(context.option("allowNumbers", True))

    def check_name(name: str, expected: str, path: Path, kind: str) -> None:
        if not allow_numbers and re.search(r"\d", name):
            context.report(RuleIssue(message=f"{kind} naming should not contain numbers", path=path))
            return
        if not allow_uppercase and expected != "camelCase" and re.search(r"[A-Z]", name):
            context.report(
                RuleIssue(
                    message=f"{kind} naming should follow {expected} convention (contains uppercase)",
                    path=path,
                )
            )
            return
        pattern = _CASE_PATTERNS.get(expected)
        if pattern is not None and not pattern.match(name):
            context.report(RuleIssue(message=f"{kind} naming should follow {expected} convention", path=path))

    def command(node: Command, path: Path) -> None:
        check_name(node.name, command_case, path, "command")

    def option(node: Option, path: Path) -> None:
        if isinstance(node.name, str) and node.name:
            check_name(node.name, option_case, (*path, "name"), "option")

    return {"Command": command, "Option": option}


_CASE_ENUM = {"enum": list(_CASE_PATTERNS)}

consistent_naming = define_rule(
    "consistent-naming",
    category="consistency",
    description="Command and option names should follow consistent conventions",
    create=_create_consistent_naming,
    fixable=False,
    default_severity="warn",
    options_schema={
        "type": "object",
        "properties": {
            "commandCase": _CASE_ENUM,
            "optionCase": _CASE_ENUM,
            "allowUppercase": {"type": "boolean"},
            "allowNumbers": {"type": "boolean"},
        },
        "additionalProperties": False,
    },
)
