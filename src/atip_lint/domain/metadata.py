"""
Typed semantic tree for ATIP documents.

The projector walks the plain JSON value (as materialised from the syntax
tree) into frozen dataclasses. Every node records the path it was found at.
Optional fields that are absent stay ``None``; nothing is defaulted here.
Rules decide what a missing field means.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from atip_lint.domain.constants import TRUST_ORDER
from atip_lint.domain.syntax import Path


@dataclass(frozen=True)
class Effects:
    """Side-effect declaration of a document or a command."""

    path: Path
    raw: Mapping[str, Any]
    filesystem: Optional[Mapping[str, Any]] = None
    network: Any = None
    subprocess: Any = None
    idempotent: Any = None
    reversible: Any = None
    destructive: Any = None
    interactive: Optional[Mapping[str, Any]] = None
    cost: Optional[Mapping[str, Any]] = None
    duration: Optional[Mapping[str, Any]] = None

    def has(self, name: str) -> bool:
        """True when the field is present in the source, even if its value is null."""
        return name in self.raw

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self.raw.keys())


@dataclass(frozen=True)
class Trust:
    path: Path
    raw: Mapping[str, Any]
    source: Any = None
    verified: Any = None
    checksum: Any = None
    signer: Any = None
    attestation: Any = None

    def has(self, name: str) -> bool:
        return name in self.raw


@dataclass(frozen=True)
class Argument:
    """A positional argument. ``required`` is None when the source omits it."""

    path: Path
    raw: Mapping[str, Any]
    name: Any = None
    type: Any = None
    description: Any = None
    required: Any = None
    variadic: Any = None
    default: Any = None
    enum: Any = None


@dataclass(frozen=True)
class Option(Argument):
    """A flag-bearing option; adds ``flags`` to the argument fields."""

    flags: Any = None


@dataclass(frozen=True)
class Command:
    """A command; ``commands`` holds nested sub-commands to any depth."""

    name: str
    path: Path
    raw: Mapping[str, Any]
    description: Any = None
    commands: Optional[Mapping[str, "Command"]] = None
    arguments: Optional[tuple[Argument, ...]] = None
    options: Optional[tuple[Option, ...]] = None
    effects: Optional[Effects] = None
    examples: Any = None

    @property
    def is_group(self) -> bool:
        """Groups (commands with children) are exempt from leaf-only rules."""
        return bool(self.commands)


@dataclass(frozen=True)
class PatternStep:
    command: Any = None
    description: Any = None


@dataclass(frozen=True)
class Pattern:
    path: Path
    raw: Mapping[str, Any]
    name: Any = None
    description: Any = None
    steps: tuple[PatternStep, ...] = field(default=())
    variables: Any = None
    tags: Any = None
    executable: Any = None


@dataclass(frozen=True)
class MetadataDocument:
    """Root of the semantic tree."""

    raw: Mapping[str, Any]
    path: Path = ()
    atip: Any = None
    name: Any = None
    version: Any = None
    description: Any = None
    homepage: Any = None
    trust: Optional[Trust] = None
    effects: Optional[Effects] = None
    commands: Optional[Mapping[str, Command]] = None
    arguments: Optional[tuple[Argument, ...]] = None
    global_options: Optional[tuple[Option, ...]] = None
    patterns: Optional[tuple[Pattern, ...]] = None

    def has(self, name: str) -> bool:
        return name in self.raw

    @property
    def protocol_version(self) -> Optional[str]:
        """The ATIP protocol version, whether given as a string or as an object."""
        if isinstance(self.atip, str):
            return self.atip
        if isinstance(self.atip, Mapping):
            version = self.atip.get("version")
            return version if isinstance(version, str) else None
        return None

    def iter_commands(self) -> list[Command]:
        """All commands in pre-order (parent before children)."""
        ordered: list[Command] = []
        stack = list(reversed(list((self.commands or {}).values())))
        while stack:
            command = stack.pop()
            ordered.append(command)
            stack.extend(reversed(list((command.commands or {}).values())))
        return ordered


def trust_rank(source: Any) -> int:
    """Position of a trust source in the total order, -1 for unknown sources."""
    try:
        return TRUST_ORDER.index(source)
    except ValueError:
        return -1


def _mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def project_effects(value: Any, path: Path) -> Optional[Effects]:
    data = _mapping(value)
    if data is None:
        return None
    return Effects(
        path=path,
        raw=data,
        filesystem=_mapping(data.get("filesystem")),
        network=data.get("network"),
        subprocess=data.get("subprocess"),
        idempotent=data.get("idempotent"),
        reversible=data.get("reversible"),
        destructive=data.get("destructive"),
        interactive=_mapping(data.get("interactive")),
        cost=_mapping(data.get("cost")),
        duration=_mapping(data.get("duration")),
    )


def project_trust(value: Any, path: Path) -> Optional[Trust]:
    data = _mapping(value)
    if data is None:
        return None
    return Trust(
        path=path,
        raw=data,
        source=data.get("source"),
        verified=data.get("verified"),
        checksum=data.get("checksum"),
        signer=data.get("signer"),
        attestation=data.get("attestation"),
    )


def _argument_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": data.get("name"),
        "type": data.get("type"),
        "description": data.get("description"),
        "required": data.get("required"),
        "variadic": data.get("variadic"),
        "default": data.get("default"),
        "enum": data.get("enum"),
    }


def project_arguments(value: Any, path: Path) -> Optional[tuple[Argument, ...]]:
    """Project an argument array; non-object elements are skipped but keep their index."""
    if not isinstance(value, list):
        return None
    return tuple(
        Argument(path=(*path, index), raw=item, **_argument_fields(item))
        for index, item in enumerate(value)
        if isinstance(item, Mapping)
    )


def project_options(value: Any, path: Path) -> Optional[tuple[Option, ...]]:
    if not isinstance(value, list):
        return None
    return tuple(
        Option(path=(*path, index), raw=item, flags=item.get("flags"), **_argument_fields(item))
        for index, item in enumerate(value)
        if isinstance(item, Mapping)
    )


def project_commands(value: Any, path: Path) -> Optional[Mapping[str, Command]]:
    data = _mapping(value)
    if data is None:
        return None
    commands: dict[str, Command] = {}
    for name, item in data.items():
        if not isinstance(item, Mapping):
            continue
        command_path: Path = (*path, name)
        commands[name] = Command(
            name=name,
            path=command_path,
            raw=item,
            description=item.get("description"),
            commands=project_commands(item.get("commands"), (*command_path, "commands")),
            arguments=project_arguments(item.get("arguments"), (*command_path, "arguments")),
            options=project_options(item.get("options"), (*command_path, "options")),
            effects=project_effects(item.get("effects"), (*command_path, "effects")),
            examples=item.get("examples"),
        )
    return commands


def _project_pattern(name: Any, item: Mapping[str, Any], path: Path) -> Pattern:
    raw_steps = item.get("steps")
    steps = tuple(
        PatternStep(command=step.get("command"), description=step.get("description"))
        for step in (raw_steps if isinstance(raw_steps, list) else [])
        if isinstance(step, Mapping)
    )
    return Pattern(
        path=path,
        raw=item,
        name=item.get("name", name),
        description=item.get("description"),
        steps=steps,
        variables=item.get("variables"),
        tags=item.get("tags"),
        executable=item.get("executable"),
    )


def project_patterns(value: Any, path: Path) -> Optional[tuple[Pattern, ...]]:
    """Patterns are a list; older documents key them by name in an object."""
    if isinstance(value, list):
        return tuple(
            _project_pattern(None, item, (*path, index))
            for index, item in enumerate(value)
            if isinstance(item, Mapping)
        )
    data = _mapping(value)
    if data is None:
        return None
    return tuple(
        _project_pattern(name, item, (*path, name))
        for name, item in data.items()
        if isinstance(item, Mapping)
    )


def project_document(value: Any) -> MetadataDocument:
    """Project a parsed JSON value into a MetadataDocument. A non-object root projects to an empty document."""
    data = _mapping(value) or {}
    return MetadataDocument(
        raw=data,
        atip=data.get("atip"),
        name=data.get("name"),
        version=data.get("version"),
        description=data.get("description"),
        homepage=data.get("homepage"),
        trust=project_trust(data.get("trust"), ("trust",)),
        effects=project_effects(data.get("effects"), ("effects",)),
        commands=project_commands(data.get("commands"), ("commands",)),
        arguments=project_arguments(data.get("arguments"), ("arguments",)),
        global_options=project_options(data.get("globalOptions"), ("globalOptions",)),
        patterns=project_patterns(data.get("patterns"), ("patterns",)),
    )
