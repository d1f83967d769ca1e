"""
Rule configuration: severity normalisation, preset inheritance and merging.

A raw configuration is the mapping users write (JSON, YAML or a pyproject
table). ``ConfigResolver`` walks its ``extends`` graph parent-before-child,
merges everything on top and returns an immutable ``LintConfig``.
"""

import fnmatch
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from atip_lint.domain.constants import DEFAULT_IGNORE_PATTERNS, SEVERITY_OFF, SEVERITY_VALUES
from atip_lint.domain.errors import ConfigError

_LIST_KEYS: tuple[str, ...] = ("ignorePatterns", "overrides", "plugins")
_SCALAR_KEYS: tuple[str, ...] = ("schemaValidation", "executableChecks", "schemaPath")


@dataclass(frozen=True)
class RuleSetting:
    """A normalised rule entry: numeric severity plus its options object."""

    severity: int
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def enabled(self) -> bool:
        return self.severity != SEVERITY_OFF


@dataclass(frozen=True)
class ConfigOverride:
    """Rule settings that apply only to files matching ``files``."""

    files: tuple[str, ...]
    rules: Mapping[str, RuleSetting]


@dataclass(frozen=True)
class LintConfig:
    """Fully resolved, read-only configuration shared by every file of a run."""

    rules: Mapping[str, RuleSetting] = field(default_factory=lambda: MappingProxyType({}))
    ignore_patterns: tuple[str, ...] = ()
    overrides: tuple[ConfigOverride, ...] = ()
    plugins: tuple[str, ...] = ()
    env: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    schema_validation: bool = True
    executable_checks: bool = False
    schema_path: Optional[str] = None

    @property
    def binary_paths(self) -> Mapping[str, str]:
        paths = self.env.get("binaryPaths")
        return paths if isinstance(paths, Mapping) else {}

    def rules_for(self, file_path: str) -> Mapping[str, RuleSetting]:
        """Base rules with every matching override applied in declaration order."""
        rules = dict(self.rules)
        for override in self.overrides:
            if any(path_matches(file_path, pattern) for pattern in override.files):
                rules.update(override.rules)
        return MappingProxyType(rules)

    def with_rules(self, rules: Mapping[str, Any]) -> "LintConfig":
        """Return a copy with raw rule entries layered on top (used for CLI overrides)."""
        merged = dict(self.rules)
        for rule_id, value in rules.items():
            merged[rule_id] = normalize_rule_config(value, rule_id)
        return LintConfig(
            rules=MappingProxyType(merged),
            ignore_patterns=self.ignore_patterns,
            overrides=self.overrides,
            plugins=self.plugins,
            env=self.env,
            schema_validation=self.schema_validation,
            executable_checks=self.executable_checks,
            schema_path=self.schema_path,
        )


def path_matches(file_path: str, pattern: str) -> bool:
    """Glob match that also lets relative patterns match inside absolute paths."""
    normalized = file_path.replace("\\", "/")
    if fnmatch.fnmatch(normalized, pattern):
        return True
    if not pattern.startswith(("/", "*")):
        return fnmatch.fnmatch(normalized, f"*/{pattern}")
    return False


def normalize_severity(value: Any, rule_id: str = "") -> int:
    """Map off/warn/error or 0/1/2 to the numeric severity."""
    where = f" for {rule_id}" if rule_id else ""
    if isinstance(value, bool):
        raise ConfigError(f"Invalid severity{where}: {value!r}")
    if isinstance(value, int):
        if value in SEVERITY_VALUES.values():
            return value
        raise ConfigError(f"Invalid severity{where}: {value!r}")
    if isinstance(value, str) and value in SEVERITY_VALUES:
        return SEVERITY_VALUES[value]
    raise ConfigError(f"Invalid severity{where}: {value!r}")


def normalize_rule_config(value: Any, rule_id: str = "") -> RuleSetting:
    """
    Normalise any accepted rule entry to a RuleSetting.

    ``"warn"`` -> (1, {}), ``2`` -> (2, {}), ``["warn", {"minLength": 20}]`` -> (1, {...}).
    """
    if isinstance(value, RuleSetting):
        return value
    if isinstance(value, (list, tuple)):
        if not 1 <= len(value) <= 2:
            raise ConfigError(f"Invalid rule configuration for {rule_id}: expected [severity, options]")
        severity = normalize_severity(value[0], rule_id)
        options = value[1] if len(value) == 2 else None
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ConfigError(f"Invalid rule options for {rule_id}: must be an object")
        return RuleSetting(severity, MappingProxyType(dict(options)))
    return RuleSetting(normalize_severity(value, rule_id))


def _extends_names(config: Mapping[str, Any]) -> list[str]:
    extends = config.get("extends")
    if extends is None:
        return []
    if isinstance(extends, str):
        return [extends]
    if isinstance(extends, list) and all(isinstance(name, str) for name in extends):
        return list(extends)
    raise ConfigError("Invalid 'extends': must be a preset name or a list of preset names")


def validate_raw_config(config: Any) -> None:
    """Reject structurally invalid configuration before any file is linted."""
    if not isinstance(config, Mapping):
        raise ConfigError("Configuration must be an object")
    _extends_names(config)
    rules = config.get("rules")
    if rules is not None:
        if not isinstance(rules, Mapping):
            raise ConfigError("Invalid 'rules': must be an object")
        for rule_id, value in rules.items():
            normalize_rule_config(value, rule_id)
    for key in ("ignorePatterns", "plugins"):
        value = config.get(key)
        if value is not None and not (isinstance(value, list) and all(isinstance(v, str) for v in value)):
            raise ConfigError(f"Invalid '{key}': must be a list of strings")
    overrides = config.get("overrides")
    if overrides is not None:
        if not isinstance(overrides, list):
            raise ConfigError("Invalid 'overrides': must be a list")
        for entry in overrides:
            if not isinstance(entry, Mapping) or not isinstance(entry.get("files"), list):
                raise ConfigError("Invalid override: each entry needs a 'files' list")
            validate_raw_config({"rules": entry.get("rules", {})})
    env = config.get("env")
    if env is not None and not isinstance(env, Mapping):
        raise ConfigError("Invalid 'env': must be an object")


def merge_raw_configs(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge ``source`` on top of ``target``.

    Rules merge key-wise, list settings concatenate in order, ``env`` merges
    key-wise (``binaryPaths`` one level deeper) and scalars from ``source`` win.
    """
    result: dict[str, Any] = {k: v for k, v in target.items() if k != "extends"}
    if source.get("rules") is not None:
        result["rules"] = {**(target.get("rules") or {}), **source["rules"]}
    for key in _LIST_KEYS:
        if source.get(key) is not None:
            result[key] = [*(target.get(key) or []), *source[key]]
    if source.get("env") is not None:
        target_env = target.get("env") or {}
        source_env = source["env"]
        result["env"] = {
            **target_env,
            **source_env,
            "binaryPaths": {
                **(target_env.get("binaryPaths") or {}),
                **(source_env.get("binaryPaths") or {}),
            },
        }
    for key in _SCALAR_KEYS:
        if source.get(key) is not None:
            result[key] = source[key]
    return result


class ConfigResolver:
    """Resolves raw configuration against a preset table."""

    def __init__(self, presets: Mapping[str, Mapping[str, Any]]) -> None:
        self._presets = presets

    def resolve(self, raw: Optional[Mapping[str, Any]]) -> LintConfig:
        """Resolve ``raw`` (None means the default configuration) into a LintConfig."""
        if raw is None:
            return default_config()
        merged = self.resolve_raw(raw)
        return build_config(merged)

    def resolve_raw(self, config: Mapping[str, Any], chain: tuple[str, ...] = ()) -> dict[str, Any]:
        """
        Flatten ``config`` and everything it extends into one raw mapping.

        ``chain`` is the path of preset names currently being resolved; meeting
        a name that is already on it is a cycle.
        """
        validate_raw_config(config)
        merged: dict[str, Any] = {}
        for name in _extends_names(config):
            if name in chain:
                cycle = " -> ".join((*chain, name))
                raise ConfigError(f"Preset cycle detected: {cycle}")
            preset = self._presets.get(name)
            if preset is None:
                raise ConfigError(f"Unknown preset: {name}")
            merged = merge_raw_configs(merged, self.resolve_raw(preset, (*chain, name)))
        return merge_raw_configs(merged, config)


def build_config(raw: Mapping[str, Any]) -> LintConfig:
    """Turn a flattened raw mapping into an immutable LintConfig."""
    rules = {
        rule_id: normalize_rule_config(value, rule_id)
        for rule_id, value in (raw.get("rules") or {}).items()
    }
    overrides = tuple(
        ConfigOverride(
            files=tuple(entry["files"]),
            rules=MappingProxyType(
                {rid: normalize_rule_config(v, rid) for rid, v in (entry.get("rules") or {}).items()}
            ),
        )
        for entry in raw.get("overrides") or []
    )
    schema_path = raw.get("schemaPath")
    return LintConfig(
        rules=MappingProxyType(rules),
        ignore_patterns=tuple(raw.get("ignorePatterns") or ()),
        overrides=overrides,
        plugins=tuple(raw.get("plugins") or ()),
        env=MappingProxyType(dict(raw.get("env") or {})),
        schema_validation=bool(raw.get("schemaValidation", True)),
        executable_checks=bool(raw.get("executableChecks", False)),
        schema_path=str(schema_path) if schema_path is not None else None,
    )


def default_config() -> LintConfig:
    """Configuration used when no config file exists: no rules, conservative ignores."""
    return LintConfig(ignore_patterns=DEFAULT_IGNORE_PATTERNS, schema_validation=True)
