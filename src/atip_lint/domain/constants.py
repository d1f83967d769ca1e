"""
atip-lint: shared constants for rules, configuration and reporting.
"""

import re

TOOL_NAME: str = "atip-lint"
TOOL_VERSION: str = "0.1.0"

SEVERITY_OFF: int = 0
SEVERITY_WARN: int = 1
SEVERITY_ERROR: int = 2

SEVERITY_VALUES: dict[str, int] = {
    "off": SEVERITY_OFF,
    "warn": SEVERITY_WARN,
    "error": SEVERITY_ERROR,
}
SEVERITY_NAMES: dict[int, str] = {value: name for name, value in SEVERITY_VALUES.items()}

RULE_CATEGORIES: tuple[str, ...] = (
    "quality",
    "consistency",
    "security",
    "executable",
    "trust",
)

# Node kinds a rule visitor may subscribe to
NODE_KINDS: tuple[str, ...] = (
    "Document",
    "Command",
    "Argument",
    "Option",
    "Effects",
    "Trust",
    "Pattern",
)

# Searched in this order in the start directory, then in each ancestor
DEFAULT_CONFIG_FILES: tuple[str, ...] = (
    ".atiplintrc.json",
    ".atiplintrc.yaml",
    ".atiplintrc.yml",
    "pyproject.toml",
)
PYPROJECT_SECTION: str = "atip-lint"

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
)

# Synthetic rule ids for per-file fatal conditions
PARSE_ERROR_RULE: str = "parse-error"
FILE_ERROR_RULE: str = "file-error"
SCHEMA_ERROR_RULE: str = "schema-error"

ARGUMENT_TYPES: frozenset[str] = frozenset(
    {"string", "integer", "number", "boolean", "file", "directory", "url", "enum", "array"}
)

TRUST_ORDER: tuple[str, ...] = ("inferred", "user", "community", "org", "vendor", "native")

COST_ESTIMATES: tuple[str, ...] = ("free", "low", "medium", "high")
STDIN_MODES: tuple[str, ...] = ("none", "optional", "required", "password")
DURATION_PATTERN: re.Pattern[str] = re.compile(r"(?:[0-9]+(?:-[0-9]+)?[smh]|instant)")

DEFAULT_PLACEHOLDER_PATTERNS: tuple[str, ...] = ("TODO", "FIXME", "Description", "TBD")

SARIF_SCHEMA_URI: str = (
    "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"
)
