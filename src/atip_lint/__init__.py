"""atip-lint: lint ATIP tool metadata for quality issues beyond schema validation."""

from atip_lint.domain.config import LintConfig
from atip_lint.domain.constants import TOOL_VERSION
from atip_lint.domain.entities import LintFix, LintMessage, LintOptions, LintResult, LintResults
from atip_lint.domain.errors import (
    ConfigError,
    ExecutableError,
    FileError,
    FixGenerationError,
    LintError,
    SchemaError,
)
from atip_lint.domain.rules import RuleContext, RuleDefinition, RuleIssue, RuleRegistry, define_rule
from atip_lint.domain.rules.registry import builtin_registry
from atip_lint.linter import Linter, create_linter, load_config

__version__ = TOOL_VERSION

__all__ = [
    "ConfigError",
    "ExecutableError",
    "FileError",
    "FixGenerationError",
    "LintConfig",
    "LintError",
    "LintFix",
    "LintMessage",
    "LintOptions",
    "LintResult",
    "LintResults",
    "Linter",
    "RuleContext",
    "RuleDefinition",
    "RuleIssue",
    "RuleRegistry",
    "SchemaError",
    "builtin_registry",
    "create_linter",
    "define_rule",
    "load_config",
]
