"""Use Case: Lint one ATIP document."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

import jsonschema
from jsonschema.exceptions import ValidationError

from atip_lint.domain.constants import (
    FILE_ERROR_RULE,
    PARSE_ERROR_RULE,
    SCHEMA_ERROR_RULE,
    SEVERITY_ERROR,
    SEVERITY_WARN,
)
from atip_lint.domain.entities import LintMessage, LintOptions, LintResult
from atip_lint.domain.errors import ConfigError, FileError, SchemaError, SchemaIssue
from atip_lint.domain.fixes import compose_fixes
from atip_lint.domain.metadata import project_document
from atip_lint.domain.rules import RuleContext, RuleRegistry, RuleVisitor, check_visitor
from atip_lint.domain.syntax import Path, SyntaxNode, find_nearest_node, node_value, position_at
from atip_lint.domain.traversal import build_dispatch_table, traverse

if TYPE_CHECKING:
    from atip_lint.domain.config import LintConfig, RuleSetting
    from atip_lint.domain.protocols import (
        ExecutableProberProtocol,
        FileSystemProtocol,
        SchemaValidatorProtocol,
        SyntaxGatewayProtocol,
        TelemetryPort,
    )


class LintFileUseCase:
    """
    Lint a single document: parse, optional schema validation, one rule
    traversal, then optional fix composition.

    Configuration is checked eagerly: invalid rule options raise ConfigError
    before any file is linted, and unknown rule ids are reported once.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        config: "LintConfig",
        syntax_gateway: "SyntaxGatewayProtocol",
        filesystem: "FileSystemProtocol",
        telemetry: Optional["TelemetryPort"] = None,
        schema_validator: Optional["SchemaValidatorProtocol"] = None,
        prober: Optional["ExecutableProberProtocol"] = None,
    ) -> None:
        self.registry = registry
        self.config = config
        self.syntax_gateway = syntax_gateway
        self.filesystem = filesystem
        self.telemetry = telemetry
        self.schema_validator = schema_validator
        self.prober = prober
        self._check_rule_settings()

    def _check_rule_settings(self) -> None:
        settings: list[tuple[str, "RuleSetting"]] = list(self.config.rules.items())
        for override in self.config.overrides:
            settings.extend(override.rules.items())

        unknown: list[str] = []
        for rule_id, setting in settings:
            definition = self.registry.get(rule_id)
            if definition is None:
                if rule_id not in unknown:
                    unknown.append(rule_id)
                continue
            if definition.options_schema is None or not setting.options:
                continue
            try:
                jsonschema.validate(dict(setting.options), dict(definition.options_schema))
            except ValidationError as exc:
                raise ConfigError(f"Invalid options for rule {rule_id}: {exc.message}") from exc
        for rule_id in unknown:
            if self.telemetry:
                self.telemetry.warning(f"Unknown rule in configuration, skipped: {rule_id}")

    def lint_file(self, file_path: str, options: Optional[LintOptions] = None) -> LintResult:
        """Read and lint ``file_path``. An unreadable file yields one file-error message."""
        try:
            text = self.filesystem.read_text(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            if self.telemetry:
                self.telemetry.error(str(FileError("Cannot read file", file_path, exc)))
            message = LintMessage(
                rule_id=FILE_ERROR_RULE,
                severity=SEVERITY_ERROR,
                message=f"Cannot read file: {exc}",
            )
            return LintResult.from_messages(file_path, [message])
        return self.lint_text(text, file_path, options)

    def lint_text(
        self,
        text: str,
        file_path: str = "<input>",
        options: Optional[LintOptions] = None,
    ) -> LintResult:
        """Lint ``text`` as if it were the contents of ``file_path``."""
        options = options or LintOptions()
        if self.telemetry:
            self.telemetry.step(f"Linting {file_path}")

        outcome = self.syntax_gateway.parse(text)
        if not outcome.ok or outcome.root is None:
            error = outcome.errors[0]
            message = LintMessage(
                rule_id=PARSE_ERROR_RULE,
                severity=SEVERITY_ERROR,
                message=f"Invalid JSON: {error.message}",
                line=error.line,
                column=error.column,
            )
            return LintResult.from_messages(file_path, [message], source=text)

        value = node_value(outcome.root)
        schema_messages = self._validate_schema(value, text, outcome.root, file_path)
        if schema_messages:
            return LintResult.from_messages(file_path, schema_messages, source=text)

        messages = self._run_rules(value, text, outcome.root, file_path)
        if options.quiet:
            messages = [m for m in messages if m.severity != SEVERITY_WARN]
        result = LintResult.from_messages(file_path, messages, source=text)
        if options.fix and result.fixable_count > 0:
            return self._apply_fixes(result, text)
        return result

    def _validate_schema(self, value: Any, text: str, root: SyntaxNode, file_path: str) -> list[LintMessage]:
        if not self.config.schema_validation:
            return []
        if self.schema_validator is None:
            if self.telemetry:
                self.telemetry.step("No ATIP schema configured; skipping schema validation")
            return []
        issues: list[SchemaIssue] = self.schema_validator.validate(value)
        if issues and self.telemetry:
            self.telemetry.step(str(SchemaError("Schema validation failed", file_path, issues)))
        messages: list[LintMessage] = []
        for issue in issues:
            path: Path = tuple(issue.segments)
            node = find_nearest_node(root, path)
            line, column = position_at(text, node.offset) if node is not None else (1, 1)
            messages.append(
                LintMessage(
                    rule_id=SCHEMA_ERROR_RULE,
                    severity=SEVERITY_ERROR,
                    message=f"Schema violation at {issue.path}: {issue.message}",
                    path=path,
                    line=line,
                    column=column,
                )
            )
        return messages

    def _run_rules(self, value: Any, text: str, root: SyntaxNode, file_path: str) -> list[LintMessage]:
        document = project_document(value)
        messages: list[LintMessage] = []
        visitors: list[RuleVisitor] = []
        rules: Mapping[str, "RuleSetting"] = self.config.rules_for(file_path)
        for rule_id, setting in rules.items():
            if not setting.enabled:
                continue
            definition = self.registry.get(rule_id)
            if definition is None:
                continue
            context = RuleContext(
                rule_id=rule_id,
                severity=setting.severity,
                options=setting.options,
                file_path=file_path,
                source=text,
                syntax_root=root,
                document=document,
                config=self.config,
                messages=messages,
                prober=self.prober,
            )
            visitor = definition.create(context)
            check_visitor(rule_id, visitor)
            visitors.append(visitor)

        traverse(document, build_dispatch_table(visitors))
        return messages

    def _apply_fixes(self, result: LintResult, text: str) -> LintResult:
        fixes = [m.fix for m in result.messages if m.fix is not None]
        outcome = compose_fixes(text, fixes)
        if self.telemetry:
            self.telemetry.step(
                f"{result.file_path}: applied {outcome.applied_count} fix(es), "
                f"{len(outcome.conflicts)} conflicting"
            )
        return LintResult(
            file_path=result.file_path,
            messages=result.messages,
            error_count=result.error_count,
            warning_count=result.warning_count,
            fixable_error_count=result.fixable_error_count,
            fixable_warning_count=result.fixable_warning_count,
            source=result.source,
            output=outcome.output,
            applied_fixes=outcome.applied_count,
            fix_conflicts=outcome.conflicts,
        )
