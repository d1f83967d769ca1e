"""Output formatters for lint results: stylish, compact, json and sarif."""

import json
import os
from typing import TYPE_CHECKING, Callable, Optional

import typer

from atip_lint.domain.constants import SARIF_SCHEMA_URI, SEVERITY_ERROR, TOOL_NAME, TOOL_VERSION

if TYPE_CHECKING:
    from atip_lint.domain.entities import LintMessage, LintResults
    from atip_lint.domain.rules import RuleRegistry


class ResultFormatter:
    """Renders LintResults as text. No top-level functions."""

    def __init__(
        self,
        color: bool = False,
        cwd: Optional[str] = None,
        registry: Optional["RuleRegistry"] = None,
    ) -> None:
        self.color = color
        self.cwd = cwd
        self.registry = registry

    @staticmethod
    def names() -> list[str]:
        return ["stylish", "compact", "json", "sarif"]

    def get(self, name: str) -> Callable[["LintResults"], str]:
        """Look up a formatter by name. Unknown names raise ValueError."""
        formatters: dict[str, Callable[["LintResults"], str]] = {
            "stylish": self.stylish,
            "compact": self.compact,
            "json": self.json,
            "sarif": self.sarif,
        }
        if name not in formatters:
            raise ValueError(f"Unknown output format: {name}. Expected one of: {', '.join(self.names())}")
        return formatters[name]

    def format(self, name: str, results: "LintResults") -> str:
        return self.get(name)(results)

    def _display_path(self, file_path: str) -> str:
        if self.cwd and os.path.isabs(file_path):
            try:
                return os.path.relpath(file_path, self.cwd)
            except ValueError:
                return file_path
        return file_path

    def _style(self, text: str, **styles: object) -> str:
        return typer.style(text, **styles) if self.color else text  # type: ignore[arg-type]

    @staticmethod
    def _level(message: "LintMessage") -> str:
        return "error" if message.severity == SEVERITY_ERROR else "warning"

    def stylish(self, results: "LintResults") -> str:
        """Grouped by file, aligned columns, summary line at the end."""
        lines: list[str] = []
        for result in results.results:
            if not result.messages:
                continue
            lines.append("")
            lines.append(self._style(self._display_path(result.file_path), underline=True))
            for message in result.messages:
                level = self._level(message)
                level_text = self._style(level, fg="red" if level == "error" else "yellow")
                location = f"{message.line}:{message.column}"
                lines.append(
                    f"  {location:<8} {level_text:<7}  {message.message}  {self._style(message.rule_id, dim=True)}"
                )

        total = results.error_count + results.warning_count
        if total:
            summary = (
                f"✖ {total} problem{'s' if total != 1 else ''} "
                f"({results.error_count} error{'s' if results.error_count != 1 else ''}, "
                f"{results.warning_count} warning{'s' if results.warning_count != 1 else ''})"
            )
            lines.append("")
            lines.append(self._style(summary, fg="red" if results.error_count else "yellow", bold=True))
            fixable = results.fixable_error_count + results.fixable_warning_count
            if fixable:
                lines.append(
                    f"  {results.fixable_error_count} error(s) and {results.fixable_warning_count} "
                    "warning(s) potentially fixable with the `--fix` option."
                )
        return "\n".join(lines) + ("\n" if lines else "")

    def compact(self, results: "LintResults") -> str:
        """One grep-friendly line per message."""
        lines = [
            f"{self._display_path(result.file_path)}:{message.line}:{message.column}: "
            f"{self._level(message)} - {message.message} ({message.rule_id})"
            for result in results.results
            for message in result.messages
        ]
        return "\n".join(lines) + ("\n" if lines else "")

    def json(self, results: "LintResults") -> str:
        return json.dumps(results.to_dict(), indent=2)

    def sarif(self, results: "LintResults") -> str:
        """SARIF 2.1.0 log with one run; rules are listed in first-seen order."""
        rule_ids: list[str] = []
        for result in results.results:
            for message in result.messages:
                if message.rule_id not in rule_ids:
                    rule_ids.append(message.rule_id)

        rules = []
        for rule_id in rule_ids:
            definition = self.registry.get(rule_id) if self.registry is not None else None
            rules.append(
                {
                    "id": rule_id,
                    "shortDescription": {"text": definition.description if definition else rule_id},
                }
            )

        sarif_results = []
        for result in results.results:
            for message in result.messages:
                region = {"startLine": message.line, "startColumn": message.column}
                if message.end_line is not None:
                    region["endLine"] = message.end_line
                    region["endColumn"] = message.end_column or message.column
                sarif_results.append(
                    {
                        "ruleId": message.rule_id,
                        "level": self._level(message),
                        "message": {"text": message.message},
                        "locations": [
                            {
                                "physicalLocation": {
                                    "artifactLocation": {"uri": self._display_path(result.file_path)},
                                    "region": region,
                                }
                            }
                        ],
                    }
                )

        log = {
            "version": "2.1.0",
            "$schema": SARIF_SCHEMA_URI,
            "runs": [
                {
                    "tool": {"driver": {"name": TOOL_NAME, "version": TOOL_VERSION, "rules": rules}},
                    "results": sarif_results,
                }
            ],
        }
        return json.dumps(log, indent=2)
