from dataclasses import dataclass, field
from typing import Any, Optional

from atip_lint.domain.constants import SEVERITY_ERROR, SEVERITY_NAMES, SEVERITY_WARN
from atip_lint.domain.syntax import Path


@dataclass(frozen=True)
class LintFix:
    """A textual edit: replace ``text[start:end]`` with ``text``."""

    start: int
    end: int
    text: str

    @property
    def range(self) -> tuple[int, int]:
        return (self.start, self.end)

    def overlaps(self, other: "LintFix") -> bool:
        """Half-open ranges overlap; touching at one boundary does not."""
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> dict[str, Any]:
        return {"range": [self.start, self.end], "text": self.text}


@dataclass(frozen=True)
class LintSuggestion:
    desc: str
    fix: LintFix

    def to_dict(self) -> dict[str, Any]:
        return {"desc": self.desc, "fix": self.fix.to_dict()}


@dataclass(frozen=True)
class LintMessage:
    """One reported issue, located in the source text."""

    rule_id: str
    severity: int
    message: str
    path: Path = ()
    line: int = 1
    column: int = 1
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    range: Optional[tuple[int, int]] = None
    fix: Optional[LintFix] = None
    suggestions: tuple[LintSuggestion, ...] = ()

    @property
    def severity_name(self) -> str:
        return SEVERITY_NAMES.get(self.severity, str(self.severity))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ruleId": self.rule_id,
            "severity": self.severity,
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "jsonPath": list(self.path),
        }
        if self.end_line is not None:
            data["endLine"] = self.end_line
            data["endColumn"] = self.end_column
        if self.range is not None:
            data["range"] = list(self.range)
        if self.fix is not None:
            data["fix"] = self.fix.to_dict()
        if self.suggestions:
            data["suggestions"] = [s.to_dict() for s in self.suggestions]
        return data


@dataclass(frozen=True)
class MessageCounts:
    error_count: int = 0
    warning_count: int = 0
    fixable_error_count: int = 0
    fixable_warning_count: int = 0

    @classmethod
    def from_messages(cls, messages: "list[LintMessage] | tuple[LintMessage, ...]") -> "MessageCounts":
        """Count errors and warnings; a message is fixable when it carries a fix, applied or not."""
        errors = warnings = fixable_errors = fixable_warnings = 0
        for message in messages:
            if message.severity == SEVERITY_ERROR:
                errors += 1
                if message.fix is not None:
                    fixable_errors += 1
            elif message.severity == SEVERITY_WARN:
                warnings += 1
                if message.fix is not None:
                    fixable_warnings += 1
        return cls(errors, warnings, fixable_errors, fixable_warnings)


@dataclass(frozen=True)
class LintResult:
    """Per-file lint result."""

    file_path: str
    messages: tuple[LintMessage, ...] = ()
    error_count: int = 0
    warning_count: int = 0
    fixable_error_count: int = 0
    fixable_warning_count: int = 0
    source: Optional[str] = None
    output: Optional[str] = None
    applied_fixes: int = 0
    fix_conflicts: tuple[LintFix, ...] = ()

    @classmethod
    def from_messages(
        cls,
        file_path: str,
        messages: "list[LintMessage] | tuple[LintMessage, ...]",
        source: Optional[str] = None,
    ) -> "LintResult":
        counts = MessageCounts.from_messages(messages)
        return cls(
            file_path=file_path,
            messages=tuple(messages),
            error_count=counts.error_count,
            warning_count=counts.warning_count,
            fixable_error_count=counts.fixable_error_count,
            fixable_warning_count=counts.fixable_warning_count,
            source=source,
        )

    @property
    def total_count(self) -> int:
        return len(self.messages)

    @property
    def fixable_count(self) -> int:
        return self.fixable_error_count + self.fixable_warning_count

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "filePath": self.file_path,
            "messages": [m.to_dict() for m in self.messages],
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "fixableErrorCount": self.fixable_error_count,
            "fixableWarningCount": self.fixable_warning_count,
        }
        if self.output is not None:
            data["output"] = self.output
            data["appliedFixes"] = self.applied_fixes
            data["fixConflicts"] = [f.to_dict() for f in self.fix_conflicts]
        return data


@dataclass(frozen=True)
class LintResults:
    """Batch summary over any number of files."""

    results: tuple[LintResult, ...] = field(default=())
    error_count: int = 0
    warning_count: int = 0
    fixable_error_count: int = 0
    fixable_warning_count: int = 0

    @classmethod
    def from_results(cls, results: "list[LintResult] | tuple[LintResult, ...]") -> "LintResults":
        """Sum per-file counts. Every file contributes, including fatal ones."""
        return cls(
            results=tuple(results),
            error_count=sum(r.error_count for r in results),
            warning_count=sum(r.warning_count for r in results),
            fixable_error_count=sum(r.fixable_error_count for r in results),
            fixable_warning_count=sum(r.fixable_warning_count for r in results),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "fixableErrorCount": self.fixable_error_count,
            "fixableWarningCount": self.fixable_warning_count,
        }


@dataclass(frozen=True)
class LintOptions:
    fix: bool = False
    quiet: bool = False
