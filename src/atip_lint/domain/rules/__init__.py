"""
Rule model: definitions, per-file context and the issue reporter.

A rule is a capability bundle. Its ``create`` factory runs once per
(rule, file) and returns a visitor: a mapping from node kind to a callback
``(node, path) -> None``. Any state the factory sets up lives only as long
as that one file's traversal.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Union

from atip_lint.domain.constants import NODE_KINDS, RULE_CATEGORIES, SEVERITY_VALUES
from atip_lint.domain.entities import LintFix, LintMessage, LintSuggestion
from atip_lint.domain.errors import FixGenerationError
from atip_lint.domain.fixes import Fixer, merge_fixes
from atip_lint.domain.syntax import Path, SyntaxNode, find_nearest_node, position_at

if TYPE_CHECKING:
    from atip_lint.domain.config import LintConfig
    from atip_lint.domain.metadata import MetadataDocument
    from atip_lint.domain.protocols import ExecutableProberProtocol

logger = logging.getLogger(__name__)

FixFunction = Callable[[Fixer], Union[LintFix, list[LintFix]]]
VisitorCallback = Callable[[Any, Path], None]
RuleVisitor = dict[str, VisitorCallback]


@dataclass(frozen=True)
class RuleSuggestion:
    desc: str
    fix: FixFunction


@dataclass(frozen=True)
class RuleIssue:
    """What a rule reports: a message at a path, optionally with a fix generator."""

    message: str
    path: Path
    fix: Optional[FixFunction] = None
    suggest: tuple[RuleSuggestion, ...] = ()


class RuleContext:
    """Everything one rule instance may see while linting one file."""

    def __init__(
        self,
        *,
        rule_id: str,
        severity: int,
        options: Mapping[str, Any],
        file_path: str,
        source: str,
        syntax_root: Optional[SyntaxNode],
        document: "MetadataDocument",
        config: "LintConfig",
        messages: list[LintMessage],
        prober: Optional["ExecutableProberProtocol"] = None,
    ) -> None:
        self.rule_id = rule_id
        self.severity = severity
        self.options = options
        self.file_path = file_path
        self.source = source
        self.syntax_root = syntax_root
        self.document = document
        self.config = config
        self.prober = prober
        self._messages = messages
        self._fixer = Fixer(source, syntax_root)

    def option(self, name: str, default: Any) -> Any:
        """Rule option with a default; an explicit null in config also falls back."""
        value = self.options.get(name)
        return default if value is None else value

    def report(self, issue: RuleIssue) -> None:
        """Locate the issue in the source and append it to this file's messages."""
        node = find_nearest_node(self.syntax_root, issue.path)
        line, column = 1, 1
        end_line: Optional[int] = None
        end_column: Optional[int] = None
        node_range: Optional[tuple[int, int]] = None
        if node is not None:
            line, column = position_at(self.source, node.offset)
            end_line, end_column = position_at(self.source, node.end)
            node_range = (node.offset, node.end)

        fix = self._generate(issue.fix) if issue.fix is not None else None
        suggestions: list[LintSuggestion] = []
        for suggestion in issue.suggest:
            suggestion_fix = self._generate(suggestion.fix)
            if suggestion_fix is not None:
                suggestions.append(LintSuggestion(suggestion.desc, suggestion_fix))

        self._messages.append(
            LintMessage(
                rule_id=self.rule_id,
                severity=self.severity,
                message=issue.message,
                path=tuple(issue.path),
                line=line,
                column=column,
                end_line=end_line,
                end_column=end_column,
                range=node_range,
                fix=fix,
                suggestions=tuple(suggestions),
            )
        )

    def _generate(self, fix_function: FixFunction) -> Optional[LintFix]:
        try:
            result = fix_function(self._fixer)
        except FixGenerationError as exc:
            logger.debug("%s: no fix generated: %s", self.rule_id, exc)
            return None
        if not isinstance(result, list):
            return result
        if len(result) <= 1:
            return result[0] if result else None
        try:
            return merge_fixes(self.source, result)
        except FixGenerationError as exc:
            logger.debug("%s: %d edits could not be merged: %s", self.rule_id, len(result), exc)
            return None


@dataclass(frozen=True)
class RuleDefinition:
    """Static description of a rule plus its per-file visitor factory."""

    rule_id: str
    category: str
    description: str
    create: Callable[[RuleContext], RuleVisitor]
    fixable: bool = False
    default_severity: str = "warn"
    options_schema: Optional[Mapping[str, Any]] = None
    has_suggestions: bool = False
    docs: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.rule_id,
            "category": self.category,
            "description": self.description,
            "fixable": self.fixable,
            "defaultSeverity": self.default_severity,
        }


def define_rule(
    rule_id: str,
    *,
    category: str,
    description: str,
    create: Callable[[RuleContext], RuleVisitor],
    fixable: bool = False,
    default_severity: str = "warn",
    options_schema: Optional[Mapping[str, Any]] = None,
    has_suggestions: bool = False,
    docs: Optional[str] = None,
) -> RuleDefinition:
    """Validate and build a RuleDefinition. Used by built-in and plugin rules alike."""
    if not rule_id:
        raise ValueError("Rule must have an id")
    if category not in RULE_CATEGORIES:
        raise ValueError(f"Rule {rule_id} has unknown category: {category}")
    if not description:
        raise ValueError(f"Rule {rule_id} must have a description")
    if default_severity not in SEVERITY_VALUES:
        raise ValueError(f"Rule {rule_id} has invalid default severity: {default_severity}")
    if not callable(create):
        raise ValueError(f"Rule {rule_id} must have a create function")
    return RuleDefinition(
        rule_id=rule_id,
        category=category,
        description=description,
        create=create,
        fixable=fixable,
        default_severity=default_severity,
        options_schema=options_schema,
        has_suggestions=has_suggestions,
        docs=docs,
    )


@dataclass
class RuleRegistry:
    """Rule definitions keyed by id, in registration order."""

    _rules: dict[str, RuleDefinition] = field(default_factory=dict)

    def register(self, definition: RuleDefinition) -> None:
        if definition.rule_id in self._rules:
            raise ValueError(f"Rule already registered: {definition.rule_id}")
        self._rules[definition.rule_id] = definition

    def get(self, rule_id: str) -> Optional[RuleDefinition]:
        return self._rules.get(rule_id)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[RuleDefinition]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def ids(self) -> list[str]:
        return list(self._rules)

    def filter(self, category: Optional[str] = None, fixable_only: bool = False) -> list[RuleDefinition]:
        """Rules matching a category and/or fixability, for listing."""
        return [
            rule
            for rule in self._rules.values()
            if (category is None or rule.category == category) and (rule.fixable or not fixable_only)
        ]


def check_visitor(rule_id: str, visitor: Mapping[str, Any]) -> None:
    """Reject visitors that subscribe to node kinds the traversal never produces."""
    unknown = set(visitor) - set(NODE_KINDS)
    if unknown:
        raise ValueError(f"Rule {rule_id} subscribes to unknown node kinds: {sorted(unknown)}")
