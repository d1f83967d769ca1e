"""Security rules over declared effects."""

from atip_lint.domain.metadata import Effects
from atip_lint.domain.rules import RuleContext, RuleIssue, RuleVisitor, define_rule
from atip_lint.domain.syntax import Path


def _create_destructive_needs_reversible(context: RuleContext) -> RuleVisitor:
    check_unusual = bool(context.option("checkUnusualCombination", False))

    def effects(node: Effects, path: Path) -> None:
        if node.destructive is not True:
            return
        if not node.has("reversible"):
            context.report(
                RuleIssue(
                    message="Destructive operations should declare reversible field",
                    path=path,
                    fix=lambda fixer: fixer.insert_at(path, "reversible", False),
                )
            )
        elif node.reversible is True and check_unusual:
            context.report(
                RuleIssue(message="Destructive operation marked as reversible (unusual combination)", path=path)
            )

    return {"Effects": effects}


destructive_needs_reversible = define_rule(
    "destructive-needs-reversible",
    category="security",
    description="Destructive operations should declare reversibility",
    create=_create_destructive_needs_reversible,
    fixable=True,
    default_severity="warn",
    options_schema={
        "type": "object",
        "properties": {"checkUnusualCombination": {"type": "boolean"}},
        "additionalProperties": False,
    },
)


def _create_billable_check(context: RuleContext) -> RuleVisitor:
    def effects(node: Effects, path: Path) -> None:
        if node.cost is None:
            return
        if node.cost.get("billable") is True and node.idempotent is True:
            context.report(
                RuleIssue(
                    message="Billable operation marked as idempotent (may incur costs on retry)",
                    path=(*path, "idempotent"),
                )
            )

    return {"Effects": effects}


billable_needs_non_idempotent_check = define_rule(
    "billable-needs-non-idempotent-check",
    category="security",
    description="Billable operations should not be marked idempotent",
    create=_create_billable_check,
    fixable=False,
    default_severity="warn",
)
