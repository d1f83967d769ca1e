"""
Executable rules. They probe the described tool and are inert unless
``executableChecks`` is enabled and a prober is available.
"""

import json
import logging
from typing import Optional

from atip_lint.domain.metadata import MetadataDocument
from atip_lint.domain.rules import RuleContext, RuleIssue, RuleVisitor, define_rule
from atip_lint.domain.syntax import Path

logger = logging.getLogger(__name__)


def _binary_for(context: RuleContext, document: MetadataDocument) -> Optional[str]:
    if not isinstance(document.name, str) or not document.name:
        return None
    configured = context.option("binaryPaths", {}).get(document.name)
    if isinstance(configured, str):
        return configured
    return context.config.binary_paths.get(document.name, document.name)


def _enabled(context: RuleContext) -> bool:
    if not context.config.executable_checks:
        return False
    if context.prober is None:
        logger.debug("%s: executable checks enabled but no prober configured", context.rule_id)
        return False
    return True


def _create_binary_exists(context: RuleContext) -> RuleVisitor:
    if not _enabled(context):
        return {}

    def document(node: MetadataDocument, path: Path) -> None:
        binary = _binary_for(context, node)
        if binary is None or context.prober is None:
            return
        if context.prober.locate(binary) is None:
            context.report(RuleIssue(message=f"Tool binary not found: {binary}", path=("name",)))

    return {"Document": document}


binary_exists = define_rule(
    "binary-exists",
    category="executable",
    description="Tool binary should exist at expected path",
    create=_create_binary_exists,
    fixable=False,
    default_severity="warn",
    options_schema={
        "type": "object",
        "properties": {"binaryPaths": {"type": "object", "additionalProperties": {"type": "string"}}},
        "additionalProperties": False,
    },
)


def _create_agent_flag_works(context: RuleContext) -> RuleVisitor:
    if not _enabled(context):
        return {}
    timeout = float(context.option("timeout", 5.0))
    skip_if_missing = bool(context.option("skipIfMissing", True))

    def document(node: MetadataDocument, path: Path) -> None:
        if node.trust is None or node.trust.source != "native":
            return
        binary = _binary_for(context, node)
        if binary is None or context.prober is None:
            return
        if context.prober.locate(binary) is None:
            if not skip_if_missing:
                context.report(RuleIssue(message=f"Cannot check --agent: binary not found: {binary}", path=("name",)))
            return

        result = context.prober.probe(binary, ("--agent",), timeout)
        if not result.ok:
            context.report(
                RuleIssue(message=f"`{binary} --agent` failed: {result.reason}", path=("trust", "source"))
            )
            return
        try:
            emitted = json.loads(result.stdout)
        except ValueError:
            context.report(
                RuleIssue(message=f"`{binary} --agent` did not emit valid JSON", path=("trust", "source"))
            )
            return
        if not isinstance(emitted, dict) or "atip" not in emitted:
            context.report(
                RuleIssue(message=f"`{binary} --agent` output is not ATIP metadata", path=("trust", "source"))
            )

    return {"Document": document}


agent_flag_works = define_rule(
    "agent-flag-works",
    category="executable",
    description="Native tools should respond correctly to --agent",
    create=_create_agent_flag_works,
    fixable=False,
    default_severity="warn",
    options_schema={
        "type": "object",
        "properties": {
            "timeout": {"type": "number", "exclusiveMinimum": 0},
            "skipIfMissing": {"type": "boolean"},
            "binaryPaths": {"type": "object", "additionalProperties": {"type": "string"}},
        },
        "additionalProperties": False,
    },
)
