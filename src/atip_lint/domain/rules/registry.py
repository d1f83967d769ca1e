"""Built-in rule registry."""

from atip_lint.domain.rules import RuleDefinition, RuleRegistry
from atip_lint.domain.rules.consistency import consistent_naming, duplicate_flags, effects_value_validity
from atip_lint.domain.rules.executable import agent_flag_works, binary_exists
from atip_lint.domain.rules.quality import description_quality, effects_presence, required_fields
from atip_lint.domain.rules.security import billable_needs_non_idempotent_check, destructive_needs_reversible
from atip_lint.domain.rules.trust import trust_requirements

BUILTIN_RULES: tuple[RuleDefinition, ...] = (
    required_fields,
    effects_presence,
    duplicate_flags,
    effects_value_validity,
    destructive_needs_reversible,
    billable_needs_non_idempotent_check,
    trust_requirements,
    description_quality,
    consistent_naming,
    binary_exists,
    agent_flag_works,
)


def builtin_registry() -> RuleRegistry:
    """A fresh registry holding every built-in rule, in declaration order."""
    registry = RuleRegistry()
    for definition in BUILTIN_RULES:
        registry.register(definition)
    return registry
