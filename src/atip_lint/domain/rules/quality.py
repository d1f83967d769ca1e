"""Quality rules: required fields, effects presence and description quality."""

from typing import Any

from atip_lint.domain.constants import DEFAULT_PLACEHOLDER_PATTERNS
from atip_lint.domain.metadata import Argument, Command, MetadataDocument, Option
from atip_lint.domain.rules import RuleContext, RuleIssue, RuleVisitor, define_rule
from atip_lint.domain.syntax import Path

# Conservative defaults used to pad an effects object up to ``minFields``
PLACEHOLDER_EFFECTS: tuple[tuple[str, Any], ...] = (
    ("network", False),
    ("idempotent", True),
    ("subprocess", False),
    ("destructive", False),
    ("filesystem", {"read": False, "write": False, "delete": False}),
    ("interactive", {"stdin": "none", "prompts": False, "tty": False}),
)


def _missing(value: Any) -> bool:
    return value is None or value == "" or value == []


def _create_required_fields(context: RuleContext) -> RuleVisitor:
    def require(kind: str, node: Any, path: Path, fields: tuple[str, ...]) -> None:
        for name in fields:
            if _missing(getattr(node, name)):
                context.report(
                    RuleIssue(
                        message=f"{kind} is missing required field: {name}",
                        path=(*path, name),
                    )
                )

    def require_enum(node: Argument, path: Path) -> None:
        if node.type != "enum":
            return
        if not isinstance(node.enum, list) or not node.enum:
            context.report(
                RuleIssue(message="Enum type is missing required field: enum", path=(*path, "enum"))
            )

    def document(node: MetadataDocument, path: Path) -> None:
        require("Document", node, path, ("name", "version", "description"))

    def command(node: Command, path: Path) -> None:
        require("Command", node, path, ("description",))

    def argument(node: Argument, path: Path) -> None:
        require("Argument", node, path, ("name", "type", "description"))
        require_enum(node, path)

    def option(node: Option, path: Path) -> None:
        require("Option", node, path, ("name", "flags", "type", "description"))
        require_enum(node, path)

    return {"Document": document, "Command": command, "Argument": argument, "Option": option}


required_fields = define_rule(
    "required-fields",
    category="quality",
    description="Required fields should be present based on context",
    create=_create_required_fields,
    fixable=False,
    default_severity="error",
)


def _padding(existing: tuple[str, ...], needed: int) -> dict[str, Any]:
    padding: dict[str, Any] = {}
    for name, value in PLACEHOLDER_EFFECTS:
        if len(padding) >= needed:
            break
        if name not in existing:
            padding[name] = value
    return padding


def _create_effects_presence(context: RuleContext) -> RuleVisitor:
    min_fields = int(context.option("minFields", 1))
    required = list(context.option("requiredFields", []))

    def command(node: Command, path: Path) -> None:
        if node.is_group:
            return
        if node.effects is None:
            if "effects" in node.raw:
                context.report(
                    RuleIssue(message="Command effects must be an object", path=(*path, "effects"))
                )
                return
            minimal = _padding((), max(min_fields, 1))
            context.report(
                RuleIssue(
                    message="Command should declare effects metadata",
                    path=path,
                    fix=lambda fixer: fixer.insert_at(path, "effects", minimal),
                )
            )
            return

        effects_path = node.effects.path
        present = node.effects.field_names
        if len(present) < min_fields:
            padding = _padding(present, min_fields - len(present))
            context.report(
                RuleIssue(
                    message=(
                        f"Command effects should have at least {min_fields} field(s), "
                        f"but has {len(present)}"
                    ),
                    path=effects_path,
                    fix=(lambda fixer: fixer.insert_properties(effects_path, padding)) if padding else None,
                )
            )
        for name in required:
            if not node.effects.has(name):
                context.report(
                    RuleIssue(
                        message=f"Command effects should include required field: {name}",
                        path=effects_path,
                    )
                )

    return {"Command": command}


effects_presence = define_rule(
    "effects-presence",
    category="quality",
    description="Leaf commands should declare effects metadata",
    create=_create_effects_presence,
    fixable=True,
    default_severity="warn",
    options_schema={
        "type": "object",
        "properties": {
            "minFields": {"type": "integer", "minimum": 0},
            "requiredFields": {"type": "array", "items": {"type": "string"}},
        },
        "additionalProperties": False,
    },
)


def _create_description_quality(context: RuleContext) -> RuleVisitor:
    min_length = int(context.option("minLength", 10))
    max_length = int(context.option("maxLength", 200))
    placeholders = list(context.option("placeholderPatterns", list(DEFAULT_PLACEHOLDER_PATTERNS)))
    sentence_case = bool(context.option("requireSentenceCase", True))
    ending_punctuation = bool(context.option("requireEndingPunctuation", False))

    def check(description: Any, path: Path) -> None:
        if not isinstance(description, str) or not description:
            return

        trimmed = description.strip()
        if description != trimmed:
            context.report(
                RuleIssue(
                    message="Description has leading or trailing whitespace",
                    path=path,
                    fix=lambda fixer: fixer.replace_at(path, trimmed),
                )
            )
            # first violation on this node ends the checks for it
            return

        if len(description) < min_length:
            context.report(
                RuleIssue(message=f"Description is too short (minimum {min_length} characters)", path=path)
            )
        if len(description) > max_length:
            context.report(
                RuleIssue(message=f"Description is too long (maximum {max_length} characters)", path=path)
            )
        for pattern in placeholders:
            if pattern in description:
                context.report(
                    RuleIssue(message=f'Description contains placeholder text: "{pattern}"', path=path)
                )
        first = description[0]
        if sentence_case and first != first.upper():
            context.report(
                RuleIssue(message="Description should start with an uppercase letter", path=path)
            )
        if ending_punctuation and description[-1] not in ".?!":
            context.report(RuleIssue(message="Description should end with punctuation", path=path))

    def described(node: Any, path: Path) -> None:
        check(node.description, (*path, "description"))

    return {"Document": described, "Command": described, "Argument": described, "Option": described}


description_quality = define_rule(
    "description-quality",
    category="quality",
    description="Descriptions should be meaningful and properly formatted",
    create=_create_description_quality,
    fixable=True,
    default_severity="warn",
    options_schema={
        "type": "object",
        "properties": {
            "minLength": {"type": "integer", "minimum": 0},
            "maxLength": {"type": "integer", "minimum": 0},
            "placeholderPatterns": {"type": "array", "items": {"type": "string"}},
            "requireSentenceCase": {"type": "boolean"},
            "requireEndingPunctuation": {"type": "boolean"},
        },
        "additionalProperties": False,
    },
)
