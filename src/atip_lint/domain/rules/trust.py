"""Trust rule: the claimed provenance tier must match the metadata's completeness."""

from atip_lint.domain.metadata import MetadataDocument
from atip_lint.domain.rules import RuleContext, RuleIssue, RuleVisitor, define_rule
from atip_lint.domain.syntax import Path


def _create_trust_requirements(context: RuleContext) -> RuleVisitor:
    native_requires = list(context.option("nativeRequires", ["effects", "description"]))
    vendor_requires = list(context.option("vendorRequires", ["homepage", "version"]))

    def check_native(node: MetadataDocument) -> None:
        for command in node.iter_commands():
            if "effects" in native_requires and command.effects is None:
                context.report(
                    RuleIssue(
                        message="Native trust requires all commands to have effects",
                        path=(*command.path, "effects"),
                    )
                )
            if "description" in native_requires and not command.description:
                context.report(
                    RuleIssue(
                        message="Native trust requires all commands to have a description",
                        path=(*command.path, "description"),
                    )
                )

    def check_vendor(node: MetadataDocument) -> None:
        for name in vendor_requires:
            if not node.raw.get(name):
                context.report(RuleIssue(message=f"Vendor trust requires field: {name}", path=(name,)))

    def document(node: MetadataDocument, path: Path) -> None:
        if node.trust is None:
            return
        source = node.trust.source
        if source == "native":
            check_native(node)
        elif source == "vendor":
            check_vendor(node)
        elif source == "inferred" and node.trust.verified is not False:
            context.report(
                RuleIssue(message="Inferred trust should have verified: false", path=("trust", "verified"))
            )

    return {"Document": document}


trust_requirements = define_rule(
    "trust-requirements",
    category="trust",
    description="Trust source should match metadata completeness",
    create=_create_trust_requirements,
    fixable=False,
    default_severity="warn",
    options_schema={
        "type": "object",
        "properties": {
            "nativeRequires": {"type": "array", "items": {"enum": ["effects", "description"]}},
            "vendorRequires": {"type": "array", "items": {"type": "string"}},
        },
        "additionalProperties": False,
    },
)
