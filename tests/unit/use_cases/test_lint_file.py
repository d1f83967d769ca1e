"""Tests for LintFileUseCase."""

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from atip_lint.domain.entities import LintOptions
from atip_lint.domain.errors import ConfigError
from atip_lint.domain.rules import RuleIssue, RuleRegistry, define_rule
from atip_lint.infrastructure.gateways.schema_validator_gateway import JsonSchemaValidatorGateway
from atip_lint.use_cases.lint_file import LintFileUseCase
from tests.lint_test_utils import make_use_case, to_source

REQUIRE_ATIP = {"type": "object", "required": ["atip"]}


class TestLintText:
    def test_clean_document_under_recommended(self, sample_document: dict[str, Any]) -> None:
        telemetry = MagicMock()
        use_case = make_use_case({"extends": "recommended"}, telemetry=telemetry)

        result = use_case.lint_text(to_source(sample_document), "tool.json")

        assert result.messages == ()
        assert result.error_count == result.warning_count == 0
        assert result.output is None
        telemetry.step.assert_any_call("No ATIP schema configured; skipping schema validation")

    def test_invalid_json_is_one_parse_error(self) -> None:
        use_case = make_use_case({"extends": "recommended"})

        result = use_case.lint_text('{"name": ', "broken.json")

        (message,) = result.messages
        assert message.rule_id == "parse-error"
        assert message.severity == 2
        assert message.message.startswith("Invalid JSON: ")
        assert message.line == 1
        assert result.error_count == 1

    def test_schema_errors_skip_rules(self) -> None:
        use_case = make_use_case(
            {"rules": {"required-fields": "error"}},
            schema_validator=JsonSchemaValidatorGateway(REQUIRE_ATIP),
        )

        result = use_case.lint_text('{"description": "d"}', "tool.json")

        assert [m.rule_id for m in result.messages] == ["schema-error"]
        assert result.messages[0].message == "Schema violation at /: 'atip' is a required property"
        assert (result.messages[0].line, result.messages[0].column) == (1, 1)

    def test_schema_error_is_located_at_offending_node(self) -> None:
        schema = {"type": "object", "properties": {"version": {"type": "string"}}}
        use_case = make_use_case({}, schema_validator=JsonSchemaValidatorGateway(schema))

        result = use_case.lint_text('{\n  "version": 1\n}', "tool.json")

        (message,) = result.messages
        assert message.path == ("version",)
        assert message.line == 2
        assert message.message == "Schema violation at /version: 1 is not of type 'string'"

    def test_schema_issue_keys_keep_their_exact_names(self) -> None:
        schema = {
            "type": "object",
            "properties": {
                "commands": {"type": "object", "additionalProperties": {"type": "object", "required": ["description"]}}
            },
        }
        use_case = make_use_case({}, schema_validator=JsonSchemaValidatorGateway(schema))

        result = use_case.lint_text(to_source({"commands": {"2": {}, "a/b": {}, "\u00b2": {}}}), "tool.json")

        assert [m.path for m in result.messages] == [("commands", "2"), ("commands", "a/b"), ("commands", "\u00b2")]
        assert [m.line for m in result.messages] == [3, 4, 5]
        assert result.messages[1].message == "Schema violation at /commands/a~1b: 'description' is a required property"

    def test_schema_messages_are_one_per_issue_and_stable(self) -> None:
        schema = {"type": "object", "required": ["atip"], "properties": {"name": {"type": "string"}}}
        use_case = make_use_case({}, schema_validator=JsonSchemaValidatorGateway(schema))
        source = '{"name": 3, "version": "1"}'

        first = use_case.lint_text(source, "tool.json")
        second = use_case.lint_text(source, "tool.json")

        assert [m.message for m in first.messages] == [
            "Schema violation at /: 'atip' is a required property",
            "Schema violation at /name: 3 is not of type 'string'",
        ]
        assert first.error_count == 2
        assert first == second

    def test_oversized_integer_is_a_parse_error(self) -> None:
        use_case = make_use_case({"extends": "recommended"})

        result = use_case.lint_text('{"name": "t", "n": ' + "9" * 5000 + "}", "tool.json")

        (message,) = result.messages
        assert message.rule_id == "parse-error"
        assert message.message.startswith("Invalid JSON: Number literal too large")
        assert (message.line, message.column) == (1, 20)

    def test_schema_validation_can_be_disabled(self) -> None:
        use_case = make_use_case(
            {"rules": {"required-fields": "error"}, "schemaValidation": False},
            schema_validator=JsonSchemaValidatorGateway(REQUIRE_ATIP),
        )

        result = use_case.lint_text('{"description": "d", "version": "1"}', "tool.json")

        assert [m.rule_id for m in result.messages] == ["required-fields"]

    def test_linting_is_deterministic(self, sample_document: dict[str, Any]) -> None:
        sample_document["commands"]["list"]["description"] = "list"
        del sample_document["commands"]["delete"]["effects"]["reversible"]
        use_case = make_use_case({"extends": "strict"})
        source = to_source(sample_document)

        first = use_case.lint_text(source, "tool.json")
        second = use_case.lint_text(source, "tool.json")

        assert first.messages
        assert first.messages == second.messages

    def test_rules_set_to_off_are_skipped(self) -> None:
        use_case = make_use_case({"extends": "recommended", "rules": {"required-fields": "off"}})

        result = use_case.lint_text('{"description": "Describes the tool well"}', "tool.json")

        assert [m for m in result.messages if m.rule_id == "required-fields"] == []

    def test_quiet_drops_warnings(self) -> None:
        use_case = make_use_case({"rules": {"required-fields": "error", "effects-presence": "warn"}})
        source = to_source({"commands": {"run": {}}})

        loud = use_case.lint_text(source, "tool.json")
        quiet = use_case.lint_text(source, "tool.json", LintOptions(quiet=True))

        assert loud.warning_count == 1
        assert quiet.warning_count == 0
        assert quiet.error_count == loud.error_count > 0
        assert all(m.severity == 2 for m in quiet.messages)

    def test_overrides_apply_by_file_path(self) -> None:
        use_case = make_use_case(
            {
                "rules": {"required-fields": "error"},
                "overrides": [{"files": ["fixtures/*.json"], "rules": {"required-fields": "off"}}],
            }
        )

        assert use_case.lint_text("{}", "tool.json").error_count == 3
        assert use_case.lint_text("{}", "fixtures/partial.json").messages == ()


class TestFixes:
    def test_fix_then_relint_is_idempotent(self) -> None:
        source = to_source(
            {
                "description": "  A tool with padding  ",
                "commands": {
                    "rm": {"description": "Remove things", "effects": {"destructive": True}},
                    "ls": {"description": "List things"},
                },
            }
        )
        use_case = make_use_case({"extends": "recommended", "rules": {"required-fields": "off"}})

        fixed = use_case.lint_text(source, "tool.json", LintOptions(fix=True))

        assert fixed.fixable_count == 3
        assert fixed.applied_fixes == 3
        assert fixed.fix_conflicts == ()
        document = json.loads(fixed.output)
        assert document["description"] == "A tool with padding"
        assert document["commands"]["rm"]["effects"] == {"destructive": True, "reversible": False}
        assert document["commands"]["ls"]["effects"] == {"network": False}
        relinted = use_case.lint_text(fixed.output, "tool.json", LintOptions(fix=True))
        assert relinted.fixable_count == 0
        assert relinted.output is None

    def test_output_unset_without_fix_option(self) -> None:
        use_case = make_use_case({"rules": {"effects-presence": "warn"}})

        result = use_case.lint_text('{"commands": {"run": {}}}', "tool.json")

        assert result.fixable_count == 1
        assert result.output is None

    def test_overlapping_fixes_are_reported_as_conflicts(self) -> None:
        def renamer(replacement: str):
            def create(context):
                def document(node, path):
                    context.report(
                        RuleIssue(
                            message=f"rename to {replacement}",
                            path=("name",),
                            fix=lambda fixer: fixer.replace_at(("name",), replacement),
                        )
                    )

                return {"Document": document}

            return create

        registry = RuleRegistry()
        registry.register(define_rule("rename-a", category="quality", description="Rename", create=renamer("a"), fixable=True))
        registry.register(define_rule("rename-b", category="quality", description="Rename", create=renamer("b"), fixable=True))
        base = make_use_case({"rules": {"rename-a": "warn", "rename-b": "warn"}})
        use_case = LintFileUseCase(
            registry=registry,
            config=base.config,
            syntax_gateway=base.syntax_gateway,
            filesystem=base.filesystem,
            telemetry=MagicMock(),
        )

        result = use_case.lint_text('{"name": "x"}', "tool.json", LintOptions(fix=True))

        assert result.applied_fixes == 1
        assert len(result.fix_conflicts) == 1
        assert result.output == '{"name": "a"}'

    def test_fix_returning_several_edits_applies_all_of_them(self) -> None:
        def create(context):
            def document(node, path):
                context.report(
                    RuleIssue(
                        message="normalise",
                        path=(),
                        fix=lambda fixer: [fixer.replace_at(("name",), "t"), fixer.replace_at(("version",), "2")],
                    )
                )

            return {"Document": document}

        registry = RuleRegistry()
        registry.register(define_rule("normalise", category="quality", description="Normalise", create=create, fixable=True))
        base = make_use_case({"rules": {"normalise": "warn"}})
        use_case = LintFileUseCase(
            registry=registry,
            config=base.config,
            syntax_gateway=base.syntax_gateway,
            filesystem=base.filesystem,
            telemetry=MagicMock(),
        )

        result = use_case.lint_text('{"name": "x", "version": "1"}', "tool.json", LintOptions(fix=True))

        assert result.messages[0].fix.range == (9, 28)
        assert result.applied_fixes == 1
        assert result.output == '{"name": "t", "version": "2"}'


class TestLintFile:
    def test_reads_file_from_disk(self, tmp_path, sample_document: dict[str, Any]) -> None:
        path = tmp_path / "tool.json"
        path.write_text(to_source(sample_document), encoding="utf-8")

        result = make_use_case({"extends": "recommended"}).lint_file(str(path))

        assert result.file_path == str(path)
        assert result.messages == ()

    def test_unreadable_file_is_one_file_error(self, tmp_path) -> None:
        telemetry = MagicMock()
        missing = str(tmp_path / "missing.json")

        result = make_use_case({"extends": "recommended"}, telemetry=telemetry).lint_file(missing)

        (message,) = result.messages
        assert message.rule_id == "file-error"
        assert message.message.startswith("Cannot read file: ")
        assert result.error_count == 1
        telemetry.error.assert_called_once()


class TestConfiguration:
    def test_unknown_rule_is_warned_once(self) -> None:
        telemetry = MagicMock()

        make_use_case(
            {
                "rules": {"no-such-rule": "error"},
                "overrides": [{"files": ["*.json"], "rules": {"no-such-rule": "warn"}}],
            },
            telemetry=telemetry,
        )

        telemetry.warning.assert_called_once_with("Unknown rule in configuration, skipped: no-such-rule")

    def test_unknown_rule_does_not_break_linting(self) -> None:
        use_case = make_use_case({"rules": {"no-such-rule": "error", "required-fields": "error"}})

        result = use_case.lint_text('{"name": "t", "version": "1", "description": "d"}', "tool.json")

        assert result.messages == ()

    @pytest.mark.parametrize(
        "rule_config",
        [
            {"description-quality": ["warn", {"minLength": "ten"}]},
            {"consistent-naming": ["warn", {"commandCase": "SHOUTING"}]},
            {"destructive-needs-reversible": ["warn", {"unknownOption": True}]},
        ],
    )
    def test_invalid_rule_options_raise(self, rule_config: dict[str, Any]) -> None:
        with pytest.raises(ConfigError, match="Invalid options for rule"):
            make_use_case({"rules": rule_config})
