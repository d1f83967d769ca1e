"""Tests for required-fields, effects-presence and description-quality."""

import json
import unittest

from tests.lint_test_utils import messages_for, run_rules


class TestRequiredFields(unittest.TestCase):
    def test_missing_document_name_is_one_error_at_name(self) -> None:
        result = run_rules(
            {"version": "1.0.0", "description": "A tool", "commands": {"run": {}}},
            {"required-fields": "error", "effects-presence": "warn"},
        )

        name_errors = [m for m in result.messages if m.path == ("name",)]
        self.assertEqual(len(name_errors), 1)
        self.assertEqual(name_errors[0].message, "Document is missing required field: name")
        self.assertEqual(name_errors[0].severity, 2)
        # the rest of the file is still linted
        self.assertIn("Command is missing required field: description", messages_for(result, "required-fields"))
        self.assertEqual(messages_for(result, "effects-presence"), ["Command should declare effects metadata"])

    def test_missing_name_is_located_at_document_root(self) -> None:
        result = run_rules('{"version": "1", "description": "d"}', {"required-fields": "error"})

        (message,) = result.messages
        self.assertEqual((message.line, message.column), (1, 1))

    def test_argument_and_option_fields(self) -> None:
        result = run_rules(
            {
                "name": "t",
                "version": "1",
                "description": "d",
                "arguments": [{"name": "src", "type": "enum", "description": "Source"}],
                "globalOptions": [{"name": "verbose", "type": "boolean", "description": "Verbose"}],
            },
            {"required-fields": "error"},
        )

        self.assertEqual(
            messages_for(result, "required-fields"),
            ["Enum type is missing required field: enum", "Option is missing required field: flags"],
        )
        self.assertEqual(result.messages[1].path, ("globalOptions", 0, "flags"))

    def test_empty_string_counts_as_missing(self) -> None:
        result = run_rules({"name": "", "version": "1", "description": "d"}, {"required-fields": "error"})

        self.assertEqual(messages_for(result, "required-fields"), ["Document is missing required field: name"])


class TestEffectsPresence(unittest.TestCase):
    def test_leaf_without_effects_is_fixed_with_minimal_object(self) -> None:
        source = '{"commands": {"run": {"description": "Run it"}}}'

        result = run_rules(source, {"effects-presence": "warn"}, fix=True)

        self.assertEqual(result.warning_count, 1)
        self.assertEqual(result.fixable_warning_count, 1)
        self.assertEqual(result.messages[0].path, ("commands", "run"))
        fixed = json.loads(result.output)
        self.assertEqual(fixed["commands"]["run"]["effects"], {"network": False})

    def test_groups_are_exempt(self) -> None:
        result = run_rules(
            {"commands": {"repo": {"commands": {"clone": {"effects": {"network": True}}}}}},
            {"effects-presence": "warn"},
        )

        self.assertEqual(result.messages, ())

    def test_min_fields_pads_existing_object(self) -> None:
        source = '{"commands": {"run": {"effects": {"network": true}}}}'

        result = run_rules(source, {"effects-presence": ["warn", {"minFields": 3}]}, fix=True)

        self.assertEqual(
            messages_for(result, "effects-presence"),
            ["Command effects should have at least 3 field(s), but has 1"],
        )
        fixed = json.loads(result.output)
        self.assertEqual(fixed["commands"]["run"]["effects"], {"network": True, "idempotent": True, "subprocess": False})
        relinted = run_rules(result.output, {"effects-presence": ["warn", {"minFields": 3}]})
        self.assertEqual(relinted.messages, ())

    def test_required_fields_option(self) -> None:
        result = run_rules(
            {"commands": {"run": {"effects": {"network": True}}}},
            {"effects-presence": ["warn", {"requiredFields": ["idempotent"]}]},
        )

        self.assertEqual(
            messages_for(result, "effects-presence"),
            ["Command effects should include required field: idempotent"],
        )

    def test_non_object_effects(self) -> None:
        result = run_rules({"commands": {"run": {"effects": True}}}, {"effects-presence": "warn"})

        self.assertEqual(messages_for(result, "effects-presence"), ["Command effects must be an object"])
        self.assertIsNone(result.messages[0].fix)


class TestDescriptionQuality(unittest.TestCase):
    def test_whitespace_short_circuits_other_checks(self) -> None:
        source = '{"description": "  Short  "}'

        result = run_rules(source, {"description-quality": ["warn", {"minLength": 10}]}, fix=True)

        self.assertEqual(
            messages_for(result, "description-quality"),
            ["Description has leading or trailing whitespace"],
        )
        self.assertEqual(result.output, '{"description": "Short"}')

    def test_short_lowercase_placeholder(self) -> None:
        result = run_rules({"description": "TODO"}, {"description-quality": "warn"})

        self.assertEqual(
            messages_for(result, "description-quality"),
            [
                "Description is too short (minimum 10 characters)",
                'Description contains placeholder text: "TODO"',
            ],
        )

    def test_sentence_case_and_punctuation(self) -> None:
        rules = {"description-quality": ["warn", {"requireEndingPunctuation": True}]}

        result = run_rules({"commands": {"run": {"description": "runs the thing quickly"}}}, rules)

        self.assertEqual(
            messages_for(result, "description-quality"),
            ["Description should start with an uppercase letter", "Description should end with punctuation"],
        )
        self.assertEqual(result.messages[0].path, ("commands", "run", "description"))

    def test_too_long(self) -> None:
        result = run_rules({"description": "A" + "a" * 60}, {"description-quality": ["warn", {"maxLength": 50}]})

        self.assertEqual(messages_for(result, "description-quality"), ["Description is too long (maximum 50 characters)"])

    def test_sentence_case_can_be_disabled(self) -> None:
        result = run_rules(
            {"description": "lowercase but long enough"},
            {"description-quality": ["warn", {"requireSentenceCase": False}]},
        )

        self.assertEqual(result.messages, ())
