"""Schema validator gateway: jsonschema implementation of SchemaValidatorProtocol."""

import json
import logging
from collections.abc import Mapping
from typing import Any, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError as JsonSchemaDefinitionError

from atip_lint.domain.errors import ConfigError, SchemaIssue
from atip_lint.domain.protocols import SchemaValidatorProtocol

logger = logging.getLogger(__name__)


def json_pointer(segments: tuple[Union[str, int], ...]) -> str:
    """RFC 6901 pointer for ``segments``; the document root is shown as "/"."""
    return "/" + "/".join(str(part).replace("~", "~0").replace("/", "~1") for part in segments)


class JsonSchemaValidatorGateway(SchemaValidatorProtocol):
    """Validates documents against a caller-supplied JSON Schema (Draft 7)."""

    def __init__(self, schema: Mapping[str, Any]) -> None:
        try:
            Draft7Validator.check_schema(schema)
        except JsonSchemaDefinitionError as exc:
            raise ConfigError("Invalid ATIP schema", cause=exc) from exc
        self._validator = Draft7Validator(schema)

    @classmethod
    def from_file(cls, schema_path: str) -> "JsonSchemaValidatorGateway":
        """Load the schema from a JSON file. Failures are configuration errors."""
        try:
            with open(schema_path, encoding="utf-8") as handle:
                schema = json.load(handle)
        except (OSError, ValueError) as exc:
            raise ConfigError("Cannot load schema", config_path=schema_path, cause=exc) from exc
        if not isinstance(schema, Mapping):
            raise ConfigError("Schema must be a JSON object", config_path=schema_path)
        logger.debug("Loaded ATIP schema from %s", schema_path)
        return cls(schema)

    def validate(self, document: Any) -> list[SchemaIssue]:
        errors = sorted(self._validator.iter_errors(document), key=lambda e: [str(part) for part in e.absolute_path])
        return [
            SchemaIssue(
                path=json_pointer(tuple(error.absolute_path)),
                message=error.message,
                keyword=str(error.validator),
                segments=tuple(error.absolute_path),
            )
            for error in errors
        ]
