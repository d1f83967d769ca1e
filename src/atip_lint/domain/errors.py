"""Exception hierarchy for atip-lint."""

from dataclasses import dataclass
from typing import Optional, Union


class LintError(Exception):
    """Base class for all atip-lint errors. Carries a stable error code."""

    code: str = "LINT_ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ConfigError(LintError):
    """Configuration could not be loaded or resolved. Fatal for the whole invocation."""

    code = "CONFIG_ERROR"

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        full_message = f"{message} (config: {config_path})" if config_path else message
        if cause is not None:
            full_message = f"{full_message}: {cause}"
        super().__init__(full_message)
        self.config_path = config_path
        self.cause = cause


class FileError(LintError):
    """A lint target could not be read."""

    code = "FILE_ERROR"

    def __init__(self, message: str, file_path: str, cause: Optional[BaseException] = None) -> None:
        full_message = f"{message} (file: {file_path})"
        if cause is not None:
            full_message = f"{full_message}: {cause}"
        super().__init__(full_message)
        self.file_path = file_path
        self.cause = cause


@dataclass(frozen=True)
class SchemaIssue:
    """
    One structural failure reported by the schema validator.

    ``path`` is the JSON Pointer shown to users; ``segments`` is the same
    location as keys (str) and array indices (int).
    """

    path: str
    message: str
    keyword: str
    segments: tuple[Union[str, int], ...] = ()


class SchemaError(LintError):
    """A document is valid JSON but does not conform to the ATIP schema."""

    code = "SCHEMA_ERROR"

    def __init__(self, message: str, file_path: str, schema_errors: list[SchemaIssue]) -> None:
        count = len(schema_errors)
        plural = "" if count == 1 else "s"
        super().__init__(f"{message} (file: {file_path}, {count} error{plural})")
        self.file_path = file_path
        self.schema_errors = schema_errors


class ExecutableError(LintError):
    """Probing a tool binary failed."""

    code = "EXECUTABLE_ERROR"

    def __init__(self, message: str, tool_name: str, cause: Optional[BaseException] = None) -> None:
        full_message = f"{message} (tool: {tool_name})"
        if cause is not None:
            full_message = f"{full_message}: {cause}"
        super().__init__(full_message)
        self.tool_name = tool_name
        self.cause = cause


class FixGenerationError(LintError):
    """A rule's fix generator could not produce an edit (e.g. target node missing)."""

    code = "FIX_ERROR"
