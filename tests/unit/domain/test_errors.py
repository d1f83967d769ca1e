from atip_lint.domain.errors import (
    ConfigError,
    ExecutableError,
    FileError,
    FixGenerationError,
    LintError,
    SchemaError,
    SchemaIssue,
)


def test_codes_and_hierarchy() -> None:
    errors = [
        ConfigError("bad"),
        FileError("unreadable", "tool.json"),
        SchemaError("invalid", "tool.json", []),
        ExecutableError("failed", "mytool"),
        FixGenerationError("no node"),
    ]

    assert all(isinstance(error, LintError) for error in errors)
    assert [error.code for error in errors] == [
        "CONFIG_ERROR",
        "FILE_ERROR",
        "SCHEMA_ERROR",
        "EXECUTABLE_ERROR",
        "FIX_ERROR",
    ]


def test_messages_carry_context() -> None:
    cause = OSError("permission denied")

    assert str(ConfigError("Cannot read config file", config_path=".atiplintrc.json", cause=cause)) == (
        "Cannot read config file (config: .atiplintrc.json): permission denied"
    )
    assert str(FileError("Cannot read file", "tool.json", cause)) == "Cannot read file (file: tool.json): permission denied"
    assert str(ExecutableError("Cannot run binary", "mytool")) == "Cannot run binary (tool: mytool)"


def test_schema_error_counts_issues() -> None:
    issues = [SchemaIssue("/", "'atip' is a required property", "required")]

    error = SchemaError("Schema validation failed", "tool.json", issues * 2)

    assert str(error) == "Schema validation failed (file: tool.json, 2 errors)"
    assert error.schema_errors == issues * 2
    assert str(SchemaError("x", "t.json", issues)).endswith("1 error)")
