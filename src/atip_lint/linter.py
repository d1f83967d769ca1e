"""
Public facade: build a linter from raw configuration and lint text, files
or glob patterns.

    linter = create_linter({"extends": "recommended"})
    result = linter.lint_text(source, "tool.json")
"""

import threading
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

from atip_lint.domain.config import ConfigResolver, LintConfig
from atip_lint.domain.entities import LintOptions, LintResult, LintResults
from atip_lint.domain.protocols import (
    ExecutableProberProtocol,
    SchemaValidatorProtocol,
    TelemetryPort,
)
from atip_lint.domain.rules import RuleRegistry
from atip_lint.infrastructure.config_file_loader import ConfigFileLoader
from atip_lint.infrastructure.di.container import AtipLintContainer
from atip_lint.infrastructure.gateways.schema_validator_gateway import JsonSchemaValidatorGateway
from atip_lint.use_cases.lint_batch import LintBatchUseCase
from atip_lint.use_cases.lint_file import LintFileUseCase


class Linter:
    """Holds one resolved configuration and the collaborators built for it."""

    def __init__(self, lint_file_use_case: LintFileUseCase, lint_batch_use_case: LintBatchUseCase) -> None:
        self._file = lint_file_use_case
        self._batch = lint_batch_use_case

    @property
    def config(self) -> LintConfig:
        return self._file.config

    @property
    def registry(self) -> RuleRegistry:
        return self._file.registry

    def lint_text(
        self,
        text: str,
        file_path: str = "<input>",
        options: Optional[LintOptions] = None,
    ) -> LintResult:
        return self._file.lint_text(text, file_path, options)

    def lint_file(self, file_path: str, options: Optional[LintOptions] = None) -> LintResult:
        return self._file.lint_file(file_path, options)

    def lint_files(
        self,
        patterns: Sequence[str],
        options: Optional[LintOptions] = None,
        cancel_event: Optional[threading.Event] = None,
        jobs: int = 1,
    ) -> LintResults:
        """Expand ``patterns`` (files, directories, globs) and lint every match."""
        return self._batch.lint_paths(patterns, options, cancel_event=cancel_event, jobs=jobs)


def load_config(start_dir: Optional[str] = None, config_path: Optional[str] = None) -> Optional[dict[str, Any]]:
    """Discover and read the raw configuration; None when no config file exists."""
    raw, _ = ConfigFileLoader.load_config_from_fs(start_dir, config_path)
    return raw


def create_linter(
    config: Union[Mapping[str, Any], LintConfig, None] = None,
    *,
    schema: Optional[Mapping[str, Any]] = None,
    schema_validator: Optional[SchemaValidatorProtocol] = None,
    prober: Optional[ExecutableProberProtocol] = None,
    registry: Optional[RuleRegistry] = None,
    presets: Optional[Mapping[str, Mapping[str, Any]]] = None,
    telemetry: Optional[TelemetryPort] = None,
    container: Optional[AtipLintContainer] = None,
) -> Linter:
    """
    Build a Linter.

    ``config`` is a raw configuration mapping (resolved against the built-in
    presets), an already resolved LintConfig, or None for the defaults. The
    schema validator comes from ``schema_validator``, else ``schema``, else
    the configuration's ``schemaPath``. Raises ConfigError for invalid
    configuration.
    """
    container = container or AtipLintContainer.get_instance()
    if isinstance(config, LintConfig):
        resolved = config
    else:
        resolver = ConfigResolver(presets if presets is not None else container.get_preset_registry().get_presets())
        resolved = resolver.resolve(config)

    if schema_validator is None:
        if schema is not None:
            schema_validator = JsonSchemaValidatorGateway(schema)
        elif resolved.schema_path is not None:
            schema_validator = JsonSchemaValidatorGateway.from_file(resolved.schema_path)

    if prober is None and resolved.executable_checks:
        prober = container.get_executable_prober()

    telemetry = telemetry or container.get_telemetry_port()
    filesystem = container.get_filesystem_gateway()
    lint_file_use_case = LintFileUseCase(
        registry=registry or container.get_rule_registry(),
        config=resolved,
        syntax_gateway=container.get_syntax_gateway(),
        filesystem=filesystem,
        telemetry=telemetry,
        schema_validator=schema_validator,
        prober=prober,
    )
    lint_batch_use_case = LintBatchUseCase(lint_file_use_case, filesystem, telemetry)
    return Linter(lint_file_use_case, lint_batch_use_case)
