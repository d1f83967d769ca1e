"""CLI entry points for atip-lint - Thin Controller using Typer."""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import typer

from atip_lint.domain.constants import RULE_CATEGORIES, SEVERITY_VALUES, TOOL_NAME, TOOL_VERSION
from atip_lint.domain.entities import LintOptions, LintResults
from atip_lint.domain.errors import ConfigError
from atip_lint.domain.protocols import FileSystemProtocol, TelemetryPort
from atip_lint.domain.rules import RuleRegistry
from atip_lint.infrastructure.config_file_loader import ConfigFileLoader
from atip_lint.infrastructure.di.container import AtipLintContainer
from atip_lint.infrastructure.services.preset_registry import PresetRegistry
from atip_lint.interface.reporters import ResultFormatter
from atip_lint.linter import create_linter

EXIT_OK = 0
EXIT_LINT_FAILURE = 1
EXIT_USAGE = 2

DEFAULT_PRESET = "recommended"

# What `atip-lint --agent` prints: this tool described in its own format
AGENT_METADATA: dict[str, Any] = {
    "atip": {"version": "0.4"},
    "name": TOOL_NAME,
    "version": TOOL_VERSION,
    "description": "Lint ATIP metadata for quality issues beyond schema validation",
    "trust": {"source": "native", "verified": True},
    "commands": {
        "lint": {
            "description": "Lint ATIP metadata files for quality issues",
            "effects": {"filesystem": {"read": True, "write": False}, "network": False, "idempotent": True},
        },
        "init": {
            "description": "Initialize a lint configuration file",
            "effects": {"filesystem": {"read": False, "write": True}, "network": False, "idempotent": False},
        },
        "list-rules": {
            "description": "List available lint rules",
            "effects": {"network": False, "idempotent": True},
        },
    },
}


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    container: AtipLintContainer
    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    rule_registry: RuleRegistry
    preset_registry: PresetRegistry


class CLIAppFactory:
    """Creates the Typer app. No top-level functions."""

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            force=True,
        )

    @staticmethod
    def parse_rule_overrides(rules: list[str], disabled: list[str]) -> dict[str, str]:
        """Turn ``--rule id:severity`` and ``--disable-rule id`` into raw rule entries."""
        overrides: dict[str, str] = {}
        for entry in rules:
            rule_id, _, severity = entry.partition(":")
            severity = severity or "error"
            if not rule_id or severity not in SEVERITY_VALUES:
                raise typer.BadParameter(f"Expected RULE_ID[:off|warn|error], got {entry!r}", param_hint="--rule")
            overrides[rule_id] = severity
        for rule_id in disabled:
            overrides[rule_id] = "off"
        return overrides

    @staticmethod
    def load_raw_config(config_path: Optional[Path]) -> dict[str, Any]:
        """Explicit or discovered configuration; the recommended preset when none exists."""
        raw, found = ConfigFileLoader.load_config_from_fs(config_path=str(config_path) if config_path else None)
        if raw is None:
            return {"extends": DEFAULT_PRESET}
        logging.getLogger(__name__).debug("Loaded configuration from %s", found)
        return raw

    @staticmethod
    def write_fixes(deps: CLIDependencies, results: LintResults) -> int:
        written = 0
        for result in results.results:
            if result.output is not None and result.output != result.source:
                deps.filesystem.write_text(result.file_path, result.output)
                written += 1
        return written

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name=TOOL_NAME,
            help="Lint ATIP metadata for quality issues beyond schema validation.",
            add_completion=False,
            no_args_is_help=False,
        )

        @app.callback(invoke_without_command=True)
        def main(
            ctx: typer.Context,
            agent: bool = typer.Option(False, "--agent", help="Print this tool's ATIP metadata and exit"),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
            version: bool = typer.Option(False, "--version", help="Show the version and exit"),
        ) -> None:
            CLIAppFactory.configure_logging(verbose)
            if agent:
                typer.echo(json.dumps(AGENT_METADATA, indent=2))
                raise typer.Exit(EXIT_OK)
            if version:
                typer.echo(TOOL_VERSION)
                raise typer.Exit(EXIT_OK)
            if ctx.invoked_subcommand is None:
                typer.echo(ctx.get_help())
                raise typer.Exit(EXIT_OK)

        @app.command()
        def lint(
            files: list[str] = typer.Argument(..., help="Files, directories or glob patterns to lint"),
            config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
            output: str = typer.Option("stylish", "--output", "-o", help="Output format: stylish, json, sarif, compact"),
            fix: bool = typer.Option(False, "--fix", help="Automatically fix issues when possible"),
            fix_dry_run: bool = typer.Option(False, "--fix-dry-run", help="Show fixes without applying"),
            quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors, suppress warnings"),
            color: bool = typer.Option(True, "--color/--no-color", help="Colorize stylish output"),
            rule: list[str] = typer.Option([], "--rule", help="Enable rule, e.g. effects-presence:error"),
            disable_rule: list[str] = typer.Option([], "--disable-rule", help="Disable rule by id"),
            max_warnings: int = typer.Option(-1, "--max-warnings", help="Maximum warnings before exit 1"),
            schema: Optional[Path] = typer.Option(None, "--schema", help="ATIP JSON Schema to validate against"),
            jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Lint files in parallel"),
        ) -> None:
            """Lint ATIP metadata files for quality issues."""
            if output not in ResultFormatter.names():
                typer.secho(f"Unknown output format: {output}", err=True, fg="red")
                raise typer.Exit(EXIT_USAGE)
            try:
                raw = CLIAppFactory.load_raw_config(config)
                overrides = CLIAppFactory.parse_rule_overrides(rule, disable_rule)
                if overrides:
                    raw = {**raw, "rules": {**(raw.get("rules") or {}), **overrides}}
                if schema is not None:
                    raw = {**raw, "schemaPath": str(schema)}
                linter = create_linter(raw, container=deps.container, telemetry=deps.telemetry)
            except ConfigError as exc:
                typer.secho(f"Error: {exc}", err=True, fg="red")
                raise typer.Exit(EXIT_USAGE) from exc

            results = linter.lint_files(files, LintOptions(fix=fix or fix_dry_run, quiet=quiet), jobs=jobs)
            if not results.results:
                typer.secho("No files matched the pattern(s)", err=True, fg="red")
                raise typer.Exit(EXIT_USAGE)

            formatter = ResultFormatter(
                color=color and output == "stylish" and sys.stdout.isatty(),
                cwd=str(Path.cwd()),
                registry=linter.registry,
            )
            rendered = formatter.format(output, results)
            if rendered:
                typer.echo(rendered, nl=False)

            if fix_dry_run:
                fixable = results.fixable_error_count + results.fixable_warning_count
                if fixable:
                    typer.echo(f"\nWould fix {fixable} issue(s)")
            elif fix:
                written = CLIAppFactory.write_fixes(deps, results)
                if written:
                    typer.echo(f"Applied fixes to {written} file(s)")

            if 0 <= max_warnings < results.warning_count:
                raise typer.Exit(EXIT_LINT_FAILURE)
            raise typer.Exit(EXIT_LINT_FAILURE if results.error_count > 0 else EXIT_OK)

        @app.command()
        def init(
            preset: str = typer.Option(DEFAULT_PRESET, "--preset", "-p", help="Rule preset to start from"),
            path: Path = typer.Option(Path(".atiplintrc.json"), "--path", help="Output path for config file"),
            force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
        ) -> None:
            """Initialize a lint configuration file."""
            content = deps.preset_registry.get(preset)
            if content is None:
                typer.secho(
                    f"Unknown preset: {preset}. Available: {', '.join(deps.preset_registry.names())}",
                    err=True,
                    fg="red",
                )
                raise typer.Exit(EXIT_USAGE)
            if path.exists() and not force:
                typer.secho(f"{path} already exists (use --force to overwrite)", err=True, fg="red")
                raise typer.Exit(EXIT_USAGE)
            deps.filesystem.write_text(str(path), json.dumps(content, indent=2) + "\n")
            typer.echo(f"Created {path} with {preset} preset")

        @app.command("list-rules")
        def list_rules(
            output_format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
            category: Optional[str] = typer.Option(None, "--category", help="Filter by category"),
            fixable: bool = typer.Option(False, "--fixable", help="Only show fixable rules"),
        ) -> None:
            """List available lint rules."""
            if category is not None and category not in RULE_CATEGORIES:
                typer.secho(f"Unknown category: {category}", err=True, fg="red")
                raise typer.Exit(EXIT_USAGE)
            rules = deps.rule_registry.filter(category=category, fixable_only=fixable)
            if output_format == "json":
                typer.echo(json.dumps([r.to_dict() for r in rules], indent=2))
                return
            if output_format != "table":
                typer.secho(f"Unknown format: {output_format}", err=True, fg="red")
                raise typer.Exit(EXIT_USAGE)
            width = max((len(r.rule_id) for r in rules), default=10)
            typer.echo(f"{'Rule':<{width}}  {'Category':<12} {'Severity':<8} {'Fix':<4} Description")
            for r in rules:
                typer.echo(
                    f"{r.rule_id:<{width}}  {r.category:<12} {r.default_severity:<8} "
                    f"{'yes' if r.fixable else '':<4} {r.description}"
                )

        return app


def create_app(deps: CLIDependencies) -> typer.Typer:
    """Create the Typer app (public API for __main__ and tests)."""
    return CLIAppFactory.create_app(deps)
