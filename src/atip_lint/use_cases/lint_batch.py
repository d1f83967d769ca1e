"""Use Case: Lint many files and aggregate the results."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Optional, Sequence

from atip_lint.domain.constants import FILE_ERROR_RULE, SEVERITY_ERROR
from atip_lint.domain.entities import LintMessage, LintOptions, LintResult, LintResults
from atip_lint.domain.errors import ConfigError

if TYPE_CHECKING:
    from atip_lint.domain.protocols import FileSystemProtocol, TelemetryPort
    from atip_lint.use_cases.lint_file import LintFileUseCase


class LintBatchUseCase:
    """
    Expand patterns and lint each file with a shared LintFileUseCase.

    With ``jobs > 1`` files are linted on a thread pool. Setting
    ``cancel_event`` stops new files from being started; results that are
    already finished are kept. Results are returned in input order.
    """

    def __init__(
        self,
        lint_file_use_case: "LintFileUseCase",
        filesystem: "FileSystemProtocol",
        telemetry: Optional["TelemetryPort"] = None,
    ) -> None:
        self.lint_file_use_case = lint_file_use_case
        self.filesystem = filesystem
        self.telemetry = telemetry

    def expand(self, patterns: Sequence[str]) -> list[str]:
        ignore = self.lint_file_use_case.config.ignore_patterns
        return self.filesystem.expand(patterns, ignore)

    def lint_paths(
        self,
        patterns: Sequence[str],
        options: Optional[LintOptions] = None,
        cancel_event: Optional[threading.Event] = None,
        jobs: int = 1,
    ) -> LintResults:
        files = self.expand(patterns)
        if self.telemetry:
            self.telemetry.step(f"Linting {len(files)} file(s)")
        return self.lint_files(files, options, cancel_event, jobs)

    def lint_files(
        self,
        files: Sequence[str],
        options: Optional[LintOptions] = None,
        cancel_event: Optional[threading.Event] = None,
        jobs: int = 1,
    ) -> LintResults:
        options = options or LintOptions()
        if jobs <= 1:
            results: list[LintResult] = []
            for file_path in files:
                if cancel_event is not None and cancel_event.is_set():
                    self._report_cancelled(len(results), len(files))
                    break
                results.append(self._lint_one(file_path, options))
            return LintResults.from_results(results)

        futures: list[Future[Optional[LintResult]]] = []
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            for file_path in files:
                if cancel_event is not None and cancel_event.is_set():
                    break
                futures.append(executor.submit(self._lint_unless_cancelled, file_path, options, cancel_event))
        finished = [result for result in (f.result() for f in futures) if result is not None]
        if len(finished) < len(files):
            self._report_cancelled(len(finished), len(files))
        return LintResults.from_results(finished)

    def _lint_unless_cancelled(
        self,
        file_path: str,
        options: LintOptions,
        cancel_event: Optional[threading.Event],
    ) -> Optional[LintResult]:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return self._lint_one(file_path, options)

    def _lint_one(self, file_path: str, options: LintOptions) -> LintResult:
        """Lint one file; an unexpected failure becomes that file's only message."""
        try:
            return self.lint_file_use_case.lint_file(file_path, options)
        except ConfigError:
            raise
        except Exception as exc:
            if self.telemetry:
                self.telemetry.error(f"Unexpected error while linting {file_path}: {exc!r}")
            message = LintMessage(
                rule_id=FILE_ERROR_RULE,
                severity=SEVERITY_ERROR,
                message=f"Unexpected error while linting: {exc}",
            )
            return LintResult.from_messages(file_path, [message])

    def _report_cancelled(self, done: int, total: int) -> None:
        if self.telemetry:
            self.telemetry.warning(f"Lint cancelled after {done} of {total} file(s)")
