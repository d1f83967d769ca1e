from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from atip_lint.domain.errors import SchemaIssue
from atip_lint.domain.syntax import ParseOutcome


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing a tool binary. ``reason`` explains a failure."""

    ok: bool
    reason: Optional[str] = None
    stdout: str = ""
    resolved_path: Optional[str] = None


class SyntaxGatewayProtocol(Protocol):
    """Protocol for building the JSON syntax tree."""

    def parse(self, text: str) -> ParseOutcome: ...


class SchemaValidatorProtocol(Protocol):
    """Protocol for the external JSON-Schema conformance checker."""

    def validate(self, document: Any) -> list[SchemaIssue]:
        """Return every schema failure; an empty list means the document conforms."""
        ...


class ExecutableProberProtocol(Protocol):
    """Protocol for probing tool binaries. Used only by executable-category rules."""

    def locate(self, binary: str) -> Optional[str]:
        """Resolve a binary name or path to an executable path, None when missing."""
        ...

    def probe(self, binary: str, args: Sequence[str] = (), timeout: float = 5.0) -> ProbeResult:
        """Run the binary with ``args`` and report success or a structured failure reason."""
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def read_text(self, path: str) -> str:
        """Read a UTF-8 file."""
        ...

    def write_text(self, path: str, content: str) -> None:
        """Write a UTF-8 file."""
        ...

    def expand(self, patterns: Sequence[str], ignore: Sequence[str] = ()) -> list[str]:
        """Expand glob patterns to an ordered, de-duplicated file list."""
        ...


class TelemetryPort(Protocol):
    """Protocol for progress updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
