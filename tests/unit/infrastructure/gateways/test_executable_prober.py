import os
import sys
from pathlib import Path

from atip_lint.domain.protocols import ProbeResult
from atip_lint.infrastructure.gateways.executable_prober import SubprocessExecutableProber


class TestLocate:
    def test_absolute_executable(self) -> None:
        assert SubprocessExecutableProber().locate(sys.executable) == sys.executable

    def test_path_that_is_not_executable(self, tmp_path: Path) -> None:
        plain = tmp_path / "tool"
        plain.write_text("", encoding="utf-8")
        os.chmod(plain, 0o644)

        assert SubprocessExecutableProber().locate(str(plain)) is None

    def test_unknown_bare_name(self) -> None:
        assert SubprocessExecutableProber().locate("atip-lint-no-such-binary") is None


class TestProbe:
    def test_successful_run_captures_stdout(self) -> None:
        result = SubprocessExecutableProber().probe(sys.executable, ("-c", "print('{}')"))

        assert result.ok
        assert result.stdout.strip() == "{}"
        assert result.resolved_path == sys.executable

    def test_non_zero_exit(self) -> None:
        result = SubprocessExecutableProber().probe(sys.executable, ("-c", "import sys; sys.exit(3)"))

        assert not result.ok
        assert result.reason == "exited with status 3"

    def test_timeout(self) -> None:
        result = SubprocessExecutableProber().probe(sys.executable, ("-c", "import time; time.sleep(10)"), timeout=0.5)

        assert not result.ok
        assert result.reason == "timed out after 0.5s"

    def test_missing_binary(self) -> None:
        result = SubprocessExecutableProber().probe("atip-lint-no-such-binary")

        assert result == ProbeResult(ok=False, reason="binary not found: atip-lint-no-such-binary")
