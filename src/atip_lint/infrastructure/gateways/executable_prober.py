"""Executable prober: resolves and runs tool binaries for executable-category rules."""

import logging
import os
import shutil
import subprocess
from typing import Optional, Sequence

from atip_lint.domain.errors import ExecutableError
from atip_lint.domain.protocols import ExecutableProberProtocol, ProbeResult

logger = logging.getLogger(__name__)


class SubprocessExecutableProber(ExecutableProberProtocol):
    """ExecutableProberProtocol backed by shutil.which and subprocess.run."""

    def locate(self, binary: str) -> Optional[str]:
        if os.sep in binary or (os.altsep and os.altsep in binary):
            return binary if os.path.isfile(binary) and os.access(binary, os.X_OK) else None
        return shutil.which(binary)

    def probe(self, binary: str, args: Sequence[str] = (), timeout: float = 5.0) -> ProbeResult:
        resolved = self.locate(binary)
        if resolved is None:
            return ProbeResult(ok=False, reason=f"binary not found: {binary}")

        cmd = [resolved, *args]
        logger.debug("Probing %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired:
            return ProbeResult(ok=False, reason=f"timed out after {timeout:g}s", resolved_path=resolved)
        except OSError as exc:
            logger.debug("%s", ExecutableError("Cannot run binary", binary, exc))
            return ProbeResult(ok=False, reason=str(exc), resolved_path=resolved)

        if result.returncode != 0:
            return ProbeResult(
                ok=False,
                reason=f"exited with status {result.returncode}",
                stdout=result.stdout,
                resolved_path=resolved,
            )
        return ProbeResult(ok=True, stdout=result.stdout, resolved_path=resolved)
