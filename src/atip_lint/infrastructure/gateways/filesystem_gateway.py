"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import glob
from pathlib import Path
from typing import List, Sequence

from atip_lint.domain.config import path_matches
from atip_lint.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib and glob."""

    def read_text(self, path: str) -> str:
        """Read a UTF-8 file. A leading byte-order mark is kept so the parser can reject it."""
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        Path(path).write_text(content, encoding=encoding)

    def expand(self, patterns: Sequence[str], ignore: Sequence[str] = ()) -> List[str]:
        """
        Expand files, directories and glob patterns to JSON files.

        A directory contributes every ``*.json`` below it. A literal path that
        does not exist is returned as-is so the caller reports it as a file
        error. Order follows the patterns; duplicates are dropped.
        """
        files: List[str] = []
        seen: set[str] = set()
        for pattern in patterns:
            for candidate in self._expand_one(pattern):
                if candidate in seen or any(path_matches(candidate, rule) for rule in ignore):
                    continue
                seen.add(candidate)
                files.append(candidate)
        return files

    def _expand_one(self, pattern: str) -> List[str]:
        path_obj = Path(pattern)
        if path_obj.is_dir():
            return sorted(str(p) for p in path_obj.glob("**/*.json") if p.is_file())
        if glob.has_magic(pattern):
            return sorted(p for p in glob.glob(pattern, recursive=True) if Path(p).is_file())
        return [pattern]
