"""Load atip-lint configuration from rc files or pyproject.toml. Infrastructure I/O only."""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

import yaml

from atip_lint.domain.constants import DEFAULT_CONFIG_FILES, PYPROJECT_SECTION
from atip_lint.domain.errors import ConfigError

logger = logging.getLogger(__name__)


class ConfigFileLoader:
    """
    Finds and reads the raw configuration mapping. Resolution of presets and
    severities happens later in the domain ConfigResolver.
    """

    @staticmethod
    def load_config_from_fs(
        start_dir: Optional[str] = None,
        config_path: Optional[str] = None,
    ) -> tuple[Optional[dict[str, Any]], Optional[str]]:
        """
        Return ``(raw_config, path)``; ``(None, None)`` when nothing is found.

        An explicit ``config_path`` is loaded directly. Otherwise the start
        directory and each ancestor are searched for ``.atiplintrc.json``,
        ``.atiplintrc.yaml``, ``.atiplintrc.yml`` and a ``[tool.atip-lint]``
        table in ``pyproject.toml``, in that order.
        """
        if config_path is not None:
            path = Path(config_path)
            if not path.is_file():
                raise ConfigError("Config file not found", config_path=str(path))
            raw = ConfigFileLoader._read(path)
            if raw is None:
                raise ConfigError(f"No [tool.{PYPROJECT_SECTION}] table", config_path=str(path))
            return (raw, str(path))

        current_path = Path(start_dir).resolve() if start_dir else Path.cwd()
        while True:
            for name in DEFAULT_CONFIG_FILES:
                candidate = current_path / name
                if not candidate.is_file():
                    continue
                raw = ConfigFileLoader._read(candidate)
                if raw is not None:
                    logger.debug("Using configuration from %s", candidate)
                    return (raw, str(candidate))
            if current_path.parent == current_path:
                break
            current_path = current_path.parent
        logger.debug("No configuration file found; using defaults")
        return (None, None)

    @staticmethod
    def _read(path: Path) -> Optional[dict[str, Any]]:
        """Parse one config file. ``None`` means a pyproject.toml without our table."""
        try:
            if path.name == "pyproject.toml":
                with path.open("rb") as f:
                    data = tomllib.load(f)
                section = (data.get("tool") or {}).get(PYPROJECT_SECTION)
                if section is None:
                    return None
                raw: Any = section
            elif path.suffix == ".json":
                raw = json.loads(path.read_text(encoding="utf-8"))
            else:
                raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ConfigError("Cannot read config file", config_path=str(path), cause=exc) from exc
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError("Configuration must be an object", config_path=str(path))
        return raw
