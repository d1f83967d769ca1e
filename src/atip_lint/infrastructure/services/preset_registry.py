"""PresetRegistry: loads the built-in configuration presets from presets.yaml."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, cast

import yaml

from atip_lint.domain.errors import ConfigError

logger = logging.getLogger(__name__)


class PresetRegistry:
    """Loads presets.yaml once and serves read-only preset mappings by name."""

    _default: Optional["PresetRegistry"] = None

    def __init__(self, presets_path: str | None = None) -> None:
        if presets_path is not None:
            self._path = Path(presets_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "presets.yaml"
        self._presets: dict[str, dict[str, Any]] = {}
        self._load()

    def _load(self) -> None:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError("Cannot load presets", config_path=str(self._path), cause=exc) from exc
        if not isinstance(data, dict):
            raise ConfigError("Presets file must be a mapping", config_path=str(self._path))
        self._presets = cast(dict[str, dict[str, Any]], data)
        logger.debug("Loaded %d presets from %s", len(self._presets), self._path)

    def get_presets(self) -> Mapping[str, Mapping[str, Any]]:
        """Return a shallow copy of the preset table for the config resolver."""
        return dict(self._presets)

    def get(self, name: str) -> Optional[Mapping[str, Any]]:
        return self._presets.get(name)

    def names(self) -> list[str]:
        return list(self._presets)

    @classmethod
    def default(cls) -> "PresetRegistry":
        """Process-wide registry of the packaged presets, created on first use."""
        if cls._default is None:
            cls._default = PresetRegistry()
        return cls._default
