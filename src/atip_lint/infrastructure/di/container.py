from typing import TYPE_CHECKING, Any, Optional, cast

from atip_lint.domain.rules.registry import builtin_registry
from atip_lint.infrastructure.gateways.executable_prober import SubprocessExecutableProber
from atip_lint.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from atip_lint.infrastructure.gateways.json_syntax_gateway import JsonSyntaxGateway
from atip_lint.infrastructure.services.preset_registry import PresetRegistry
from atip_lint.infrastructure.services.telemetry import LoggingTelemetry

if TYPE_CHECKING:
    from atip_lint.domain.protocols import (
        ExecutableProberProtocol,
        FileSystemProtocol,
        SyntaxGatewayProtocol,
        TelemetryPort,
    )
    from atip_lint.domain.rules import RuleRegistry


class AtipLintContainer:
    """
    Wires the gateways and services the linter needs.

    Components are created once per container and looked up by key. Tests
    swap a component with ``register_singleton`` before building use cases.
    """

    _instance: Optional["AtipLintContainer"] = None

    def __init__(self) -> None:
        self._components: dict[str, Any] = {}
        self._wire_builtin_components()

    def _wire_builtin_components(self) -> None:
        self.register_singleton("TelemetryPort", LoggingTelemetry())
        self.register_singleton("SyntaxGateway", JsonSyntaxGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("ExecutableProber", SubprocessExecutableProber())
        self.register_singleton("PresetRegistry", PresetRegistry.default())
        self.register_singleton("RuleRegistry", builtin_registry())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Bind ``key`` to ``instance``, replacing any earlier binding."""
        self._components[key] = instance

    def get(self, key: str) -> Any:
        """Look up a component by key; the typed getters below are preferred."""
        try:
            return self._components[key]
        except KeyError:
            raise ValueError(f"Dependency '{key}' not registered.") from None

    def get_telemetry_port(self) -> "TelemetryPort":
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_syntax_gateway(self) -> "SyntaxGatewayProtocol":
        return cast("SyntaxGatewayProtocol", self.get("SyntaxGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_executable_prober(self) -> "ExecutableProberProtocol":
        return cast("ExecutableProberProtocol", self.get("ExecutableProber"))

    def get_preset_registry(self) -> PresetRegistry:
        """Return the packaged preset table."""
        return cast(PresetRegistry, self.get("PresetRegistry"))

    def get_rule_registry(self) -> "RuleRegistry":
        """Return the registry of built-in rules."""
        return cast("RuleRegistry", self.get("RuleRegistry"))

    @classmethod
    def get_instance(cls) -> "AtipLintContainer":
        """Process-wide container, created on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the process-wide container so the next lookup rebuilds it."""
        cls._instance = None
