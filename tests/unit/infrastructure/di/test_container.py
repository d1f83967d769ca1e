import pytest

from atip_lint.infrastructure.di.container import AtipLintContainer
from atip_lint.infrastructure.gateways.executable_prober import SubprocessExecutableProber
from atip_lint.infrastructure.services.preset_registry import PresetRegistry
from atip_lint.infrastructure.services.telemetry import LoggingTelemetry


class TestAtipLintContainer:
    def test_defaults_are_registered(self) -> None:
        container = AtipLintContainer()

        assert isinstance(container.get_telemetry_port(), LoggingTelemetry)
        assert isinstance(container.get_executable_prober(), SubprocessExecutableProber)
        assert container.get_preset_registry() is PresetRegistry.default()
        assert len(container.get_rule_registry()) == 11

    def test_register_and_get_singleton(self) -> None:
        container = AtipLintContainer()
        fake = object()
        container.register_singleton("TelemetryPort", fake)

        assert container.get_telemetry_port() is fake

    def test_get_missing_dependency_raises_error(self) -> None:
        with pytest.raises(ValueError, match=r"Dependency 'Missing' not registered\."):
            AtipLintContainer().get("Missing")

    def test_global_instance_and_reset(self) -> None:
        first = AtipLintContainer.get_instance()

        assert AtipLintContainer.get_instance() is first
        AtipLintContainer.reset()
        assert AtipLintContainer.get_instance() is not first

    def test_each_container_has_its_own_rule_registry(self) -> None:
        assert AtipLintContainer().get_rule_registry() is not AtipLintContainer().get_rule_registry()
