"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from atip_lint.infrastructure.di.container import AtipLintContainer
from atip_lint.interface.cli import CLIDependencies, create_app


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = AtipLintContainer.get_instance()
    deps = CLIDependencies(
        container=container,
        telemetry=container.get_telemetry_port(),
        filesystem=container.get_filesystem_gateway(),
        rule_registry=container.get_rule_registry(),
        preset_registry=container.get_preset_registry(),
    )
    app = create_app(deps)
    app()


if __name__ == "__main__":
    main()
