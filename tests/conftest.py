"""Pytest configuration and shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
and the project root on sys.path so tests can import tests.lint_test_utils.
"""

from typing import Any

import pytest

from atip_lint.infrastructure.di.container import AtipLintContainer


@pytest.fixture(autouse=True)
def reset_container() -> Any:
    """Each test gets a fresh global container."""
    AtipLintContainer.reset()
    yield
    AtipLintContainer.reset()


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """A small, clean document under the recommended preset."""
    return {
        "atip": {"version": "0.4"},
        "name": "mytool",
        "version": "1.0.0",
        "description": "Manage remote things from the terminal",
        "homepage": "https://example.com/mytool",
        "trust": {"source": "vendor", "verified": True},
        "globalOptions": [
            {
                "name": "output",
                "flags": ["-o"],
                "type": "string",
                "description": "Write results to this file",
            }
        ],
        "commands": {
            "list": {
                "description": "List every known thing",
                "effects": {"network": True, "idempotent": True},
            },
            "delete": {
                "description": "Delete a thing permanently",
                "arguments": [
                    {"name": "id", "type": "string", "description": "Identifier of the thing", "required": True}
                ],
                "effects": {"destructive": True, "reversible": False, "network": True},
            },
        },
    }
