from __future__ import annotations

import shutil
from pathlib import Path

import pytest


@pytest.fixture
def shell() -> str:
    path = shutil.which("sh")
    if path is None:
        pytest.skip("POSIX shell not available")
    return path


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark tests in this package as integration."""

    package_root = Path(__file__).resolve().parent
    integration_mark = pytest.mark.integration
    for item in items:
        try:
            path = Path(item.fspath).resolve()
        except OSError:
            continue
        if package_root in path.parents:
            item.add_marker(integration_mark)
