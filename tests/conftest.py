"""Shared pytest fixtures for monodeploy tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from structlog.testing import capture_logs


@pytest.fixture(autouse=True)
def captured_logs():
    """Capture structlog events instead of printing them."""
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def make_package(workspace: Path):
    """Create ``<workspace>/<dir_name>/package.json``."""

    def _make(
        dir_name: str,
        dependencies: dict | None = None,
        dev_dependencies: dict | None = None,
        name: str | None = None,
        raw: str | None = None,
    ) -> Path:
        pkg = workspace / dir_name
        pkg.mkdir(parents=True, exist_ok=True)
        if raw is not None:
            (pkg / "package.json").write_text(raw)
            return pkg
        data: dict = {"name": name or dir_name, "version": "1.0.0"}
        if dependencies is not None:
            data["dependencies"] = dependencies
        if dev_dependencies is not None:
            data["devDependencies"] = dev_dependencies
        (pkg / "package.json").write_text(json.dumps(data, indent=2))
        return pkg

    return _make
