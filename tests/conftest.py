"""Shared fixtures for manifest-require tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Empty project directory (bundler context)."""
    root = tmp_path.resolve() / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_manifest(project: Path):
    """Write webpack-assets.json into the project with the given assets."""

    def write(assets: dict, name: str = "webpack-assets.json") -> Path:
        path = project / name
        path.write_text(
            json.dumps({"javascript": {}, "styles": {}, "assets": assets}),
            encoding="utf-8",
        )
        return path

    return write
