"""
Global test configuration fixtures for the i18n key extractor tests.

This module provides reusable pytest fixtures for laying out throwaway
projects (sources and assets) and building ExtractOptions for them.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from i18n_extract.config.schema import ExtractOptions


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty project with a ``src`` directory."""
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture
def write_source(project_dir: Path) -> Callable[[str, str], Path]:
    """Write a source file relative to ``src``."""

    def _write(relative_path: str, content: str) -> Path:
        path = project_dir / "src" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_existing_asset(project_dir: Path) -> Callable[[str, str, object], Path]:
    """Write an existing JSON asset for a language."""

    def _write(lang: str, name: str, data: object) -> Path:
        path = project_dir / "i18n" / lang / f"{name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_options(project_dir: Path) -> Callable[..., ExtractOptions]:
    """Build options rooted at the temporary project."""

    def _make(**overrides: object) -> ExtractOptions:
        data: dict[str, object] = {
            "base_path": project_dir,
            "supported_langs": ["en-US", "it-IT"],
        }
        data.update(overrides)
        return ExtractOptions.model_validate(data)

    return _make


def read_json(path: Path) -> object:
    """Load a JSON file written by the extractor."""
    return json.loads(path.read_text(encoding="utf-8"))
