"""Shared pytest fixtures for the osjs-cli test suite.

Provides reusable fixtures for:
- Real and symlinked project directories
- Installed-package trees (``node_modules`` with ``metadata.json``)
- A scratch template directory for renderer tests
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


# ---------------------------------------------------------------------------
# Project directories
# ---------------------------------------------------------------------------

@pytest.fixture
def real_project(tmp_path: Path) -> Path:
    """A real project directory at ``<tmp>/real/proj``."""
    project = tmp_path / "real" / "proj"
    project.mkdir(parents=True)
    return project


@pytest.fixture
def linked_project(tmp_path: Path, real_project: Path) -> Path:
    """A symlink ``<tmp>/proj`` pointing at :func:`real_project`."""
    link = tmp_path / "proj"
    link.symlink_to(real_project, target_is_directory=True)
    return link


# ---------------------------------------------------------------------------
# Installed packages
# ---------------------------------------------------------------------------

def _write_package(root: Path, dirname: str, meta: dict[str, Any]) -> Path:
    package_dir = root / dirname
    package_dir.mkdir(parents=True)
    (package_dir / "metadata.json").write_text(json.dumps(meta), encoding="utf-8")
    return package_dir


@pytest.fixture
def node_modules(real_project: Path) -> Path:
    """``node_modules`` with two plain packages and one scoped package."""
    root = real_project / "node_modules"
    _write_package(root, "osjs-calculator", {"name": "Calculator", "type": "application"})
    _write_package(root, "osjs-draw", {"name": "Draw", "type": "application"})
    _write_package(root, "@osjs/gallery", {"name": "Gallery", "type": "application"})
    # Not a package: plain dependency without metadata
    (root / "lodash").mkdir()
    (root / "lodash" / "package.json").write_text("{}", encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A scratch template directory with marker and non-marker files."""
    root = tmp_path / "templates"
    (root / "sample").mkdir(parents=True)
    (root / "sample" / "greeting.js").write_text(
        "const ___NAME___ = () => 'Hello ___NAME___';\n", encoding="utf-8"
    )
    (root / "sample" / "style.scss").write_text(
        ".a { content: '#{$x}'; } /* {% raw %} {{ x }} {# y #} */\n", encoding="utf-8"
    )
    (root / "plain.txt").write_text("no markers here", encoding="utf-8")
    return root
