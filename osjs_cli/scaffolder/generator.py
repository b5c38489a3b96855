"""Scaffolding tasks.

Writes adapter skeletons (auth, settings, vfs, service providers) and
complete application packages from the bundled templates.  The tasks take
already-gathered answers (see :mod:`osjs_cli.scaffolder.prompts`) so they
can be driven without a terminal.

Ordering rule for every task: the destination existence check happens before
any directory is created, so a refused scaffold leaves the filesystem as it
was.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from osjs_cli.utils import print_info, print_success, print_warning

from .templates import MARKER_VARIABLE, TemplateRenderer


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Base class for scaffolding failures."""


class InvalidNameError(ScaffoldError):
    """Raised when a package name is empty or already taken."""


class DestinationExistsError(ScaffoldError):
    """Raised when the scaffold destination is already present."""

    def __init__(self, destination: Path) -> None:
        self.destination = destination
        super().__init__(f"Destination already exists: {destination}")


# ---------------------------------------------------------------------------
# Scaffold catalogue
# ---------------------------------------------------------------------------


class Scaffold(BaseModel):
    """A basic (single-file) scaffold kind."""

    dirname: str
    title: str
    info: str


SCAFFOLDS: dict[str, Scaffold] = {
    "auth": Scaffold(
        dirname="auth",
        title="Authentication Adapter",
        info="""
For more information about authentication adapters, visit:
- https://manual.os-js.org/v3/tutorial/auth/
- https://manual.os-js.org/v3/guide/auth/
""",
    ),
    "settings": Scaffold(
        dirname="settings",
        title="Settings Adapter",
        info="""
For more information about settings adapters, visit:
- https://manual.os-js.org/v3/tutorial/settings/
- https://manual.os-js.org/v3/guide/settings/
""",
    ),
    "vfs": Scaffold(
        dirname="vfs",
        title="VFS Adapter",
        info="""
For more information about vfs adapters, visit:
- https://manual.os-js.org/v3/tutorial/vfs/
- https://manual.os-js.org/v3/guide/filesystem/
""",
    ),
    "providers": Scaffold(
        dirname="provider",
        title="Service Provider",
        info="""
For more information about service providers, visit:
- https://manual.os-js.org/v3/tutorial/provider/
- https://manual.os-js.org/v3/guide/provider/
""",
    ),
}

APPLICATION_TEMPLATE_DIR = "application"
APPLICATION_FILES: tuple[str, ...] = (
    "index.js",
    "server.js",
    "index.scss",
    "webpack.config.js",
    "package.json",
    "metadata.json",
)


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------


class BasicAnswers(BaseModel):
    """Answers for a basic adapter/provider scaffold."""

    type: Literal["client", "server"] = Field(default="client")
    filename: str
    target: str
    confirm: bool = Field(default=False)


class PackageAnswers(BaseModel):
    """Answers for an application package scaffold."""

    name: str
    target: str
    confirm: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Name handling & package discovery
# ---------------------------------------------------------------------------


def filter_input(value: Any) -> str:
    """Keep only ASCII letters, digits and underscores."""
    return re.sub(r"[^A-Za-z0-9_]", "", str(value)).strip()


class PackageInfo(BaseModel):
    """An installed package, identified by its ``metadata.json``."""

    name: str
    path: Path
    meta: dict[str, Any] = Field(default_factory=dict)


def discover_packages(node_modules: str | Path) -> list[PackageInfo]:
    """List packages under *node_modules* that ship a ``metadata.json``.

    Scoped packages (``@scope/name``) are included.  A missing directory
    yields an empty list; unreadable or malformed metadata is skipped.
    """
    root = Path(node_modules)
    if not root.is_dir():
        return []

    candidates = [*root.glob("*/metadata.json"), *root.glob("@*/*/metadata.json")]
    found: list[PackageInfo] = []
    for meta_file in candidates:
        try:
            meta = json.loads(meta_file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            continue
        if not isinstance(meta, dict) or not isinstance(meta.get("name"), str):
            continue
        found.append(PackageInfo(name=meta["name"], path=meta_file.parent, meta=meta))

    return sorted(found, key=lambda p: p.path.as_posix())


def validate_package_name(name: str, packages: list[PackageInfo]) -> str:
    """Return *name* if it can be used for a new package.

    Raises:
        InvalidNameError: If the name is empty or an installed package
            already uses it.
    """
    if len(name) < 1:
        raise InvalidNameError("Invalid package name")
    if any(package.name == name for package in packages):
        raise InvalidNameError("A package with this name already exists...")
    return name


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


async def scaffold_basic(
    kind: str,
    answers: BasicAnswers,
    root: str | Path,
    renderer: TemplateRenderer | None = None,
) -> Path | None:
    """Write a single adapter/provider file.

    Args:
        kind: One of :data:`SCAFFOLDS`.
        answers: Collected answers; nothing is written unless ``confirm``.
        root: Project root that ``answers.target`` is relative to.
        renderer: Template renderer (defaults to the bundled templates).

    Returns:
        The written path, or ``None`` when the user declined.

    Raises:
        KeyError: Unknown *kind*.
        DestinationExistsError: The target file already exists.
    """
    scaffold = SCAFFOLDS[kind]
    renderer = renderer or TemplateRenderer()

    if not answers.confirm:
        print_warning("Scaffolding aborted...")
        return None

    template = f"{scaffold.dirname}/{answers.type}.js"
    destination = (Path(root) / answers.target).resolve()

    if await asyncio.to_thread(destination.exists):
        raise DestinationExistsError(destination)

    raw = renderer.source(template)
    contents = f"/*{scaffold.info}*/" + raw
    await asyncio.to_thread(_write_new_file, destination, contents)

    print_success(f"Wrote {destination.name}")
    return destination


async def scaffold_package(
    answers: PackageAnswers,
    root: str | Path,
    packages: list[PackageInfo] | None = None,
    renderer: TemplateRenderer | None = None,
) -> list[Path]:
    """Render a complete application package into ``root / answers.target``.

    The package name is filtered and validated before anything is touched.

    Returns:
        The written file paths (empty when the user declined).

    Raises:
        InvalidNameError: The filtered name is empty or already installed.
        DestinationExistsError: The target directory already exists.
    """
    renderer = renderer or TemplateRenderer()
    name = validate_package_name(filter_input(answers.name), packages or [])

    if not answers.confirm:
        print_warning("Scaffolding aborted...")
        return []

    destination = (Path(root) / answers.target).resolve()
    if await asyncio.to_thread(destination.exists):
        raise DestinationExistsError(destination)

    print_info(f"Scaffolding application {name}")
    await asyncio.to_thread(destination.mkdir, parents=True)

    context = {MARKER_VARIABLE: name}
    written = await asyncio.gather(*(
        renderer.render_to_file(
            f"{APPLICATION_TEMPLATE_DIR}/{filename}", destination / filename, context
        )
        for filename in APPLICATION_FILES
    ))
    for path in written:
        print_success(f"Wrote {path.name}")
    return list(written)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _write_new_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("x", encoding="utf-8") as handle:
        handle.write(content)
