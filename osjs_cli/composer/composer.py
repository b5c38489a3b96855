"""Build configuration composer.

Turns a project directory plus caller overrides into a complete, frozen
``BundleConfig`` for the bundling engine.  Composition is a pure function of
its inputs and the filesystem's answer to one ``realpath`` call; nothing is
written and no process-wide state is read.  The production flag is an
explicit argument (see :class:`osjs_cli.config.Settings`).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .merge import merge_options
from .models import (
    BuildOptions,
    BundleConfig,
    ModuleOptions,
    Optimization,
    OutputOptions,
    PartialBuildOptions,
    ResolveOptions,
)
from .plugins import build_plugins
from .rules import build_rules


# Root of a source checkout. An installed copy resolves into site-packages,
# where no node_modules exists; Settings.tool_root (OSJS_TOOL_ROOT) overrides it.
TOOL_ROOT = Path(__file__).resolve().parents[2]
MODULES_DIRNAME = "node_modules"
OUTPUT_DIRNAME = "dist"

Overrides = Union[PartialBuildOptions, Mapping[str, Any], None]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PathResolutionError(Exception):
    """Raised when the build root cannot be resolved to a real directory."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot resolve {path}: {reason}")


# ---------------------------------------------------------------------------
# Bundler reference
# ---------------------------------------------------------------------------


class Bundler(BaseModel):
    """The external bundling engine a composed configuration is meant for."""

    name: str = Field(default="webpack")
    runner: tuple[str, ...] = Field(default=("npx",))

    model_config = ConfigDict(frozen=True)

    def command(self, config_file: Union[str, Path]) -> list[str]:
        """Return the argv that runs the engine against *config_file*."""
        return [*self.runner, self.name, "--config", str(config_file)]


bundler = Bundler()


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def resolve_context(path: Union[str, Path], base: Optional[Path] = None) -> Path:
    """Return the canonical, symlink-free directory for *path*.

    Relative paths are taken relative to *base* (or the working directory).

    Raises:
        PathResolutionError: If the path does not exist, is not a directory,
            or resolving it runs into a symlink loop.
    """
    candidate = Path(path)
    if base is not None and not candidate.is_absolute():
        candidate = base / candidate

    try:
        resolved = candidate.resolve(strict=True)
    except FileNotFoundError:
        raise PathResolutionError(path, "no such directory") from None
    except RuntimeError as exc:
        # Symlink loops raise RuntimeError on older interpreters.
        raise PathResolutionError(path, f"symlink loop ({exc})") from exc
    except OSError as exc:
        raise PathResolutionError(path, exc.strerror or str(exc)) from exc

    if not resolved.is_dir():
        raise PathResolutionError(path, "not a directory")
    return resolved


def default_options(context: Path, *, production: bool = False) -> BuildOptions:
    """Built-in defaults for a resolved *context*."""
    return BuildOptions(
        context=context,
        minimize=production,
        source_map=production,
        output_path=context / OUTPUT_DIRNAME,
    )


def resolve_options(
    base_dir: Union[str, Path],
    overrides: Overrides = None,
    *,
    production: bool = False,
) -> BuildOptions:
    """Resolve *base_dir*, merge *overrides* onto the defaults and apply the
    source-map invariant.

    Args:
        base_dir: Project directory; resolved before anything else.
        overrides: Partial options, either a ``PartialBuildOptions`` or a
            plain mapping using snake_case or camelCase keys.
        production: Whether this is a production build. Drives the
            ``minimize`` and ``source_map`` defaults.

    Raises:
        PathResolutionError: If *base_dir* (or an overridden ``context``)
            cannot be resolved.
        pydantic.ValidationError: If *overrides* is malformed.
    """
    context = resolve_context(base_dir)
    partial = _coerce_overrides(overrides)

    options = merge_options(default_options(context, production=production), partial)

    updates: dict[str, Any] = {}
    if "context" in partial.model_fields_set:
        updates["context"] = resolve_context(partial.context, base=context)
    if not options.output_path.is_absolute():
        updates["output_path"] = context / options.output_path
    if not options.source_map:
        updates["devtool"] = False

    if updates:
        options = options.model_copy(update=updates)
    return options


def module_paths(context: Path, tool_root: Path = TOOL_ROOT) -> tuple[str, ...]:
    """Module search paths: ambient name, then project, then tool."""
    return (
        MODULES_DIRNAME,
        str(context / MODULES_DIRNAME),
        str(tool_root / MODULES_DIRNAME),
    )


def compose(
    base_dir: Union[str, Path],
    overrides: Overrides = None,
    *,
    production: bool = False,
    tool_root: Path = TOOL_ROOT,
) -> BundleConfig:
    """Compose the complete bundler configuration for *base_dir*.

    Returns a frozen :class:`BundleConfig`; ``BundleConfig.options`` holds
    the merged :class:`BuildOptions` it was built from.
    """
    options = resolve_options(base_dir, overrides, production=production)
    search_paths = module_paths(options.context, tool_root)

    return BundleConfig(
        mode=options.mode,
        devtool=options.devtool,
        context=options.context,
        entry=options.entry,
        plugins=build_plugins(options),
        optimization=Optimization(
            minimize=options.minimize,
            split_chunks=options.split_chunks,
            runtime_chunk=options.runtime_chunk,
        ),
        output=OutputOptions(path=options.output_path),
        resolve=ResolveOptions(modules=search_paths),
        resolve_loader=ResolveOptions(modules=search_paths),
        module=ModuleOptions(rules=build_rules(options)),
        options=options,
    )


def _coerce_overrides(overrides: Overrides) -> PartialBuildOptions:
    if overrides is None:
        return PartialBuildOptions()
    if isinstance(overrides, PartialBuildOptions):
        return overrides
    return PartialBuildOptions.model_validate(dict(overrides))
