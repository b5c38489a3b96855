"""Pydantic v2 models for the build configuration composer.

Two families of models live here:

* **Options** -- ``BuildOptions`` (the fully merged, authoritative options)
  and ``PartialBuildOptions`` (what a caller may override).  Field names are
  snake_case in Python and camelCase on the wire, so overrides written for
  the bundler (``sourceMap``, ``outputPath``...) validate unchanged.
* **Engine schema** -- ``BundleConfig`` and its parts, mirroring the object
  the bundling engine expects (``entry``, ``module.rules``, ``plugins``,
  ``output.path``, ``resolve.modules``, ``optimization``).

Every model that leaves the composer is frozen and stores its sequences as
tuples.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel


DEFAULT_EXCLUDE_PATTERN = r"(node_modules|bower_components)"
DEFAULT_FONT_MARKER = "typeface"
DEFAULT_TITLE = "OS.js"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Mode(str, Enum):
    """Bundler build mode."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


# ---------------------------------------------------------------------------
# Base classes
# ---------------------------------------------------------------------------

class _WireModel(BaseModel):
    """Frozen model serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class _PassThroughModel(_WireModel):
    """Like ``_WireModel`` but keeps unknown keys for the engine."""

    model_config = ConfigDict(extra="allow")


class _OverrideModel(BaseModel):
    """Partial model: unknown keys are an error, everything is optional."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# ---------------------------------------------------------------------------
# Rule & plugin descriptors
# ---------------------------------------------------------------------------

class LoaderSpec(_PassThroughModel):
    """A single loader in a rule's processing chain."""
    loader: str = Field(..., description="Loader module specifier, e.g. 'css-loader'")
    options: dict[str, Any] = Field(default_factory=dict)


class RuleDescriptor(_PassThroughModel):
    """A transformation rule: a path predicate plus a loader chain.

    ``test``, ``include`` and ``exclude`` are regular expressions searched
    against the module path.  The rule applies when ``test`` matches, the
    ``include`` pattern (if any) matches and the ``exclude`` pattern (if any)
    does not.
    """
    test: str = Field(..., description="Regex the path must match, e.g. r'\\.js$'")
    include: Optional[str] = Field(default=None)
    exclude: Optional[str] = Field(default=None)
    use: tuple[LoaderSpec, ...] = Field(default=())
    name: Optional[str] = Field(default=None, exclude=True, description="Label used in listings")

    @field_validator("test", "include", "exclude")
    @classmethod
    def check_patterns(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid pattern {value!r}: {exc}") from exc
        return value

    def matches(self, path: str) -> bool:
        """Return ``True`` if this rule applies to *path*."""
        normalized = str(path).replace("\\", "/")
        if not re.search(self.test, normalized):
            return False
        if self.include is not None and not re.search(self.include, normalized):
            return False
        if self.exclude is not None and re.search(self.exclude, normalized):
            return False
        return True

    @property
    def loaders(self) -> list[str]:
        return [spec.loader for spec in self.use]


class PluginDescriptor(_PassThroughModel):
    """An output plugin, described by module specifier and constructor args."""
    plugin: str = Field(..., description="Plugin module specifier")
    args: tuple[Any, ...] = Field(default=())


class CopyRule(_PassThroughModel):
    """A static asset copy pattern (``from`` glob -> ``to`` destination)."""
    source: str = Field(..., alias="from")
    to: Optional[str] = Field(default=None)


# ---------------------------------------------------------------------------
# Nested option groups
# ---------------------------------------------------------------------------

def _blank_template(value: Any) -> Any:
    """An empty template string means "no HTML page", same as ``None``."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class HtmlOptions(_WireModel):
    """Controls whether (and how) an HTML entry page is emitted."""
    template: Optional[Path] = Field(default=None)
    title: str = Field(default=DEFAULT_TITLE)

    @field_validator("template", mode="before")
    @classmethod
    def blank_template_is_unset(cls, value: Any) -> Any:
        return _blank_template(value)


class ScriptTransformOptions(_WireModel):
    """Options handed to the script transformer (babel-loader)."""
    cache_directory: bool = Field(default=True)
    presets: tuple[str, ...] = Field(default=("@babel/preset-env",))
    plugins: tuple[str, ...] = Field(default=("@babel/plugin-transform-runtime",))


class HtmlOverrides(_OverrideModel):
    template: Optional[Path] = None
    title: Optional[str] = None

    @field_validator("template", mode="before")
    @classmethod
    def blank_template_is_unset(cls, value: Any) -> Any:
        return _blank_template(value)


class ScriptTransformOverrides(_OverrideModel):
    cache_directory: Optional[bool] = None
    presets: Optional[list[str]] = None
    plugins: Optional[list[str]] = None


# ---------------------------------------------------------------------------
# Build options
# ---------------------------------------------------------------------------

EntryValue = Union[str, list[str]]
Devtool = Union[Literal[False], str]
ChunkSetting = Union[bool, dict[str, Any]]

# Overrides for these may be omitted but not set to null.
REQUIRED_OVERRIDE_FIELDS = (
    "mode",
    "context",
    "minimize",
    "source_map",
    "devtool",
    "output_path",
    "split_chunks",
    "runtime_chunk",
    "font_marker",
)


class BuildOptions(_WireModel):
    """The authoritative, fully merged build options.

    Instances are produced by :func:`osjs_cli.composer.resolve_options` and
    never modified afterwards.
    """

    mode: Mode = Field(default=Mode.DEVELOPMENT)
    context: Path
    minimize: bool = Field(default=False)
    source_map: bool = Field(default=False)
    devtool: Devtool = Field(default="source-map")
    exclude_pattern: Optional[str] = Field(
        default=DEFAULT_EXCLUDE_PATTERN,
        description="Paths the script rule skips; None disables the exclusion",
    )
    output_path: Path
    html: HtmlOptions = Field(default_factory=HtmlOptions)
    entry: dict[str, EntryValue] = Field(default_factory=dict)
    plugins: tuple[PluginDescriptor, ...] = Field(default=())
    copy_patterns: tuple[CopyRule, ...] = Field(default=(), alias="copy")
    rules: tuple[RuleDescriptor, ...] = Field(default=())
    script_transform: ScriptTransformOptions = Field(default_factory=ScriptTransformOptions)
    include_paths: tuple[str, ...] = Field(default=())
    split_chunks: ChunkSetting = Field(default=False)
    runtime_chunk: ChunkSetting = Field(default=False)
    font_marker: str = Field(
        default=DEFAULT_FONT_MARKER,
        min_length=1,
        description="Path marker that routes SVGs to the font rule instead of the bare-svg rule",
    )

    @field_validator("exclude_pattern")
    @classmethod
    def check_exclude_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid exclude pattern {value!r}: {exc}") from exc
        return value


class PartialBuildOptions(_OverrideModel):
    """Caller-supplied overrides.

    Only fields that were explicitly given take part in the merge, so an
    explicit ``None`` (e.g. ``html.template``) still overrides the default.
    Fields that are never null in ``BuildOptions`` reject an explicit
    ``None`` here, so the error names the override rather than the merge.
    The legacy keys ``exclude`` and ``babel`` are accepted as aliases.
    """

    mode: Optional[Mode] = None
    context: Optional[Path] = None
    minimize: Optional[bool] = None
    source_map: Optional[bool] = None
    devtool: Optional[Devtool] = None
    exclude_pattern: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("exclude_pattern", "excludePattern", "exclude"),
    )
    output_path: Optional[Path] = None
    html: Optional[HtmlOverrides] = None
    entry: Optional[dict[str, EntryValue]] = None
    plugins: Optional[list[PluginDescriptor]] = None
    copy_patterns: Optional[list[CopyRule]] = Field(default=None, alias="copy")
    rules: Optional[list[RuleDescriptor]] = None
    script_transform: Optional[ScriptTransformOverrides] = Field(
        default=None,
        validation_alias=AliasChoices("script_transform", "scriptTransform", "babel"),
    )
    include_paths: Optional[list[str]] = None
    split_chunks: Optional[ChunkSetting] = None
    runtime_chunk: Optional[ChunkSetting] = None
    font_marker: Optional[str] = Field(default=None, min_length=1)

    @field_validator(*REQUIRED_OVERRIDE_FIELDS)
    @classmethod
    def reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


# ---------------------------------------------------------------------------
# Engine schema
# ---------------------------------------------------------------------------

class Optimization(_WireModel):
    minimize: bool
    split_chunks: ChunkSetting = False
    runtime_chunk: ChunkSetting = False


class OutputOptions(_WireModel):
    path: Path
    source_map_filename: str = "[file].map"
    filename: str = "[name].js"


class ResolveOptions(_WireModel):
    modules: tuple[str, ...]


class ModuleOptions(_WireModel):
    rules: tuple[RuleDescriptor, ...]


class BundleConfig(_WireModel):
    """Complete configuration for the bundling engine.

    ``options`` carries the merged :class:`BuildOptions` the configuration
    was derived from; it is not part of the engine schema and is left out of
    :meth:`to_webpack`.
    """

    mode: Mode
    devtool: Devtool
    context: Path
    entry: dict[str, EntryValue]
    plugins: tuple[PluginDescriptor, ...]
    optimization: Optimization
    output: OutputOptions
    resolve: ResolveOptions
    resolve_loader: ResolveOptions
    module: ModuleOptions
    options: BuildOptions = Field(exclude=True)

    def to_webpack(self) -> dict[str, Any]:
        """Return the JSON-ready, camelCase configuration object."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def match_rule(self, path: str) -> Optional[RuleDescriptor]:
        """Return the first rule that applies to *path*, or ``None``."""
        from .rules import match_rule

        return match_rule(self.module.rules, path)
