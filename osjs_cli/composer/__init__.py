"""Build configuration composer for the bundling engine.

Quick usage::

    from osjs_cli.composer import compose

    config = compose("/path/to/project", {"html": {"template": "index.html"}})
    config.to_webpack()           # JSON-ready dict for webpack
    config.match_rule("a.scss")   # first rule that applies
"""

from osjs_cli.composer.composer import (
    TOOL_ROOT,
    Bundler,
    PathResolutionError,
    bundler,
    compose,
    default_options,
    module_paths,
    resolve_context,
    resolve_options,
)
from osjs_cli.composer.merge import FIELD_POLICIES, MergePolicy, merge_options
from osjs_cli.composer.models import (
    BuildOptions,
    BundleConfig,
    CopyRule,
    LoaderSpec,
    Mode,
    PartialBuildOptions,
    PluginDescriptor,
    RuleDescriptor,
)
from osjs_cli.composer.rules import build_rules, match_rule

__all__ = [
    "TOOL_ROOT",
    "BuildOptions",
    "BundleConfig",
    "Bundler",
    "CopyRule",
    "FIELD_POLICIES",
    "LoaderSpec",
    "MergePolicy",
    "Mode",
    "PartialBuildOptions",
    "PathResolutionError",
    "PluginDescriptor",
    "RuleDescriptor",
    "build_rules",
    "bundler",
    "compose",
    "default_options",
    "match_rule",
    "merge_options",
    "module_paths",
    "resolve_context",
    "resolve_options",
]
