"""Transformation rule assembly.

The rule list is ordered and the first matching rule wins, so caller rules
are placed ahead of the built-ins.  The built-ins are, in order:

1. images       -> file-loader
2. stylesheets  -> extract (fallback style-loader) -> css-loader -> sass-loader
3. scripts      -> babel-loader (minus ``exclude_pattern``)
4. fonts        -> file-loader into ``fonts/`` (path contains ``font_marker``)
5. bare SVGs    -> file-loader (path does *not* contain ``font_marker``)

Rules 4 and 5 both accept ``.svg``; the font marker keeps them disjoint.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Optional

from .models import BuildOptions, LoaderSpec, RuleDescriptor


IMAGE_TEST = r"\.(png|jpe?g|gif|webp)$"
STYLESHEET_TEST = r"\.s?css$"
SCRIPT_TEST = r"\.js$"
FONT_TEST = r"\.(eot|svg|ttf|woff|woff2)$"
SVG_TEST = r"\.svg$"

EXTRACT_LOADER = "extract-text-webpack-plugin/dist/loader.js"
FALLBACK_LOADERS: tuple[str, ...] = ("style-loader",)


def image_rule(options: BuildOptions) -> RuleDescriptor:
    return RuleDescriptor(
        name="images",
        test=IMAGE_TEST,
        use=[LoaderSpec(loader="file-loader")],
    )


def stylesheet_rule(options: BuildOptions) -> RuleDescriptor:
    """Stylesheets go through SCSS, CSS and finally get extracted to a file.

    The extract loader's ``omit`` count skips the fallback loaders that sit
    between it and ``css-loader`` when the child compiler runs.
    """
    shared = {"minimize": options.minimize, "sourceMap": options.source_map}
    fallback = [LoaderSpec(loader=loader) for loader in FALLBACK_LOADERS]
    return RuleDescriptor(
        name="stylesheets",
        test=STYLESHEET_TEST,
        use=[
            LoaderSpec(
                loader=EXTRACT_LOADER,
                options={"omit": len(fallback), "remove": True},
            ),
            *fallback,
            LoaderSpec(loader="css-loader", options=dict(shared)),
            LoaderSpec(
                loader="sass-loader",
                options={**shared, "includePaths": list(options.include_paths)},
            ),
        ],
    )


def script_rule(options: BuildOptions) -> RuleDescriptor:
    return RuleDescriptor(
        name="scripts",
        test=SCRIPT_TEST,
        exclude=options.exclude_pattern,
        use=[
            LoaderSpec(
                loader="babel-loader",
                options=options.script_transform.model_dump(mode="json", by_alias=True),
            )
        ],
    )


def font_rule(options: BuildOptions) -> RuleDescriptor:
    return RuleDescriptor(
        name="fonts",
        test=FONT_TEST,
        include=re.escape(options.font_marker),
        use=[LoaderSpec(loader="file-loader", options={"name": "fonts/[name].[ext]"})],
    )


def svg_rule(options: BuildOptions) -> RuleDescriptor:
    return RuleDescriptor(
        name="svg",
        test=SVG_TEST,
        exclude=re.escape(options.font_marker),
        use=[LoaderSpec(loader="file-loader")],
    )


BUILTIN_RULES: tuple[Callable[[BuildOptions], RuleDescriptor], ...] = (
    image_rule,
    stylesheet_rule,
    script_rule,
    font_rule,
    svg_rule,
)


def build_rules(options: BuildOptions) -> tuple[RuleDescriptor, ...]:
    """Return caller rules followed by the built-in rules."""
    return (*options.rules, *(factory(options) for factory in BUILTIN_RULES))


def match_rule(rules: Iterable[RuleDescriptor], path: str) -> Optional[RuleDescriptor]:
    """First-match-wins lookup over an ordered rule list."""
    for rule in rules:
        if rule.matches(path):
            return rule
    return None
