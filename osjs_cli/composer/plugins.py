"""Output plugin assembly.

Order is fixed: stylesheet extraction, asset copy, caller plugins, and the
HTML page last when a template is configured.
"""

from __future__ import annotations

from typing import Optional

from .models import BuildOptions, PluginDescriptor


EXTRACT_PLUGIN = "extract-text-webpack-plugin"
COPY_PLUGIN = "copy-webpack-plugin"
HTML_PLUGIN = "html-webpack-plugin"

EXTRACTED_STYLESHEET_NAME = "[name].css"


def extract_plugin() -> PluginDescriptor:
    return PluginDescriptor(plugin=EXTRACT_PLUGIN, args=(EXTRACTED_STYLESHEET_NAME,))


def copy_plugin(options: BuildOptions) -> PluginDescriptor:
    patterns = [
        rule.model_dump(mode="json", by_alias=True, exclude_none=True)
        for rule in options.copy_patterns
    ]
    return PluginDescriptor(plugin=COPY_PLUGIN, args=(patterns,))


def html_plugin(options: BuildOptions) -> Optional[PluginDescriptor]:
    """Return the HTML page plugin, or ``None`` when no template is set."""
    if options.html.template is None:
        return None
    return PluginDescriptor(
        plugin=HTML_PLUGIN,
        args=({"template": str(options.html.template), "title": options.html.title},),
    )


def build_plugins(options: BuildOptions) -> tuple[PluginDescriptor, ...]:
    plugins = [extract_plugin(), copy_plugin(options), *options.plugins]
    html = html_plugin(options)
    if html is not None:
        plugins.append(html)
    return tuple(plugins)
