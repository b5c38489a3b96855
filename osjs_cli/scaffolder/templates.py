"""Jinja2 template rendering for scaffolding.

Scaffold templates are plain JavaScript, SCSS and JSON files with a single
substitution marker, ``___NAME___``.  ``MarkerLoader`` turns such a file into
a Jinja2 template on load: literal text is wrapped in ``{% raw %}`` blocks and
each marker becomes ``{{ NAME }}``.  Rendering therefore replaces every
occurrence of the marker and leaves everything else (``{{``, ``{%``, ``#{``)
exactly as written.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

MARKER = "___NAME___"
MARKER_VARIABLE = "NAME"


class MarkerLoader(FileSystemLoader):
    """File loader that compiles ``___NAME___`` markers into Jinja2 syntax."""

    def get_source(self, environment: Environment, template: str):
        source, filename, uptodate = super().get_source(environment, template)
        return marker_to_jinja(source), filename, uptodate


def marker_to_jinja(source: str) -> str:
    """Return *source* as Jinja2 text with only the marker substituted."""
    chunks = source.split(MARKER)
    placeholder = "{{ %s }}" % MARKER_VARIABLE
    return placeholder.join(
        "{%% raw %%}%s{%% endraw %%}" % chunk if chunk else "" for chunk in chunks
    )


class TemplateRenderer:
    """Renders marker templates from a template directory.

    The renderer discovers template files under a configurable directory and
    renders them with a context that must provide ``NAME``.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=MarkerLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"application/index.js"``).
            context: Variables for the template; ``NAME`` is required when
                the template contains the marker.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def source(self, template_path: str) -> str:
        """Return a template's raw text without substitution."""
        return (self.template_dir / template_path).read_text(encoding="utf-8")

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  Returns the output
        path.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
