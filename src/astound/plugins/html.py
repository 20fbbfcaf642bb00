"""HTML plugin — page markup for ``.html`` and Markdown routes.

``.html``/``.htm`` sources are used verbatim; ``.md``/``.markdown`` sources
are rendered with Patitas after stripping YAML frontmatter.  The plugin only
fills an empty ``html`` slot, so markup produced by an earlier user plugin
wins over the raw source.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from astound.plugins.base import TransformOutput

if TYPE_CHECKING:
    from patitas import Markdown

    from astound.plugins.base import Accumulator

_HTML_EXTENSIONS = frozenset({".html", ".htm"})
_MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown"})


def strip_frontmatter(source: str) -> str:
    """Strip YAML frontmatter from markdown source, returning the body.

    Frontmatter is delimited by ``---`` on its own line at the start of the file.
    If no valid frontmatter is found, returns the full source unchanged.

    """
    if not source.startswith("---"):
        return source
    end = source.find("\n---", 3)
    if end == -1:
        return source
    return source[end + 4:].lstrip("\n")


def _suffix(route_id: str) -> str:
    name = route_id.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:].lower() if dot > 0 else ""


class HTMLPlugin:
    """Built-in plugin turning HTML and Markdown sources into page markup."""

    name = "astound:html"

    def __init__(self) -> None:
        self._md: Markdown | None = None

    def transform(
        self, route_id: str, source: str, accumulator: Accumulator,
    ) -> TransformOutput | None:
        if accumulator.html:
            return None
        suffix = _suffix(route_id)
        if suffix in _HTML_EXTENSIONS:
            return TransformOutput(type="html", code=source)
        if suffix in _MARKDOWN_EXTENSIONS:
            return TransformOutput(type="html", code=self._render_markdown(source))
        return None

    def _render_markdown(self, source: str) -> str:
        if self._md is None:
            from patitas import Markdown

            self._md = Markdown(plugins=["table"])
        return self._md(strip_frontmatter(source))
