"""Client plugin — move ``<script client>`` blocks into the page bundle.

Inline scripts marked with the ``client`` attribute are removed from the
page markup and appended, in document order, to the route's ``js`` slot::

    <h1>Counter</h1>
    <script client>let n = 0;</script>

becomes ``html = "<h1>Counter</h1>\\n"`` and ``js = "let n = 0;"``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from astound.plugins.base import TransformOutput

if TYPE_CHECKING:
    from astound.plugins.base import Accumulator

_CLIENT_SCRIPT_RE = re.compile(
    r"<script\b(?=[^>]*\sclient(?:[\s=>/]|$))[^>]*>(.*?)</script\s*>",
    re.IGNORECASE | re.DOTALL,
)


def extract_client_scripts(html: str) -> tuple[str, list[str]]:
    """Split *html* into markup without client scripts and the script bodies."""
    scripts = [m.group(1).strip() for m in _CLIENT_SCRIPT_RE.finditer(html)]
    return _CLIENT_SCRIPT_RE.sub("", html), scripts


class ClientPlugin:
    """Built-in plugin collecting client-side page scripts."""

    name = "astound:client"

    def transform(
        self, route_id: str, source: str, accumulator: Accumulator,
    ) -> TransformOutput | None:
        html, scripts = extract_client_scripts(accumulator.html)
        if not scripts:
            return None
        accumulator.html = html
        code = "\n".join(s for s in (accumulator.js, *scripts) if s)
        return TransformOutput(type="js", code=code)
