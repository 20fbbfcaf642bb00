"""Client loader generator — the ``<hash>.client.js`` script.

The generated script mounts a page's HTML into the document and keeps it
re-mountable for client-side navigation.  It is four blocks joined by a
comment separator:

1. ``__render``: replace (or create) ``#_app`` with the page HTML, re-create
   inline ``<script>`` tags so they execute (skipping astound's own
   ``/.astound`` scripts), call the listener hook.  Runs immediately and is
   registered as ``window.astound.load[location.pathname]``.
2. ``addlistener``: calls ``window.astound.__addListener`` when present.
3. A ``/*renderer*/`` marker.
4. A ``load`` listener injecting every worker script as
   ``<script type="module">``.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass

from astound.config import ASTOUND_URL_PREFIX

APP_ELEMENT_ID = "_app"

SEPARATOR = "/*    */"

RENDERER_MARKER = "/*renderer*/"


@dataclass(frozen=True, slots=True)
class WorkerScript:
    """A global script contributed by a plugin's ``add_script``.

    Attributes:
        name: Name of the contributing plugin.
        script: Public URL path, e.g. ``/.astound/js/w.0a1b2c3d4e5f.js``.

    """

    name: str
    script: str


def escape_template_literal(text: str) -> str:
    """Escape *text* for embedding inside a JS backtick template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def _render_block(html: str) -> str:
    app_id = json.dumps(APP_ELEMENT_ID)
    prefix = json.dumps(ASTOUND_URL_PREFIX)
    return f"""var __render = function () {{
      const html = `{escape_template_literal(html)}`;
      var app = document.getElementById({app_id});
      if (app) {{
        app.innerHTML = "";
      }} else {{
        app = document.createElement("div");
      }}
      app.innerHTML = html; app.setAttribute("id", {app_id});
      document.body.prepend(app);
      /*rendering scripts*/
      Array.from(document.body.querySelectorAll("script")).forEach((old) => {{
        if (old.getAttribute("src")?.trim().startsWith({prefix})) return;
        const news = document.createElement("script");
        Array.from(old.attributes).forEach((attr) => news.setAttribute(attr.name, attr.value));
        news.appendChild(document.createTextNode(old.innerHTML));
        old.parentNode.replaceChild(news, old);
      }});
      addlistener();
    }};
    __render();addlistener();
    if (!window.astound) {{
      window.astound = {{}};
    }}
    if (!window.astound.load) window.astound.load = {{}};
    window.astound.load[window.location.pathname] = __render;
    """


_LISTENER_BLOCK = """function addlistener() {
      if (window.astound?.__addListener) {
        window.astound.__addListener();
      }
    }"""


def _inject_statement(script: WorkerScript) -> str:
    src = json.dumps(script.script)
    return (
        'var e=document.createElement("script");e.setAttribute("pagemodule", "");'
        f'e.setAttribute("src", {src});e.setAttribute("type", "module");'
        "document.body.appendChild(e);"
    )


def _load_block(scripts: Sequence[WorkerScript]) -> str:
    body = "/**/".join(_inject_statement(s) for s in scripts)
    return f'window.addEventListener("load", () => {{{body}}});'


def generate_html(html: str, scripts: Sequence[WorkerScript]) -> str:
    """Build the client loader script for a page.

    Args:
        html: Final ``html`` accumulator value for the page.
        scripts: Worker scripts of the current build, injected at ``load``.

    Returns:
        Browser-executable script text.

    """
    return SEPARATOR.join(
        (_render_block(html), _LISTENER_BLOCK, RENDERER_MARKER, _load_block(scripts))
    )
