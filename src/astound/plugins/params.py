"""Params plugin — dynamic route parameters on the client.

Route files with bracketed segments declare parameters::

    app/blog/[slug].html     -> pattern /blog/[slug]
    app/[lang]/index.md      -> pattern /[lang]

Each dynamic page registers its pattern in ``window.astound.patterns``; the
worker script matches ``location.pathname`` against the registered patterns
on load and on history navigation and exposes the result as
``window.astound.params``.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

from astound.plugins.base import TransformOutput

if TYPE_CHECKING:
    from astound.plugins.base import Accumulator

_PARAM_RE = re.compile(r"\[([A-Za-z_][A-Za-z0-9_]*)\]")

_PARAMS_WORKER = """\
(function () {
  var a = window.astound = window.astound || {};
  a.patterns = a.patterns || [];
  a.matchParams = function (pattern, path) {
    var ps = pattern.split("/").filter(Boolean);
    var xs = path.split("/").filter(Boolean);
    if (ps.length !== xs.length) return null;
    var out = {};
    for (var i = 0; i < ps.length; i++) {
      var m = /^\\[(\\w+)\\]$/.exec(ps[i]);
      if (m) out[m[1]] = decodeURIComponent(xs[i]);
      else if (ps[i] !== xs[i]) return null;
    }
    return out;
  };
  function update() {
    a.params = {};
    for (var i = 0; i < a.patterns.length; i++) {
      var found = a.matchParams(a.patterns[i], window.location.pathname);
      if (found) { a.params = found; break; }
    }
  }
  update();
  window.addEventListener("popstate", update);
})();
"""


def route_pattern(route_id: str) -> str:
    """URL pattern for a route file.

    ``blog/[slug].html`` -> ``/blog/[slug]``, ``index.md`` -> ``/``.

    """
    parts = route_id.split("/")
    parts[-1] = parts[-1].rsplit(".", 1)[0]
    if parts[-1] == "index":
        parts.pop()
    return "/" + "/".join(parts)


def route_params(route_id: str) -> list[str]:
    """Parameter names declared by a route file, in path order."""
    return _PARAM_RE.findall(route_id)


class ParamsPlugin:
    """Built-in plugin exposing dynamic route parameters."""

    name = "astound:params"

    def transform(
        self, route_id: str, source: str, accumulator: Accumulator,
    ) -> TransformOutput | None:
        if not route_params(route_id):
            return None
        pattern = json.dumps(route_pattern(route_id))
        register = (
            "(window.astound = window.astound || {});"
            f"(window.astound.patterns = window.astound.patterns || []).push({pattern});"
        )
        code = f"{accumulator.js}\n{register}" if accumulator.js else register
        return TransformOutput(type="js", code=code)

    def add_script(self) -> str:
        return _PARAMS_WORKER
