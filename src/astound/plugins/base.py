"""Plugin contract for the transform pipeline.

A plugin is any object exposing some of:

    name: str                                   -- used in logs and worker names
    transform(route_id, source, accumulator)    -- per-route, sync or async
    add_script() -> str                         -- global worker script, once per build

Every capability is optional.  ``transform`` returns a :class:`TransformOutput`
(or a ``{"type": ..., "code": ...}`` mapping) to overwrite one accumulator
slot, or *None* to leave the accumulator alone.  A plugin may also write to
the accumulator directly; later plugins see those writes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from astound._errors import BuildError

if TYPE_CHECKING:
    from astound._types import OutputType

_OUTPUT_TYPES = frozenset({"html", "js"})


@dataclass(slots=True)
class Accumulator:
    """Per-route output threaded through the plugin chain.

    Owned by a single route build and discarded once its files are written.

    """

    js: str = ""
    html: str = ""

    def apply(self, output: TransformOutput) -> None:
        """Overwrite the slot named by *output*."""
        if output.type == "html":
            self.html = output.code
        else:
            self.js = output.code


@dataclass(frozen=True, slots=True)
class TransformOutput:
    """Replacement code for one accumulator slot."""

    type: OutputType
    code: str

    @classmethod
    def coerce(cls, value: object, plugin: str) -> TransformOutput | None:
        """Normalize a transform's return value.

        Accepts *None*, a TransformOutput, or a mapping with ``type`` and
        ``code`` keys.  Outputs tagged with anything other than ``html`` or
        ``js`` are ignored.

        Raises:
            BuildError: If *value* is none of the accepted shapes.

        """
        if value is None:
            return None
        if isinstance(value, TransformOutput):
            output = value
        elif isinstance(value, Mapping) and "type" in value:
            output = cls(type=value["type"], code=str(value.get("code", "")))
        else:
            msg = (
                f"Plugin {plugin!r} returned {type(value).__name__}; "
                f"expected TransformOutput, a {{'type', 'code'}} mapping, or None"
            )
            raise BuildError(msg)
        if output.type not in _OUTPUT_TYPES:
            return None
        return output


def plugin_name(plugin: Any) -> str:
    """Human-readable name for *plugin* (its ``name`` or its type name)."""
    name = getattr(plugin, "name", None)
    if isinstance(name, str) and name:
        return name
    if isinstance(plugin, type):
        return plugin.__name__
    return getattr(plugin, "__name__", None) or type(plugin).__name__
