"""Plugins — the transform contract, the registry, and the built-ins.

Built-in plugins run after user plugins, in this order:

    HTMLPlugin     html/markdown sources -> page markup
    ClientPlugin   <script client> blocks -> page bundle
    ParamsPlugin   [param] route segments -> window.astound.params
"""

from astound.plugins.base import Accumulator, TransformOutput, plugin_name
from astound.plugins.client import ClientPlugin
from astound.plugins.html import HTMLPlugin
from astound.plugins.params import ParamsPlugin
from astound.plugins.registry import PluginRegistry, default_registry, is_plugin

__all__ = [
    "Accumulator",
    "ClientPlugin",
    "HTMLPlugin",
    "ParamsPlugin",
    "PluginRegistry",
    "TransformOutput",
    "builtin_plugins",
    "default_registry",
    "is_plugin",
    "plugin_name",
]


def builtin_plugins() -> list[object]:
    """Fresh instances of the built-in plugins, in application order."""
    return [HTMLPlugin(), ClientPlugin(), ParamsPlugin()]
