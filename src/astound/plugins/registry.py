"""Plugin registry — resolve plugin references to plugin objects.

References are either registry keys (``"html"``), dotted import paths
(``"mypkg.plugins:tailwind"``), or bare module paths (``"mypkg.plugin"``,
where the module itself exposes ``transform``/``add_script``).  A resolved
object that is not itself a plugin but is callable is treated as a factory
and called with no arguments.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

from astound._errors import PluginResolutionError

if TYPE_CHECKING:
    from astound._types import PluginFactory


def is_plugin(obj: object) -> bool:
    """Whether *obj* exposes at least one plugin capability."""
    if isinstance(obj, type):
        return False
    return callable(getattr(obj, "transform", None)) or callable(
        getattr(obj, "add_script", None)
    )


class PluginRegistry:
    """Mapping of string keys to plugin factories."""

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        self._factories: dict[str, PluginFactory] = {}

    def register(self, key: str, factory: PluginFactory) -> None:
        """Register *factory* under *key*, replacing any previous entry."""
        self._factories[key] = factory

    def __contains__(self, key: object) -> bool:
        return key in self._factories

    def keys(self) -> list[str]:
        """Registered keys, sorted."""
        return sorted(self._factories)

    def resolve(self, ref: Any) -> Any:
        """Turn *ref* into a plugin object.

        Plugin objects pass through unchanged.

        Raises:
            PluginResolutionError: If *ref* cannot be imported or does not
                produce an object with a plugin capability.

        """
        if not isinstance(ref, str):
            obj = ref
            source = repr(ref)
        elif ref in self._factories:
            obj = self._factories[ref]
            source = ref
        else:
            obj = _import_reference(ref)
            source = ref

        if not is_plugin(obj) and callable(obj):
            try:
                obj = obj()
            except Exception as exc:
                msg = f"Plugin factory {source} failed: {exc}"
                raise PluginResolutionError(msg) from exc

        if not is_plugin(obj):
            msg = f"Plugin {source} has neither transform() nor add_script()"
            raise PluginResolutionError(msg)
        return obj


def _import_reference(ref: str) -> Any:
    """Import ``module:attr``, ``module.attr`` or a bare module."""
    module_path, sep, attr = ref.partition(":")
    if not module_path:
        msg = f"Invalid plugin reference {ref!r}"
        raise PluginResolutionError(msg)

    if sep:
        module = _import_module(module_path, ref)
        return _get_attr(module, attr, ref)

    try:
        return importlib.import_module(module_path)
    except ImportError as first_exc:
        parent, _, attr = module_path.rpartition(".")
        if not parent:
            msg = f"Cannot import plugin {ref!r}: {first_exc}"
            raise PluginResolutionError(msg) from first_exc
        module = _import_module(parent, ref)
        return _get_attr(module, attr, ref)
    except Exception as exc:
        msg = f"Plugin module {module_path!r} failed to import: {exc!r}"
        raise PluginResolutionError(msg) from exc


def _import_module(module_path: str, ref: str) -> Any:
    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Cannot import plugin {ref!r}: {exc}"
        raise PluginResolutionError(msg) from exc
    except Exception as exc:
        msg = f"Plugin module {module_path!r} failed to import: {exc!r}"
        raise PluginResolutionError(msg) from exc


def _get_attr(module: Any, attr: str, ref: str) -> Any:
    # Module-level __getattr__ may raise anything.
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        msg = f"Plugin {ref!r}: {module.__name__} has no attribute {attr!r}"
        raise PluginResolutionError(msg) from exc
    except Exception as exc:
        msg = f"Plugin {ref!r}: looking up {attr!r} failed: {exc!r}"
        raise PluginResolutionError(msg) from exc


def default_registry() -> PluginRegistry:
    """A registry pre-populated with the built-in plugins."""
    from astound.plugins.client import ClientPlugin
    from astound.plugins.html import HTMLPlugin
    from astound.plugins.params import ParamsPlugin

    registry = PluginRegistry()
    registry.register("html", HTMLPlugin)
    registry.register("client", ClientPlugin)
    registry.register("params", ParamsPlugin)
    return registry
