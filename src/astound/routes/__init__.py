"""Route discovery and compiled-module loading.

Public API::

    from astound.routes import configure_routes

    for route in configure_routes(config):
        print(route.file, route.ext)
"""

from astound.routes.configure import RouteDescriptor, configure_routes, is_route_file
from astound.routes.loader import COMPILED_EXTENSIONS, LoadedModule, generate_module

__all__ = [
    "COMPILED_EXTENSIONS",
    "LoadedModule",
    "RouteDescriptor",
    "configure_routes",
    "generate_module",
    "is_route_file",
]
