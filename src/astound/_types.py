"""Shared type definitions for astound."""

from collections.abc import Callable
from typing import Any, Literal

# Route identifier: path relative to the app directory ("blog/index.html")
type RouteId = str

# Short random output name ("3f9a1c2e" -> 3f9a1c2e.js, 3f9a1c2e.client.js)
type PageHash = str

# Accumulator slot a transform writes to
type OutputType = Literal["html", "js"]

# Plugin factory stored in the registry
type PluginFactory = Callable[[], Any]
