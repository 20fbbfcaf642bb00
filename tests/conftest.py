"""Shared test fixtures for astound."""

from __future__ import annotations

from pathlib import Path

import pytest

from astound.config import AstoundConfig


@pytest.fixture
def tmp_app(tmp_path: Path) -> Path:
    """Create a minimal project: app/ with one tsx route and an empty public/."""
    app = tmp_path / "app"
    app.mkdir()
    (app / "index.tsx").write_text("export default () => <h1>Home</h1>;\n")
    (tmp_path / "public").mkdir()
    return tmp_path


@pytest.fixture
def config(tmp_app: Path) -> AstoundConfig:
    """An AstoundConfig rooted at tmp_app with no user plugins."""
    return AstoundConfig(root=tmp_app, public_dir="public", app_dir="app", plugins=())


@pytest.fixture
def site_app(tmp_app: Path) -> Path:
    """Extend tmp_app with html, markdown, dynamic and compiled routes."""
    app = tmp_app / "app"
    (app / "about.html").write_text(
        "<h1>About</h1>\n<script client>console.log('about');</script>\n"
    )
    blog = app / "blog"
    blog.mkdir()
    (blog / "[slug].md").write_text("---\ntitle: Post\n---\n\n# Post\n")
    api = app / "api"
    api.mkdir()
    (api / "users.py").write_text("USERS = ['ada']\n")
    (app / "_layout.html").write_text("<main></main>")
    return tmp_app
