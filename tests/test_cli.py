"""Tests for astound._cli — argument parsing and command dispatch."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from astound._cli import _build_parser, main


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_build_default_args(self) -> None:
        args = _build_parser().parse_args(["build"])
        assert args.command == "build"
        assert args.root == "."
        assert args.public_dir is None
        assert args.app_dir is None
        assert args.plugins is None

    def test_build_all_flags(self) -> None:
        args = _build_parser().parse_args([
            "build", "my-app/",
            "--public", "www",
            "--app", "pages",
            "--plugin", "html",
            "--plugin", "mypkg:tailwind",
        ])
        assert args.root == "my-app/"
        assert args.public_dir == "www"
        assert args.app_dir == "pages"
        assert args.plugins == ["html", "mypkg:tailwind"]

    def test_dev_default_args(self) -> None:
        args = _build_parser().parse_args(["dev"])
        assert args.command == "dev"
        assert args.root == "."

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["--version"])
        assert "astound" in capsys.readouterr().out


class TestMain:
    """main — dispatch to astound.app."""

    def test_no_command_prints_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0

    def test_build_dispatch(self) -> None:
        with patch("astound.app.build") as mock_build:
            main(["build", "site", "--app", "pages"])
        mock_build.assert_called_once_with(
            root="site", public_dir=None, app_dir="pages", plugins=None,
        )

    def test_dev_dispatch(self) -> None:
        with patch("astound.app.dev") as mock_dev:
            main(["dev"])
        mock_dev.assert_called_once_with(
            root=".", public_dir=None, app_dir=None, plugins=None,
        )
