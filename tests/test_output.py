"""Tests for wren.output — generated file paths and page responses."""

from collections.abc import Callable
from pathlib import Path

import pytest

from wren.config import SiteConfig
from wren.errors import ConfigurationError
from wren.output import build_response, output_path, write_artifact
from wren.routing.route import RouteParameters


class TestOutputPath:
    @pytest.mark.parametrize(
        ("current", "expected"),
        [
            ("/about.html", ("about.html",)),
            ("/blog/", ("blog", "index.html")),
            ("/", ("index.html",)),
            ("", ("index.html",)),
            ("/a/b/c.html", ("a", "b", "c.html")),
        ],
    )
    def test_page_path(
        self,
        make_config: Callable[..., SiteConfig],
        site_root: Path,
        current: str,
        expected: tuple[str, ...],
    ) -> None:
        path = output_path(make_config(), RouteParameters(view="x.html"), current)
        assert path == site_root.resolve().joinpath("serverless", *expected)

    def test_output_override(self, make_config: Callable[..., SiteConfig], site_root: Path) -> None:
        params = RouteParameters(view="x.html", output="/export/page.html")
        path = output_path(make_config(), params, "/page/")
        assert path == site_root.resolve() / "serverless" / "export" / "page.html"

    def test_output_disabled(self, make_config: Callable[..., SiteConfig]) -> None:
        params = RouteParameters(view="x.html", output=False)
        assert output_path(make_config(), params, "/page.html") is None

    def test_escape_rejected(self, make_config: Callable[..., SiteConfig]) -> None:
        params = RouteParameters(view="x.html", output="../../outside.html")
        with pytest.raises(ConfigurationError):
            output_path(make_config(), params, "/page.html")

    def test_custom_generated_dir(self, make_config: Callable[..., SiteConfig], site_root: Path) -> None:
        path = output_path(make_config(generated_dir="public"), RouteParameters(), "/a.html")
        assert path == site_root.resolve() / "public" / "a.html"


class TestWriteArtifact:
    async def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "er" / "index.html"
        result = await write_artifact(target, "<p>é</p>")
        assert result == target
        assert target.read_text(encoding="utf-8") == "<p>é</p>"

    async def test_encoding(self, tmp_path: Path) -> None:
        target = tmp_path / "page.html"
        await write_artifact(target, "é", encoding="latin-1")
        assert target.read_bytes() == b"\xe9"


class TestBuildResponse:
    def test_site_defaults(self) -> None:
        response = build_response("<p></p>", SiteConfig(), RouteParameters())
        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"
        assert response.text == "<p></p>"

    def test_route_overrides(self) -> None:
        params = RouteParameters(status_code=404, mime_type="application/xml", charset="latin-1")
        response = build_response("<x/>", SiteConfig(), params)
        assert response.status == 404
        assert response.content_type == "application/xml; charset=latin-1"

    def test_headers_site_then_route(self) -> None:
        cfg = SiteConfig(headers=(("X-Site", "1"),))
        params = RouteParameters(headers=(("X-Route", "2"),))
        response = build_response("", cfg, params)
        assert response.headers == (("X-Site", "1"), ("X-Route", "2"))
