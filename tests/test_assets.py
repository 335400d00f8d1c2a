"""Tests for wren.assets — concurrent post-processing tasks."""

import logging
from collections.abc import Callable
from pathlib import Path

import anyio
import pytest
from PIL import Image

from wren.assets import (
    bundle_scripts,
    bundle_stylesheets,
    optimize_images,
    run_post_processing,
)
from wren.config import SiteConfig


class TestRunPostProcessing:
    async def test_tasks_run_concurrently(self, make_config: Callable[..., SiteConfig]) -> None:
        events: list[str] = []

        def task(name: str):
            async def run(config: SiteConfig) -> None:
                events.append(f"start {name}")
                await anyio.sleep(0.01)
                events.append(f"end {name}")

            run.__name__ = name
            return run

        failures = await run_post_processing(make_config(), [task("css"), task("js"), task("img")])

        assert failures == []
        assert events[:3] == ["start css", "start js", "start img"]
        assert sorted(events[3:]) == ["end css", "end img", "end js"]

    async def test_failure_does_not_stop_others(
        self, make_config: Callable[..., SiteConfig], caplog: pytest.LogCaptureFixture
    ) -> None:
        finished: list[str] = []

        async def broken(config: SiteConfig) -> None:
            raise RuntimeError("disk full")

        async def slow(config: SiteConfig) -> None:
            await anyio.sleep(0.01)
            finished.append("slow")

        with caplog.at_level(logging.ERROR, logger="wren.assets"):
            failures = await run_post_processing(make_config(), [broken, slow])

        assert finished == ["slow"]
        assert len(failures) == 1
        assert failures[0].task == "broken"
        assert isinstance(failures[0].error, RuntimeError)
        assert "disk full" in caplog.text

    async def test_no_processors(self, make_config: Callable[..., SiteConfig]) -> None:
        assert await run_post_processing(make_config(), []) == []


class TestBundles:
    async def test_disabled_by_default(
        self, write: Callable[..., Path], make_config: Callable[..., SiteConfig], site_root: Path
    ) -> None:
        write("assets/a.css", "a {}")
        cfg = make_config(stylesheet_bundles=(("bundle.css", ("a.css",)),))
        await bundle_stylesheets(cfg)
        assert not (site_root / "assets" / "bundle.css").exists()

    async def test_stylesheets_concatenated(
        self, write: Callable[..., Path], make_config: Callable[..., SiteConfig], site_root: Path
    ) -> None:
        write("assets/a.css", "a {}\n")
        write("assets/b.css", "b {}")
        cfg = make_config(
            css_bundles_enable=True,
            stylesheet_bundles=(("dist/bundle.css", ("a.css", "b.css")),),
        )
        await bundle_stylesheets(cfg)
        bundle = site_root / "assets" / "dist" / "bundle.css"
        assert bundle.read_text(encoding="utf-8") == "a {}\nb {}\n"

    async def test_scripts_concatenated(
        self, write: Callable[..., Path], make_config: Callable[..., SiteConfig], site_root: Path
    ) -> None:
        write("assets/one.js", "var a = 1;")
        write("assets/two.js", "var b = 2;")
        cfg = make_config(js_bundles_enable=True, script_bundles=(("all.js", ("one.js", "two.js")),))
        await bundle_scripts(cfg)
        assert (site_root / "assets" / "all.js").read_text(encoding="utf-8") == "var a = 1;\nvar b = 2;\n"

    async def test_missing_input_fails_task(
        self, make_config: Callable[..., SiteConfig]
    ) -> None:
        cfg = make_config(css_bundles_enable=True, stylesheet_bundles=(("out.css", ("gone.css",)),))
        failures = await run_post_processing(cfg, [bundle_stylesheets])
        assert [f.task for f in failures] == ["bundle_stylesheets"]


class TestOptimizeImages:
    async def test_images_reencoded(
        self, make_config: Callable[..., SiteConfig], site_root: Path
    ) -> None:
        images = site_root / "assets" / "images"
        images.mkdir()
        Image.new("RGB", (16, 16), "red").save(images / "logo.png")
        Image.new("RGB", (16, 16), "blue").save(images / "photo.jpg")
        cfg = make_config(
            img_optimizations_enable=True,
            image_optimizations=(("images/*.*", "images/optimized"),),
        )

        await optimize_images(cfg)

        out = images / "optimized"
        with Image.open(out / "logo.png") as im:
            assert im.format == "PNG"
            assert im.size == (16, 16)
        with Image.open(out / "photo.jpg") as im:
            assert im.format == "JPEG"

    async def test_non_images_skipped(
        self, write: Callable[..., Path], make_config: Callable[..., SiteConfig], site_root: Path
    ) -> None:
        write("assets/images/readme.txt", "not an image")
        cfg = make_config(
            img_optimizations_enable=True,
            image_optimizations=(("images/*", "images/optimized"),),
        )
        await optimize_images(cfg)
        assert not (site_root / "assets" / "images" / "optimized").exists()

    async def test_disabled(self, make_config: Callable[..., SiteConfig], site_root: Path) -> None:
        images = site_root / "assets" / "images"
        images.mkdir()
        Image.new("RGB", (4, 4)).save(images / "a.png")
        cfg = make_config(image_optimizations=(("images/*.png", "images/optimized"),))
        await optimize_images(cfg)
        assert not (images / "optimized").exists()
