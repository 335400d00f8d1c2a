"""Asset post-processing run before a page is sent.

Three independent tasks prepare the assets a page references:

- ``bundle_stylesheets`` — concatenates stylesheet bundles
- ``bundle_scripts`` — concatenates script bundles
- ``optimize_images`` — re-encodes images with Pillow's optimizer

Each is a no-op unless its ``*_enable`` flag is set. ``run_post_processing``
starts them concurrently and returns once all of them have finished,
whether they succeeded or not: a failing task is logged and reported,
never raised, so the response still goes out.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import anyio
import anyio.to_thread
from PIL import Image

from wren.config import SiteConfig
from wren.labels import POST_PROCESSING_FAILED

logger = logging.getLogger("wren.assets")

type PostProcessor = Callable[[SiteConfig], Awaitable[None]]

# Formats Pillow can re-encode losslessly or with a quality setting
_RASTER_FORMATS = {".jpg": "JPEG", ".jpeg": "JPEG", ".png": "PNG", ".gif": "GIF", ".webp": "WEBP"}


@dataclass(frozen=True, slots=True)
class PostProcessingFailure:
    """A task that raised during ``run_post_processing``."""

    task: str
    error: BaseException


# -- Tasks --


async def bundle_stylesheets(config: SiteConfig) -> None:
    """Write every stylesheet bundle (``css_bundles_enable``)."""
    if not config.css_bundles_enable or not config.stylesheet_bundles:
        return
    await anyio.to_thread.run_sync(_write_bundles, config, config.stylesheet_bundles)


async def bundle_scripts(config: SiteConfig) -> None:
    """Write every script bundle (``js_bundles_enable``)."""
    if not config.js_bundles_enable or not config.script_bundles:
        return
    await anyio.to_thread.run_sync(_write_bundles, config, config.script_bundles)


async def optimize_images(config: SiteConfig) -> None:
    """Re-encode matching images into their output folders (``img_optimizations_enable``)."""
    if not config.img_optimizations_enable or not config.image_optimizations:
        return
    await anyio.to_thread.run_sync(_optimize_images, config)


DEFAULT_POST_PROCESSORS: tuple[PostProcessor, ...] = (
    bundle_stylesheets,
    bundle_scripts,
    optimize_images,
)


async def run_post_processing(
    config: SiteConfig,
    processors: Sequence[PostProcessor] = DEFAULT_POST_PROCESSORS,
) -> list[PostProcessingFailure]:
    """Run *processors* concurrently and wait for all of them.

    Returns the failures, in completion order. An empty list means every
    task succeeded.
    """
    failures: list[PostProcessingFailure] = []

    async def _run(processor: PostProcessor) -> None:
        name = getattr(processor, "__name__", repr(processor))
        try:
            await processor(config)
        except Exception as exc:
            logger.error(POST_PROCESSING_FAILED, {"task": name, "error": exc})
            failures.append(PostProcessingFailure(task=name, error=exc))

    async with anyio.create_task_group() as tg:
        for processor in processors:
            tg.start_soon(_run, processor)

    return failures


# -- Blocking work (runs in a worker thread) --


def _write_bundles(config: SiteConfig, bundles: tuple[tuple[str, tuple[str, ...]], ...]) -> None:
    assets = config.path(config.assets_dir)
    for output, inputs in bundles:
        parts = [(assets / name).read_text(encoding="utf-8") for name in inputs]
        content = "\n".join(part.rstrip("\n") for part in parts) + "\n"
        target = assets / output
        if target.is_file() and target.read_text(encoding="utf-8") == content:
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.debug("Bundled %d file(s) into %s", len(inputs), target)


def _optimize_images(config: SiteConfig) -> None:
    assets = config.path(config.assets_dir)
    for pattern, output_dir in config.image_optimizations:
        destination = assets / output_dir
        for source in sorted(assets.glob(pattern)):
            image_format = _RASTER_FORMATS.get(source.suffix.lower())
            if image_format is None or not source.is_file():
                continue
            target = destination / source.name
            if target.is_file() and target.stat().st_mtime >= source.stat().st_mtime:
                continue
            destination.mkdir(parents=True, exist_ok=True)
            _optimize_image(source, target, image_format, config.image_quality)


def _optimize_image(source: Path, target: Path, image_format: str, quality: int) -> None:
    with Image.open(source) as im:
        if image_format == "JPEG":
            im.convert("RGB").save(target, format="JPEG", quality=quality, optimize=True, progressive=True)
        elif image_format == "WEBP":
            im.save(target, format="WEBP", quality=quality)
        else:
            im.save(target, format=image_format, optimize=True)
    logger.debug("Optimized %s -> %s", source, target)
