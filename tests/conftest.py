"""Shared fixtures: a throwaway site tree under ``tmp_path``."""

from collections.abc import Callable
from pathlib import Path

import pytest

from wren.config import SiteConfig


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Empty site with the default folders."""
    for name in ("views", "variations", "controllers", "assets"):
        (tmp_path / name).mkdir()
    return tmp_path


@pytest.fixture
def write(site_root: Path) -> Callable[[str, str | bytes], Path]:
    """Write a file relative to the site root, creating folders."""

    def _write(relative: str, content: str | bytes) -> Path:
        path = site_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config(site_root: Path) -> Callable[..., SiteConfig]:
    """Build a SiteConfig rooted at the site tree."""

    def _make(**overrides: object) -> SiteConfig:
        return SiteConfig(server_path=site_root, **overrides)

    return _make
