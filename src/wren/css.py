"""Stylesheet injection.

Replaces ``<link rel="stylesheet">`` tags pointing at local assets with
``<style>`` blocks holding the file content, so a generated page (an
e-mail template, a single-file export) carries its own CSS.

``inject_css`` on the site or on a route selects what is inlined:

- ``True`` — every local stylesheet the page links to
- a tuple of paths (relative to ``assets_dir``) — those stylesheets; a
  listed stylesheet the page does not link to is appended to ``<head>``
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from wren.config import SiteConfig
from wren.context import serialize_dom
from wren.labels import STYLESHEET_NOT_FOUND

logger = logging.getLogger("wren.render")


def wants_injection(*requests: bool | tuple[str, ...] | None) -> bool:
    """True when any site or route setting asks for injection."""
    return any(bool(request) for request in requests)


def inject_css(dom: str, config: SiteConfig, *requests: bool | tuple[str, ...] | None) -> str:
    """Inline the stylesheets *requests* select into *dom*."""
    inline_all = any(request is True for request in requests)
    listed: list[str] = []
    for request in requests:
        if isinstance(request, tuple):
            listed.extend(_normalize(sheet, config) for sheet in request)

    soup = BeautifulSoup(dom, "html.parser")
    assets = config.path(config.assets_dir)
    handled: set[str] = set()
    changed = False

    for link in soup.find_all("link"):
        rel = link.get("rel") or []
        href = link.get("href")
        if "stylesheet" not in rel or not href or _is_remote(href):
            continue
        name = _normalize(href, config)
        if not inline_all and name not in listed:
            continue
        content = _read(assets / name)
        if content is None:
            continue
        style = soup.new_tag("style")
        style.string = content
        link.replace_with(style)
        handled.add(name)
        changed = True

    for name in listed:
        if name in handled:
            continue
        content = _read(assets / name)
        if content is None:
            continue
        style = soup.new_tag("style")
        style.string = content
        if soup.head is not None:
            soup.head.append(style)
        else:
            soup.insert(0, style)
        handled.add(name)
        changed = True

    return serialize_dom(soup) if changed else dom


def _is_remote(href: str) -> bool:
    parts = urlsplit(href)
    return bool(parts.scheme or parts.netloc)


def _normalize(href: str, config: SiteConfig) -> str:
    """Asset-relative name of a stylesheet reference."""
    path = urlsplit(href).path
    sub_path = config.url_sub_path
    if sub_path and path.startswith(sub_path + "/"):
        path = path[len(sub_path) :]
    return path.lstrip("/")


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        logger.warning(STYLESHEET_NOT_FOUND, {"stylesheet": str(path)})
        return None
