"""Variation store — localized JSON content fragments.

A variation is a JSON object stored under ``variations_dir``. The
locale-specific copy of a fragment lives in a sub-directory named after
the language code::

    variations/
        common.json          # language-neutral
        index.json
        fr/
            common.json      # merged over variations/common.json
            index.json

Resolving a fragment with a language code loads both files and deep-merges
the locale copy over the neutral one: locale values win key by key,
recursively for nested objects, and keys only present in the neutral copy
survive. A missing locale copy is expected and silently falls back.

Every failure resolves to an empty dict. Reads are plain blocking file
reads; a fragment is small and read once per render.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from wren.config import SiteConfig
from wren.errors import VariationError, VariationNotFound, VariationSyntaxError
from wren.labels import VARIATION_NOT_FOUND, VARIATION_SYNTAX_ERROR, fields

logger = logging.getLogger("wren.variations")


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *overlay* over *base* into a new dict.

    Nested mappings present on both sides are merged recursively; any
    other overlay value (lists included) replaces the base value. Neither
    input is modified.
    """
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class VariationStore:
    """Loads and merges variation fragments for one site.

    With ``config.cache`` enabled parsed fragments are memoized per file;
    callers always receive their own copy, so a render can mutate what it
    gets without affecting other renders.
    """

    __slots__ = ("_cache", "_lock", "config")

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self._cache: dict[Path, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def path_for(self, name: str, language_code: str | None = None) -> Path:
        """Location of fragment *name*, optionally in the *language_code* folder."""
        directory = self.config.path(self.config.variations_dir)
        if language_code:
            directory = directory / language_code
        return directory / name

    def open(self, name: str | None, language_code: str | None = None, *, quiet: bool = False) -> dict[str, Any]:
        """Load one fragment file.

        Returns ``{}`` when *name* is ``None`` or when loading fails. A
        missing file is only reported when no *language_code* is given
        and *quiet* is false; syntax errors are always reported.
        """
        if name is None:
            return {}
        path = self.path_for(name, language_code)
        try:
            return self._load(path)
        except VariationNotFound as exc:
            if not quiet and not language_code:
                logger.warning(VARIATION_NOT_FOUND, fields(exc))
        except VariationSyntaxError as exc:
            logger.error(VARIATION_SYNTAX_ERROR, fields(exc))
        except VariationError:
            logger.exception("Cannot read variation %s", path)
        return {}

    def resolve(self, name: str | None, language_code: str | None = None) -> dict[str, Any]:
        """Load *name* and, with a *language_code*, merge its locale copy over it."""
        fragment = self.open(name, language_code)
        if not language_code:
            return fragment
        base = self.open(name, quiet=True)
        return deep_merge(base, fragment)

    def clear(self) -> None:
        """Forget memoized fragments."""
        with self._lock:
            self._cache.clear()

    # -- Internal --

    def _load(self, path: Path) -> dict[str, Any]:
        if self.config.cache:
            with self._lock:
                cached = self._cache.get(path)
            if cached is not None:
                return copy.deepcopy(cached)

        data = _read_fragment(path)

        if self.config.cache:
            with self._lock:
                self._cache[path] = copy.deepcopy(data)
        return data


def _read_fragment(path: Path) -> dict[str, Any]:
    """Read and parse one JSON object, raising ``VariationError`` subclasses."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise VariationNotFound(str(path)) from exc
    except IsADirectoryError as exc:
        raise VariationNotFound(str(path)) from exc
    except OSError as exc:
        raise VariationError(f"Cannot read variation {path}: {exc}", str(path)) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise VariationSyntaxError(str(path), f"SyntaxError: {exc}") from exc

    if not isinstance(data, dict):
        raise VariationSyntaxError(
            str(path), f"expected a JSON object, got {type(data).__name__}"
        )
    return data
