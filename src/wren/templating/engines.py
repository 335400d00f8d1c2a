"""Template engine adapters.

Two interchangeable engines render page templates: kida (the default)
and jinja2. Both are built once per site from ``SiteConfig`` and render
template *source* against the render context, so a template read
asynchronously by the pipeline never goes through the engine's own
loader. The loader is still set up on ``views_dir`` so ``{% include %}``
and ``{% extends %}`` resolve.

Engine selection: a route's ``enable_jinja`` (when set) wins over the
site's ``enable_jinja``; otherwise kida renders.
"""

from collections.abc import Mapping
from typing import Any, Protocol

import jinja2
from kida import Environment, FileSystemLoader

from wren.config import SiteConfig
from wren.routing.route import RouteParameters

KIDA = "kida"
JINJA = "jinja"


class TemplateEngine(Protocol):
    """Renders template source against a context mapping."""

    name: str

    def render(self, source: str, context: Mapping[str, Any]) -> str: ...


class KidaEngine:
    """The default engine."""

    __slots__ = ("env",)

    name = KIDA

    def __init__(self, config: SiteConfig) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(config.path(config.views_dir))),
            autoescape=config.autoescape,
            auto_reload=not config.cache,
        )

    def render(self, source: str, context: Mapping[str, Any]) -> str:
        template = self.env.from_string(source)
        return template.render(dict(context))


class JinjaEngine:
    """The alternative engine, selected with ``enable_jinja``.

    ``config.template_delimiter`` picks the block tag character:
    ``"%"`` gives the usual ``{% ... %}``, ``"?"`` gives ``{? ... ?}``.
    """

    __slots__ = ("env",)

    name = JINJA

    def __init__(self, config: SiteConfig) -> None:
        delimiter = config.template_delimiter or "%"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(config.path(config.views_dir))),
            autoescape=config.autoescape,
            auto_reload=not config.cache,
            block_start_string="{" + delimiter,
            block_end_string=delimiter + "}",
        )

    def render(self, source: str, context: Mapping[str, Any]) -> str:
        template = self.env.from_string(source)
        return template.render(dict(context))


def engine_name(config: SiteConfig, params: RouteParameters) -> str:
    """Which engine renders *params*: the route override, else the site flag."""
    use_jinja = config.enable_jinja
    if params.enable_jinja is not None:
        use_jinja = params.enable_jinja
    return JINJA if use_jinja else KIDA


class TemplateEngines:
    """Both engines for one site, created on first use."""

    __slots__ = ("_engines", "config")

    def __init__(self, config: SiteConfig, engines: Mapping[str, TemplateEngine] | None = None) -> None:
        self.config = config
        self._engines: dict[str, TemplateEngine] = dict(engines or {})

    def get(self, name: str) -> TemplateEngine:
        engine = self._engines.get(name)
        if engine is None:
            engine = JinjaEngine(self.config) if name == JINJA else KidaEngine(self.config)
            self._engines[name] = engine
        return engine

    def for_route(self, params: RouteParameters) -> TemplateEngine:
        """The engine selected for *params*."""
        return self.get(engine_name(self.config, params))
