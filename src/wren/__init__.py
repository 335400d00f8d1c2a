"""Wren — page rendering for websites and static exports.

Turns a route (a view, a variation file, an optional controller) into
HTML, then sends it as an HTTP response, writes it as a static file, or
both. Templates render with kida, or jinja2 per site or per route.

Basic usage::

    from wren import Site, SiteConfig

    site = Site(SiteConfig(server_path="./site"), routes={
        "/": "index.html",
        "/about.html": {"view": "about.html", "variation": "about.json"},
    })

    site.run()

Rendering a single route without a server::

    from wren import RenderPipeline

    pipeline = RenderPipeline(config)
    result = await pipeline.render({"view": "index.html"}, "/index.html")
"""

__version__ = "0.1.0-dev"
__all__ = [
    "Controller",
    "ControllerError",
    "ControllerRegistry",
    "ConfigurationError",
    "HTTPError",
    "HookTimeout",
    "NotFound",
    "RenderContext",
    "RenderError",
    "RenderPipeline",
    "RenderResult",
    "Request",
    "Response",
    "RouteParameters",
    "Site",
    "SiteConfig",
    "ViewNotFound",
    "ViewNotSpecified",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "Site":
        from wren.site import Site

        return Site

    if name == "SiteConfig":
        from wren.config import SiteConfig

        return SiteConfig

    if name in ("RenderPipeline", "RenderResult"):
        from wren import pipeline as _pipeline

        return getattr(_pipeline, name)

    if name == "RenderContext":
        from wren.context import RenderContext

        return RenderContext

    if name in ("Controller", "ControllerRegistry"):
        from wren import controllers as _controllers

        return getattr(_controllers, name)

    if name == "RouteParameters":
        from wren.routing.route import RouteParameters

        return RouteParameters

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in (
        "ConfigurationError",
        "ControllerError",
        "HTTPError",
        "HookTimeout",
        "NotFound",
        "RenderError",
        "ViewNotFound",
        "ViewNotSpecified",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
