"""Site — the ASGI application and static generator.

Holds the configuration, the route table, the controller registry and
the render pipeline. Serves pages over ASGI and generates them to disk::

    site = Site(SiteConfig(server_path="./site"), routes={
        "/": "index.html",
        "/blog/": {"view": "blog.html", "variation": "blog.json", "controller": "blog"},
    })

    site.run()                      # serve
    paths = anyio.run(site.generate)  # or write every page under generated_dir
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.assets import DEFAULT_POST_PROCESSORS, PostProcessor, run_post_processing
from wren.config import SiteConfig
from wren.controllers import Controller, ControllerRegistry
from wren.errors import HTTPError, MethodNotAllowed
from wren.http.request import Request
from wren.http.response import Response
from wren.pipeline import RenderPipeline, RenderResult
from wren.routing.route import RouteParameters
from wren.routing.table import RouteTable
from wren.server.responder import ASGIResponder
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")

_ALLOWED_METHODS = frozenset({"GET", "HEAD", "POST"})

type RouteValue = RouteParameters | Mapping[str, Any] | str


class Site:
    """A wren site.

    Pages are answered on their exact path (the route's ``url``, else its
    key) below ``url_relative_sub_path``. Controllers come from *controllers*
    when given, otherwise from the ``*.py`` files in ``controllers_dir``.
    """

    __slots__ = ("config", "controllers", "pipeline", "routes")

    def __init__(
        self,
        config: SiteConfig | None = None,
        routes: Mapping[str, RouteValue] | None = None,
        *,
        controllers: ControllerRegistry | None = None,
        post_processors: Sequence[PostProcessor] = DEFAULT_POST_PROCESSORS,
    ) -> None:
        self.config = config or SiteConfig()
        self.routes = RouteTable(routes)
        if controllers is None:
            controllers = ControllerRegistry.from_directory(self.config.path(self.config.controllers_dir))
        self.controllers = controllers
        self.pipeline = RenderPipeline(self.config, controllers, post_processors=post_processors)

    # -- Registration --

    def route(self, key: str, value: RouteValue) -> RouteParameters:
        """Add a route after construction."""
        return self.routes.add(key, value)

    def controller(self, name: str) -> Callable[[Any], Any]:
        """Register an object's hooks as controller *name*.

        Usage::

            @site.controller("blog")
            class Blog:
                @staticmethod
                def change_dom(context, request, response): ...
        """

        def decorator(obj: Any) -> Any:
            self.controllers.add(Controller.from_object(name, obj))
            return obj

        return decorator

    # -- Rendering --

    async def render(self, key: str, **kwargs: Any) -> RenderResult:
        """Render the route registered under *key* (see ``RenderPipeline.render``)."""
        return await self.pipeline.render(self.routes[key], key, **kwargs)

    async def generate(self) -> list[Path]:
        """Write every route under ``generated_dir``.

        Routes with ``output=False`` are skipped. Asset post-processing runs
        once, after the pages. Returns the written paths in route order.
        """
        written: list[Path] = []
        for key, params in self.routes:
            result = await self.pipeline.render(params, key)
            if result.output_path is not None:
                written.append(result.output_path)
        await run_post_processing(self.config, self.pipeline.post_processors)
        logger.info("Generated %d page(s) into %s", len(written), self.config.path(self.config.generated_dir))
        return written

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the site with pounce (``pip install wren[server]``)."""
        from wren.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        try:
            if request.method not in _ALLOWED_METHODS:
                raise MethodNotAllowed(_ALLOWED_METHODS)
            match = self.routes.match(self._site_path(request.path))
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
            response = Response(
                body=exc.detail,
                status=exc.status,
                content_type=self.config.content_type,
            ).with_headers(exc.headers)
            await send_response(response, send)
            return

        responder = ASGIResponder(send)
        await self.pipeline.render(
            match.parameters,
            match.key,
            request=request.with_path_params(match.path_params),
            responder=responder,
        )

    def _site_path(self, path: str) -> str:
        """Strip the sub path from a served path; outside paths never match."""
        sub_path = self.config.url_sub_path
        if not sub_path:
            return path
        if path == sub_path:
            return "/"
        if path.startswith(sub_path + "/"):
            return path[len(sub_path) :]
        return ""

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("Serving %d route(s) from %s", len(self.routes), self.config.root)
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
