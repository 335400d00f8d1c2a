"""The render pipeline.

Turns one route into markup and delivers it. Every render runs the same
stages, strictly in order, each awaited before the next starts::

    language & path context
    variations (common, specific)
    route parameters
    change_variations hooks (common controller, then route controller)
    template rendering (kida or jinja2)
    change_dom hooks (common controller, then route controller)
    stylesheet injection (optional)
    output: generated file and/or HTTP response

Whether a render is in *response mode* depends only on whether a
responder is passed. Without one the page is written under
``generated_dir``; with one it is sent after the asset post-processing
tasks have all finished (and also written when
``html_generation_before_response`` is on).

``render()`` never raises. Template errors become the page body;
missing views and failing hooks end the render with an error on the
returned ``RenderResult`` (and a 404/500 response in response mode).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import anyio
from bs4.element import Tag

from wren._internal.invoke import invoke
from wren.assets import DEFAULT_POST_PROCESSORS, PostProcessingFailure, PostProcessor, run_post_processing
from wren.config import SiteConfig
from wren.context import RenderContext, serialize_dom
from wren.controllers import ControllerRegistry, HookName
from wren.css import inject_css, wants_injection
from wren.errors import (
    ControllerError,
    HookTimeout,
    RenderError,
    ViewNotFound,
    ViewNotSpecified,
)
from wren.http.request import Request
from wren.http.response import Response
from wren.labels import CONTROLLER_FAILED, HOOK_TIMEOUT, VIEW_NOT_FOUND, VIEW_NOT_SET, fields
from wren.output import build_response, output_path, write_artifact
from wren.routing.route import RouteParameters, route_parameters
from wren.server.responder import Responder
from wren.templating.diagnostics import format_render_error
from wren.templating.engines import TemplateEngines
from wren.variations import VariationStore

logger = logging.getLogger("wren.render")

# Placeholder in a common view replaced by the route's own view name
VIEW_PLACEHOLDER = "#{route_parameters.view}"


@dataclass(slots=True)
class RenderResult:
    """What one render produced.

    Attributes:
        context: The render's context (``context.dom`` holds the markup).
        output_path: File written in generation mode, if any.
        response: Response the responder accepted, if any.
        post_processing_failures: Asset tasks that failed before sending.
        error: Why the render stopped early, if it did.
    """

    context: RenderContext
    output_path: Path | None = None
    response: Response | None = None
    post_processing_failures: list[PostProcessingFailure] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def dom(self) -> str | None:
        return self.context.dom


class RenderPipeline:
    """Renders routes for one site.

    Holds only read-only collaborators: the configuration, the
    controller registry, the variation store, the template engines and
    the post-processing tasks. All per-render state lives in the
    ``RenderContext`` created by ``render()``, so one pipeline serves
    any number of concurrent renders.
    """

    __slots__ = ("config", "controllers", "engines", "post_processors", "variations")

    def __init__(
        self,
        config: SiteConfig,
        controllers: ControllerRegistry | None = None,
        *,
        variations: VariationStore | None = None,
        engines: TemplateEngines | None = None,
        post_processors: Sequence[PostProcessor] = DEFAULT_POST_PROCESSORS,
    ) -> None:
        self.config = config
        self.controllers = controllers if controllers is not None else ControllerRegistry()
        self.variations = variations if variations is not None else VariationStore(config)
        self.engines = engines if engines is not None else TemplateEngines(config)
        self.post_processors = tuple(post_processors)

    async def render(
        self,
        route: RouteParameters | Mapping[str, Any] | str,
        key: str | None = None,
        *,
        request: Request | None = None,
        responder: Responder | None = None,
    ) -> RenderResult:
        """Render *route* and deliver it.

        Args:
            route: Route parameters, a route mapping, or a bare view name.
            key: The route's key (its path in the route table).
            request: The live request, when rendering for one.
            responder: Receives the response; ``None`` means generation mode.
        """
        context = RenderContext()
        result = RenderResult(context=context)
        try:
            params = route_parameters(route)
            current_path = params.url or key or ""

            self._prepare_language(context, params)
            await self._prepare_path(context, current_path, request)
            self._prepare_variations(context, params)
            self._prepare_parameters(context, params, key, current_path)
            await self._change_variations(context, params, request, responder)
            await self._render_view(context, params)
            await self._change_dom(context, params, request, responder)
            self._inject_css(context, params)
            await self._dispatch(context, params, current_path, responder, result)
        except RenderError as exc:
            result.error = exc
            await self._fail(exc, result, responder)
        except Exception as exc:
            logger.exception("Render of %s failed", key or route)
            result.error = exc
            await self._fail(exc, result, responder)
        return result

    # -- Stages --

    def _prepare_language(self, context: RenderContext, params: RouteParameters) -> None:
        context.language_code = params.language_code or self.config.language_code

    async def _prepare_path(self, context: RenderContext, current_path: str, request: Request | None) -> None:
        config = self.config
        context.url_root_path = config.url_root
        context.url_sub_path = config.url_sub_path
        context.url_base_path = config.url_base_path
        context.url_file_path = current_path
        context.url_query_path = f"?{request.query.raw}" if request is not None and request.query.raw else ""
        context.url_path = context.url_base_path + current_path + context.url_query_path

        if request is None:
            return
        served = request.path
        if context.url_sub_path and served == context.url_sub_path:
            served = "/"
        elif context.url_sub_path and served.startswith(context.url_sub_path + "/"):
            served = served[len(context.url_sub_path) :]
        context.url_file_path = served
        scheme = "https" if config.http_secure else "http"
        context.url_path = f"{scheme}://{request.host}{request.url}"
        context.params = dict(request.path_params)
        context.query = request.query.to_dict()
        context.body = await request.data()

    def _prepare_variations(self, context: RenderContext, params: RouteParameters) -> None:
        context.common = self.variations.resolve(self.config.common_variation, context.language_code)
        context.specific = self.variations.resolve(params.variation, context.language_code)

    def _prepare_parameters(
        self,
        context: RenderContext,
        params: RouteParameters,
        key: str | None,
        current_path: str,
    ) -> None:
        context.route_parameters = params
        context.route_key = params.key or key
        context.route = current_path
        context.config = self.config

    async def _change_variations(
        self,
        context: RenderContext,
        params: RouteParameters,
        request: Request | None,
        responder: Responder | None,
    ) -> None:
        for controller in (self.config.common_controller, params.controller):
            await self._call_hook(controller, "change_variations", context, request, responder)

    async def _render_view(self, context: RenderContext, params: RouteParameters) -> None:
        view = self.config.common_view or params.view
        views = self.config.path(self.config.views_dir)
        context.filename = str(views / view) if view else str(views)
        if not view:
            raise ViewNotSpecified(context.filename)

        try:
            source = await anyio.Path(context.filename).read_text(encoding="utf-8")
        except OSError as exc:
            raise ViewNotFound(context.filename) from exc

        if self.config.common_view and params.view:
            source = source.replace(VIEW_PLACEHOLDER, params.view)

        engine = self.engines.for_route(params)
        try:
            context.dom = engine.render(source, context.template_vars())
        except Exception as exc:
            logger.warning("Template %s failed to render (%s): %s", context.filename, engine.name, exc)
            context.dom = format_render_error(exc)

    async def _change_dom(
        self,
        context: RenderContext,
        params: RouteParameters,
        request: Request | None,
        responder: Responder | None,
    ) -> None:
        for controller in (self.config.common_controller, params.controller):
            tree = await self._call_hook(controller, "change_dom", context, request, responder)
            if isinstance(tree, Tag):
                context.dom = serialize_dom(tree)

    def _inject_css(self, context: RenderContext, params: RouteParameters) -> None:
        if not wants_injection(self.config.inject_css, params.inject_css):
            return
        context.dom = inject_css(context.dom or "", self.config, self.config.inject_css, params.inject_css)

    async def _dispatch(
        self,
        context: RenderContext,
        params: RouteParameters,
        current_path: str,
        responder: Responder | None,
        result: RenderResult,
    ) -> None:
        config = self.config
        dom = context.dom or ""

        generate = responder is None or (
            config.html_generation_before_response and config.html_generation_enable
        )
        if generate:
            target = output_path(config, params, current_path)
            if target is not None:
                result.output_path = await write_artifact(
                    target, dom, encoding=params.charset or config.charset
                )

        if responder is None:
            return

        result.post_processing_failures = await run_post_processing(config, self.post_processors)
        response = build_response(dom, config, params)
        await responder.respond(response)
        result.response = response

    # -- Helpers --

    async def _call_hook(
        self,
        controller: str | None,
        hook_name: HookName,
        context: RenderContext,
        request: Request | None,
        responder: Responder | None,
    ) -> Any:
        """Await one controller hook; a missing controller or hook is a no-op."""
        hook = self.controllers.hook(controller, hook_name)
        if hook is None:
            return None

        timeout = self.config.hook_timeout
        scope = None
        try:
            with anyio.fail_after(timeout) as scope:
                return await invoke(hook, context, request, responder)
        except RenderError:
            raise
        except TimeoutError as exc:
            if timeout is None or scope is None or not scope.cancel_called:
                raise ControllerError(str(controller), hook_name, exc) from exc
            raise HookTimeout(str(controller), hook_name, timeout) from exc
        except Exception as exc:
            raise ControllerError(str(controller), hook_name, exc) from exc

    async def _fail(self, exc: BaseException, result: RenderResult, responder: Responder | None) -> None:
        """Report a stopped render and, if nothing was sent yet, answer with an error page."""
        _log_render_error(exc)
        if responder is None or result.response is not None:
            return

        status = exc.status if isinstance(exc, RenderError) else 500
        body = "Not Found" if status == 404 else "Internal Server Error"
        if self.config.debug:
            body = format_render_error(exc)
        response = Response(body=body, status=status, content_type=self.config.content_type)
        try:
            await responder.respond(response)
        except Exception:
            logger.exception("Could not send the error response")
        else:
            result.response = response


def _log_render_error(exc: BaseException) -> None:
    match exc:
        case ViewNotSpecified():
            logger.error(VIEW_NOT_SET, fields(exc))
        case ViewNotFound():
            logger.error(VIEW_NOT_FOUND, fields(exc))
        case HookTimeout():
            logger.error(HOOK_TIMEOUT, fields(exc))
        case ControllerError():
            logger.error(CONTROLLER_FAILED, fields(exc), exc_info=exc.cause)
        case _:
            pass
