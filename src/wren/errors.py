"""Wren exception hierarchy.

Shared across the pipeline, the variation store, and the ASGI site so
every module raises and catches the same types. Render and variation
errors carry the fields their diagnostic labels refer to.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when site configuration or a route definition is invalid."""


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — pages answer only the methods listed in ``allowed``."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )


# -- Render failures --


class RenderError(WrenError):
    """A failure that stops one render.

    Caught by ``RenderPipeline.render()`` and reported on the
    ``RenderResult``; never raised past the render entry point.
    """

    status: int = 500


class ViewNotSpecified(RenderError):  # noqa: N818
    """The route has no ``view`` and no ``common_view`` is configured."""

    status = 404

    def __init__(self, views_path: str) -> None:
        super().__init__(f"No view specified (resolved to {views_path!r})")
        self.views_path = views_path


class ViewNotFound(RenderError):  # noqa: N818
    """The template file does not exist or cannot be read."""

    status = 404

    def __init__(self, views_path: str) -> None:
        super().__init__(f"View not found: {views_path}")
        self.views_path = views_path


class ControllerError(RenderError):
    """A controller hook raised."""

    def __init__(self, controller: str, hook: str, cause: BaseException) -> None:
        super().__init__(f"{controller}.{hook} failed: {cause}")
        self.controller = controller
        self.hook = hook
        self.cause = cause


class HookTimeout(RenderError):  # noqa: N818
    """A controller hook did not finish within ``hook_timeout``."""

    def __init__(self, controller: str, hook: str, timeout: float) -> None:
        super().__init__(f"{controller}.{hook} did not finish within {timeout}s")
        self.controller = controller
        self.hook = hook
        self.timeout = timeout


# -- Variation failures (absorbed by the store) --


class VariationError(WrenError):
    """A variation fragment could not be loaded."""

    def __init__(self, message: str, variations_path: str) -> None:
        super().__init__(message)
        self.variations_path = variations_path


class VariationNotFound(VariationError):  # noqa: N818
    """The variation file does not exist."""

    def __init__(self, variations_path: str) -> None:
        super().__init__(f"Variation not found: {variations_path}", variations_path)


class VariationSyntaxError(VariationError):
    """The variation file is not valid JSON (or not a JSON object)."""

    def __init__(self, variations_path: str, syntax_error: str) -> None:
        super().__init__(f"Invalid variation {variations_path}: {syntax_error}", variations_path)
        self.syntax_error = syntax_error
