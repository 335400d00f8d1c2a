"""RouteParameters and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from wren.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class RouteParameters:
    """Everything a single route tells the render pipeline.

    Immutable for the duration of a render. Only ``view`` is commonly
    required; a bare view name is a complete route::

        RouteParameters(view="index.html")
        RouteParameters(view="post.html", variation="post.json", controller="blog")

    Attributes:
        view: Template file name, relative to ``views_dir``.
        controller: Controller identifier in the registry.
        variation: Variation file name, relative to ``variations_dir``.
        url: Public path of the page; overrides the route key.
        output: Generated file path; overrides the page path. ``False``
            keeps the route out of static generation.
        enable_jinja: Per-route engine override (``None`` = site default).
        inject_css: Inline stylesheets for this route (``True`` or paths).
        key: Explicit route key exposed as ``route_key``.
        language_code: Per-route locale, overrides the site default.
        status_code: HTTP status for the response.
        mime_type: Overrides the site mime type.
        charset: Overrides the site charset.
        headers: Extra response headers.
    """

    view: str | None = None
    controller: str | None = None
    variation: str | None = None
    url: str | None = None
    output: str | bool | None = None
    enable_jinja: bool | None = None
    inject_css: bool | tuple[str, ...] = False
    key: str | None = None
    language_code: str | None = None
    status_code: int = 200
    mime_type: str | None = None
    charset: str | None = None
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouteParameters:
        """Build from a plain mapping (e.g. a route entry of a site file).

        Sequences become tuples and ``headers`` may be given as a mapping.
        Unknown keys are rejected.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            msg = f"Unknown route parameter(s): {', '.join(sorted(unknown))}"
            raise ConfigurationError(msg)

        values = dict(data)
        headers = values.get("headers")
        if isinstance(headers, Mapping):
            values["headers"] = tuple((str(k), str(v)) for k, v in headers.items())
        elif headers is not None:
            values["headers"] = tuple(tuple(pair) for pair in headers)
        inject_css = values.get("inject_css")
        if isinstance(inject_css, str):
            values["inject_css"] = (inject_css,)
        elif isinstance(inject_css, (list, tuple)):
            values["inject_css"] = tuple(inject_css)
        return cls(**values)


def route_parameters(value: RouteParameters | Mapping[str, Any] | str) -> RouteParameters:
    """Normalize a route definition.

    A bare string is a view name; a mapping goes through
    ``RouteParameters.from_mapping``.
    """
    if isinstance(value, RouteParameters):
        return value
    if isinstance(value, str):
        return RouteParameters(view=value)
    if isinstance(value, Mapping):
        return RouteParameters.from_mapping(value)
    msg = f"Route must be a view name, a mapping or RouteParameters, not {type(value).__name__}"
    raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    key: str
    parameters: RouteParameters
    path_params: dict[str, str]

    @property
    def path(self) -> str:
        """Public path: the ``url`` override, else the key."""
        return self.parameters.url or self.key
