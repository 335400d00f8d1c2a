"""Immutable HTTP request.

Frozen metadata with async body access. The pipeline reads the served
path, the query string, the ``Host`` header and the decoded body from it.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs

from wren._internal.asgi import Receive
from wren.http.headers import Headers
from wren.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata is frozen at creation. The body is read lazily through
    ``.body()``, ``.json()``, ``.form()`` or ``.data()`` and cached.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body and its decoded forms
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def host(self) -> str:
        """``Host`` header, falling back to the server address."""
        host = self.headers.get("host")
        if host:
            return host
        if self.server is None:
            return ""
        name, port = self.server
        return name if port in (80, 443) else f"{name}:{port}"

    @property
    def url(self) -> str:
        """Served path plus query string, as requested."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs}"
        return self.path

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying *path_params*. The body cache is shared."""
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls return
        the cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    async def form(self) -> dict[str, Any]:
        """Parse an ``application/x-www-form-urlencoded`` body.

        Single values are unwrapped; repeated fields stay lists.
        """
        if "_form" in self._cache:
            return self._cache["_form"]
        raw = await self.body()
        parsed = parse_qs(raw.decode("utf-8"), keep_blank_values=True)
        result = {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}
        self._cache["_form"] = result
        return result

    async def data(self) -> dict[str, Any]:
        """Decoded body as a mapping, by content type.

        JSON objects and urlencoded forms are decoded; anything else
        (including an empty or undecodable body) yields ``{}``.
        """
        if self.method in ("GET", "HEAD"):
            return {}
        ct = (self.content_type or "").lower()
        try:
            if "json" in ct:
                payload = await self.json()
                return payload if isinstance(payload, dict) else {}
            if "x-www-form-urlencoded" in ct:
                return await self.form()
        except ValueError:
            return {}
        return {}

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        path_params: dict[str, str] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            path_params=path_params or {},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
