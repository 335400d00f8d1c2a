"""Exact-path route table."""

from collections.abc import Iterator, Mapping
from typing import Any

from wren.errors import ConfigurationError, NotFound
from wren.routing.route import RouteMatch, RouteParameters, route_parameters


class RouteTable:
    """Ordered ``key → RouteParameters`` table with literal path lookup.

    Keys are route paths (``"/about.html"``); a route's ``url`` override,
    when set, is the path it answers on instead of its key.

    Usage::

        table = RouteTable({"/": "index.html", "/about/": {"view": "about.html"}})
        match = table.match("/about/")
    """

    __slots__ = ("_by_path", "_routes")

    def __init__(self, routes: Mapping[str, RouteParameters | Mapping[str, Any] | str] | None = None) -> None:
        self._routes: dict[str, RouteParameters] = {}
        self._by_path: dict[str, str] = {}
        for key, value in (routes or {}).items():
            self.add(key, value)

    def add(self, key: str, value: RouteParameters | Mapping[str, Any] | str) -> RouteParameters:
        """Register a route under *key*. Duplicate keys or paths are rejected."""
        if key in self._routes:
            msg = f"Duplicate route key: {key!r}"
            raise ConfigurationError(msg)
        params = route_parameters(value)
        path = params.url or key
        if path in self._by_path:
            msg = f"Routes {self._by_path[path]!r} and {key!r} both answer on {path!r}"
            raise ConfigurationError(msg)
        self._routes[key] = params
        self._by_path[path] = key
        return params

    def __iter__(self) -> Iterator[tuple[str, RouteParameters]]:
        return iter(self._routes.items())

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    def __getitem__(self, key: str) -> RouteParameters:
        return self._routes[key]

    def match(self, path: str) -> RouteMatch:
        """Find the route answering on *path*.

        Raises ``NotFound`` when no route does.
        """
        key = self._by_path.get(path)
        if key is None:
            raise NotFound(f"No route matches {path!r}")
        return RouteMatch(key=key, parameters=self._routes[key], path_params={})
