"""Routing — route definitions and the exact-path route table.

Matching is intentionally literal: a request path selects the route whose
``url`` (or key) equals it. Pattern matching belongs to whatever server
wraps the site.
"""

from wren.routing.route import RouteMatch, RouteParameters, route_parameters
from wren.routing.table import RouteTable

__all__ = ["RouteMatch", "RouteParameters", "RouteTable", "route_parameters"]
