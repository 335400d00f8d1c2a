"""Per-render context.

One ``RenderContext`` is created for every render and threaded through
each pipeline stage. Stages only ever add to it; controller hooks may
rewrite ``common``, ``specific`` and ``dom``. It is never shared between
renders and never kept once the render returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup
from bs4.element import Tag

if TYPE_CHECKING:
    from wren.config import SiteConfig
    from wren.routing.route import RouteParameters


@dataclass(slots=True)
class RenderContext:
    """Mutable accumulator for one render.

    Attributes:
        language_code: Locale of the page (route override, else site default).
        url_root_path: Public origin, e.g. ``http://localhost:8000``.
        url_sub_path: Site sub path, ``""`` or ``"/sub"``.
        url_base_path: ``url_root_path`` + ``url_sub_path``.
        url_file_path: Path of the page being rendered.
        url_query_path: Query string including ``?``, or ``""``.
        url_path: Full public URL of the page.
        params: Path parameters (live request only).
        query: Query parameters (live request only).
        body: Decoded request body (live request only).
        common: Site-wide variation fragment.
        specific: Route variation fragment.
        route_parameters: The route being rendered.
        route_key: Stable route key.
        route: Path of the route (``url`` override, else key).
        config: Site configuration.
        filename: Absolute path of the template file.
        dom: Rendered markup; set by the rendering stage.
    """

    language_code: str | None = None
    url_root_path: str = ""
    url_sub_path: str = ""
    url_base_path: str = ""
    url_file_path: str = ""
    url_query_path: str = ""
    url_path: str = ""
    params: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)
    common: dict[str, Any] = field(default_factory=dict)
    specific: dict[str, Any] = field(default_factory=dict)
    route_parameters: RouteParameters | None = None
    route_key: str | None = None
    route: str = ""
    config: SiteConfig | None = None
    filename: str = ""
    dom: str | None = None

    def virtual_dom(self) -> BeautifulSoup:
        """Parse the current ``dom`` into a tree.

        Parsing happens on each call, against the markup as it is at that
        moment. Return the tree from a ``change_dom`` hook to replace
        ``dom`` with its serialization.
        """
        return BeautifulSoup(self.dom or "", "html.parser")

    def template_vars(self) -> dict[str, Any]:
        """Variables visible to the template."""
        return {
            "language_code": self.language_code,
            "url_root_path": self.url_root_path,
            "url_sub_path": self.url_sub_path,
            "url_base_path": self.url_base_path,
            "url_file_path": self.url_file_path,
            "url_query_path": self.url_query_path,
            "url_path": self.url_path,
            "params": self.params,
            "query": self.query,
            "body": self.body,
            "common": self.common,
            "specific": self.specific,
            "route_parameters": self.route_parameters,
            "route_key": self.route_key,
            "route": self.route,
            "config": self.config,
            "filename": self.filename,
        }


def serialize_dom(tree: Tag) -> str:
    """Markup for a parsed tree, keeping named entities and bare void tags."""
    return tree.decode(formatter="html5")
