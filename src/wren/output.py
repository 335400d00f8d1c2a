"""Output sinks: generated files and HTTP responses.

A render in generation mode writes its markup under ``generated_dir``;
a render in response mode turns it into a ``Response`` for the
responder. Both can happen for the same render.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

import anyio

from wren.config import SiteConfig
from wren.errors import ConfigurationError
from wren.http.response import Response
from wren.routing.route import RouteParameters


def output_path(config: SiteConfig, params: RouteParameters, current_path: str) -> Path | None:
    """Where the page for *params* is generated, or ``None`` when it is not.

    The route's ``output`` wins over the page path; ``output=False``
    disables generation for the route. Paths ending in ``/`` get an
    ``index.html``. The result always stays inside ``generated_dir``.
    """
    if params.output is False:
        return None
    target = params.output if isinstance(params.output, str) else current_path
    relative = PurePosixPath(target.lstrip("/"))
    if not relative.parts or target.endswith("/"):
        relative = relative / "index.html"

    root = config.path(config.generated_dir).resolve()
    path = root.joinpath(*relative.parts).resolve()
    if not path.is_relative_to(root):
        msg = f"Output {target!r} resolves outside {root}"
        raise ConfigurationError(msg)
    return path


async def write_artifact(path: Path, dom: str, *, encoding: str = "utf-8") -> Path:
    """Write *dom* to *path*, creating parent folders.

    Characters *encoding* cannot represent are written as character references.
    """
    target = anyio.Path(path)
    await target.parent.mkdir(parents=True, exist_ok=True)
    await target.write_text(dom, encoding=encoding, errors="xmlcharrefreplace")
    return path


def build_response(dom: str, config: SiteConfig, params: RouteParameters) -> Response:
    """Response for a rendered page: route settings over site defaults."""
    mime_type = params.mime_type or config.mime_type
    charset = params.charset or config.charset
    return (
        Response(body=dom, status=params.status_code)
        .with_content_type(f"{mime_type}; charset={charset}")
        .with_headers(config.headers)
        .with_headers(params.headers)
    )
