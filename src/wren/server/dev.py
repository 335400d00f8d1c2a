"""Development server.

Starts a pounce ASGI server with the live wren ``Site`` object.
"""


def run_dev_server(
    site: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    reload_include: tuple[str, ...] = (".html", ".json", ".css", ".js"),
) -> None:
    """Start a single-worker pounce server for *site*.

    Pounce's ``run()`` takes an import string, but the caller holds a live
    ``Site``; ``pounce.Server`` takes the ASGI callable directly.

    Args:
        site: ASGI callable (wren Site instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart when watched files change.
        reload_include: File extensions to watch when reload is active.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=reload_include,
    )
    Server(config, site).run()
