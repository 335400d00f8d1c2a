"""Inline diagnostics for template failures.

A template that fails to render does not abort the page: the error text
becomes the page body so the author sees it in the browser.
"""

import html

_SPACER = "<span style='display:inline-block;width:32px'></span>"
_MARKER = "<span style='display:inline-block;width:32px'>&gt;&gt;</span>"


def format_render_error(exc: BaseException) -> str:
    """Render *exc* as safe, readable inline markup.

    The text is HTML-escaped, line breaks become ``<br>``, four-space
    indents become fixed-width spacers and `` >> `` line markers (as
    printed by template engines next to the failing line) keep their
    alignment.
    """
    text = html.escape(f"{type(exc).__name__}: {exc}")
    return (
        text.replace("\r\n", "\n")
        .replace("\n", "<br>")
        .replace("    ", _SPACER)
        .replace(" &gt;&gt; ", _MARKER)
    )
