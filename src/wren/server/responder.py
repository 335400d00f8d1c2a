"""Responders — the live-response side of a render.

A responder is what the pipeline hands the finished page to. Its
presence is what puts a render in response mode; without one the render
only generates a file.
"""

from typing import Protocol

from wren._internal.asgi import Send
from wren.http.response import Response
from wren.server.sender import send_response


class Responder(Protocol):
    """Anything that can deliver one Response to a client::

        class Recorder:
            async def respond(self, response: Response) -> None:
                self.sent = response
    """

    async def respond(self, response: Response) -> None: ...


class ResponseAlreadySent(RuntimeError):  # noqa: N818
    """A single-shot responder was asked to send a second response."""


class ASGIResponder:
    """Sends one Response over an ASGI ``send`` callable."""

    __slots__ = ("_send", "sent")

    def __init__(self, send: Send) -> None:
        self._send = send
        self.sent = False

    async def respond(self, response: Response) -> None:
        if self.sent:
            raise ResponseAlreadySent("A response was already sent for this request.")
        self.sent = True
        await send_response(response, self._send)


class BufferedResponder:
    """Keeps the Response in memory instead of sending it.

    Used by the test client and by callers embedding the pipeline in
    another server.
    """

    __slots__ = ("responses",)

    def __init__(self) -> None:
        self.responses: list[Response] = []

    async def respond(self, response: Response) -> None:
        self.responses.append(response)

    @property
    def response(self) -> Response | None:
        """The last response received, if any."""
        return self.responses[-1] if self.responses else None
