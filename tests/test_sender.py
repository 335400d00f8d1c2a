"""Tests for wren.server.sender and wren.server.responder."""

import pytest

from wren.http.response import Response
from wren.server.responder import ASGIResponder, BufferedResponder, ResponseAlreadySent
from wren.server.sender import send_response


def _recorder() -> tuple[list[dict], object]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    return messages, send


class TestSendResponse:
    async def test_start_and_body(self) -> None:
        messages, send = _recorder()
        await send_response(Response("ok").with_header("X-A", "1"), send)

        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == b"text/html; charset=utf-8"
        assert headers[b"x-a"] == b"1"
        assert headers[b"content-length"] == b"2"
        assert messages[1] == {"type": "http.response.body", "body": b"ok"}

    @pytest.mark.parametrize("status", [204, 304])
    async def test_no_body_statuses(self, status: int) -> None:
        messages, send = _recorder()
        await send_response(Response("unexpected").with_status(status), send)
        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_content_length_counts_bytes(self) -> None:
        messages, send = _recorder()
        await send_response(Response("é"), send)
        assert dict(messages[0]["headers"])[b"content-length"] == b"2"

    async def test_duplicate_framing_headers_dropped(self) -> None:
        messages, send = _recorder()
        response = Response("x").with_header("Content-Type", "text/plain").with_header("Content-Length", "99")
        await send_response(response, send)
        names = [name for name, _ in messages[0]["headers"]]
        assert names.count(b"content-type") == 1
        assert names.count(b"content-length") == 1


class TestResponders:
    async def test_asgi_responder_is_single_shot(self) -> None:
        messages, send = _recorder()
        responder = ASGIResponder(send)
        await responder.respond(Response("one"))
        assert responder.sent
        with pytest.raises(ResponseAlreadySent):
            await responder.respond(Response("two"))
        assert len(messages) == 2

    async def test_buffered_responder(self) -> None:
        responder = BufferedResponder()
        assert responder.response is None
        first, second = Response("a"), Response("b")
        await responder.respond(first)
        await responder.respond(second)
        assert responder.responses == [first, second]
        assert responder.response is second
