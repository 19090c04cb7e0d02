"""ASGI response sending: translates a Response into ASGI messages.

``ResponseSender`` wraps the ASGI ``send`` callable for one request and
refuses to transmit a second response.
"""

from sparrow._internal.asgi import Send
from sparrow.errors import ResponseAlreadySent
from sparrow.http.response import Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Emit ``http.response.start`` and a single ``http.response.body``.

    For HEAD requests the Content-Length of the full body is announced
    but no body bytes are written.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw_headers.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    )

    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )


class ResponseSender:
    """Sends exactly one response for a request.

    Usage::

        sender = ResponseSender(send, head=request.method == "HEAD")
        await sender.send(response)
        await sender.send(response)  # raises ResponseAlreadySent
    """

    __slots__ = ("_send", "_sent", "head")

    def __init__(self, send: Send, *, head: bool = False) -> None:
        self._send = send
        self._sent = False
        self.head = head

    @property
    def sent(self) -> bool:
        """Whether a response has already gone out."""
        return self._sent

    async def send(self, response: Response) -> None:
        """Transmit *response*, or raise if one was already sent."""
        if self._sent:
            msg = "A response has already been sent for this request."
            raise ResponseAlreadySent(msg)
        self._sent = True
        await send_response(response, self._send, head=self.head)
