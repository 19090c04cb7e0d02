"""Fixed-body responder.

A bare ASGI application: every HTTP request, whatever its method, path,
headers or body, gets the same response. No routing, no middleware, no
error stage.
"""

from sparrow._internal.asgi import Receive, Scope, Send
from sparrow.config import AppConfig
from sparrow.http.response import Response
from sparrow.server.sender import ResponseSender


class Responder:
    """Answer every request with one precomputed ``Response``.

    Usage::

        app = Responder("Hello, World!")
        app.run()          # or: sparrow run mymodule:app
    """

    __slots__ = ("config", "response")

    def __init__(
        self,
        body: str | bytes,
        *,
        status: int = 200,
        content_type: str = "text/plain; charset=utf-8",
        config: AppConfig | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.response = Response(body=body, status=status, content_type=content_type)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            while True:
                message = await receive()
                if message["type"] == "lifespan.startup":
                    await send({"type": "lifespan.startup.complete"})
                elif message["type"] == "lifespan.shutdown":
                    await send({"type": "lifespan.shutdown.complete"})
                    return

        if scope["type"] != "http":
            return

        sender = ResponseSender(send, head=scope["method"] == "HEAD")
        await sender.send(self.response)

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve until interrupted."""
        from sparrow.server.runner import run_server

        run_server(self, self.config, host=host, port=port)
