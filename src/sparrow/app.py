"""Sparrow application class.

Mutable during setup (routes, middleware, error stage, hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sparrow._internal.asgi import Receive, Scope, Send
from sparrow._internal.invoke import invoke
from sparrow._internal.types import ErrorHandler, Handler, NotFoundHandler
from sparrow.config import AppConfig
from sparrow.middleware.protocol import Middleware
from sparrow.routing.route import Route
from sparrow.routing.router import Router, parse_path
from sparrow.server.handler import handle_request


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler
    methods: list[str] | None
    name: str | None


class App:
    """The sparrow application.

    Usage::

        app = App()
        app.use(JSONBodyParser())

        @app.get("/profile/:username")
        def profile(username: str):
            return f"Profile page of {username}"

        @app.error_handler
        def broken(error, request):
            return Response("Something broke!", status=500)

        app.run()

    Thread safety:
        Setup is single-threaded (decorators at import time). The freeze
        transition uses a Lock + double-check so exactly one caller
        compiles the app, even if several workers hit it at once.
    """

    __slots__ = (
        "_error_handler",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_not_found_handler",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._error_handler: ErrorHandler | None = None
        self._not_found_handler: NotFoundHandler | None = None
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state: set during _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Middleware, ...] = ()

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL pattern. Use ``:name`` segments for parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name, kept for introspection.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            parse_path(path)
            self._pending_routes.append(_PendingRoute(path, func, methods, name))
            return func

        return decorator

    def get(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, methods=["GET"], name=name)

    def post(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, methods=["POST"], name=name)

    def put(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a PUT route."""
        return self.route(path, methods=["PUT"], name=name)

    def patch(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a PATCH route."""
        return self.route(path, methods=["PATCH"], name=name)

    def delete(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a DELETE route."""
        return self.route(path, methods=["DELETE"], name=name)

    # -- Middleware --

    def use(self, middleware: Middleware) -> Middleware:
        """Append a middleware to the chain.

        Middleware runs for every request, in the order it was added,
        before route dispatch. Returns *middleware* so this also works
        as a decorator.
        """
        self._check_not_frozen()
        self._middleware_list.append(middleware)
        return middleware

    # -- Error stage --

    def error_handler(self, func: ErrorHandler) -> ErrorHandler:
        """Register the terminal error stage via decorator.

        Receives ``(error, request)`` for the first error signalled while
        handling a request and returns the response to send. Registering
        a second handler replaces the first.
        """
        self._check_not_frozen()
        self._error_handler = func
        return func

    def not_found(self, func: NotFoundHandler) -> NotFoundHandler:
        """Register the response for requests no route accepts."""
        self._check_not_frozen()
        self._not_found_handler = func
        return func

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """Compiled routes in registration order (freezes the app)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """The frozen middleware chain (freezes the app)."""
        self._ensure_frozen()
        return self._middleware

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile the app and serve it until interrupted."""
        from sparrow.server.runner import run_server

        self._ensure_frozen()
        run_server(self, self.config, host=host, port=port)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_handler=self._error_handler,
            not_found_handler=self._not_found_handler,
            debug=self.config.debug,
            max_body_size=self.config.max_body_size,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), runs
        the registered hooks and signals completion back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            methods = frozenset(m.upper() for m in (pending.methods or ["GET"]))
            router.add(
                Route(path=pending.path, handler=pending.handler, methods=methods, name=pending.name)
            )
        router.compile()
        self._router = router
        self._middleware = tuple(self._middleware_list)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and handlers before calling app.run()."
            )
            raise RuntimeError(msg)
