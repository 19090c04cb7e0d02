"""Sparrow: ordered middleware chains and first-match routing over ASGI.

Basic usage::

    from sparrow import App, NEXT

    app = App()

    @app.use
    def log(request):
        print(request.method, request.path)
        return NEXT

    @app.get("/profile/:username")
    def profile(username: str):
        return f"Profile page of {username}"

    app.run()

Serving needs the pounce server (``pip install sparrow[server]``).
"""

__version__ = "0.1.0"
__all__ = [
    "NEXT",
    "App",
    "AppConfig",
    "BadRequest",
    "ConfigurationError",
    "Continue",
    "Failure",
    "HTTPError",
    "Middleware",
    "NotFound",
    "PayloadTooLarge",
    "Request",
    "Responder",
    "Response",
    "ResponseAlreadySent",
    "SparrowError",
    "Step",
    "get_request",
]

_ERRORS = (
    "BadRequest",
    "ConfigurationError",
    "HTTPError",
    "NotFound",
    "PayloadTooLarge",
    "ResponseAlreadySent",
    "SparrowError",
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sparrow`` fast while providing a clean top-level API.
    """
    if name == "App":
        from sparrow.app import App

        return App

    if name == "AppConfig":
        from sparrow.config import AppConfig

        return AppConfig

    if name == "Request":
        from sparrow.http.request import Request

        return Request

    if name == "Response":
        from sparrow.http.response import Response

        return Response

    if name == "Responder":
        from sparrow.responder import Responder

        return Responder

    if name in ("NEXT", "Continue", "Failure", "Middleware", "Step"):
        from sparrow.middleware import protocol

        return getattr(protocol, name)

    if name in _ERRORS:
        from sparrow import errors

        return getattr(errors, name)

    if name == "get_request":
        from sparrow.context import get_request

        return get_request

    msg = f"module 'sparrow' has no attribute {name!r}"
    raise AttributeError(msg)
