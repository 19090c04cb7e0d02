"""Tests for sparrow.app: registration, freezing, lifespan and the pipeline."""

import logging
from typing import Any

import pytest

from sparrow.app import App
from sparrow.config import AppConfig
from sparrow.context import get_request
from sparrow.errors import ConfigurationError, HTTPError
from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.middleware import NEXT, Continue, Failure, JSONBodyParser
from sparrow.testing import TestClient


class TestAppRegistration:
    def test_route_decorator(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "hello"

        assert len(app._pending_routes) == 1
        assert app._pending_routes[0].path == "/"

    def test_route_with_methods(self) -> None:
        app = App()

        @app.route("/users", methods=["GET", "POST"])
        def users():
            return "users"

        assert app._pending_routes[0].methods == ["GET", "POST"]

    def test_bad_pattern_rejected_at_registration(self) -> None:
        app = App()
        with pytest.raises(ConfigurationError):

            @app.get("/users/{id}")
            def user(id: str):
                return id

    def test_use_returns_middleware(self) -> None:
        app = App()

        def mw(request: Request) -> Any:
            return NEXT

        assert app.use(mw) is mw
        assert app.middleware == (mw,)

    def test_routes_property_freezes(self) -> None:
        app = App()

        @app.get("/a")
        def a():
            return "a"

        assert [r.path for r in app.routes] == ["/a"]
        assert app.routes[0].methods == frozenset({"GET"})

    def test_registration_after_freeze_raises(self) -> None:
        app = App()
        app._ensure_frozen()
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.use(lambda request: NEXT)
        with pytest.raises(RuntimeError):

            @app.get("/late")
            def late():
                return "late"

    def test_default_config(self) -> None:
        assert App().config == AppConfig()


class TestAppRouting:
    async def test_string_handler(self) -> None:
        app = App()

        @app.get("/")
        def index():
            return "Hello World!"

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 200
        assert response.text == "Hello World!"
        assert response.content_type == "text/html; charset=utf-8"

    async def test_path_params_by_name(self) -> None:
        app = App()

        @app.get("/profile/:username/:age")
        async def profile(username: str, age: str):
            return f"{username}:{age}"

        async with TestClient(app) as client:
            response = await client.get("/profile/ada/36")
        assert response.text == "ada:36"

    async def test_path_params_percent_decoded(self) -> None:
        app = App()

        @app.get("/profile/:username")
        def profile(username: str):
            return username

        async with TestClient(app) as client:
            response = await client.get("/profile/ada%20lovelace")
        assert response.text == "ada lovelace"

    async def test_request_injection_and_kwargs(self) -> None:
        app = App()

        @app.get("/items/:item_id")
        def item(req: Request, **params: str):
            return {"path": req.path, "params": params}

        async with TestClient(app) as client:
            response = await client.get("/items/7")
        assert response.text == '{"path": "/items/7", "params": {"item_id": "7"}}'

    async def test_dict_handler_is_json(self) -> None:
        app = App()

        @app.get("/data")
        def data():
            return {"ok": True}

        async with TestClient(app) as client:
            response = await client.get("/data")
        assert response.content_type.startswith("application/json")

    async def test_post_route(self) -> None:
        app = App()
        app.use(JSONBodyParser())

        @app.post("/echo")
        def echo(request: Request):
            return request.body

        async with TestClient(app) as client:
            response = await client.post("/echo", json={"name": "ada"})
        assert response.status == 200
        assert response.text == '{"name": "ada"}'

    async def test_head_uses_get_route(self) -> None:
        app = App()

        @app.get("/about")
        def about():
            return "About Page"

        async with TestClient(app) as client:
            response = await client.head("/about")
        assert response.status == 200
        assert response.body == b""
        assert response.header("content-length") == "10"

    async def test_unmatched_route_404(self) -> None:
        app = App()

        @app.get("/")
        def index():
            return "home"

        async with TestClient(app) as client:
            response = await client.get("/missing")
            wrong_method = await client.delete("/")
        assert response.status == 404
        assert response.text == "Cannot GET /missing"
        assert wrong_method.status == 404
        assert wrong_method.text == "Cannot DELETE /"

    async def test_unmatched_route_skips_error_stage(self) -> None:
        app = App()
        calls: list[Exception] = []

        @app.error_handler
        def stage(error: Exception, request: Request):
            calls.append(error)
            return "error stage"

        async with TestClient(app) as client:
            response = await client.get("/missing")
        assert response.status == 404
        assert calls == []

    async def test_malformed_path_escape_is_400(self) -> None:
        app = App()
        reached: list[str] = []

        @app.get("/profile/:username")
        def profile(username: str):
            reached.append(username)
            return username

        async with TestClient(app) as client:
            response = await client.get("/profile/%FF")
        assert response.status == 400
        assert reached == []

    async def test_malformed_path_escape_reaches_error_stage(self) -> None:
        app = App()
        errors: list[Exception] = []

        @app.error_handler
        def stage(error: Exception):
            errors.append(error)
            return "Something broke!", 500

        async with TestClient(app) as client:
            response = await client.get("/anything/%C3%28")
        assert response.status == 500
        assert isinstance(errors[0], HTTPError)
        assert errors[0].status == 400

    async def test_custom_not_found(self) -> None:
        app = App()

        @app.not_found
        def missing(request: Request):
            return f"Nothing at {request.path}"

        async with TestClient(app) as client:
            response = await client.get("/x")
        assert response.status == 404
        assert response.text == "Nothing at /x"

    async def test_trailing_slash(self) -> None:
        app = App()

        @app.get("/about")
        def about():
            return "About Page"

        async with TestClient(app) as client:
            response = await client.get("/about/")
        assert response.text == "About Page"


class TestAppMiddleware:
    async def test_middleware_runs_before_handler(self) -> None:
        app = App()
        order: list[str] = []

        @app.use
        def first(request: Request):
            order.append("first")

        @app.use
        async def second(request: Request):
            order.append("second")
            return NEXT

        @app.get("/")
        def index():
            order.append("handler")
            return "ok"

        async with TestClient(app) as client:
            await client.get("/")
        assert order == ["first", "second", "handler"]

    async def test_middleware_runs_for_unmatched_routes(self) -> None:
        app = App()
        seen: list[str] = []

        @app.use
        def record(request: Request):
            seen.append(request.path)

        async with TestClient(app) as client:
            await client.get("/nowhere")
        assert seen == ["/nowhere"]

    async def test_middleware_short_circuit(self) -> None:
        app = App()
        handled: list[str] = []

        @app.use
        def gate(request: Request):
            if request.headers.get("x-token") != "secret":
                return Response("denied").with_status(401)
            return NEXT

        @app.get("/")
        def index():
            handled.append("index")
            return "ok"

        async with TestClient(app) as client:
            denied = await client.get("/")
            allowed = await client.get("/", headers={"X-Token": "secret"})
        assert denied.status == 401
        assert allowed.status == 200
        assert handled == ["index"]

    async def test_enriched_request_reaches_handler(self) -> None:
        app = App()

        @app.use
        def tag(request: Request):
            return Continue(request.with_body({"tagged": True}))

        @app.get("/")
        def index(request: Request):
            return request.body

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.text == '{"tagged": true}'

    async def test_request_context_var(self) -> None:
        app = App()

        @app.get("/who/:name")
        def who():
            return get_request().path_params["name"]

        async with TestClient(app) as client:
            response = await client.get("/who/ada")
        assert response.text == "ada"


class TestAppErrors:
    async def test_failure_from_middleware_reaches_stage(self) -> None:
        app = App()
        reached: list[str] = []

        @app.use
        def fail(request: Request):
            return Failure(ValueError("bad input"))

        @app.get("/")
        def index():
            reached.append("index")
            return "ok"

        @app.error_handler
        def stage(error: Exception, request: Request):
            return Response(f"stage saw {error}", status=500)

        async with TestClient(app) as client:
            response = await client.get("/")
        assert reached == []
        assert response.status == 500
        assert response.text == "stage saw bad input"

    async def test_failure_from_handler(self) -> None:
        app = App()

        @app.get("/contact")
        def contact():
            return Failure(RuntimeError("Contact Page Error"))

        async with TestClient(app) as client:
            response = await client.get("/contact")
        assert response.status == 500
        assert response.text == "Internal Server Error"

    async def test_raised_exception_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        app = App()

        @app.get("/")
        def index():
            raise KeyError("hidden")

        with caplog.at_level(logging.ERROR, logger="sparrow.server"):
            async with TestClient(app) as client:
                response = await client.get("/")
        assert response.status == 500
        assert "hidden" not in response.text
        assert "hidden" in caplog.text

    async def test_http_error_status(self) -> None:
        app = App()

        @app.get("/teapot")
        def teapot():
            raise HTTPError(status=418, detail="I'm a teapot")

        async with TestClient(app) as client:
            response = await client.get("/teapot")
        assert response.status == 418
        assert response.text == "I'm a teapot"

    async def test_handler_returning_none_is_500(self) -> None:
        app = App()

        @app.get("/")
        def index():
            return None

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 500

    async def test_malformed_json_uses_stage(self) -> None:
        app = App()
        app.use(JSONBodyParser())
        errors: list[Exception] = []

        @app.post("/")
        def index():
            return "ok"

        @app.error_handler
        def stage(error: Exception):
            errors.append(error)
            return "Something broke!", 500

        async with TestClient(app) as client:
            response = await client.post(
                "/", body=b"{not json", headers={"Content-Type": "application/json"}
            )
        assert response.status == 500
        assert response.text == "Something broke!"
        assert isinstance(errors[0], HTTPError)
        assert errors[0].status == 400

    async def test_malformed_json_default_is_400(self) -> None:
        app = App()
        app.use(JSONBodyParser())

        @app.post("/")
        def index():
            return "ok"

        async with TestClient(app) as client:
            response = await client.post(
                "/", body=b"{not json", headers={"Content-Type": "application/json"}
            )
        assert response.status == 400

    async def test_max_body_size_caps_raw_reads(self) -> None:
        app = App(AppConfig(max_body_size=8))

        @app.post("/upload")
        async def upload(request: Request):
            return await request.raw_body()

        async with TestClient(app) as client:
            small = await client.post("/upload", body=b"tiny")
            large = await client.post("/upload", body=b"far too large")
        assert small.status == 200
        assert large.status == 413


class TestAppLifespan:
    async def test_hooks_run(self) -> None:
        app = App()
        events: list[str] = []

        @app.on_startup
        async def start():
            events.append("startup")

        @app.on_shutdown
        def stop():
            events.append("shutdown")

        async with TestClient(app) as client:
            assert events == ["startup"]
            await client.get("/")
        assert events == ["startup", "shutdown"]
        assert [m["type"] for m in client.lifespan_messages] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_failed_startup(self) -> None:
        app = App()

        @app.on_startup
        def start():
            raise RuntimeError("no database")

        with pytest.raises(RuntimeError, match="no database"):
            async with TestClient(app):
                pass

    async def test_unknown_scope_ignored(self) -> None:
        app = App()
        sent: list[Any] = []

        async def receive() -> dict[str, Any]:
            return {}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await app({"type": "websocket"}, receive, send)
        assert sent == []
