"""Tests for sparrow.responder: the fixed-body ASGI responder."""

import pytest

from sparrow.responder import Responder
from sparrow.testing import TestClient


class TestResponder:
    @pytest.mark.parametrize(
        ("method", "path"),
        [("GET", "/"), ("POST", "/anything"), ("DELETE", "/a/b/c?x=1"), ("PATCH", "/%20")],
    )
    async def test_same_response_for_every_request(self, method: str, path: str) -> None:
        async with TestClient(Responder("Hello, World!")) as client:
            response = await client.request(method, path, body=b"ignored")
        assert response.status == 200
        assert response.text == "Hello, World!"
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_head_has_no_body(self) -> None:
        async with TestClient(Responder("Hello, World!")) as client:
            response = await client.head("/")
        assert response.status == 200
        assert response.body == b""
        assert response.header("content-length") == "13"

    async def test_custom_status_and_type(self) -> None:
        responder = Responder(b"{}", status=503, content_type="application/json")
        async with TestClient(responder) as client:
            response = await client.get("/")
        assert response.status == 503
        assert response.content_type == "application/json"

    async def test_lifespan_completes(self) -> None:
        async with TestClient(Responder("x")) as client:
            pass
        assert [m["type"] for m in client.lifespan_messages] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_repeated_requests_are_independent(self) -> None:
        async with TestClient(Responder("Hello, World!")) as client:
            first = await client.get("/")
            second = await client.get("/")
        assert first.text == second.text == "Hello, World!"
