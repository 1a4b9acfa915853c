"""Tests for the demo HTTP application."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hellosvc.server.app import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


class TestGreeting:
    def test_root_returns_greeting(self, client: TestClient) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.text == "Hello, world!"

    @pytest.mark.parametrize(
        "method", ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "PROPFIND", "FOO"]
    )
    def test_any_method(self, client: TestClient, method: str) -> None:
        resp = client.request(method, "/")
        assert resp.status_code == 200
        assert resp.text == "Hello, world!"

    def test_head_has_no_body(self, client: TestClient) -> None:
        resp = client.head("/")
        assert resp.status_code == 200
        assert resp.content == b""

    @pytest.mark.parametrize("path", ["/hello", "/a/b/c", "/index.html?x=1"])
    def test_any_path(self, client: TestClient, path: str) -> None:
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.text == "Hello, world!"

    def test_request_body_is_ignored(self, client: TestClient) -> None:
        resp = client.post("/", content=b"\x00not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 200
        assert resp.text == "Hello, world!"

    def test_plain_text_content_type(self, client: TestClient) -> None:
        resp = client.get("/")
        assert resp.headers["content-type"].startswith("text/plain")

    def test_repeated_requests_identical(self, client: TestClient) -> None:
        bodies = {client.get("/").text for _ in range(25)}
        assert bodies == {"Hello, world!"}

    def test_no_docs_routes(self, client: TestClient) -> None:
        assert client.get("/docs").text == "Hello, world!"
        assert client.get("/openapi.json").text == "Hello, world!"


def test_custom_greeting() -> None:
    client = TestClient(create_app(greeting="hi"))
    assert client.get("/").text == "hi"
