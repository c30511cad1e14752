"""
Basic API tests for the code execution client service.

These tests exercise the HTTP endpoints using FastAPI's TestClient.  The
remote sandbox is replaced by an ``httpx.MockTransport``, either through the
``get_client`` dependency or by routing the real dependency's HTTP client.
"""

from __future__ import annotations

import dataclasses
import importlib

import httpx
import pytest
from fastapi.testclient import TestClient

from pistonexec.api import main
from pistonexec.client import ExecutionClient

UI_ORIGIN = "http://localhost:5173"


@pytest.fixture
def api(sandbox):
    async def _client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(sandbox)) as http_client:
            yield ExecutionClient.from_config(main.config, registry=main.registry, http_client=http_client)

    main.app.dependency_overrides[main.get_client] = _client
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.setattr(main, "config", dataclasses.replace(main.config, api_key=""))


@pytest.fixture
def cors_api(monkeypatch):
    """Rebuild the app with a UI origin and an API key configured."""
    monkeypatch.setenv("PISTONEXEC_CLIENT_URL", UI_ORIGIN)
    monkeypatch.setenv("PISTONEXEC_API_KEY", "secret")
    importlib.reload(main)
    yield TestClient(main.app)
    monkeypatch.delenv("PISTONEXEC_CLIENT_URL")
    monkeypatch.delenv("PISTONEXEC_API_KEY")
    importlib.reload(main)


def test_health(api, no_api_key):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_languages(api, no_api_key):
    response = api.get("/languages")
    assert response.status_code == 200
    assert response.json() == [
        {"id": "javascript", "language": "javascript", "version": "18.15.0", "file_extension": "js"},
        {"id": "python", "language": "python", "version": "3.10.0", "file_extension": "py"},
        {"id": "java", "language": "java", "version": "15.0.2", "file_extension": "java"},
    ]


def test_execute_success(api, sandbox, no_api_key):
    sandbox.reply(200, json={"run": {"output": "2\n", "stderr": ""}})

    res = api.post("/execute", json={"language": "python", "code": "print(1 + 1)"})

    assert res.status_code == 200
    assert res.json() == {"success": True, "output": "2\n"}
    assert sandbox.last_body()["files"] == [{"name": "main.py", "content": "print(1 + 1)"}]


def test_execute_failure_is_data(api, sandbox, no_api_key):
    sandbox.reply(200, json={"run": {"output": "partial", "stderr": "SyntaxError"}})

    res = api.post("/execute", json={"language": "python", "code": ")"})

    assert res.status_code == 200
    assert res.json() == {
        "success": False,
        "output": "partial",
        "error": "SyntaxError",
        "error_kind": "execution",
    }


def test_execute_unsupported_language(api, sandbox, no_api_key):
    res = api.post("/execute", json={"language": "ruby", "code": "puts 1"})

    assert res.status_code == 200
    assert res.json() == {
        "success": False,
        "error": "Unsupported language: ruby",
        "error_kind": "unsupported_language",
    }
    assert sandbox.requests == []


def test_execute_requires_code(api, no_api_key):
    res = api.post("/execute", json={"language": "python"})
    assert res.status_code == 422


def test_api_key_enforced(api, sandbox, monkeypatch):
    monkeypatch.setattr(main, "config", dataclasses.replace(main.config, api_key="secret"))

    res = api.post("/execute", json={"language": "python", "code": "print(1)"})
    assert res.status_code == 401
    assert res.json() == {"detail": "Invalid API key"}
    assert sandbox.requests == []

    res = api.get("/health", headers={"x-api-key": "secret"})
    assert res.status_code == 200


def test_execute_with_default_client_dependency(routed_httpx, no_api_key):
    routed_httpx.reply(200, json={"run": {"output": "hello\n", "stderr": ""}})
    client = TestClient(main.app)

    res = client.post("/execute", json={"language": "java", "code": "class Main {}"})

    assert res.status_code == 200
    assert res.json() == {"success": True, "output": "hello\n"}
    assert str(routed_httpx.requests[0].url) == f"{main.config.api_url}/execute"
    assert routed_httpx.last_body()["files"][0]["name"] == "main.java"


def test_cors_preflight_from_ui_origin(cors_api):
    res = cors_api.options(
        "/execute",
        headers={"Origin": UI_ORIGIN, "Access-Control-Request-Method": "POST"},
    )

    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == UI_ORIGIN


def test_cors_headers_only_for_ui_origin(cors_api):
    allowed = cors_api.get("/health", headers={"Origin": UI_ORIGIN, "x-api-key": "secret"})
    other = cors_api.get("/health", headers={"Origin": "https://elsewhere.test", "x-api-key": "secret"})

    assert allowed.status_code == 200
    assert allowed.headers["access-control-allow-origin"] == UI_ORIGIN
    assert other.status_code == 200
    assert "access-control-allow-origin" not in other.headers
