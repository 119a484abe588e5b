"""Shared fixtures: an in-process fake of the transform service."""

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from j2j_studio.client.client import StudioClient
from j2j_studio.config import settings as settings_module
from j2j_studio.config.settings import ServiceConfig, Settings, get_settings

Handler = Callable[[Any], tuple[int, Any]]


def _default_validate_json(body: str) -> tuple[int, Any]:
    try:
        json.loads(body)
    except ValueError as e:
        return 200, {"valid": False, "message": "Invalid JSON", "details": str(e)}
    return 200, {"valid": True, "message": "Valid JSON"}


def _default_validate_spec(body: dict[str, Any]) -> tuple[int, Any]:
    try:
        decoded = json.loads(body.get("chainSpec") or "")
    except ValueError as e:
        return 200, {"valid": False, "message": "Invalid specification", "details": str(e)}
    if not isinstance(decoded, list):
        return 200, {"valid": False, "message": "Chain spec must be an array"}
    return 200, {"valid": True, "message": "Valid specification"}


def _default_transform(body: dict[str, Any]) -> tuple[int, Any]:
    return 200, {
        "success": True,
        "result": body["input"],
        "executionTime": 3,
        "complexity": "Low",
    }


class FakeService:
    """Records requests and answers them through swappable handlers.

    ``gate(path)`` returns an asyncio.Event that holds requests to that path
    until it is set, which lets tests control response ordering.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.handlers: dict[str, Handler] = {
            StudioClient.VALIDATE_JSON_PATH: _default_validate_json,
            StudioClient.VALIDATE_SPEC_PATH: _default_validate_spec,
            StudioClient.TRANSFORM_PATH: _default_transform,
            StudioClient.OPERATIONS_PATH: lambda _: (200, ["chain", "shift", "default", "remove"]),
        }
        self._gates: dict[str, list[asyncio.Event]] = {}

    def gate(self, path: str) -> asyncio.Event:
        """Hold the next request to ``path`` until the returned event is set."""
        event = asyncio.Event()
        self._gates.setdefault(path, []).append(event)
        return event

    def calls_to(self, path: str) -> list[Any]:
        return [body for call_path, body in self.calls if call_path == path]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        raw = request.content.decode("utf-8")
        if path == StudioClient.VALIDATE_JSON_PATH:
            body: Any = raw
        elif raw:
            body = json.loads(raw)
        else:
            body = None
        self.calls.append((path, body))

        gates = self._gates.get(path)
        if gates:
            await gates.pop(0).wait()

        handler = self.handlers.get(path)
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        status, payload = handler(body)
        if isinstance(payload, (str, bytes)):
            return httpx.Response(status, content=payload)
        return httpx.Response(status, json=payload)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep the real ~/.config file out of every test."""
    config_dir = tmp_path / "user-config"
    monkeypatch.setattr(settings_module, "USER_CONFIG_DIR", config_dir)
    monkeypatch.setattr(settings_module, "USER_CONFIG_FILE", config_dir / "config.yaml")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, service=ServiceConfig(base_url="http://studio.test"))


@pytest_asyncio.fixture
async def client(service: FakeService, settings: Settings):
    studio_client = StudioClient(settings.service, transport=service.transport())
    yield studio_client
    await studio_client.close()
