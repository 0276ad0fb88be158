"""Shared fixtures: fake HTTP transport and recording stages."""

from __future__ import annotations

import os
from pathlib import Path

import httpx
import pytest

from core.domain.errors import ReadError


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, status_code: int = 200, payload: object | None = None, content: bytes | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.payload = payload if payload is not None else {
            "message": "https://images.dog.ceo/breeds/hound-afghan/n02088094_1003.jpg",
            "status": "success",
        }
        self.content = content
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)


class FakeReader:
    def __init__(self, text: str = "hound", fail: bool = False) -> None:
        self.text = text
        self.fail = fail
        self.calls: list[Path] = []

    async def read(self, path: Path) -> str:
        self.calls.append(path)
        if self.fail:
            raise ReadError(f"Error reading file: {path} does not exist")
        return self.text


class FakeWriter:
    def __init__(self) -> None:
        self.calls: list[tuple[Path, str]] = []

    async def write(self, path: Path, content: str) -> None:
        self.calls.append((path, content))


class FakeFetcher:
    def __init__(self, url: str = "https://images.dog.ceo/x.jpg", error: Exception | None = None) -> None:
        self.url = url
        self.error = error
        self.calls: list[str] = []

    async def fetch_image_url(self, breed: str) -> str:
        self.calls.append(breed)
        if self.error is not None:
            raise self.error
        return self.url

    async def fetch_many(self, breed: str, count: int) -> list[str]:
        return [await self.fetch_image_url(breed) for _ in range(count)]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def breed_file(tmp_path: Path) -> Path:
    path = tmp_path / "dog.txt"
    path.write_text("hound", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's DOG_PICS_* env vars and .env out of the tests."""

    for key in list(os.environ):
        if key.upper().startswith("DOG_PICS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
