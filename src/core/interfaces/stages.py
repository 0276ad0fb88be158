"""Pipeline stage contracts.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- File/HTTP adapters are interchangeable and tests can substitute fakes
  without coupling the Core to concrete implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class BreedReader(Protocol):
    """Loads the breed name from a named resource."""

    async def read(self, path: Path) -> str:
        """Return the decoded text or raise `ReadError`."""

        ...


@runtime_checkable
class ImageFetcher(Protocol):
    """Resolves a breed into image URL(s).

    Design rules:
    - Asynchronous because it performs network I/O.
    - Raises `FetchError` (or a subclass) on any failure.
    """

    async def fetch_image_url(self, breed: str) -> str:
        ...

    async def fetch_many(self, breed: str, count: int) -> list[str]:
        ...


@runtime_checkable
class ImageWriter(Protocol):
    """Persists the URL(s), overwriting previous content."""

    async def write(self, path: Path, content: str) -> None:
        """Overwrite `path` with `content` or raise `WriteError`."""

        ...
