"""Text file stages (read breed, write URL).

Why threads:
- `Path.read_text`/`write_text` block; `asyncio.to_thread` keeps the event
  loop free while each stage suspends the pipeline until it completes.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from core.domain.errors import ReadError, WriteError
from core.interfaces.stages import BreedReader, ImageWriter

logger = logging.getLogger(__name__)


class TextFileReader(BreedReader):
    """Reads a whole UTF-8 file."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    async def read(self, path: Path) -> str:
        try:
            text = await asyncio.to_thread(path.read_text, encoding=self._encoding)
        except FileNotFoundError as exc:
            raise ReadError(f"Error reading file: {path} does not exist") from exc
        except UnicodeDecodeError as exc:
            raise ReadError(f"Error reading file: {path} is not valid {self._encoding}") from exc
        except OSError as exc:
            raise ReadError(f"Error reading file {path}: {exc.strerror or exc}") from exc
        logger.debug("Read %d chars from %s", len(text), path)
        return text


class TextFileWriter(ImageWriter):
    """Overwrites a UTF-8 file, creating parent directories."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def _write(self, path: Path, content: str) -> int:
        path.parent.mkdir(parents=True, exist_ok=True)
        return path.write_text(content, encoding=self._encoding)

    async def write(self, path: Path, content: str) -> None:
        try:
            written = await asyncio.to_thread(self._write, path, content)
        except OSError as exc:
            raise WriteError(f"Error writing file {path}: {exc.strerror or exc}") from exc
        logger.debug("Wrote %d chars to %s", written, path)
