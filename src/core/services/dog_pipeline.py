"""Dog picture pipeline orchestration.

This module sequences the three stages (read breed, fetch image URL, write
URL) and is the single place that handles their failures. The CLI builds the
stages and passes them in, so the pipeline is reusable from tests or other
entry-points and keeps side-effects (printing) out of the core logic.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable

from core.domain.errors import PipelineError, UnexpectedPipelineError
from core.domain.policy import PipelineStyle
from core.interfaces.stages import BreedReader, ImageFetcher, ImageWriter

logger = logging.getLogger(__name__)

READY_MESSAGE = "Step 2: ready!"


@dataclass
class PipelineRequest:
    """Parameters that control one pipeline run."""

    breed_file: Path
    output_file: Path
    count: int = 1
    style: PipelineStyle = PipelineStyle.AWAIT


@dataclass
class PipelineStages:
    """The three collaborators, injected by the composition root."""

    reader: BreedReader
    fetcher: ImageFetcher
    writer: ImageWriter


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, errors)."""

    info: Callable[[str], None] | None = None
    error: Callable[[str], None] | None = None

    def emit(self, message: str) -> None:
        if self.info:
            self.info(message)


@dataclass
class PipelineResult:
    """Output of a pipeline invocation."""

    ok: bool
    breed: str | None = None
    image_urls: list[str] = field(default_factory=list)
    message: str | None = None
    error: PipelineError | None = None


@dataclass
class _RunState:
    breed: str | None = None
    image_urls: list[str] = field(default_factory=list)


def _wrap_unexpected(exc: BaseException) -> PipelineError:
    if isinstance(exc, PipelineError):
        return exc
    wrapped = UnexpectedPipelineError(str(exc) or exc.__class__.__name__)
    wrapped.__cause__ = exc
    return wrapped


async def _fetch(stages: PipelineStages, breed: str, count: int) -> list[str]:
    if count > 1:
        return await stages.fetcher.fetch_many(breed, count)
    return [await stages.fetcher.fetch_image_url(breed)]


def _url_line(urls: list[str]) -> str:
    return urls[0] if len(urls) == 1 else ", ".join(urls)


async def get_dog_pic(
    *,
    stages: PipelineStages,
    request: PipelineRequest,
    hooks: PipelineHooks | None = None,
    state: _RunState | None = None,
) -> str:
    """Read the breed, fetch its image URL(s) and save them, one after another.

    Raises a `PipelineError` subclass on the first failing stage; later
    stages are never started.
    """

    hooks = hooks or PipelineHooks()
    state = state if state is not None else _RunState()
    try:
        breed = (await stages.reader.read(request.breed_file)).strip()
        state.breed = breed
        hooks.emit(f"Dog breed: {breed}")

        urls = await _fetch(stages, breed, request.count)
        hooks.emit(f"Dog image URL: {_url_line(urls)}")

        await stages.writer.write(request.output_file, "\n".join(urls))
        state.image_urls = urls
        hooks.emit(f"Dog image URL saved to {request.output_file.name}")
    except PipelineError:
        raise
    except Exception as exc:
        raise _wrap_unexpected(exc) from exc
    return READY_MESSAGE


def get_dog_pic_with_callbacks(
    *,
    stages: PipelineStages,
    request: PipelineRequest,
    hooks: PipelineHooks | None = None,
    state: _RunState | None = None,
) -> asyncio.Future[str]:
    """Same contract as `get_dog_pic`, chained with done-callbacks.

    Each stage is scheduled as a task from the previous task's callback; the
    returned future resolves with the ready message or the first failure.
    Cancelling the returned future cancels the stage in flight, so no later
    stage starts. Must be called from a running event loop.
    """

    hooks = hooks or PipelineHooks()
    state = state if state is not None else _RunState()
    loop = asyncio.get_running_loop()
    outcome: asyncio.Future[str] = loop.create_future()
    in_flight: list[asyncio.Future[Any]] = []

    def _on_outcome(done: asyncio.Future[str]) -> None:
        if done.cancelled():
            for task in in_flight:
                task.cancel()

    outcome.add_done_callback(_on_outcome)

    def then(
        task: asyncio.Future[Any],
        on_value: Callable[[Any], Awaitable[Any] | None],
    ) -> None:
        in_flight[:] = [task]

        def _done(done: asyncio.Future[Any]) -> None:
            if outcome.done():
                if not done.cancelled():
                    # Mark the exception as retrieved; the outcome is already settled.
                    done.exception()
                return
            if done.cancelled():
                outcome.cancel()
                return
            exc = done.exception()
            if exc is not None:
                outcome.set_exception(_wrap_unexpected(exc))
                return
            try:
                follow_up = on_value(done.result())
            except Exception as err:
                outcome.set_exception(_wrap_unexpected(err))
                return
            if follow_up is None:
                outcome.set_result(READY_MESSAGE)

        task.add_done_callback(_done)

    def on_written(_: None) -> None:
        hooks.emit(f"Dog image URL saved to {request.output_file.name}")

    def on_urls(urls: list[str]) -> Awaitable[None]:
        hooks.emit(f"Dog image URL: {_url_line(urls)}")
        write = loop.create_task(stages.writer.write(request.output_file, "\n".join(urls)))
        state.image_urls = urls
        then(write, on_written)
        return write

    def on_text(text: str) -> Awaitable[list[str]]:
        breed = text.strip()
        state.breed = breed
        hooks.emit(f"Dog breed: {breed}")
        fetch = loop.create_task(_fetch(stages, breed, request.count))
        then(fetch, on_urls)
        return fetch

    read = loop.create_task(stages.reader.read(request.breed_file))
    then(read, on_text)
    return outcome


async def run_pipeline(
    *,
    stages: PipelineStages,
    request: PipelineRequest,
    hooks: PipelineHooks | None = None,
) -> PipelineResult:
    """Outer handler: run the pipeline, report the first failure and stop.

    Never raises for stage failures; the returned result carries the error.
    """

    hooks = hooks or PipelineHooks()
    state = _RunState()
    hooks.emit("Step 1: will get dog pics!")
    logger.debug("Running pipeline with %s style", request.style.label())

    try:
        if request.style is PipelineStyle.CALLBACKS:
            message = await get_dog_pic_with_callbacks(
                stages=stages, request=request, hooks=hooks, state=state
            )
        else:
            message = await get_dog_pic(
                stages=stages, request=request, hooks=hooks, state=state
            )
    except PipelineError as exc:
        logger.error("Pipeline failed at %s stage: %s", exc.stage, exc.message)
        if hooks.error:
            hooks.error(f"asyncError: {exc.message}")
        return PipelineResult(ok=False, breed=state.breed, error=exc)

    hooks.emit(message)
    hooks.emit("Step 3: done getting dog pics!")
    return PipelineResult(
        ok=True,
        breed=state.breed,
        image_urls=state.image_urls,
        message=message,
    )
