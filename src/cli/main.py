"""CLI entry point (Typer) and composition root.

Why here:
- Builds settings, the HTTP client and the file stages, then hands them to
  the pipeline as parameters. The Core never creates its own collaborators.
- Printing (Rich) and exit codes stay out of the Core.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.dog_api import DogApiFetcher
from adapters.http_client import build_async_client
from adapters.text_files import TextFileReader, TextFileWriter
from cli import doctor
from cli.ui_components import build_error_panel, build_images_table, print_banner
from core.config import AppSettings
from core.domain.policy import BreedPolicy, PipelineStyle
from core.services.dog_pipeline import (
    PipelineHooks,
    PipelineRequest,
    PipelineResult,
    PipelineStages,
    run_pipeline,
)

app = typer.Typer(no_args_is_help=True, help="Fetch a random dog picture URL for a breed.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def setup_logging(level: str | int = logging.WARNING) -> None:
    """Route diagnostic logging through Rich on stderr."""

    logging.basicConfig(
        level=level,
        format="%(name)s - %(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def load_settings() -> AppSettings:
    """Load settings, turning validation errors into an operator message."""

    try:
        return AppSettings()
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            _err_console.print(
                f"Invalid setting DOG_PICS_{field.upper()}: {error['msg']}",
                style="red",
                markup=False,
            )
        raise typer.Exit(code=1) from exc


async def execute(
    *,
    settings: AppSettings,
    request: PipelineRequest,
    hooks: PipelineHooks,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PipelineResult:
    """Wire the stages for one run and execute the pipeline."""

    async with build_async_client(settings, transport=transport) as client:
        stages = PipelineStages(
            reader=TextFileReader(),
            fetcher=DogApiFetcher(
                client,
                base_url=settings.api_base_url,
                policy=settings.breed_policy,
                max_concurrency=settings.max_concurrency,
            ),
            writer=TextFileWriter(),
        )
        return await run_pipeline(stages=stages, request=request, hooks=hooks)


@app.command()
def fetch(
    breed_file: Path | None = typer.Option(
        None, "--breed-file", "-i", help="File holding the breed name (default: settings)."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="File overwritten with the image URL(s)."
    ),
    count: int = typer.Option(1, "--count", "-n", min=1, help="Images to fetch concurrently."),
    style: PipelineStyle = typer.Option(
        PipelineStyle.default(), "--style", help="How the stages are chained."
    ),
    policy: BreedPolicy | None = typer.Option(
        None, "--policy", help="Unsafe breed characters: encode or reject."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner nor summary table."),
) -> None:
    """Read the breed, fetch a random image URL and save it."""

    settings = load_settings()
    if policy is not None:
        settings = settings.model_copy(update={"breed_policy": policy})
    setup_logging(logging.DEBUG if verbose else settings.log_level)

    request = PipelineRequest(
        breed_file=breed_file or settings.breed_file,
        output_file=output or settings.output_file,
        count=count,
        style=style,
    )
    hooks = PipelineHooks(
        info=lambda message: _console.print(message, markup=False, highlight=False),
        error=lambda message: _err_console.print(message, style="red", markup=False),
    )

    if not quiet:
        print_banner(_console)

    result = asyncio.run(execute(settings=settings, request=request, hooks=hooks))

    if not result.ok:
        if not quiet:
            _err_console.print(build_error_panel(result))
        raise typer.Exit(code=1)

    if not quiet and len(result.image_urls) > 1:
        _console.print(build_images_table(result))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
