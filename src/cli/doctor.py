"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.dog_api import DogApiFetcher
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import FetchError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_PROBE_BREED = "hound"


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            fetcher = DogApiFetcher(client, base_url=settings.api_base_url)
            url = await fetcher.fetch_image_url(_PROBE_BREED)
        return True, url
    except FetchError as exc:
        return False, exc.message


def _check_breed_file(path: Path) -> tuple[str, str]:
    if not path.exists():
        return "FAIL", f"{path} does not exist"
    if not os.access(path, os.R_OK):
        return "FAIL", f"{path} is not readable"
    return "OK", str(path)


def _check_output_dir(path: Path) -> tuple[str, str]:
    parent = path.parent
    if parent.exists() and not os.access(parent, os.W_OK):
        return "FAIL", f"{parent} is not writable"
    return "OK", str(path)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="dog-pics Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("Breed policy", "OK", settings.breed_policy.value)
    table.add_row("Max concurrency", "OK", str(settings.max_concurrency))

    # Files
    status, detail = _check_breed_file(settings.breed_file)
    table.add_row("Breed file", status, detail)
    status, detail = _check_output_dir(settings.output_file)
    table.add_row("Output file", status, detail)

    # Connectivity (best-effort)
    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("dog.ceo API", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] check your network or set DOG_PICS_API_BASE_URL."
        )
