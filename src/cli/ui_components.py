"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables/panels can be reused by several commands.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.services.dog_pipeline import PipelineResult


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Can be skipped in non-interactive runs (`--quiet`).
    """

    title = Text("dog-pics", style="bold cyan")
    subtitle = Text("read breed • fetch image • save URL", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_images_table(result: PipelineResult) -> Table:
    """Table with the saved URL(s) of a successful run."""

    table = Table(title=f"Images for {result.breed or '?'}")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("URL", style="magenta")
    for i, url in enumerate(result.image_urls, start=1):
        table.add_row(str(i), url)
    return table


def build_error_panel(result: PipelineResult) -> Panel:
    """Panel describing the failure of a run."""

    error = result.error
    body = Text()
    if error is None:
        body.append("Unknown failure")
    else:
        body.append(error.message.strip() + "\n\n")
        body.append(f"Stage: {error.stage}", style="dim")
    return Panel(body, title=Text("Pipeline failed", style="bold red"), border_style="red")
