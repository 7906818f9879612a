"""Rich console utilities for styled terminal output.

Status messages, spinners and progress bars go to stderr so that stdout
only ever carries the exported outputs and dry-run values, which other
deployment units may parse.
"""

import json
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.syntax import Syntax
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "highlight": "green bold",
        "muted": "dim",
    }
)

# (style, icon) per message kind
_MARKERS = {
    "info": ("info", "ℹ"),
    "success": ("success", "✓"),
    "warning": ("warning", "⚠"),
    "error": ("error", "✗"),
    "action": ("info", "→"),
    "step": ("muted", "•"),
}

# Status output
console = Console(theme=_THEME, stderr=True)

# Machine-readable output
output_console = Console(theme=_THEME)


def _say(kind: str, message: str) -> None:
    style, icon = _MARKERS[kind]
    console.print(f"[{style}]{icon}[/{style}] {message}")


def info(message: str) -> None:
    _say("info", message)


def success(message: str) -> None:
    _say("success", message)


def warning(message: str) -> None:
    _say("warning", message)


def error(message: str) -> None:
    _say("error", message)


def action(message: str) -> None:
    """Announce something the deployment is about to do."""
    _say("action", message)


def step(message: str) -> None:
    """Report a sub-step of the current action."""
    _say("step", message)


def highlight(text: str) -> str:
    """Return text wrapped in highlight markup."""
    return f"[highlight]{text}[/highlight]"


@contextmanager
def spinner(message: str) -> Generator[None, None, None]:
    """Display a spinner while a helm or cluster call runs.

    Args:
        message: The status message to display.

    """
    with console.status(f"[info]{message}[/info]", spinner="dots"):
        yield


def create_download_progress() -> Progress:
    """Create the progress bar shown while downloading helm."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console,
    )


def summary_panel(title: str, items: dict[str, str]) -> None:
    """Print a bordered key-value summary on the status console.

    Args:
        title: Title for the panel.
        items: Label -> value pairs to display.

    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="cyan")

    for label, value in items.items():
        table.add_row(f"{label}:", value)

    console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="green"))


def yaml_block(data: Any) -> None:
    """Print data as YAML on stdout, keeping key order."""
    rendered = yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    output_console.print(Syntax(rendered, "yaml", theme="ansi_dark", background_color="default"))


def json_block(data: Any) -> None:
    """Print data as indented JSON on stdout."""
    output_console.print_json(json.dumps(data))


def newline() -> None:
    console.print()
