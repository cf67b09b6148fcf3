"""Shared utility functions for stencil.

Provides Rich-based console reporting, file-system helpers and the binary
content heuristic used to decide whether a template file can be rendered.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()

# Bytes that commonly appear in text files: BEL, BS, TAB, LF, FF, CR, ESC and
# everything from space upwards (which covers UTF-8 multi-byte sequences).
_TEXT_BYTES = bytes(bytearray({7, 8, 9, 10, 12, 13, 27} | set(range(0x20, 0x100))))

# ---------------------------------------------------------------------------
# Binary detection
# ---------------------------------------------------------------------------


def looks_binary(data: bytes, sample_size: int = 8000) -> bool:
    """Return ``True`` if *data* looks like binary rather than text.

    Only the first *sample_size* bytes are inspected.  Content is binary when
    the sample contains a NUL byte or more than 30% of it is made of control
    characters that never show up in text.  Empty content is text.
    """
    chunk = data[:sample_size]
    if not chunk:
        return False
    if b"\x00" in chunk:
        return True
    nontext = chunk.translate(None, _TEXT_BYTES)
    return len(nontext) / len(chunk) > 0.30


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create *path* and its parents if missing and return it resolved.

    The walker compares template directories against the resolved output
    root, so an output directory placed inside the template is recognised.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message.

    Highlighting is off so paths and values in the message keep one colour.
    """
    console.print(f"[bold red]{message}[/bold red]", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    """Print a dim informational message."""
    console.print(f"[dim]{message}[/dim]")
