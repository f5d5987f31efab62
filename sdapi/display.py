"""Rich table display functions for the sdapi CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from sdapi.responses import MemoryResponse, ProgressResponse, SDModel

KB = 1024
MB = KB * KB
GB = MB * KB
HASH_DISPLAY = 10


def _format_bytes(size: float) -> str:
    """Format a byte count to a human-readable string."""
    if size < KB:
        return f"{size:.0f} B"
    if size < MB:
        return f"{size / KB:.1f} KB"
    if size < GB:
        return f"{size / MB:.1f} MB"
    return f"{size / GB:.2f} GB"


def display_models(models: list[SDModel], console: Console) -> None:
    """Display available checkpoints."""
    if not models:
        console.print("[yellow]No models reported by the server.[/yellow]")
        return

    table = Table(title="Checkpoints", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", no_wrap=True, overflow="ellipsis")
    table.add_column("Hash", style="green", width=HASH_DISPLAY)
    table.add_column("Filename", style="dim", overflow="ellipsis")

    for m in models:
        table.add_row(m.title, (m.hash or m.sha256 or "")[:HASH_DISPLAY], m.filename)

    console.print()
    console.print(table)


def display_progress(res: ProgressResponse, console: Console) -> None:
    """Display progress of the current job."""
    state = res.state
    table = Table(title="Progress", show_header=False)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Progress", f"{res.progress * 100:.1f}%")
    table.add_row("ETA", f"{res.eta_relative:.1f}s")
    table.add_row("Job", state.job or "-")
    table.add_row("Job #", f"{state.job_no}/{state.job_count}")
    table.add_row("Step", f"{state.sampling_step}/{state.sampling_steps}")
    if state.interrupted:
        table.add_row("Interrupted", "yes")
    if state.skipped:
        table.add_row("Skipped", "yes")
    if res.textinfo:
        table.add_row("Info", res.textinfo)

    console.print(table)


def display_memory(res: MemoryResponse, console: Console) -> None:
    """Display RAM and CUDA memory statistics."""
    table = Table(title="Memory", show_header=True, header_style="bold magenta")
    table.add_column("Pool", style="cyan", no_wrap=True)
    table.add_column("Used / Current", justify="right")
    table.add_column("Free / Peak", justify="right")
    table.add_column("Total", justify="right")

    ram, cuda = res.ram, res.cuda
    table.add_row("RAM", _format_bytes(ram.used), _format_bytes(ram.free), _format_bytes(ram.total))
    table.add_row(
        "CUDA",
        _format_bytes(cuda.system.used),
        _format_bytes(cuda.system.free),
        _format_bytes(cuda.system.total),
    )
    for name in ("active", "allocated", "reserved", "inactive"):
        counter = getattr(cuda, name)
        table.add_row(f"  {name}", _format_bytes(counter.current), _format_bytes(counter.peak), "")

    console.print(table)
    events = cuda.events
    console.print(f"[dim]CUDA events: retries={events.retries} oom={events.oom}[/dim]")


def display_options(options: dict[str, Any], console: Console) -> None:
    """Display server options as a key/value table."""
    table = Table(title="Server Options", show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green", overflow="ellipsis")

    for key, value in sorted(options.items()):
        table.add_row(key, str(value))

    console.print(table)


def display_saved(paths: list[Path], console: Console) -> None:
    for p in paths:
        console.print(f"[green]Saved:[/green] {p}")
