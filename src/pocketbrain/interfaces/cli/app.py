"""CLI application for PocketBrain using Rich and Typer.

Diagnostics over a store root: list, read, search, daily notes and the
Obsidian config summary.
"""

import logging
from datetime import timezone
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from pocketbrain.core.config import VAULT_PATH, validate_vault_environment
from pocketbrain.core.tools.base import format_bytes
from pocketbrain.store import DocumentStore, Entry, SearchMode, StoreConfigError

app = typer.Typer(
    name="pocketbrain",
    help="PocketBrain CLI - inspect and edit your vault",
    no_args_is_help=True,
)

console = Console()

RootOption = typer.Option(
    None,
    "--root",
    "-r",
    help="Store root (default: $VAULT_PATH or ~/.pocketbrain/vault)",
)


def _open_store(root: Optional[str]) -> DocumentStore:
    """Open the store at root, exiting with an error on bad store-config.yaml."""
    try:
        return DocumentStore.open(root or VAULT_PATH, label="vault")
    except StoreConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


def _entries_table(title: str, entries: list[Entry]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Path", style="green")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for entry in entries:
        size = "" if entry.is_directory else format_bytes(entry.size)
        path = entry.path + "/" if entry.is_directory else entry.path
        table.add_row(path, size, entry.modified.strftime("%Y-%m-%d %H:%M"))
    return table


@app.callback()
def main(
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
):
    """PocketBrain store diagnostics."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )


@app.command()
def init(
    root: Optional[str] = RootOption,
):
    """Create the store root and its convention folders."""
    is_valid, message = validate_vault_environment()
    if not is_valid:
        console.print(f"[red]Error: {message}[/red]")
        raise typer.Exit(1)

    store = _open_store(root)
    store.initialize(create_structure=True)
    console.print(f"[green]Store ready at {store.root}[/green]")


@app.command("ls")
def list_folder(
    folder: str = typer.Argument("", help="Folder relative to the store root"),
    root: Optional[str] = RootOption,
):
    """List a folder's immediate children."""
    store = _open_store(root)
    entries = store.list_files(folder)
    if not entries:
        console.print(f"[dim]Folder is empty: {folder or 'root'}[/dim]")
        return
    console.print(_entries_table(folder or "root", entries))


@app.command()
def read(
    path: str = typer.Argument(..., help="File relative to the store root"),
    root: Optional[str] = RootOption,
):
    """Print a note."""
    store = _open_store(root)
    content = store.read(path)
    if content is None:
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    console.print(Panel(Markdown(content), title=path, border_style="blue"))


@app.command()
def search(
    query: str = typer.Argument(..., help="Case-insensitive text to find"),
    folder: str = typer.Option("", "--folder", "-f", help="Folder to search in"),
    mode: SearchMode = typer.Option(SearchMode.NAME, "--mode", "-m"),
    root: Optional[str] = RootOption,
):
    """Search by name, content, or both."""
    store = _open_store(root)
    entries = store.search(query, folder, mode)
    if not entries:
        console.print(f'[dim]No files found matching "{query}" in {mode} mode[/dim]')
        return
    console.print(_entries_table(f'Matches for "{query}"', entries))


@app.command()
def backlinks(
    target: str = typer.Argument(..., help="Wiki-link target, e.g. 'Project Plan'"),
    folder: str = typer.Option("", "--folder", "-f"),
    root: Optional[str] = RootOption,
):
    """Find notes linking to [[target]]."""
    store = _open_store(root)
    entries = store.find_backlinks(target, folder)
    if not entries:
        console.print(f'[dim]No backlinks found for "{target}"[/dim]')
        return
    console.print(_entries_table(f"Backlinks to [[{target}]]", entries))


@app.command()
def tags(
    tag: str = typer.Argument(..., help="Tag with or without #"),
    folder: str = typer.Option("", "--folder", "-f"),
    root: Optional[str] = RootOption,
):
    """Find notes carrying a #tag."""
    store = _open_store(root)
    entries = store.search_by_tag(tag, folder)
    if not entries:
        console.print(f'[dim]No files found with tag "{tag}"[/dim]')
        return
    console.print(_entries_table(f"Tagged {tag}", entries))


@app.command()
def stats(
    root: Optional[str] = RootOption,
):
    """Show store statistics."""
    store = _open_store(root)
    result = store.stats()

    table = Table(title="Store Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Root", str(store.root))
    table.add_row("Total files", str(result.total_files))
    table.add_row("Total size", format_bytes(result.total_size))
    last_modified = "N/A"
    if result.last_modified is not None:
        last_modified = result.last_modified.astimezone(timezone.utc).strftime(
            "%Y-%m-%dT%H:%M:%SZ"
        )
    table.add_row("Last modified", last_modified)
    console.print(table)


@app.command()
def config(
    refresh: bool = typer.Option(False, "--refresh", help="Bypass the cache"),
    root: Optional[str] = RootOption,
):
    """Summarize the .obsidian configuration."""
    store = _open_store(root)
    state = store.get_config_state(force_refresh=refresh)
    summary = state.summary

    if not summary.config_found:
        console.print("[yellow]No .obsidian config found.[/yellow]")

    table = Table(title="Obsidian Config", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Daily folder", summary.daily_notes.folder)
    table.add_row("Daily format", summary.daily_notes.format)
    table.add_row("Daily template", summary.daily_notes.template_file)
    table.add_row(
        "Daily plugin",
        "enabled" if summary.daily_notes.plugin_enabled else "disabled",
    )
    table.add_row("New notes", summary.new_notes.location)
    table.add_row("New notes folder", summary.new_notes.folder)
    table.add_row("Attachments", summary.attachment_folder)
    table.add_row("Link style", summary.link_style)
    table.add_row("Templates folder", summary.templates_folder)
    console.print(table)

    for warning in summary.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")


@app.command()
def daily(
    text: str = typer.Argument("", help="Entry to append to today's Timeline"),
    root: Optional[str] = RootOption,
):
    """Show today's daily note path, or append a timestamped entry."""
    store = _open_store(root)
    path = store.get_today_daily_note_path()
    if not text:
        console.print(f"Today's daily note: {path}")
        return
    if not store.append_to_daily(text):
        console.print("[red]Error: Failed to update daily note[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Added entry to {path}[/green]")


@app.command()
def track(
    metric: str = typer.Argument(..., help="Metric name, e.g. mood"),
    value: str = typer.Argument(..., help="Metric value, e.g. 8/10"),
    root: Optional[str] = RootOption,
):
    """Set a metric in today's Tracking section."""
    store = _open_store(root)
    if not store.upsert_daily_tracking(metric, value):
        console.print("[red]Error: metric and value must both be non-empty[/red]")
        raise typer.Exit(1)
    console.print(
        f"[green]Updated {metric} in {store.get_today_daily_note_path()}[/green]"
    )


if __name__ == "__main__":
    app()
