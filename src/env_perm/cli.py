"""
env_perm CLI

Command-line interface for persisting environment variables.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from env_perm import __version__
from env_perm.config import get_settings
from env_perm.errors import EnvPermError
from env_perm.logging import setup_logging
from env_perm.writer import EntryWriter

app = typer.Typer(
    name="env-perm",
    help="Permanently set environment variables for future shells",
    add_completion=False,
)
console = Console()


def get_writer() -> EntryWriter:
    """Build a writer from the current settings."""
    return EntryWriter(get_settings())


def fail(error: Exception) -> None:
    """Report an error and exit with status 1."""
    console.print(f"[red]✗[/red] {escape(str(error))}")
    raise typer.Exit(1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging before any command runs."""
    setup_logging(level=get_settings().log_level, debug_mode=verbose)


@app.command("set")
def set_command(
    name: str = typer.Argument(..., help="Variable name"),
    value: str = typer.Argument(..., help="Value, written verbatim"),
):
    """Set a variable even if it is already set."""
    writer = get_writer()
    try:
        writer.set(name, value)
        location = writer.locate().location
    except (EnvPermError, ValueError) as e:
        fail(e)
    console.print(f"[green]✓[/green] {name} set in {escape(location)}")


@app.command("check")
def check_command(
    name: str = typer.Argument(..., help="Variable name"),
    value: str = typer.Argument(..., help="Value used if the variable is not set"),
):
    """Set a variable only if it is not set yet."""
    writer = get_writer()
    try:
        written = writer.check_or_set(name, value)
    except (EnvPermError, ValueError) as e:
        fail(e)

    if written:
        console.print(f"[green]✓[/green] {name} set")
    else:
        console.print(f"[dim]{name} is already set, nothing to do[/dim]")


@app.command("append")
def append_command(
    name: str = typer.Argument(..., help="List variable, e.g. PATH"),
    value: str = typer.Argument(..., help="Entry to add"),
    last: bool = typer.Option(False, "--last", help="Search the entry after existing ones"),
):
    """Add an entry to a list variable such as PATH."""
    writer = get_writer()
    try:
        written = writer.append(name, value, front=not last)
    except (EnvPermError, ValueError) as e:
        fail(e)

    if written:
        console.print(f"[green]✓[/green] Added {escape(value)} to {name}")
    else:
        console.print(f"[dim]{escape(value)} is already in {name}, nothing to do[/dim]")


@app.command("get")
def get_command(
    name: str = typer.Argument(..., help="Variable name"),
):
    """Print the persisted value of a variable."""
    try:
        value = get_writer().get(name)
    except (EnvPermError, ValueError) as e:
        fail(e)

    if value is None:
        console.print(f"[yellow]{name} is not set[/yellow]")
        raise typer.Exit(1)
    console.print(value, markup=False, highlight=False)


@app.command("where")
def where_command(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Only show this variable"),
):
    """Show the store in use and the assignments it holds."""
    try:
        store = get_writer().locate()
        assignments = store.read_all()
    except EnvPermError as e:
        fail(e)

    table = Table(title=f"{store.kind.value}: {escape(store.location)}")
    table.add_column("Name", style="cyan")
    table.add_column("Value", style="green")

    for assignment in assignments:
        if name and assignment.name != name:
            continue
        table.add_row(assignment.name, escape(assignment.value))

    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"env_perm v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
