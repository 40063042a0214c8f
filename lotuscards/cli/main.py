"""
CLI entry point for lotuscards.
"""

# Standard library imports
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

# Third-party imports
import typer
from rich.console import Console
from rich.markup import escape

# Local application imports
from lotuscards.cli.study_ui import (
    delete_prompt,
    render_card,
    render_decks,
    start_study_flow,
)
from lotuscards.config import get_settings
from lotuscards.constants import NO_ACTIVE_DECK_MESSAGE
from lotuscards.controller import StudyController
from lotuscards.db import KeyValueStore
from lotuscards.exceptions import DeckNotFoundError, StorageError
from lotuscards.persistence import PersistenceAdapter


console = Console()

app = typer.Typer(
    name="lotuscards",
    help="Lotuscards: study flashcard decks from the terminal.",
    add_completion=False,
    rich_markup_mode="markdown",
)


# ---------------------------------------------------------------------------
# Helpers for resolving the store and opening a controller
# ---------------------------------------------------------------------------


_db_option = typer.Option(  # noqa: B008
    None,
    "--db",
    help="Path to the DuckDB store file. Falls back to LOTUSCARDS_DB, "
    "then LOTUSCARDS_DB_PATH, then ~/.lotuscards/lotuscards.db.",
    envvar="LOTUSCARDS_DB",
)


@app.callback()
def _configure(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug output to stderr."
    ),
):
    """Lotuscards: study flashcard decks from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _resolve_db_path(db: Optional[Path]) -> Path:
    """Resolve the store path from the CLI flag or settings."""
    if db is not None:
        return db
    return get_settings().db_path


@contextmanager
def _open_controller(db: Optional[Path]) -> Iterator[StudyController]:
    """
    Open the store, load (or seed) the document and yield a controller.
    The store is closed on exit.

    Raises:
        typer.Exit: With code 1 if the store cannot be opened.
    """
    settings = get_settings()
    db_path = _resolve_db_path(db)
    try:
        with KeyValueStore(db_path) as store:
            adapter = PersistenceAdapter(store, storage_key=settings.storage_key)
            yield StudyController.open(
                adapter, debounce_ms=settings.search_debounce_ms
            )
    except StorageError as e:
        console.print(f"[bold red]Storage Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _report_save_warning(controller: StudyController) -> None:
    error = controller.store.last_save_error
    if error is not None:
        console.print(
            f"[bold yellow]Warning: changes could not be saved: "
            f"{escape(str(error))}[/bold yellow]"
        )


# ---------------------------------------------------------------------------
# Deck commands
# ---------------------------------------------------------------------------


@app.command()
def decks(db: Optional[Path] = _db_option):
    """List all decks; the active deck is marked with *."""
    with _open_controller(db) as controller:
        render_decks(controller.view(), console)


@app.command("new-deck")
def new_deck(
    name: str = typer.Argument(..., help="Name of the new deck."),  # noqa: B008
    db: Optional[Path] = _db_option,
):
    """Create a deck and make it the active deck."""
    with _open_controller(db) as controller:
        before = len(controller.document.decks)
        view = controller.create_deck(name)
        if len(controller.document.decks) == before:
            console.print("[bold red]Error: deck name must not be empty.[/bold red]")
            raise typer.Exit(code=1)
        console.print(
            f"Created deck [bold cyan]{escape(view.deck_title)}[/bold cyan]."
        )
        _report_save_warning(controller)


@app.command("rename-deck")
def rename_deck(
    name: str = typer.Argument(..., help="New name for the active deck."),  # noqa: B008
    db: Optional[Path] = _db_option,
):
    """Rename the active deck."""
    with _open_controller(db) as controller:
        deck = controller.store.active_deck()
        if deck is None:
            console.print(f"[bold red]{NO_ACTIVE_DECK_MESSAGE}[/bold red]")
            raise typer.Exit(code=1)
        if not name.strip():
            console.print("[bold red]Error: deck name must not be empty.[/bold red]")
            raise typer.Exit(code=1)
        view = controller.rename_deck(name)
        console.print(
            f"Renamed deck to [bold cyan]{escape(view.deck_title)}[/bold cyan]."
        )
        _report_save_warning(controller)


@app.command("delete-deck")
def delete_deck(
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Bypass confirmation prompt."
    ),
    db: Optional[Path] = _db_option,
):
    """Delete the active deck and all of its cards."""
    with _open_controller(db) as controller:
        deck = controller.store.active_deck()
        if deck is None:
            console.print(f"[bold red]{NO_ACTIVE_DECK_MESSAGE}[/bold red]")
            raise typer.Exit(code=1)

        def confirm(target) -> bool:
            return yes or typer.confirm(delete_prompt(target.name))

        before = len(controller.document.decks)
        controller.delete_deck(confirm)
        if len(controller.document.decks) == before:
            console.print("Delete operation cancelled.")
            raise typer.Exit()
        console.print(f"Deleted deck [bold]{escape(deck.name)}[/bold].")
        _report_save_warning(controller)


@app.command()
def use(
    deck: str = typer.Argument(..., help="Deck id or name."),  # noqa: B008
    db: Optional[Path] = _db_option,
):
    """Make a deck the active deck."""
    with _open_controller(db) as controller:
        try:
            target = controller.store.require_deck(deck)
        except DeckNotFoundError as e:
            console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
            raise typer.Exit(code=1) from e
        view = controller.select_deck(target.id)
        console.print(
            f"Active deck: [bold cyan]{escape(view.deck_title)}[/bold cyan]"
        )
        _report_save_warning(controller)


# ---------------------------------------------------------------------------
# Card commands
# ---------------------------------------------------------------------------


@app.command("add-card")
def add_card(
    front: str = typer.Argument(..., help="Front (prompt) text."),  # noqa: B008
    back: str = typer.Argument(..., help="Back (answer) text."),  # noqa: B008
    db: Optional[Path] = _db_option,
):
    """Add a card to the active deck."""
    with _open_controller(db) as controller:
        if controller.store.active_deck() is None:
            console.print(f"[bold red]{NO_ACTIVE_DECK_MESSAGE}[/bold red]")
            raise typer.Exit(code=1)
        if not front.strip() or not back.strip():
            console.print(
                "[bold red]Error: front and back must not be empty.[/bold red]"
            )
            raise typer.Exit(code=1)
        view = controller.create_card(front, back)
        console.print(
            f"Added card to [bold cyan]{escape(view.deck_title)}[/bold cyan] "
            f"({view.session_size} cards)."
        )
        _report_save_warning(controller)


@app.command()
def show(db: Optional[Path] = _db_option):
    """Show the first card of the active deck."""
    with _open_controller(db) as controller:
        render_card(controller.view(), console)


@app.command()
def study(db: Optional[Path] = _db_option):
    """Start an interactive study session on the active deck."""
    with _open_controller(db) as controller:
        start_study_flow(controller)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """
    Run the CLI application.

    If an unexpected exception occurs, print a bold red error message to the console and exit the process with status code 1.
    """
    try:
        app()
    except Exception as e:
        console.print(f"[bold red]UNEXPECTED ERROR: {escape(str(e))}[/bold red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
