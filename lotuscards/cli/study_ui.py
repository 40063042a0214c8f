"""
Interactive terminal study loop and view-model rendering.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lotuscards.constants import DELETE_DECK_PROMPT, NO_DECKS_PLACEHOLDER
from lotuscards.controller import StudyController
from lotuscards.render import ViewModel

logger = logging.getLogger(__name__)
console = Console()

HELP_TEXT = (
    "[dim]Enter/f flip · n next · p prev · s shuffle · "
    "/term search (/ clears) · q quit[/dim]"
)


def delete_prompt(name: str) -> str:
    return DELETE_DECK_PROMPT.format(name=name)


def render_decks(view: ViewModel, cons: Optional[Console] = None) -> None:
    """Print the deck list with the active deck marked."""
    cons = cons or console
    if not view.has_decks:
        cons.print(f"[yellow]{NO_DECKS_PLACEHOLDER}[/yellow]")
        return

    table = Table(title="Decks")
    table.add_column("", style="green")
    table.add_column("Name", style="cyan")
    table.add_column("Cards", style="magenta")
    table.add_column("Id", style="dim")
    for entry in view.deck_entries:
        table.add_row(
            "*" if entry.is_active else "",
            escape(entry.name),
            str(entry.card_count),
            entry.id,
        )
    cons.print(table)


def render_card(view: ViewModel, cons: Optional[Console] = None) -> None:
    """
    Print the current card: the front, or the back once flipped.

    Parameters:
        view (ViewModel): Frame to draw.
        cons (Optional[Console]): Console to print to; module console by default.
    """
    cons = cons or console
    cons.rule(f"[bold]{escape(view.deck_title)}[/bold]")
    if view.is_flipped:
        cons.print(Panel(escape(view.card_back), title="Back", border_style="blue"))
    else:
        cons.print(
            Panel(escape(view.card_front), title="Front", border_style="green")
        )
    status = view.position_label
    if view.search_term.strip():
        status += f"  [yellow]search: {escape(view.search_term)}[/yellow]"
    cons.print(status)
    if view.save_warning:
        cons.print(
            f"[bold yellow]Warning: changes not saved: "
            f"{escape(view.save_warning)}[/bold yellow]"
        )


def _handle_command(controller: StudyController, command: str) -> Optional[ViewModel]:
    """
    Translate one line of input into a controller call.

    Returns:
        Optional[ViewModel]: The new frame, or None when the user quits.
    """
    if command in ("q", "quit"):
        return None
    if command in ("", "f"):
        return controller.flip()
    if command == "n":
        return controller.next_card()
    if command == "p":
        return controller.prev_card()
    if command == "s":
        return controller.shuffle()
    if command.startswith("/"):
        # A submitted line is complete input: apply it without waiting.
        controller.input_search(command[1:])
        return controller.flush_search()
    console.print(f"[bold red]Unknown command: {escape(command)}[/bold red]")
    return controller.view()


def start_study_flow(controller: StudyController) -> None:
    """
    Run the study loop until the user quits.

    Args:
        controller: An opened StudyController.
    """
    console.print("[bold cyan]Starting study session...[/bold cyan]")
    console.print(HELP_TEXT)
    view = controller.view()
    while view is not None:
        render_card(view)
        try:
            command = console.input("[bold]> [/bold]").strip()
        except EOFError:
            break
        view = _handle_command(controller, command)
    console.print("[bold cyan]Study session finished. Well done![/bold cyan]")
