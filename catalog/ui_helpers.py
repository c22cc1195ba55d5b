import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from catalog.book import Book
from catalog.library import CHECKED_OUT, IN_STOCK

OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()
_output_mode = "plain"


def set_output_mode(mode: str) -> None:
    global _output_mode
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        _output_mode = mode
    # Unknown values are ignored; the current mode stays in effect


def get_output_mode() -> str:
    return _output_mode


def success_message(message: str) -> None:
    if get_output_mode() == "rich":
        _console.print(f"[green]{escape(message)}[/]")
    else:
        print(message)


def warning_message(message: str) -> None:
    if get_output_mode() == "rich":
        _console.print(f"[magenta]{escape(message)}[/]")
    else:
        print(message)


def print_book_result(book: Optional[Book], state: Optional[str] = None) -> None:
    """Print a single book with its loan state.
    - plain: 'Found a book:' followed by ID/Title/Author/State lines
    - json: JSON object, or null when nothing was found
    - rich: Panel
    """
    mode = get_output_mode()

    if mode == "json":
        payload = None if book is None else {**book.to_dict(), "state": state}
        print(json.dumps(payload, ensure_ascii=False))
        return

    if book is None:
        warning_message("No book found (searched id, title, and author)")
        return

    if mode == "rich":
        content = (
            f"[bold]ID:[/] {escape(book.id)}\n"
            f"[bold]Title:[/] {escape(book.title)}\n"
            f"[bold]Author:[/] {escape(book.author)}\n"
            f"[bold]State:[/] {state}"
        )
        _console.print(Panel.fit(content, title="Found a book", border_style="green"))
    else:
        print("Found a book:")
        print(f"   ID: {book.id}")
        print(f"   Title: {book.title}")
        print(f"   Author: {book.author}")
        print(f"   State: {state}")


def print_count_result(count: int) -> None:
    if get_output_mode() == "json":
        print(json.dumps({"count": count}))
    else:
        success_message(f"Library has {count} books")


def print_list_result(books: List[Book], checked_out: Optional[set] = None) -> None:
    """Print a list of books in the current output mode."""
    mode = get_output_mode()
    checked_out = checked_out or set()

    def _state(book: Book) -> str:
        return CHECKED_OUT if book.id in checked_out else IN_STOCK

    if mode == "json":
        payload = [{**b.to_dict(), "state": _state(b)} for b in books]
        print(json.dumps(payload, ensure_ascii=False))
        return

    if not books:
        print("No books in library.")
        return

    if mode == "rich":
        table = Table(title="Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("State", style="white")
        for b in books:
            table.add_row(escape(b.id), escape(b.title), escape(b.author), _state(b))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author} [{_state(b)}]")


def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {stats.get('total_books', 0)}\n"
            f"[bold]Checked Out:[/] {stats.get('checked_out', 0)}\n"
            f"[bold]In Stock:[/] {stats.get('in_stock', 0)}\n"
            f"[bold]Unique Authors:[/] {stats.get('unique_authors', 0)}"
        )
        _console.print(Panel.fit(content, title="Stats", border_style="blue"))
    else:
        print(f"Total Books: {stats.get('total_books', 0)}")
        print(f"Checked Out: {stats.get('checked_out', 0)}")
        print(f"In Stock: {stats.get('in_stock', 0)}")
        print(f"Unique Authors: {stats.get('unique_authors', 0)}")
