import logging
import sys
from typing import Callable, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from catalog.book import Book
from catalog.errors import InvalidFormatError, NotFoundError, PersistenceError, StateConflictError
from catalog.library import Inventory
from catalog.storage import InventoryStorage
from catalog.ui_helpers import (
    print_book_result,
    print_count_result,
    print_list_result,
    print_stats_result,
    set_output_mode,
    success_message,
    warning_message,
)
from catalog.validators import (
    HEX_ERROR_MESSAGE,
    BookIdValidator,
    TextValidator,
)
from config import settings

logger = logging.getLogger(__name__)

console = Console()

ID_PROMPT_ERROR = "You must pass two hex chars, a dash, and then a number"
NUMBER_PROMPT_ERROR = "Invalid number, please pass a valid positive integer"


def setup_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


class LibraryManager:
    """Holds the single Inventory instance for the configured data file."""

    _instance: Optional[Inventory] = None
    _source: Optional[tuple] = None

    @classmethod
    def get_instance(cls) -> Inventory:
        source = (settings.data_file, settings.persist)
        # Rebuild when the data file changes (e.g. per-test files)
        if cls._instance is None or cls._source != source:
            storage = InventoryStorage(settings.data_file) if settings.persist else None
            cls._instance = Inventory(storage=storage)
            cls._source = source
            logger.debug(f"Inventory loaded (persistent={settings.persist}, file={settings.data_file})")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None
        cls._source = None


# --- Typer CLI ---
app = typer.Typer(help="Library Catalog CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    set_output_mode(output or settings.output_mode)


@app.command("add")
def cli_add(
    prefix: str = typer.Argument(..., help="Two hex characters (0-9a-f)"),
    number: str = typer.Argument(..., help="Non-negative book number"),
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Argument(..., help="Author name"),
):
    """Add a book with id PREFIX-NUMBER."""
    try:
        book_id = BookIdValidator.make_id(prefix, number)
    except InvalidFormatError as e:
        print(f"Error: {e}")
        return
    if not TextValidator.validate_title(title) or not TextValidator.validate_author(author):
        print("Error: Title and author cannot be empty.")
        return

    book = Book(book_id, title, author)
    try:
        LibraryManager.get_instance().add(book)
    except PersistenceError as e:
        print(f"Error: {e}")
        return
    success_message(f"{book.title} added.")


@app.command("checkout")
def cli_checkout(book_id: str = typer.Argument(..., help="Book id, e.g. ab-1")):
    """Check out a book by id."""
    try:
        clean = BookIdValidator.clean_id(book_id)
        LibraryManager.get_instance().checkout(clean)
    except (InvalidFormatError, PersistenceError) as e:
        print(f"Error: {e}")
        return
    except (StateConflictError, NotFoundError) as e:
        warning_message(str(e))
        return
    success_message(f"Checked out {clean}")


@app.command("return")
def cli_return(book_id: str = typer.Argument(..., help="Book id, e.g. ab-1")):
    """Return a checked-out book by id."""
    try:
        clean = BookIdValidator.clean_id(book_id)
        LibraryManager.get_instance().return_book(clean)
    except (InvalidFormatError, PersistenceError) as e:
        print(f"Error: {e}")
        return
    except (StateConflictError, NotFoundError) as e:
        warning_message(str(e))
        return
    success_message(f"Returned {clean}")


@app.command("state")
def cli_state(book_id: str = typer.Argument(..., help="Book id, e.g. ab-1")):
    """Show whether a book is checked out or in stock."""
    try:
        clean = BookIdValidator.clean_id(book_id)
    except InvalidFormatError as e:
        print(f"Error: {e}")
        return
    inventory = LibraryManager.get_instance()
    book = inventory.find_book(clean)
    if book is None:
        warning_message(f"No book with id {clean} found")
        return
    print_book_result(book, inventory.state_of(clean))


@app.command("search")
def cli_search(
    term: str = typer.Argument(..., help="Text to look for in id, title and author"),
    regex: bool = typer.Option(False, "--regex", "-r", help="Treat TERM as a regular expression"),
    all_matches: bool = typer.Option(False, "--all", "-a", help="Show every match instead of the first"),
):
    """Search books by id, title or author (case-insensitive)."""
    inventory = LibraryManager.get_instance()
    try:
        if all_matches:
            books = inventory.search_all(term.strip(), regex=regex)
            print_list_result(books, inventory.state.checked_out)
            return
        book = inventory.search(term.strip(), regex=regex)
    except InvalidFormatError as e:
        print(f"Error: {e}")
        return
    print_book_result(book, inventory.state_of(book.id) if book else None)


@app.command("count")
def cli_count():
    """Show the number of books in the library."""
    print_count_result(LibraryManager.get_instance().count())


@app.command("list")
def cli_list():
    """List all books with their state."""
    inventory = LibraryManager.get_instance()
    print_list_result(inventory.list_books(), inventory.state.checked_out)


@app.command("stats")
def cli_stats():
    """Show library statistics."""
    print_stats_result(LibraryManager.get_instance().get_statistics())


# --- Interactive menu ---
ACTIONS = [
    ("1", "Add a Book"),
    ("2", "Checkout a Book"),
    ("3", "Return a Book"),
    ("4", "Check Book State"),
    ("5", "Search for a Book"),
    ("6", "Count Books"),
    ("7", "Clear Terminal"),
    ("0", "Exit"),
]


def _success(message: str) -> None:
    console.print(f"[green]{escape(message)}[/]")


def _warning(message: str) -> None:
    console.print(f"[magenta]{escape(message)}[/]")


def _error(message: str) -> None:
    console.print(f"[bold red]Error:[/] {escape(message)}")


def _ask(message: str, is_valid: Callable[[str], bool], error_message: str) -> str:
    """Ask until the answer passes ``is_valid``."""
    while True:
        answer = Prompt.ask(message)
        if is_valid(answer):
            return answer
        _warning(error_message)


def _ask_book_id() -> str:
    answer = _ask("Book ID", BookIdValidator.is_book_id, ID_PROMPT_ERROR)
    return BookIdValidator.clean_id(answer)


def add_book(inventory: Inventory) -> None:
    prefix = _ask("Book ID Prefix", lambda s: BookIdValidator.is_hex_prefix(s.strip()), HEX_ERROR_MESSAGE)
    number = _ask("Book ID Number", BookIdValidator.is_non_negative_int, NUMBER_PROMPT_ERROR)
    title = _ask("Book Title", TextValidator.validate_title, "Title cannot be empty")
    author = _ask("Book Author Name", TextValidator.validate_author, "Author cannot be empty")

    book = Book(BookIdValidator.make_id(prefix, number), title, author)
    try:
        inventory.add(book)
    except PersistenceError as e:
        _error(str(e))
        return
    _success(f"{book.title} added.")


def checkout_book(inventory: Inventory) -> None:
    book_id = _ask_book_id()
    try:
        inventory.checkout(book_id)
    except (StateConflictError, NotFoundError) as e:
        _warning(str(e))
        return
    except PersistenceError as e:
        _error(str(e))
        return
    _success(f"Checked out {book_id}")


def return_book(inventory: Inventory) -> None:
    book_id = _ask_book_id()
    try:
        inventory.return_book(book_id)
    except (StateConflictError, NotFoundError) as e:
        _warning(str(e))
        return
    except PersistenceError as e:
        _error(str(e))
        return
    _success(f"Returned {book_id}")


def check_book_state(inventory: Inventory) -> None:
    book_id = _ask_book_id()
    if inventory.find_book(book_id) is None:
        _warning(f"No book with id {book_id} found")
        return
    _success(f"   State: {inventory.state_of(book_id)}")


def search_for_book(inventory: Inventory) -> None:
    term = Prompt.ask("Query").strip()
    book = inventory.search(term)
    if book is None:
        _warning("No book found (searched id, title, and author)")
        return
    _success("Found a book:")
    _success(f"   ID: {book.id}\n   Title: {book.title}\n   Author: {book.author}")
    _success(f"   State: {inventory.state_of(book.id)}")


def count_books(inventory: Inventory) -> None:
    _success(f"Library has {inventory.count()} books")


def render_menu() -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label in ACTIONS:
        table.add_row(f"[reverse]{key}[/]", label)

    console.print(Panel(
        table,
        title=settings.app_name,
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    ))


def run_menu() -> None:
    """Interactive menu loop for the catalog."""
    inventory = LibraryManager.get_instance()
    handlers = {
        "1": add_book,
        "2": checkout_book,
        "3": return_book,
        "4": check_book_state,
        "5": search_for_book,
        "6": count_books,
    }

    console.print(f"\n***\n  Welcome to the {escape(settings.app_name)} CLI App!\n***\n")
    while True:
        render_menu()
        try:
            choice = Prompt.ask(
                "What would you like to do",
                choices=[key for key, _ in ACTIONS],
                default="1",
            ).strip()
            if choice == "0":
                break
            if choice == "7":
                console.clear()
                continue
            handler = handlers.get(choice)
            if handler is None:
                _warning("Invalid choice. Please try again.")
                continue
            handler(inventory)
        except (KeyboardInterrupt, EOFError):
            break
        console.print()

    if inventory.persistent:
        _success("Good bye")
    else:
        _success("Good bye (your library inventory will be purged)")


def cli() -> None:
    setup_logging()
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()


if __name__ == "__main__":
    cli()
