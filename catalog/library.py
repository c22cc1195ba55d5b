import logging
import re
from typing import Any, Callable, Dict, List, Optional

from catalog.book import Book
from catalog.errors import InvalidFormatError, NotFoundError, StateConflictError
from catalog.storage import InventoryState, InventoryStorage

logger = logging.getLogger(__name__)

CHECKED_OUT = "CHECKED OUT"
IN_STOCK = "IN STOCK"


class Inventory:
    """Manages the book records, their loan state and persistence.

    Ids passed to the store are expected to be canonical already (see
    ``validators.clean_id``); the raw operations do no validation of their own.
    When a storage adapter is given, state is restored from it on construction
    and flushed to it synchronously after every mutation.
    """

    def __init__(self, storage: Optional[InventoryStorage] = None, state: Optional[InventoryState] = None) -> None:
        self.storage = storage
        if state is not None:
            self.state = state
        elif storage is not None:
            self.state = storage.restore()
        else:
            self.state = InventoryState()

    @property
    def persistent(self) -> bool:
        return self.storage is not None

    # ------------------------- Core operations ------------------------- #
    def add(self, book: Book) -> None:
        """Append a book. Duplicate ids are not checked."""
        self.state.books.append(book)
        logger.debug(f"Added {book.id}")
        self._flush()

    def count(self) -> int:
        return len(self.state.books)

    def is_checked_out(self, book_id: str) -> bool:
        return book_id in self.state.checked_out

    def checkout_by_id(self, book_id: str) -> None:
        self.state.checked_out.add(book_id)
        logger.debug(f"Marked {book_id} as checked out")
        self._flush()

    def return_by_id(self, book_id: str) -> None:
        self.state.checked_out.discard(book_id)
        logger.debug(f"Marked {book_id} as returned")
        self._flush()

    def search(self, term: str, regex: bool = False) -> Optional[Book]:
        """Return the first book whose id, title or author matches ``term``.

        Matching is a case-insensitive substring test unless ``regex`` is set,
        in which case ``term`` is used as a case-insensitive regular expression.
        """
        matches = self._matcher(term, regex)
        for book in self.state.books:
            if matches(book.id) or matches(book.title) or matches(book.author):
                return book
        return None

    # ------------------------- Lookups ------------------------- #
    def search_all(self, term: str, regex: bool = False) -> List[Book]:
        matches = self._matcher(term, regex)
        return [
            book for book in self.state.books
            if matches(book.id) or matches(book.title) or matches(book.author)
        ]

    def find_book(self, book_id: str) -> Optional[Book]:
        for book in self.state.books:
            if book.id == book_id:
                return book
        return None

    def list_books(self) -> List[Book]:
        return list(self.state.books)

    def state_of(self, book_id: str) -> str:
        return CHECKED_OUT if self.is_checked_out(book_id) else IN_STOCK

    def get_statistics(self) -> Dict[str, Any]:
        total = self.count()
        checked_out = sum(1 for book in self.state.books if book.id in self.state.checked_out)
        return {
            "total_books": total,
            "checked_out": checked_out,
            "in_stock": total - checked_out,
            "unique_authors": len({book.author.lower() for book in self.state.books}),
        }

    # ------------------------- Guarded transitions ------------------------- #
    def checkout(self, book_id: str) -> Book:
        """Check out an existing, in-stock book."""
        if self.is_checked_out(book_id):
            raise StateConflictError("Already checked out")
        book = self.find_book(book_id)
        if book is None:
            raise NotFoundError(f"Could not find {book_id}")
        self.checkout_by_id(book_id)
        return book

    def return_book(self, book_id: str) -> Book:
        """Return an existing, checked-out book."""
        if not self.is_checked_out(book_id):
            raise StateConflictError("Already in stock")
        book = self.find_book(book_id)
        if book is None:
            raise NotFoundError(f"Could not find {book_id}")
        self.return_by_id(book_id)
        return book

    # ------------------------- Utilities ------------------------- #
    def _flush(self) -> None:
        if self.storage is not None:
            self.storage.save(self.state)

    @staticmethod
    def _matcher(term: str, regex: bool) -> Callable[[str], bool]:
        if regex:
            try:
                pattern = re.compile(term, re.IGNORECASE)
            except re.error as e:
                raise InvalidFormatError(f"Invalid search pattern: {e}") from e
            return lambda text: pattern.search(text) is not None
        needle = term.casefold()
        return lambda text: needle in text.casefold()
