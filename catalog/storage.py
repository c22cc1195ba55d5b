"""
Disk persistence for the inventory.

The file holds base64 (ASCII) of the UTF-8 JSON document
``{"books": [{"id", "title", "author"}, ...], "checkedOutBooks": [id, ...]}``.
Saves replace the whole file through a temporary file in the same directory.
"""

import base64
import binascii
import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set, Union

from catalog.book import Book
from catalog.errors import PersistenceError

logger = logging.getLogger(__name__)

BOOK_FIELDS = ("id", "title", "author")


@dataclass
class InventoryState:
    books: List[Book] = field(default_factory=list)
    checked_out: Set[str] = field(default_factory=set)


def encode_state(state: InventoryState) -> str:
    payload = {
        "books": [book.to_dict() for book in state.books],
        "checkedOutBooks": sorted(state.checked_out),
    }
    raw = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_state(text: str) -> InventoryState:
    try:
        raw = base64.b64decode(text.strip(), validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PersistenceError(f"Inventory data could not be decoded: {e}") from e

    if not isinstance(data, dict):
        raise PersistenceError("Inventory data must be a JSON object.")

    books_raw = data.get("books", [])
    checked_raw = data.get("checkedOutBooks", [])
    if not isinstance(books_raw, list) or not isinstance(checked_raw, list):
        raise PersistenceError("'books' and 'checkedOutBooks' must be lists.")

    for item in books_raw:
        if not isinstance(item, dict):
            raise PersistenceError(f"Malformed book record: {item!r}")
        for key in BOOK_FIELDS:
            if not isinstance(item.get(key), str):
                raise PersistenceError(f"Malformed book record, '{key}' must be a string: {item!r}")
    books = [Book.from_dict(item) for item in books_raw]

    if not all(isinstance(book_id, str) for book_id in checked_raw):
        raise PersistenceError("Checked-out ids must be strings.")

    return InventoryState(books=books, checked_out=set(checked_raw))


class InventoryStorage:
    """Reads and writes the inventory file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def save(self, state: InventoryState) -> None:
        """Write the full state to disk.

        Raises PersistenceError if the file cannot be written; the target file
        is either the previous version or the new one, never a partial write.
        """
        encoded = encode_state(state)
        directory = self.path.parent
        temp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="ascii") as f:
                f.write(encoded)
            os.chmod(temp_path, self._file_mode())
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            logger.error(f"Could not save inventory to {self.path}: {e}")
            raise PersistenceError(f"Could not save inventory to {self.path}: {e}") from e
        logger.debug(f"Saved {len(state.books)} books to {self.path}")

    def _file_mode(self) -> int:
        # mkstemp creates 0600 files; keep the existing mode or follow the umask
        if self.path.exists():
            return stat.S_IMODE(self.path.stat().st_mode)
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask

    def restore(self) -> InventoryState:
        """Load the state from disk, falling back to an empty inventory."""
        if not self.path.exists():
            logger.info(f"No inventory file at {self.path}, starting empty")
            return InventoryState()
        try:
            text = self.path.read_text(encoding="ascii")
            state = decode_state(text)
        except (OSError, UnicodeDecodeError, PersistenceError) as e:
            logger.warning(f"Could not restore inventory from {self.path}: {e}. Starting empty.")
            return InventoryState()
        logger.info(f"Restored {len(state.books)} books from {self.path}")
        return state
