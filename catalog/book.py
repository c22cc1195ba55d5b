from __future__ import annotations


class Book:
    """Represents a single book record in the catalog."""

    def __init__(self, book_id: str, title: str, author: str) -> None:
        self.id = book_id
        self.title = title.strip()
        self.author = author.strip()

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ID: {self.id})"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return (self.id, self.title, self.author) == (other.id, other.title, other.author)

    def __hash__(self) -> int:
        return hash((self.id, self.title, self.author))

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(book_id=data["id"], title=data["title"], author=data["author"])
