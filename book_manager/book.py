from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List


class BookParseError(ValueError):
    """Raised when a server payload cannot be read as book records."""
    pass


@dataclass(frozen=True)
class BookRecord:
    """A single book held by the remote service, keyed by ISBN."""
    isbn: str
    title: str
    author: str

    def to_dict(self) -> dict:
        return {
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
        }

    @staticmethod
    def from_dict(data: Any) -> "BookRecord":
        if not isinstance(data, dict):
            raise BookParseError(f"Expected a book object, got {type(data).__name__}")

        missing = [key for key in ("isbn", "title", "author") if key not in data]
        if missing:
            raise BookParseError(f"Book object is missing field(s): {', '.join(missing)}")

        # Numeric ISBNs are common in hand-written fixtures and some backends
        return BookRecord(
            isbn=str(data["isbn"]),
            title=str(data["title"]),
            author=str(data["author"]),
        )


def parse_book_list(payload: Any) -> List[BookRecord]:
    """Parse a JSON list payload into records, keeping server order."""
    if not isinstance(payload, list):
        raise BookParseError(f"Expected a list of books, got {type(payload).__name__}")
    return [BookRecord.from_dict(item) for item in payload]
