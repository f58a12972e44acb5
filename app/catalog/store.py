"""
In-memory data store for the catalogue API.

``BookStore`` owns the ordered list of ``Book`` records for the life of
the process. Nothing is persisted; a restart brings back the two seed
records. The FastAPI layer obtains the shared instance through
``get_book_store()`` so tests can swap in a fresh store per test.

Every public method takes the store lock, since FastAPI runs plain
``def`` endpoints on a thread pool.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, Dict, List, Optional

from .schemas import Book, BookFields, has_non_finite


logger = logging.getLogger(__name__)

SEED_BOOKS: List[Dict[str, Any]] = [
    {"id": "1", "title": "The Lord of the Rings", "author": "J.R.R. Tolkien", "year": 1954},
    {"id": "2", "title": "Pride and Prejudice", "author": "Jane Austen", "year": 1813},
]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_HEX = re.compile(r"^\s*([+-]?)0[xX]([0-9a-fA-F]*)")

NON_FINITE_MESSAGE = "Numbers must be finite"


class BookNotFound(LookupError):
    """Raised when an id is unknown, or when listing an empty catalogue."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidBookInput(ValueError):
    """Raised when a write body is unusable.

    Either title, author or year is missing on a create or full update,
    or the body carries a NaN/Infinity value. ``fields`` names the
    offending keys.
    """

    def __init__(self, message: str, fields: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or []


def _not_found(book_id: str) -> BookNotFound:
    return BookNotFound(f"Book with id {book_id} not found")


def _parse_leading_int(value: Any) -> Optional[int]:
    """Parse the leading integer of ``value`` the way ``parseInt`` does.

    ``"12"`` -> 12, ``" 7abc"`` -> 7, ``5.9`` -> 5, ``"0x10"`` -> 16,
    ``"abc"`` -> None, ``"0x"`` -> None.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value)
    hex_match = _LEADING_HEX.match(text)
    if hex_match:
        sign, digits = hex_match.groups()
        return int(sign + digits, 16) if digits else None
    m = _LEADING_INT.match(text)
    return int(m.group(1)) if m else None


class BookStore:
    """Thread-safe, insertion-ordered in-memory book collection."""

    def __init__(self, books: Optional[List[Dict[str, Any]]] = None) -> None:
        self._books: List[Book] = [Book.model_validate(b) for b in (books or [])]
        self._lock = threading.Lock()

    @classmethod
    def seeded(cls) -> "BookStore":
        return cls(SEED_BOOKS)

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    # -- id policy ---------------------------------------------------------

    def _next_id(self) -> str:
        # Based on the *last* record, not the largest id. After the last
        # record is deleted this can hand out an id that is already taken.
        if not self._books:
            return "1"
        last = _parse_leading_int(self._books[-1].id)
        if last is None:
            return "NaN"
        return str(last + 1)

    def generate_new_id(self) -> str:
        with self._lock:
            return self._next_id()

    def _index_of(self, book_id: str) -> int:
        for i, book in enumerate(self._books):
            if book.id == book_id:
                return i
        return -1

    # -- reads -------------------------------------------------------------

    def list_books(self) -> List[Book]:
        with self._lock:
            if not self._books:
                raise BookNotFound("No books found")
            return list(self._books)

    def get_book(self, book_id: str) -> Book:
        with self._lock:
            i = self._index_of(book_id)
            if i == -1:
                raise _not_found(book_id)
            return self._books[i]

    # -- writes ------------------------------------------------------------

    def add_book(self, fields: BookFields) -> Book:
        missing = fields.missing_fields()
        if missing:
            raise InvalidBookInput("Title, author, and year are required", missing)
        non_finite = fields.non_finite_fields()
        if non_finite:
            raise InvalidBookInput(NON_FINITE_MESSAGE, non_finite)
        with self._lock:
            book = Book(
                id=self._next_id(),
                title=fields.title,
                author=fields.author,
                year=fields.year,
            )
            self._books.append(book)
        logger.debug("Added book %s", book.id)
        return book

    def replace_book(self, book_id: str, fields: BookFields) -> Book:
        """Full update: overwrite title, author and year.

        Existence is checked before the fields, so an unknown id wins
        over a bad body. Extra keys added by earlier partial updates
        survive.
        """
        with self._lock:
            i = self._index_of(book_id)
            if i == -1:
                raise _not_found(book_id)
            missing = fields.missing_fields()
            if missing:
                raise InvalidBookInput(
                    "Title, author, and year are required for a complete update",
                    missing,
                )
            non_finite = fields.non_finite_fields()
            if non_finite:
                raise InvalidBookInput(NON_FINITE_MESSAGE, non_finite)
            merged = self._books[i].model_dump()
            merged.update(title=fields.title, author=fields.author, year=fields.year)
            self._books[i] = Book.model_validate(merged)
            book = self._books[i]
        logger.debug("Replaced book %s", book_id)
        return book

    def merge_book(self, book_id: str, updates: Dict[str, Any]) -> Book:
        """Partial update: overlay every key of ``updates`` onto the record.

        Unknown keys are added and ``id`` itself may be overwritten.
        """
        with self._lock:
            i = self._index_of(book_id)
            if i == -1:
                raise _not_found(book_id)
            non_finite = [k for k, v in updates.items() if has_non_finite(v)]
            if non_finite:
                raise InvalidBookInput(NON_FINITE_MESSAGE, non_finite)
            merged = self._books[i].model_dump()
            merged.update(updates)
            self._books[i] = Book.model_validate(merged)
            book = self._books[i]
        logger.debug("Merged %d field(s) into book %s", len(updates), book_id)
        return book

    def delete_book(self, book_id: str) -> None:
        with self._lock:
            before = len(self._books)
            self._books = [b for b in self._books if b.id != book_id]
            removed = before - len(self._books)
        if not removed:
            raise _not_found(book_id)
        logger.debug("Deleted book %s", book_id)


# Singleton store shared by all requests
book_store = BookStore.seeded()


def get_book_store() -> BookStore:
    """FastAPI dependency returning the process-wide ``BookStore``."""
    return book_store
