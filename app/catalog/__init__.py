"""
Catalog package for the book catalog API.

This package holds the schemas, the in-memory ``BookStore`` and the
route definitions for the ``/books`` CRUD endpoints. All state lives in
process memory and is reset to the two seed books on restart.
"""

from .router import router as catalog_router  # noqa: F401
from .store import BookNotFound, BookStore, InvalidBookInput, get_book_store  # noqa: F401
