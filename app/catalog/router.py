"""
Route definitions for the catalogue API.

Endpoints:
- GET    /books       : list every book (404 when the catalogue is empty)
- GET    /books/{id}  : get one book
- POST   /books       : create a book (title, author and year required)
- PUT    /books/{id}  : full update (title, author and year required)
- PATCH  /books/{id}  : partial update, overlays any keys sent
- DELETE /books/{id}  : delete a book

Every response is a JSON envelope ``{status, message, data?}``. Domain
errors raised by the store are turned into ``fail`` envelopes by the
exception handlers registered in ``app.main``.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from .schemas import BookFields, Envelope
from .store import BookStore, get_book_store

router = APIRouter(prefix="/books", tags=["books"])


def _success(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    extra = {"data": data} if data is not None else {}
    envelope = Envelope(status="success", message=message, **extra)
    return JSONResponse(status_code=status_code, content=envelope.to_content())


@router.get("")
def list_books(store: BookStore = Depends(get_book_store)) -> JSONResponse:
    books = store.list_books()
    return _success(
        "Successfully retrieved all books",
        [b.model_dump() for b in books],
    )


@router.get("/{book_id}")
def get_book(book_id: str, store: BookStore = Depends(get_book_store)) -> JSONResponse:
    book = store.get_book(book_id)
    return _success(f"Successfully retrieved book with id {book_id}", book.model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
def add_book(
    fields: Optional[BookFields] = Body(default=None),
    store: BookStore = Depends(get_book_store),
) -> JSONResponse:
    book = store.add_book(fields or BookFields())
    return _success(
        "Book added successfully",
        book.model_dump(),
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{book_id}")
def replace_book(
    book_id: str,
    fields: Optional[BookFields] = Body(default=None),
    store: BookStore = Depends(get_book_store),
) -> JSONResponse:
    book = store.replace_book(book_id, fields or BookFields())
    return _success(
        f"Book with id {book_id} updated successfully (full update)",
        book.model_dump(),
    )


@router.patch("/{book_id}")
def merge_book(
    book_id: str,
    updates: Optional[Dict[str, Any]] = Body(default=None),
    store: BookStore = Depends(get_book_store),
) -> JSONResponse:
    book = store.merge_book(book_id, updates or {})
    return _success(
        f"Book with id {book_id} updated successfully (partial update)",
        book.model_dump(),
    )


@router.delete("/{book_id}")
def delete_book(book_id: str, store: BookStore = Depends(get_book_store)) -> JSONResponse:
    store.delete_book(book_id)
    return _success(f"Book with id {book_id} deleted successfully")
