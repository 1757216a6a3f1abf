"""Book endpoints."""
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from bookstore.errors import BookNotFoundError, BookValidationError
from bookstore.models.book_model import (
    Book,
    BookListResponse,
    BookResponse,
    MessageResponse,
)
from bookstore.services.book_service import BookRepository
from bookstore.services.validation import ValidationMode, validate
from bookstore.utils.dependencies import get_book_repository

router = APIRouter()


@router.get("", response_model=BookListResponse)
async def list_books(repository: BookRepository = Depends(get_book_repository)):
    """List every book."""
    books = await repository.list_all()
    return BookListResponse(books=[Book.from_db_record(book) for book in books])


@router.get("/{isbn}", response_model=BookResponse)
async def get_book(isbn: str, repository: BookRepository = Depends(get_book_repository)):
    """Get book details by isbn."""
    book = await repository.get_by_isbn(isbn)
    if book is None:
        raise BookNotFoundError(isbn)
    return BookResponse(book=Book.from_db_record(book))


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    payload: Any = Body(...),
    repository: BookRepository = Depends(get_book_repository),
):
    """Create a book. The payload must carry every field, isbn included."""
    result = validate(payload, ValidationMode.CREATE)
    if not result.ok:
        raise BookValidationError(result.errors)
    book = await repository.create(result.book)
    return BookResponse(book=Book.from_db_record(book))


@router.put("/{isbn}", response_model=BookResponse)
async def update_book(
    isbn: str,
    payload: Any = Body(...),
    repository: BookRepository = Depends(get_book_repository),
):
    """Replace every field of a book except its isbn.

    An isbn in the body is ignored; the one in the path wins.
    """
    result = validate(payload, ValidationMode.UPDATE)
    if not result.ok:
        raise BookValidationError(result.errors)
    book = await repository.update(isbn, result.book)
    if book is None:
        raise BookNotFoundError(isbn)
    return BookResponse(book=Book.from_db_record(book))


@router.delete("/{isbn}", response_model=MessageResponse)
async def delete_book(isbn: str, repository: BookRepository = Depends(get_book_repository)):
    if not await repository.delete(isbn):
        raise BookNotFoundError(isbn)
    return MessageResponse(message="Book deleted")
