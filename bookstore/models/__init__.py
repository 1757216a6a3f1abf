"""Pydantic models for API payloads and responses."""
from .book_model import (
    Book,
    BookCreate,
    BookListResponse,
    BookResponse,
    BookUpdate,
    MessageResponse,
)
