"""FastAPI dependencies."""
from fastapi import Request

from bookstore.services.book_service import BookRepository


def get_book_repository(request: Request) -> BookRepository:
    """Bind a repository to the pool opened in the application lifespan."""
    return BookRepository(request.app.state.pool)
