"""Error types surfaced by the bookstore API."""
from typing import List, Optional

from fastapi import status


class BookstoreError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": {"message": self.message, "status": self.status_code}}


class BookValidationError(BookstoreError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["error"]["errors"] = self.errors
        return body


class BookNotFoundError(BookstoreError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, isbn: str):
        super().__init__(f"There is no book with an isbn '{isbn}'")
        self.isbn = isbn


class BookConflictError(BookstoreError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, isbn: str):
        super().__init__(f"A book with isbn '{isbn}' already exists")
        self.isbn = isbn


class StoreUnavailableError(BookstoreError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
