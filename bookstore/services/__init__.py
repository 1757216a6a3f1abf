"""Services package."""
from . import book_service, validation

__all__ = ["book_service", "validation"]
