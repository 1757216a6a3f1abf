"""Book models."""
from typing import Annotated, List

from pydantic import BaseModel, Field

INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1

# PostgreSQL TEXT cannot hold NUL characters
StoredText = Annotated[str, Field(pattern=r"^[^\x00]*$")]


class BookFields(BaseModel):
    """Every book column except the isbn."""

    amazon_url: StoredText
    author: StoredText
    language: StoredText
    pages: int = Field(gt=0, le=INT4_MAX)
    publisher: StoredText
    title: StoredText
    year: int = Field(ge=INT4_MIN, le=INT4_MAX)

    model_config = {"strict": True, "extra": "forbid"}


class BookCreate(BookFields):
    isbn: StoredText = Field(min_length=1)


class BookUpdate(BookFields):
    pass


class Book(BaseModel):
    isbn: str
    amazon_url: str
    author: str
    language: str
    pages: int
    publisher: str
    title: str
    year: int

    model_config = {"from_attributes": True}

    @classmethod
    def from_db_record(cls, record) -> "Book":
        """Create Book from a database record or mapping."""
        return cls(**dict(record))


class BookResponse(BaseModel):
    book: Book


class BookListResponse(BaseModel):
    books: List[Book]


class MessageResponse(BaseModel):
    message: str
