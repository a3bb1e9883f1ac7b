"""Pydantic schemas for book entities."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..common.schemas import TimestampSchema


class BookBase(BaseModel):
    """Base schema for book data."""

    name: Annotated[str, Field(min_length=1, max_length=255, description="Book title")]
    author: Annotated[str, Field(min_length=1, max_length=255, description="Book author")]
    year_of_publication: Annotated[int, Field(ge=0, le=9999, description="Year the book was published")]


class BookCreate(BookBase):
    """Schema for adding a new book. New books are always on the shelf."""

    pass


class BookUpdate(BookBase):
    """Schema for replacing a book's data.

    All fields are required. Lending state is not part of an update: any
    ``owner_id`` or ``taken_at`` in the payload is ignored.
    """

    pass


class BookAssign(BaseModel):
    """Schema for lending a book to a person."""

    person_id: Annotated[int, Field(ge=1, description="ID of the person taking the book")]


class BookRead(TimestampSchema, BookBase):
    """Schema for reading book data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: Optional[int] = Field(default=None, description="ID of the person holding the book, if lent")
    taken_at: Optional[datetime] = Field(default=None, description="When the book was lent out, if lent")
    expired: bool = Field(default=False, description="Whether the book has been held past the loan period")
