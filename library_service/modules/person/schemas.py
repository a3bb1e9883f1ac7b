"""Pydantic schemas for person entities."""

from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

from ..book.schemas import BookRead
from ..common.schemas import TimestampSchema


class PersonBase(BaseModel):
    """Base schema for person data."""

    name: Annotated[str, Field(min_length=1, max_length=255, description="Full name of the borrower")]


class PersonCreate(PersonBase):
    """Schema for registering a new person."""

    pass


class PersonUpdate(PersonBase):
    """Schema for replacing a person's data. All fields are required."""

    pass


class PersonRead(TimestampSchema, PersonBase):
    """Schema for reading person data."""

    model_config = ConfigDict(from_attributes=True)

    id: int


class PersonWithBooksRead(PersonRead):
    """Person together with the books they currently hold."""

    books: List[BookRead] = Field(default_factory=list, description="Books currently lent to this person")
