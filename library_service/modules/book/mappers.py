"""Conversions between book rows and book transfer objects.

All functions here are pure: they never touch the database or the clock.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, Iterable, List, Mapping, Union

from .models import Book
from .schemas import BookCreate, BookRead


def book_to_read(book: Book) -> BookRead:
    """Convert a stored book into its transfer object."""
    return BookRead.model_validate(book)


def book_row_to_read(row: Mapping[str, Any]) -> BookRead:
    """Convert a selected column row (keyed by column name) into its transfer object."""
    return BookRead.model_validate(dict(row))


def books_to_read(books: Iterable[Book]) -> List[BookRead]:
    return [book_to_read(book) for book in books]


def book_to_entity(book: Union[BookCreate, BookRead]) -> Book:
    """Build a (detached) book row from a transfer object.

    A ``BookRead`` keeps its identity, lending state and timestamps, so
    ``book_to_read(book_to_entity(dto))`` gives back the stored fields of
    ``dto`` unchanged. The derived ``expired`` flag is not stored.
    """
    entity = Book(
        name=book.name,
        author=book.author,
        year_of_publication=book.year_of_publication,
    )

    if isinstance(book, BookRead):
        entity.id = book.id
        entity.owner_id = book.owner_id
        entity.taken_at = book.taken_at
        if book.created_at is not None:
            entity.created_at = book.created_at
        if book.updated_at is not None:
            entity.updated_at = book.updated_at

    return entity


def with_expiry(book: BookRead, loan_period: timedelta, now: datetime) -> BookRead:
    """Return a copy of ``book`` with ``expired`` computed at ``now``.

    A book is expired when it has been lent for longer than ``loan_period``.
    Books on the shelf are never expired. Naive ``taken_at`` values (SQLite
    drops the offset) are read as UTC.
    """
    if book.taken_at is None:
        return book.model_copy(update={"expired": False})

    taken_at = book.taken_at
    if taken_at.tzinfo is None:
        taken_at = taken_at.replace(tzinfo=UTC)

    return book.model_copy(update={"expired": now - taken_at > loan_period})
