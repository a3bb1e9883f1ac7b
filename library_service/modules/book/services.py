"""Book lending service."""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import Select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import get_settings
from ...infrastructure.database.models import utc_now
from ...infrastructure.logging import get_logger
from ..common.exceptions import BookAlreadyLentError, BookNotFoundError, IncorrectParametersError
from ..person.services import PeopleService
from .crud import book_crud
from .mappers import book_row_to_read, book_to_entity, book_to_read, with_expiry
from .models import Book
from .schemas import BookCreate, BookRead, BookUpdate

logger = get_logger(__name__)


class BookService:
    """Service for the book catalogue and the lending workflow.

    A book moves between two states: on the shelf (no owner) and lent
    (owner and taken_at set). ``assign_book`` is the only way onto loan and
    ``return_book`` the only way back. Every mutating method runs as one
    unit of work on the given session and commits once at the end; read
    methods never commit.

    Books handed back to callers carry an ``expired`` flag, computed from
    the configured loan period at the time of the call.
    """

    def __init__(self, loan_period: Optional[timedelta] = None):
        self.people_service = PeopleService()
        if loan_period is None:
            loan_period = timedelta(days=get_settings().LIBRARY_LOAN_PERIOD_DAYS)
        self.loan_period = loan_period

    def _to_read(self, book: Book, now: Optional[datetime] = None) -> BookRead:
        return with_expiry(book_to_read(book), self.loan_period, now or utc_now())

    async def _fetch(self, stmt: Select, db: AsyncSession) -> List[BookRead]:
        result = await db.execute(stmt)
        now = utc_now()
        return [with_expiry(book_row_to_read(row), self.loan_period, now) for row in result.mappings()]

    @staticmethod
    async def _ordered(sort_by_year: bool) -> Select:
        if sort_by_year:
            return await book_crud.select(sort_columns=["year_of_publication", "name"])
        return await book_crud.select(sort_columns="id")

    async def get_books(self, db: AsyncSession, sort_by_year: bool = False) -> List[BookRead]:
        """Get every book.

        Args:
            db: Database session
            sort_by_year: Order by (year_of_publication, name) instead of by id
        """
        stmt = await self._ordered(sort_by_year)
        return await self._fetch(stmt, db)

    async def get_books_page(
        self,
        db: AsyncSession,
        page: int,
        page_size: int,
        sort_by_year: bool = False,
    ) -> List[BookRead]:
        """Get one page of books.

        Pages are zero-indexed. ``page == 0`` together with ``page_size == 0``
        means paging was not requested, and every book is returned.

        Args:
            db: Database session
            page: Page number, starting at 0
            page_size: Number of books per page
            sort_by_year: Order by (year_of_publication, name) instead of by id

        Raises:
            IncorrectParametersError: For negative values, or a zero page size
                on any page but the first
        """
        if page == 0 and page_size == 0:
            return await self.get_books(db, sort_by_year)

        if page < 0 or page_size <= 0:
            logger.warning("Rejected book page request", extra={"page": page, "page_size": page_size})
        if page < 0 or page_size < 0:
            raise IncorrectParametersError(f"Page ({page}) and page size ({page_size}) must not be negative")
        if page_size == 0:
            raise IncorrectParametersError(f"Page size must be positive to request page {page}")

        stmt = await self._ordered(sort_by_year)
        stmt = stmt.offset(page * page_size).limit(page_size)

        return await self._fetch(stmt, db)

    async def get_book_entity(self, book_id: int, db: AsyncSession, for_update: bool = False) -> Book:
        """Load the stored book row.

        Args:
            book_id: Book ID to load
            db: Database session
            for_update: Lock the row (SELECT ... FOR UPDATE) until the
                transaction ends

        Raises:
            BookNotFoundError: If no book has this id
        """
        if for_update:
            book = await db.get(Book, book_id, with_for_update=True)
        else:
            book = await db.get(Book, book_id)

        if book is None:
            raise BookNotFoundError(book_id)
        return book

    async def get_book(self, book_id: int, db: AsyncSession) -> BookRead:
        """Get a book by id.

        Raises:
            BookNotFoundError: If no book has this id
        """
        return self._to_read(await self.get_book_entity(book_id, db))

    async def get_books_by_owner(self, owner_id: int, db: AsyncSession) -> List[BookRead]:
        """Get the books currently lent to a person, oldest loan first."""
        stmt = await book_crud.select(sort_columns=["taken_at", "id"], owner_id=owner_id)
        return await self._fetch(stmt, db)

    async def search_books(self, prefix: str, db: AsyncSession) -> List[BookRead]:
        """Find books whose name starts with ``prefix``.

        An empty prefix is not a search for everything: it is rejected.

        Raises:
            BookNotFoundError: If ``prefix`` is empty
        """
        if prefix == "":
            logger.warning("Rejected book search with an empty prefix")
            raise BookNotFoundError(message="Book search needs a non-empty name prefix")

        # Compared as a plain substring, so the match is case-sensitive on every
        # backend and LIKE wildcards in the prefix carry no meaning.
        stmt = await book_crud.select(sort_columns=["name", "id"])
        stmt = stmt.where(func.substr(Book.name, 1, len(prefix)) == prefix)

        return await self._fetch(stmt, db)

    async def create_book(self, book_data: BookCreate, db: AsyncSession) -> int:
        """Add a book to the shelf.

        Returns:
            The id assigned by the database
        """
        book = book_to_entity(book_data)
        db.add(book)
        await db.commit()

        logger.info("Book created", extra={"book_id": book.id})
        return book.id

    async def update_book(self, book_id: int, update_data: BookUpdate, db: AsyncSession) -> BookRead:
        """Replace a book's name, author and year.

        The lending state stays as stored: an edit to a lent book leaves its
        owner and taken_at untouched.

        Raises:
            BookNotFoundError: If no book has this id. Updates never create rows.
        """
        book = await self.get_book_entity(book_id, db, for_update=True)
        book.name = update_data.name
        book.author = update_data.author
        book.year_of_publication = update_data.year_of_publication
        book.touch()
        await db.commit()

        logger.info("Book updated", extra={"book_id": book_id})
        return self._to_read(book)

    async def delete_book(self, book_id: int, db: AsyncSession) -> None:
        """Delete a book.

        Raises:
            BookNotFoundError: If no book has this id
        """
        if not await book_crud.exists(db=db, id=book_id):
            raise BookNotFoundError(book_id)

        await book_crud.delete(db=db, id=book_id)
        logger.info("Book deleted", extra={"book_id": book_id})

    async def assign_book(self, book_id: int, person_id: int, db: AsyncSession) -> BookRead:
        """Lend a book to a person.

        The book row is locked for the rest of the transaction, so two
        concurrent assignments of the same book are serialized and the
        second one sees the book as lent.

        Raises:
            BookNotFoundError: If no book has this id
            PersonNotFoundError: If no person has this id
            BookAlreadyLentError: If the book is already lent to someone
        """
        book = await self.get_book_entity(book_id, db, for_update=True)
        person = await self.people_service.get_person_entity(person_id, db)

        if book.is_lent:
            logger.warning(
                "Rejected assignment of a lent book",
                extra={"book_id": book_id, "person_id": person_id, "owner_id": book.owner_id},
            )
            raise BookAlreadyLentError(book_id, book.owner_id)

        book.owner_id = person.id
        book.taken_at = utc_now()
        book.touch()
        await db.commit()

        logger.info("Book assigned", extra={"book_id": book_id, "person_id": person_id})
        return self._to_read(book)

    async def return_book(self, book_id: int, db: AsyncSession) -> BookRead:
        """Put a book back on the shelf.

        Returning a book that is already on the shelf changes nothing.

        Raises:
            BookNotFoundError: If no book has this id
        """
        book = await self.get_book_entity(book_id, db, for_update=True)
        previous_owner = book.owner_id

        book.owner_id = None
        book.taken_at = None
        book.touch()
        await db.commit()

        logger.info("Book returned", extra={"book_id": book_id, "person_id": previous_owner})
        return book_to_read(book).model_copy(update={"expired": False})
