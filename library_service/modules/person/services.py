"""People management service."""

from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..book.models import Book
from ..common.exceptions import PersonNotFoundError
from .crud import person_crud
from .mappers import people_to_read, person_to_entity, person_to_read, person_with_books_to_read
from .models import Person
from .schemas import PersonCreate, PersonRead, PersonUpdate, PersonWithBooksRead

logger = get_logger(__name__)


class PeopleService:
    """Service for managing the people who borrow books.

    Lookups by id raise ``PersonNotFoundError`` instead of returning None,
    so callers (including the lending workflow) can rely on getting a
    person back.
    """

    async def get_people(self, db: AsyncSession) -> List[PersonRead]:
        """Get every person, ordered by id."""
        people = await db.scalars(select(Person).order_by(Person.id))
        return people_to_read(people)

    async def get_person_entity(self, person_id: int, db: AsyncSession) -> Person:
        """Load the stored person row.

        Raises:
            PersonNotFoundError: If no person has this id
        """
        person = await db.get(Person, person_id)
        if person is None:
            raise PersonNotFoundError(person_id)
        return person

    async def get_person(self, person_id: int, db: AsyncSession) -> PersonRead:
        """Get a person by id.

        Raises:
            PersonNotFoundError: If no person has this id
        """
        return person_to_read(await self.get_person_entity(person_id, db))

    async def get_person_with_books(self, person_id: int, db: AsyncSession) -> PersonWithBooksRead:
        """Get a person together with the books they currently hold.

        The book list is queried from the books table (``owner_id`` equal to
        the person's id); nothing is stored on the person itself.
        """
        from ..book.services import BookService

        person = await self.get_person_entity(person_id, db)
        books = await BookService().get_books_by_owner(person_id, db)

        return person_with_books_to_read(person, books)

    async def find_by_name(self, name: str, db: AsyncSession) -> List[PersonRead]:
        """Get all people whose name is exactly ``name``."""
        people = await db.scalars(select(Person).where(Person.name == name).order_by(Person.id))
        return people_to_read(people)

    async def create_person(self, person_data: PersonCreate, db: AsyncSession) -> int:
        """Register a new person.

        Returns:
            The id assigned by the database
        """
        person = person_to_entity(person_data)
        db.add(person)
        await db.commit()

        logger.info("Person created", extra={"person_id": person.id})
        return person.id

    async def update_person(self, person_id: int, update_data: PersonUpdate, db: AsyncSession) -> PersonRead:
        """Replace a person's data.

        Raises:
            PersonNotFoundError: If no person has this id. Updates never create rows.
        """
        person = await self.get_person_entity(person_id, db)
        person.name = update_data.name
        person.touch()
        await db.commit()

        logger.info("Person updated", extra={"person_id": person_id})
        return person_to_read(person)

    async def delete_person(self, person_id: int, db: AsyncSession) -> None:
        """Delete a person.

        Books the person holds go back on the shelf in the same transaction,
        keeping owner and taken_at of every book either both set or both empty.

        Raises:
            PersonNotFoundError: If no person has this id
        """
        if not await person_crud.exists(db=db, id=person_id):
            raise PersonNotFoundError(person_id)

        shelved = await db.execute(
            update(Book).where(Book.owner_id == person_id).values(owner_id=None, taken_at=None)
        )
        await person_crud.delete(db=db, id=person_id, commit=False)
        await db.commit()

        logger.info("Person deleted", extra={"person_id": person_id, "books_returned": shelved.rowcount})
