"""Conversions between person rows and person transfer objects."""

from typing import Iterable, List, Sequence, Union

from ..book.schemas import BookRead
from .models import Person
from .schemas import PersonCreate, PersonRead, PersonWithBooksRead


def person_to_read(person: Person) -> PersonRead:
    return PersonRead.model_validate(person)


def people_to_read(people: Iterable[Person]) -> List[PersonRead]:
    return [person_to_read(person) for person in people]


def person_with_books_to_read(person: Person, books: Sequence[BookRead]) -> PersonWithBooksRead:
    """Combine a person with the books found for them."""
    return PersonWithBooksRead(**person_to_read(person).model_dump(), books=list(books))


def person_to_entity(person: Union[PersonCreate, PersonRead]) -> Person:
    """Build a (detached) person row from a transfer object, keeping identity when known."""
    entity = Person(name=person.name)

    if isinstance(person, PersonRead):
        entity.id = person.id
        if person.created_at is not None:
            entity.created_at = person.created_at
        if person.updated_at is not None:
            entity.updated_at = person.updated_at

    return entity
