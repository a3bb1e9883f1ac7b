"""Tests for book service."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from library_service.modules.book.schemas import BookCreate, BookUpdate
from library_service.modules.book.services import BookService
from library_service.modules.common.exceptions import (
    BookAlreadyLentError,
    BookNotFoundError,
    IncorrectParametersError,
    PersonNotFoundError,
)


@pytest.fixture
def book_service():
    """Create book service instance."""
    return BookService()


@pytest.mark.asyncio
async def test_create_book(book_service: BookService, db_session: AsyncSession):
    """Test that a created book can be found with the same data, on the shelf."""
    book_data = BookCreate(name="Neuromancer", author="William Gibson", year_of_publication=1984)

    book_id = await book_service.create_book(book_data, db_session)
    result = await book_service.get_book(book_id, db_session)

    assert result.id == book_id
    assert result.name == "Neuromancer"
    assert result.author == "William Gibson"
    assert result.year_of_publication == 1984
    assert result.owner_id is None
    assert result.taken_at is None
    assert result.expired is False


@pytest.mark.asyncio
async def test_create_books_get_distinct_ids(book_service: BookService, db_session: AsyncSession):
    """Test that ids are assigned by the database and never reused within a run."""
    book_data = BookCreate(name="Neuromancer", author="William Gibson", year_of_publication=1984)

    first_id = await book_service.create_book(book_data, db_session)
    second_id = await book_service.create_book(book_data, db_session)

    assert first_id != second_id


@pytest.mark.asyncio
async def test_get_book_not_found(book_service: BookService, db_session: AsyncSession):
    """Test getting a non-existent book."""
    with pytest.raises(BookNotFoundError) as exc_info:
        await book_service.get_book(999, db_session)

    assert exc_info.value.book_id == 999


@pytest.mark.asyncio
async def test_get_books_ordered_by_id(book_service: BookService, db_session: AsyncSession, catalogue: list):
    """Test that the unsorted listing comes back in id order."""
    result = await book_service.get_books(db_session)

    assert [book.id for book in result] == sorted(book["id"] for book in catalogue)


@pytest.mark.asyncio
async def test_get_books_sorted_by_year_then_name(
    book_service: BookService, db_session: AsyncSession, catalogue: list
):
    """Test sorting by year of publication, with the name breaking ties."""
    result = await book_service.get_books(db_session, sort_by_year=True)

    assert [book.name for book in result] == [
        "Foundation",
        "Dune",
        "Dune Messiah",
        "Ubik",
        "Children of Dune",
    ]


@pytest.mark.asyncio
async def test_get_books_empty(book_service: BookService, db_session: AsyncSession):
    """Test listing when the shelf is empty."""
    assert await book_service.get_books(db_session) == []


@pytest.mark.asyncio
async def test_get_books_page(book_service: BookService, db_session: AsyncSession, catalogue: list):
    """Test that pages split the ordered listing without gaps or overlap."""
    all_books = await book_service.get_books(db_session, sort_by_year=True)

    first_page = await book_service.get_books_page(db_session, 0, 2, sort_by_year=True)
    second_page = await book_service.get_books_page(db_session, 1, 2, sort_by_year=True)
    third_page = await book_service.get_books_page(db_session, 2, 2, sort_by_year=True)

    assert len(first_page) == 2
    assert len(second_page) == 2
    assert len(third_page) == 1
    assert first_page + second_page + third_page == all_books


@pytest.mark.asyncio
async def test_get_books_page_past_the_end(book_service: BookService, db_session: AsyncSession, catalogue: list):
    """Test that a page past the last book is empty, not an error."""
    result = await book_service.get_books_page(db_session, 10, 2)

    assert result == []


@pytest.mark.asyncio
async def test_get_books_page_zero_zero_lists_everything(
    book_service: BookService, db_session: AsyncSession, catalogue: list
):
    """Test that page 0 with page size 0 means no paging."""
    paged = await book_service.get_books_page(db_session, 0, 0)
    everything = await book_service.get_books(db_session)

    assert paged == everything
    assert len(paged) == len(catalogue)


@pytest.mark.asyncio
@pytest.mark.parametrize("page, page_size", [(-1, 2), (0, -1), (-1, -1), (1, 0)])
async def test_get_books_page_incorrect_parameters(
    book_service: BookService, db_session: AsyncSession, page: int, page_size: int
):
    """Test that negative values and an empty page size on a later page are rejected."""
    with pytest.raises(IncorrectParametersError):
        await book_service.get_books_page(db_session, page, page_size)


@pytest.mark.asyncio
async def test_search_books_by_prefix(book_service: BookService, db_session: AsyncSession, catalogue: list):
    """Test that search matches names starting with the prefix, not containing it."""
    result = await book_service.search_books("Dune", db_session)

    assert sorted(book.name for book in result) == ["Dune", "Dune Messiah"]


@pytest.mark.asyncio
async def test_search_books_no_match(book_service: BookService, db_session: AsyncSession, catalogue: list):
    """Test that a prefix without matches gives an empty list."""
    assert await book_service.search_books("Zen", db_session) == []


@pytest.mark.asyncio
async def test_search_books_empty_prefix(book_service: BookService, db_session: AsyncSession, catalogue: list):
    """Test that an empty prefix is rejected instead of listing everything."""
    with pytest.raises(BookNotFoundError):
        await book_service.search_books("", db_session)


@pytest.mark.asyncio
async def test_search_books_is_case_sensitive(book_service: BookService, db_session: AsyncSession, catalogue: list):
    """Test that a lowercase prefix does not match a capitalized name."""
    assert await book_service.search_books("dune", db_session) == []
    assert await book_service.search_books("DUNE", db_session) == []
    assert [book.name for book in await book_service.search_books("Dune M", db_session)] == ["Dune Messiah"]


@pytest.mark.asyncio
async def test_search_books_wildcards_are_literal(book_service: BookService, db_session: AsyncSession):
    """Test that LIKE wildcards in the prefix match only themselves."""
    await book_service.create_book(
        BookCreate(name="100% Pure", author="Someone", year_of_publication=2001), db_session
    )
    await book_service.create_book(
        BookCreate(name="1000 Years", author="Someone Else", year_of_publication=2002), db_session
    )

    result = await book_service.search_books("100%", db_session)

    assert [book.name for book in result] == ["100% Pure"]


@pytest.mark.asyncio
async def test_update_book(book_service: BookService, db_session: AsyncSession, test_book: dict):
    """Test updating a book's data."""
    update_data = BookUpdate(name="Dune (Deluxe Edition)", author="Frank Herbert", year_of_publication=2005)

    result = await book_service.update_book(test_book["id"], update_data, db_session)

    assert result.id == test_book["id"]
    assert result.name == "Dune (Deluxe Edition)"
    assert result.year_of_publication == 2005

    stored = await book_service.get_book(test_book["id"], db_session)
    assert stored.name == "Dune (Deluxe Edition)"


@pytest.mark.asyncio
async def test_update_book_keeps_lending_state(
    book_service: BookService, db_session: AsyncSession, lent_book: dict, test_person: dict
):
    """Test that editing a lent book leaves it with its holder."""
    update_data = BookUpdate(name="Alice in Wonderland", author="Lewis Carroll", year_of_publication=1865)

    result = await book_service.update_book(lent_book["id"], update_data, db_session)

    assert result.name == "Alice in Wonderland"
    assert result.owner_id == test_person["id"]
    assert result.taken_at is not None


@pytest.mark.asyncio
async def test_update_book_not_found(book_service: BookService, db_session: AsyncSession):
    """Test that updating a non-existent book does not create it."""
    update_data = BookUpdate(name="Ghost", author="Nobody", year_of_publication=2000)

    with pytest.raises(BookNotFoundError):
        await book_service.update_book(999, update_data, db_session)

    assert await book_service.get_books(db_session) == []


@pytest.mark.asyncio
async def test_delete_book(book_service: BookService, db_session: AsyncSession, test_book: dict):
    """Test deleting a book."""
    await book_service.delete_book(test_book["id"], db_session)

    with pytest.raises(BookNotFoundError):
        await book_service.get_book(test_book["id"], db_session)


@pytest.mark.asyncio
async def test_delete_book_not_found(book_service: BookService, db_session: AsyncSession):
    """Test deleting a non-existent book."""
    with pytest.raises(BookNotFoundError):
        await book_service.delete_book(999, db_session)


@pytest.mark.asyncio
async def test_assign_book(book_service: BookService, db_session: AsyncSession, test_book: dict, test_person: dict):
    """Test lending a book sets owner and taken_at together."""
    result = await book_service.assign_book(test_book["id"], test_person["id"], db_session)

    assert result.owner_id == test_person["id"]
    assert result.taken_at is not None
    assert result.expired is False

    stored = await book_service.get_book(test_book["id"], db_session)
    assert stored.owner_id == test_person["id"]
    assert stored.taken_at is not None


@pytest.mark.asyncio
async def test_assign_book_already_lent(
    book_service: BookService, db_session: AsyncSession, lent_book: dict, test_person: dict, test_person_2: dict
):
    """Test that a lent book cannot be handed to someone else."""
    with pytest.raises(BookAlreadyLentError) as exc_info:
        await book_service.assign_book(lent_book["id"], test_person_2["id"], db_session)

    assert exc_info.value.owner_id == test_person["id"]

    stored = await book_service.get_book(lent_book["id"], db_session)
    assert stored.owner_id == test_person["id"]


@pytest.mark.asyncio
async def test_assign_book_not_found(book_service: BookService, db_session: AsyncSession, test_person: dict):
    """Test lending a non-existent book."""
    with pytest.raises(BookNotFoundError):
        await book_service.assign_book(999, test_person["id"], db_session)


@pytest.mark.asyncio
async def test_assign_book_person_not_found(book_service: BookService, db_session: AsyncSession, test_book: dict):
    """Test lending a book to a non-existent person leaves it on the shelf."""
    with pytest.raises(PersonNotFoundError):
        await book_service.assign_book(test_book["id"], 999, db_session)

    stored = await book_service.get_book(test_book["id"], db_session)
    assert stored.owner_id is None
    assert stored.taken_at is None


@pytest.mark.asyncio
async def test_return_book(book_service: BookService, db_session: AsyncSession, lent_book: dict):
    """Test that returning clears owner and taken_at together."""
    result = await book_service.return_book(lent_book["id"], db_session)

    assert result.owner_id is None
    assert result.taken_at is None
    assert result.expired is False

    stored = await book_service.get_book(lent_book["id"], db_session)
    assert stored.owner_id is None
    assert stored.taken_at is None


@pytest.mark.asyncio
async def test_return_book_on_shelf(book_service: BookService, db_session: AsyncSession, test_book: dict):
    """Test that returning a book that is not lent succeeds and changes nothing."""
    result = await book_service.return_book(test_book["id"], db_session)

    assert result.id == test_book["id"]
    assert result.owner_id is None
    assert result.taken_at is None


@pytest.mark.asyncio
async def test_return_book_not_found(book_service: BookService, db_session: AsyncSession):
    """Test returning a non-existent book."""
    with pytest.raises(BookNotFoundError):
        await book_service.return_book(999, db_session)


@pytest.mark.asyncio
async def test_book_can_be_lent_again_after_return(
    book_service: BookService, db_session: AsyncSession, lent_book: dict, test_person_2: dict
):
    """Test the full lend, return, lend cycle."""
    await book_service.return_book(lent_book["id"], db_session)
    result = await book_service.assign_book(lent_book["id"], test_person_2["id"], db_session)

    assert result.owner_id == test_person_2["id"]


@pytest.mark.asyncio
async def test_expired_flag(
    book_service: BookService, db_session: AsyncSession, lent_book: dict, overdue_book: dict, test_book: dict
):
    """Test that only books held past the loan period are flagged."""
    assert (await book_service.get_book(overdue_book["id"], db_session)).expired is True
    assert (await book_service.get_book(lent_book["id"], db_session)).expired is False
    assert (await book_service.get_book(test_book["id"], db_session)).expired is False


@pytest.mark.asyncio
async def test_expired_flag_uses_configured_loan_period(db_session: AsyncSession, lent_book: dict):
    """Test that a shorter loan period turns a recent loan into an expired one."""
    strict_service = BookService(loan_period=timedelta(days=1))

    result = await strict_service.get_book(lent_book["id"], db_session)

    assert result.expired is True


@pytest.mark.asyncio
async def test_get_books_by_owner(
    book_service: BookService,
    db_session: AsyncSession,
    lent_book: dict,
    overdue_book: dict,
    test_book: dict,
    test_person: dict,
):
    """Test that a person's books are listed oldest loan first."""
    result = await book_service.get_books_by_owner(test_person["id"], db_session)

    assert [book.id for book in result] == [overdue_book["id"], lent_book["id"]]
