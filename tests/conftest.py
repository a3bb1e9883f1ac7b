"""Test configuration and fixtures for the library lending service."""

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from library_service.infrastructure.database.models import utc_now
from library_service.infrastructure.database.session import Base, async_session
from library_service.infrastructure.logging import configure_logging, configure_testing_logging
from library_service.interfaces.main import app
from library_service.modules.book.models import Book
from library_service.modules.person.models import Person

SQLITE_ASYNC_PREFIX = "sqlite+aiosqlite:///"


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Silence application logging for the whole run."""
    configure_logging()
    configure_testing_logging()


@pytest_asyncio.fixture(scope="function")
async def test_db_engine(tmp_path):
    """Create a SQLAlchemy engine on a fresh SQLite file."""
    engine = create_async_engine(f"{SQLITE_ASYNC_PREFIX}{tmp_path / 'library.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_db_engine):
    """Create a test database session."""
    session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_db_engine):
    """Create a test client where every request gets its own session on the test database."""
    app.dependency_overrides = {}

    test_session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def test_person(db_session: AsyncSession):
    """Create a test person."""
    person = Person(name="Alice Liddell")
    db_session.add(person)
    await db_session.commit()
    return {"id": person.id, "name": person.name}


@pytest_asyncio.fixture
async def test_person_2(db_session: AsyncSession):
    """Create a second test person."""
    person = Person(name="Bob Dylan")
    db_session.add(person)
    await db_session.commit()
    return {"id": person.id, "name": person.name}


@pytest_asyncio.fixture
async def test_book(db_session: AsyncSession):
    """Create a book that is on the shelf."""
    book = Book(name="Dune", author="Frank Herbert", year_of_publication=1965)
    db_session.add(book)
    await db_session.commit()
    return {
        "id": book.id,
        "name": book.name,
        "author": book.author,
        "year_of_publication": book.year_of_publication,
    }


@pytest_asyncio.fixture
async def lent_book(db_session: AsyncSession, test_person: dict):
    """Create a book lent to the test person two days ago."""
    book = Book(
        name="Alice's Adventures in Wonderland",
        author="Lewis Carroll",
        year_of_publication=1865,
        owner_id=test_person["id"],
        taken_at=utc_now() - timedelta(days=2),
    )
    db_session.add(book)
    await db_session.commit()
    return {
        "id": book.id,
        "name": book.name,
        "owner_id": book.owner_id,
        "taken_at": book.taken_at,
    }


@pytest_asyncio.fixture
async def overdue_book(db_session: AsyncSession, test_person: dict):
    """Create a book lent to the test person thirty days ago."""
    book = Book(
        name="Through the Looking-Glass",
        author="Lewis Carroll",
        year_of_publication=1871,
        owner_id=test_person["id"],
        taken_at=utc_now() - timedelta(days=30),
    )
    db_session.add(book)
    await db_session.commit()
    return {"id": book.id, "name": book.name, "owner_id": book.owner_id}


@pytest_asyncio.fixture
async def catalogue(db_session: AsyncSession):
    """Create a small shelf of books with clashing years, in insertion order."""
    books = [
        Book(name="Foundation", author="Isaac Asimov", year_of_publication=1951),
        Book(name="Dune Messiah", author="Frank Herbert", year_of_publication=1969),
        Book(name="Dune", author="Frank Herbert", year_of_publication=1965),
        Book(name="Children of Dune", author="Frank Herbert", year_of_publication=1976),
        Book(name="Ubik", author="Philip K. Dick", year_of_publication=1969),
    ]
    db_session.add_all(books)
    await db_session.commit()
    return [{"id": book.id, "name": book.name, "year_of_publication": book.year_of_publication} for book in books]
