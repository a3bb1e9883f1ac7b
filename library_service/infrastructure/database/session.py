from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

from ..config.settings import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_size=settings.POSTGRES_POOL_SIZE,
    max_overflow=settings.POSTGRES_MAX_OVERFLOW,
)

local_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase, MappedAsDataclass):
    """Base class for all database models.

    Combines SQLAlchemy's DeclarativeBase with MappedAsDataclass, so every
    model gets a generated ``__init__``/``__repr__``/``__eq__`` built from its
    mapped columns. Columns declared with ``init=False`` (surrogate keys,
    timestamps) are left out of the constructor.

    Example:
        ```python
        class Person(Base):
            __tablename__ = "people"

            id: Mapped[int] = mapped_column(Integer, primary_key=True, init=False)
            name: Mapped[str] = mapped_column(String(255))

        person = Person(name="Alice")
        ```
    """

    pass


async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database session management.

    Each request gets its own session, and with it its own unit of work:
    services commit once at the end of a mutating operation, read-only
    operations never commit. The session is closed when the request ends,
    rolling back anything left uncommitted.

    Yields:
        AsyncSession: A configured async database session.

    Example:
        ```python
        @router.get("/books/{book_id}")
        async def get_book(book_id: int, db: AsyncSession = Depends(async_session)):
            return await BookService().get_book(book_id, db)
        ```
    """
    async_get_db = local_session
    async with async_get_db() as db:
        yield db


async def create_tables() -> None:
    """Create all tables in the database if they don't exist.

    Only tables of models that have been imported are known to the
    metadata, so callers import the model modules first.

    Note:
        This function is idempotent - existing tables are left unchanged.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
