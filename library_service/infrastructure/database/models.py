from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, MappedAsDataclass, mapped_column


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class TimestampMixin(MappedAsDataclass):
    """Mixin for adding created_at and updated_at timestamp columns.

    Both timestamps are timezone-aware and stored in UTC. They are excluded
    from dataclass initialization (init=False) so they cannot be set by
    accident when a model is constructed.

    ``updated_at`` is refreshed by the services whenever they modify a row;
    there is no database trigger behind it.

    Example:
        ```python
        class Book(Base, TimestampMixin):
            __tablename__ = "books"
            name: Mapped[str] = mapped_column(String(255))

        book = Book(name="Dune")
        # book.created_at and book.updated_at are set on construction
        ```
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=utc_now,
        nullable=False,
        init=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default_factory=utc_now,
        nullable=True,
        init=False,
    )

    def touch(self) -> None:
        """Mark the row as modified now."""
        self.updated_at = utc_now()
