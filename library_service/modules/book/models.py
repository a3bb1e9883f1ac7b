"""SQLAlchemy models for book entities."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Book(Base, TimestampMixin):
    """A book in the library.

    A book is either on the shelf (no owner, no taken_at) or lent out
    (both set). ``owner_id`` and ``taken_at`` only ever change together.
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    name: Mapped[str] = mapped_column(String(255), index=True)
    author: Mapped[str] = mapped_column(String(255))
    year_of_publication: Mapped[int] = mapped_column(Integer)
    owner_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("people.id", ondelete="SET NULL"), index=True, default=None
    )
    taken_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=None)

    @property
    def is_lent(self) -> bool:
        return self.owner_id is not None
