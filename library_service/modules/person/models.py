"""SQLAlchemy models for person entities."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Person(Base, TimestampMixin):
    """A borrower.

    The books a person currently holds are not mapped here: they are looked
    up by querying books whose ``owner_id`` is this person's id, so deleting
    a person never cascades into the books table.
    """

    __tablename__ = "people"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    name: Mapped[str] = mapped_column(String(255), index=True)
