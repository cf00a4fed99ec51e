"""
LocalLibrary — BookInstance Model
==================================

What:  ORM model for `book_instances`, the physical copies of a Book.
Who:   BookInstanceRepository; BookService lists the copies of a book.

Lifecycle:
    Created, updated and deleted independently of its Book. Deleting the
    Book leaves its copies orphaned (no cascade, no constraint).
"""

import enum
import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, Enum, Text, Uuid
from sqlalchemy.orm import Mapped, foreign, mapped_column, relationship

from locallibrary.database import Base
from locallibrary.models.book import Book
from locallibrary.models.mixins import CatalogEntity, format_date


class InstanceStatus(str, enum.Enum):
    """Circulation status of a copy."""

    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class BookInstance(CatalogEntity, Base):
    """
    A physical copy of a Book.

    Derived values:
        due_back_formatted:  medium date text, e.g. "Oct 19, 2026"
        url:                 /catalog/bookinstance/<id>
    """

    __tablename__ = "book_instances"
    url_prefix = "/catalog/bookinstance"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    book_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    book: Mapped[Optional[Book]] = relationship(
        Book,
        primaryjoin=lambda: foreign(BookInstance.book_id) == Book.id,
        viewonly=True,
        lazy="raise",
    )

    imprint: Mapped[str] = mapped_column(Text, nullable=False)

    # Stored as VARCHAR holding the enum value ("Available", ...)
    status: Mapped[InstanceStatus] = mapped_column(
        Enum(
            InstanceStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=InstanceStatus.MAINTENANCE,
        index=True,
    )

    due_back: Mapped[Optional[date]] = mapped_column(Date, nullable=True, default=date.today)

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    def __repr__(self) -> str:
        return f"<BookInstance(id={self.id}, status='{self.status}')>"
