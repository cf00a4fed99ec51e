"""
LocalLibrary — Author Model
============================

What:  ORM model for the `authors` table.
Who:   AuthorRepository for CRUD; Book expands its `author` reference to it.

Authors are referenced by books through `books.author_id`; there is no stored
back-reference. "Books by this author" is a query, not a relationship.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.database import Base
from locallibrary.models.mixins import CatalogEntity, format_date


class Author(CatalogEntity, Base):
    """
    A book author.

    Derived values:
        name:      "<family_name>, <first_name>", empty if either is missing
        lifespan:  "<birth> - <death>" in medium date format
        url:       /catalog/author/<id>
    """

    __tablename__ = "authors"
    url_prefix = "/catalog/author"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ── Names ─────────────────────────────────────────────────────────────
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    family_name: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    # ── Dates (both optional) ─────────────────────────────────────────────
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    @property
    def name(self) -> str:
        if not self.first_name or not self.family_name:
            return ""
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self) -> str:
        birth = format_date(self.date_of_birth)
        death = format_date(self.date_of_death)
        if not birth and not death:
            return ""
        return f"{birth} - {death}"

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.name}')>"
