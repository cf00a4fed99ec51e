"""
LocalLibrary — Book Model
==========================

What:  ORM model for the `books` table and the `book_genres` id-pair table.
Who:   BookRepository for CRUD; BookInstance expands its `book` reference here.

Reference Storage:
    Books store `author_id` and their genre ids the way a document would:
    plain id columns with no foreign key constraints. Deleting an author or
    a genre leaves the ids behind; expanding a reference only joins rows
    that still exist, so dangling ids disappear on read.

    Both relationships are `lazy="raise"`: templates render detached objects,
    so every reference a view needs must be expanded by the repository.
"""

import uuid
from typing import List, Optional

from sqlalchemy import Column, Table, Text, Uuid
from sqlalchemy.orm import Mapped, foreign, mapped_column, relationship

from locallibrary.database import Base
from locallibrary.models.author import Author
from locallibrary.models.genre import Genre
from locallibrary.models.mixins import CatalogEntity


# ── Book ↔ Genre ids ──────────────────────────────────────────────────────
book_genres = Table(
    "book_genres",
    Base.metadata,
    Column("book_id", Uuid, primary_key=True),
    Column("genre_id", Uuid, primary_key=True, index=True),
)


class Book(CatalogEntity, Base):
    """
    A catalog title (not a physical copy; see BookInstance).

    References:
        author:  exactly one Author, stored as `author_id`
        genre:   set of Genre, stored in `book_genres`
    """

    __tablename__ = "books"
    url_prefix = "/catalog/book"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    isbn: Mapped[str] = mapped_column(Text, nullable=False)

    # ── References ────────────────────────────────────────────────────────
    author_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    author: Mapped[Optional[Author]] = relationship(
        Author,
        primaryjoin=lambda: foreign(Book.author_id) == Author.id,
        viewonly=True,
        lazy="raise",
    )

    genre: Mapped[List[Genre]] = relationship(
        Genre,
        secondary=book_genres,
        primaryjoin=lambda: Book.id == foreign(book_genres.c.book_id),
        secondaryjoin=lambda: Genre.id == foreign(book_genres.c.genre_id),
        order_by=lambda: Genre.name,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"
