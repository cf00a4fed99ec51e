"""
LocalLibrary — Genre Model
===========================

What:  ORM model for the `genres` table.
Who:   GenreRepository; Book expands its `genre` set to these rows.
"""

import uuid

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.database import Base
from locallibrary.models.mixins import CatalogEntity


class Genre(CatalogEntity, Base):
    """A genre name such as "Fantasy" or "French Poetry" (3-100 characters)."""

    __tablename__ = "genres"
    url_prefix = "/catalog/genre"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # HTML-escaped on submission, so the stored text can exceed 100 characters
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name='{self.name}')>"
