"""Genre storage."""

from typing import Optional

from sqlalchemy import func

from locallibrary.models import Genre
from locallibrary.repositories.base import Repository


class GenreRepository(Repository[Genre]):
    model = Genre
    resource = "genre"
    default_order = ("name",)

    async def find_by_name(self, name: str) -> Optional[Genre]:
        """Case-insensitive exact name match."""
        return await self.find_one(func.lower(Genre.name) == name.lower())
