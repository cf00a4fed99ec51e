"""
Book storage.

Form records carry `author` as an id string and `genre` as a list of id
strings. `_assign` maps them onto `author_id` and the `book_genres` rows,
keeping only genre ids that resolve to existing genres.
"""

import uuid
from typing import Any, List, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from locallibrary.models import Book, Genre, book_genres
from locallibrary.repositories.base import Repository, parse_id


class BookRepository(Repository[Book]):
    model = Book
    resource = "book"
    default_order = ("title",)

    async def _assign(self, session: AsyncSession, entity: Book, values: Mapping[str, Any]) -> None:
        values = dict(values)
        if "author" in values:
            entity.author_id = parse_id(values.pop("author"))
        if "genre" in values:
            genre_ids = [parse_id(value) for value in values.pop("genre") or []]
            genres = []
            if genre_ids:
                result = await session.scalars(select(Genre).where(Genre.id.in_(genre_ids)))
                genres = list(result.all())
            entity.genre = genres
        await super()._assign(session, entity, values)

    def _load_for_update(self) -> list:
        return [selectinload(Book.genre)]

    async def _delete_dependent_rows(self, session: AsyncSession, pk: uuid.UUID) -> None:
        await session.execute(delete(book_genres).where(book_genres.c.book_id == pk))

    async def find_by_author(self, author_id: Any) -> List[Book]:
        """Books written by the author, title and summary only."""
        return await self.find_all(
            Book.author_id == parse_id(author_id),
            only=("title", "summary"),
        )

    async def find_by_genre(self, genre_id: Any) -> List[Book]:
        """Books filed under the genre, title and summary only."""
        in_genre = select(book_genres.c.book_id).where(
            book_genres.c.genre_id == parse_id(genre_id)
        )
        return await self.find_all(Book.id.in_(in_genre), only=("title", "summary"))
