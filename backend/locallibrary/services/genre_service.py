"""
LocalLibrary — Genre Service
=============================

What:  CRUD handlers for genres. Detail and delete pages list the books in
       the genre; creating a name that already exists (ignoring case)
       redirects to the existing genre.
"""

from typing import Any, Awaitable, Dict, Optional

from locallibrary.database import Database
from locallibrary.models import Genre
from locallibrary.repositories import BookRepository, GenreRepository
from locallibrary.schemas.catalog import GenreForm
from locallibrary.services.crud import CrudService
from locallibrary.validation import Escape, FieldRules, MaxLength, MinLength, Trim, Validator

genre_validator = Validator(
    FieldRules(
        "name",
        Trim(),
        MinLength(3),
        MaxLength(100, "Genre name must be at most 100 characters"),
        Escape(),
        message="Genre name must contain at least 3 characters",
    ),
)


class GenreService(CrudService[Genre]):
    resource = "genre"
    plural = "genres"
    label = "Genre"
    repository_class = GenreRepository
    validator = genre_validator
    form_schema = GenreForm

    def __init__(self, database: Database):
        super().__init__(database)
        self.books = BookRepository(database)

    def dependents(self, entity_id: str) -> Dict[str, Awaitable[Any]]:
        return {"genre_books": self.books.find_by_genre(entity_id)}

    async def find_duplicate(self, record: GenreForm) -> Optional[Genre]:
        return await self.repository.find_by_name(record.name)
