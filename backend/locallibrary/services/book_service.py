"""
LocalLibrary — Book Service
============================

What:  CRUD handlers for books.
How:   `CrudService` with the book's references wired in:
       - list expands each book's author (title/author projection)
       - detail/delete join the book's copies
       - the form lists all authors and genres and marks the chosen ones
"""

from typing import Any, Awaitable, Dict, Mapping

from locallibrary.database import Database
from locallibrary.models import Book
from locallibrary.repositories import (
    AuthorRepository,
    BookInstanceRepository,
    BookRepository,
    GenreRepository,
)
from locallibrary.schemas.catalog import BookForm
from locallibrary.services.crud import CrudService
from locallibrary.validation import Escape, FieldRules, MinLength, ToList, Trim, Validator

book_validator = Validator(
    FieldRules("title", Trim(), MinLength(1), Escape(), message="Title must not be empty."),
    FieldRules("author", Trim(), MinLength(1), Escape(), message="Author must not be empty."),
    FieldRules("summary", Trim(), MinLength(1), Escape(), message="Summary must not be empty."),
    FieldRules("isbn", Trim(), MinLength(1), Escape(), message="ISBN must not be empty"),
    FieldRules("genre", ToList(), Escape()),
)


class BookService(CrudService[Book]):
    resource = "book"
    plural = "books"
    label = "Book"
    repository_class = BookRepository
    validator = book_validator
    form_schema = BookForm
    list_expand = ("author",)
    list_only = ("title", "author_id")
    detail_expand = ("author", "genre")

    def __init__(self, database: Database):
        super().__init__(database)
        self.authors = AuthorRepository(database)
        self.genres = GenreRepository(database)
        self.instances = BookInstanceRepository(database)

    def detail_title(self, entity: Book) -> str:
        return entity.title

    def dependents(self, entity_id: str) -> Dict[str, Awaitable[Any]]:
        return {"book_instances": self.instances.find_by_book(entity_id)}

    def form_choices(self) -> Dict[str, Awaitable[Any]]:
        return {
            "authors": self.authors.find_all(),
            "genres": self.genres.find_all(),
        }

    def selection_from_values(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "selected_author": values.get("author") or "",
            "selected_genres": set(values.get("genre") or []),
        }

    def selection_from_entity(self, entity: Book) -> Dict[str, Any]:
        return {
            "selected_author": str(entity.author_id),
            "selected_genres": {str(genre.id) for genre in entity.genre},
        }
