"""
LocalLibrary — Author Service
==============================

What:  CRUD handlers for authors; detail and delete pages list the
       author's books.
"""

from typing import Any, Awaitable, Dict

from locallibrary.database import Database
from locallibrary.models import Author
from locallibrary.repositories import AuthorRepository, BookRepository
from locallibrary.schemas.catalog import AuthorForm
from locallibrary.services.crud import CrudService
from locallibrary.validation import (
    Escape,
    FieldRules,
    IsAlphanumeric,
    MinLength,
    SkipIfEmpty,
    ToDate,
    Trim,
    Validator,
)

author_validator = Validator(
    FieldRules(
        "first_name",
        Trim(),
        MinLength(1, "First name must be specified."),
        Escape(),
        IsAlphanumeric("First name has non-alphanumeric characters."),
    ),
    FieldRules(
        "family_name",
        Trim(),
        MinLength(1, "Family name must be specified."),
        Escape(),
        IsAlphanumeric("Family name has non-alphanumeric characters."),
    ),
    FieldRules("date_of_birth", Trim(), SkipIfEmpty(), ToDate(), message="Invalid date of birth"),
    FieldRules("date_of_death", Trim(), SkipIfEmpty(), ToDate(), message="Invalid date of death"),
)


class AuthorService(CrudService[Author]):
    resource = "author"
    plural = "authors"
    label = "Author"
    repository_class = AuthorRepository
    validator = author_validator
    form_schema = AuthorForm

    def __init__(self, database: Database):
        super().__init__(database)
        self.books = BookRepository(database)

    def dependents(self, entity_id: str) -> Dict[str, Awaitable[Any]]:
        return {"author_books": self.books.find_by_author(entity_id)}
