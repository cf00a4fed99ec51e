"""
LocalLibrary — BookInstance Service
====================================

What:  CRUD handlers for physical copies. The form offers every book
       (titles only) and preselects the copy's book. A submitted book id
       must name an existing book, otherwise the form is shown again.
"""

from datetime import date
from typing import Any, Awaitable, Dict, Mapping

from locallibrary.database import Database
from locallibrary.models import BookInstance, InstanceStatus
from locallibrary.repositories import BookInstanceRepository, BookRepository
from locallibrary.schemas.catalog import BookInstanceForm
from locallibrary.services.crud import CrudService
from locallibrary.validation import (
    Escape,
    FieldError,
    FieldRules,
    MinLength,
    OneOf,
    SkipIfEmpty,
    ToDate,
    Trim,
    ValidationResult,
    Validator,
)

bookinstance_validator = Validator(
    FieldRules("book", Trim(), MinLength(1), Escape(), message="Book must be specified"),
    FieldRules("imprint", Trim(), MinLength(1), Escape(), message="Imprint must be specified"),
    FieldRules("status", Escape(), OneOf(InstanceStatus.values()), message="Invalid status"),
    FieldRules("due_back", Trim(), SkipIfEmpty(), ToDate(), message="Invalid date"),
)


class BookInstanceService(CrudService[BookInstance]):
    resource = "bookinstance"
    plural = "bookinstances"
    label = "BookInstance"
    repository_class = BookInstanceRepository
    validator = bookinstance_validator
    form_schema = BookInstanceForm
    list_expand = ("book",)
    detail_expand = ("book",)

    def __init__(self, database: Database):
        super().__init__(database)
        self.books = BookRepository(database)

    @property
    def list_title(self) -> str:
        return "Book Instance List"

    def detail_title(self, entity: BookInstance) -> str:
        title = entity.book.title if entity.book is not None else ""
        return f"Copy: {title}"

    def sort_list(self, items: list) -> list:
        return sorted(
            items,
            key=lambda copy: (copy.book.title if copy.book is not None else "", copy.imprint),
        )

    def form_choices(self) -> Dict[str, Awaitable[Any]]:
        return {"book_list": self.books.find_all(only=("title",))}

    def selection_from_values(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        return {"selected_book": values.get("book") or ""}

    def selection_from_entity(self, entity: BookInstance) -> Dict[str, Any]:
        return {"selected_book": str(entity.book_id)}

    async def check_references(self, record: BookInstanceForm, result: ValidationResult) -> None:
        if await self.books.find_by_id(record.book) is None:
            result.errors.append(
                FieldError(field="book", message="Book must be specified", value=record.book)
            )
            result.raise_for_errors()

    def to_values(self, record: BookInstanceForm, creating: bool) -> Dict[str, Any]:
        values = record.model_dump()
        if creating and values["due_back"] is None:
            values["due_back"] = date.today()
        return values
