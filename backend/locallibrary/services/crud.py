"""
LocalLibrary — Generic CRUD Service
====================================

What:  The handler set shared by every catalog entity:
       list / detail / create (get+post) / delete (get+post) / update (get+post).
How:   `CrudService` is parameterized by a repository, a validator, a form
       record and a few hooks (dependents, form choice lists, selected
       choices). Handlers return a `Page` (view + context) or a `Redirect`;
       the routes layer turns those into HTTP responses.
Who:   BookService, AuthorService, GenreService, BookInstanceService.

POST flow (create and update):

    Received ─▶ Normalized ─▶ Validated ─┬─ invalid ─▶ Rerendered (errors + input)
                                         └─ valid ───▶ Persisted ─▶ Redirected

Error Handling:
    - Validation failures are recovered here by re-rendering the form.
    - Missing ids on detail/update raise NotFoundError (404 page).
    - Missing ids on delete redirect to the list page silently.
    - StorageError from repositories and aggregation propagates unchanged.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, Generic, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel

from locallibrary.database import Database
from locallibrary.exceptions import NotFoundError, ValidationError
from locallibrary.repositories.base import Repository
from locallibrary.services.aggregation import gather
from locallibrary.validation import FormValue, ValidationResult, Validator

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


# ── Handler outcomes ──────────────────────────────────────────────────────
@dataclass
class Page:
    """Render `view` (template name without extension) with `context`."""
    view: str
    context: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200


@dataclass
class Redirect:
    """HTTP redirect to a catalog URL."""
    url: str


Outcome = Union[Page, Redirect]


class CrudService(Generic[ModelT]):
    """
    One entity's CRUD handlers.

    Subclasses set the class attributes below and override hooks where the
    entity has references or dependents.

    Class attributes:
        resource:        singular key, also the view prefix ("book")
        plural:          list URL segment ("books")
        label:           human name used in page titles ("Book")
        repository_class / validator / form_schema
        list_expand / list_only:  expansion and projection for list()
        detail_expand:            expansion for detail(), delete_get(), update_get()
    """

    resource: str
    plural: str
    label: str
    repository_class: Type[Repository]
    validator: Validator
    form_schema: Type[BaseModel]
    list_expand: Sequence[str] = ()
    list_only: Sequence[str] = ()
    detail_expand: Sequence[str] = ()

    def __init__(self, database: Database):
        self.database = database
        self.repository: Repository = self.repository_class(database)

    # ── URLs and views ────────────────────────────────────────────────────
    @property
    def list_url(self) -> str:
        return f"/catalog/{self.plural}"

    def view(self, kind: str) -> str:
        return f"{self.resource}_{kind}"

    # ── Hooks ─────────────────────────────────────────────────────────────
    @property
    def list_title(self) -> str:
        return f"{self.label} List"

    def detail_title(self, entity: ModelT) -> str:
        return f"{self.label} Detail"

    def sort_list(self, items: list) -> list:
        return items

    def dependents(self, entity_id: str) -> Dict[str, Awaitable[Any]]:
        """Reads joined into detail and delete pages (e.g. a book's copies)."""
        return {}

    def form_choices(self) -> Dict[str, Awaitable[Any]]:
        """Reads populating the form's choice lists."""
        return {}

    def selection_from_values(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Selected choices to mark when re-rendering submitted input."""
        return {}

    def selection_from_entity(self, entity: ModelT) -> Dict[str, Any]:
        """Selected choices to mark when editing a stored entity."""
        return {}

    def to_values(self, record: BaseModel, creating: bool) -> Dict[str, Any]:
        return record.model_dump()

    async def find_duplicate(self, record: BaseModel) -> Optional[ModelT]:
        """An existing entity to redirect to instead of creating a new one."""
        return None

    async def check_references(self, record: BaseModel, result: ValidationResult) -> None:
        """
        Verify references that only storage can resolve.

        Overrides append a FieldError to `result` and call
        `result.raise_for_errors()` when a reference does not resolve.
        """

    # ── Handlers ──────────────────────────────────────────────────────────
    async def list(self) -> Page:
        items = await self.repository.find_all(expand=self.list_expand, only=self.list_only)
        return Page(
            self.view("list"),
            {"title": self.list_title, f"{self.resource}_list": self.sort_list(items)},
        )

    async def detail(self, entity_id: str) -> Page:
        results = await gather({
            self.resource: self.repository.find_by_id(entity_id, expand=self.detail_expand),
            **self.dependents(entity_id),
        })
        entity = results.pop(self.resource)
        if entity is None:
            raise NotFoundError(resource=self.resource, resource_id=entity_id)
        return Page(
            self.view("detail"),
            {"title": self.detail_title(entity), self.resource: entity, **results},
        )

    async def create_get(self) -> Page:
        choices = await gather(self.form_choices())
        return Page(self.view("form"), {"title": f"Create {self.label}", **choices})

    async def create_post(self, form: Mapping[str, FormValue]) -> Outcome:
        result = self.validator.validate(form)
        try:
            result.raise_for_errors()
            record = self.form_schema.model_validate(result.values)
            await self.check_references(record, result)
        except ValidationError as e:
            return await self._rerender(f"Create {self.label}", result, e)

        existing = await self.find_duplicate(record)
        if existing is not None:
            logger.info("%s already exists: %s", self.label, existing.id)
            return Redirect(existing.url)

        entity = await self.repository.save(self.to_values(record, creating=True))
        return Redirect(entity.url)

    async def delete_get(self, entity_id: str) -> Outcome:
        results = await gather({
            self.resource: self.repository.find_by_id(entity_id, expand=self.detail_expand),
            **self.dependents(entity_id),
        })
        entity = results.pop(self.resource)
        if entity is None:
            return Redirect(self.list_url)
        return Page(
            self.view("delete"),
            {"title": f"Delete {self.label}", self.resource: entity, **results},
        )

    async def delete_post(self, entity_id: str) -> Redirect:
        entity = await self.repository.find_by_id(entity_id)
        if entity is not None:
            await self.repository.delete_by_id(entity_id)
        return Redirect(self.list_url)

    async def update_get(self, entity_id: str) -> Page:
        results = await gather({
            self.resource: self.repository.find_by_id(entity_id, expand=self.detail_expand),
            **self.form_choices(),
        })
        entity = results.pop(self.resource)
        if entity is None:
            raise NotFoundError(resource=self.resource, resource_id=entity_id)
        return Page(
            self.view("form"),
            {
                "title": f"Update {self.label}",
                self.resource: entity,
                **results,
                **self.selection_from_entity(entity),
            },
        )

    async def update_post(self, entity_id: str, form: Mapping[str, FormValue]) -> Outcome:
        result = self.validator.validate(form)
        try:
            result.raise_for_errors()
            record = self.form_schema.model_validate(result.values)
            await self.check_references(record, result)
        except ValidationError as e:
            return await self._rerender(f"Update {self.label}", result, e)

        entity = await self.repository.update_by_id(entity_id, self.to_values(record, creating=False))
        if entity is None:
            raise NotFoundError(resource=self.resource, resource_id=entity_id)
        return Redirect(entity.url)

    async def _rerender(self, title: str, result: ValidationResult, error: ValidationError) -> Page:
        """Form again, with the sanitized input, its errors and fresh choice lists."""
        logger.info("%s form rejected: %s", self.label, error.message)
        choices = await gather(self.form_choices())
        return Page(
            self.view("form"),
            {
                "title": title,
                self.resource: result.values,
                "errors": result.errors,
                **choices,
                **self.selection_from_values(result.values),
            },
        )
