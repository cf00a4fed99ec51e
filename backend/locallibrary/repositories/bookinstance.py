"""BookInstance storage; maps the form's `book` id and `status` text."""

from typing import Any, List, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from locallibrary.models import BookInstance, InstanceStatus
from locallibrary.repositories.base import Repository, parse_id


class BookInstanceRepository(Repository[BookInstance]):
    model = BookInstance
    resource = "book instance"
    default_order = ("imprint",)

    async def _assign(
        self, session: AsyncSession, entity: BookInstance, values: Mapping[str, Any]
    ) -> None:
        values = dict(values)
        if "book" in values:
            entity.book_id = parse_id(values.pop("book"))
        if "status" in values:
            entity.status = InstanceStatus(values.pop("status"))
        await super()._assign(session, entity, values)

    async def find_by_book(self, book_id: Any) -> List[BookInstance]:
        """Every copy of the book."""
        return await self.find_all(BookInstance.book_id == parse_id(book_id))
