"""
LocalLibrary — Catalog Dashboard Service
=========================================

What:  The home page: five independent counts fetched concurrently.
How:   `gather()` over the count queries. A failed count does not turn into
       the error page; the dashboard renders with `error` set instead of
       `data`.
"""

import logging

from locallibrary.database import Database
from locallibrary.exceptions import LibraryError
from locallibrary.models import BookInstance, InstanceStatus
from locallibrary.repositories import (
    AuthorRepository,
    BookInstanceRepository,
    BookRepository,
    GenreRepository,
)
from locallibrary.schemas.catalog import CatalogCounts
from locallibrary.services.aggregation import gather
from locallibrary.services.crud import Page

logger = logging.getLogger(__name__)


class CatalogService:
    """Dashboard handler."""

    def __init__(self, database: Database):
        self.books = BookRepository(database)
        self.instances = BookInstanceRepository(database)
        self.authors = AuthorRepository(database)
        self.genres = GenreRepository(database)

    async def index(self) -> Page:
        data = None
        error = None
        try:
            counts = await gather({
                "book_count": self.books.count(),
                "book_instance_count": self.instances.count(),
                "book_instance_available_count": self.instances.count(
                    BookInstance.status == InstanceStatus.AVAILABLE
                ),
                "author_count": self.authors.count(),
                "genre_count": self.genres.count(),
            })
            data = CatalogCounts(**counts)
        except LibraryError as e:
            logger.error("Dashboard counts unavailable: %s", e.message)
            error = e.message

        return Page("index", {"title": "Local Library Home", "error": error, "data": data})
