"""
LocalLibrary — ORM Models
==========================

Importing this package registers every table with `Base.metadata`
(used by Alembic and `Database.create_all`).
"""

from locallibrary.models.author import Author
from locallibrary.models.genre import Genre
from locallibrary.models.book import Book, book_genres
from locallibrary.models.bookinstance import BookInstance, InstanceStatus

__all__ = [
    "Author",
    "Genre",
    "Book",
    "book_genres",
    "BookInstance",
    "InstanceStatus",
]
