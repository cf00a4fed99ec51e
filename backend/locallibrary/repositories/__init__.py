"""
LocalLibrary — Entity Repositories
===================================

One repository per collection, all built on `Repository`:

    AuthorRepository        authors, sorted by family name
    GenreRepository         genres, sorted by name
    BookRepository          books, sorted by title; maps author/genre ids
    BookInstanceRepository  physical copies; maps book id and status
"""

from locallibrary.repositories.base import Repository, parse_id
from locallibrary.repositories.author import AuthorRepository
from locallibrary.repositories.genre import GenreRepository
from locallibrary.repositories.book import BookRepository
from locallibrary.repositories.bookinstance import BookInstanceRepository

__all__ = [
    "Repository",
    "parse_id",
    "AuthorRepository",
    "GenreRepository",
    "BookRepository",
    "BookInstanceRepository",
]
