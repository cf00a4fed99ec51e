"""Author storage."""

from locallibrary.models import Author
from locallibrary.repositories.base import Repository


class AuthorRepository(Repository[Author]):
    model = Author
    resource = "author"
    default_order = ("family_name", "first_name")
