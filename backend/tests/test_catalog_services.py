"""
LocalLibrary — Catalog Service Unit Tests
==========================================

What:  Tests for the CRUD handlers and the dashboard, one service at a time.
How:   Services are built around a mock Database; their repositories are
       replaced with AsyncMocks, so no storage is touched.

What we test:
    ✅ Invalid submissions re-render the form and never persist
    ✅ Valid submissions persist and redirect to the entity URL
    ✅ Missing ids: 404 on detail/update, silent redirect on delete
    ✅ Genre de-duplication, copy due date default, dashboard error path
"""

import uuid
from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from locallibrary.exceptions import NotFoundError, StorageError
from locallibrary.models import Author, Book, BookInstance, Genre, InstanceStatus
from locallibrary.schemas.catalog import BookInstanceForm
from locallibrary.services.author_service import AuthorService
from locallibrary.services.book_service import BookService
from locallibrary.services.bookinstance_service import BookInstanceService
from locallibrary.services.catalog_service import CatalogService
from locallibrary.services.crud import Page, Redirect
from locallibrary.services.genre_service import GenreService


def _book(**fields) -> Book:
    defaults = {
        "id": uuid.uuid4(),
        "title": "Dune",
        "summary": "Desert planet politics.",
        "isbn": "9780441013593",
        "author_id": uuid.uuid4(),
    }
    defaults.update(fields)
    return Book(**defaults)


@pytest.fixture
def book_service(mock_database):
    service = BookService(mock_database)
    service.repository = AsyncMock()
    service.authors = AsyncMock()
    service.genres = AsyncMock()
    service.instances = AsyncMock()
    service.authors.find_all.return_value = []
    service.genres.find_all.return_value = []
    service.instances.find_by_book.return_value = []
    return service


class TestBookService:

    @pytest.mark.asyncio
    async def test_list(self, book_service):
        books = [_book(title="A"), _book(title="B")]
        book_service.repository.find_all.return_value = books

        page = await book_service.list()

        assert page.view == "book_list"
        assert page.context == {"title": "Book List", "book_list": books}
        book_service.repository.find_all.assert_awaited_once_with(
            expand=("author",), only=("title", "author_id")
        )

    @pytest.mark.asyncio
    async def test_detail_joins_copies(self, book_service):
        book = _book()
        copies = [BookInstance(id=uuid.uuid4(), book_id=book.id, imprint="Ace", status=InstanceStatus.AVAILABLE)]
        book_service.repository.find_by_id.return_value = book
        book_service.instances.find_by_book.return_value = copies

        page = await book_service.detail(str(book.id))

        assert page.view == "book_detail"
        assert page.context["title"] == "Dune"
        assert page.context["book"] is book
        assert page.context["book_instances"] == copies

    @pytest.mark.asyncio
    async def test_detail_missing_raises_not_found(self, book_service):
        book_service.repository.find_by_id.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await book_service.detail(str(uuid.uuid4()))
        assert exc_info.value.message == "Book not found"

    @pytest.mark.asyncio
    async def test_create_get_lists_choices(self, book_service):
        authors = [Author(id=uuid.uuid4(), first_name="Frank", family_name="Herbert")]
        genres = [Genre(id=uuid.uuid4(), name="Science Fiction")]
        book_service.authors.find_all.return_value = authors
        book_service.genres.find_all.return_value = genres

        page = await book_service.create_get()

        assert page.view == "book_form"
        assert page.context == {"title": "Create Book", "authors": authors, "genres": genres}

    @pytest.mark.asyncio
    async def test_create_post_empty_title_rerenders(self, book_service):
        outcome = await book_service.create_post({
            "title": "",
            "author": "a1",
            "summary": "s",
            "isbn": "1",
            "genre": ["g1", "g2"],
        })

        assert isinstance(outcome, Page)
        assert outcome.view == "book_form"
        assert outcome.context["title"] == "Create Book"
        assert [e.message for e in outcome.context["errors"]] == ["Title must not be empty."]
        assert outcome.context["selected_author"] == "a1"
        assert outcome.context["selected_genres"] == {"g1", "g2"}
        book_service.repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_post_saves_and_redirects(self, book_service):
        saved = _book()
        book_service.repository.save.return_value = saved

        outcome = await book_service.create_post({
            "title": " Dune ",
            "author": "a1",
            "summary": "<spice>",
            "isbn": "9780441013593",
            "genre": "g1",
        })

        assert outcome == Redirect(f"/catalog/book/{saved.id}")
        book_service.repository.save.assert_awaited_once_with({
            "title": "Dune",
            "author": "a1",
            "summary": "&lt;spice&gt;",
            "isbn": "9780441013593",
            "genre": ["g1"],
        })

    @pytest.mark.asyncio
    async def test_update_get_marks_current_choices(self, book_service):
        genre = Genre(id=uuid.uuid4(), name="Fantasy")
        book = _book(genre=[genre])
        book_service.repository.find_by_id.return_value = book

        page = await book_service.update_get(str(book.id))

        assert page.context["title"] == "Update Book"
        assert page.context["book"] is book
        assert page.context["selected_author"] == str(book.author_id)
        assert page.context["selected_genres"] == {str(genre.id)}

    @pytest.mark.asyncio
    async def test_update_post_missing_raises_not_found(self, book_service):
        book_service.repository.update_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await book_service.update_post(str(uuid.uuid4()), {
                "title": "Dune",
                "author": "a1",
                "summary": "s",
                "isbn": "1",
            })

    @pytest.mark.asyncio
    async def test_update_post_redirects_to_same_entity(self, book_service):
        book = _book()
        book_service.repository.update_by_id.return_value = book

        outcome = await book_service.update_post(str(book.id), {
            "title": "Dune Messiah",
            "author": "a1",
            "summary": "s",
            "isbn": "1",
        })

        assert outcome == Redirect(book.url)
        book_service.repository.update_by_id.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_get_missing_redirects_to_list(self, book_service):
        book_service.repository.find_by_id.return_value = None

        outcome = await book_service.delete_get(str(uuid.uuid4()))

        assert outcome == Redirect("/catalog/books")

    @pytest.mark.asyncio
    async def test_delete_post_missing_skips_delete(self, book_service):
        book_service.repository.find_by_id.return_value = None

        outcome = await book_service.delete_post(str(uuid.uuid4()))

        assert outcome == Redirect("/catalog/books")
        book_service.repository.delete_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_post_deletes_even_with_copies(self, book_service):
        book = _book()
        book_service.repository.find_by_id.return_value = book
        book_service.instances.find_by_book.return_value = [BookInstance(id=uuid.uuid4())]

        outcome = await book_service.delete_post(str(book.id))

        assert outcome == Redirect("/catalog/books")
        book_service.repository.delete_by_id.assert_awaited_once_with(str(book.id))

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self, book_service):
        book_service.repository.find_by_id.side_effect = StorageError(message="Could not find book.")

        with pytest.raises(StorageError):
            await book_service.detail("not-an-id")


class TestAuthorService:

    @pytest.mark.asyncio
    async def test_create_post_invalid_keeps_sanitized_input(self, mock_database):
        service = AuthorService(mock_database)
        service.repository = AsyncMock()

        outcome = await service.create_post({
            "first_name": "<script>",
            "family_name": "Herbert",
            "date_of_birth": "1920-10-08",
        })

        assert outcome.view == "author_form"
        assert outcome.context["author"]["first_name"] == "&lt;script&gt;"
        assert outcome.context["author"]["date_of_birth"] == date(1920, 10, 8)
        assert [e.message for e in outcome.context["errors"]] == [
            "First name has non-alphanumeric characters."
        ]
        service.repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_get_lists_books(self, mock_database):
        service = AuthorService(mock_database)
        service.repository = AsyncMock()
        service.books = AsyncMock()
        author = Author(id=uuid.uuid4(), first_name="Frank", family_name="Herbert")
        books = [_book(author_id=author.id)]
        service.repository.find_by_id.return_value = author
        service.books.find_by_author.return_value = books

        page = await service.delete_get(str(author.id))

        assert page.view == "author_delete"
        assert page.context == {"title": "Delete Author", "author": author, "author_books": books}


class TestGenreService:

    @pytest.mark.asyncio
    async def test_create_existing_name_redirects_to_it(self, mock_database):
        service = GenreService(mock_database)
        service.repository = AsyncMock()
        existing = Genre(id=uuid.uuid4(), name="Fantasy")
        service.repository.find_by_name.return_value = existing

        outcome = await service.create_post({"name": "fantasy"})

        assert outcome == Redirect(f"/catalog/genre/{existing.id}")
        service.repository.find_by_name.assert_awaited_once_with("fantasy")
        service.repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_new_name_saves(self, mock_database):
        service = GenreService(mock_database)
        service.repository = AsyncMock()
        service.repository.find_by_name.return_value = None
        created = Genre(id=uuid.uuid4(), name="Poetry")
        service.repository.save.return_value = created

        outcome = await service.create_post({"name": " Poetry "})

        assert outcome == Redirect(created.url)
        service.repository.save.assert_awaited_once_with({"name": "Poetry"})


class TestBookInstanceService:

    def test_new_copy_defaults_due_back_to_today(self, mock_database):
        service = BookInstanceService(mock_database)
        record = BookInstanceForm(book="b1", imprint="Ace", status="Available", due_back=None)

        assert service.to_values(record, creating=True)["due_back"] == date.today()
        assert service.to_values(record, creating=False)["due_back"] is None

    def test_list_sorted_by_book_title_then_imprint(self, mock_database):
        service = BookInstanceService(mock_database)
        dune = SimpleNamespace(title="Dune")
        earthsea = SimpleNamespace(title="A Wizard of Earthsea")
        copies = [
            SimpleNamespace(imprint="Chilton", book=dune),
            SimpleNamespace(imprint="Parnassus", book=earthsea),
            SimpleNamespace(imprint="Ace", book=dune),
            SimpleNamespace(imprint="Orphan", book=None),
        ]

        ordered = service.sort_list(copies)

        assert [c.imprint for c in ordered] == ["Orphan", "Parnassus", "Ace", "Chilton"]

    @pytest.mark.asyncio
    async def test_invalid_status_rerenders_with_book_choices(self, mock_database):
        service = BookInstanceService(mock_database)
        service.repository = AsyncMock()
        service.books = AsyncMock()
        books = [_book()]
        service.books.find_all.return_value = books

        outcome = await service.create_post({"book": "b1", "imprint": "Ace", "status": "Lost"})

        assert outcome.view == "bookinstance_form"
        assert outcome.context["book_list"] == books
        assert outcome.context["selected_book"] == "b1"
        assert [e.message for e in outcome.context["errors"]] == ["Invalid status"]
        service.books.find_all.assert_awaited_once_with(only=("title",))

    @pytest.mark.asyncio
    async def test_unknown_book_rerenders_without_saving(self, mock_database):
        service = BookInstanceService(mock_database)
        service.repository = AsyncMock()
        service.books = AsyncMock()
        service.books.find_by_id.return_value = None
        service.books.find_all.return_value = []
        book_id = "1f0c6f4e-1b7a-4d43-9d8e-2a4c3b5d6e7f"

        outcome = await service.create_post(
            {"book": book_id, "imprint": "Ace", "status": "Available"}
        )

        assert outcome.view == "bookinstance_form"
        assert outcome.context["title"] == "Create BookInstance"
        assert outcome.context["selected_book"] == book_id
        assert [e.message for e in outcome.context["errors"]] == ["Book must be specified"]
        service.books.find_by_id.assert_awaited_once_with(book_id)
        service.repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_book_is_saved(self, mock_database):
        service = BookInstanceService(mock_database)
        service.repository = AsyncMock()
        service.books = AsyncMock()
        service.books.find_by_id.return_value = _book()
        service.repository.save.return_value = SimpleNamespace(url="/catalog/bookinstance/c1")

        outcome = await service.create_post({"book": "b1", "imprint": "Ace", "status": "Available"})

        assert isinstance(outcome, Redirect)
        assert outcome.url == "/catalog/bookinstance/c1"
        service.repository.save.assert_awaited_once()


class TestCatalogService:

    @pytest.mark.asyncio
    async def test_index_counts(self, mock_database):
        service = CatalogService(mock_database)
        for name, count in (("books", 2), ("authors", 2), ("genres", 3)):
            repository = AsyncMock()
            repository.count.return_value = count
            setattr(service, name, repository)
        service.instances = AsyncMock()
        service.instances.count.side_effect = [3, 1]

        page = await service.index()

        assert page.view == "index"
        assert page.context["error"] is None
        assert page.context["data"].model_dump() == {
            "book_count": 2,
            "book_instance_count": 3,
            "book_instance_available_count": 1,
            "author_count": 2,
            "genre_count": 3,
        }

    @pytest.mark.asyncio
    async def test_index_renders_error_when_a_count_fails(self, mock_database):
        service = CatalogService(mock_database)
        for name in ("books", "authors", "genres", "instances"):
            setattr(service, name, AsyncMock())
        service.genres.count.side_effect = StorageError(message="Could not count genre.")

        page = await service.index()

        assert page.view == "index"
        assert page.context["data"] is None
        assert page.context["error"] == "Could not count genre."
