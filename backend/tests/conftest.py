"""
LocalLibrary — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_database: Database stand-in for service unit tests (no real DB)
    ├── database:      Real Database on a temporary SQLite file, schema created
    ├── catalog:       A few authors, genres, books and copies in `database`
    └── test_client:   HTTPX AsyncClient bound to an app using `database`

SQLite runs from a file (not :memory:) so concurrent sessions opened by
gather() each get their own connection to the same data.
"""

import os
from datetime import date
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any locallibrary imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["APP_ENV"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from locallibrary.database import Database  # noqa: E402
from locallibrary.repositories import (  # noqa: E402
    AuthorRepository,
    BookInstanceRepository,
    BookRepository,
    GenreRepository,
)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_database():
    """
    Provides a stand-in Database handle.

    Services only hand it to their repositories; unit tests replace those
    repositories with AsyncMocks, so nothing is ever called on it.
    """
    return MagicMock(spec=Database)


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A real Database on a fresh SQLite file with every table created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'library.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def catalog(database):
    """
    Seeds a small catalog and returns the created entities.

    Attributes:
        herbert, le_guin:       authors
        fantasy, science_fiction, poetry: genres
        dune, earthsea:         books (Dune is science fiction, Earthsea fantasy)
        dune_copy, dune_loaned, earthsea_copy: copies
    """
    authors = AuthorRepository(database)
    genres = GenreRepository(database)
    books = BookRepository(database)
    copies = BookInstanceRepository(database)

    herbert = await authors.save({
        "first_name": "Frank",
        "family_name": "Herbert",
        "date_of_birth": date(1920, 10, 8),
        "date_of_death": date(1986, 2, 11),
    })
    le_guin = await authors.save({
        "first_name": "Ursula",
        "family_name": "LeGuin",
        "date_of_birth": date(1929, 10, 21),
        "date_of_death": None,
    })

    fantasy = await genres.save({"name": "Fantasy"})
    science_fiction = await genres.save({"name": "Science Fiction"})
    poetry = await genres.save({"name": "Poetry"})

    dune = await books.save({
        "title": "Dune",
        "author": str(herbert.id),
        "summary": "Desert planet politics.",
        "isbn": "9780441013593",
        "genre": [str(science_fiction.id)],
    })
    earthsea = await books.save({
        "title": "A Wizard of Earthsea",
        "author": str(le_guin.id),
        "summary": "A young mage on Roke.",
        "isbn": "9780547773742",
        "genre": [str(fantasy.id)],
    })

    dune_copy = await copies.save({
        "book": str(dune.id),
        "imprint": "Ace, 1990",
        "status": "Available",
        "due_back": date(2026, 10, 19),
    })
    dune_loaned = await copies.save({
        "book": str(dune.id),
        "imprint": "Chilton, 1965",
        "status": "Loaned",
        "due_back": date(2026, 11, 2),
    })
    earthsea_copy = await copies.save({
        "book": str(earthsea.id),
        "imprint": "Parnassus, 1968",
        "status": "Maintenance",
        "due_back": date(2026, 10, 19),
    })

    return SimpleNamespace(
        herbert=herbert,
        le_guin=le_guin,
        fantasy=fantasy,
        science_fiction=science_fiction,
        poetry=poetry,
        dune=dune,
        earthsea=earthsea,
        dune_copy=dune_copy,
        dune_loaned=dune_loaned,
        earthsea_copy=earthsea_copy,
    )


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan, so the app is built around the
    already opened `database` handle.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from locallibrary.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
