"""
LocalLibrary — Pydantic Records
================================

What:  Typed records for sanitized form submissions and view/JSON payloads.
How:   After the validation chain succeeds, a service builds one of the
       `*Form` records from `ValidationResult.values` and hands its
       `model_dump()` to the repository. The records never see raw input.
Who:   Services (form records, dashboard counts) and the health route.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Form Records: sanitized input, ready to persist
# ══════════════════════════════════════════════════════════════════════════


class BookForm(BaseModel):
    """Book submission; `author` and `genre` are ids as posted."""
    title: str
    author: str
    summary: str
    isbn: str
    genre: List[str] = Field(default_factory=list)


class AuthorForm(BaseModel):
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None


class GenreForm(BaseModel):
    name: str


class BookInstanceForm(BaseModel):
    """Copy submission; `book` is the id of an existing Book."""
    book: str
    imprint: str
    status: str
    due_back: Optional[date] = None


# ══════════════════════════════════════════════════════════════════════════
# View / Response Models
# ══════════════════════════════════════════════════════════════════════════


class CatalogCounts(BaseModel):
    """Dashboard figures for GET /catalog/."""
    book_count: int = Field(description="Books in the catalog")
    book_instance_count: int = Field(description="Physical copies")
    book_instance_available_count: int = Field(description="Copies with status Available")
    author_count: int = Field(description="Authors")
    genre_count: int = Field(description="Genres")


class HealthResponse(BaseModel):
    """
    What:  Health check payload for monitoring.
    Who:   Returned by GET /health.
    """
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the process started")
