"""Shared helpers for catalog models."""

from datetime import date
from typing import ClassVar, Optional


def format_date(value: Optional[date]) -> str:
    """Medium date text, e.g. `Oct 19, 2026`; empty for None."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


class CatalogEntity:
    """
    Mixin giving every catalog model its canonical detail URL.

    Subclasses set `url_prefix`; `url` is `<url_prefix>/<id>`.
    """

    url_prefix: ClassVar[str] = ""

    @property
    def url(self) -> str:
        return f"{self.url_prefix}/{self.id}"
