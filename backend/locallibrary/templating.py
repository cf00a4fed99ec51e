"""
LocalLibrary — Render Boundary
===============================

What:  Turns service outcomes into HTTP responses.
How:   `Page` → Jinja2 template `<view>.html` rendered with the page context;
       `Redirect` → HTTP 302 to the catalog URL.
Who:   Route handlers and the error handlers in main.py.

Stored catalog text is HTML-escaped when it is submitted, so templates print
it with `|safe`; everything else goes through Jinja2 autoescaping.
"""

from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from locallibrary.models import InstanceStatus
from locallibrary.services.crud import Outcome, Page, Redirect

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def form_date(value: Any) -> str:
    """`YYYY-MM-DD` for a date input's value attribute."""
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


templates.env.filters["form_date"] = form_date
templates.env.globals["instance_statuses"] = InstanceStatus.values()


def render(
    request: Request,
    view: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request, f"{view}.html", context or {}, status_code=status_code
    )


def respond(request: Request, outcome: Outcome) -> Response:
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.url, status_code=302)
    if isinstance(outcome, Page):
        return render(request, outcome.view, outcome.context, outcome.status_code)
    raise TypeError(f"Unsupported handler outcome: {outcome!r}")
