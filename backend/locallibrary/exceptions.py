"""
LocalLibrary — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the catalog request pipeline.
How:   Each exception carries a message and an optional context dict.
       Handlers registered in main.py turn NotFoundError and StorageError
       into the error view with the matching HTTP status.
Who:   Raised by repositories and services; caught by the error boundary.

Exception Hierarchy:
    LibraryError (base)
    ├── ValidationError   → recovered in the service (form re-rendered)
    ├── NotFoundError     → 404 error page
    └── StorageError      → 500 error page
"""

from typing import Any, Dict, List, Optional


class LibraryError(Exception):
    """
    Base exception for all catalog errors.

    Attributes:
        message:  User-facing description
        context:  Additional debug info (logged; shown on the error page in
                  development only)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(LibraryError):
    """
    Raised when submitted form data fails the validation chain.

    Services catch it and re-render the form with `errors`; it never reaches
    the error boundary in normal operation.

    Attributes:
        errors: ordered list of `FieldError` from the validation chain
    """

    status_code = 400

    def __init__(
        self,
        errors: Optional[List[Any]] = None,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = list(errors or [])


class NotFoundError(LibraryError):
    """
    Raised when a lookup by id yields nothing on a detail or update path.

    Repositories return None for missing rows; services convert None into
    this exception so the error boundary can answer 404.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StorageError(LibraryError):
    """
    Raised when a database operation fails.

    Covers connection loss, malformed ids and constraint violations. The
    original exception type is kept in `context["original_error"]`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
