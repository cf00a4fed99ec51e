"""
LocalLibrary — Application Package Initializer
===============================================

What: Marks the `locallibrary` directory as a Python package.
Who:  Imported by uvicorn (`locallibrary.main:app`), Alembic and pytest.

Architecture Note:
    The catalog follows a layered request pipeline:

    ┌─────────────────────────────────────┐
    │       Routes (HTTP + rendering)     │  ← URL/verb → handler, Page/Redirect → response
    ├─────────────────────────────────────┤
    │   Services (per-entity CRUD logic)  │  ← validate → aggregate → render-or-redirect
    ├─────────────────────────────────────┤
    │  Validation chain │ Aggregation     │  ← rule objects │ concurrent reads
    ├─────────────────────────────────────┤
    │   Repositories (Book, Author, ...)  │  ← find/count/save/update/delete
    ├─────────────────────────────────────┤
    │        Database (async engine)      │  ← one handle per process
    └─────────────────────────────────────┘

    Data flows one way per request and no layer keeps state between requests
    except the database handle.
"""

__version__ = "1.0.0"
