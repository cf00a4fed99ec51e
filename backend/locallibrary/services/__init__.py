# Services package init
"""
LocalLibrary — Services Layer
==============================

What:  Request handlers' business logic, between routes (HTTP) and
       repositories (storage).
How:   Each service is built per request around the shared `Database`
       handle and returns a `Page` or `Redirect` outcome.

Service Inventory:
    - CrudService (generic): list/detail/create/delete/update handlers
    - BookService, AuthorService, GenreService, BookInstanceService
    - CatalogService: dashboard counts
    - aggregation.gather: concurrent named reads, first error wins
"""
