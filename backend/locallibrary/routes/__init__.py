# Routes package init
"""
LocalLibrary — Routes Package
==============================

Route Inventory:
    - catalog.py:  /               redirect to the catalog
                   /catalog/...    dashboard and CRUD pages for every entity
    - health.py:   GET /health     service health check (JSON)

Routes stay thin: extract path ids and form fields, call a service, and
pass the outcome to the render boundary (`locallibrary.templating`).
"""
