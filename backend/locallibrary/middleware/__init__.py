# Middleware package init
"""
LocalLibrary — Middleware Package
==================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: correlation id for every log line of the request
    2. Logging:    method, path, status and duration, tagged with the id
"""
