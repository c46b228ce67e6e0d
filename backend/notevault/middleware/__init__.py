# Middleware package init
"""
NoteVault Backend: Middleware Package
======================================

What:  Cross-cutting concerns applied to requests.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so the logging middleware and error handlers see it
    - Logging records status and duration on the way back out

auth.py is not middleware in the Starlette sense: it is a FastAPI
dependency attached only to the mutating note routes.
"""
