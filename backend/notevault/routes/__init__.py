# Routes package init
"""
NoteVault Backend: API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - notes.py:   /api/notes, /api/notes/date, /api/notes/limit, /api/notes/{id}
    - health.py:  GET /health

Routes stay thin: they read parameters, call NoteService, and return its
envelopes. Errors are turned into responses by the handlers in main.py.
"""
