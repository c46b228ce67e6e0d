# Services package init
"""
NoteVault Backend: Services Layer
==================================

What:  Note logic between the routes (HTTP) and the notes file (persistence).
How:   Three classes stacked on each other and wired once per process by
       note_service.build_note_service().

Service Inventory:
    - JsonNoteStore:   Loads and atomically rewrites the whole JSON collection
    - NoteRepository:  Create, find, replace, filter-by-date, most-recent-N
    - NoteService:     Validates external parameters and builds response envelopes

Routes receive the NoteService through FastAPI's dependency injection
(`get_note_service`), which tests override to point at a temporary file.
"""
