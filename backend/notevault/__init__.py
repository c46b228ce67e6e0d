"""
NoteVault Backend: Application Package Initializer
=================================================

What: Marks the `notevault` directory as a Python package.
Who:  Used by uvicorn (`uvicorn notevault.main:app`), pytest, and `python -m notevault`.

Architecture Note:
    The backend is layered so that each layer can be tested on its own:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth, envelopes
    ├─────────────────────────────────────┤
    │     NoteService (Query Façade)      │  ← Parameter validation, delegation
    ├─────────────────────────────────────┤
    │     NoteRepository (Note logic)     │  ← Create / find / replace / filter / limit
    ├─────────────────────────────────────┤
    │       JsonNoteStore (Persistence)   │  ← Whole-collection load / atomic save
    └─────────────────────────────────────┘

    The whole note collection lives in one JSON document. Every request loads
    it; mutations write it back while holding the repository's write lock.
"""

__version__ = "1.0.0"
