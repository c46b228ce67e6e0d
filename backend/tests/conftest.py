"""
NoteVault Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── notes_file:    Path of a notes JSON file under tmp_path (not created)
    ├── seed_notes:    Writes raw note dicts to notes_file
    ├── store:         JsonNoteStore over notes_file
    ├── id_factory:    Deterministic UUID-shaped ids (…-000000000001, …-000000000002)
    ├── repository:    NoteRepository(store, id_factory)
    ├── service:       NoteService(repository)
    ├── sample_notes:  Two notes, A dated 2023-01-01 and B dated 2023-06-01
    └── test_client:   HTTPX AsyncClient wired to the app with `service` injected
"""

import itertools
import json
import os
import tempfile

# Settings are read at import time; point them at throwaway values first
os.environ["NOTES_FILE"] = os.path.join(tempfile.mkdtemp(prefix="notevault_test_"), "notes.json")
os.environ["API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notevault.services.note_repository import NoteRepository
from notevault.services.note_service import NoteService, get_note_service
from notevault.services.store import JsonNoteStore

NOTE_A_ID = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"
NOTE_B_ID = "bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb"
MISSING_ID = "cccccccc-cccc-4ccc-8ccc-cccccccccccc"


@pytest.fixture
def notes_file(tmp_path):
    return tmp_path / "data" / "notes.json"


@pytest.fixture
def seed_notes(notes_file):
    """
    Write note dicts straight to the notes file, bypassing the store.

    Usage:
        seed_notes([{"id": "...", "user": "...", ...}])
    """

    def _seed(notes):
        notes_file.parent.mkdir(parents=True, exist_ok=True)
        notes_file.write_text(json.dumps(notes, indent=2), encoding="utf-8")
        return notes

    return _seed


@pytest.fixture
def sample_notes():
    return [
        {
            "id": NOTE_A_ID,
            "user": "mario",
            "date": "2023-01-01",
            "title": "Groceries",
            "body": "milk, eggs",
        },
        {
            "id": NOTE_B_ID,
            "user": "luigi",
            "date": "2023-06-01",
            "title": "Trip",
            "body": "book the train",
        },
    ]


@pytest.fixture
def store(notes_file):
    return JsonNoteStore(notes_file)


@pytest.fixture
def id_factory():
    """Predictable ids so tests can assert on them."""
    counter = itertools.count(1)
    return lambda: f"00000000-0000-4000-8000-{next(counter):012d}"


@pytest.fixture
def repository(store, id_factory):
    return NoteRepository(store, id_factory=id_factory)


@pytest.fixture
def service(repository):
    return NoteService(repository)


@pytest_asyncio.fixture
async def test_client(service):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    The app's NoteService dependency is replaced by the per-test `service`,
    so every test works on its own notes file.
    """
    from notevault.main import app

    app.dependency_overrides[get_note_service] = lambda: service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
