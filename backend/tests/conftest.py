"""
Pytest configuration and shared fixtures for the Chronicle backend tests.

Runtime paths are redirected to a throwaway directory before ``chronicle``
is imported, because settings and the engine are created at import time.
"""
import os
import shutil
import tempfile
from pathlib import Path

import pytest

_RUNTIME_DIR = Path(tempfile.mkdtemp(prefix="chronicle-tests-"))
os.environ["DATA_DIR"] = str(_RUNTIME_DIR / "data")
os.environ["SQLITE_PATH"] = str(_RUNTIME_DIR / "data" / "chronicle-test.db")
os.environ["PUBLIC_DIR"] = str(_RUNTIME_DIR / "public")
os.environ["BOOKS_DIR"] = str(_RUNTIME_DIR / "public" / "books")
os.environ["UPLOADS_DIR"] = str(_RUNTIME_DIR / "public" / "uploads")
os.environ["API_PREFIX"] = "/api"

from fastapi.testclient import TestClient  # noqa: E402

from chronicle.core.database import Base, SessionLocal, engine, init_db  # noqa: E402
from chronicle.main import app  # noqa: E402
from chronicle.services import pdf_service  # noqa: E402


FAKE_PDF = b"%PDF-1.4\n% chronicle test document\n%%EOF\n"


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(_RUNTIME_DIR, ignore_errors=True)


# ============================================================================
# Fixtures: Database
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_schema():
    """Every test starts from empty tables."""
    init_db()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# Fixtures: HTTP client & PDF stub
# ============================================================================

@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def rendered_html(monkeypatch):
    """Replace the PDF engine with a stub; collects the HTML it was given."""
    captured = []

    def fake_html_to_pdf(html: str) -> bytes:
        captured.append(html)
        return FAKE_PDF

    monkeypatch.setattr(pdf_service, "html_to_pdf", fake_html_to_pdf)
    return captured


# ============================================================================
# Fixtures: Sample Data
# ============================================================================

@pytest.fixture
def make_post(client):
    def _make(title="Treaty Signed", date="1919-06-28", status="published", **extra):
        payload = {
            "title": title,
            "content": extra.pop("content", f"{title} content."),
            "excerpt": extra.pop("excerpt", f"{title} excerpt"),
            "dateOfEvent": date,
            "status": status,
        }
        payload.update(extra)
        response = client.post("/api/posts", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_manuscript(client):
    def _make(title="The Great War"):
        response = client.post("/api/manuscripts", json={"title": title})
        assert response.status_code == 200, response.text
        return response.json()

    return _make


@pytest.fixture
def make_section(client):
    def _make(manuscript_id, title, **fields):
        payload = {"title": title, **fields}
        response = client.post(f"/api/manuscripts/{manuscript_id}/sections", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _make
