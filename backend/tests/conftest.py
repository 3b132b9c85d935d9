"""
Pytest configuration and shared fixtures.
Run from the repository root: python -m pytest
"""

import os
import sys
import tempfile
from pathlib import Path

# Set env vars before any app imports (settings are read at import time)
_TMP = tempfile.mkdtemp(prefix="cath-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["DEBUG"] = "true"
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_PATH"] = os.path.join(_TMP, "artefacts")
os.environ["UPLOAD_STAGING_PATH"] = os.path.join(_TMP, "pending-uploads")
os.environ["GOVUK_NOTIFY_API_KEY"] = ""
os.environ["GOVUK_NOTIFY_TEST_API_KEY"] = ""
os.environ["GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION"] = "template-standard"
os.environ["GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION_PDF_AND_SUMMARY"] = "template-pdf-and-summary"
os.environ["GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION_SUMMARY_ONLY"] = "template-summary-only"

# Ensure backend/ is on path when running tests
BACKEND_ROOT = Path(__file__).resolve().parent.parent
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from cath.core.config import settings  # noqa: E402
from cath.db import models  # noqa: E402,F401
from cath.db.database import Base, SessionLocal, engine  # noqa: E402
from cath.db.seed import seed_reference_data  # noqa: E402
from helpers import sign_in, use_csrf_token  # noqa: E402


@pytest.fixture(autouse=True)
def _storage(tmp_path, monkeypatch):
    """Fresh artefact and staging directories for every test."""
    monkeypatch.setattr(settings, "STORAGE_PATH", str(tmp_path / "artefacts"))
    monkeypatch.setattr(settings, "UPLOAD_STAGING_PATH", str(tmp_path / "pending-uploads"))
    return tmp_path


@pytest.fixture()
def db():
    """SQLite in-memory schema, dropped after each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def reference_data(db):
    """Sample jurisdictions, regions and courts (location ids 1, 2, 3 and 9)."""
    seed_reference_data(db)
    return db


@pytest.fixture()
def client(db):
    from cath.main import app

    test_client = TestClient(app)
    use_csrf_token(test_client)
    yield test_client
    test_client.close()


@pytest.fixture()
def system_admin_client(client, reference_data):
    sign_in(client, "SYSTEM_ADMIN")
    return client


@pytest.fixture()
def admin_client(client, reference_data):
    sign_in(client, "INTERNAL_ADMIN_CTSC")
    return client


@pytest.fixture()
def verified_client(client, reference_data):
    sign_in(client, "VERIFIED", sub="verified-user", email="verified@example.com")
    return client
