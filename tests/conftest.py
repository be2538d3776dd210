# tests/conftest.py
import os
import tempfile

import pytest
from fastapi.testclient import TestClient

_TEST_DB_DIR = tempfile.mkdtemp(prefix="onestop-tests-")

# Must be set before onestop.core.config.get_settings() is first called.
os.environ["APP_ENV"] = "test"
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DB_DIR, 'onestop_test.db')}"
os.environ.pop("ADMIN_API_KEY", None)

from onestop.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    Startup creates the schema and seeds the room catalog in a throwaway
    SQLite file, so tests pick distinct dates to stay independent.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
