"""Pytest fixtures for API tests.

Provides a test client bound to the seeded in-memory database and caller
identity headers.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from direct_api.api.main import app
from direct_api.db.connection import get_db


@pytest.fixture
def client(seeded_db: Session) -> Generator[TestClient, None, None]:
    """Create a TestClient with overridden database dependency.

    Args:
        seeded_db: Seeded test database session fixture.

    Yields:
        TestClient configured for testing.
    """

    def override_get_db():
        try:
            yield seeded_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def member_headers() -> dict[str, str]:
    """Headers of alice (user 100) with the member role."""
    return {"X-Direct-User-Id": "100", "X-Direct-Roles": "MEMBER"}
