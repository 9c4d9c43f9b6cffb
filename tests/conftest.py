"""
Pytest configuration and shared fixtures.
"""
import os

# Settings are read at import time: pin a neutral environment before any
# openversion module is imported
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "INFO"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["API_AUTH_ENABLED"] = "true"
os.environ["API_TOKEN"] = ""
os.environ["API_AUTH_ENFORCE_IN_DEVELOPMENT"] = "false"
os.environ["COMPUTE_MAX_ATTEMPTS"] = "3"

import pytest
import pytest_asyncio

from openversion.db import connection
from openversion.domain.value_objects import DomainVersion


@pytest.fixture
def db_url(tmp_path):
    """File-backed SQLite URL, fresh per test"""
    return f"sqlite+aiosqlite:///{tmp_path / 'openversion_test.db'}"


@pytest_asyncio.fixture
async def session_maker(db_url):
    """
    Initialize a fresh database for one test.

    Yields the session factory so tests can open independent sessions
    (two sessions = two concurrent writers).
    """
    await connection.init_db(db_url)

    yield connection.async_session_maker

    await connection.close_db()


def make_version(identifier_name, release_number, meta=None, project_id=1, id=0):
    return DomainVersion(
        id=id,
        project_id=project_id,
        identifier_name=identifier_name,
        release_number=release_number,
        meta=meta
    )


@pytest.fixture
def version_factory():
    return make_version
