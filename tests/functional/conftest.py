"""Functional test bootstrap for the records service.

Points the service at an in-memory SQLite database before any
`records_api` import and provides a FastAPI TestClient bound to a fresh
in-memory record store per test.
"""

from __future__ import annotations

import os

import pytest

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.pop("ETAG_ALGORITHM", None)
os.environ.pop("RECORDS_UPDATED_AT_FIELD", None)


@pytest.fixture()
def records_store() -> dict:
    return {}


@pytest.fixture()
def app_config():
    from records_api.config import AppConfig

    return AppConfig()


@pytest.fixture()
def etag_generator(app_config):
    from records_api.logic.etag_generator import EtagGenerator

    return EtagGenerator.from_config(app_config)


@pytest.fixture()
def client(app_config, records_store):
    """TestClient over an app whose record store is isolated per test."""
    from fastapi.testclient import TestClient
    from records_api.main import create_app

    with TestClient(create_app(config=app_config, records_store=records_store)) as test_client:
        yield test_client
