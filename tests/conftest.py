"""Shared fixtures: an in-memory SQLite repository and a TestClient app."""

import os

# Keep test output readable; nothing here talks to a real database
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from fastapi.testclient import TestClient

from productos.db import make_engine
from productos.main import create_app
from productos.repository import ProductRepository
from productos.schemas import ProductIn


@pytest.fixture
def repo():
    repository = ProductRepository(make_engine("sqlite://"))
    repository.open()
    yield repository
    repository.close()


@pytest.fixture
def pen():
    return ProductIn(name="Pen", description="Blue", price=1.5, stock=100)


@pytest.fixture
def app():
    return create_app("sqlite://")


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
