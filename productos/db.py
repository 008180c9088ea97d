from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from .repository import ProductRepository

def make_engine(database_url: str) -> Engine:
    """
    Build the engine behind the repository's single shared connection.
    SQLite URLs (tests, local runs) get one connection usable from any worker thread.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
    return create_engine(database_url, pool_pre_ping=True, future=True)

def get_repository(request: Request) -> ProductRepository:
    """
    FastAPI dependency: the repository opened by the application lifespan.
    Override it in app.dependency_overrides to swap in a test double.
    """
    return request.app.state.products
