import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .config import CORS_ORIGIN, DATABASE_URL, LOG_FORMAT, LOG_LEVEL, PORT
from .db import make_engine
from .error_handlers import register_error_handlers
from .logging_config import setup_logging
from .repository import ProductRepository
from .routes import build_router
from .schemas import Message

APP_NAME = "productos"

logger = logging.getLogger(__name__)

# ---- Prometheus metrics ----
REQS = Counter("http_requests_total", "Total HTTP requests", ["service", "path", "method", "status"])
LAT  = Histogram("http_request_duration_seconds", "Request latency", ["service", "path", "method"])

# ---- Startup: open the shared connection, ensure the table exists ----
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL, LOG_FORMAT)
    app.state.products.open()
    logger.info(f"{APP_NAME} API started")
    yield
    app.state.products.close()
    logger.info(f"{APP_NAME} API shutting down")

def create_app(database_url: Optional[str] = None) -> FastAPI:
    app = FastAPI(title=APP_NAME, lifespan=lifespan)
    app.state.products = ProductRepository(make_engine(database_url or DATABASE_URL))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[CORS_ORIGIN],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        # Label by route template so ids don't explode the label set
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        REQS.labels(APP_NAME, path, request.method, response.status_code).inc()
        LAT.labels(APP_NAME, path, request.method).observe(time.time() - start)
        return response

    @app.get("/")
    def welcome() -> Message:
        return Message(message="Welcome to the products API.")

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(build_router())
    register_error_handlers(app)
    return app

def run():
    import uvicorn

    setup_logging(LOG_LEVEL, LOG_FORMAT)
    logger.info(f"Server listening on port {PORT}")
    uvicorn.run(create_app(), host="0.0.0.0", port=PORT)

if __name__ == "__main__":
    run()
