from fastapi import APIRouter

from . import handlers

# (method, path, handler); response models come from the handlers' return annotations
ROUTES = (
    ("POST", "/api/productos", handlers.create),
    ("GET", "/api/productos", handlers.find_all),
    ("GET", "/api/productos/{id}", handlers.find_one),
    ("PUT", "/api/productos/{id}", handlers.update),
    ("DELETE", "/api/productos/{id}", handlers.delete),
    ("DELETE", "/api/productos", handlers.delete_all),
)

def build_router() -> APIRouter:
    router = APIRouter(tags=["productos"])
    for method, path, endpoint in ROUTES:
        router.add_api_route(path, endpoint, methods=[method], name=endpoint.__name__)
    return router
