"""
Factory d'application recommandée pour les entrypoints (ex: checkout_router.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from typing import Optional

from fastapi import FastAPI

from checkout_router.config import APP_VERSION, CATALOG_PATH
from checkout_router.catalog import Catalog, load_catalog
from checkout_router.checkout.dependencies import build_checkout_service
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_no_cache_middleware, register_security_middleware
from .exceptions import register_exception_handlers
from .routers import register_routers


def create_app(catalog: Optional[Catalog] = None) -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - le catalogue (chargé une fois, CatalogError si ambigu) et le service de checkout sur app.state
      - middlewares (proxy headers, sécurité, no-cache)
      - gestionnaires d'exceptions
      - routers (checkout, health)
    Paramètre:
      catalog: catalogue alternatif (tests); sinon load_catalog(CATALOG_PATH).
    """
    app = FastAPI(title="Pronto Checkout Router", version=APP_VERSION, lifespan=lifespan)
    app.state.catalog = catalog if catalog is not None else load_catalog(CATALOG_PATH or None)
    app.state.checkout_service = build_checkout_service(app.state.catalog)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
