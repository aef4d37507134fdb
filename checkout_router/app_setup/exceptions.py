"""
Gestionnaires d'exceptions.
- CheckoutError -> code HTTP de l'erreur; texte brut pour un navigateur (Accept: text/html), JSON sinon.
- 404 -> JSON listant les endpoints disponibles.
- Erreurs non prévues -> 500 avec le message générique (détail uniquement dans les logs).
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from checkout_router.errors import CheckoutError, GENERIC_FAILURE_MESSAGE

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = ["/health", "/checkout"]


def _wants_html(request: Request) -> bool:
    accept = (request.headers.get("accept") or "").lower()
    return "text/html" in accept


def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers CheckoutError, HTTPException (404) et Exception.
    - UX web: message lisible en texte brut (le client arrive depuis un formulaire).
    - UX API: JSON {"detail", "error"} pour clients programmatiques et tests.
    """
    @app.exception_handler(CheckoutError)
    async def checkout_error_handler(request: Request, exc: CheckoutError):
        if _wants_html(request):
            return PlainTextResponse(exc.public_message, status_code=exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.public_message, "error": exc.kind},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=HTTP_404_NOT_FOUND,
                content={
                    "error": "Not Found",
                    "message": "The requested endpoint does not exist",
                    "availableEndpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("app.unexpected_error path=%s", request.url.path)
        if _wants_html(request):
            return PlainTextResponse(GENERIC_FAILURE_MESSAGE, status_code=HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": GENERIC_FAILURE_MESSAGE, "error": "InternalError"},
        )
