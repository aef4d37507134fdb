"""
Middlewares transverses de l'application.
- register_basic_middlewares: confiance en X-Forwarded-* (IP cliente réelle pour le rate limiting).
- register_security_middleware: en-têtes de sécurité et CSP minimale (aucune page HTML servie).
- register_no_cache_middleware: empêche la mise en cache des redirections de checkout.
"""
from fastapi import FastAPI, Request
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from checkout_router.config import FORWARDED_ALLOW_IPS


def register_basic_middlewares(app: FastAPI) -> None:
    # Fait confiance aux en-têtes X-Forwarded-* des proxys déclarés (Render, Nginx, etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=FORWARDED_ALLOW_IPS)


def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        return response


def register_no_cache_middleware(app: FastAPI) -> None:
    """
    Chaque GET /checkout crée une nouvelle session: la redirection ne doit pas être mise en cache.
    """
    @app.middleware("http")
    async def no_cache_for_checkout(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.rstrip("/") == "/checkout":
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response
