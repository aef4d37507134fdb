"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `checkout_router.asgi:app`
  pour servir l'application FastAPI en mode ASGI.
- Toute la configuration (routes, middlewares, catalogue, rate limiting) est centralisée
  dans checkout_router.app_setup.factory, ce fichier ne fait qu'exposer l'instance `app`.
"""

from checkout_router.app_setup.factory import create_app

app = create_app()

if __name__ == "__main__":
    # Exécution directe utile en développement local (uvicorn standalone).
    import os
    import uvicorn
    uvicorn.run(
        "checkout_router.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "3000")),
        reload=True,
    )
