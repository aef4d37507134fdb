"""
Registre central des routers (checkout, health).
"""
from fastapi import FastAPI
from checkout_router.checkout import views as checkout_views
from checkout_router.health.router import router as health_router


def register_routers(app: FastAPI) -> None:
    app.include_router(checkout_views.router)
    # Health & monitoring
    app.include_router(health_router)
