"""
Registre central des routers.
- API: payments (config, orders, capture) sous /api
- Health: health_router
"""
from fastapi import FastAPI
from checkout_api.payments import views as payments_views
from checkout_api.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """Agrège tous les routers de l'application."""
    app.include_router(payments_views.router)
    app.include_router(health_router)
