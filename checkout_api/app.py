# module checkout_api.app
from typing import Optional
from fastapi import FastAPI

from checkout_api.config import CORS_ORIGINS, PayPalSettings, load_settings
from checkout_api.payments.service import CheckoutService, build_checkout_service
from checkout_api.app_setup.lifespan import lifespan
from checkout_api.app_setup.middlewares import register_basic_middlewares
from checkout_api.app_setup.exception_handlers import register_exception_handlers
from checkout_api.app_setup.routers import register_routers


def create_app(settings: Optional[PayPalSettings] = None, service: Optional[CheckoutService] = None) -> FastAPI:
    """
    Crée et configure l'instance FastAPI de l'application.
    Étapes et ordre:
      1) settings: PayPalSettings résolu une fois (load_settings() par défaut).
      2) service: CheckoutService injecté (tests) ou assemblé depuis settings.
      3) register_basic_middlewares: CORS pour le front.
      4) register_exception_handlers: {message, paypal?} pour toutes les erreurs.
      5) register_routers: /api (config, orders, capture) et /health.
    Retourne:
      - FastAPI: l'application prête à être servie (ASGI).
    """
    settings = settings or (service.settings if service else load_settings())
    app = FastAPI(title="Checkout API", lifespan=lifespan)
    app.state.settings = settings
    app.state.checkout_service = service or build_checkout_service(settings)
    register_basic_middlewares(app, CORS_ORIGINS)
    register_exception_handlers(app)
    register_routers(app)
    return app
