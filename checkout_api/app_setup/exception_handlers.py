"""
Gestionnaires d'exceptions.
- Erreurs métier (CheckoutError et sous-classes) -> {message, paypal?} avec le code porté par l'erreur.
- HTTPException (404, 429...) et erreurs de validation FastAPI -> même forme {message}.
- Toute autre exception -> 500 {message: "Unexpected server error."}, trace complète dans les logs.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from checkout_api.payments.errors import CheckoutError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers au niveau de l'app: le front reçoit toujours un 'message' lisible.
    """
    @app.exception_handler(CheckoutError)
    async def checkout_error_handler(request: Request, exc: CheckoutError):
        if exc.status_code >= 500:
            logger.error("PayPal integration error on %s: %s", request.url.path, exc.message)
        else:
            logger.info("Checkout request rejected on %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": "Invalid request.", "errors": jsonable_errors(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"message": "Unexpected server error."})


def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
