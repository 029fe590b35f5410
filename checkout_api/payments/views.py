import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from checkout_api.utils.rate_limit import optional_rate_limit
from .errors import ValidationError
from .schemas import ConfigResponse, ErrorResponse, OrderCreatedResponse
from .service import CheckoutService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Checkout API"])

ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def get_checkout_service(request: Request) -> CheckoutService:
    """Service checkout construit par create_app() et stocké dans app.state."""
    return request.app.state.checkout_service


def _request_id(request: Request) -> Optional[str]:
    value = request.headers.get("PayPal-Request-Id") or request.headers.get("Idempotency-Key")
    return value.strip() if value and value.strip() else None


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError("Invalid JSON body.")


# module checkout_api.payments.views
@router.get("/config", response_model=ConfigResponse)
def get_config(service: CheckoutService = Depends(get_checkout_service)):
    """
    Configuration publique pour le SDK PayPal côté front.
    - clientId vide si les identifiants ne sont pas configurés.
    """
    return service.public_config()


@router.post(
    "/orders",
    status_code=201,
    response_model=OrderCreatedResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(optional_rate_limit(times=10, seconds=60))],
)
async def create_order(request: Request, service: CheckoutService = Depends(get_checkout_service)):
    """
    Crée une commande PayPal à partir du panier.
    - Entrée JSON: { "items": [ { "id"?, "name", "price", "quantity"?, "category"? }, ... ] }
    - En-tête optionnel PayPal-Request-Id (ou Idempotency-Key) transmis à PayPal
    - Réponse: 201 {"id": "<order_id>"}; erreurs {"message", "paypal"?} via le handler global
    """
    body = await _read_json(request)
    items = body.get("items") if isinstance(body, dict) else None
    order_id = await run_in_threadpool(service.create_order, items, _request_id(request))
    return JSONResponse({"id": order_id}, status_code=201)


@router.post(
    "/orders/{order_id}/capture",
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    dependencies=[Depends(optional_rate_limit(times=10, seconds=60))],
)
async def capture_order(order_id: str, request: Request, service: CheckoutService = Depends(get_checkout_service)):
    """
    Capture une commande approuvée par le payeur.
    - Réponse 200: payload de capture PayPal inchangé (le front lit purchase_units[0].payments.captures[0].status)
    - Le journal des transactions est écrit en best-effort
    """
    capture = await run_in_threadpool(service.capture_order, order_id, _request_id(request))
    return JSONResponse(capture)
