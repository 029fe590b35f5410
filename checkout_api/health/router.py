import os
from typing import Any, Dict
from fastapi import APIRouter, Request

from checkout_api.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])


def paypal_health_info(request: Request) -> Dict[str, Any]:
    """
    État local de l'intégration PayPal, sans appel réseau.
    - credentials_configured: PAYPAL_CLIENT_ID et PAYPAL_CLIENT_SECRET présents
    - transactions_log: chemin du journal et possibilité d'y écrire
    """
    settings = request.app.state.settings
    log_path = settings.transactions_log
    log_dir = log_path.parent
    writable_dir = log_dir
    while not writable_dir.exists() and writable_dir != writable_dir.parent:
        writable_dir = writable_dir.parent
    return {
        "environment": settings.environment,
        "base_url": settings.base_url,
        "currency": settings.currency,
        "credentials_configured": settings.has_credentials,
        "transactions_log": {
            "path": str(log_path),
            "exists": log_path.exists(),
            "writable": os.access(writable_dir, os.W_OK),
        },
        "rate_limit": rate_limit_health_info(request),
    }


@router.get("")
def health_root():
    return {"ok": True}


@router.get("/paypal")
def health_paypal(request: Request):
    return paypal_health_info(request)
