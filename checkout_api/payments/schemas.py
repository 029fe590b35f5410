"""Schémas de réponse exposés dans l'OpenAPI (le payload de capture reste au format PayPal)."""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ConfigResponse(BaseModel):
    clientId: str
    currency: str
    environment: str


class OrderCreatedResponse(BaseModel):
    id: str


class ErrorResponse(BaseModel):
    message: str
    paypal: Optional[Dict[str, Any]] = None
