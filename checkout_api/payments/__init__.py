"""
Module 'payments' (feature-first): point d'entrée public.
Réunit logique panier, construction de commande, client PayPal, journal des transactions et service.
"""

from .errors import (
    CheckoutError,
    ValidationError,
    ConfigurationError,
    GatewayError,
    GatewayAuthError,
    GatewayApiError,
    PersistenceError,
)
from .cart import normalize_items, amount_to_string
from .order import build_order_request, calculate_order_total
from .paypal_client import PayPalClient
from .summary import extract_capture_summary
from .repository import TransactionRepository, persist_capture
from .service import CheckoutService, build_checkout_service

__all__ = [
    # errors
    "CheckoutError",
    "ValidationError",
    "ConfigurationError",
    "GatewayError",
    "GatewayAuthError",
    "GatewayApiError",
    "PersistenceError",
    # cart / order
    "normalize_items",
    "amount_to_string",
    "build_order_request",
    "calculate_order_total",
    # paypal
    "PayPalClient",
    # recorder
    "extract_capture_summary",
    "TransactionRepository",
    "persist_capture",
    # services
    "CheckoutService",
    "build_checkout_service",
]
