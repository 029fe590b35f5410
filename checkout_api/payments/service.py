"""
Cas d'usage 'payments': orchestre cart, order, client PayPal et journal des transactions.
Aucun état partagé entre create et capture: la commande ne vit que chez PayPal entre les deux.
"""
import logging
from typing import Any, Dict, Optional

from checkout_api.config import PayPalSettings
from . import cart as cart_logic
from . import order as order_logic
from .errors import GatewayApiError, ValidationError
from .paypal_client import PayPalClient
from .repository import TransactionRepository, persist_capture

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Orchestrateur checkout, construit une fois au démarrage.
    - settings: PayPalSettings (devise, marque, environnement)
    - client: PayPalClient (ou tout objet exposant create_order / capture_order)
    - repository: TransactionRepository (journal JSONL)
    """

    def __init__(self, settings: PayPalSettings, client: PayPalClient, repository: TransactionRepository):
        self.settings = settings
        self.client = client
        self.repository = repository

    def public_config(self) -> Dict[str, Any]:
        """Config exposée au front: clientId vide si les identifiants manquent (pas de crash)."""
        return {
            "clientId": self.settings.client_id if self.settings.has_credentials else "",
            "currency": self.settings.currency,
            "environment": self.settings.environment,
        }

    def create_order(self, items: Any, request_id: Optional[str] = None) -> str:
        """
        Panier brut -> id de commande PayPal.
        Étapes:
          1) normalize_items (ValidationError avant tout appel PayPal)
          2) build_order_request (total = item_total)
          3) client.create_order
        """
        normalized = cart_logic.normalize_items(items, self.settings.currency)
        payload = order_logic.build_order_request(
            normalized,
            currency=self.settings.currency,
            brand_name=self.settings.brand_name,
        )
        order = self.client.create_order(payload, request_id=request_id)
        order_id = order.get("id")
        if not order_id:
            raise GatewayApiError("PayPal did not return an order id.", paypal=order or None)
        logger.info(
            "payments.create_order id=%s items=%s total=%s %s",
            order_id, len(normalized), payload["purchase_units"][0]["amount"]["value"], self.settings.currency,
        )
        return order_id

    def capture_order(self, order_id: str, request_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Capture une commande approuvée puis l'enregistre (best-effort).
        Retourne le payload PayPal tel quel: c'est au front d'interpréter status
        (COMPLETED, DECLINED, PENDING...).
        """
        order_id = (order_id or "").strip()
        if not order_id:
            raise ValidationError("Missing order id.")
        capture = self.client.capture_order(order_id, request_id=request_id)
        persist_capture(capture, self.repository)
        logger.info("payments.capture_order id=%s", order_id)
        return capture


def build_checkout_service(settings: PayPalSettings) -> CheckoutService:
    """Assemble le service avec le client PayPal et le journal configurés."""
    return CheckoutService(
        settings=settings,
        client=PayPalClient(settings),
        repository=TransactionRepository(settings.transactions_log),
    )
