"""
Construction du payload de création de commande PayPal (Orders v2), sans effet de bord.
"""
from decimal import Decimal
from typing import Any, Dict, List

from .cart import MAX_AMOUNT, round_cents
from .errors import ValidationError

# module checkout_api.payments.order
def calculate_order_total(items: List[Dict[str, Any]]) -> str:
    """
    Somme unit_amount.value x quantity sur les line items normalisés, arrondie au centime.
    Soulève ValidationError si le total dépasse MAX_AMOUNT.
    """
    total = sum(
        (Decimal(item["unit_amount"]["value"]) * int(item["quantity"]) for item in items),
        Decimal(0),
    )
    if total > MAX_AMOUNT:
        raise ValidationError("Order total exceeds the maximum amount.")
    return f"{round_cents(total):.2f}"


def build_order_request(items: List[Dict[str, Any]], *, currency: str, brand_name: str) -> Dict[str, Any]:
    """
    Enveloppe les line items dans une requête Orders v2 intent=CAPTURE.
    - amount.value et amount.breakdown.item_total.value reçoivent le même total:
      PayPal rejette la commande si les deux divergent (taxes/remises futures à répercuter des deux côtés).
    - application_context: pas de livraison, paiement immédiat, nom de marque affiché au payeur.
    """
    total = calculate_order_total(items)
    return {
        "intent": "CAPTURE",
        "purchase_units": [
            {
                "amount": {
                    "currency_code": currency,
                    "value": total,
                    "breakdown": {
                        "item_total": {
                            "currency_code": currency,
                            "value": total,
                        },
                    },
                },
                "items": items,
            }
        ],
        "application_context": {
            "shipping_preference": "NO_SHIPPING",
            "user_action": "PAY_NOW",
            "brand_name": brand_name,
        },
    }
