"""
Logique panier pure (pas de PayPal, pas d'I/O).
Valide le panier brut envoyé par le front et le convertit en line items PayPal.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from .errors import ValidationError

DEFAULT_CATEGORY = "DIGITAL_GOODS"
CENT = Decimal("0.01")
# Plafonds d'un prix unitaire / total de commande et d'une quantité
MAX_AMOUNT = Decimal("999999999999.99")
MAX_QUANTITY = 1_000_000_000

# module checkout_api.payments.cart
def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convertit un montant brut (int, float, Decimal, str numérique) en Decimal.
    - Passe par la représentation texte pour les floats (5.005 reste 5.005).
    - Retourne None si la valeur n'est pas un nombre fini (bool, NaN, inf, texte).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def round_cents(amount: Decimal) -> Decimal:
    """Arrondi au centime le plus proche, demi vers le haut (0.125 -> 0.13)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def amount_to_string(value: Any) -> str:
    """
    Formate un montant avec exactement deux décimales ("39" -> "39.00", 9.999 -> "10.00").
    Une valeur non numérique est traitée comme 0.
    """
    amount = to_decimal(value)
    return f"{round_cents(amount or Decimal(0)):.2f}"


def _parse_quantity(raw: Any) -> Optional[int]:
    if raw is None:
        return 1
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if 0 < raw <= MAX_QUANTITY else None
    amount = to_decimal(raw)
    if amount is None or not 0 < amount <= MAX_QUANTITY or amount != amount.to_integral_value():
        return None
    return int(amount)


def _label(index: int, name: Optional[str]) -> str:
    return f'Item #{index} ("{name}")' if name else f"Item #{index}"


def normalize_items(items: Any, currency: str) -> List[Dict[str, Any]]:
    """
    Valide et convertit un panier brut [{id?, name, price, quantity?, category?}, ...]
    en line items PayPal, dans l'ordre d'entrée.
    - Soulève ValidationError si le panier est absent, n'est pas une liste ou est vide.
    - Soulève ValidationError au premier article invalide (nom vide, prix <= 0, non fini ou > MAX_AMOUNT,
      quantité non entière, <= 0 ou > MAX_QUANTITY, catégorie non textuelle); rien n'est renvoyé partiellement.
    - unit_amount.value est toujours une chaîne à deux décimales.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError("Missing cart items: no items to purchase.")

    normalized: List[Dict[str, Any]] = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValidationError(f"Item #{index} is not a valid cart entry.")

        raw_name = item.get("name")
        name = raw_name.strip() if isinstance(raw_name, str) else ""
        if not name:
            raise ValidationError(f"Item #{index} is missing a name.")

        price = to_decimal(item.get("price"))
        if price is None or not 0 < price <= MAX_AMOUNT or round_cents(price) <= 0:
            raise ValidationError(f"{_label(index, name)} has an invalid price.")

        quantity = _parse_quantity(item.get("quantity"))
        if quantity is None or quantity <= 0:
            raise ValidationError(f"{_label(index, name)} has an invalid quantity.")

        category = item.get("category")
        if category is None:
            category = DEFAULT_CATEGORY
        elif not isinstance(category, str):
            raise ValidationError(f"{_label(index, name)} has an invalid category.")

        item_id = item.get("id")
        normalized.append({
            "reference_id": str(item_id) if item_id not in (None, "") else f"ITEM-{index}",
            "name": name,
            "quantity": str(quantity),
            "category": category,
            "unit_amount": {
                "currency_code": currency,
                "value": amount_to_string(price),
            },
        })
    return normalized
