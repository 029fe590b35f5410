"""
Extraction tolérante d'un résumé stable depuis une réponse de capture PayPal.
La forme du payload varie selon le statut (un DECLINED peut omettre des champs d'un COMPLETED):
chaque accès renvoie None plutôt que de lever.
"""
from typing import Any, Dict


def _dig(node: Any, *path: Any) -> Any:
    """
    Descend dans un payload JSON par clés (str) ou index (int).
    Retourne None dès qu'un niveau manque ou n'a pas le bon type.
    """
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or not -len(node) <= key < len(node):
                return None
        elif not isinstance(node, dict):
            return None
        node = node[key] if isinstance(key, int) else node.get(key)
        if node is None:
            return None
    return node


# module checkout_api.payments.summary
def extract_capture_summary(capture_payload: Any) -> Dict[str, Any]:
    """
    Construit le CaptureSummary (première purchase unit, première capture).
    - Fonction totale: extract_capture_summary({}) renvoie tous les champs à None et items=[].
    - Champs: orderId, captureId, status, payerEmail, payerGivenName, payerSurname,
      amount, currency, items, createTime, updateTime.
    """
    purchase_unit = _dig(capture_payload, "purchase_units", 0)
    capture = _dig(purchase_unit, "payments", "captures", 0)
    items = _dig(purchase_unit, "items")
    return {
        "orderId": _dig(capture_payload, "id"),
        "captureId": _dig(capture, "id"),
        "status": _dig(capture, "status"),
        "payerEmail": _dig(capture_payload, "payer", "email_address"),
        "payerGivenName": _dig(capture_payload, "payer", "name", "given_name"),
        "payerSurname": _dig(capture_payload, "payer", "name", "surname"),
        "amount": _dig(capture, "amount", "value"),
        "currency": _dig(capture, "amount", "currency_code"),
        "items": items if isinstance(items, list) else [],
        "createTime": _dig(capture, "create_time"),
        "updateTime": _dig(capture, "update_time"),
    }
