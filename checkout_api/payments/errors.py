"""
Hiérarchie d'erreurs de la feature 'payments'.
Chaque erreur porte le code HTTP à renvoyer et, pour PayPal, le corps d'erreur amont.
Le handler global (app_setup.exception_handlers) les transforme en {message, paypal?}.
"""
from typing import Any, Dict, Optional


class CheckoutError(Exception):
    status_code = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None, paypal: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.paypal = paypal

    def to_response(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"message": self.message}
        if self.paypal:
            content["paypal"] = self.paypal
        return content


class ValidationError(CheckoutError):
    """Panier mal formé: toujours la faute de l'appelant."""
    status_code = 400


class ConfigurationError(CheckoutError):
    """Identifiants PayPal absents: faute d'exploitation, pas d'appel réseau tenté."""
    status_code = 500


class GatewayError(CheckoutError):
    status_code = 502

    def __init__(self, message: str, *, upstream_status: Optional[int] = None, paypal: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=self._status_for(upstream_status), paypal=paypal)
        self.upstream_status = upstream_status

    @staticmethod
    def _status_for(upstream_status: Optional[int]) -> int:
        return 502


class GatewayAuthError(GatewayError):
    """Échange client-credentials refusé par PayPal."""


class GatewayApiError(GatewayError):
    """
    Appel REST PayPal en échec.
    Les 4xx amont sont conservés (ex: 422 ORDER_NOT_APPROVED, 404 RESOURCE_NOT_FOUND),
    sauf 401/403 qui visent nos identifiants et deviennent 502.
    """

    @staticmethod
    def _status_for(upstream_status: Optional[int]) -> int:
        if upstream_status is not None and 400 <= upstream_status < 500 and upstream_status not in (401, 403):
            return upstream_status
        return 502


class PersistenceError(CheckoutError):
    """Échec d'écriture du journal des transactions (jamais renvoyé au payeur)."""
