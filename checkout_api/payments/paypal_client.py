"""
Adaptateur PayPal: centralise l'authentification OAuth2 et les appels REST Orders v2.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from checkout_api.config import PayPalSettings
from .errors import ConfigurationError, GatewayApiError, GatewayAuthError

logger = logging.getLogger(__name__)

TOKEN_ENDPOINT = "/v1/oauth2/token"
ORDERS_ENDPOINT = "/v2/checkout/orders"


def parse_json_body(response: httpx.Response) -> Dict[str, Any]:
    """
    Parse défensif du corps JSON PayPal.
    - Corps vide, non-JSON ou non-objet => {} (jamais d'exception).
    """
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


# module checkout_api.payments.paypal_client
class PayPalClient:
    """
    Client PayPal minimal (client-credentials + bearer).
    - settings: PayPalSettings injecté (identifiants, environnement, timeout)
    - http_client: httpx.Client optionnel (ex: MockTransport en tests)
    Aucun cache de token: chaque appel REST ré-authentifie.
    """

    def __init__(self, settings: PayPalSettings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        if http_client is None:
            http_client = httpx.Client(timeout=settings.timeout) if settings.timeout else httpx.Client()
        self._http = http_client

    def close(self) -> None:
        self._http.close()

    def authenticate(self) -> str:
        """
        Échange client-credentials sur /v1/oauth2/token et retourne l'access token.
        - ConfigurationError si PAYPAL_CLIENT_ID / PAYPAL_CLIENT_SECRET sont absents (aucun appel réseau).
        - GatewayAuthError (statut + corps amont) si PayPal ne répond pas en 2xx.
        """
        if not self.settings.has_credentials:
            raise ConfigurationError("Missing PayPal credentials.")

        try:
            response = self._http.post(
                f"{self.settings.base_url}{TOKEN_ENDPOINT}",
                auth=(self.settings.client_id, self.settings.client_secret),
                data={"grant_type": "client_credentials"},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error("paypal.authenticate transport error: %s", e)
            raise GatewayAuthError("Unable to reach PayPal.") from e

        body = parse_json_body(response)
        if not response.is_success:
            logger.error("paypal.authenticate failed: status=%s body=%s", response.status_code, response.text)
            raise GatewayAuthError(
                f"Failed to authenticate with PayPal: {response.status_code}",
                upstream_status=response.status_code,
                paypal=body or ({"body": response.text} if response.text else None),
            )

        token = body.get("access_token")
        if not token:
            raise GatewayAuthError("PayPal token response has no access_token.", upstream_status=response.status_code)
        return token

    def request(
        self,
        endpoint: str,
        method: str = "POST",
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Appel REST PayPal authentifié (un token neuf par appel).
        - body: sérialisé en JSON si fourni
        - headers: en-têtes additionnels (ex: PayPal-Request-Id)
        Retour: corps JSON parsé ({} si vide/non-JSON).
        Erreur: GatewayApiError avec statut amont et corps d'erreur parsé.
        """
        access_token = self.authenticate()
        request_headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        try:
            response = self._http.request(
                method,
                f"{self.settings.base_url}{endpoint}",
                json=body,
                headers=request_headers,
            )
        except httpx.HTTPError as e:
            logger.error("paypal.request transport error endpoint=%s: %s", endpoint, e)
            raise GatewayApiError("Unable to reach PayPal.") from e

        response_body = parse_json_body(response)
        if not response.is_success:
            logger.error(
                "paypal.request failed endpoint=%s status=%s body=%s",
                endpoint, response.status_code, response_body,
            )
            raise GatewayApiError(
                response_body.get("message") or "PayPal API error.",
                upstream_status=response.status_code,
                paypal=response_body,
            )
        return response_body

    def create_order(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        """POST /v2/checkout/orders. request_id est transmis en PayPal-Request-Id (dédoublonnage amont)."""
        return self.request(ORDERS_ENDPOINT, method="POST", body=payload, headers=_request_id_header(request_id))

    def capture_order(self, order_id: str, request_id: Optional[str] = None) -> Dict[str, Any]:
        """POST /v2/checkout/orders/{id}/capture (sans corps)."""
        endpoint = f"{ORDERS_ENDPOINT}/{quote(order_id, safe='')}/capture"
        return self.request(endpoint, method="POST", headers=_request_id_header(request_id))


def _request_id_header(request_id: Optional[str]) -> Optional[Dict[str, str]]:
    return {"PayPal-Request-Id": request_id} if request_id else None
