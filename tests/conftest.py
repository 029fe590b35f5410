import json
from typing import Any, Callable, Dict, Generator, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from checkout_api.app import create_app
from checkout_api.config import PayPalSettings
from checkout_api.payments.paypal_client import PayPalClient
from checkout_api.payments.repository import TransactionRepository
from checkout_api.payments.service import CheckoutService

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def _no_rate_limiter(monkeypatch):
    # Pas de Redis en tests: le lifespan désactive le limiter
    monkeypatch.setenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)


CAPTURE_COMPLETED: Dict[str, Any] = {
    "id": "O1",
    "purchase_units": [
        {
            "payments": {
                "captures": [
                    {"id": "C1", "status": "COMPLETED", "amount": {"value": "39.00", "currency_code": "USD"}}
                ]
            }
        }
    ],
}


class FakePayPalClient:
    """Double du PayPalClient: enregistre les appels et renvoie des réponses préparées."""

    def __init__(self, order_response=None, capture_response=None, error: Optional[Exception] = None):
        self.order_response = order_response if order_response is not None else {"id": "ORDER1", "status": "CREATED"}
        self.capture_response = capture_response if capture_response is not None else CAPTURE_COMPLETED
        self.error = error
        self.create_calls: List[Dict[str, Any]] = []
        self.capture_calls: List[Dict[str, Any]] = []

    def create_order(self, payload, request_id=None):
        self.create_calls.append({"payload": payload, "request_id": request_id})
        if self.error:
            raise self.error
        return self.order_response

    def capture_order(self, order_id, request_id=None):
        self.capture_calls.append({"order_id": order_id, "request_id": request_id})
        if self.error:
            raise self.error
        return self.capture_response


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "data" / "transactions.jsonl"


@pytest.fixture
def settings(log_path) -> PayPalSettings:
    return PayPalSettings(
        client_id="test-client-id",
        client_secret="test-secret",
        environment="sandbox",
        currency="USD",
        brand_name="Test Store",
        transactions_log=log_path,
    )


@pytest.fixture
def fake_paypal() -> FakePayPalClient:
    return FakePayPalClient()


@pytest.fixture
def service(settings, fake_paypal, log_path) -> CheckoutService:
    return CheckoutService(settings, fake_paypal, TransactionRepository(log_path))


@pytest.fixture
def client(service) -> Generator[TestClient, None, None]:
    app = create_app(service=service)
    with TestClient(app) as c:
        yield c


def read_log(path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def mock_paypal(settings):
    """
    Fabrique un PayPalClient réel branché sur httpx.MockTransport.
    Le handler reçoit chaque requête hors token; les requêtes vues sont dans client.requests.
    """
    def _factory(handler: Callable[[httpx.Request], httpx.Response], token_response: Optional[httpx.Response] = None,
                 paypal_settings: Optional[PayPalSettings] = None):
        seen: List[httpx.Request] = []

        def _dispatch(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/v1/oauth2/token":
                if token_response is not None:
                    return token_response
                return httpx.Response(200, json={"access_token": "A21AA-token", "expires_in": 32400})
            return handler(request)

        client = PayPalClient(paypal_settings or settings, http_client=httpx.Client(transport=httpx.MockTransport(_dispatch)))
        client.requests = seen
        return client

    return _factory


@pytest.fixture
def capture_completed() -> Dict[str, Any]:
    return json.loads(json.dumps(CAPTURE_COMPLETED))


@pytest.fixture(name="read_log")
def read_log_fixture():
    return read_log
