# checkout_api.config
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)

DATA_DIR = BASE_DIR / "data"

"""
Configuration centrale du backend de paiement.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise les secrets PayPal et l'environnement (sandbox/live)
- Construit un PayPalSettings immuable, injecté dans le client PayPal et le service checkout
"""

PAYPAL_BASE_URLS = {
    "sandbox": "https://api-m.sandbox.paypal.com",
    "live": "https://api-m.paypal.com",
}

DEFAULT_CURRENCY = "USD"
DEFAULT_BRAND_NAME = "Payment Sample Store"


def _clean_env(v: Optional[str]) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")


def _env_float(name: str) -> Optional[float]:
    raw = _clean_env(os.getenv(name))
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class PayPalSettings:
    """
    Paramètres PayPal résolus une seule fois au démarrage.
    - environment: "sandbox" ou "live" (toute autre valeur retombe sur sandbox)
    - currency: code ISO affiché et envoyé à PayPal (ex: "USD")
    - timeout: None => timeout par défaut du transport httpx
    """
    client_id: str = ""
    client_secret: str = ""
    environment: str = "sandbox"
    currency: str = DEFAULT_CURRENCY
    brand_name: str = DEFAULT_BRAND_NAME
    transactions_log: Path = DATA_DIR / "transactions.jsonl"
    timeout: Optional[float] = None

    @property
    def base_url(self) -> str:
        return PAYPAL_BASE_URLS.get(self.environment, PAYPAL_BASE_URLS["sandbox"])

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


def load_settings() -> PayPalSettings:
    """
    Lit les variables d'environnement PayPal et retourne un PayPalSettings.
    - PAYPAL_ENVIRONMENT inconnu => sandbox
    - PAYPAL_CURRENCY est mis en majuscules
    - Des identifiants absents ne lèvent pas d'erreur ici (cf. ConfigurationError au premier appel PayPal)
    """
    environment = _clean_env(os.getenv("PAYPAL_ENVIRONMENT") or "sandbox").lower()
    if environment not in PAYPAL_BASE_URLS:
        environment = "sandbox"
    log_path = _clean_env(os.getenv("TRANSACTIONS_LOG"))
    return PayPalSettings(
        client_id=_clean_env(os.getenv("PAYPAL_CLIENT_ID")),
        client_secret=_clean_env(os.getenv("PAYPAL_CLIENT_SECRET")),
        environment=environment,
        currency=(_clean_env(os.getenv("PAYPAL_CURRENCY")) or DEFAULT_CURRENCY).upper(),
        brand_name=_clean_env(os.getenv("BRAND_NAME")) or DEFAULT_BRAND_NAME,
        transactions_log=Path(log_path) if log_path else DATA_DIR / "transactions.jsonl",
        timeout=_env_float("PAYPAL_TIMEOUT_SECONDS"),
    )


# CORS (le front Vite/React tourne par défaut sur :3000)
CORS_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()
]

