"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Signale au démarrage l'absence d'identifiants PayPal (le process démarre quand même).
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d'environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l'init échoue
  - RATE_LIMIT_REDIS_URL: URL Redis (défaut redis://127.0.0.1:6379/0)
"""
import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter
from redis import asyncio as aioredis


async def _init_rate_limiter(app: FastAPI, logger: logging.Logger) -> None:
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return
    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            from fakeredis import aioredis as fake_aioredis  # tests only
            r = fake_aioredis.FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning("Rate limiting falling back to local in-memory due to init error: %s", e)
        else:
            app.state.rate_limit_enabled = False
            logger.warning("Rate limiting disabled due to init error: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Démarrage: contrôle des identifiants PayPal puis rate limiting.
    Arrêt: fermeture du client HTTP PayPal et de la connexion Redis du limiter.
    """
    logger = logging.getLogger("uvicorn.error")
    settings = app.state.settings
    if not settings.has_credentials:
        logger.warning(
            "PAYPAL_CLIENT_ID or PAYPAL_CLIENT_SECRET is missing. Create a .env file before trying to accept payments."
        )
    logger.info("PayPal environment=%s currency=%s", settings.environment, settings.currency)

    await _init_rate_limiter(app, logger)

    yield

    client = getattr(app.state.checkout_service, "client", None)
    if hasattr(client, "close"):
        client.close()
    if getattr(app.state, "rate_limit_enabled", False) and getattr(FastAPILimiter, "redis", None) is not None:
        await FastAPILimiter.close()
