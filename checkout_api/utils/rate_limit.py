from typing import Dict, Any
from urllib.parse import urlparse
from fastapi import Request, Response, HTTPException
import logging
import os
import time

logger = logging.getLogger(__name__)


def _client_key(request: Request) -> str:
    # Pas de session côté checkout: clé = IP + chemin
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{request.url.path}"


def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI de limitation de débit.
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (app.state), clés inactives purgées
    - app.state.rate_limit_enabled absent ou False: aucune limite
    - sinon: fastapi-limiter (Redis) initialisé dans le lifespan
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            # store: clé -> (fenêtre en secondes, horodatages des hits)
            store = getattr(request.app.state, "_rl_store", {})
            for idle in [k for k, (window, hits) in store.items() if now - hits[-1] >= window]:
                del store[idle]
            request.app.state._rl_store = store
            _, hits = store.get(key, (seconds, []))
            hits = [t for t in hits if now - t < seconds]
            if len(hits) >= times:
                store[key] = (seconds, hits)
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = (seconds, hits)
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _client_key(req)

        try:
            await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible: pas de 429 en prod, on laisse passer
            logger.warning("rate limiter unavailable, request allowed path=%s", request.url.path)
    return _dep


def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    limiter_ready = False
    try:
        from fastapi_limiter import FastAPILimiter
        limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    except ImportError:
        limiter_ready = False
    backend = "redis" if limiter_ready else None
    if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
        backend = "memory"

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": backend,
    }

    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if backend == "redis" and redis_url:
        p = urlparse(redis_url)
        info["redis"] = {
            "scheme": p.scheme,
            "host": p.hostname,
            "port": p.port,
        }
    return info
