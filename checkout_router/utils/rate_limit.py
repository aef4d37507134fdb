from math import ceil
from typing import Dict, Any
from fastapi import Request, Response, HTTPException
from starlette.status import HTTP_429_TOO_MANY_REQUESTS
import logging
import os
import time
from urllib.parse import urlparse

from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.exceptions import RedisError

from checkout_router import config

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many checkout requests from this IP, please try again later."


def client_key(request: Request) -> str:
    # IP cliente (réelle derrière proxy grâce à ProxyHeadersMiddleware) + chemin
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{request.url.path}"


def _too_many_requests(retry_after: int) -> HTTPException:
    return HTTPException(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        detail=RATE_LIMIT_MESSAGE,
        headers={"Retry-After": str(max(retry_after, 1))},
    )


async def _limiter_callback(request: Request, response: Response, pexpire: int):
    raise _too_many_requests(ceil(pexpire / 1000))


def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request, response: Response):
        # Forcer le fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            # Purge des clés dont la fenêtre est expirée
            for stale in [k for k, ts in store.items() if not ts or now - ts[-1] >= seconds]:
                del store[stale]
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise _too_many_requests(int(seconds - (now - hits[0])))
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        # Respecter le flag global
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        async def _identifier(req: Request) -> str:
            return client_key(req)

        limiter = RateLimiter(times=times, seconds=seconds, identifier=_identifier, callback=_limiter_callback)
        try:
            return await limiter(request, response)
        except RedisError:
            # Redis indisponible: pas de 429 en prod, la requête passe
            logger.warning("rate_limit.redis_unavailable key=%s", client_key(request), exc_info=True)
            return
    return _dep


def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    backend = "redis" if limiter_ready else None

    if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1" and not limiter_ready:
        backend = "memory"

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": backend,
    }

    if backend == "redis":
        redis_url = config.RATE_LIMIT_REDIS_URL
        if redis_url:
            p = urlparse(redis_url)
            info["redis"] = {
                "scheme": p.scheme,
                "host": p.hostname,
                "port": p.port,
            }

    return info
