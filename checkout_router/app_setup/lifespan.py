"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Journalise le catalogue chargé (bannière de démarrage).
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d'environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l'init échoue
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter
from redis.exceptions import RedisError

from checkout_router.config import APP_VERSION, RATE_LIMIT_REDIS_URL, RATE_LIMIT_SECONDS, RATE_LIMIT_TIMES

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None


def log_startup_banner(app: FastAPI, logger: logging.Logger) -> None:
    catalog = app.state.catalog
    logger.info("Pronto Checkout Router v%s starting", APP_VERSION)
    logger.info("Service catalog loaded with %s services", len(catalog))
    for entry in catalog:
        logger.info("  - %s: %s%s", entry.code, entry.display_name, " (free)" if entry.is_free else "")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure le rate limiting et gère les fallbacks.
    - En cas d'échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    - Les logs indiquent l'état effectif (enabled/disabled) pour observabilité.
    """
    logger = logging.getLogger("uvicorn.error")
    log_startup_banner(app, logger)
    r = None
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        yield
        return

    try:
        use_fake = os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1"
        if use_fake:
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            r = aioredis.from_url(RATE_LIMIT_REDIS_URL, encoding="utf-8", decode_responses=True)
            await r.ping()

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled: %s requests per %ss per IP", RATE_LIMIT_TIMES, RATE_LIMIT_SECONDS)
    except (RedisError, OSError, RuntimeError) as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            app.state.rate_limit_enabled = False
            logger.warning(f"Rate limiting disabled due to init error: {e}")

    yield

    # Phase shutdown
    if r is not None and FastAPILimiter.redis is r:
        await FastAPILimiter.close()
