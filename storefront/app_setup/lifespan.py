"""
Lifespan FastAPI de la boutique.

Démarrage:
  1) rate limiting: FastAPILimiter sur Redis (RATE_LIMIT_REDIS_URL), ou fakeredis en test
  2) préchargement du catalogue (best effort: sinon chargé à la première lecture)
Arrêt:
  - fermeture de FastAPILimiter s'il a été initialisé

Variables d'environnement:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: aucun rate limiting
  - USE_FAKE_REDIS_FOR_TESTS=1: Redis en mémoire (fakeredis)
  - LOCAL_RATE_LIMIT_FALLBACK=1: compteur mémoire local si Redis est indisponible
  - WARM_CATALOG_ON_STARTUP=0: pas de préchargement du catalogue
"""
import logging
import os
from contextlib import asynccontextmanager

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

try:
    from fakeredis.aioredis import FakeRedis  # extra "test"
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")

def _redis_connection():
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        if FakeRedis is None:
            raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 requiert fakeredis (extra 'test')")
        return FakeRedis(decode_responses=True)
    url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
    return redis.from_url(url, encoding="utf-8", decode_responses=True)

async def _init_rate_limiter(app: FastAPI) -> bool:
    """
    Positionne app.state.rate_limit_enabled.
    Retourne True seulement si FastAPILimiter est prêt (donc à fermer à l'arrêt).
    """
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("rate limiting disabled (tests)")
        return False
    try:
        await FastAPILimiter.init(_redis_connection())
    except Exception as exc:
        local = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        app.state.rate_limit_enabled = local
        logger.warning("rate limiting Redis init failed (%s), local fallback=%s", exc, local)
        return False
    app.state.rate_limit_enabled = True
    logger.info("rate limiting enabled (redis)")
    return True

def _warm_catalog(app: FastAPI) -> None:
    if os.getenv("WARM_CATALOG_ON_STARTUP", "1") != "1":
        return
    try:
        products = app.state.catalog.get_products()
        logger.info("catalog warmed products=%s", len(products))
    except Exception:
        logger.exception("catalog warm-up failed")

@asynccontextmanager
async def lifespan(app: FastAPI):
    limiter_ready = await _init_rate_limiter(app)
    _warm_catalog(app)
    yield
    if limiter_ready:
        await FastAPILimiter.close()
