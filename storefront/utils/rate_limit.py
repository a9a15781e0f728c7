"""
Rate limiting optionnel des endpoints sensibles (création de sessions Stripe).

- Identité du visiteur: hash du cookie panier si présent, sinon IP; le chemin fait partie de la clé.
- Redis (fastapi-limiter) quand l'init du lifespan a réussi (app.state.rate_limit_enabled).
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire du process (dev, tests).
- Redis qui tombe en cours de route ne bloque pas les clients.
"""
import hashlib
import logging
import os
import time
from typing import Any, Dict, List

from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from storefront.config import CART_COOKIE_NAME

logger = logging.getLogger(__name__)

def _local_fallback() -> bool:
    return os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"

def _visitor_key(req: Request) -> str:
    cart_token = req.cookies.get(CART_COOKIE_NAME)
    if cart_token:
        digest = hashlib.sha256(cart_token.encode("utf-8")).hexdigest()[:16]
        return f"cart:{digest}:{req.url.path}"
    host = req.client.host if req.client else "local"
    return f"ip:{host}:{req.url.path}"

async def _identifier(req: Request) -> str:
    return _visitor_key(req)

def _hit_local_window(request: Request, times: int, seconds: int) -> None:
    """Fenêtre glissante stockée sur app.state; 429 quand la limite est atteinte."""
    store: Dict[str, List[float]] = getattr(request.app.state, "_rl_store", None) or {}
    key = _visitor_key(request)
    now = time.time()
    recent = [t for t in store.get(key, []) if now - t < seconds]
    if len(recent) >= times:
        raise HTTPException(status_code=429, detail="Too Many Requests")
    store[key] = recent + [now]
    request.app.state._rl_store = store

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request, response: Response):
        if _local_fallback():
            _hit_local_window(request, times, seconds)
            return
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return
        try:
            await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception as exc:
            logger.warning("rate limit check skipped: %s", exc)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    ready = getattr(FastAPILimiter, "redis", None) is not None
    return {
        "enabled": None if enabled is None else bool(enabled),
        "ready": ready,
        "backend": "redis" if ready else None,
        "local_fallback": _local_fallback(),
    }
