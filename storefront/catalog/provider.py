"""
Fournisseur de catalogue avec cache explicite (snapshot + fetched_at) et TTL.
- Une instance est créée par application (app.state.catalog), pas d'état global au module.
- Le cache est invalidé à la lecture quand le TTL est dépassé.
- Un snapshot périmé n'affecte que l'exactitude des prix jusqu'au prochain rafraîchissement.
"""
import logging
import time
from typing import Callable, Dict, List, Optional

from fastapi import Request

from storefront import config
from storefront.catalog.models import Product

logger = logging.getLogger(__name__)


class CatalogCache:
    def __init__(self, snapshot: Optional[List[Product]] = None, fetched_at: float = 0.0):
        self.snapshot = snapshot
        self.fetched_at = fetched_at

    def is_fresh(self, now: float, ttl: float) -> bool:
        return self.snapshot is not None and (now - self.fetched_at) < ttl


class CatalogProvider:
    def __init__(
        self,
        fetch: Callable[[], List[Product]],
        ttl: float = config.CATALOG_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self._ttl = ttl
        self._clock = clock
        self._cache = CatalogCache()

    def get_products(self) -> List[Product]:
        """Retourne le snapshot courant, rechargé via fetch() si absent ou expiré."""
        now = self._clock()
        if self._cache.is_fresh(now, self._ttl):
            return self._cache.snapshot
        products = list(self._fetch())
        self._cache = CatalogCache(products, now)
        logger.info("catalog refreshed products=%s", len(products))
        return products

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.get_products():
            if product.id == product_id:
                return product
        return None

    def products_by_id(self) -> Dict[str, Product]:
        return {p.id: p for p in self.get_products()}

    def invalidate(self) -> None:
        self._cache = CatalogCache()

    def cache_info(self) -> Dict[str, object]:
        cached = self._cache.snapshot is not None
        return {
            "cached": cached,
            "products": len(self._cache.snapshot or []),
            "age_seconds": round(self._clock() - self._cache.fetched_at, 1) if cached else None,
            "ttl_seconds": self._ttl,
        }


def get_catalog(request: Request) -> CatalogProvider:
    """Dépendance FastAPI: le fournisseur attaché à l'application."""
    return request.app.state.catalog
