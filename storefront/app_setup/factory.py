"""
Factory d’application recommandée pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d’initialisation de manière lisible et testable.
"""
from typing import Optional

from fastapi import FastAPI

from storefront import config
from storefront.cart.store import CartStore
from storefront.catalog.provider import CatalogProvider
from storefront.catalog.stripe_catalog import fetch_products_from_stripe
from .lifespan import lifespan
from .middlewares import (
    register_basic_middlewares,
    register_force_https_middleware,
    register_no_cache_middleware,
    register_security_middleware,
)
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app(
    catalog: Optional[CatalogProvider] = None,
    cart_store: Optional[CartStore] = None,
) -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      - l'état applicatif: fournisseur de catalogue (cache TTL) et store du panier
      - middlewares de base, sécurité, no-cache (+ HTTPS forcé si COOKIE_SECURE)
      - gestionnaires d’exceptions
      - tous les routers (cart, catalog, payments, health)
    Retour:
      FastAPI prêt à être utilisé par le serveur ASGI.
    """
    app = FastAPI(title="Storefront API", lifespan=lifespan)
    app.state.catalog = catalog or CatalogProvider(fetch_products_from_stripe, ttl=config.CATALOG_CACHE_TTL)
    app.state.cart_store = cart_store or CartStore()

    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    # Ajouter le middleware HTTPS en dernier pour qu'il s’exécute en premier
    if config.COOKIE_SECURE:
        register_force_https_middleware(app)
    return app
