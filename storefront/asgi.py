"""
Entrée ASGI pour les serveurs de production: `uvicorn storefront.asgi:app`.
La construction de l'application reste dans storefront.app_setup.factory.
"""
from storefront.app import app

__all__ = ["app"]
