# module storefront.app
"""
Instance ASGI globale construite par la factory (storefront.app_setup.factory).
Toute la configuration (middlewares, routers, état applicatif) est centralisée dans create_app().
"""
import logging
import os

from storefront.app_setup.factory import create_app

logging.basicConfig(level=os.getenv("LOG_LEVEL", "info").upper())

# App globale
app = create_app()
