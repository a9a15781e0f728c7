# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# .env à la racine du dépôt; les variables déjà exportées restent prioritaires
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale de la boutique.

- Normalise et expose les secrets Stripe et la clé de signature du panier
- Paramètre le cookie panier (nom, durée, secure) et le cache catalogue
- Fournit les URLs de redirection du checkout
"""

def _clean_env(v: str) -> str:
    """Valeur brute d'environnement sans espaces ni guillemets parasites (jamais None)."""
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# Stripe: clés publiques/privées et secret webhook
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or os.getenv("NEXT_PUBLIC_STRIPE_PUBLISHABLE_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
STRIPE_MAX_RETRIES = _int_env("STRIPE_MAX_RETRIES", 2)

# Devise unique (pas de multi-devises)
CURRENCY = _clean_env(os.getenv("CURRENCY") or "usd").lower()

# Cookie panier: signé (itsdangerous), httponly, 7 jours, rafraîchi à chaque écriture
CART_SECRET_KEY = _clean_env(os.getenv("CART_SECRET_KEY") or "replace_me_with_a_long_random_secret")
CART_COOKIE_NAME = _clean_env(os.getenv("CART_COOKIE_NAME") or "cart")
CART_MAX_AGE = _int_env("CART_MAX_AGE", 60 * 60 * 24 * 7)
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# Catalogue: durée de vie du cache (secondes)
CATALOG_CACHE_TTL = _int_env("CATALOG_CACHE_TTL", 5 * 60)
DEFAULT_PRODUCT_IMAGE = "/window.svg"

# Origines du front (cookies inclus) et hôtes acceptés
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

BASE_URL = _clean_env(os.getenv("BASE_URL") or os.getenv("NEXT_PUBLIC_BASE_URL") or "http://localhost:8000").rstrip("/")

# Redirections Stripe Checkout (relatives à BASE_URL)
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/store/checkout/success?session_id={CHECKOUT_SESSION_ID}")
CHECKOUT_CANCEL_PATH = os.getenv("CHECKOUT_CANCEL_PATH", "/store/checkout/cancel")
