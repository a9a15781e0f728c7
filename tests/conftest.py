import os

# Avant tout import de l'application: pas de Redis ni de préchargement Stripe en tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("WARM_CATALOG_ON_STARTUP", "0")

import pytest
from decimal import Decimal
from typing import Generator, List
from fastapi.testclient import TestClient

from storefront.app_setup.factory import create_app
from storefront.cart.store import CartStore
from storefront.catalog.models import Addon, Product
from storefront.catalog.provider import CatalogProvider

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture
def products() -> List[Product]:
    """Catalogue de test: A (30.00) avec add-ons, B (12.50) sans add-on."""
    return [
        Product(
            id="A",
            name="Website Package",
            description="Professional website",
            price=Decimal("30.00"),
            image="/window.svg",
            tags=["service"],
            addons=[
                Addon(id="ecommerce", name="E-commerce Integration", description="Cart and payments", price=Decimal("15.00")),
                Addon(id="blog", name="Blog System", description="", price=Decimal("10.00")),
            ],
        ),
        Product(
            id="B",
            name="Logo",
            description="",
            price=Decimal("12.50"),
            image="https://cdn.example.test/logo.png",
        ),
    ]

@pytest.fixture
def catalog(products) -> CatalogProvider:
    return CatalogProvider(lambda: products, ttl=300)

@pytest.fixture
def cart_store() -> CartStore:
    return CartStore(secret_key="test-secret", secure=False)

@pytest.fixture
def app(catalog, cart_store):
    return create_app(catalog=catalog, cart_store=cart_store)

@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Stripe configuré (clés factices) pour les tests qui l'exigent
@pytest.fixture
def stripe_configured(monkeypatch):
    from storefront import config
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_dummy")
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", "whsec_test")
    return config
