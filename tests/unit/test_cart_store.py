import pytest
from itsdangerous import URLSafeTimedSerializer

from storefront.cart.models import RawCartEntry
from storefront.cart.store import CartStore


def _entry(product_id, quantity, addons=None):
    return RawCartEntry(product_id=product_id, quantity=quantity, selected_addons=addons or [])


@pytest.fixture
def store():
    return CartStore(secret_key="unit-secret", secure=False)


def test_dumps_then_loads_restores_cart(store):
    cart = [_entry("A", 2, ["ecommerce"]), _entry("B", 1)]
    assert store.loads(store.dumps(cart)) == cart


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_loads_invalid_token_returns_empty(store, token):
    assert store.loads(token) == []


def test_loads_rejects_other_secret(store):
    other = CartStore(secret_key="other-secret")
    assert store.loads(other.dumps([_entry("A", 1)])) == []


def test_loads_expired_token_returns_empty():
    store = CartStore(secret_key="unit-secret", max_age=-1)
    assert store.loads(store.dumps([_entry("A", 1)])) == []


def test_loads_skips_malformed_items_individually(store):
    serializer = URLSafeTimedSerializer("unit-secret", salt="cart")
    token = serializer.dumps([
        {"productId": "A", "quantity": 1, "selectedAddons": ["ecommerce"]},
        {"productId": "", "quantity": 1},
        {"productId": "B", "quantity": "2"},
        {"productId": "C", "quantity": True},
        "not-a-dict",
        {"id": "D", "quantity": 3},
        {"productId": "E", "quantity": 1, "selectedAddons": "blog"},
    ])
    assert store.loads(token) == [
        _entry("A", 1, ["ecommerce"]),
        _entry("D", 3),
        _entry("E", 1),
    ]


def test_loads_non_list_payload_returns_empty(store):
    serializer = URLSafeTimedSerializer("unit-secret", salt="cart")
    assert store.loads(serializer.dumps({"productId": "A"})) == []
