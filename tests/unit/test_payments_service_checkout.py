import pytest
import stripe
from fastapi import HTTPException

from storefront.cart import pricing
from storefront.cart.models import RawCartEntry
from storefront.payments import service


def _detailed(products, *entries):
    return pricing.resolve([RawCartEntry(product_id=p, quantity=q, selected_addons=a) for p, q, a in entries], products)


def test_process_cart_checkout_returns_session(monkeypatch, stripe_configured, products):
    captured = {}

    def fake_create_session(**kwargs):
        captured.update(kwargs)
        return {"id": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}

    monkeypatch.setattr("storefront.payments.stripe_client.create_session", fake_create_session)
    result = service.process_cart_checkout(_detailed(products, ("A", 2, ["ecommerce"])))

    assert result == {"sessionId": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}
    assert len(captured["line_items"]) == 2
    assert captured["mode"] == "payment"
    assert captured["metadata"]["cart_version"] == "1"
    assert captured["success_url"].endswith("session_id={CHECKOUT_SESSION_ID}")


def test_process_cart_checkout_empty_cart_never_calls_stripe(monkeypatch, stripe_configured, products):
    def fail(**kwargs):
        raise AssertionError("Stripe ne doit pas être appelé")

    monkeypatch.setattr("storefront.payments.stripe_client.create_session", fail)
    with pytest.raises(HTTPException) as exc:
        service.process_cart_checkout(_detailed(products))
    assert exc.value.status_code == 400


def test_process_cart_checkout_stripe_failure_is_500(monkeypatch, stripe_configured, products):
    def boom(**kwargs):
        raise stripe.APIConnectionError("network down")

    monkeypatch.setattr("storefront.payments.stripe_client.create_session", boom)
    with pytest.raises(HTTPException) as exc:
        service.process_cart_checkout(_detailed(products, ("B", 1, [])))
    assert exc.value.status_code == 500
    assert exc.value.detail == "Failed to create checkout session"


def test_process_cart_checkout_without_stripe_key(monkeypatch, products):
    monkeypatch.setattr("storefront.config.STRIPE_SECRET_KEY", "")
    with pytest.raises(HTTPException) as exc:
        service.process_cart_checkout(_detailed(products, ("B", 1, [])))
    assert exc.value.status_code == 500
    assert exc.value.detail == "Stripe non configuré"


def test_process_price_checkout_unknown_price(monkeypatch, stripe_configured):
    def missing(price_id):
        raise stripe.InvalidRequestError("No such price", "price")

    monkeypatch.setattr("storefront.payments.stripe_client.get_price", missing)
    with pytest.raises(HTTPException) as exc:
        service.process_price_checkout(["price_x"], [1])
    assert exc.value.status_code == 404


def test_process_price_checkout_ok(monkeypatch, stripe_configured):
    captured = {}
    monkeypatch.setattr("storefront.payments.stripe_client.get_price", lambda price_id: {"id": price_id})

    def fake_create_session(**kwargs):
        captured.update(kwargs)
        return {"id": "cs_p", "url": "https://checkout.stripe.test/cs_p"}

    monkeypatch.setattr("storefront.payments.stripe_client.create_session", fake_create_session)
    result = service.process_price_checkout(["price_1", "price_2"], [1, 3])
    assert result["sessionId"] == "cs_p"
    assert captured["line_items"] == [{"price": "price_1", "quantity": 1}, {"price": "price_2", "quantity": 3}]


def test_retrieve_session_not_found(monkeypatch, stripe_configured):
    def missing(session_id, expand=None):
        raise stripe.InvalidRequestError("No such session", "id")

    monkeypatch.setattr("storefront.payments.stripe_client.get_session", missing)
    with pytest.raises(HTTPException) as exc:
        service.retrieve_session("cs_missing")
    assert exc.value.status_code == 404


def test_retrieve_price_with_expanded_product(monkeypatch, stripe_configured):
    price = {
        "id": "price_1",
        "unit_amount": 3000,
        "currency": "usd",
        "product": {
            "id": "prod_1",
            "name": "Website Package",
            "description": None,
            "images": [],
            "metadata": {"tags": "service,website"},
        },
    }
    monkeypatch.setattr("storefront.payments.stripe_client.get_price", lambda price_id: price)

    assert service.retrieve_price("price_1") == {
        "priceId": "price_1",
        "productId": "prod_1",
        "product": {
            "id": "prod_1",
            "name": "Website Package",
            "description": "",
            "image": "/window.svg",
            "tags": ["service", "website"],
        },
        "unitAmount": 3000,
        "currency": "usd",
        "price": 30.0,
    }


def test_retrieve_price_with_product_id_only(monkeypatch, stripe_configured):
    monkeypatch.setattr(
        "storefront.payments.stripe_client.get_price",
        lambda price_id: {"id": price_id, "unit_amount": None, "currency": "usd", "product": "prod_2"},
    )
    result = service.retrieve_price("price_2")
    assert result["productId"] == "prod_2"
    assert result["product"] is None
    assert result["price"] == 0


def test_retrieve_price_unknown_is_404(monkeypatch, stripe_configured):
    def missing(price_id):
        raise stripe.InvalidRequestError("No such price", "id")

    monkeypatch.setattr("storefront.payments.stripe_client.get_price", missing)
    with pytest.raises(HTTPException) as exc:
        service.retrieve_price("price_missing")
    assert exc.value.status_code == 404
    assert exc.value.detail == "Price not found"


def test_retrieve_price_stripe_failure_is_500(monkeypatch, stripe_configured):
    def boom(price_id):
        raise stripe.APIConnectionError("network down")

    monkeypatch.setattr("storefront.payments.stripe_client.get_price", boom)
    with pytest.raises(HTTPException) as exc:
        service.retrieve_price("price_1")
    assert exc.value.status_code == 500
