import json
import time

import stripe
from fastapi.testclient import TestClient

WEBHOOK_URL = "/api/v1/payments/webhook"


def _signed_headers(payload: str, secret: str = "whsec_test") -> dict:
    timestamp = int(time.time())
    signature = stripe.WebhookSignature._compute_signature(f"{timestamp}.{payload}", secret)
    return {"Stripe-Signature": f"t={timestamp},v1={signature}", "Content-Type": "application/json"}


def _completed_payload() -> str:
    return json.dumps({
        "id": "evt_1",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_1",
                "object": "checkout.session",
                "payment_status": "paid",
                "amount_total": 9000,
                "currency": "usd",
                "metadata": {
                    "cart_version": "1",
                    "cart_items": '[{"productId":"A","quantity":2,"selectedAddons":["ecommerce"]}]',
                },
            }
        },
    })


def test_webhook_missing_signature_is_400(client: TestClient, stripe_configured):
    res = client.post(WEBHOOK_URL, content=_completed_payload())
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid signature"


def test_webhook_bad_signature_is_400_without_side_effects(client: TestClient, monkeypatch, stripe_configured):
    orders = []
    monkeypatch.setattr("storefront.payments.fulfillment.fulfill_order", orders.append)

    res = client.post(WEBHOOK_URL, content=_completed_payload(), headers=_signed_headers(_completed_payload(), "whsec_other"))
    assert res.status_code == 400
    assert orders == []


def test_webhook_without_secret_is_rejected(client: TestClient, monkeypatch, stripe_configured):
    monkeypatch.setattr("storefront.config.STRIPE_WEBHOOK_SECRET", "")
    payload = _completed_payload()
    res = client.post(WEBHOOK_URL, content=payload, headers=_signed_headers(payload))
    assert res.status_code == 400


def test_webhook_checkout_completed_fulfills_order(client: TestClient, monkeypatch, stripe_configured):
    orders = []
    monkeypatch.setattr("storefront.payments.fulfillment.fulfill_order", orders.append)

    payload = _completed_payload()
    res = client.post(WEBHOOK_URL, content=payload, headers=_signed_headers(payload))
    assert res.status_code == 200
    assert res.json() == {"received": True, "type": "checkout.session.completed", "handled": True}

    assert len(orders) == 1
    assert orders[0].session_id == "cs_test_1"
    assert orders[0].lines[0].quantity == 2
    assert orders[0].lines[0].selected_addons == ["ecommerce"]


def test_webhook_unknown_event_is_acknowledged(client: TestClient, monkeypatch, stripe_configured):
    event = {"type": "invoice.created", "data": {"object": {"id": "in_1"}}}

    async def fake_parse_event(request):
        return event

    monkeypatch.setattr("storefront.payments.stripe_client.parse_event", fake_parse_event)
    res = client.post(WEBHOOK_URL, content=b"{}")
    assert res.status_code == 200
    assert res.json() == {"received": True, "type": "invoice.created", "handled": False}


def test_webhook_handler_failure_is_500(client: TestClient, monkeypatch, stripe_configured):
    def boom(order):
        raise RuntimeError("fulfillment down")

    monkeypatch.setattr("storefront.payments.fulfillment.fulfill_order", boom)
    payload = _completed_payload()
    res = client.post(WEBHOOK_URL, content=payload, headers=_signed_headers(payload))
    assert res.status_code == 500
    assert res.json()["detail"] == "Webhook handler failed"
