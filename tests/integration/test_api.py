"""Integration tests for API endpoints"""

from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from pix_checkout.api.dependencies import get_webhook_client
from pix_checkout.domain.pix import has_valid_checksum, parse_fields
from pix_checkout.infrastructure.clients.webhook import OrderWebhookClient


MERCHANT = {"pix_key": "teste@exemplo.com", "display_name": "Loja Teste", "city": "Sao Paulo"}


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_metrics_endpoint(client: TestClient, quote_body: dict):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/checkout/quote", json=quote_body)
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "pix_checkout_quote_total" in response.text


def test_quote_endpoint(client: TestClient, quote_body: dict):
    """Test POST /v1/checkout/quote with delivery fee"""
    response = client.post("/v1/checkout/quote", json=quote_body)

    assert response.status_code == 200
    data = response.json()
    assert data["subtotal"] == "61.00"
    assert data["delivery_fee"] == "8.00"
    assert data["total"] == "69.00"
    assert data["total_display"] == "R$ 69,00"
    assert data["lines"][0]["unit_price"] == "12.00"
    assert data["lines"][0]["line_total"] == "36.00"
    assert data["lines"][0]["note"] == "sem cebola"


def test_quote_endpoint_pickup_has_no_fee(client: TestClient, quote_body: dict):
    quote_body["fulfillment"] = "pickup"
    response = client.post("/v1/checkout/quote", json=quote_body)

    assert response.status_code == 200
    assert response.json()["delivery_fee"] == "0.00"
    assert response.json()["total"] == "61.00"


def test_quote_endpoint_coupon(client: TestClient, quote_body: dict):
    quote_body["coupon"] = {"code": "cinco", "discount_type": "fixed", "value": "5.00"}
    data = client.post("/v1/checkout/quote", json=quote_body).json()

    assert data["discount"] == "5.00"
    assert data["total"] == "64.00"
    assert data["coupon_code"] == "CINCO"


def test_quote_endpoint_coupon_not_applicable(client: TestClient, quote_body: dict):
    quote_body["coupon"] = {
        "code": "MINIMO",
        "discount_type": "percentage",
        "value": "10",
        "minimum_order": "100.00",
    }
    response = client.post("/v1/checkout/quote", json=quote_body)

    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "below_minimum_order"


def test_quote_endpoint_zero_quantity(client: TestClient, quote_body: dict):
    """Ghost line is reported, not priced"""
    quote_body["lines"][1]["quantity"] = 0
    response = client.post("/v1/checkout/quote", json=quote_body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "invalid_cart_line"


def test_quote_endpoint_unknown_neighborhood(client: TestClient, quote_body: dict):
    quote_body["neighborhood"] = "Vila Nova"
    response = client.post("/v1/checkout/quote", json=quote_body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "unknown_delivery_zone"


def test_quote_endpoint_delivery_without_neighborhood(client: TestClient, quote_body: dict):
    """Delivery with no address is rejected instead of quoted without a fee"""
    del quote_body["neighborhood"]
    response = client.post("/v1/checkout/quote", json=quote_body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "unknown_delivery_zone"


def test_create_charge_delivery_blank_neighborhood(client: TestClient, quote_body: dict):
    quote_body["neighborhood"] = "  "
    body = {**quote_body, "order_id": "42", "merchant": MERCHANT}
    response = client.post("/v1/pix/charges", json=body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "unknown_delivery_zone"


def test_create_charge_endpoint(client: TestClient, quote_body: dict):
    """Test POST /v1/pix/charges issues a valid payload for the order total"""
    body = {**quote_body, "order_id": "pedido-0042", "merchant": MERCHANT}
    response = client.post("/v1/pix/charges", json=body)

    assert response.status_code == 201
    data = response.json()
    assert data["amount"] == "69.00"
    assert data["amount_display"] == "R$ 69,00"
    assert data["transaction_id"] == "pedido0042"
    assert data["status"] == "pending"

    payload = data["payload"]
    assert has_valid_checksum(payload)
    fields = parse_fields(payload)
    assert fields["54"] == "69.00"
    assert fields["59"] == "LOJATESTE"
    assert parse_fields(fields["62"]) == {"05": "pedido0042"}


def test_create_charge_schedules_webhook(client: TestClient, quote_body: dict):
    """Charge event is handed to the webhook client"""
    webhook = OrderWebhookClient(webhook_url="http://platform.test/hooks")
    client.app.dependency_overrides[get_webhook_client] = lambda: webhook

    with patch.object(OrderWebhookClient, "send_charge_event", new_callable=AsyncMock) as send:
        body = {**quote_body, "order_id": "42", "merchant": MERCHANT}
        response = client.post("/v1/pix/charges", json=body)

    assert response.status_code == 201
    send.assert_awaited_once()
    event = send.await_args.args[0]
    assert event["event"] == "PIX_CHARGE_CREATED"
    assert event["charge_id"] == response.json()["charge_id"]
    assert event["amount_cents"] == 6900


def test_create_charge_missing_key(client: TestClient, quote_body: dict):
    """No PIX key: caller is told to hide the PIX option"""
    body = {**quote_body, "order_id": "42", "merchant": {**MERCHANT, "pix_key": "  "}}
    response = client.post("/v1/pix/charges", json=body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "pix_unavailable"


def test_create_charge_nothing_to_charge(client: TestClient, quote_body: dict):
    quote_body["fulfillment"] = "pickup"
    quote_body["coupon"] = {"code": "TUDO", "discount_type": "fixed", "value": "500"}
    body = {**quote_body, "order_id": "42", "merchant": MERCHANT}
    response = client.post("/v1/pix/charges", json=body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "nothing_to_charge"


def test_get_charge_endpoint(client: TestClient, quote_body: dict):
    """Test GET /v1/pix/charges/{charge_id}"""
    body = {**quote_body, "order_id": "pedido-7", "merchant": MERCHANT}
    created = client.post("/v1/pix/charges", json=body).json()

    response = client.get(f"/v1/pix/charges/{created['charge_id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["charge_id"] == created["charge_id"]
    assert data["payload"] == created["payload"]
    assert data["subtotal"] == "61.00"
    assert data["delivery_fee"] == "8.00"
    assert data["discount"] == "0.00"


def test_get_charge_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/v1/pix/charges/{fake_uuid}").status_code == 404


def test_get_charge_invalid_id(client: TestClient):
    assert client.get("/v1/pix/charges/not-a-uuid").status_code == 400


def test_create_charge_key_too_long(client: TestClient, quote_body: dict):
    body = {**quote_body, "order_id": "42", "merchant": {**MERCHANT, "pix_key": "a" * 90 + "@loja.com"}}
    response = client.post("/v1/pix/charges", json=body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "invalid_merchant"
