from unittest.mock import patch

from fastapi.testclient import TestClient


def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route(client: TestClient):
    response = client.get("/api/stripe/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Endpoint not found"}


def test_wrong_method(client: TestClient):
    response = client.get("/api/stripe/webhook")
    assert response.status_code == 405
    assert response.json()["success"] is False


def test_unhandled_error_is_500(app):
    with patch("stripe.Customer.retrieve", side_effect=RuntimeError("boom")):
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/stripe/customer/cus_1")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}


def test_malformed_body_is_400(client: TestClient):
    response = client.post(
        "/api/stripe/create-subscription",
        json={"customerId": "cus_1", "priceId": "price_1", "trialPeriodDays": "soon"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
