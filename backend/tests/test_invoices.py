from unittest.mock import patch

INVOICE = {
    "id": "in_1",
    "number": "0001",
    "status": "paid",
    "amount_paid": 999,
    "amount_due": 999,
    "total": 999,
    "subtotal": 999,
    "tax": None,
    "currency": "usd",
    "created": 1700000000,
    "due_date": None,
    "status_transitions": {"paid_at": 1700000100},
    "invoice_pdf": "https://pay.stripe.com/invoice/in_1/pdf",
    "hosted_invoice_url": "https://invoice.stripe.com/i/in_1",
    "description": None,
    "lines": {
        "data": [
            {
                "id": "il_1",
                "description": "Basic",
                "amount": 999,
                "quantity": 1,
                "price": {"id": "price_basic"},
            }
        ]
    },
}


def test_list_invoices(client):
    with patch(
        "stripe.Invoice.list", return_value={"data": [INVOICE], "has_more": True}
    ) as list_invoices:
        response = client.get("/api/stripe/invoices/cus_1?limit=5&status=paid")

    data = response.json()
    assert data["success"] is True
    assert data["hasMore"] is True
    invoice = data["invoices"][0]
    assert invoice["paidAt"] == 1700000100
    assert invoice["invoicePdf"] == INVOICE["invoice_pdf"]
    assert invoice["lines"] == [
        {"id": "il_1", "description": "Basic", "amount": 999, "quantity": 1, "priceId": "price_basic"}
    ]
    list_invoices.assert_called_once_with(
        api_key="sk_test_dummy",
        customer="cus_1",
        limit=5,
        expand=["data.payment_intent"],
        status="paid",
    )


def test_list_invoices_all_statuses(client):
    with patch("stripe.Invoice.list", return_value={"data": []}) as list_invoices:
        client.get("/api/stripe/invoices/cus_1")

    kwargs = list_invoices.call_args.kwargs
    assert kwargs["limit"] == 10
    assert "status" not in kwargs


def test_get_invoice(client):
    with patch("stripe.Invoice.retrieve", return_value={"id": "in_1"}) as retrieve:
        response = client.get("/api/stripe/invoice/in_1")

    assert response.json() == {"success": True, "invoice": {"id": "in_1"}}
    retrieve.assert_called_once_with(
        "in_1",
        api_key="sk_test_dummy",
        expand=["payment_intent", "subscription", "customer"],
    )


def test_invoice_pdf_redirects(client):
    with patch("stripe.Invoice.retrieve", return_value=INVOICE):
        response = client.get("/api/stripe/invoice-pdf/in_1", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == INVOICE["invoice_pdf"]


def test_invoice_pdf_not_available(client):
    with patch("stripe.Invoice.retrieve", return_value={"id": "in_1", "invoice_pdf": None}):
        response = client.get("/api/stripe/invoice-pdf/in_1")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Invoice PDF not available"}


def test_send_invoice(client):
    with patch("stripe.Invoice.send_invoice", return_value={"id": "in_1"}) as send:
        response = client.post("/api/stripe/send-invoice", json={"invoiceId": "in_1"})

    assert response.json()["success"] is True
    send.assert_called_once_with("in_1", api_key="sk_test_dummy")


def test_send_invoice_requires_id(client):
    response = client.post("/api/stripe/send-invoice", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "Invoice ID is required"
