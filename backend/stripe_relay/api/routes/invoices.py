import stripe
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from stripe_relay.api.deps import stripe_api_key
from stripe_relay.api.errors import RelayError, empty_list_on_error, require
from stripe_relay.schemas.requests import SendInvoice

router = APIRouter(tags=["invoices"])


def format_invoice(invoice) -> dict:
    transitions = invoice.get("status_transitions") or {}
    lines = (invoice.get("lines") or {}).get("data", [])
    return {
        "id": invoice["id"],
        "number": invoice.get("number"),
        "status": invoice.get("status"),
        "amountPaid": invoice.get("amount_paid"),
        "amountDue": invoice.get("amount_due"),
        "total": invoice.get("total"),
        "subtotal": invoice.get("subtotal"),
        "tax": invoice.get("tax"),
        "currency": invoice.get("currency"),
        "created": invoice.get("created"),
        "dueDate": invoice.get("due_date"),
        "paidAt": transitions.get("paid_at"),
        "invoicePdf": invoice.get("invoice_pdf"),
        "hostedInvoiceUrl": invoice.get("hosted_invoice_url"),
        "description": invoice.get("description"),
        "lines": [
            {
                "id": line["id"],
                "description": line.get("description"),
                "amount": line.get("amount"),
                "quantity": line.get("quantity"),
                "priceId": (line.get("price") or {}).get("id"),
            }
            for line in lines
        ],
    }


@router.get("/invoices/{customer_id}")
def list_invoices(
    customer_id: str,
    limit: int = 10,
    status: str = "all",
    api_key: str = Depends(stripe_api_key),
):
    params = {
        "customer": customer_id,
        "limit": limit,
        "expand": ["data.payment_intent"],
    }
    if status != "all":
        params["status"] = status

    with empty_list_on_error("invoices"):
        invoices = stripe.Invoice.list(api_key=api_key, **params)
    return {
        "success": True,
        "invoices": [format_invoice(i) for i in invoices["data"]],
        "hasMore": invoices.get("has_more", False),
    }


@router.get("/invoice/{invoice_id}")
def get_invoice(invoice_id: str, api_key: str = Depends(stripe_api_key)):
    invoice = stripe.Invoice.retrieve(
        invoice_id,
        api_key=api_key,
        expand=["payment_intent", "subscription", "customer"],
    )
    return {"success": True, "invoice": invoice}


@router.get("/invoice-pdf/{invoice_id}")
def download_invoice_pdf(invoice_id: str, api_key: str = Depends(stripe_api_key)):
    invoice = stripe.Invoice.retrieve(invoice_id, api_key=api_key)
    if not invoice.get("invoice_pdf"):
        raise RelayError("Invoice PDF not available", status_code=404)
    return RedirectResponse(invoice["invoice_pdf"], status_code=302)


@router.post("/send-invoice")
def send_invoice(data: SendInvoice, api_key: str = Depends(stripe_api_key)):
    require(data.invoice_id, "Invoice ID is required")

    invoice = stripe.Invoice.send_invoice(data.invoice_id, api_key=api_key)
    return {"success": True, "invoice": invoice}
