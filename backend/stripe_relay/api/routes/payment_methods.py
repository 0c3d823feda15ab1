import stripe
from fastapi import APIRouter, Depends

from stripe_relay.api.deps import stripe_api_key
from stripe_relay.api.errors import empty_list_on_error, require
from stripe_relay.schemas.requests import (
    AttachPaymentMethod,
    DefaultPaymentMethod,
    DeletePaymentMethod,
)

router = APIRouter(tags=["payment-methods"])


def format_card(pm, default_id: str | None) -> dict:
    """Safe subset of a card payment method for display."""
    card = pm["card"]
    checks = card.get("checks") or {}
    return {
        "id": pm["id"],
        "brand": card.get("brand"),
        "last4": card.get("last4"),
        "expMonth": card.get("exp_month"),
        "expYear": card.get("exp_year"),
        "funding": card.get("funding"),
        "country": card.get("country"),
        "fingerprint": card.get("fingerprint"),
        "isDefault": pm["id"] == default_id,
        "created": pm.get("created"),
        "checks": {
            "cvcCheck": checks.get("cvc_check"),
            "addressLine1Check": checks.get("address_line1_check"),
            "addressPostalCodeCheck": checks.get("address_postal_code_check"),
        },
    }


@router.get("/customer/{customer_id}/payment-methods")
def list_payment_methods(customer_id: str, api_key: str = Depends(stripe_api_key)):
    with empty_list_on_error("paymentMethods"):
        payment_methods = stripe.PaymentMethod.list(
            api_key=api_key, customer=customer_id, type="card", limit=10
        )
        customer = stripe.Customer.retrieve(customer_id, api_key=api_key)
    invoice_settings = customer.get("invoice_settings") or {}
    default_id = invoice_settings.get("default_payment_method")

    return {
        "success": True,
        "paymentMethods": [format_card(pm, default_id) for pm in payment_methods["data"]],
        "hasMore": payment_methods.get("has_more", False),
        "defaultPaymentMethodId": default_id,
    }


@router.post("/attach-payment-method")
def attach_payment_method(
    data: AttachPaymentMethod, api_key: str = Depends(stripe_api_key)
):
    require(
        data.payment_method_id and data.customer_id,
        "Payment method ID and customer ID are required",
    )

    payment_method = stripe.PaymentMethod.attach(
        data.payment_method_id, api_key=api_key, customer=data.customer_id
    )
    return {"success": True, "paymentMethod": payment_method}


@router.post("/set-default-payment-method")
def set_default_payment_method(
    data: DefaultPaymentMethod, api_key: str = Depends(stripe_api_key)
):
    require(
        data.customer_id and data.payment_method_id,
        "Customer ID and payment method ID are required",
    )

    customer = stripe.Customer.modify(
        data.customer_id,
        api_key=api_key,
        invoice_settings={"default_payment_method": data.payment_method_id},
    )
    return {
        "success": True,
        "customer": customer,
        "defaultPaymentMethodId": data.payment_method_id,
    }


@router.delete("/delete-payment-method")
def delete_payment_method(
    data: DeletePaymentMethod, api_key: str = Depends(stripe_api_key)
):
    require(data.payment_method_id, "Payment method ID is required")

    payment_method = stripe.PaymentMethod.detach(data.payment_method_id, api_key=api_key)
    return {"success": True, "paymentMethod": payment_method}
