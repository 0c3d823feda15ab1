import stripe
from fastapi import APIRouter, Depends

from stripe_relay.api.deps import stripe_api_key
from stripe_relay.api.errors import empty_list_on_error, require
from stripe_relay.schemas.requests import (
    CancelSubscription,
    CreateSubscription,
    UpdateSubscription,
)

router = APIRouter(tags=["subscriptions"])


def format_subscription(sub) -> dict:
    default_pm = sub.get("default_payment_method")
    items = []
    for item in sub["items"]["data"]:
        price = item["price"]
        recurring = price.get("recurring") or {}
        items.append(
            {
                "id": item["id"],
                "priceId": price["id"],
                "productId": price.get("product"),
                "unitAmount": price.get("unit_amount"),
                "currency": price.get("currency"),
                "interval": recurring.get("interval"),
                "intervalCount": recurring.get("interval_count"),
                "quantity": item.get("quantity"),
            }
        )

    return {
        "id": sub["id"],
        "status": sub.get("status"),
        "currentPeriodStart": sub.get("current_period_start"),
        "currentPeriodEnd": sub.get("current_period_end"),
        "cancelAtPeriodEnd": sub.get("cancel_at_period_end"),
        "canceledAt": sub.get("canceled_at"),
        "trialStart": sub.get("trial_start"),
        "trialEnd": sub.get("trial_end"),
        "created": sub.get("created"),
        "items": items,
        "defaultPaymentMethod": (
            {
                "id": default_pm["id"],
                "brand": (default_pm.get("card") or {}).get("brand"),
                "last4": (default_pm.get("card") or {}).get("last4"),
            }
            if isinstance(default_pm, dict)
            else None
        ),
    }


@router.post("/create-subscription")
def create_subscription(
    data: CreateSubscription, api_key: str = Depends(stripe_api_key)
):
    require(data.customer_id and data.price_id, "Customer ID and price ID are required")

    if data.payment_method_id:
        stripe.Customer.modify(
            data.customer_id,
            api_key=api_key,
            invoice_settings={"default_payment_method": data.payment_method_id},
        )

    params = {
        "customer": data.customer_id,
        "items": [{"price": data.price_id}],
        "payment_settings": {
            "payment_method_options": {
                "card": {"request_three_d_secure": "if_required"},
            },
            "payment_method_types": ["card"],
            "save_default_payment_method": "on_subscription",
        },
        "expand": ["latest_invoice.payment_intent"],
    }
    if data.trial_period_days and data.trial_period_days > 0:
        params["trial_period_days"] = data.trial_period_days

    subscription = stripe.Subscription.create(api_key=api_key, **params)
    return {"success": True, "subscription": subscription}


@router.post("/update-subscription")
def update_subscription(
    data: UpdateSubscription, api_key: str = Depends(stripe_api_key)
):
    """Swap the price on the subscription's first item, prorating the change."""
    require(
        data.subscription_id and data.price_id,
        "Subscription ID and price ID are required",
    )

    current = stripe.Subscription.retrieve(data.subscription_id, api_key=api_key)
    subscription = stripe.Subscription.modify(
        data.subscription_id,
        api_key=api_key,
        items=[{"id": current["items"]["data"][0]["id"], "price": data.price_id}],
        proration_behavior="create_prorations",
    )
    return {"success": True, "subscription": subscription}


@router.post("/cancel-subscription")
def cancel_subscription(
    data: CancelSubscription, api_key: str = Depends(stripe_api_key)
):
    require(data.subscription_id, "Subscription ID is required")

    if data.cancel_immediately:
        subscription = stripe.Subscription.cancel(data.subscription_id, api_key=api_key)
    else:
        subscription = stripe.Subscription.modify(
            data.subscription_id, api_key=api_key, cancel_at_period_end=True
        )
    return {"success": True, "subscription": subscription}


@router.get("/subscriptions/{customer_id}")
def list_subscriptions(customer_id: str, api_key: str = Depends(stripe_api_key)):
    with empty_list_on_error("subscriptions"):
        subscriptions = stripe.Subscription.list(
            api_key=api_key,
            customer=customer_id,
            status="all",
            expand=["data.default_payment_method", "data.items.data.price.product"],
            limit=10,
        )
    return {
        "success": True,
        "subscriptions": [format_subscription(s) for s in subscriptions["data"]],
    }
