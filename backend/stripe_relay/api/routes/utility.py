import time

import stripe
from fastapi import APIRouter, Depends

from stripe_relay.api.deps import stripe_api_key
from stripe_relay.api.errors import empty_list_on_error, require
from stripe_relay.schemas.requests import CreatePaymentIntent, CreateSetupIntent

router = APIRouter(tags=["utility"])

DAY = 24 * 60 * 60
PERIOD_DAYS = {"7days": 7, "30days": 30, "90days": 90}


@router.get("/prices")
def list_prices(api_key: str = Depends(stripe_api_key)):
    with empty_list_on_error("prices"):
        prices = stripe.Price.list(
            api_key=api_key, active=True, expand=["data.product"], limit=20
        )
    return {"success": True, "prices": prices["data"]}


@router.post("/create-setup-intent")
def create_setup_intent(data: CreateSetupIntent, api_key: str = Depends(stripe_api_key)):
    require(data.customer_id, "Customer ID is required")

    setup_intent = stripe.SetupIntent.create(
        api_key=api_key,
        customer=data.customer_id,
        payment_method_types=["card"],
        usage="off_session",
    )
    return {"success": True, "client_secret": setup_intent["client_secret"]}


@router.post("/create-payment-intent")
def create_payment_intent(
    data: CreatePaymentIntent, api_key: str = Depends(stripe_api_key)
):
    """One-time payment; ``amount`` is in major units and sent to Stripe in cents."""
    require(data.amount and data.customer_id, "Amount and customer ID are required")

    params = {
        "amount": int(round(data.amount * 100)),
        "currency": data.currency,
        "customer": data.customer_id,
        "description": data.description,
        "automatic_payment_methods": {"enabled": True},
    }
    if data.payment_method_id:
        params["payment_method"] = data.payment_method_id
        params["confirm"] = True

    payment_intent = stripe.PaymentIntent.create(api_key=api_key, **params)
    return {"success": True, "paymentIntent": payment_intent}


@router.get("/dashboard-stats")
def dashboard_stats(period: str = "30days", api_key: str = Depends(stripe_api_key)):
    """Customer, subscription and revenue figures for the admin dashboard."""
    days = PERIOD_DAYS.get(period, 30)
    created_gte = int(time.time()) - days * DAY

    customers = stripe.Customer.list(
        api_key=api_key, created={"gte": created_gte}, limit=100
    )
    subscriptions = stripe.Subscription.list(api_key=api_key, status="active", limit=100)
    charges = stripe.Charge.list(api_key=api_key, created={"gte": created_gte}, limit=100)

    charge_list = charges["data"]
    total_revenue = sum(c["amount"] for c in charge_list if c.get("paid")) / 100
    average_order_value = total_revenue / len(charge_list) if charge_list else 0

    return {
        "success": True,
        "stats": {
            "totalCustomers": len(customers["data"]),
            "activeSubscriptions": len(subscriptions["data"]),
            "totalRevenue": total_revenue,
            "averageOrderValue": average_order_value,
            "period": period,
        },
    }
