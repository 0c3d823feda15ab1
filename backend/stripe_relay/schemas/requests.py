from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body with camelCase keys on the wire.

    Fields are optional so that missing values reach the route and get the
    same ``{"success": false, "error": ...}`` answer as any other bad input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateCustomer(CamelModel):
    email: str | None = None
    name: str | None = None
    metadata: dict[str, Any] | None = None


class UpdateCustomer(CamelModel):
    # Every other key is forwarded to Stripe as-is
    model_config = ConfigDict(extra="allow")

    customer_id: str | None = None


class AttachPaymentMethod(CamelModel):
    payment_method_id: str | None = None
    customer_id: str | None = None


class DefaultPaymentMethod(CamelModel):
    customer_id: str | None = None
    payment_method_id: str | None = None


class DeletePaymentMethod(CamelModel):
    payment_method_id: str | None = None


class CreateSubscription(CamelModel):
    customer_id: str | None = None
    price_id: str | None = None
    payment_method_id: str | None = None
    trial_period_days: int | None = None


class UpdateSubscription(CamelModel):
    subscription_id: str | None = None
    price_id: str | None = None


class CancelSubscription(CamelModel):
    subscription_id: str | None = None
    cancel_immediately: bool = False


class SendInvoice(CamelModel):
    invoice_id: str | None = None


class CreateSetupIntent(CamelModel):
    customer_id: str | None = None


class CreatePaymentIntent(CamelModel):
    amount: float | None = None
    currency: str = "usd"
    customer_id: str | None = None
    payment_method_id: str | None = None
    description: str | None = None
