from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerifiedEvent(BaseModel):
    """A Stripe event whose signature has been checked.

    Only ``WebhookVerifier.verify`` builds these inside the package. Python
    cannot stop other code from calling the constructor, so this holds by
    convention and is checked by the test suite. Everything downstream of
    the verifier may assume the payload came from Stripe.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Event type, e.g. invoice.payment_failed")
    payload: dict[str, Any] = Field(
        default_factory=dict, description="The event's data.object"
    )
    id: str | None = Field(None, description="Provider event ID")
    created: int | None = None
    livemode: bool | None = None


@dataclass(frozen=True)
class Acknowledged:
    event_type: str
    handled: bool
