from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request

from stripe_relay.api.deps import event_router, webhook_verifier
from stripe_relay.services.event_router import EventRouter
from stripe_relay.services.stripe_verify import WebhookVerifier

router = APIRouter(tags=["webhook"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    verifier: WebhookVerifier = Depends(webhook_verifier),
    events: EventRouter = Depends(event_router),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
):
    # The signature covers the exact bytes; read them before anything parses the body
    payload = await request.body()

    event = verifier.verify(payload, stripe_signature)

    # Handlers run after the response is sent so Stripe is not kept waiting
    events.dispatch(event, schedule=background_tasks.add_task)
    return {"received": True}
