from functools import lru_cache

from fastapi import Depends

from stripe_relay.core.config import Settings, get_settings
from stripe_relay.services.event_router import EventRouter
from stripe_relay.services.notifications import HttpNotifier, LoggingNotifier
from stripe_relay.services.stripe_verify import WebhookVerifier
from stripe_relay.services.webhook_handlers import Collaborators


def stripe_api_key(settings: Settings = Depends(get_settings)) -> str:
    """FastAPI dependency: Stripe secret key, or ConfigError"""
    return settings.require_stripe_key()


def webhook_verifier(settings: Settings = Depends(get_settings)) -> WebhookVerifier:
    """FastAPI dependency: verifier bound to the configured signing secret"""
    return WebhookVerifier(
        settings.require_webhook_secret(), tolerance=settings.webhook_tolerance
    )


@lru_cache
def _build_router(notification_url: str | None) -> EventRouter:
    if notification_url:
        notifier = HttpNotifier(notification_url)
    else:
        notifier = LoggingNotifier()
    return EventRouter(collaborators=Collaborators(notifier=notifier))


def event_router(settings: Settings = Depends(get_settings)) -> EventRouter:
    """FastAPI dependency: the process-wide event router"""
    return _build_router(settings.notification_url)
