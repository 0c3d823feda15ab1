"""Side effects for the Stripe events this service cares about.

Every handler takes the event's ``data.object`` and the collaborators it
may call. Handlers are not idempotent: Stripe delivers at least once, and
deduplication is left to the notifier and the state store.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from stripe_relay.services.notifications import (
    CustomerNotifier,
    LoggingNotifier,
    LoggingStateStore,
    StateStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Collaborators:
    notifier: CustomerNotifier = field(default_factory=LoggingNotifier)
    store: StateStore = field(default_factory=LoggingStateStore)


Handler = Callable[[dict[str, Any], Collaborators], None]


def handle_subscription_created(subscription: dict, c: Collaborators) -> None:
    logger.info(f"Subscription created: {subscription.get('id')}")
    c.store.persist_subscription_state(subscription)
    c.notifier.notify_customer("subscription_welcome", subscription)


def handle_subscription_updated(subscription: dict, c: Collaborators) -> None:
    logger.info(f"Subscription updated: {subscription.get('id')}")
    c.store.persist_subscription_state(subscription)
    c.notifier.notify_customer("subscription_changed", subscription)


def handle_subscription_deleted(subscription: dict, c: Collaborators) -> None:
    logger.info(f"Subscription deleted: {subscription.get('id')}")
    c.store.persist_subscription_state(subscription)
    c.notifier.notify_customer("subscription_canceled", subscription)


def handle_payment_succeeded(invoice: dict, c: Collaborators) -> None:
    logger.info(f"Payment succeeded for invoice: {invoice.get('id')}")
    c.store.persist_invoice_state(invoice)
    c.notifier.notify_customer("payment_receipt", invoice)


def handle_payment_failed(invoice: dict, c: Collaborators) -> None:
    logger.info(f"Payment failed for invoice: {invoice.get('id')}")
    c.store.persist_invoice_state(invoice)
    c.notifier.notify_customer("payment_failed", invoice)


def handle_trial_will_end(subscription: dict, c: Collaborators) -> None:
    logger.info(f"Trial will end for subscription: {subscription.get('id')}")
    c.notifier.notify_customer("trial_ending", subscription)


def handle_payment_method_attached(payment_method: dict, c: Collaborators) -> None:
    logger.info(f"Payment method attached: {payment_method.get('id')}")


def handle_payment_method_detached(payment_method: dict, c: Collaborators) -> None:
    logger.info(f"Payment method detached: {payment_method.get('id')}")


EVENT_HANDLERS: dict[str, Handler] = {
    "customer.subscription.created": handle_subscription_created,
    "customer.subscription.updated": handle_subscription_updated,
    "customer.subscription.deleted": handle_subscription_deleted,
    "customer.subscription.trial_will_end": handle_trial_will_end,
    "invoice.payment_succeeded": handle_payment_succeeded,
    "invoice.payment_failed": handle_payment_failed,
    "payment_method.attached": handle_payment_method_attached,
    "payment_method.detached": handle_payment_method_detached,
}

# Unprefixed subscription names, as some senders and fixtures spell them
EVENT_ALIASES: dict[str, str] = {
    "subscription.created": "customer.subscription.created",
    "subscription.updated": "customer.subscription.updated",
    "subscription.deleted": "customer.subscription.deleted",
    "subscription.trial_will_end": "customer.subscription.trial_will_end",
}
