import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


class CustomerNotifier(Protocol):
    def notify_customer(self, kind: str, payload: dict[str, Any]) -> None: ...


class StateStore(Protocol):
    def persist_subscription_state(self, payload: dict[str, Any]) -> None: ...

    def persist_invoice_state(self, payload: dict[str, Any]) -> None: ...


class LoggingNotifier:
    def notify_customer(self, kind: str, payload: dict[str, Any]) -> None:
        logger.info(f"Customer notification {kind} for {payload.get('id')}")


class HttpNotifier:
    """Posts each notification as JSON to an outbound URL (email service, etc.)."""

    def __init__(self, url: str, timeout: float = 10):
        self.url = url
        self.timeout = timeout

    def notify_customer(self, kind: str, payload: dict[str, Any]) -> None:
        r = httpx.post(
            self.url, json={"kind": kind, "payload": payload}, timeout=self.timeout
        )
        r.raise_for_status()
        logger.info(f"Customer notification {kind} delivered ({r.status_code})")


class LoggingStateStore:
    def persist_subscription_state(self, payload: dict[str, Any]) -> None:
        logger.info(
            f"Subscription {payload.get('id')} is now {payload.get('status')}"
        )

    def persist_invoice_state(self, payload: dict[str, Any]) -> None:
        logger.info(f"Invoice {payload.get('id')} is now {payload.get('status')}")
