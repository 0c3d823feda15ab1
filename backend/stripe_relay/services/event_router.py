import logging
from typing import Any, Callable, Mapping

from stripe_relay.schemas.ingest import Acknowledged, VerifiedEvent
from stripe_relay.services.webhook_handlers import (
    EVENT_ALIASES,
    EVENT_HANDLERS,
    Collaborators,
    Handler,
)

logger = logging.getLogger(__name__)

# Matches BackgroundTasks.add_task
Scheduler = Callable[..., Any]


class EventRouter:
    """Routes verified events to handlers by event type.

    Dispatch never raises. With a scheduler the handler is submitted and
    runs later; without one it runs inline. Either way a failing handler is
    logged and contained.
    """

    def __init__(
        self,
        handlers: Mapping[str, Handler] | None = None,
        collaborators: Collaborators | None = None,
        aliases: Mapping[str, str] | None = None,
    ):
        self.handlers = dict(EVENT_HANDLERS if handlers is None else handlers)
        self.aliases = dict(EVENT_ALIASES if aliases is None else aliases)
        self.collaborators = collaborators or Collaborators()

    def resolve(self, event_type: str) -> Handler | None:
        handler = self.handlers.get(event_type)
        if handler is None and event_type in self.aliases:
            handler = self.handlers.get(self.aliases[event_type])
        return handler

    def dispatch(
        self, event: VerifiedEvent, schedule: Scheduler | None = None
    ) -> Acknowledged:
        logger.info(f"Received webhook event: {event.type} ({event.id})")

        handler = self.resolve(event.type)
        if handler is None:
            logger.info(f"Unhandled event type: {event.type}")
            return Acknowledged(event_type=event.type, handled=False)

        if schedule is None:
            self._run(handler, event)
        else:
            schedule(self._run, handler, event)
        return Acknowledged(event_type=event.type, handled=True)

    def _run(self, handler: Handler, event: VerifiedEvent) -> None:
        try:
            handler(event.payload, self.collaborators)
        except Exception:
            logger.exception(f"Handler for {event.type} ({event.id}) failed")
