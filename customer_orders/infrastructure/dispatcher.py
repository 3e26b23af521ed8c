"""Domain event dispatcher that only records events in the structured log."""

from __future__ import annotations

from typing import Any, Iterable

import structlog

from customer_orders.domain.events import DomainEvent
from customer_orders.domain.exceptions import NullArgumentError


class LoggingDomainEventDispatcher:
    """
    Default dispatcher: one log entry per event.

    Replace with an actual message bus publisher (RabbitMQ, Kafka, etc.)
    behind the same ``dispatch`` coroutine.
    """

    def __init__(self, logger: Any = None):
        self.logger = logger if logger is not None else structlog.get_logger(__name__)

    async def dispatch(self, events: Iterable[DomainEvent] | None) -> None:
        if events is None:
            raise NullArgumentError("events")

        for event in events:
            self.logger.info(
                "domain_event_dispatched",
                event_type=type(event).__name__,
                event_id=str(event.event_id),
                occurred_on=event.occurred_on.isoformat(),
            )
