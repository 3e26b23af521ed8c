"""
Transactional outbox relay.

The repository writes pending domain events to ``domain_events`` in the
same transaction as the aggregate. This module reads them back and hands
them to a dispatcher:
1. Read unprocessed events, oldest first
2. Dispatch each one
3. Mark successes processed; count failures in ``retry_count``

The relay processes one batch per call. Scheduling it is up to the host.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from customer_orders.application.interfaces import DomainEventDispatcher
from customer_orders.domain.events import DomainEvent, deserialize_event
from customer_orders.domain.exceptions import NullArgumentError
from customer_orders.infrastructure.database.models import DomainEventRecord

logger = structlog.get_logger(__name__)


def _unprocessed(limit: int):
    return (
        select(DomainEventRecord)
        .where(DomainEventRecord.processed.is_(False))
        .order_by(DomainEventRecord.occurred_on)
        .limit(limit)
    )


async def get_unprocessed_events(
    session_factory: async_sessionmaker[AsyncSession], limit: int = 100
) -> list[DomainEvent]:
    """
    Fetch events not yet relayed, ordered by occurrence time.

    Args:
        session_factory: Async session factory
        limit: Maximum number of events to return

    Returns:
        list[DomainEvent]: Decoded events, oldest first
    """
    async with session_factory() as session:
        records = (await session.scalars(_unprocessed(limit))).all()
    return [deserialize_event(record.payload) for record in records]


class OutboxRelay:
    """Dispatches outbox events and records the outcome of each attempt."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None,
        dispatcher: DomainEventDispatcher | None,
        batch_size: int = 100,
    ):
        """
        Initialize outbox relay.

        Args:
            session_factory: Async session factory
            dispatcher: Where relayed events are sent
            batch_size: Number of events to process per batch
        """
        if session_factory is None:
            raise NullArgumentError("session_factory")
        if dispatcher is None:
            raise NullArgumentError("dispatcher")

        self.session_factory = session_factory
        self.dispatcher = dispatcher
        self.batch_size = batch_size

    async def process_batch(self) -> int:
        """
        Relay one batch of unprocessed events.

        Returns:
            int: Number of events successfully dispatched
        """
        dispatched = 0

        async with self.session_factory() as session:
            async with session.begin():
                records = (await session.scalars(_unprocessed(self.batch_size))).all()

                for record in records:
                    try:
                        event = deserialize_event(record.payload)
                        await self.dispatcher.dispatch([event])
                    except Exception as e:
                        record.retry_count += 1
                        record.last_error = str(e)
                        logger.error(
                            "outbox_event_relay_failed",
                            event_id=str(record.id),
                            event_type=record.event_type,
                            retry_count=record.retry_count,
                            error=str(e),
                        )
                        continue

                    record.processed = True
                    record.processed_at = datetime.now(timezone.utc)
                    dispatched += 1

        logger.info(
            "outbox_batch_processed",
            fetched=len(records),
            dispatched=dispatched,
        )
        return dispatched
