"""Outbox helpers shared by the module repositories.

``record_domain_events`` must run inside the transaction that persists the
aggregate; delivery to the event bus is deferred until that transaction
commits, so a rolled-back write never publishes anything.
"""

from __future__ import annotations

from typing import Any, List, Tuple

import structlog
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


def record_domain_events(entity: Any, topic: str) -> List[OutboxEvent]:
    """Persist the pending events of *entity* and schedule their delivery."""
    events: List[DomainEvent] = (
        entity.domain_events if hasattr(entity, "domain_events") else []
    )
    pairs: List[Tuple[OutboxEvent, DomainEvent]] = []
    for event in events:
        outbox = OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=event.to_payload(),
            topic=topic,
        )
        pairs.append((outbox, event))
    if hasattr(entity, "clear_domain_events"):
        entity.clear_domain_events()

    if pairs:
        transaction.on_commit(lambda: dispatch_outbox_events(pairs))
    return [outbox for outbox, _ in pairs]


def dispatch_outbox_events(pairs: List[Tuple[OutboxEvent, DomainEvent]]) -> None:
    """Publish committed events and record the delivery result."""
    for outbox, event in pairs:
        try:
            event_bus.publish(event)
        except Exception as exc:
            logger.exception(
                "outbox.dispatch_failed",
                outbox_id=str(outbox.id),
                event_type=outbox.event_type,
            )
            outbox.mark_as_failed(str(exc))
            continue
        outbox.mark_as_published()
