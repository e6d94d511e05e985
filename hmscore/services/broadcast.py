import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

logger = logging.getLogger(__name__)

UPDATES_GROUP = "updates"


def broadcast(event_type: str, **payload) -> None:
    """Send ``payload`` to every socket in the updates group."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {"type": event_type, "version": int(now.timestamp()), "ts": now.isoformat(), **payload}
    async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    logger.debug("broadcast %s %s", event_type, payload)


def staffing_changed(resource: str, key: str | None = None, op: str = "update") -> None:
    broadcast("staffing.changed", resource=resource, key=key, op=op)
