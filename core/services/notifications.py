"""
Outbound "queue changed" notifications.

The queue service only knows the :class:`QueueNotifier` interface.  The
default implementation pushes a ``queue.updated`` event to the Channels
group that :class:`core.realtime.consumers.QueueUpdatesConsumer`
clients join; tests swap it through ``CLINIC_QUEUE_NOTIFIER`` or by
passing a notifier to the service directly.

Delivery is at-most-once and best effort: a notifier never raises.
"""
from __future__ import annotations

import logging
from typing import Any

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

QUEUE_GROUP = "queue"


class QueueNotifier:
    def queue_updated(self, **detail: Any) -> None:
        raise NotImplementedError


class NullQueueNotifier(QueueNotifier):
    """Drops every event."""

    def queue_updated(self, **detail: Any) -> None:
        return None


class ChannelLayerQueueNotifier(QueueNotifier):
    def __init__(self, group: str = QUEUE_GROUP):
        self.group = group

    def queue_updated(self, **detail: Any) -> None:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return
        event = {"type": "queue.updated", "ts": timezone.now().isoformat(), **detail}
        try:
            async_to_sync(channel_layer.group_send)(self.group, event)
        except Exception:
            logger.warning("queue.updated broadcast to %r failed", self.group, exc_info=True)


def get_queue_notifier() -> QueueNotifier:
    return import_string(settings.CLINIC_QUEUE_NOTIFIER)()
