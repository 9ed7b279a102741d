import json
from unittest import mock

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from core.realtime.consumers import QueueUpdatesConsumer
from core.services.notifications import (
    QUEUE_GROUP,
    ChannelLayerQueueNotifier,
    NullQueueNotifier,
    get_queue_notifier,
)


def test_default_notifier_uses_channel_layer():
    assert isinstance(get_queue_notifier(), ChannelLayerQueueNotifier)


def test_null_notifier_swallows_events():
    assert NullQueueNotifier().queue_updated(action='added') is None


def test_channel_layer_notifier_broadcasts_to_queue_group():
    layer = get_channel_layer()
    async_to_sync(layer.group_add)(QUEUE_GROUP, 'test-listener')

    ChannelLayerQueueNotifier().queue_updated(action='added', queueId=7, patientId=3)

    message = async_to_sync(layer.receive)('test-listener')
    assert message['type'] == 'queue.updated'
    assert message['action'] == 'added'
    assert message['queueId'] == 7
    assert message['patientId'] == 3
    assert message['ts']
    async_to_sync(layer.group_discard)(QUEUE_GROUP, 'test-listener')


def test_channel_layer_failure_is_logged_not_raised():
    layer = mock.Mock()
    layer.group_send = mock.AsyncMock(side_effect=ConnectionError('redis down'))
    with mock.patch('core.services.notifications.get_channel_layer', return_value=layer), \
            mock.patch('core.services.notifications.logger') as log:
        ChannelLayerQueueNotifier().queue_updated(action='added')
    log.warning.assert_called_once()


def test_consumer_forwards_event_as_queue_updated():
    consumer = QueueUpdatesConsumer()
    consumer.send = mock.AsyncMock()
    async_to_sync(consumer.queue_updated)(
        {'type': 'queue.updated', 'ts': '2026-01-01T00:00:00+00:00', 'action': 'added', 'queueId': 1}
    )
    sent = json.loads(consumer.send.call_args.args[0])
    assert sent == {'type': 'queueUpdated', 'ts': '2026-01-01T00:00:00+00:00', 'action': 'added', 'queueId': 1}
