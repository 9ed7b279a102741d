import json

from channels.generic.websocket import AsyncWebsocketConsumer

from core.services.notifications import QUEUE_GROUP


class QueueUpdatesConsumer(AsyncWebsocketConsumer):
    GROUP = QUEUE_GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def queue_updated(self, event):
        # event: {"type": "queue.updated", "ts": "...", "action": "added", "queueId": int, "patientId": int}
        payload = {k: v for k, v in event.items() if k != "type"}
        await self.send(json.dumps({"type": "queueUpdated", **payload}))
