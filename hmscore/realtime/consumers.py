import json

from channels.generic.websocket import AsyncWebsocketConsumer

from hmscore.services.broadcast import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Push staffing change notices to connected screens.

    Clients still poll; a notice only tells them to re-fetch early.
    Anonymous sockets are refused.
    """
    GROUP = UPDATES_GROUP

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            await self.close()
            return
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def broadcast_refresh(self, event):
        # {"type": "broadcast.refresh", "version": int, "ts": "...", "keys": [...]}
        await self.send(json.dumps(event))

    async def staffing_changed(self, event):
        # {"type": "staffing.changed", "resource": "preferences", "key": "NUR-001", "op": "update", ...}
        await self.send(json.dumps(event))
