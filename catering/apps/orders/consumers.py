import json

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from apps.core.permissions import get_user_role

from .realtime import ORDERS_GROUP


class OrderUpdatesConsumer(AsyncWebsocketConsumer):
    """Live order updates for the admin inbox (staff only)."""

    async def connect(self):
        user = self.scope.get("user")
        role = await self.get_role(user)
        if role is None:
            await self.close()
            return

        await self.channel_layer.group_add(ORDERS_GROUP, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(ORDERS_GROUP, self.channel_name)

    async def receive(self, text_data):
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            return

        if data.get("type") == "ping":
            await self.send(text_data=json.dumps({"type": "pong"}))

    async def order_update(self, event):
        await self.send(text_data=json.dumps({"type": "order_update", "data": event["data"]}))

    @database_sync_to_async
    def get_role(self, user):
        return get_user_role(user)
