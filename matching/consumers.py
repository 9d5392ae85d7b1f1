from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .conversations import conversations
from .events import conversation_group, profile_group
from .exceptions import MatchingError
from .safety import gate


def authorize_subscriber(match_id, user_id):
    """Return the match if user_id may follow its conversation, else None."""
    try:
        return conversations.check_subscriber(match_id, user_id)
    except MatchingError:
        return None


class ConversationConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        user = self.scope.get('user')
        if user is None or user.is_anonymous:
            await self.close()
            return

        match_id = self.scope['url_route']['kwargs']['match_id']
        match = await database_sync_to_async(authorize_subscriber)(match_id, user.id)
        if match is None:
            await self.close()
            return

        self.user_id = user.id
        self.pair = match.user_ids
        self.group_name = conversation_group(match.pk)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, code):
        group_name = getattr(self, 'group_name', None)
        if group_name:
            await self.channel_layer.group_discard(group_name, self.channel_name)

    async def conversation_event(self, event):
        blocked = await database_sync_to_async(gate.is_blocked_between)(*self.pair)
        if blocked:
            await self.close()
            return
        await self.send_json(event.get('data', {}))


class NotificationConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        user = self.scope.get('user')
        if user is None or user.is_anonymous:
            await self.close()
            return
        self.group_name = profile_group(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, code):
        group_name = getattr(self, 'group_name', None)
        if group_name:
            await self.channel_layer.group_discard(group_name, self.channel_name)

    async def notification_event(self, event):
        await self.send_json(event.get('data', {}))
